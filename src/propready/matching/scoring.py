"""
Cálculo del score de match comprador-propiedad.

Suma ponderada de dos términos:
- Cercanía de precio (60%): decae linealmente hasta 0 cuando la diferencia
  con el monto pre-calificado alcanza la tolerancia K
- Score del comprador (40%)

Los pesos y ventanas forman parte del contrato observable: cambiar
cualquiera de ellos cambia los resultados que ve el usuario.
"""

import math
from dataclasses import dataclass
from typing import Optional

import structlog

from propready.config import SEARCH_TOLERANCE
from propready.models import BuyerProfile, Listing

logger = structlog.get_logger()


def round_half_up(value: float) -> int:
    """Redondeo .5 hacia arriba (no bancario)."""
    return int(math.floor(value + 0.5))


def clamp_qualification_score(value: float) -> float:
    """Score del comprador acotado a 0-100 (no finito = 0)."""
    if not math.isfinite(value):
        return 0.0
    return min(100.0, max(0.0, value))


@dataclass(frozen=True)
class MatchScore:
    """Score de un listing para un perfil."""

    match_score: int  # 0 a 100
    is_strong_match: bool


NO_MATCH = MatchScore(match_score=0, is_strong_match=False)


class ScoreCalculator:
    """
    Función de score pura y total.

    Nunca lanza excepciones: perfiles sin calificación, precios
    faltantes o no positivos y tolerancias inválidas degradan a
    score 0 / no match fuerte.
    """

    # Pesos
    PRICE_WEIGHT = 0.60
    SCORE_WEIGHT = 0.40

    # Match fuerte: siempre ventana del 30%, sin importar K
    STRONG_MATCH_WINDOW = 0.30
    STRONG_MATCH_MIN_SCORE = 60

    MIN_SCORE = 0
    MAX_SCORE = 100

    def score(
        self,
        profile: Optional[BuyerProfile],
        listing: Listing,
        tolerance: float = SEARCH_TOLERANCE,
    ) -> MatchScore:
        """
        Calcula el score de un listing para un perfil.

        Args:
            profile: Perfil de pre-calificación (None = sin calificación)
            listing: Propiedad a evaluar
            tolerance: Tolerancia K como fracción del monto pre-calificado

        Returns:
            MatchScore con score entero 0-100 y flag de match fuerte
        """
        if profile is None or not profile.has_qualification:
            return NO_MATCH

        if not listing.is_priced:
            logger.debug(
                "Listing sin precio válido, score 0",
                listing_id=listing.id,
                price=listing.price,
            )
            return NO_MATCH

        return self.score_price(profile, listing.price, tolerance)

    def score_price(
        self,
        profile: BuyerProfile,
        price: float,
        tolerance: float = SEARCH_TOLERANCE,
    ) -> MatchScore:
        """Calcula el score para un precio puntual."""
        qualified_amount = profile.qualified_amount
        if qualified_amount <= 0 or price is None or price <= 0:
            return NO_MATCH

        k = self._normalize_tolerance(tolerance)

        price_difference = abs(price - qualified_amount)
        max_difference = qualified_amount * k

        # Montos o tolerancias extremos pueden dar 0 o inf por underflow/overflow
        if max_difference > 0 and math.isfinite(max_difference):
            proximity = max(0.0, 100 - (price_difference / max_difference) * 100)
        else:
            proximity = 0.0
        price_component = proximity * self.PRICE_WEIGHT
        score_component = clamp_qualification_score(profile.qualification_score) * self.SCORE_WEIGHT

        match_score = round_half_up(price_component + score_component)
        match_score = min(self.MAX_SCORE, max(self.MIN_SCORE, match_score))

        is_strong_match = (
            price_difference <= qualified_amount * self.STRONG_MATCH_WINDOW
            and match_score >= self.STRONG_MATCH_MIN_SCORE
        )

        return MatchScore(match_score=match_score, is_strong_match=is_strong_match)

    def _normalize_tolerance(self, tolerance: Optional[float]) -> float:
        try:
            k = float(tolerance)
        except (TypeError, ValueError):
            return SEARCH_TOLERANCE
        if not math.isfinite(k) or k <= 0:
            return SEARCH_TOLERANCE
        return k

