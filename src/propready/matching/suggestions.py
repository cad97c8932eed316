"""
Generador de propiedades sugeridas.

Cuando todavía no hay inventario publicado, el dashboard muestra
puntos de precio sintéticos alrededor del monto pre-calificado. A mayor
score del comprador, más angosta la ventana alrededor del monto.
"""

import math
import random
from typing import Optional, Protocol

import structlog

from propready.config import (
    SUGGESTION_LOCATIONS,
    SUGGESTION_PROPERTY_TYPES,
    Settings,
    get_settings,
)
from propready.matching.affordability import estimate_monthly_repayment
from propready.matching.results import ScoredListing
from propready.matching.scoring import (
    ScoreCalculator,
    clamp_qualification_score,
    round_half_up,
)
from propready.models import BuyerProfile, Listing

logger = structlog.get_logger()


class RandomSource(Protocol):
    """Fuente de aleatoriedad inyectable (random.Random cumple)."""

    def random(self) -> float: ...


class SuggestionGenerator:
    """
    Genera sugerencias sintéticas con jitter reproducible.

    La ventana de precios va de 75-85% a 105-115% del monto
    pre-calificado según el score. Cada punto cae en su tramo de la
    ventana con un jitter de ±1/4 del tramo.
    """

    WINDOW_LOW = 0.75
    WINDOW_HIGH = 1.15
    SCORE_NARROWING = 0.10
    JITTER_FRACTION = 0.25

    # Score mostrado en sugerencias: piso 60, techo 100
    MIN_DISPLAY_SCORE = 60
    MAX_DISPLAY_SCORE = 100

    def __init__(
        self,
        calculator: Optional[ScoreCalculator] = None,
        rng: Optional[RandomSource] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.calculator = calculator or ScoreCalculator()
        self.rng = rng or random.Random()

    def generate(
        self,
        profile: Optional[BuyerProfile],
        count: Optional[int] = None,
    ) -> list[ScoredListing]:
        """
        Genera propiedades sugeridas para un perfil.

        Args:
            profile: Perfil de pre-calificación
            count: Cantidad de sugerencias (default desde settings)

        Returns:
            Lista de ScoredListing ordenada por score descendente.
            Vacía si el perfil no tiene pre-calificación.
        """
        if profile is None or not profile.has_qualification:
            return []

        if count is None:
            count = self.settings.suggestion_count
        if count <= 0:
            return []

        tolerance = self.settings.dashboard_tolerance
        suggestions = []

        for index, price in enumerate(self.price_points(profile, count)):
            listing = self._build_listing(index, price)
            result = self.calculator.score(profile, listing, tolerance)
            match_score = min(
                self.MAX_DISPLAY_SCORE,
                max(self.MIN_DISPLAY_SCORE, result.match_score),
            )
            suggestions.append(
                ScoredListing(
                    listing=listing,
                    match_score=match_score,
                    is_strong_match=result.is_strong_match,
                )
            )

        suggestions.sort(key=lambda s: s.match_score, reverse=True)

        logger.info(
            "Sugerencias generadas",
            count=len(suggestions),
            qualified_amount=profile.qualified_amount,
        )
        return suggestions

    def price_window(self, profile: BuyerProfile) -> tuple[float, float]:
        """Ventana (mínimo, máximo) de precios según el score del comprador."""
        confidence = clamp_qualification_score(profile.qualification_score) / 100
        amount = profile.qualified_amount

        min_price = amount * (self.WINDOW_LOW + confidence * self.SCORE_NARROWING)
        max_price = amount * (self.WINDOW_HIGH - confidence * self.SCORE_NARROWING)
        return min_price, max_price

    def price_points(self, profile: BuyerProfile, count: int) -> list[int]:
        """Un punto de precio por tramo de la ventana, con jitter."""
        min_price, max_price = self.price_window(profile)
        if not (math.isfinite(min_price) and math.isfinite(max_price)):
            logger.warning(
                "Ventana de precios no representable, sin sugerencias",
                qualified_amount=profile.qualified_amount,
            )
            return []

        step = (max_price - min_price) / count

        points = []
        for i in range(count):
            base = min_price + step * i
            jitter = self.rng.random() * step * 2 * self.JITTER_FRACTION - step * self.JITTER_FRACTION
            points.append(round_half_up(base + jitter))
        return points

    def _build_listing(self, index: int, price: int) -> Listing:
        property_type = SUGGESTION_PROPERTY_TYPES[index % len(SUGGESTION_PROPERTY_TYPES)]
        location = SUGGESTION_LOCATIONS[index % len(SUGGESTION_LOCATIONS)]

        return Listing(
            id=f"suggested-{index + 1}",
            price=price,
            category=property_type,
            title=property_type,
            address=location,
            attributes={
                "is_synthetic": True,
                "estimated_monthly_repayment": estimate_monthly_repayment(
                    price,
                    annual_rate=self.settings.repayment_annual_rate,
                    years=self.settings.repayment_years,
                ),
            },
        )
