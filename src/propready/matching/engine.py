"""
Motor de matching entre compradores y propiedades.

Implementa:
- Filtros: categoría, texto libre y precio máximo
- Score: ScoreCalculator sobre cada listing filtrado
- Partición: matches fuertes primero, el resto después, cada grupo
  ordenado por score de forma estable
- Sugerencias sintéticas cuando no hay inventario
"""

from typing import Any, Iterable, Mapping, Optional, Union

import structlog
from pydantic import ValidationError

from propready.config import (
    ALL_CATEGORIES,
    CATEGORY_FILTERS,
    Settings,
    get_settings,
)
from propready.matching.results import RankedResult, ScoredListing
from propready.matching.scoring import ScoreCalculator
from propready.matching.suggestions import SuggestionGenerator
from propready.models import BuyerProfile, Listing, SearchFilters

logger = structlog.get_logger()

ListingInput = Union[Listing, Mapping[str, Any]]


class MatchingEngine:
    """
    Motor de matching sin estado compartido.

    Flujo de rank:
    1. Normalizar listings (acepta Listing o registros crudos)
    2. Aplicar filtros de categoría, texto y precio
    3. Calcular score con la tolerancia K del contexto
    4. Particionar en matches fuertes / otros
    5. Ordenar cada partición por score (estable)

    Un registro corrupto nunca aborta el ranking del resto.
    """

    def __init__(
        self,
        calculator: Optional[ScoreCalculator] = None,
        suggestion_generator: Optional[SuggestionGenerator] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.calculator = calculator or ScoreCalculator()
        self.suggestion_generator = suggestion_generator or SuggestionGenerator(
            calculator=self.calculator,
            settings=self.settings,
        )

    def rank(
        self,
        profile: Optional[BuyerProfile],
        listings: Iterable[ListingInput],
        filters: Optional[Union[SearchFilters, Mapping[str, Any]]] = None,
        tolerance: Optional[float] = None,
    ) -> RankedResult:
        """
        Rankea listings para un comprador.

        Args:
            profile: Perfil de pre-calificación (None = sin calificación)
            listings: Inventario, Listing o registros crudos
            filters: Filtros de búsqueda opcionales
            tolerance: Tolerancia K (default: la de búsqueda)

        Returns:
            RankedResult con strong_matches y others ordenados por score
        """
        profile = profile or BuyerProfile()
        filters = self._coerce_filters(filters)
        if tolerance is None:
            tolerance = self.settings.search_tolerance

        if not profile.has_qualification:
            logger.debug("Perfil sin pre-calificación, scoring deshabilitado")

        candidates = self._coerce_listings(listings)
        filtered = [listing for listing in candidates if self._passes_filters(listing, filters)]

        strong_matches: list[ScoredListing] = []
        others: list[ScoredListing] = []

        for listing in filtered:
            result = self.calculator.score(profile, listing, tolerance)
            scored = ScoredListing(
                listing=listing,
                match_score=result.match_score,
                is_strong_match=result.is_strong_match,
            )
            if scored.is_strong_match:
                strong_matches.append(scored)
            else:
                others.append(scored)

        # list.sort es estable también con reverse=True:
        # los empates conservan el orden de entrada
        strong_matches.sort(key=lambda m: m.match_score, reverse=True)
        others.sort(key=lambda m: m.match_score, reverse=True)

        logger.info(
            "Ranking completado",
            total=len(candidates),
            filtered=len(filtered),
            strong=len(strong_matches),
            others=len(others),
            tolerance=tolerance,
        )

        return RankedResult(strong_matches=strong_matches, others=others)

    def suggest(
        self,
        profile: Optional[BuyerProfile],
        count: Optional[int] = None,
    ) -> list[ScoredListing]:
        """
        Genera propiedades sugeridas sintéticas.

        Usado por el dashboard cuando todavía no hay listings publicados.
        """
        return self.suggestion_generator.generate(profile, count)

    def _coerce_filters(
        self, filters: Optional[Union[SearchFilters, Mapping[str, Any]]]
    ) -> SearchFilters:
        if filters is None:
            return SearchFilters()
        if isinstance(filters, SearchFilters):
            return filters
        return SearchFilters.model_validate(dict(filters))

    def _coerce_listings(self, listings: Iterable[ListingInput]) -> list[Listing]:
        """Convierte registros crudos a Listing, descartando los irrecuperables."""
        result = []
        for position, item in enumerate(listings or []):
            if isinstance(item, Listing):
                result.append(item)
                continue

            if not isinstance(item, Mapping):
                logger.warning(
                    "Registro de listing ignorado",
                    position=position,
                    type=type(item).__name__,
                )
                continue

            try:
                result.append(Listing.from_record(item))
            except ValidationError as e:
                logger.warning(
                    "Registro de listing inválido",
                    position=position,
                    listing_id=item.get("id"),
                    error=str(e),
                )
        return result

    def _passes_filters(self, listing: Listing, filters: SearchFilters) -> bool:
        if not self._matches_category(listing, filters.category):
            return False
        if not self._matches_text(listing, filters.free_text):
            return False
        if filters.max_price is not None:
            if not listing.is_priced or listing.price > filters.max_price:
                return False
        return True

    def _matches_category(self, listing: Listing, category: Optional[str]) -> bool:
        if not category or category == ALL_CATEGORIES:
            return True

        label = listing.category.lower()

        if category in CATEGORY_FILTERS:
            keywords = CATEGORY_FILTERS[category]
            if keywords is None:
                # Categoría numérica: techo de precio
                return listing.is_priced and listing.price < self.settings.price_ceiling_filter
            return any(keyword in label for keyword in keywords)

        return category in label

    def _matches_text(self, listing: Listing, query: Optional[str]) -> bool:
        if not query:
            return True
        return any(query in field.lower() for field in listing.searchable_text)
