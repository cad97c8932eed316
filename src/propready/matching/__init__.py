"""
Motor de matching.

Calcula el score comprador-propiedad, particiona y ordena listings,
y genera sugerencias sintéticas cuando no hay inventario.
"""

from propready.config import DASHBOARD_TOLERANCE, SEARCH_TOLERANCE
from propready.matching.affordability import estimate_monthly_repayment
from propready.matching.engine import MatchingEngine
from propready.matching.results import RankedResult, ScoredListing
from propready.matching.scoring import MatchScore, ScoreCalculator
from propready.matching.suggestions import RandomSource, SuggestionGenerator

__all__ = [
    "MatchingEngine",
    "RankedResult",
    "ScoredListing",
    "MatchScore",
    "ScoreCalculator",
    "SuggestionGenerator",
    "RandomSource",
    "estimate_monthly_repayment",
    "SEARCH_TOLERANCE",
    "DASHBOARD_TOLERANCE",
]
