"""
Configuración de pytest y fixtures compartidos.
"""

import random

import pytest

from propready.config import Settings
from propready.matching import MatchingEngine, ScoreCalculator, SuggestionGenerator
from propready.models import BuyerProfile, Listing


class FixedRandom:
    """Fuente de aleatoriedad que siempre devuelve el mismo valor."""

    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value


@pytest.fixture
def settings():
    """Settings con los valores por defecto."""
    return Settings()


@pytest.fixture
def calculator():
    return ScoreCalculator()


@pytest.fixture
def profile():
    """Comprador pre-calificado por 1.000.000 con score 80."""
    return BuyerProfile(qualified_amount=1_000_000, qualification_score=80)


@pytest.fixture
def unqualified_profile():
    return BuyerProfile(qualified_amount=0, qualification_score=75)


@pytest.fixture
def engine(settings):
    """Motor con jitter de sugerencias reproducible."""
    generator = SuggestionGenerator(rng=random.Random(1234), settings=settings)
    return MatchingEngine(suggestion_generator=generator, settings=settings)


@pytest.fixture
def create_listing():
    """Factory fixture para crear listings."""
    def _create(
        listing_id: str,
        price=1_000_000,
        category: str = "House",
        title: str = "Family home",
        address: str = "Sandton, Johannesburg",
        **attributes,
    ) -> Listing:
        return Listing(
            id=listing_id,
            price=price,
            category=category,
            title=title,
            address=address,
            attributes=attributes,
        )
    return _create


@pytest.fixture
def fixed_random():
    return FixedRandom
