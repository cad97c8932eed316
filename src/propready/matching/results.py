"""
Resultados del motor de matching listos para presentación.
"""

from dataclasses import dataclass, field

from propready.models import Listing


@dataclass
class ScoredListing:
    """Listing con su score de match."""

    listing: Listing
    match_score: int  # 0 a 100
    is_strong_match: bool = False

    @property
    def listing_id(self) -> str:
        return self.listing.id

    def to_dict(self) -> dict:
        data = self.listing.to_dict()
        data["match_score"] = self.match_score
        data["is_strong_match"] = self.is_strong_match
        return data


@dataclass
class RankedResult:
    """
    Listings particionados y ordenados.

    strong_matches siempre se presenta antes que others, aunque algún
    listing de others tenga un score numérico mayor.
    """

    strong_matches: list[ScoredListing] = field(default_factory=list)
    others: list[ScoredListing] = field(default_factory=list)

    @property
    def combined(self) -> list[ScoredListing]:
        """Orden de presentación: matches fuertes primero."""
        return [*self.strong_matches, *self.others]

    @property
    def has_strong_matches(self) -> bool:
        return bool(self.strong_matches)

    def __len__(self) -> int:
        return len(self.strong_matches) + len(self.others)

    def to_dict(self) -> dict:
        return {
            "strong_matches": [m.to_dict() for m in self.strong_matches],
            "others": [m.to_dict() for m in self.others],
        }
