"""
Tests del MatchingEngine.rank.

Verifican:
- Partición matches fuertes / otros y su orden de presentación
- Orden estable por score dentro de cada partición
- Determinismo entre llamadas
- Filtros de categoría, texto libre y precio máximo
- Política de fallo parcial ante registros corruptos
"""

import pytest

from propready.config import DASHBOARD_TOLERANCE, SEARCH_TOLERANCE
from propready.matching import RankedResult
from propready.models import BuyerProfile, SearchFilters


def _ids(scored):
    return [m.listing_id for m in scored]


@pytest.fixture
def inventory(create_listing):
    """Inventario mixto alrededor de 1.000.000."""
    return [
        create_listing("far", price=2_500_000, category="House", title="Mansion"),
        create_listing("near-high", price=1_100_000, category="Apartment", title="Loft"),
        create_listing("exact", price=1_000_000, category="Townhouse", title="Corner unit"),
        create_listing("cheap", price=400_000, category="Vacant Land", title="Plot"),
        create_listing("near-low", price=850_000, category="House", title="Garden cottage"),
        create_listing("office", price=1_500_000, category="Commercial", title="Office block"),
    ]


# =============================================================================
# Test: Sin pre-calificación
# =============================================================================

class TestZeroQualification:
    """Sin monto pre-calificado todo va a 'others' con score 0."""

    def test_no_strong_matches_and_zero_scores(self, engine, unqualified_profile, inventory):
        result = engine.rank(unqualified_profile, inventory)

        assert result.strong_matches == []
        assert result.has_strong_matches is False
        assert len(result.others) == len(inventory)
        assert all(m.match_score == 0 for m in result.others)

    def test_missing_profile_behaves_as_zero(self, engine, inventory):
        result = engine.rank(None, inventory)

        assert result.strong_matches == []
        assert all(m.match_score == 0 for m in result.others)

    def test_zero_scores_keep_input_order(self, engine, unqualified_profile, inventory):
        result = engine.rank(unqualified_profile, inventory)

        assert _ids(result.others) == [listing.id for listing in inventory]


# =============================================================================
# Test: Inventario vacío
# =============================================================================

class TestEmptyInventory:

    def test_empty_list_returns_empty_result(self, engine, profile):
        result = engine.rank(profile, [])

        assert result == RankedResult(strong_matches=[], others=[])
        assert len(result) == 0

    def test_none_listings_returns_empty_result(self, engine, profile):
        result = engine.rank(profile, None)

        assert len(result) == 0


# =============================================================================
# Test: Partición y orden
# =============================================================================

class TestPartitionAndOrdering:

    def test_partitions_by_strong_match_flag(self, engine, profile, inventory):
        result = engine.rank(profile, inventory)

        assert set(_ids(result.strong_matches)) == {"exact", "near-high", "near-low"}
        assert set(_ids(result.others)) == {"far", "cheap", "office"}
        assert all(m.is_strong_match for m in result.strong_matches)
        assert not any(m.is_strong_match for m in result.others)

    def test_each_partition_sorted_descending(self, engine, profile, inventory):
        result = engine.rank(profile, inventory)

        for partition in (result.strong_matches, result.others):
            scores = [m.match_score for m in partition]
            assert scores == sorted(scores, reverse=True)

    def test_expected_strong_match_order(self, engine, profile, inventory):
        """exact (92) > near-high (72) > near-low (62)."""
        result = engine.rank(profile, inventory)

        assert _ids(result.strong_matches) == ["exact", "near-high", "near-low"]
        assert [m.match_score for m in result.strong_matches] == [92, 72, 62]

    def test_combined_puts_strong_matches_first(self, engine, profile, inventory):
        result = engine.rank(profile, inventory)

        combined = result.combined
        strong_count = len(result.strong_matches)
        assert all(m.is_strong_match for m in combined[:strong_count])
        assert not any(m.is_strong_match for m in combined[strong_count:])
        assert len(combined) == len(inventory)

    def test_strong_group_precedes_others_regardless_of_input_order(self, engine, create_listing):
        """Con tolerancia amplia, 81 puntos fuera de la ventana del 30% no es match fuerte."""
        profile = BuyerProfile(qualified_amount=1_000_000, qualification_score=100)
        listings = [
            create_listing("other", price=1_310_000),
            create_listing("strong", price=1_300_000),
        ]

        result = engine.rank(profile, listings, tolerance=1.0)

        assert _ids(result.combined) == ["strong", "other"]
        assert result.strong_matches[0].match_score == 82
        assert result.others[0].match_score == 81

    def test_strong_match_invariant_holds(self, engine, profile, inventory):
        for match in engine.rank(profile, inventory, tolerance=DASHBOARD_TOLERANCE).combined:
            if match.is_strong_match:
                assert match.match_score >= 60
                assert abs(match.listing.price - profile.qualified_amount) <= profile.qualified_amount * 0.30


# =============================================================================
# Test: Estabilidad y determinismo
# =============================================================================

class TestStabilityAndDeterminism:

    def test_ties_keep_input_order(self, engine, profile, create_listing):
        listings = [
            create_listing("first", price=1_050_000),
            create_listing("second", price=950_000),
            create_listing("third", price=1_050_000),
        ]

        result = engine.rank(profile, listings)

        assert _ids(result.strong_matches) == ["first", "second", "third"]

    def test_ties_follow_reversed_input(self, engine, profile, create_listing):
        listings = [
            create_listing("third", price=1_050_000),
            create_listing("second", price=950_000),
            create_listing("first", price=1_050_000),
        ]

        result = engine.rank(profile, listings)

        assert _ids(result.strong_matches) == ["third", "second", "first"]

    def test_ties_in_others_keep_input_order(self, engine, profile, create_listing):
        listings = [
            create_listing("b", price=3_000_000),
            create_listing("a", price=5_000_000),
            create_listing("c", price=None),
            create_listing("d", price=4_000_000),
        ]

        result = engine.rank(profile, listings)

        # Los tres fuera de ventana puntúan 32; el sin precio, 0
        assert _ids(result.others) == ["b", "a", "d", "c"]

    def test_repeated_calls_are_identical(self, engine, profile, inventory):
        first = engine.rank(profile, inventory, filters={"free_text": "o"})
        second = engine.rank(profile, inventory, filters={"free_text": "o"})

        assert first.to_dict() == second.to_dict()

    def test_input_is_not_modified(self, engine, profile, inventory):
        snapshot = list(inventory)

        engine.rank(profile, inventory)

        assert inventory == snapshot


# =============================================================================
# Test: Tolerancia
# =============================================================================

class TestTolerance:

    def test_default_tolerance_is_search(self, engine, profile, inventory):
        default = engine.rank(profile, inventory)
        explicit = engine.rank(profile, inventory, tolerance=SEARCH_TOLERANCE)

        assert default.to_dict() == explicit.to_dict()

    def test_dashboard_tolerance_widens_strong_matches(self, engine, profile, create_listing):
        listings = [create_listing("x", price=1_200_000)]

        search = engine.rank(profile, listings, tolerance=SEARCH_TOLERANCE)
        dashboard = engine.rank(profile, listings, tolerance=DASHBOARD_TOLERANCE)

        assert _ids(search.others) == ["x"]
        assert search.others[0].match_score == 52
        assert _ids(dashboard.strong_matches) == ["x"]
        assert dashboard.strong_matches[0].match_score == 62

    def test_underflowing_tolerance_still_ranks(self, engine, inventory):
        profile = BuyerProfile(qualified_amount=1e-5, qualification_score=50)

        result = engine.rank(profile, inventory, tolerance=1e-320)

        assert len(result) == len(inventory)
        assert result.strong_matches == []
        assert all(m.match_score == 20 for m in result.others)


# =============================================================================
# Test: Filtros
# =============================================================================

class TestFilters:

    def test_houses_category_matches_substring(self, engine, profile, inventory):
        result = engine.rank(profile, inventory, filters=SearchFilters(category="houses"))

        # 'Townhouse' contiene 'house'
        assert set(_ids(result.combined)) == {"far", "exact", "near-low"}

    def test_apartments_category(self, engine, profile, inventory):
        result = engine.rank(profile, inventory, filters={"category": "apartments"})

        assert _ids(result.combined) == ["near-high"]

    def test_vacant_land_matches_either_keyword(self, engine, profile, create_listing):
        listings = [
            create_listing("land", category="Land"),
            create_listing("vacant", category="Vacant stand"),
            create_listing("house", category="House"),
        ]

        result = engine.rank(profile, listings, filters={"category": "vacant-land"})

        assert set(_ids(result.combined)) == {"land", "vacant"}

    def test_commercial_category(self, engine, profile, inventory):
        result = engine.rank(profile, inventory, filters={"category": "Commercial"})

        assert _ids(result.combined) == ["office"]

    def test_under_1m_is_a_price_ceiling(self, engine, profile, create_listing):
        listings = [
            create_listing("below", price=999_999),
            create_listing("at", price=1_000_000),
            create_listing("unpriced", price=None),
        ]

        result = engine.rank(profile, listings, filters={"category": "under-1m"})

        assert _ids(result.combined) == ["below"]

    def test_all_category_keeps_everything(self, engine, profile, inventory):
        result = engine.rank(profile, inventory, filters={"category": "all"})

        assert len(result) == len(inventory)

    def test_free_form_category_is_substring(self, engine, profile, create_listing):
        listings = [
            create_listing("duplex", category="Duplex Apartment"),
            create_listing("house", category="House"),
        ]

        result = engine.rank(profile, listings, filters={"category": "DUPLEX"})

        assert _ids(result.combined) == ["duplex"]

    def test_free_text_matches_title_address_or_category(self, engine, profile, create_listing):
        listings = [
            create_listing("by-title", title="Sunny LOFT", address="Rosebank", category="Apartment"),
            create_listing("by-address", title="Home", address="Loftus Road", category="House"),
            create_listing("by-category", title="Home", address="Fourways", category="Loft"),
            create_listing("none", title="Home", address="Fourways", category="House"),
        ]

        result = engine.rank(profile, listings, filters={"freeText": "  loft "})

        assert set(_ids(result.combined)) == {"by-title", "by-address", "by-category"}

    def test_blank_free_text_passes_everything(self, engine, profile, inventory):
        result = engine.rank(profile, inventory, filters={"free_text": "   "})

        assert len(result) == len(inventory)

    def test_max_price_is_inclusive(self, engine, profile, create_listing):
        listings = [
            create_listing("at", price=1_000_000),
            create_listing("above", price=1_000_001),
            create_listing("unpriced", price="n/a"),
        ]

        result = engine.rank(profile, listings, filters={"maxPrice": 1_000_000})

        assert _ids(result.combined) == ["at"]

    def test_filters_combine(self, engine, profile, inventory):
        result = engine.rank(
            profile,
            inventory,
            filters={"category": "houses", "free_text": "cottage", "max_price": 900_000},
        )

        assert _ids(result.combined) == ["near-low"]


# =============================================================================
# Test: Registros corruptos
# =============================================================================

class TestMalformedRecords:
    """Un registro corrupto nunca aborta el ranking del resto."""

    def test_raw_records_are_accepted(self, engine, profile):
        records = [
            {"id": 1, "price": "R 1,000,000", "type": "House", "title": "Home", "bedrooms": 3},
            {"id": "2", "price": 1_450_000, "category": "Apartment"},
        ]

        result = engine.rank(profile, records)

        assert _ids(result.strong_matches) == ["1"]
        assert result.strong_matches[0].match_score == 92
        assert result.strong_matches[0].listing.attributes == {"bedrooms": 3}
        assert _ids(result.others) == ["2"]

    def test_bad_price_scores_zero_instead_of_failing(self, engine, profile):
        records = [
            {"id": "bad", "price": "call agent"},
            {"id": "missing"},
            {"id": "good", "price": 1_000_000},
        ]

        result = engine.rank(profile, records)

        assert _ids(result.strong_matches) == ["good"]
        assert _ids(result.others) == ["bad", "missing"]
        assert all(m.match_score == 0 for m in result.others)

    def test_unrecoverable_records_are_skipped(self, engine, profile, create_listing):
        listings = [
            {"price": 1_000_000, "title": "No id"},
            None,
            42,
            create_listing("ok"),
        ]

        result = engine.rank(profile, listings)

        assert _ids(result.combined) == ["ok"]

    def test_generator_input(self, engine, profile, create_listing):
        result = engine.rank(profile, (create_listing(str(i)) for i in range(3)))

        assert _ids(result.strong_matches) == ["0", "1", "2"]


# =============================================================================
# Test: Salida para presentación
# =============================================================================

class TestPresentationOutput:

    def test_to_dict_shape(self, engine, profile, create_listing):
        listing = create_listing("a", bedrooms=2)

        data = engine.rank(profile, [listing]).to_dict()

        assert data["others"] == []
        assert data["strong_matches"] == [
            {
                "id": "a",
                "price": 1_000_000.0,
                "category": "House",
                "title": "Family home",
                "address": "Sandton, Johannesburg",
                "bedrooms": 2,
                "match_score": 92,
                "is_strong_match": True,
            }
        ]
