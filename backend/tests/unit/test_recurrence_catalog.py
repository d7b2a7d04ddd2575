"""
Unit tests for the recurrence catalog.
"""

import pytest

from core.constants import WELL_GUIDE_RECURRENCE_MONTHS, WELL_GUIDE_SEED_DATA
from services.recurrence_catalog import RecurrenceCatalog, get_recurrence_catalog
from services.well_guide_errors import UnknownGuide


class TestRecurrenceCatalog:
    """Test cases for RecurrenceCatalog."""

    def test_lookup_returns_months(self):
        catalog = RecurrenceCatalog({1: 12, 2: 6})

        assert catalog.recurrence_months(1) == 12
        assert catalog.recurrence_months(2) == 6

    @pytest.mark.parametrize("guide_id", [0, 3, -1, None, "1"])
    def test_unknown_guide_raises(self, guide_id):
        catalog = RecurrenceCatalog({1: 12, 2: 6})

        with pytest.raises(UnknownGuide) as exc_info:
            catalog.recurrence_months(guide_id)

        assert exc_info.value.guide_id == guide_id

    def test_unknown_guide_is_a_value_error(self):
        with pytest.raises(ValueError):
            RecurrenceCatalog({}).recurrence_months(1)

    @pytest.mark.parametrize("months", [0, -6, 1.5, True])
    def test_rejects_non_positive_or_non_integer_periods(self, months):
        with pytest.raises(ValueError):
            RecurrenceCatalog({1: months})

    def test_contains_and_guide_ids(self):
        catalog = RecurrenceCatalog({5: 36, 1: 12})

        assert 5 in catalog
        assert 2 not in catalog
        assert [] not in catalog
        assert list(catalog.guide_ids()) == [1, 5]

    def test_catalog_is_not_affected_by_source_mutation(self):
        source = {1: 12}
        catalog = RecurrenceCatalog(source)

        source[1] = 1
        source[2] = 6

        assert catalog.recurrence_months(1) == 12
        assert 2 not in catalog


class TestDefaultCatalog:
    """Test the catalog built from application constants."""

    def test_default_catalog_matches_constants(self):
        catalog = get_recurrence_catalog()

        for guide_id, months in WELL_GUIDE_RECURRENCE_MONTHS.items():
            assert catalog.recurrence_months(guide_id) == months

    def test_every_seeded_guide_has_a_recurrence_period(self):
        catalog = get_recurrence_catalog()

        for entry in WELL_GUIDE_SEED_DATA:
            months = catalog.recurrence_months(entry["id"])
            assert isinstance(months, int) and months > 0

    def test_default_catalog_is_shared(self):
        assert get_recurrence_catalog() is get_recurrence_catalog()
