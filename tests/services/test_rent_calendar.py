"""
Unit tests for month handling and the tenant status rule. Pure functions, no DB.
"""
from datetime import date

import pytest

from app.services.leases import CURRENT, FUTURE, PAST, status_sort_key, tenant_status
from app.services.rent_calendar import MONTHS, month_index, normalize_month


# ── normalize_month ──────────────────────────────────────────────────────────

class TestNormalizeMonth:
    def test_abbreviation_any_case(self):
        assert normalize_month("jan") == "Jan"
        assert normalize_month("JAN") == "Jan"
        assert normalize_month(" Feb ") == "Feb"

    def test_full_name(self):
        assert normalize_month("September") == "Sep"
        assert normalize_month("december") == "Dec"

    def test_sept(self):
        assert normalize_month("Sept") == "Sep"

    def test_numbers(self):
        assert normalize_month(1) == "Jan"
        assert normalize_month(12) == "Dec"
        assert normalize_month("07") == "Jul"

    def test_out_of_range_number(self):
        with pytest.raises(ValueError):
            normalize_month(13)
        with pytest.raises(ValueError):
            normalize_month(0)

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="unknown month"):
            normalize_month("Smarch")


class TestMonthIndex:
    def test_calendar_order(self):
        shuffled = ["Dec", "Jan", "Jul", "Feb"]
        assert sorted(shuffled, key=month_index) == ["Jan", "Feb", "Jul", "Dec"]

    def test_every_month_has_a_slot(self):
        assert [month_index(m) for m in MONTHS] == list(range(12))

    def test_unknown_sorts_last(self):
        assert month_index("???") == 12


# ── tenant_status ────────────────────────────────────────────────────────────

TODAY = date(2024, 6, 15)


class TestTenantStatus:
    def test_current_inside_lease(self):
        assert tenant_status(date(2024, 1, 1), date(2024, 12, 31), TODAY) == CURRENT

    def test_boundaries_are_current(self):
        assert tenant_status(TODAY, date(2024, 12, 31), TODAY) == CURRENT
        assert tenant_status(date(2024, 1, 1), TODAY, TODAY) == CURRENT

    def test_future(self):
        assert tenant_status(date(2024, 7, 1), date(2025, 6, 30), TODAY) == FUTURE

    def test_past(self):
        assert tenant_status(date(2023, 1, 1), date(2023, 12, 31), TODAY) == PAST

    def test_missing_date_is_none(self):
        assert tenant_status(None, date(2024, 12, 31), TODAY) is None
        assert tenant_status(date(2024, 1, 1), None, TODAY) is None

    def test_sort_order(self):
        statuses = [None, PAST, CURRENT, FUTURE]
        assert sorted(statuses, key=status_sort_key) == [CURRENT, FUTURE, PAST, None]
