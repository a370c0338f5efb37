"""Tests for dashboard analytics."""

import datetime as dt
from decimal import Decimal

import pytest

from budget_tracker.aggregator import PeriodBucket
from budget_tracker.analytics import (
    daily_net_timeline,
    filter_by_range,
    largest_expense,
    spending_by_category,
    summarize_totals,
    transactions_in_month,
)
from budget_tracker.data_loader import validate_records


@pytest.fixture
def txns(sample_records):
    valid, _ = validate_records(sample_records)
    return valid


class TestAnalytics:

    def test_totals(self, txns):
        assert summarize_totals(txns) == PeriodBucket(
            Decimal("1100.25"), Decimal("265.19"), Decimal("835.06")
        )

    def test_totals_empty(self):
        assert summarize_totals([]) == PeriodBucket()

    def test_spending_by_category_sorted_desc(self, txns):
        assert spending_by_category(txns) == {
            "Rent": Decimal("200"),
            "Groceries": Decimal("65.09"),
            "Fees": Decimal("0.1"),
        }
        assert list(spending_by_category(txns)) == ["Rent", "Groceries", "Fees"]

    def test_uncategorized_expense_goes_to_other(self, txns):
        extra, _ = validate_records([{"date": "2024-03-02", "type": "expense", "amount": 1}])
        assert spending_by_category(extra) == {"Other": Decimal("1")}

    def test_largest_expense(self, txns):
        assert largest_expense(txns).id == "a4"
        assert largest_expense([t for t in txns if t.type.value == "income"]) is None

    def test_filter_by_range_inclusive(self, txns):
        picked = filter_by_range(txns, dt.date(2024, 2, 29), dt.date(2024, 3, 5))
        assert [t.id for t in picked] == ["a1", "a2", "a3", "a5"]

    def test_filter_by_range_open_end(self, txns):
        assert [t.id for t in filter_by_range(txns, start=dt.date(2024, 3, 6))] == ["a4"]

    def test_transactions_in_month(self, txns):
        assert [t.id for t in transactions_in_month(txns, 2024, 2)] == ["a5"]


class TestTimeline:

    def test_zero_filled(self, txns):
        timeline = daily_net_timeline(txns, dt.date(2024, 2, 29), dt.date(2024, 3, 2))
        assert timeline == [
            ("2024-02-29", Decimal("100.25")),
            ("2024-03-01", Decimal("1000")),
            ("2024-03-02", Decimal("0")),
        ]

    def test_single_day(self, txns):
        assert daily_net_timeline(txns, dt.date(2024, 3, 5), dt.date(2024, 3, 5)) == [
            ("2024-03-05", Decimal("-45.20")),
        ]

    def test_reversed_range(self, txns):
        with pytest.raises(ValueError, match="after end"):
            daily_net_timeline(txns, dt.date(2024, 3, 2), dt.date(2024, 3, 1))
