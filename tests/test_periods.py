"""Tests for period label functions and the PeriodLabel value type."""

import datetime as dt

import pytest

from budget_tracker.periods import (
    Granularity,
    PeriodLabel,
    day_label,
    month_label,
    week_label,
    week_start,
)


class TestLabelFunctions:

    def test_day_label_pads_month_and_day(self):
        assert day_label(dt.date(2024, 3, 1)) == "2024-03-01"

    def test_day_label_ignores_time_of_day(self):
        assert day_label(dt.datetime(2024, 3, 1, 23, 59, 59)) == "2024-03-01"

    def test_month_label_drops_day(self):
        assert month_label(dt.date(2024, 11, 30)) == "2024-11"

    @pytest.mark.parametrize(
        "value, expected",
        [
            (dt.date(2024, 3, 3), "2024-03-03"),  # Sunday
            (dt.date(2024, 3, 5), "2024-03-03"),  # Tuesday
            (dt.date(2024, 3, 9), "2024-03-03"),  # Saturday
            (dt.date(2024, 3, 1), "2024-02-25"),  # previous month
            (dt.date(2024, 1, 2), "2023-12-31"),  # previous year
        ],
    )
    def test_week_label_is_preceding_sunday(self, value, expected):
        assert week_label(value) == expected

    def test_week_start_always_sunday(self):
        day = dt.date(2023, 12, 20)
        for _ in range(40):
            start = week_start(day)
            assert start.weekday() == 6
            assert 0 <= (day - start).days < 7
            day += dt.timedelta(days=1)


class TestGranularity:

    def test_parse_defaults_to_monthly(self):
        assert Granularity.parse(None) is Granularity.MONTHLY

    def test_parse_is_case_insensitive(self):
        assert Granularity.parse(" Weekly ") is Granularity.WEEKLY

    def test_parse_rejects_unknown(self):
        with pytest.raises(ValueError, match="yearly"):
            Granularity.parse("yearly")


class TestPeriodLabel:

    def test_behaves_like_string(self):
        label = PeriodLabel("2024-03", "monthly")
        assert label == "2024-03"
        assert hash(label) == hash("2024-03")
        assert label.granularity is Granularity.MONTHLY

    def test_for_date(self):
        label = PeriodLabel.for_date(dt.date(2024, 3, 5), Granularity.WEEKLY)
        assert label == "2024-03-03"
        assert label.start == dt.date(2024, 3, 3)

    def test_month_start(self):
        assert PeriodLabel("2024-02", "monthly").start == dt.date(2024, 2, 1)

    def test_rejects_day_component_on_monthly(self):
        with pytest.raises(ValueError):
            PeriodLabel("2024-03-01", "monthly")

    def test_rejects_impossible_date(self):
        with pytest.raises(ValueError):
            PeriodLabel("2023-02-29", "daily")

    def test_rejects_non_sunday_weekly(self):
        with pytest.raises(ValueError, match="not a Sunday"):
            PeriodLabel("2024-03-05", "weekly")

    def test_repr(self):
        assert repr(PeriodLabel("2024-03", "monthly")) == "PeriodLabel('2024-03', 'monthly')"
