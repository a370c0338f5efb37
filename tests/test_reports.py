"""Tests for report building and export."""

import io
import json
from decimal import Decimal

import pytest

from budget_tracker.aggregator import summarize_by_month
from budget_tracker.data_loader import ValidationError
from budget_tracker.reports import (
    build_report,
    export_summary_csv,
    fmt_amount,
    format_text_report,
    save_json,
    summary_to_dict,
)


class TestReports:

    def test_fmt_amount_two_places(self):
        assert fmt_amount(Decimal("0.1")) == "0.10"
        assert fmt_amount(Decimal("-50")) == "-50.00"
        assert fmt_amount(Decimal("2.005")) == "2.01"

    def test_summary_to_dict(self):
        summary = summarize_by_month([
            {"date": "2024-03-01", "type": "income", "amount": 1000},
            {"date": "2024-03-15", "type": "expense", "amount": 200},
        ])
        assert summary_to_dict(summary) == {
            "2024-03": {"income": "1000.00", "expense": "200.00", "net": "800.00"},
        }

    def test_build_report(self, sample_records):
        report = build_report(sample_records, "weekly")
        assert report["granularity"] == "weekly"
        assert report["totals"] == {"income": "1100.25", "expense": "265.19", "net": "835.06"}
        assert list(report["periods"]) == ["2023-12-31", "2024-02-25", "2024-03-03", "2024-03-10"]
        assert report["category_spend"]["Rent"] == "200.00"
        assert report["errors"] == []
        assert report["transaction_count"] == 6
        json.dumps(report)

    def test_build_report_collects_errors(self, sample_records):
        records = sample_records + [{"_id": "bad", "date": "2024-03-01", "type": "loan", "amount": 5}]
        report = build_report(records, "monthly", on_error="collect")
        assert report["transaction_count"] == 6
        assert report["errors"][0]["id"] == "bad"
        text = format_text_report(report)
        assert "Skipped Records (1)" in text
        assert "#6 (id bad) [type]" in text

    def test_build_report_raises_by_default(self):
        with pytest.raises(ValidationError):
            build_report([{"date": "nope", "type": "income", "amount": 1}])

    def test_text_report(self, sample_records):
        text = format_text_report(build_report(sample_records, "monthly"))
        assert text.startswith("=== Budget Summary ===")
        assert "-- Monthly Totals --" in text
        assert "2024-03    | Inc $1000.00  Exp $245.20  Net $754.80" in text

    def test_save_json(self, tmp_path, sample_records):
        out = tmp_path / "nested" / "report.json"
        save_json(build_report(sample_records), out)
        assert json.loads(out.read_text())["periods"]["2024-02"]["net"] == "100.25"

    def test_export_csv_stream(self, sample_records):
        buf = io.StringIO()
        export_summary_csv(build_report(sample_records, "monthly"), buf)
        assert buf.getvalue().splitlines() == [
            "Period,Income,Expense,Net",
            "2024-01,0.00,19.99,-19.99",
            "2024-02,100.25,0.00,100.25",
            "2024-03,1000.00,245.20,754.80",
        ]
