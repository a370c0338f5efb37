"""Reporting utilities.

Formats period summaries into human-readable text and JSON/CSV friendly
structures. Amounts leave this module as fixed two-decimal strings.
"""

from __future__ import annotations

import csv
import json
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import IO, Any, Dict, Iterable, List, Union

from . import analytics as an
from .aggregator import PeriodBucket, PeriodSummary, summarize
from .data_loader import validate_records
from .periods import Granularity

CENT = Decimal("0.01")


def fmt_amount(value: Decimal) -> str:
    return str(Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP))


def bucket_to_dict(bucket: PeriodBucket) -> Dict[str, str]:
    return {key: fmt_amount(value) for key, value in bucket.to_dict().items()}


def summary_to_dict(summary: PeriodSummary) -> Dict[str, Dict[str, str]]:
    return {str(label): bucket_to_dict(bucket) for label, bucket in summary.items()}


def build_report(
    records: Iterable[Any],
    granularity: Union[str, Granularity, None] = Granularity.MONTHLY,
    on_error: str = "raise",
) -> Dict:
    txns, errors = validate_records(records, on_error)
    summary = summarize(txns, granularity)
    return {
        "granularity": summary.granularity.value,
        "totals": bucket_to_dict(an.summarize_totals(txns)),
        "periods": summary_to_dict(summary),
        "category_spend": {cat: fmt_amount(v) for cat, v in an.spending_by_category(txns).items()},
        "errors": [e.to_dict() for e in errors],
        "transaction_count": len(txns),
    }


def format_text_report(report: Dict) -> str:
    lines: List[str] = []
    t = report["totals"]
    lines.append("=== Budget Summary ===")
    lines.append(f"Income:  ${t['income']}")
    lines.append(f"Expense: ${t['expense']}")
    lines.append(f"Net:     ${t['net']}")
    lines.append("")

    lines.append(f"-- {report['granularity'].capitalize()} Totals --")
    for label, vals in report["periods"].items():
        lines.append(f"{label:10} | Inc ${vals['income']}  Exp ${vals['expense']}  Net ${vals['net']}")
    lines.append("")

    if report.get("category_spend"):
        lines.append("-- Spend by Category --")
        for cat, amt in report["category_spend"].items():
            lines.append(f"{cat:15} ${amt}")
        lines.append("")

    errors = report.get("errors") or []
    if errors:
        lines.append(f"-- Skipped Records ({len(errors)}) --")
        for err in errors:
            where = f"#{err['index']}" + (f" (id {err['id']})" if err.get("id") else "")
            field = f" [{err['field']}]" if err.get("field") else ""
            lines.append(f"{where}{field}: {err['error']}")
    return "\n".join(lines).rstrip("\n")


def save_json(report: Dict, path: str | Path) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        json.dump(report, f, indent=2)


def _ensure_text_writer(target: str | Path | IO[str]):
    if hasattr(target, "write"):
        return target, None
    path = Path(target)
    path.parent.mkdir(parents=True, exist_ok=True)
    handle = path.open("w", newline="", encoding="utf-8")
    return handle, handle


def export_summary_csv(report: Dict, path: str | Path | IO[str]) -> None:
    rows: List[List[str]] = [["Period", "Income", "Expense", "Net"]]
    for label, vals in (report.get("periods") or {}).items():
        rows.append([label, vals["income"], vals["expense"], vals["net"]])

    writer_target, to_close = _ensure_text_writer(path)
    try:
        writer = csv.writer(writer_target, lineterminator="\n")
        writer.writerows(rows)
    finally:
        if to_close is not None:
            to_close.close()
