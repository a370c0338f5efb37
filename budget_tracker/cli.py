"""Command-line interface for Budget Tracker.

Usage:
  python -m budget_tracker.cli --input transactions.csv --freq weekly

Options allow multiple CSVs, a JSON config, date filtering, collecting
malformed rows instead of stopping, and JSON/CSV export.
"""

from __future__ import annotations

import argparse
import datetime as dt
import logging
from typing import List, Optional

from .analytics import filter_by_range
from .config import AppConfig, parse_log_level
from .data_loader import ValidationError, load_csv_files, validate_records
from .periods import Granularity
from .reports import build_report, export_summary_csv, format_text_report, save_json

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Budget Tracker period summary")
    p.add_argument("--input", "-i", nargs="+", required=True, help="CSV file(s) to load")
    p.add_argument("--freq", "-f", choices=[g.value for g in Granularity], help="Period granularity")
    p.add_argument("--config", "-c", help="Path to JSON config")
    p.add_argument("--from", dest="date_from", help="Start date (YYYY-MM-DD)")
    p.add_argument("--to", dest="date_to", help="End date (YYYY-MM-DD)")
    p.add_argument("--collect-errors", action="store_true", help="Skip malformed rows and report them")
    p.add_argument("--json", dest="json_out", help="Write report JSON to path")
    p.add_argument("--csv", dest="csv_out", help="Write period totals CSV to path")
    p.add_argument("--log-level", help="Logging level (default from config)")
    return p.parse_args(argv)


def _parse_date(d: Optional[str]) -> Optional[dt.date]:
    if not d:
        return None
    try:
        return dt.date.fromisoformat(d)
    except ValueError as exc:
        raise ValueError(f"Expected YYYY-MM-DD date, got {d!r}") from exc


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        cfg = AppConfig.load(args.config)
        logging.basicConfig(
            level=parse_log_level(args.log_level or cfg.log_level),
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
        dfrom = _parse_date(args.date_from)
        dto = _parse_date(args.date_to)
    except (OSError, ValueError) as exc:
        logger.error("Invalid option: %s", exc)
        return 1
    policy = "collect" if args.collect_errors else cfg.error_policy
    freq = args.freq or cfg.default_frequency

    try:
        records = load_csv_files(args.input)
        txns, errors = validate_records(records, policy)
    except ValidationError as exc:
        logger.error("Invalid transaction: %s", exc)
        return 1
    except (OSError, ValueError) as exc:
        logger.error("Could not load input: %s", exc)
        return 1

    # Optional date filtering
    if dfrom or dto:
        txns = filter_by_range(txns, dfrom, dto)

    report = build_report(txns, freq)
    report["errors"] = [e.to_dict() for e in errors]
    print(format_text_report(report))

    if args.json_out:
        save_json(report, args.json_out)
        print(f"\nSaved JSON report to: {args.json_out}")
    if args.csv_out:
        export_summary_csv(report, args.csv_out)
        print(f"\nSaved CSV totals to: {args.csv_out}")
    return 1 if errors else 0


if __name__ == "__main__":
    raise SystemExit(main())
