"""Data loading helpers.

Turns plain records (documents from a store, CSV rows, JSON bodies) into
validated transactions with fields:
    date (datetime.date), type (income|expense), amount (Decimal >= 0),
    category (str|None), description (str|None), id (str|None)

CSV columns are auto-detected case-insensitively among common variants.
"""

from __future__ import annotations

import csv
import datetime as dt
import enum
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import IO, Any, Iterable, List, Mapping, Optional, Tuple

from .periods import local_date


class TransactionType(str, enum.Enum):
    INCOME = "income"
    EXPENSE = "expense"


class ValidationError(ValueError):
    """A record that cannot be turned into a Transaction."""

    def __init__(self, reason: str, *, index: Optional[int] = None,
                 record_id: Optional[str] = None, field: Optional[str] = None):
        self.reason = reason
        self.index = index
        self.record_id = record_id
        self.field = field
        super().__init__(self._compose())

    def _compose(self) -> str:
        where = []
        if self.index is not None:
            where.append(f"record #{self.index}")
        if self.record_id is not None:
            where.append(f"id={self.record_id}")
        if self.field:
            where.append(f"field '{self.field}'")
        prefix = " ".join(where)
        return f"{prefix}: {self.reason}" if prefix else self.reason

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "id": self.record_id,
            "field": self.field,
            "error": self.reason,
        }


@dataclass(frozen=True)
class Transaction:
    date: dt.date
    type: TransactionType
    amount: Decimal
    category: Optional[str] = None
    description: Optional[str] = None
    id: Optional[str] = None

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.type is TransactionType.INCOME else -self.amount


def parse_date(value: Any) -> dt.date:
    if isinstance(value, (dt.date, dt.datetime)):
        return local_date(value)
    if not isinstance(value, str):
        raise ValueError(f"Unrecognized date value: {value!r}")
    text = value.strip()
    if not text:
        raise ValueError("Empty date")
    # Date-only strings name a calendar day, not a UTC instant
    if len(text) == 10:
        try:
            return dt.date.fromisoformat(text)
        except ValueError:
            pass
    for fmt in ("%m/%d/%Y", "%Y/%m/%d"):
        try:
            return dt.datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    iso = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        return local_date(dt.datetime.fromisoformat(iso))
    except ValueError as exc:
        raise ValueError(f"Unrecognized date format: {value!r}") from exc


def parse_amount(value: Any) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Invalid amount: {value!r}")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float, str)):
        text = str(value).replace(",", "").strip()
        try:
            amount = Decimal(text)
        except InvalidOperation as exc:
            raise ValueError(f"Invalid amount: {value!r}") from exc
    else:
        raise ValueError(f"Invalid amount: {value!r}")
    if not amount.is_finite():
        raise ValueError(f"Amount must be finite: {value!r}")
    if amount < 0:
        raise ValueError(f"Amount must not be negative: {value!r}")
    return amount


def parse_type(value: Any) -> TransactionType:
    if isinstance(value, TransactionType):
        return value
    try:
        return TransactionType(value)
    except ValueError as exc:
        raise ValueError(f"Unknown transaction type {value!r}; expected 'income' or 'expense'") from exc


def _record_id(record: Mapping[str, Any]) -> Optional[str]:
    for key in ("id", "_id"):
        value = record.get(key)
        if value not in (None, ""):
            return str(value)
    return None


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def coerce_transaction(record: Any, index: Optional[int] = None) -> Transaction:
    """Validate one record into a Transaction.

    ``record`` may already be a Transaction or any mapping with ``date``,
    ``type`` and ``amount`` keys. Raises ValidationError naming the record
    and the offending field.
    """

    if isinstance(record, Transaction):
        return record
    if not isinstance(record, Mapping):
        raise ValidationError(
            f"Expected a mapping, got {type(record).__name__}", index=index
        )
    record_id = _record_id(record)

    def fail(field: str, exc: Exception) -> ValidationError:
        return ValidationError(str(exc), index=index, record_id=record_id, field=field)

    for field in ("date", "type", "amount"):
        if field not in record or record[field] is None:
            raise ValidationError("Missing required field", index=index, record_id=record_id, field=field)
    try:
        date = parse_date(record["date"])
    except ValueError as exc:
        raise fail("date", exc) from exc
    try:
        txn_type = parse_type(record["type"])
    except ValueError as exc:
        raise fail("type", exc) from exc
    try:
        amount = parse_amount(record["amount"])
    except ValueError as exc:
        raise fail("amount", exc) from exc

    return Transaction(
        date=date,
        type=txn_type,
        amount=amount,
        category=_optional_text(record.get("category")),
        description=_optional_text(record.get("description")),
        id=record_id,
    )


def _find_column(row_keys: Iterable[str], candidates: Iterable[str]) -> Optional[str]:
    low = {k.lower().strip(): k for k in row_keys}
    for cand in candidates:
        if cand in low:
            return low[cand]
    return None


_DATE_COLS = ("date", "transaction date", "posted date", "posting date")
_TYPE_COLS = ("type", "kind", "transaction type")
_AMT_COLS = ("amount", "amt", "value")
_CATEGORY_COLS = ("category", "label")
_DESC_COLS = ("description", "details", "memo", "name")
_ID_COLS = ("id", "_id", "transaction id")


def load_csv_stream(stream: IO[str], source: str = "<stream>") -> List[dict]:
    """Read CSV rows into plain records keyed by the canonical field names.

    Rows are not validated here; pass them to ``coerce_transaction`` or the
    aggregator so the caller's error policy decides what happens.
    """

    reader = csv.DictReader(stream)
    fieldnames = reader.fieldnames or []
    columns = {
        "date": _find_column(fieldnames, _DATE_COLS),
        "type": _find_column(fieldnames, _TYPE_COLS),
        "amount": _find_column(fieldnames, _AMT_COLS),
        "category": _find_column(fieldnames, _CATEGORY_COLS),
        "description": _find_column(fieldnames, _DESC_COLS),
        "id": _find_column(fieldnames, _ID_COLS),
    }
    missing = [name for name in ("date", "type", "amount") if not columns[name]]
    if missing:
        raise ValueError(f"{source}: Missing required columns: {', '.join(missing)}")

    records: List[dict] = []
    for row in reader:
        record = {}
        for name, col in columns.items():
            if col is None:
                continue
            value = row.get(col)
            record[name] = value.strip() if isinstance(value, str) else value
        records.append(record)
    return records


def load_csv_file(path: str | Path) -> List[dict]:
    p = Path(path)
    with p.open("r", encoding="utf-8-sig", newline="") as f:
        return load_csv_stream(f, source=p.name)


def load_csv_files(paths: Iterable[str | Path]) -> List[dict]:
    records: List[dict] = []
    for p in paths:
        records.extend(load_csv_file(p))
    return records


ERROR_POLICIES = ("raise", "collect")


def validate_records(
    records: Iterable[Any],
    on_error: str = "raise",
) -> Tuple[List[Transaction], List[ValidationError]]:
    """Coerce records under an error policy.

    ``"raise"`` stops at the first malformed record. ``"collect"`` skips
    malformed records and returns their errors next to the valid ones.
    """

    if on_error not in ERROR_POLICIES:
        raise ValueError(f"Unknown error policy {on_error!r}; expected one of: {', '.join(ERROR_POLICIES)}")
    txns: List[Transaction] = []
    errors: List[ValidationError] = []
    for index, record in enumerate(records):
        try:
            txns.append(coerce_transaction(record, index=index))
        except ValidationError as exc:
            if on_error == "raise":
                raise
            errors.append(exc)
    return txns, errors
