"""Period aggregation.

Folds a flat list of transactions into income/expense/net totals keyed by
calendar period. The daily, weekly and monthly summaries share one fold and
differ only in the label function they pass to it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, Iterator, List, Tuple, Union

from .data_loader import Transaction, TransactionType, ValidationError, validate_records
from .periods import Granularity, LABEL_FUNCTIONS, PeriodLabel

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass(frozen=True)
class PeriodBucket:
    income: Decimal = ZERO
    expense: Decimal = ZERO
    net: Decimal = ZERO

    def fold(self, txn: Transaction) -> "PeriodBucket":
        if txn.type is TransactionType.INCOME:
            return PeriodBucket(self.income + txn.amount, self.expense, self.net + txn.amount)
        return PeriodBucket(self.income, self.expense + txn.amount, self.net - txn.amount)

    def __add__(self, other: "PeriodBucket") -> "PeriodBucket":
        if not isinstance(other, PeriodBucket):
            return NotImplemented
        return PeriodBucket(
            self.income + other.income,
            self.expense + other.expense,
            self.net + other.net,
        )

    def to_dict(self) -> Dict[str, Decimal]:
        return {"income": self.income, "expense": self.expense, "net": self.net}


@dataclass(frozen=True)
class PeriodSummary(Mapping):
    """Read-only mapping of period label to bucket, ordered by label."""

    granularity: Granularity
    buckets: Tuple[Tuple[PeriodLabel, PeriodBucket], ...] = ()
    errors: Tuple[ValidationError, ...] = ()
    _index: Dict[str, PeriodBucket] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_index", {str(label): bucket for label, bucket in self.buckets})

    def __getitem__(self, label: str) -> PeriodBucket:
        return self._index[str(label)]

    def __iter__(self) -> Iterator[PeriodLabel]:
        return (label for label, _ in self.buckets)

    def __len__(self) -> int:
        return len(self.buckets)

    def __contains__(self, label: object) -> bool:
        return isinstance(label, str) and str(label) in self._index

    def __eq__(self, other: object) -> bool:
        # Compare as mappings so tests can check against plain dicts
        if isinstance(other, Mapping):
            return dict(self.items()) == dict(other.items())
        return NotImplemented

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Dict[str, Decimal]]:
        return {str(label): bucket.to_dict() for label, bucket in self.buckets}


def _fold(
    records: Iterable[Any],
    granularity: Granularity,
    label_fn: Callable[[Any], str],
    on_error: str,
) -> PeriodSummary:
    txns, errors = validate_records(records, on_error)

    acc: Dict[str, PeriodBucket] = {}
    for txn in txns:
        label = label_fn(txn.date)
        acc[label] = acc.get(label, PeriodBucket()).fold(txn)

    if errors:
        logger.warning("Skipped %d malformed transaction(s) during %s aggregation", len(errors), granularity.value)
    logger.debug("Aggregated %d transaction(s) into %d %s period(s)", len(txns), len(acc), granularity.value)

    buckets = tuple(
        (PeriodLabel(label, granularity), acc[label]) for label in sorted(acc)
    )
    return PeriodSummary(granularity=granularity, buckets=buckets, errors=tuple(errors))


def summarize(
    transactions: Iterable[Any],
    granularity: Union[str, Granularity, None] = Granularity.MONTHLY,
    on_error: str = "raise",
) -> PeriodSummary:
    """Group transactions into per-period income, expense and net totals.

    ``transactions`` may hold Transaction objects or mappings with ``date``,
    ``type`` and ``amount``. With ``on_error="raise"`` the first malformed
    record raises ValidationError; with ``"collect"`` malformed records are
    skipped and reported in ``PeriodSummary.errors``.
    """

    gran = Granularity.parse(granularity)
    return _fold(transactions, gran, LABEL_FUNCTIONS[gran], on_error)


def summarize_by_day(transactions: Iterable[Any], on_error: str = "raise") -> PeriodSummary:
    return summarize(transactions, Granularity.DAILY, on_error)


def summarize_by_week(transactions: Iterable[Any], on_error: str = "raise") -> PeriodSummary:
    return summarize(transactions, Granularity.WEEKLY, on_error)


def summarize_by_month(transactions: Iterable[Any], on_error: str = "raise") -> PeriodSummary:
    return summarize(transactions, Granularity.MONTHLY, on_error)


def merge_summaries(*summaries: PeriodSummary) -> PeriodSummary:
    """Sum buckets label by label across summaries of the same granularity."""
    if not summaries:
        raise ValueError("merge_summaries() needs at least one summary")
    granularity = summaries[0].granularity
    acc: Dict[str, PeriodBucket] = {}
    errors: List[ValidationError] = []
    for s in summaries:
        if s.granularity is not granularity:
            raise ValueError(
                f"Cannot merge {s.granularity.value} summary into {granularity.value} summary"
            )
        for label, bucket in s.buckets:
            acc[str(label)] = acc.get(str(label), PeriodBucket()) + bucket
        errors.extend(s.errors)
    buckets = tuple((PeriodLabel(label, granularity), acc[label]) for label in sorted(acc))
    return PeriodSummary(granularity=granularity, buckets=buckets, errors=tuple(errors))
