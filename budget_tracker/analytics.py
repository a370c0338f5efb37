"""Analytics over validated transactions.

Dashboard-style figures that sit next to the period summaries: overall
totals, expense breakdown by category, the single largest expense and a
zero-filled daily net timeline.
"""

from __future__ import annotations

import datetime as dt
from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from .aggregator import PeriodBucket, summarize_by_day
from .data_loader import Transaction, TransactionType
from .periods import day_label


def summarize_totals(txns: Iterable[Transaction]) -> PeriodBucket:
    bucket = PeriodBucket()
    for t in txns:
        bucket = bucket.fold(t)
    return bucket


def spending_by_category(txns: Iterable[Transaction], default_category: str = "Other") -> Dict[str, Decimal]:
    totals: Dict[str, Decimal] = defaultdict(Decimal)
    for t in txns:
        if t.type is TransactionType.EXPENSE:
            totals[t.category or default_category] += t.amount
    return dict(sorted(totals.items(), key=lambda kv: (-kv[1], kv[0])))


def largest_expense(txns: Iterable[Transaction]) -> Optional[Transaction]:
    biggest: Optional[Transaction] = None
    for t in txns:
        if t.type is TransactionType.EXPENSE and (biggest is None or t.amount > biggest.amount):
            biggest = t
    return biggest


def filter_by_range(
    txns: Iterable[Transaction],
    start: Optional[dt.date] = None,
    end: Optional[dt.date] = None,
) -> List[Transaction]:
    return [t for t in txns if (start is None or t.date >= start) and (end is None or t.date <= end)]


def transactions_in_month(txns: Iterable[Transaction], year: int, month: int) -> List[Transaction]:
    return [t for t in txns if t.date.year == year and t.date.month == month]


def daily_net_timeline(
    txns: Iterable[Transaction],
    start: dt.date,
    end: dt.date,
) -> List[Tuple[str, Decimal]]:
    """Net amount for every day from ``start`` to ``end`` inclusive.

    Unlike the period summaries, days without transactions appear with a
    zero net so the result can be plotted directly.
    """

    if start > end:
        raise ValueError(f"Timeline start {start.isoformat()} is after end {end.isoformat()}")
    daily = summarize_by_day(filter_by_range(txns, start, end))
    timeline: List[Tuple[str, Decimal]] = []
    day = start
    while day <= end:
        label = day_label(day)
        bucket = daily.get(label)
        timeline.append((label, bucket.net if bucket else Decimal("0")))
        day += dt.timedelta(days=1)
    return timeline
