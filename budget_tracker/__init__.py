"""Budget Tracker package."""

from .aggregator import (
    PeriodBucket,
    PeriodSummary,
    merge_summaries,
    summarize,
    summarize_by_day,
    summarize_by_month,
    summarize_by_week,
)
from .data_loader import Transaction, TransactionType, ValidationError
from .periods import Granularity, PeriodLabel

__all__ = [
    "Granularity",
    "PeriodBucket",
    "PeriodLabel",
    "PeriodSummary",
    "Transaction",
    "TransactionType",
    "ValidationError",
    "merge_summaries",
    "summarize",
    "summarize_by_day",
    "summarize_by_month",
    "summarize_by_week",
]

__version__ = "0.1.0"
