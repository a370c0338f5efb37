"""Calendar period labels.

A period label is the string key a transaction is grouped under:

    daily    YYYY-MM-DD
    weekly   YYYY-MM-DD of the Sunday that starts the week
    monthly  YYYY-MM

Labels are computed in the local calendar. Timezone-aware datetimes are
converted to the process's local zone first; naive values are used as-is.
"""

from __future__ import annotations

import datetime as dt
import enum
import re
from typing import Callable, Dict, Union

DateLike = Union[dt.date, dt.datetime]

_DAY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_MONTH_RE = re.compile(r"^\d{4}-\d{2}$")


class Granularity(str, enum.Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @classmethod
    def parse(cls, value: Union[str, "Granularity", None]) -> "Granularity":
        if value is None:
            return cls.MONTHLY
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            choices = ", ".join(g.value for g in cls)
            raise ValueError(f"Unknown granularity {value!r}; expected one of: {choices}") from exc


def local_date(value: DateLike) -> dt.date:
    if isinstance(value, dt.datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    return value


def day_label(value: DateLike) -> str:
    d = local_date(value)
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def week_start(value: DateLike) -> dt.date:
    """Return the Sunday on or before ``value``."""
    d = local_date(value)
    # date.weekday() is Monday=0 .. Sunday=6; shift so Sunday=0
    days_since_sunday = (d.weekday() + 1) % 7
    return d - dt.timedelta(days=days_since_sunday)


def week_label(value: DateLike) -> str:
    return day_label(week_start(value))


def month_label(value: DateLike) -> str:
    d = local_date(value)
    return f"{d.year:04d}-{d.month:02d}"


LABEL_FUNCTIONS: Dict[Granularity, Callable[[DateLike], str]] = {
    Granularity.DAILY: day_label,
    Granularity.WEEKLY: week_label,
    Granularity.MONTHLY: month_label,
}


class PeriodLabel(str):
    """ISO period key that remembers its granularity.

    Behaves as a plain string for hashing and comparison, so a summary can be
    indexed with ``"2024-03"`` as well as with a ``PeriodLabel``.
    """

    granularity: Granularity

    def __new__(cls, value: str, granularity: Union[str, Granularity]) -> "PeriodLabel":
        gran = Granularity.parse(granularity)
        text = str(value)
        if gran is Granularity.MONTHLY:
            if not _MONTH_RE.match(text):
                raise ValueError(f"Invalid monthly label {text!r}; expected YYYY-MM")
            try:
                dt.date(int(text[:4]), int(text[5:7]), 1)
            except ValueError as exc:
                raise ValueError(f"Invalid monthly label {text!r}: {exc}") from exc
        else:
            if not _DAY_RE.match(text):
                raise ValueError(f"Invalid {gran.value} label {text!r}; expected YYYY-MM-DD")
            try:
                parsed = dt.date.fromisoformat(text)
            except ValueError as exc:
                raise ValueError(f"Invalid {gran.value} label {text!r}: {exc}") from exc
            if gran is Granularity.WEEKLY and parsed.weekday() != 6:
                raise ValueError(f"Weekly label {text!r} is not a Sunday")
        obj = super().__new__(cls, text)
        obj.granularity = gran
        return obj

    @classmethod
    def for_date(cls, value: DateLike, granularity: Union[str, Granularity]) -> "PeriodLabel":
        gran = Granularity.parse(granularity)
        return cls(LABEL_FUNCTIONS[gran](value), gran)

    @property
    def start(self) -> dt.date:
        """First calendar day covered by this period."""
        if self.granularity is Granularity.MONTHLY:
            return dt.date(int(self[:4]), int(self[5:7]), 1)
        return dt.date.fromisoformat(str(self))

    def __repr__(self) -> str:
        return f"PeriodLabel({str(self)!r}, {self.granularity.value!r})"

    def __reduce__(self):
        return (PeriodLabel, (str(self), self.granularity.value))
