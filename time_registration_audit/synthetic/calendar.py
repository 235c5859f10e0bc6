from __future__ import annotations

from datetime import date, timedelta
from typing import List, Union

SATURDAY = 5
FRIDAY = 4


def parse_iso_date(value: Union[str, date]) -> date:
    """Accept a ``date`` or an ISO ``yyyy-mm-dd`` string."""

    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def is_weekend(day: date) -> bool:
    return day.weekday() >= SATURDAY


def build_date_range(
    start: date, end: date, *, skip_weekends: bool = False
) -> List[date]:
    """Enumerate the days in ``[start, end]``.

    Saturdays and Sundays are dropped when ``skip_weekends`` is set. An
    inverted interval yields an empty list rather than an error.
    """

    out: List[date] = []
    cur = start
    while cur <= end:
        if not (skip_weekends and is_weekend(cur)):
            out.append(cur)
        cur += timedelta(days=1)
    return out


def next_saturday(day: date) -> date:
    """Saturday of the same week (the day itself if it already is one)."""
    return day + timedelta(days=(SATURDAY - day.weekday()) % 7)


def preceding_friday(day: date) -> date:
    return day - timedelta(days=(day.weekday() - FRIDAY) % 7 or 7)


def time_grid(low: float, high: float, step: float = 0.5) -> List[float]:
    """Regular grid of hour values from ``low`` to ``high`` inclusive."""

    if step <= 0:
        raise ValueError("step must be positive")
    low, high = min(low, high), max(low, high)
    count = int((high - low) / step + 1e-9) + 1
    return [round(low + i * step, 2) for i in range(count)]
