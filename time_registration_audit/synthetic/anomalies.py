"""Anomaly injection for generated registrations.

A controlled fraction of registrations is replaced by a copy in which exactly
one attribute deviates from the employee's pattern. Weak anomalies are small
plausible-looking slips (an hour early, half an hour of extra break, an
unknown project); strong anomalies are large shifts or weekend work that the
employee is not contracted for. The mutated attribute is recorded on the copy
so detectors can be scored per field.
"""

from __future__ import annotations

import logging
import random
from dataclasses import replace
from typing import Dict, List, Mapping, Optional, Sequence

from .calendar import is_weekend, next_saturday, preceding_friday
from .models import (
    AnomalyConfig,
    AnomalyInfo,
    AnomalySeverity,
    AnomalyType,
    EmployeeWorkPattern,
    Numerical,
    TimeRegistration,
)

logger = logging.getLogger(__name__)

ANOMALOUS_PROJECT_ID = "Z"

START_TIME_BOUNDS = (6.0, 12.0)
END_TIME_BOUNDS = (14.0, 20.0)

WEAK_TIME_ADJUSTMENT = 1.0
WEAK_BREAK_ADJUSTMENT = 0.5
WEAK_DURATION_ADJUSTMENT = 1.0
WEAK_NUMERICAL_ADJUSTMENT = 1.0
STRONG_TIME_SHIFT = 3.0
STRONG_NUMERICAL_ADJUSTMENT = 3.0

WEAK_ASPECTS = (
    "start_time",
    "end_time",
    "break_duration",
    "work_duration",
    "numerical",
    "project",
)
STRONG_ASPECTS = ("time", "date", "numerical")


def _work_duration(start_time: float, end_time: float, break_duration: float) -> float:
    return end_time - start_time - break_duration


def _adjust_toward_nearer_bound(
    value: float, bounds: tuple, adjustment: float
) -> float:
    """Move ``value`` by ``adjustment`` toward the closer bound, clamped."""

    low, high = bounds
    if value - low < high - value:
        return max(low, value - adjustment)
    return min(high, value + adjustment)


def _sign(rng: random.Random) -> float:
    return 1.0 if rng.random() < 0.5 else -1.0


def _mark(
    reg: TimeRegistration, severity: AnomalySeverity, label: str, **changes
) -> TimeRegistration:
    return replace(reg, anomaly=AnomalyInfo(severity, label), **changes)


def _shift_numerical(
    reg: TimeRegistration,
    rng: random.Random,
    severity: AnomalySeverity,
    adjustment: float,
) -> TimeRegistration:
    # No metrics to mutate: still tagged, nothing changes.
    if not reg.numericals:
        return _mark(reg, severity, "Numerical")
    index = rng.randrange(len(reg.numericals))
    target = reg.numericals[index]
    shifted = Numerical(target.name, target.value + _sign(rng) * adjustment)
    numericals = reg.numericals[:index] + (shifted,) + reg.numericals[index + 1 :]
    return _mark(reg, severity, f"Numerical ({target.name})", numericals=numericals)


def introduce_weak_anomaly(
    reg: TimeRegistration, rng: random.Random
) -> TimeRegistration:
    aspect = rng.choice(WEAK_ASPECTS)
    weak = AnomalySeverity.WEAK

    if aspect == "start_time":
        start_time = _adjust_toward_nearer_bound(
            reg.start_time, START_TIME_BOUNDS, WEAK_TIME_ADJUSTMENT
        )
        return _mark(
            reg,
            weak,
            "Start Time",
            start_time=start_time,
            work_duration=_work_duration(start_time, reg.end_time, reg.break_duration),
        )
    if aspect == "end_time":
        end_time = _adjust_toward_nearer_bound(
            reg.end_time, END_TIME_BOUNDS, WEAK_TIME_ADJUSTMENT
        )
        return _mark(
            reg,
            weak,
            "End Time",
            end_time=end_time,
            work_duration=_work_duration(reg.start_time, end_time, reg.break_duration),
        )
    if aspect == "break_duration":
        break_duration = round(
            reg.break_duration + _sign(rng) * WEAK_BREAK_ADJUSTMENT, 1
        )
        return _mark(
            reg,
            weak,
            "Break Duration",
            break_duration=break_duration,
            work_duration=_work_duration(reg.start_time, reg.end_time, break_duration),
        )
    if aspect == "work_duration":
        work_duration = round(
            reg.work_duration + _sign(rng) * WEAK_DURATION_ADJUSTMENT, 1
        )
        return _mark(reg, weak, "Work Duration", work_duration=work_duration)
    if aspect == "numerical":
        return _shift_numerical(reg, rng, weak, WEAK_NUMERICAL_ADJUSTMENT)
    return _mark(reg, weak, "Project", project_id=ANOMALOUS_PROJECT_ID)


def introduce_strong_anomaly(
    reg: TimeRegistration,
    rng: random.Random,
    *,
    can_work_weekends: bool = False,
) -> TimeRegistration:
    """Apply one strong deviation.

    The weekend date shift is skipped for weekend-eligible employees, since
    weekend work is normal for them; the registration is then returned
    unchanged and unmarked.
    """

    aspect = rng.choice(STRONG_ASPECTS)
    strong = AnomalySeverity.STRONG

    if aspect == "time":
        shift = _sign(rng) * STRONG_TIME_SHIFT
        start_time = reg.start_time + shift
        end_time = reg.end_time + shift
        return _mark(
            reg,
            strong,
            "Time Shift",
            start_time=start_time,
            end_time=end_time,
            work_duration=_work_duration(start_time, end_time, reg.break_duration),
        )
    if aspect == "date":
        if can_work_weekends:
            return reg
        if is_weekend(reg.date):
            return _mark(reg, strong, "Date (Weekday)", date=preceding_friday(reg.date))
        return _mark(reg, strong, "Date (Weekend)", date=next_saturday(reg.date))
    return _shift_numerical(reg, rng, strong, STRONG_NUMERICAL_ADJUSTMENT)


def inject_anomalies(
    registrations: Sequence[TimeRegistration],
    config: AnomalyConfig,
    rng: random.Random,
    *,
    patterns: Optional[Mapping[str, EmployeeWorkPattern]] = None,
) -> List[TimeRegistration]:
    """Return a new list where each registration is anomalous with ``config.probability``.

    ``patterns`` maps employee ids to their work pattern; employees missing
    from it are treated as not weekend-eligible. Omitting ``patterns``
    therefore lets strong date shifts hit weekend workers too; pass the
    dataset's patterns unless that is intended.
    """

    if config.type is AnomalyType.NONE:
        return list(registrations)

    patterns = patterns or {}
    weekend_ok: Dict[str, bool] = {
        emp_id: p.can_work_weekends for emp_id, p in patterns.items()
    }

    def weak(r: TimeRegistration) -> TimeRegistration:
        return introduce_weak_anomaly(r, rng)

    def strong(r: TimeRegistration) -> TimeRegistration:
        return introduce_strong_anomaly(
            r, rng, can_work_weekends=weekend_ok.get(r.employee_id, False)
        )

    out: List[TimeRegistration] = []
    for reg in registrations:
        if rng.random() >= config.probability:
            out.append(reg)
            continue
        if config.type is AnomalyType.BOTH:
            out.append(weak(reg) if rng.random() < 0.5 else strong(reg))
        elif config.type is AnomalyType.WEAK:
            out.append(weak(reg))
        else:
            out.append(strong(reg))

    logger.debug(
        f"Injected {sum(1 for r in out if r.is_anomalous)} anomalies into "
        f"{len(out)} registrations ({config.type.value}, p={config.probability})"
    )
    return out
