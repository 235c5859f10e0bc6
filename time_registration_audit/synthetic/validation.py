from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Mapping, Sequence

from .calendar import is_weekend
from .models import EmployeeWorkPattern, TimeRegistration
from .registrations import FALLBACK_SHIFT_HOURS

DURATION_LABELS = {"Start Time", "End Time", "Break Duration", "Time Shift"}


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    message: str = ""


def _by_employee(
    patterns: Sequence[EmployeeWorkPattern],
) -> Mapping[str, EmployeeWorkPattern]:
    return {p.employee_id: p for p in patterns}


def check_weekday_only_for_ineligible(
    registrations: Sequence[TimeRegistration],
    patterns: Sequence[EmployeeWorkPattern],
) -> ValidationResult:
    """Employees without weekend eligibility must only work Monday-Friday.

    Only meaningful for anomaly-free data generated with ``skip_weekends``;
    strong date-shift anomalies deliberately break this rule.
    """
    lookup = _by_employee(patterns)
    for idx, r in enumerate(registrations):
        pattern = lookup.get(r.employee_id)
        if pattern is None or pattern.can_work_weekends:
            continue
        if is_weekend(r.date):
            return ValidationResult(
                False,
                f"{r.employee_id} is not weekend-eligible but works {r.iso_date} "
                f"(index {idx})",
            )
    return ValidationResult(True, "weekend eligibility respected")


def check_no_duplicate_employee_days(
    registrations: Sequence[TimeRegistration],
) -> ValidationResult:
    """Each (employee, date) pair must appear at most once."""
    if not registrations:
        return ValidationResult(True, "no registrations to check")

    seen = set()
    duplicates = 0
    for r in registrations:
        key = (r.employee_id, r.date)
        if key in seen:
            duplicates += 1
        else:
            seen.add(key)

    if duplicates > 0:
        return ValidationResult(
            False,
            f"found {duplicates} duplicate employee-days out of {len(registrations)} registrations",
        )
    return ValidationResult(True, f"all {len(registrations)} employee-days are unique")


def check_work_duration_consistency(
    registrations: Sequence[TimeRegistration], *, tolerance: float = 1e-9
) -> ValidationResult:
    """``work_duration == end - start - break`` for clean registrations and for
    anomalies that mutated start, end or break."""
    for idx, r in enumerate(registrations):
        if r.is_anomalous and r.anomaly_field not in DURATION_LABELS:
            continue
        expected = r.end_time - r.start_time - r.break_duration
        if abs(r.work_duration - expected) > tolerance:
            return ValidationResult(
                False,
                f"work_duration {r.work_duration} != {expected} for "
                f"{r.registration_id} (index {idx})",
            )
    return ValidationResult(True, "work durations consistent")


def check_dates_within_range(
    registrations: Sequence[TimeRegistration], start: date, end: date
) -> ValidationResult:
    for idx, r in enumerate(registrations):
        if not start <= r.date <= end:
            return ValidationResult(
                False, f"{r.iso_date} outside [{start}, {end}] at index {idx}"
            )
    return ValidationResult(True, "all dates within range")


def check_registrations_per_employee(
    registrations: Sequence[TimeRegistration], max_per_employee: int
) -> ValidationResult:
    counts: dict[str, int] = defaultdict(int)
    for r in registrations:
        counts[r.employee_id] += 1
    over = {emp: n for emp, n in counts.items() if n > max_per_employee}
    if over:
        return ValidationResult(
            False, f"employees above {max_per_employee} registrations: {sorted(over)}"
        )
    return ValidationResult(True, f"{len(counts)} employees within limit")


def check_weekend_quota(
    patterns: Sequence[EmployeeWorkPattern], min_weekend_workers: int
) -> ValidationResult:
    required = min(max(0, min_weekend_workers), len(patterns))
    eligible = sum(1 for p in patterns if p.can_work_weekends)
    if eligible < required:
        return ValidationResult(
            False, f"only {eligible} weekend workers, {required} required"
        )
    return ValidationResult(True, f"{eligible} weekend workers (>= {required})")


def check_anomaly_labels(
    registrations: Sequence[TimeRegistration],
) -> ValidationResult:
    """Every anomalous registration carries a non-empty field label."""
    for idx, r in enumerate(registrations):
        if r.is_anomalous and not r.anomaly_field:
            return ValidationResult(
                False, f"anomaly without field label at index {idx}"
            )
    return ValidationResult(True, "anomaly labels present")


def check_registrations_match_patterns(
    registrations: Sequence[TimeRegistration],
    patterns: Sequence[EmployeeWorkPattern],
) -> ValidationResult:
    """Clean registrations only use values from their employee's pattern.

    ``end_time`` may also be the fallback shift after ``start_time``.
    """
    lookup = _by_employee(patterns)
    for idx, r in enumerate(registrations):
        if r.is_anomalous:
            continue
        p = lookup.get(r.employee_id)
        if p is None:
            return ValidationResult(
                False, f"no pattern for {r.employee_id} at index {idx}"
            )
        problems = []
        if r.department_id != p.department_id:
            problems.append("department")
        if r.work_category not in p.allowed_work_categories:
            problems.append("work_category")
        if r.start_time not in p.allowed_start_times:
            problems.append("start_time")
        fallback_end = r.start_time + FALLBACK_SHIFT_HOURS
        if r.end_time not in p.allowed_end_times and r.end_time != fallback_end:
            problems.append("end_time")
        if r.break_duration not in p.allowed_break_durations:
            problems.append("break_duration")
        if problems:
            return ValidationResult(
                False,
                f"{r.registration_id} violates pattern of {r.employee_id}: "
                f"{', '.join(problems)}",
            )
    return ValidationResult(True, "registrations conform to work patterns")
