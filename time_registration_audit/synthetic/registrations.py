from __future__ import annotations

import logging
import random
from datetime import date
from typing import List, Sequence

from .calendar import is_weekend
from .models import DatasetConfig, EmployeeWorkPattern, Numerical, TimeRegistration

logger = logging.getLogger(__name__)

FALLBACK_SHIFT_HOURS = 8.0
PUBLIC_HOLIDAY_PROBABILITY = 0.1


def eligible_dates(
    pattern: EmployeeWorkPattern,
    day_range: Sequence[date],
    *,
    skip_weekends: bool,
) -> List[date]:
    """Days this employee may be scheduled on.

    Weekends are removed only when they are skipped globally and the employee
    is not weekend-eligible.
    """

    if skip_weekends and not pattern.can_work_weekends:
        return [d for d in day_range if not is_weekend(d)]
    return list(day_range)


def _draw_numericals(rng: random.Random, config: DatasetConfig) -> tuple:
    return tuple(
        Numerical(spec.name, float(rng.randint(spec.minimum, spec.maximum)))
        for spec in config.numerical_metrics
    )


def generate_registrations(
    patterns: Sequence[EmployeeWorkPattern],
    day_range: Sequence[date],
    config: DatasetConfig,
    rng: random.Random,
) -> List[TimeRegistration]:
    """Draw up to ``num_registrations_per_employee`` registrations per pattern.

    Dates are drawn without replacement from the employee's eligible pool, so
    an employee never has two registrations on one day. When the pool runs
    out the employee simply gets fewer registrations.
    """

    registrations: List[TimeRegistration] = []
    projects = list(config.projects)

    for emp_idx, pattern in enumerate(patterns):
        pool = eligible_dates(pattern, day_range, skip_weekends=config.skip_weekends)
        requested = max(0, config.num_registrations_per_employee)
        if len(pool) < requested:
            logger.debug(
                f"{pattern.employee_id}: only {len(pool)} eligible dates for "
                f"{requested} requested registrations"
            )

        for _ in range(requested):
            if not pool:
                break
            reg_date = pool.pop(rng.randrange(len(pool)))

            start_time = rng.choice(pattern.allowed_start_times)
            end_time = rng.choice(pattern.allowed_end_times)
            if end_time <= start_time:
                end_time = start_time + FALLBACK_SHIFT_HOURS

            break_duration = rng.choice(pattern.allowed_break_durations)
            # Not clamped: a long break on a short shift yields a negative value.
            work_duration = end_time - start_time - break_duration

            if config.randomize_assignments:
                project_id = rng.choice(projects)
            else:
                project_id = projects[emp_idx % len(projects)]

            registrations.append(
                TimeRegistration(
                    registration_id=f"reg-{len(registrations)}",
                    date=reg_date,
                    employee_id=pattern.employee_id,
                    project_id=project_id,
                    department_id=pattern.department_id,
                    work_category=rng.choice(pattern.allowed_work_categories),
                    start_time=start_time,
                    end_time=end_time,
                    work_duration=work_duration,
                    break_duration=break_duration,
                    public_holiday=rng.random() < PUBLIC_HOLIDAY_PROBABILITY,
                    numericals=_draw_numericals(rng, config),
                )
            )

    return registrations
