"""Per-employee work pattern generation.

Patterns are built strictly in ascending employee order. The weekend quota
is a running count over employees already processed, so the forcing rule
on the tail of the iteration only holds when the loop is sequential; run
this pass to completion before any registration synthesis.
"""

from __future__ import annotations

import logging
import random
from typing import List, Mapping, Optional, Sequence, TypeVar

from .calendar import time_grid
from .models import DatasetConfig, EmployeeWorkPattern

logger = logging.getLogger(__name__)

TIME_INCREMENT = 0.5
WEEKEND_WORKER_PROBABILITY = 0.2

T = TypeVar("T")


def employee_id_for(index: int) -> str:
    return f"employee-{index}"


def _sample(rng: random.Random, pool: Sequence[T], requested: int) -> List[T]:
    # At least one value, at most the whole pool.
    k = min(max(1, requested), len(pool))
    return rng.sample(list(pool), k)


def _decide_weekend_eligibility(
    rng: random.Random,
    index: int,
    num_employees: int,
    weekend_so_far: int,
    min_weekend_workers: int,
) -> bool:
    remaining_required = min_weekend_workers - weekend_so_far
    remaining_employees = num_employees - index
    if remaining_required > 0 and remaining_required >= remaining_employees:
        return True
    if remaining_required > 0:
        return rng.random() < WEEKEND_WORKER_PROBABILITY
    return False


def create_work_pattern(
    employee_id: str,
    config: DatasetConfig,
    rng: random.Random,
    *,
    can_work_weekends: bool,
) -> EmployeeWorkPattern:
    """Draw a fresh pattern for one employee (weekend flag decided by caller)."""

    wp = config.work_pattern_config
    start_times = _sample(
        rng, time_grid(*config.work_start_range, step=TIME_INCREMENT), wp.num_start_times
    )
    end_times = _sample(
        rng, time_grid(*config.work_end_range, step=TIME_INCREMENT), wp.num_end_times
    )
    break_durations = _sample(
        rng,
        time_grid(*config.break_duration_range, step=TIME_INCREMENT),
        wp.num_break_durations,
    )

    num_departments = min(max(1, wp.num_departments), len(config.departments))
    department_id = rng.choice(config.departments[:num_departments])
    categories = _sample(rng, config.work_categories, wp.num_work_categories)

    return EmployeeWorkPattern(
        employee_id=employee_id,
        department_id=department_id,
        allowed_start_times=tuple(sorted(start_times)),
        allowed_end_times=tuple(sorted(end_times)),
        allowed_break_durations=tuple(sorted(break_durations)),
        allowed_work_categories=tuple(categories),
        can_work_weekends=can_work_weekends,
    )


def generate_work_patterns(
    num_employees: int,
    config: DatasetConfig,
    rng: random.Random,
    *,
    existing_patterns: Optional[Mapping[str, EmployeeWorkPattern]] = None,
) -> List[EmployeeWorkPattern]:
    """Return one pattern per employee ``0..num_employees-1``.

    Patterns found in ``existing_patterns`` are reused verbatim and count
    toward the weekend quota. New patterns are weekend-eligible with a small
    probability while the quota is unmet, and forced eligible once the
    remaining employees are just enough to meet it. At least
    ``min(min_weekend_workers, num_employees)`` patterns end up eligible
    unless reused patterns prevent it.
    """

    if num_employees <= 0:
        return []
    existing_patterns = existing_patterns or {}
    min_weekend = min(
        max(0, config.work_pattern_config.min_weekend_workers), num_employees
    )

    patterns: List[EmployeeWorkPattern] = []
    weekend_so_far = 0
    reused = 0
    for index in range(num_employees):
        employee_id = employee_id_for(index)
        pattern = existing_patterns.get(employee_id)
        if pattern is not None:
            reused += 1
        else:
            can_work_weekends = _decide_weekend_eligibility(
                rng, index, num_employees, weekend_so_far, min_weekend
            )
            pattern = create_work_pattern(
                employee_id, config, rng, can_work_weekends=can_work_weekends
            )
        if pattern.can_work_weekends:
            weekend_so_far += 1
        patterns.append(pattern)

    logger.debug(
        f"Built {num_employees} work patterns ({reused} reused, "
        f"{weekend_so_far} weekend-eligible, quota {min_weekend})"
    )
    return patterns
