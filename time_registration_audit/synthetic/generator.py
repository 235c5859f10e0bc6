from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from .anomalies import inject_anomalies
from .calendar import build_date_range
from .models import (
    DatasetConfig,
    EmployeeWorkPattern,
    TimeRegistration,
    ValidationError,
)
from .patterns import generate_work_patterns
from .registrations import generate_registrations

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedDataset:
    """Result of one generation call.

    Attributes
    ----------
    registrations: Registrations in creation order, anomalies applied.
    patterns: One pattern per employee, ascending employee index.
    pattern_cache: The caller's cache merged with ``patterns``; pass it to the
        next call to keep the same synthetic employees consistent.
    """

    registrations: List[TimeRegistration]
    patterns: List[EmployeeWorkPattern]
    pattern_cache: Dict[str, EmployeeWorkPattern] = field(default_factory=dict)


def validate_dataset_config(config: DatasetConfig) -> None:
    """Raise :class:`ValidationError` for configurations a form should reject.

    :func:`generate_dataset` does not call this; it tolerates an inverted
    interval by producing an empty dataset.
    """

    if config.end_date < config.start_date:
        raise ValidationError("Start date must be before end date")
    if config.num_employees < 0:
        raise ValidationError("num_employees must be >= 0")
    if config.num_registrations_per_employee < 0:
        raise ValidationError("num_registrations_per_employee must be >= 0")
    for name in ("projects", "work_categories", "departments"):
        if not getattr(config, name):
            raise ValidationError(f"{name} must contain at least one entry")
    for name in ("work_start_range", "work_end_range", "break_duration_range"):
        bounds = getattr(config, name)
        if len(bounds) != 2:
            raise ValidationError(f"{name} must be a [min, max] pair")
        if bounds[0] > bounds[1]:
            raise ValidationError(f"{name} minimum must be <= maximum")
    if config.work_pattern_config.min_weekend_workers > config.num_employees:
        logger.warning(
            f"min_weekend_workers={config.work_pattern_config.min_weekend_workers} "
            f"exceeds num_employees={config.num_employees}; capping at {config.num_employees}"
        )


def generate_dataset(
    config: DatasetConfig,
    *,
    existing_patterns: Optional[Mapping[str, EmployeeWorkPattern]] = None,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> GeneratedDataset:
    """Generate registrations and work patterns for ``config``.

    Pattern assignment runs to completion before any registration is drawn.
    ``existing_patterns`` is read only; the merged cache is returned on the
    result. Pass either ``seed`` or an ``rng`` for reproducible output.
    """

    rng = rng or random.Random(seed)
    existing = dict(existing_patterns or {})

    # Full interval; weekends are dropped per employee by eligible_dates.
    day_range = build_date_range(config.start_date, config.end_date)
    patterns = generate_work_patterns(
        config.num_employees, config, rng, existing_patterns=existing
    )
    if not day_range:
        logger.info(
            f"No days between {config.start_date} and {config.end_date}; "
            "returning an empty registration set"
        )
        registrations: List[TimeRegistration] = []
    else:
        registrations = generate_registrations(patterns, day_range, config, rng)

    by_employee = {p.employee_id: p for p in patterns}
    registrations = inject_anomalies(
        registrations, config.anomaly_config, rng, patterns=by_employee
    )

    cache = dict(existing)
    cache.update(by_employee)

    logger.info(
        f"Generated {len(registrations)} registrations for {len(patterns)} employees "
        f"({config.start_date} to {config.end_date}, "
        f"{sum(1 for r in registrations if r.is_anomalous)} anomalous)"
    )
    return GeneratedDataset(
        registrations=registrations, patterns=patterns, pattern_cache=cache
    )
