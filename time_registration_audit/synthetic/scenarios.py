"""Pre-configured dataset scenarios for benchmarking anomaly detectors.

Each scenario covers January 2024; use :func:`with_period` to move it to a
different interval.

Examples
--------
>>> from datetime import date
>>> from time_registration_audit.synthetic import generate_dataset
>>> from time_registration_audit.synthetic.scenarios import MIXED_ANOMALY_SCENARIO, with_period
>>>
>>> config = with_period(MIXED_ANOMALY_SCENARIO, date(2024, 3, 1), date(2024, 3, 31))
>>> dataset = generate_dataset(config, seed=42)
"""

from dataclasses import replace
from datetime import date

from time_registration_audit.synthetic.models import (
    AnomalyConfig,
    AnomalyType,
    DatasetConfig,
    NumericalMetricSpec,
    WorkPatternConfig,
)

_START = date(2024, 1, 1)
_END = date(2024, 1, 31)

# Defaults of the dataset generation form, no anomalies
BASELINE_SCENARIO = DatasetConfig(start_date=_START, end_date=_END)

# Small slips only: an hour early, a longer break, an unknown project
WEAK_ANOMALY_SCENARIO = replace(
    BASELINE_SCENARIO,
    anomaly_config=AnomalyConfig(type=AnomalyType.WEAK, probability=0.33),
)

# Large deviations only: 3h shifts and uncontracted weekend work
STRONG_ANOMALY_SCENARIO = replace(
    BASELINE_SCENARIO,
    anomaly_config=AnomalyConfig(type=AnomalyType.STRONG, probability=0.33),
)

# Half weak, half strong; matches the review prompt follow-up batch
MIXED_ANOMALY_SCENARIO = replace(
    BASELINE_SCENARIO,
    anomaly_config=AnomalyConfig(type=AnomalyType.BOTH, probability=0.33),
)

# Larger team where a third must be available on weekends
WEEKEND_SHIFT_SCENARIO = replace(
    BASELINE_SCENARIO,
    num_employees=12,
    num_registrations_per_employee=20,
    work_pattern_config=WorkPatternConfig(
        num_departments=2,
        min_weekend_workers=4,
    ),
)

# Flexible hours with several allowed values per field and business metrics
FLEXIBLE_HOURS_SCENARIO = replace(
    BASELINE_SCENARIO,
    num_employees=10,
    work_start_range=(6.0, 10.0),
    work_end_range=(14.0, 19.0),
    break_duration_range=(0.0, 1.5),
    work_pattern_config=WorkPatternConfig(
        num_departments=4,
        num_start_times=3,
        num_end_times=3,
        num_break_durations=2,
        num_work_categories=2,
        min_weekend_workers=2,
    ),
    numerical_metrics=(
        NumericalMetricSpec("productivity", 0, 99),
        NumericalMetricSpec("quality", 0, 99),
    ),
    anomaly_config=AnomalyConfig(type=AnomalyType.BOTH, probability=0.2),
)


def with_period(config: DatasetConfig, start: date, end: date) -> DatasetConfig:
    """Return a copy of ``config`` covering ``[start, end]``."""
    return replace(config, start_date=start, end_date=end)


__all__ = [
    "BASELINE_SCENARIO",
    "WEAK_ANOMALY_SCENARIO",
    "STRONG_ANOMALY_SCENARIO",
    "MIXED_ANOMALY_SCENARIO",
    "WEEKEND_SHIFT_SCENARIO",
    "FLEXIBLE_HOURS_SCENARIO",
    "with_period",
]
