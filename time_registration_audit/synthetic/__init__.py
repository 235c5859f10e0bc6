"""Synthetic time registration generation and validation utilities.

This package produces realistic-but-fake time-tracking datasets, with a
controlled share of labelled anomalies, for benchmarking anomaly detectors
without touching real employee data.
"""

from .models import (
    AnomalyConfig,
    AnomalyInfo,
    AnomalySeverity,
    AnomalyType,
    DatasetConfig,
    EmployeeWorkPattern,
    Numerical,
    NumericalMetricSpec,
    TimeRegistration,
    ValidationError,
    WorkPatternConfig,
)
from .calendar import build_date_range
from .patterns import generate_work_patterns
from .registrations import eligible_dates, generate_registrations
from .anomalies import (
    inject_anomalies,
    introduce_strong_anomaly,
    introduce_weak_anomaly,
)
from .generator import GeneratedDataset, generate_dataset, validate_dataset_config
from .validation import (
    ValidationResult,
    check_anomaly_labels,
    check_dates_within_range,
    check_no_duplicate_employee_days,
    check_registrations_match_patterns,
    check_registrations_per_employee,
    check_weekday_only_for_ineligible,
    check_weekend_quota,
    check_work_duration_consistency,
)
from .scenarios import (
    BASELINE_SCENARIO,
    WEAK_ANOMALY_SCENARIO,
    STRONG_ANOMALY_SCENARIO,
    MIXED_ANOMALY_SCENARIO,
    WEEKEND_SHIFT_SCENARIO,
    FLEXIBLE_HOURS_SCENARIO,
    with_period,
)

__all__ = [
    "AnomalyConfig",
    "AnomalyInfo",
    "AnomalySeverity",
    "AnomalyType",
    "DatasetConfig",
    "EmployeeWorkPattern",
    "Numerical",
    "NumericalMetricSpec",
    "TimeRegistration",
    "ValidationError",
    "WorkPatternConfig",
    "build_date_range",
    "generate_work_patterns",
    "eligible_dates",
    "generate_registrations",
    "inject_anomalies",
    "introduce_strong_anomaly",
    "introduce_weak_anomaly",
    "GeneratedDataset",
    "generate_dataset",
    "validate_dataset_config",
    "ValidationResult",
    "check_anomaly_labels",
    "check_dates_within_range",
    "check_no_duplicate_employee_days",
    "check_registrations_match_patterns",
    "check_registrations_per_employee",
    "check_weekday_only_for_ineligible",
    "check_weekend_quota",
    "check_work_duration_consistency",
    "BASELINE_SCENARIO",
    "WEAK_ANOMALY_SCENARIO",
    "STRONG_ANOMALY_SCENARIO",
    "MIXED_ANOMALY_SCENARIO",
    "WEEKEND_SHIFT_SCENARIO",
    "FLEXIBLE_HOURS_SCENARIO",
    "with_period",
]
