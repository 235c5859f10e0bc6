"""Data model for synthetic time registrations.

A work pattern is the "contract" that constrains every registration an
employee produces: the start/end times, break durations and work categories
the employee may draw from, the department they belong to, and whether they
may be scheduled on weekends. Registrations are immutable records; anomaly
injection produces modified copies rather than mutating them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

from .calendar import parse_iso_date


class ValidationError(ValueError):
    """Raised when a dataset configuration cannot produce a meaningful dataset."""


class AnomalySeverity(Enum):
    """Severity tag attached to a registration."""

    NONE = "none"
    WEAK = "weak"
    STRONG = "strong"


class AnomalyType(Enum):
    """Which anomaly classes the injector may produce.

    ``BOTH`` dispatches 50/50 to the weak and strong cases.
    """

    NONE = "none"
    WEAK = "weak"
    STRONG = "strong"
    BOTH = "both"


@dataclass(frozen=True)
class Numerical:
    name: str
    value: float

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "value": self.value}


@dataclass(frozen=True)
class AnomalyInfo:
    """Severity and human-readable label of the mutated attribute."""

    severity: AnomalySeverity
    field: str

    def __post_init__(self) -> None:
        if self.severity is AnomalySeverity.NONE:
            raise ValueError("AnomalyInfo requires a weak or strong severity")


@dataclass(frozen=True)
class EmployeeWorkPattern:
    """Constrained set of plausible attribute values for one employee.

    Attributes
    ----------
    employee_id:
        Stable identifier (``employee-<index>``).
    department_id:
        Single department the employee belongs to.
    allowed_start_times, allowed_end_times, allowed_break_durations:
        Sorted, duplicate-free hour values drawn from a regular grid.
    allowed_work_categories:
        Category labels the employee may book on.
    can_work_weekends:
        Whether the employee may be scheduled on Saturdays and Sundays.
    """

    employee_id: str
    department_id: str
    allowed_start_times: Tuple[float, ...]
    allowed_end_times: Tuple[float, ...]
    allowed_break_durations: Tuple[float, ...]
    allowed_work_categories: Tuple[str, ...]
    can_work_weekends: bool

    def __post_init__(self) -> None:
        for name in (
            "allowed_start_times",
            "allowed_end_times",
            "allowed_break_durations",
            "allowed_work_categories",
        ):
            if not getattr(self, name):
                raise ValueError(f"{name} must not be empty")

    def to_dict(self) -> dict[str, Any]:
        return {
            "employee_id": self.employee_id,
            "department_id": self.department_id,
            "allowed_start_times": list(self.allowed_start_times),
            "allowed_end_times": list(self.allowed_end_times),
            "allowed_break_durations": list(self.allowed_break_durations),
            "allowed_work_categories": list(self.allowed_work_categories),
            "can_work_weekends": self.can_work_weekends,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EmployeeWorkPattern":
        return cls(
            employee_id=str(data["employee_id"]),
            department_id=str(data["department_id"]),
            allowed_start_times=tuple(float(v) for v in data["allowed_start_times"]),
            allowed_end_times=tuple(float(v) for v in data["allowed_end_times"]),
            allowed_break_durations=tuple(
                float(v) for v in data["allowed_break_durations"]
            ),
            allowed_work_categories=tuple(
                str(v) for v in data["allowed_work_categories"]
            ),
            can_work_weekends=bool(data["can_work_weekends"]),
        )


@dataclass(frozen=True)
class TimeRegistration:
    registration_id: str
    date: date
    employee_id: str
    project_id: str
    department_id: str
    work_category: str
    start_time: float
    end_time: float
    work_duration: float
    break_duration: float
    public_holiday: bool
    numericals: Tuple[Numerical, ...] = ()
    anomaly: Optional[AnomalyInfo] = None

    @property
    def iso_date(self) -> str:
        return self.date.isoformat()

    @property
    def anomaly_severity(self) -> AnomalySeverity:
        return self.anomaly.severity if self.anomaly else AnomalySeverity.NONE

    @property
    def anomaly_field(self) -> Optional[str]:
        return self.anomaly.field if self.anomaly else None

    @property
    def is_anomalous(self) -> bool:
        return self.anomaly is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "registration_id": self.registration_id,
            "date": self.iso_date,
            "employee_id": self.employee_id,
            "project_id": self.project_id,
            "department_id": self.department_id,
            "work_category": self.work_category,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "work_duration": self.work_duration,
            "break_duration": self.break_duration,
            "public_holiday": self.public_holiday,
            "numericals": [n.to_dict() for n in self.numericals],
            "anomaly": self.anomaly_severity.value,
            "anomaly_field": self.anomaly_field,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TimeRegistration":
        reg_date = parse_iso_date(data["date"])
        severity = AnomalySeverity(data.get("anomaly") or "none")
        anomaly = None
        if severity is not AnomalySeverity.NONE:
            anomaly = AnomalyInfo(severity, str(data.get("anomaly_field") or ""))
        return cls(
            registration_id=str(data["registration_id"]),
            date=reg_date,
            employee_id=str(data["employee_id"]),
            project_id=str(data["project_id"]),
            department_id=str(data["department_id"]),
            work_category=str(data["work_category"]),
            start_time=float(data["start_time"]),
            end_time=float(data["end_time"]),
            work_duration=float(data["work_duration"]),
            break_duration=float(data["break_duration"]),
            public_holiday=bool(data["public_holiday"]),
            numericals=tuple(
                Numerical(str(n["name"]), float(n["value"]))
                for n in data.get("numericals") or ()
            ),
            anomaly=anomaly,
        )


@dataclass(frozen=True)
class AnomalyConfig:
    type: AnomalyType = AnomalyType.NONE
    probability: float = 0.33

    def __post_init__(self) -> None:
        if not isinstance(self.type, AnomalyType):
            object.__setattr__(self, "type", AnomalyType(self.type))
        if not 0.0 <= self.probability <= 1.0:
            raise ValueError("anomaly probability must be within [0, 1]")


@dataclass(frozen=True)
class WorkPatternConfig:
    """Per-field cardinalities for work patterns.

    Values below 1 are clamped to 1 during generation; ``min_weekend_workers``
    is clamped to ``[0, num_employees]``.
    """

    num_departments: int = 1
    num_start_times: int = 1
    num_end_times: int = 1
    num_break_durations: int = 1
    num_work_categories: int = 1
    min_weekend_workers: int = 1


@dataclass(frozen=True)
class NumericalMetricSpec:
    """Named business metric drawn as an integer in ``[minimum, maximum]``."""

    name: str
    minimum: int = 0
    maximum: int = 99

    def __post_init__(self) -> None:
        if self.minimum > self.maximum:
            raise ValueError(f"metric {self.name!r}: minimum must be <= maximum")


@dataclass(frozen=True)
class DatasetConfig:
    """Input configuration for a generation call.

    Defaults mirror the dataset generation form: five employees over four
    projects, categories and departments, 35 registrations each, shifts
    starting 7-9 and ending 16-18 with 0.5-2h breaks.
    """

    start_date: date
    end_date: date
    num_employees: int = 5
    projects: Tuple[str, ...] = ("A", "B", "C", "D")
    work_categories: Tuple[str, ...] = (
        "Development",
        "Testing",
        "Meetings",
        "Documentation",
    )
    departments: Tuple[str, ...] = ("HR", "IT", "Sales", "Marketing")
    num_registrations_per_employee: int = 35
    work_start_range: Tuple[float, float] = (7.0, 9.0)
    work_end_range: Tuple[float, float] = (16.0, 18.0)
    break_duration_range: Tuple[float, float] = (0.5, 2.0)
    skip_weekends: bool = True
    randomize_assignments: bool = True
    anomaly_config: AnomalyConfig = field(default_factory=AnomalyConfig)
    work_pattern_config: WorkPatternConfig = field(default_factory=WorkPatternConfig)
    numerical_metrics: Tuple[NumericalMetricSpec, ...] = ()

    def __post_init__(self) -> None:
        # Accept ISO strings and lists as they arrive from JSON or forms.
        object.__setattr__(self, "start_date", parse_iso_date(self.start_date))
        object.__setattr__(self, "end_date", parse_iso_date(self.end_date))
        for name in (
            "projects",
            "work_categories",
            "departments",
            "work_start_range",
            "work_end_range",
            "break_duration_range",
            "numerical_metrics",
        ):
            object.__setattr__(self, name, tuple(getattr(self, name)))
