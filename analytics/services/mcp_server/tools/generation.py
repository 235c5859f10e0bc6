"""Time Registration Generation MCP Tools"""

import os
from collections import Counter
from datetime import date
from pathlib import Path
from typing import Literal

import structlog
from fastmcp import Context
from pydantic import BaseModel, Field, model_validator

from time_registration_audit.exports import (
    export_dataset_json,
    export_registrations_tsv,
    filter_registrations_by_date,
)
from time_registration_audit.synthetic import (
    AnomalyConfig,
    AnomalyType,
    DatasetConfig,
    NumericalMetricSpec,
    WorkPatternConfig,
    generate_dataset,
    validate_dataset_config,
)

from analytics.services.mcp_server.instance import mcp
from analytics.services.mcp_server.state import LATEST_DATASET_KEY, get_shared_state

logger = structlog.get_logger(__name__)

# Allowed base directory for export files
# Default to current working directory, can be overridden via environment variable
ALLOWED_BASE_DIR = Path(os.environ.get("MCP_DATA_DIR", os.getcwd())).resolve()


def _resolve_output_path(path: str) -> Path:
    """Resolve ``path`` and ensure it stays inside the allowed base directory.

    Raises:
        ValueError: If path is outside allowed directory
    """
    resolved = Path(path)
    if not resolved.is_absolute():
        resolved = ALLOWED_BASE_DIR / resolved
    resolved = resolved.resolve()
    try:
        resolved.relative_to(ALLOWED_BASE_DIR)
    except ValueError as e:
        raise ValueError(
            f"Path {resolved} is outside allowed directory {ALLOWED_BASE_DIR}. "
            f"Only files within the allowed directory can be written."
        ) from e
    return resolved


class NumericalMetricRequest(BaseModel):
    name: str = Field(min_length=1)
    minimum: int = 0
    maximum: int = 99


class WorkPatternRequest(BaseModel):
    """Per-employee pattern cardinalities."""

    num_departments: int = Field(default=1, ge=1)
    num_start_times: int = Field(default=1, ge=1)
    num_end_times: int = Field(default=1, ge=1)
    num_break_durations: int = Field(default=1, ge=1)
    num_work_categories: int = Field(default=1, ge=1)
    min_weekend_workers: int = Field(default=1, ge=0)


class GenerateRegistrationsRequest(BaseModel):
    """Request to generate a synthetic time registration dataset."""

    start_date: date = Field(description="First day of the interval (inclusive)")
    end_date: date = Field(description="Last day of the interval (inclusive)")
    num_employees: int = Field(default=5, ge=0, le=1000)
    num_registrations_per_employee: int = Field(default=35, ge=0, le=366)
    projects: list[str] = Field(default=["A", "B", "C", "D"], min_length=1)
    work_categories: list[str] = Field(
        default=["Development", "Testing", "Meetings", "Documentation"], min_length=1
    )
    departments: list[str] = Field(
        default=["HR", "IT", "Sales", "Marketing"], min_length=1
    )
    work_start_range: tuple[float, float] = (7.0, 9.0)
    work_end_range: tuple[float, float] = (16.0, 18.0)
    break_duration_range: tuple[float, float] = (0.5, 2.0)
    skip_weekends: bool = True
    randomize_assignments: bool = True
    anomaly_type: Literal["none", "weak", "strong", "both"] = "none"
    anomaly_probability: float = Field(default=0.33, ge=0.0, le=1.0)
    work_pattern: WorkPatternRequest = Field(default_factory=WorkPatternRequest)
    numerical_metrics: list[NumericalMetricRequest] = Field(default_factory=list)
    reuse_patterns: bool = Field(
        default=True,
        description="Reuse work patterns cached by earlier calls for the same employee ids",
    )
    seed: int | None = Field(default=None, description="Seed for reproducible output")

    @model_validator(mode="after")
    def _check_interval(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

    def to_config(self) -> DatasetConfig:
        return DatasetConfig(
            start_date=self.start_date,
            end_date=self.end_date,
            num_employees=self.num_employees,
            projects=tuple(self.projects),
            work_categories=tuple(self.work_categories),
            departments=tuple(self.departments),
            num_registrations_per_employee=self.num_registrations_per_employee,
            work_start_range=self.work_start_range,
            work_end_range=self.work_end_range,
            break_duration_range=self.break_duration_range,
            skip_weekends=self.skip_weekends,
            randomize_assignments=self.randomize_assignments,
            anomaly_config=AnomalyConfig(
                type=AnomalyType(self.anomaly_type),
                probability=self.anomaly_probability,
            ),
            work_pattern_config=WorkPatternConfig(**self.work_pattern.model_dump()),
            numerical_metrics=tuple(
                NumericalMetricSpec(**m.model_dump()) for m in self.numerical_metrics
            ),
        )


class GenerateRegistrationsResponse(BaseModel):
    registration_count: int
    employee_count: int
    reused_pattern_count: int
    weekend_worker_count: int
    anomaly_counts: dict[str, int]
    anomaly_fields: dict[str, int]
    date_range: tuple[str, str]


class ExportRegistrationsRequest(BaseModel):
    """Export the most recently generated dataset."""

    output_path: str = Field(description="Destination file inside MCP_DATA_DIR")
    format: Literal["tsv", "json"] = "tsv"
    start_date: date | None = Field(
        default=None, description="TSV only: first date to include"
    )
    end_date: date | None = Field(
        default=None, description="TSV only: last date to include"
    )


class ExportRegistrationsResponse(BaseModel):
    output_path: str
    row_count: int


async def _generate_time_registrations_impl(
    request: GenerateRegistrationsRequest, ctx: Context
) -> GenerateRegistrationsResponse:
    """Implementation of dataset generation.

    Args:
        request: Generation parameters
        ctx: MCP context
    """
    config = request.to_config()
    validate_dataset_config(config)

    shared_state = get_shared_state()
    existing = shared_state.pattern_cache() if request.reuse_patterns else {}

    await ctx.info(
        f"Generating registrations for {config.num_employees} employees "
        f"from {config.start_date} to {config.end_date}"
    )
    await ctx.report_progress(0.2, "Generating work patterns and registrations...")

    dataset = generate_dataset(config, existing_patterns=existing, seed=request.seed)

    shared_state.replace_pattern_cache(dataset.pattern_cache)
    shared_state.set(LATEST_DATASET_KEY, dataset)

    reused = sum(1 for p in dataset.patterns if p.employee_id in existing)
    severities = Counter(r.anomaly_severity.value for r in dataset.registrations)
    fields = Counter(
        r.anomaly_field for r in dataset.registrations if r.anomaly_field is not None
    )

    logger.info(
        "time_registrations_generated",
        registrations=len(dataset.registrations),
        employees=len(dataset.patterns),
        reused_patterns=reused,
        anomaly_type=request.anomaly_type,
    )
    await ctx.report_progress(1.0, "Done")

    return GenerateRegistrationsResponse(
        registration_count=len(dataset.registrations),
        employee_count=len(dataset.patterns),
        reused_pattern_count=reused,
        weekend_worker_count=sum(1 for p in dataset.patterns if p.can_work_weekends),
        anomaly_counts={
            severity: severities.get(severity, 0)
            for severity in ("none", "weak", "strong")
        },
        anomaly_fields=dict(fields),
        date_range=(config.start_date.isoformat(), config.end_date.isoformat()),
    )


async def _export_time_registrations_impl(
    request: ExportRegistrationsRequest, ctx: Context
) -> ExportRegistrationsResponse:
    dataset = get_shared_state().get(LATEST_DATASET_KEY)
    if dataset is None:
        raise ValueError(
            "No dataset available. Call generate_time_registrations first."
        )

    output_path = _resolve_output_path(request.output_path)
    if request.format == "json":
        export_dataset_json(dataset, output_path)
        row_count = len(dataset.registrations)
    else:
        rows = filter_registrations_by_date(
            dataset.registrations, request.start_date, request.end_date
        )
        export_registrations_tsv(rows, output_path)
        row_count = len(rows)

    await ctx.info(f"Exported {row_count} registrations to {output_path}")
    logger.info(
        "time_registrations_exported",
        path=str(output_path),
        format=request.format,
        rows=row_count,
    )
    return ExportRegistrationsResponse(output_path=str(output_path), row_count=row_count)


async def _clear_work_patterns_impl(ctx: Context) -> dict[str, int]:
    shared_state = get_shared_state()
    cleared = len(shared_state.pattern_cache())
    shared_state.replace_pattern_cache({})
    await ctx.info(f"Cleared {cleared} cached work patterns")
    logger.info("work_patterns_cleared", cleared=cleared)
    return {"cleared_patterns": cleared}


@mcp.tool()
async def generate_time_registrations(
    request: GenerateRegistrationsRequest, ctx: Context
) -> GenerateRegistrationsResponse:
    """
    Generate synthetic employee time registrations with labelled anomalies.

    Each employee gets a work pattern (allowed start/end times, breaks,
    categories, department, weekend eligibility). Patterns are cached across
    calls, so generating a follow-up period for the same team keeps every
    employee's habits consistent. Set reuse_patterns=false to start over.

    Args:
        request: Dataset parameters

    Returns:
        Counts of registrations, employees and anomalies per severity/field
    """
    return await _generate_time_registrations_impl(request, ctx)


@mcp.tool()
async def export_time_registrations(
    request: ExportRegistrationsRequest, ctx: Context
) -> ExportRegistrationsResponse:
    """
    Write the most recently generated dataset to disk.

    TSV output uses the approval-tool layout (status, date, employee,
    project, department, category, start, end, duration, break, holiday)
    and can be limited to a date range. JSON output contains registrations
    and patterns with anomaly labels.
    """
    return await _export_time_registrations_impl(request, ctx)


@mcp.tool()
async def clear_work_patterns(ctx: Context) -> dict[str, int]:
    """Forget all cached work patterns so the next generation starts a new team."""
    return await _clear_work_patterns_impl(ctx)
