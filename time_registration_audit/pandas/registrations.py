"""Pandas DataFrame adapters for registrations and work patterns."""

from typing import List, Sequence

import pandas as pd  # type: ignore

from time_registration_audit.synthetic.models import (
    EmployeeWorkPattern,
    TimeRegistration,
)

REGISTRATION_COLUMNS = [
    "registration_id",
    "date",
    "employee_id",
    "project_id",
    "department_id",
    "work_category",
    "start_time",
    "end_time",
    "work_duration",
    "break_duration",
    "public_holiday",
    "anomaly",
    "anomaly_field",
]

PATTERN_COLUMNS = [
    "employee_id",
    "department_id",
    "allowed_start_times",
    "allowed_end_times",
    "allowed_break_durations",
    "allowed_work_categories",
    "can_work_weekends",
]


def registrations_to_dataframe(
    registrations: Sequence[TimeRegistration],
) -> pd.DataFrame:
    """Convert registrations to a DataFrame.

    Args:
        registrations: Sequence of TimeRegistration objects

    Returns:
        DataFrame with one row per registration and the columns in
        ``REGISTRATION_COLUMNS``, plus one ``num_<name>`` column per
        numerical metric. ``date`` is datetime64, ``anomaly`` holds the
        severity value ("none", "weak" or "strong").

    Example:
        >>> dataset = generate_dataset(BASELINE_SCENARIO, seed=1)
        >>> df = registrations_to_dataframe(dataset.registrations)
        >>> df.groupby("employee_id")["work_duration"].sum()
    """
    if not registrations:
        return pd.DataFrame(columns=REGISTRATION_COLUMNS)

    rows = []
    for r in registrations:
        row = {
            "registration_id": r.registration_id,
            "date": pd.Timestamp(r.date),
            "employee_id": r.employee_id,
            "project_id": r.project_id,
            "department_id": r.department_id,
            "work_category": r.work_category,
            "start_time": r.start_time,
            "end_time": r.end_time,
            "work_duration": r.work_duration,
            "break_duration": r.break_duration,
            "public_holiday": r.public_holiday,
            "anomaly": r.anomaly_severity.value,
            "anomaly_field": r.anomaly_field,
        }
        for n in r.numericals:
            row[f"num_{n.name}"] = n.value
        rows.append(row)

    return pd.DataFrame(rows)


def dataframe_to_registrations(df: pd.DataFrame) -> List[TimeRegistration]:
    """Convert a DataFrame produced by :func:`registrations_to_dataframe` back.

    Raises:
        ValueError: If required columns are missing or contain nulls
    """
    missing_cols = set(REGISTRATION_COLUMNS) - set(df.columns)
    if missing_cols:
        raise ValueError(f"DataFrame missing required columns: {missing_cols}")

    if df.empty:
        return []

    required = [c for c in REGISTRATION_COLUMNS if c != "anomaly_field"]
    null_cols = df[required].isnull().any()
    if null_cols.any():
        null_col_names = null_cols[null_cols].index.tolist()
        raise ValueError(f"Null/NaN values found in columns: {null_col_names}")

    numerical_cols = [c for c in df.columns if c.startswith("num_")]
    registrations = []
    for record in df.to_dict("records"):
        field = record["anomaly_field"]
        registrations.append(
            TimeRegistration.from_dict(
                {
                    **record,
                    "date": pd.to_datetime(record["date"]).date(),
                    "anomaly_field": None if pd.isna(field) else field,
                    "numericals": [
                        {"name": c[len("num_") :], "value": record[c]}
                        for c in numerical_cols
                        if not pd.isna(record[c])
                    ],
                }
            )
        )
    return registrations


def patterns_to_dataframe(patterns: Sequence[EmployeeWorkPattern]) -> pd.DataFrame:
    """One row per employee; allowed sets are kept as lists."""
    if not patterns:
        return pd.DataFrame(columns=PATTERN_COLUMNS)
    df = pd.DataFrame([p.to_dict() for p in patterns], columns=PATTERN_COLUMNS)
    return df


def anomaly_summary(registrations: Sequence[TimeRegistration]) -> pd.DataFrame:
    """Count anomalous registrations per severity and mutated field.

    Returns a DataFrame with columns ``anomaly``, ``anomaly_field``, ``count``
    sorted by descending count.
    """
    columns = ["anomaly", "anomaly_field", "count"]
    df = registrations_to_dataframe(registrations)
    if df.empty:
        return pd.DataFrame(columns=columns)
    anomalous = df[df["anomaly"] != "none"]
    if anomalous.empty:
        return pd.DataFrame(columns=columns)
    summary = (
        anomalous.groupby(["anomaly", "anomaly_field"])
        .size()
        .reset_index(name="count")
        .sort_values(["count", "anomaly", "anomaly_field"], ascending=[False, True, True])
        .reset_index(drop=True)
    )
    return summary
