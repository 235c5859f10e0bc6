"""Pandas DataFrame adapters for time registration datasets."""

from .registrations import (
    registrations_to_dataframe,
    dataframe_to_registrations,
    patterns_to_dataframe,
    anomaly_summary,
)

__all__ = [
    "registrations_to_dataframe",
    "dataframe_to_registrations",
    "patterns_to_dataframe",
    "anomaly_summary",
]
