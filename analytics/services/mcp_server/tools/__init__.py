"""MCP Tools for synthetic time registration generation."""

from .generation import (
    clear_work_patterns,
    export_time_registrations,
    generate_time_registrations,
)

__all__ = [
    "generate_time_registrations",
    "export_time_registrations",
    "clear_work_patterns",
]
