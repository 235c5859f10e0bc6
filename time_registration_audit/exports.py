"""Export generated registrations to text formats.

The tab-separated layout is the one pasted into the approval tooling: no
header, one registration per line, columns

    status ("0"), date, employee, project, department, category,
    start (HH:MM), end (HH:MM), duration ("<n>h"), break ("<n>h"),
    holiday ("Yes"/"No")
"""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterable, List, Literal, Mapping, Optional, Sequence

from time_registration_audit.synthetic.generator import GeneratedDataset
from time_registration_audit.synthetic.models import (
    EmployeeWorkPattern,
    TimeRegistration,
)

logger = logging.getLogger(__name__)

TSV_STATUS = "0"

SORTABLE_FIELDS = (
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
)


def format_clock_time(hours: float) -> str:
    """Render an hour-of-day float as ``HH:MM``, rounded to the minute.

    Values outside 0-24 (e.g. after a strong time shift) are not wrapped:
    ``-2.0`` renders as ``-2:00`` and ``25.0`` as ``25:00``.

    >>> format_clock_time(7.5)
    '07:30'
    """
    whole, minutes = divmod(round(hours * 60), 60)
    return f"{whole:02d}:{minutes:02d}"


def format_hours(value: float) -> str:
    """Render a duration as ``<n>h`` without a trailing ``.0``.

    >>> format_hours(8.0), format_hours(7.5)
    ('8h', '7.5h')
    """
    rounded = round(value, 2)
    if rounded == int(rounded):
        return f"{int(rounded)}h"
    return f"{rounded:g}h"


def registration_to_tsv_row(reg: TimeRegistration) -> str:
    return "\t".join(
        [
            TSV_STATUS,
            reg.iso_date,
            reg.employee_id,
            reg.project_id,
            reg.department_id,
            reg.work_category,
            format_clock_time(reg.start_time),
            format_clock_time(reg.end_time),
            format_hours(reg.work_duration),
            format_hours(reg.break_duration),
            "Yes" if reg.public_holiday else "No",
        ]
    )


def registrations_to_tsv(registrations: Iterable[TimeRegistration]) -> str:
    return "\n".join(registration_to_tsv_row(r) for r in registrations)


def filter_registrations_by_date(
    registrations: Iterable[TimeRegistration],
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> List[TimeRegistration]:
    """Keep registrations dated within ``[start, end]``; missing bounds are open."""
    return [
        r
        for r in registrations
        if (start is None or r.date >= start) and (end is None or r.date <= end)
    ]


def sort_registrations(
    registrations: Sequence[TimeRegistration],
    field: str,
    direction: Optional[Literal["asc", "desc"]],
) -> List[TimeRegistration]:
    """Stable sort by one registration attribute.

    An empty ``field`` or ``None`` direction keeps the original order.
    """
    if not field or direction is None:
        return list(registrations)
    if field not in SORTABLE_FIELDS:
        raise ValueError(f"Cannot sort by {field!r}; expected one of {SORTABLE_FIELDS}")
    if direction not in ("asc", "desc"):
        raise ValueError(f"direction must be 'asc' or 'desc', got {direction!r}")
    return sorted(
        registrations,
        key=lambda r: getattr(r, field),
        reverse=direction == "desc",
    )


def dataset_to_serialisable(dataset: GeneratedDataset) -> Dict[str, Any]:
    return {
        "registrations": [r.to_dict() for r in dataset.registrations],
        "patterns": [p.to_dict() for p in dataset.patterns],
    }


def export_dataset_json(dataset: GeneratedDataset, output_path: str | Path) -> Path:
    """Write registrations and patterns to ``output_path`` as JSON."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as fh:
        json.dump(dataset_to_serialisable(dataset), fh, indent=2)
    logger.info(
        f"Wrote {len(dataset.registrations)} registrations and "
        f"{len(dataset.patterns)} patterns to {output_path}"
    )
    return output_path


def export_registrations_tsv(
    registrations: Iterable[TimeRegistration], output_path: str | Path
) -> Path:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    text = registrations_to_tsv(registrations)
    output_path.write_text(text + "\n" if text else "", encoding="utf-8")
    return output_path


def save_pattern_cache(
    cache: Mapping[str, EmployeeWorkPattern], output_path: str | Path
) -> Path:
    """Persist a pattern cache so later runs keep the same synthetic employees."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {emp_id: pattern.to_dict() for emp_id, pattern in cache.items()}
    with output_path.open("w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2, sort_keys=True)
    return output_path


def load_pattern_cache(path: str | Path) -> Dict[str, EmployeeWorkPattern]:
    path = Path(path)
    with path.open("r", encoding="utf-8") as fh:
        payload = json.load(fh)
    if not isinstance(payload, dict):
        raise ValueError("Expected a mapping of employee id to pattern")
    try:
        cache = {
            str(emp_id): EmployeeWorkPattern.from_dict(data)
            for emp_id, data in payload.items()
        }
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed work pattern in {path}: {e!r}") from e
    logger.info(f"Loaded {len(cache)} cached work patterns from {path}")
    return cache
