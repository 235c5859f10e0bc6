"""Build a registration-approval task from two linked synthetic batches.

A reviewer (human or language model) gets a month of clean history for a team
and a following week that contains mixed weak and strong anomalies. Both
batches come from the same work patterns, so the history is a fair reference
for judging the new registrations.
"""

from __future__ import annotations

import logging
from calendar import monthrange
from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import Optional

from time_registration_audit.exports import registrations_to_tsv
from time_registration_audit.synthetic.generator import (
    GeneratedDataset,
    generate_dataset,
)
from time_registration_audit.synthetic.models import (
    AnomalyConfig,
    AnomalyType,
    DatasetConfig,
)

logger = logging.getLogger(__name__)

REVIEW_ANOMALY_PROBABILITY = 0.33

PROMPT_TEMPLATE = """Your task is to approve time registrations of a department containing {num_employees} employees. You have to approve, request information, or deny registrations. To base your decision making, you have the previous month of registrations, that you can use to guide your decision as to whether an employee has mistyped, or committed fraud.

The registrations from the previous months are here, with the columns:

Status: always (0) or blank
Date
Employee
Project
Department
Category
Start Time
End Time
Duration
Break
Holiday

{history}

These are the registrations for which you must make a decision to approve, request information, or deny. Whatever you do, provide a comment for why you do what you do.

{pending}"""


@dataclass(frozen=True)
class ReviewScenario:
    history: GeneratedDataset
    pending: GeneratedDataset
    start_date: date
    end_date: date


def _add_month(day: date) -> date:
    year = day.year + (1 if day.month == 12 else 0)
    month = day.month % 12 + 1
    return date(year, month, min(day.day, monthrange(year, month)[1]))


def build_review_scenario(
    config: DatasetConfig,
    *,
    reference_monday: Optional[date] = None,
    seed: Optional[int] = None,
) -> ReviewScenario:
    """Generate one clean month from ``reference_monday`` and one anomalous week after it.

    ``reference_monday`` defaults to the Monday of the current week. The
    configuration's own dates and anomaly settings are ignored.
    """

    monday = reference_monday or date.today()
    monday = monday - timedelta(days=monday.weekday())
    one_month_later = _add_month(monday)
    one_week_after = one_month_later + timedelta(weeks=1)

    history = generate_dataset(
        replace(
            config,
            start_date=monday,
            end_date=one_month_later,
            anomaly_config=AnomalyConfig(type=AnomalyType.NONE, probability=0.0),
        ),
        existing_patterns={},
        seed=seed,
    )
    pending = generate_dataset(
        replace(
            config,
            start_date=one_month_later,
            end_date=one_week_after,
            anomaly_config=AnomalyConfig(
                type=AnomalyType.BOTH, probability=REVIEW_ANOMALY_PROBABILITY
            ),
        ),
        existing_patterns=history.pattern_cache,
        seed=None if seed is None else seed + 1,
    )
    logger.info(
        f"Review scenario {monday} to {one_week_after}: "
        f"{len(history.registrations)} history, {len(pending.registrations)} pending"
    )
    return ReviewScenario(
        history=history,
        pending=pending,
        start_date=monday,
        end_date=one_week_after,
    )


def render_review_prompt(scenario: ReviewScenario) -> str:
    return PROMPT_TEMPLATE.format(
        num_employees=len(scenario.history.patterns),
        history=registrations_to_tsv(scenario.history.registrations),
        pending=registrations_to_tsv(scenario.pending.registrations),
    )
