"""Tests for the history + pending review scenario."""

from dataclasses import replace
from datetime import date

from time_registration_audit.review import (
    build_review_scenario,
    render_review_prompt,
)
from time_registration_audit.synthetic import (
    AnomalyConfig,
    AnomalyType,
    BASELINE_SCENARIO,
    check_dates_within_range,
)
from time_registration_audit.synthetic.calendar import is_weekend


def test_window_snaps_to_monday_and_spans_month_plus_week():
    # Wednesday
    scenario = build_review_scenario(
        BASELINE_SCENARIO, reference_monday=date(2024, 1, 3), seed=1
    )

    assert scenario.start_date == date(2024, 1, 1)
    assert scenario.end_date == date(2024, 2, 8)


def test_month_end_is_clamped():
    scenario = build_review_scenario(
        BASELINE_SCENARIO, reference_monday=date(2024, 1, 29), seed=1
    )

    # 2024-01-29 + one month -> 2024-02-29, + one week -> 2024-03-07
    assert scenario.end_date == date(2024, 3, 7)


def test_history_is_clean_and_pending_reuses_patterns():
    config = replace(
        BASELINE_SCENARIO,
        anomaly_config=AnomalyConfig(AnomalyType.STRONG, 1.0),
    )

    scenario = build_review_scenario(config, reference_monday=date(2024, 1, 1), seed=2)

    assert not any(r.is_anomalous for r in scenario.history.registrations)
    assert scenario.pending.patterns == scenario.history.patterns
    assert check_dates_within_range(
        scenario.history.registrations, date(2024, 1, 1), date(2024, 2, 1)
    ).ok


def test_pending_batch_contains_anomalies():
    config = replace(BASELINE_SCENARIO, num_employees=20)

    scenario = build_review_scenario(config, reference_monday=date(2024, 1, 1), seed=3)

    pending = scenario.pending.registrations
    assert pending
    assert any(r.is_anomalous for r in pending)
    clean = [r for r in pending if not r.is_anomalous]
    assert check_dates_within_range(clean, date(2024, 2, 1), date(2024, 2, 8)).ok


def test_history_respects_weekend_eligibility():
    scenario = build_review_scenario(
        BASELINE_SCENARIO, reference_monday=date(2024, 1, 1), seed=4
    )

    eligible = {p.employee_id for p in scenario.history.patterns if p.can_work_weekends}
    for r in scenario.history.registrations:
        if is_weekend(r.date):
            assert r.employee_id in eligible


def test_seeded_scenarios_reproduce():
    first = build_review_scenario(BASELINE_SCENARIO, reference_monday=date(2024, 1, 1), seed=5)
    second = build_review_scenario(BASELINE_SCENARIO, reference_monday=date(2024, 1, 1), seed=5)

    assert first.history.registrations == second.history.registrations
    assert first.pending.registrations == second.pending.registrations


def test_prompt_contains_both_batches():
    scenario = build_review_scenario(
        BASELINE_SCENARIO, reference_monday=date(2024, 1, 1), seed=6
    )

    prompt = render_review_prompt(scenario)

    assert prompt.startswith(
        "Your task is to approve time registrations of a department containing 5 employees."
    )
    history_row = scenario.history.registrations[0]
    assert f"0\t{history_row.iso_date}\t{history_row.employee_id}" in prompt
    pending_part = prompt.split("provide a comment for why you do what you do.")[1]
    assert pending_part.strip().count("\n") == len(scenario.pending.registrations) - 1
