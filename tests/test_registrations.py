"""Tests for registration synthesis from work patterns."""

import random
from collections import Counter
from dataclasses import replace
from datetime import date

import pytest

from time_registration_audit.synthetic import (
    DatasetConfig,
    EmployeeWorkPattern,
    NumericalMetricSpec,
    WorkPatternConfig,
    build_date_range,
    check_no_duplicate_employee_days,
    check_registrations_match_patterns,
    check_work_duration_consistency,
    eligible_dates,
    generate_dataset,
    generate_registrations,
)
from time_registration_audit.synthetic.calendar import is_weekend

FIRST_WEEK = build_date_range(date(2024, 1, 1), date(2024, 1, 7))


def make_pattern(
    employee_id="employee-0",
    *,
    starts=(8.0,),
    ends=(17.0,),
    breaks=(0.5,),
    categories=("Development",),
    weekends=False,
):
    return EmployeeWorkPattern(
        employee_id=employee_id,
        department_id="IT",
        allowed_start_times=starts,
        allowed_end_times=ends,
        allowed_break_durations=breaks,
        allowed_work_categories=categories,
        can_work_weekends=weekends,
    )


@pytest.fixture
def config():
    return DatasetConfig(
        start_date=date(2024, 1, 1),
        end_date=date(2024, 1, 7),
        num_registrations_per_employee=10,
    )


class TestEligibleDates:
    def test_ineligible_employee_gets_weekdays_only(self):
        pool = eligible_dates(make_pattern(), FIRST_WEEK, skip_weekends=True)

        assert pool == FIRST_WEEK[:5]

    def test_weekend_worker_keeps_all_days(self):
        pool = eligible_dates(make_pattern(weekends=True), FIRST_WEEK, skip_weekends=True)

        assert pool == FIRST_WEEK

    def test_no_global_skip_keeps_all_days(self):
        pool = eligible_dates(make_pattern(), FIRST_WEEK, skip_weekends=False)

        assert pool == FIRST_WEEK


def test_first_week_scenario_gives_five_distinct_weekdays(config):
    """Mon-Sun, skip weekends, one ineligible employee, ten requested."""
    regs = generate_registrations([make_pattern()], FIRST_WEEK, config, random.Random(0))

    assert len(regs) == 5
    assert len({r.date for r in regs}) == 5
    assert not any(is_weekend(r.date) for r in regs)


def test_first_week_scenario_through_pipeline(config):
    config = replace(config, num_employees=1, work_pattern_config=WorkPatternConfig(min_weekend_workers=0))

    dataset = generate_dataset(config, seed=11)

    assert len(dataset.registrations) == 5
    assert sorted(r.date for r in dataset.registrations) == FIRST_WEEK[:5]


def test_weekend_worker_can_fill_the_whole_week(config):
    regs = generate_registrations(
        [make_pattern(weekends=True)], FIRST_WEEK, config, random.Random(0)
    )

    assert sorted(r.date for r in regs) == FIRST_WEEK


def test_count_bounded_by_request_and_dates_unique(config):
    config = replace(config, end_date=date(2024, 3, 31), num_registrations_per_employee=15)
    days = build_date_range(config.start_date, config.end_date)
    patterns = [make_pattern(f"employee-{i}") for i in range(4)]

    regs = generate_registrations(patterns, days, config, random.Random(42))

    counts = Counter(r.employee_id for r in regs)
    assert all(n == 15 for n in counts.values())
    assert check_no_duplicate_employee_days(regs).ok


def test_registration_ids_follow_creation_order(config):
    patterns = [make_pattern(f"employee-{i}") for i in range(3)]

    regs = generate_registrations(patterns, FIRST_WEEK, config, random.Random(1))

    assert [r.registration_id for r in regs] == [f"reg-{i}" for i in range(len(regs))]


def test_values_drawn_from_pattern(config):
    pattern = make_pattern(
        starts=(7.0, 8.5),
        ends=(16.0, 17.5),
        breaks=(0.5, 1.0),
        categories=("Testing", "Meetings"),
        weekends=True,
    )

    regs = generate_registrations([pattern], FIRST_WEEK, config, random.Random(7))

    assert check_registrations_match_patterns(regs, [pattern]).ok
    assert all(r.department_id == "IT" for r in regs)
    assert check_work_duration_consistency(regs).ok


def test_end_before_start_falls_back_to_eight_hour_shift(config):
    pattern = make_pattern(starts=(9.0,), ends=(8.0,), breaks=(1.0,))

    regs = generate_registrations([pattern], FIRST_WEEK, config, random.Random(3))

    assert regs
    for r in regs:
        assert r.end_time == 17.0
        assert r.work_duration == 7.0


def test_negative_work_duration_passes_through(config):
    pattern = make_pattern(starts=(9.0,), ends=(10.0,), breaks=(2.0,))

    regs = generate_registrations([pattern], FIRST_WEEK, config, random.Random(3))

    assert all(r.work_duration == -1.0 for r in regs)


def test_round_robin_projects_without_randomization(config):
    config = replace(config, projects=("A", "B", "C"), randomize_assignments=False)
    patterns = [make_pattern(f"employee-{i}") for i in range(5)]

    regs = generate_registrations(patterns, FIRST_WEEK, config, random.Random(2))

    expected = {f"employee-{i}": "ABCAB"[i] for i in range(5)}
    assert all(r.project_id == expected[r.employee_id] for r in regs)


def test_randomized_projects_cover_configured_set(config):
    config = replace(config, end_date=date(2024, 6, 30), num_registrations_per_employee=100)
    days = build_date_range(config.start_date, config.end_date)

    regs = generate_registrations([make_pattern()], days, config, random.Random(2))

    assert {r.project_id for r in regs} == set(config.projects)


def test_public_holiday_rate_near_ten_percent(config):
    config = replace(config, end_date=date(2024, 12, 31), num_registrations_per_employee=366)
    days = build_date_range(config.start_date, config.end_date)
    patterns = [make_pattern(f"employee-{i}", weekends=True) for i in range(10)]

    regs = generate_registrations(patterns, days, config, random.Random(5))

    rate = sum(r.public_holiday for r in regs) / len(regs)
    assert 0.07 < rate < 0.13


def test_numericals_drawn_within_bounds(config):
    config = replace(
        config,
        numerical_metrics=(
            NumericalMetricSpec("productivity", 0, 99),
            NumericalMetricSpec("quality", 40, 60),
        ),
    )

    regs = generate_registrations([make_pattern()], FIRST_WEEK, config, random.Random(5))

    for r in regs:
        assert [n.name for n in r.numericals] == ["productivity", "quality"]
        assert 0 <= r.numericals[0].value <= 99
        assert 40 <= r.numericals[1].value <= 60


def test_new_registrations_are_not_anomalous(config):
    regs = generate_registrations([make_pattern()], FIRST_WEEK, config, random.Random(5))

    assert all(r.anomaly is None for r in regs)
    assert all(r.anomaly_field is None for r in regs)


def test_zero_requested_registrations(config):
    config = replace(config, num_registrations_per_employee=0)

    assert generate_registrations([make_pattern()], FIRST_WEEK, config, random.Random(5)) == []
