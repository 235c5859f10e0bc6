"""Tests for per-employee work pattern generation."""

import random
from dataclasses import replace
from datetime import date

import pytest

from time_registration_audit.synthetic import (
    DatasetConfig,
    EmployeeWorkPattern,
    WorkPatternConfig,
    check_weekend_quota,
    generate_work_patterns,
)
from time_registration_audit.synthetic.calendar import time_grid


@pytest.fixture
def config():
    return DatasetConfig(start_date=date(2024, 1, 1), end_date=date(2024, 1, 31))


def _with_patterns(config, **kwargs):
    return replace(config, work_pattern_config=WorkPatternConfig(**kwargs))


def test_one_pattern_per_employee_in_index_order(config):
    patterns = generate_work_patterns(4, config, random.Random(1))

    assert [p.employee_id for p in patterns] == [
        "employee-0",
        "employee-1",
        "employee-2",
        "employee-3",
    ]


def test_zero_employees_returns_empty(config):
    assert generate_work_patterns(0, config, random.Random(1)) == []


def test_allowed_sets_come_from_grid_sorted_and_unique(config):
    config = _with_patterns(
        config, num_start_times=3, num_end_times=2, num_break_durations=2
    )
    start_grid = time_grid(7, 9)
    end_grid = time_grid(16, 18)
    break_grid = time_grid(0.5, 2)

    for p in generate_work_patterns(20, config, random.Random(3)):
        assert len(p.allowed_start_times) == 3
        assert len(p.allowed_end_times) == 2
        assert len(p.allowed_break_durations) == 2
        assert set(p.allowed_start_times) <= set(start_grid)
        assert set(p.allowed_end_times) <= set(end_grid)
        assert set(p.allowed_break_durations) <= set(break_grid)
        assert list(p.allowed_start_times) == sorted(set(p.allowed_start_times))
        assert list(p.allowed_end_times) == sorted(set(p.allowed_end_times))


def test_cardinalities_clamped_to_at_least_one(config):
    config = _with_patterns(
        config,
        num_departments=0,
        num_start_times=0,
        num_end_times=-3,
        num_break_durations=0,
        num_work_categories=0,
    )

    for p in generate_work_patterns(5, config, random.Random(5)):
        assert len(p.allowed_start_times) == 1
        assert len(p.allowed_end_times) == 1
        assert len(p.allowed_break_durations) == 1
        assert len(p.allowed_work_categories) == 1
        assert p.department_id == "HR"


def test_cardinalities_clamped_to_pool_size(config):
    config = _with_patterns(
        config, num_start_times=100, num_work_categories=100, num_departments=100
    )

    for p in generate_work_patterns(5, config, random.Random(5)):
        assert p.allowed_start_times == tuple(time_grid(7, 9))
        assert sorted(p.allowed_work_categories) == sorted(config.work_categories)
        assert p.department_id in config.departments


def test_department_drawn_from_first_n_departments(config):
    config = _with_patterns(config, num_departments=2)

    departments = {
        p.department_id for p in generate_work_patterns(50, config, random.Random(8))
    }

    assert departments <= {"HR", "IT"}


@pytest.mark.parametrize("seed", range(25))
def test_weekend_quota_met_for_any_seed(config, seed):
    config = _with_patterns(config, min_weekend_workers=4)

    patterns = generate_work_patterns(10, config, random.Random(seed))

    assert sum(p.can_work_weekends for p in patterns) >= 4
    assert check_weekend_quota(patterns, 4).ok


def test_quota_above_team_size_makes_everyone_eligible(config):
    config = _with_patterns(config, min_weekend_workers=10)

    patterns = generate_work_patterns(3, config, random.Random(2))

    assert all(p.can_work_weekends for p in patterns)


def test_quota_equal_to_team_size_forces_every_employee(config):
    config = _with_patterns(config, min_weekend_workers=5)

    patterns = generate_work_patterns(5, config, random.Random(2))

    assert all(p.can_work_weekends for p in patterns)


def test_zero_quota_means_no_weekend_workers(config):
    config = _with_patterns(config, min_weekend_workers=0)

    patterns = generate_work_patterns(30, config, random.Random(2))

    assert not any(p.can_work_weekends for p in patterns)


def test_weekend_workers_stop_once_quota_met(config):
    """Once the quota is reached, later employees are never eligible."""
    config = _with_patterns(config, min_weekend_workers=2)

    for seed in range(20):
        patterns = generate_work_patterns(12, config, random.Random(seed))
        assert sum(p.can_work_weekends for p in patterns) == 2


def test_existing_patterns_reused_verbatim(config):
    cached = EmployeeWorkPattern(
        employee_id="employee-1",
        department_id="Finance",
        allowed_start_times=(10.0,),
        allowed_end_times=(19.0,),
        allowed_break_durations=(1.0,),
        allowed_work_categories=("Audit",),
        can_work_weekends=False,
    )

    patterns = generate_work_patterns(
        3, config, random.Random(4), existing_patterns={"employee-1": cached}
    )

    assert patterns[1] is cached
    assert patterns[0].employee_id == "employee-0"
    assert patterns[2].employee_id == "employee-2"


def test_reused_weekend_worker_counts_toward_quota(config):
    config = _with_patterns(config, min_weekend_workers=1)
    cached = EmployeeWorkPattern(
        employee_id="employee-0",
        department_id="HR",
        allowed_start_times=(8.0,),
        allowed_end_times=(17.0,),
        allowed_break_durations=(0.5,),
        allowed_work_categories=("Testing",),
        can_work_weekends=True,
    )

    patterns = generate_work_patterns(
        6, config, random.Random(4), existing_patterns={"employee-0": cached}
    )

    assert patterns[0] is cached
    assert not any(p.can_work_weekends for p in patterns[1:])


def test_same_seed_same_patterns(config):
    config = _with_patterns(config, num_start_times=2, min_weekend_workers=2)

    first = generate_work_patterns(8, config, random.Random(99))
    second = generate_work_patterns(8, config, random.Random(99))

    assert first == second


def test_empty_allowed_set_rejected():
    with pytest.raises(ValueError):
        EmployeeWorkPattern(
            employee_id="employee-0",
            department_id="HR",
            allowed_start_times=(),
            allowed_end_times=(17.0,),
            allowed_break_durations=(0.5,),
            allowed_work_categories=("Testing",),
            can_work_weekends=False,
        )
