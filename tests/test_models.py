import dataclasses

import pytest

from critpath.errors import InvalidTaskError
from critpath.models import PlanConfig, Schedule, Task, TimeRecord, estimate_duration_days


def test_task_serialization():
    t = Task(id="T-1", name="Test", duration_days=5, dependencies=["T-2", "T-3"])
    d = t.to_dict()
    assert d == {"name": "Test", "duration_days": 5, "depends_on": ["T-2", "T-3"]}

    t2 = Task.from_dict("T-1", d)
    assert t2 == t


def test_task_rejects_bad_durations():
    with pytest.raises(InvalidTaskError):
        Task("T-1", "Negative", -1)
    with pytest.raises(InvalidTaskError):
        Task("T-1", "Fractional", 1.5)
    with pytest.raises(InvalidTaskError):
        Task("T-1", "Boolean", True)


def test_zero_duration_is_a_valid_milestone():
    assert Task("M", "Milestone", 0).duration_days == 0


def test_duplicate_dependencies_collapse():
    t = Task("T-3", "Merge", 1, dependencies=["T-1", "T-2", "T-1"])
    assert t.dependencies == ["T-1", "T-2"]


def test_task_from_external_record():
    t = Task.from_record({"id": 7, "name": "Launch", "durationDays": 4, "dependencyIds": [3, 5]})
    assert t.id == "7"
    assert t.duration_days == 4
    assert t.dependencies == ["3", "5"]


def test_time_record_slack_and_criticality():
    rec = TimeRecord(earliest_start=3, earliest_finish=5, latest_start=5, latest_finish=7)
    assert rec.slack == 2
    assert not rec.is_critical
    assert TimeRecord(0, 3, 0, 3).is_critical


def test_schedule_is_read_only():
    sched = Schedule(records={"1": TimeRecord(0, 3, 0, 3)}, order=("1",), critical_path=("1",), horizon=3)
    with pytest.raises(TypeError):
        sched.records["2"] = TimeRecord(0, 1, 2, 3)
    with pytest.raises(dataclasses.FrozenInstanceError):
        sched.horizon = 10


def test_schedule_to_dict():
    sched = Schedule(records={"1": TimeRecord(0, 3, 0, 3)}, order=("1",), critical_path=("1",), horizon=3)
    d = sched.to_dict()
    assert d["horizon"] == 3
    assert d["critical_path"] == ["1"]
    assert d["tasks"]["1"]["slack"] == 0
    assert d["tasks"]["1"]["is_critical"] is True


def test_plan_config_serialization():
    config = PlanConfig(shared_horizon=False)
    assert PlanConfig.from_dict(config.to_dict()) == config
    assert PlanConfig.from_dict({}).shared_horizon is True


@pytest.mark.parametrize(
    "priority,total,completed,expected",
    [
        ("High", 10, 0, 20),
        ("High", 10, 5, 10),
        ("High", 1, 0, 7),
        ("Medium", 20, 0, 45),
        ("Medium", 20, 20, 1),
        ("Low", 2, 0, 14),
        (None, 0, 0, 14),
        ("Someday", 4, 1, 11),
    ],
)
def test_estimate_duration_days(priority, total, completed, expected):
    assert estimate_duration_days(priority, total, completed) == expected


def test_record_without_duration_is_estimated():
    t = Task.from_record({"id": 1, "name": "Backlog", "priority": "Low", "tasks": {"total": 2, "completed": 0}})
    assert t.duration_days == 14
    assert Task.from_record({"id": 2, "name": "Unknown"}).duration_days == 14
