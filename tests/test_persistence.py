import json

import pytest

from critpath.models import PlanConfig, Task
from critpath.persistence import Store, load_records


def test_store_round_trip(tmp_path, fork_tasks):
    store = Store(tmp_path / "db.json")
    assert store.load() == (None, [])

    store.save(PlanConfig(shared_horizon=False), fork_tasks)
    config, tasks = store.load()
    assert config == PlanConfig(shared_horizon=False)
    assert tasks == fork_tasks


def test_generate_id(tmp_path):
    store = Store(tmp_path / "db.json")
    assert store.generate_id([]) == "T-1"
    tasks = [Task("T-1", "A", 1), Task("T-7", "B", 1), Task("custom", "C", 1)]
    assert store.generate_id(tasks) == "T-8"


def test_load_records_list(tmp_path):
    path = tmp_path / "records.json"
    path.write_text(json.dumps([
        {"id": 1, "name": "Start", "durationDays": 3, "dependencyIds": []},
        {"id": 2, "name": "End", "durationDays": 4, "dependencyIds": [1]},
    ]))
    tasks = load_records(path)
    assert [t.id for t in tasks] == ["1", "2"]
    assert tasks[1].dependencies == ["1"]


def test_load_records_wrapped(tmp_path):
    path = tmp_path / "records.json"
    path.write_text(json.dumps({"tasks": [{"id": "a", "name": "A", "durationDays": 0}]}))
    assert load_records(path) == [Task("a", "A", 0)]


def test_load_records_rejects_other_shapes(tmp_path):
    path = tmp_path / "records.json"
    path.write_text(json.dumps("nope"))
    with pytest.raises(ValueError):
        load_records(path)


def test_load_records_rejects_non_object_entries(tmp_path):
    path = tmp_path / "records.json"
    path.write_text(json.dumps([1, 2]))
    with pytest.raises(ValueError, match="record 0"):
        load_records(path)


def test_load_records_estimates_missing_duration(tmp_path):
    path = tmp_path / "records.json"
    path.write_text(json.dumps([
        {"id": 1, "name": "Portal", "priority": "High", "tasks": {"total": 10, "completed": 5}},
    ]))
    assert load_records(path)[0].duration_days == 10
