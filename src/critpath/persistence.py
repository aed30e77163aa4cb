"""JSON file persistence for tasks and plan config."""

from __future__ import annotations

import json
from pathlib import Path

from critpath.models import PlanConfig, Task

DEFAULT_DB_FILE = "critpath_tasks.json"


def load_records(path: str | Path) -> list[Task]:
    """Read a task list in the ``{id, name, durationDays, dependencyIds}`` shape.

    The file may hold a bare list or an object with a ``"tasks"`` list.
    """
    raw = json.loads(Path(path).read_text())
    if isinstance(raw, dict):
        raw = raw.get("tasks", [])
    if not isinstance(raw, list):
        raise ValueError(f"{path}: expected a list of task records")
    for i, record in enumerate(raw):
        if not isinstance(record, dict):
            raise ValueError(f"record {i} is not an object: {record!r} ({path})")
    return [Task.from_record(r) for r in raw]


class Store:
    """Reads and writes the plan database (JSON file)."""

    def __init__(self, db_path: str | Path = DEFAULT_DB_FILE):
        self.db_path = Path(db_path)

    def load(self) -> tuple[PlanConfig | None, list[Task]]:
        """Return (config_or_None, tasks in stored order)."""
        if not self.db_path.exists():
            return None, []

        raw = json.loads(self.db_path.read_text())
        config = None
        if "config" in raw:
            config = PlanConfig.from_dict(raw["config"])

        tasks = [Task.from_dict(tid, tdata) for tid, tdata in raw.get("tasks", {}).items()]
        return config, tasks

    def save(self, config: PlanConfig | None, tasks: list[Task]) -> None:
        """Persist config + tasks to disk."""
        raw: dict = {}
        if config is not None:
            raw["config"] = config.to_dict()
        raw["tasks"] = {t.id: t.to_dict() for t in tasks}
        self.db_path.write_text(json.dumps(raw, indent=4))

    def generate_id(self, tasks: list[Task]) -> str:
        """Generate the next T-N id."""
        existing = [
            int(t.id.split("-")[1])
            for t in tasks
            if t.id.startswith("T-") and t.id[2:].isdigit()
        ]
        next_num = max(existing, default=0) + 1
        return f"T-{next_num}"
