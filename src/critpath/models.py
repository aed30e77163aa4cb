"""Task model, computed time records and plan configuration."""

from __future__ import annotations

import enum
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from critpath.errors import InvalidTaskError


class Priority(enum.StrEnum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


# (multiplier per open item, floor, cap) in calendar days
_PRIORITY_RULES: dict[Priority, tuple[int, int, int]] = {
    Priority.HIGH: (2, 7, 30),
    Priority.MEDIUM: (3, 10, 45),
    Priority.LOW: (4, 14, 60),
}
DEFAULT_ESTIMATE_DAYS = 14


def estimate_duration_days(priority: str | None, total: int, completed: int = 0) -> int:
    """Rough calendar-day estimate for a project record.

    Higher priority shortens the baseline; progress scales the remaining
    estimate down linearly but never below one day.
    """
    days = DEFAULT_ESTIMATE_DAYS
    try:
        rule = _PRIORITY_RULES[Priority(priority)]
    except ValueError:
        rule = None
    if rule is not None:
        per_item, floor, cap = rule
        days = max(floor, min(total * per_item, cap))

    if total > 0:
        progress = completed / total
        days = max(1, math.ceil(days * (1 - progress)))
    return days


@dataclass
class PlanConfig:
    """Plan-level settings stored alongside tasks."""

    shared_horizon: bool = True  # False: each disconnected component gets its own horizon

    def to_dict(self) -> dict:
        return {"shared_horizon": self.shared_horizon}

    @classmethod
    def from_dict(cls, d: dict) -> PlanConfig:
        return cls(shared_horizon=d.get("shared_horizon", True))


@dataclass
class Task:
    """A single schedulable task."""

    id: str
    name: str
    duration_days: int
    dependencies: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if isinstance(self.duration_days, bool) or not isinstance(self.duration_days, int):
            raise InvalidTaskError(
                f"Task {self.id} duration must be a whole number of days, got {self.duration_days!r}"
            )
        if self.duration_days < 0:
            raise InvalidTaskError(
                f"Task {self.id} duration must not be negative, got {self.duration_days}"
            )
        # dependency relation is a set; keep first-seen order
        self.dependencies = list(dict.fromkeys(self.dependencies))

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "duration_days": self.duration_days,
            "depends_on": self.dependencies,
        }

    @classmethod
    def from_dict(cls, task_id: str, d: dict) -> Task:
        return cls(
            id=task_id,
            name=d["name"],
            duration_days=d["duration_days"],
            dependencies=d.get("depends_on", []),
        )

    @classmethod
    def from_record(cls, record: Mapping) -> Task:
        """Build a task from an external ``{id, name, durationDays, dependencyIds}`` record.

        Without ``durationDays`` the duration is estimated from ``priority``
        and the ``tasks: {total, completed}`` progress counts.
        """
        duration = record.get("durationDays")
        if duration is None:
            progress = record.get("tasks") or {}
            duration = estimate_duration_days(
                record.get("priority"),
                progress.get("total", 0),
                progress.get("completed", 0),
            )
        return cls(
            id=str(record["id"]),
            name=record.get("name", str(record["id"])),
            duration_days=duration,
            dependencies=[str(dep) for dep in record.get("dependencyIds", [])],
        )


@dataclass(frozen=True)
class TimeRecord:
    """Earliest/latest times and slack computed for one task."""

    earliest_start: int
    earliest_finish: int
    latest_start: int
    latest_finish: int

    @property
    def slack(self) -> int:
        return self.latest_start - self.earliest_start

    @property
    def is_critical(self) -> bool:
        return self.slack == 0

    def to_dict(self) -> dict:
        return {
            "earliest_start": self.earliest_start,
            "earliest_finish": self.earliest_finish,
            "latest_start": self.latest_start,
            "latest_finish": self.latest_finish,
            "slack": self.slack,
            "is_critical": self.is_critical,
        }


@dataclass(frozen=True)
class Schedule:
    """Read-only result of one full recomputation."""

    records: Mapping[str, TimeRecord]
    order: tuple[str, ...]
    critical_path: tuple[str, ...]
    horizon: int

    def __post_init__(self) -> None:
        if not isinstance(self.records, MappingProxyType):
            object.__setattr__(self, "records", MappingProxyType(dict(self.records)))

    def __getitem__(self, task_id: str) -> TimeRecord:
        return self.records[task_id]

    @classmethod
    def empty(cls) -> Schedule:
        return cls(records={}, order=(), critical_path=(), horizon=0)

    def to_dict(self) -> dict:
        return {
            "horizon": self.horizon,
            "critical_path": list(self.critical_path),
            "tasks": {tid: self.records[tid].to_dict() for tid in self.order},
        }
