"""Errors raised by graph validation and dependency mutations."""

from __future__ import annotations

from collections.abc import Iterable


class GraphError(ValueError):
    """Base class for every structural error the engine reports."""


class InvalidTaskError(GraphError):
    """A task record is malformed (negative duration, duplicate id, ...)."""


class UnknownTaskError(GraphError):
    def __init__(self, task_id: str, referenced_by: str | None = None):
        self.task_id = task_id
        self.referenced_by = referenced_by
        if referenced_by is None:
            msg = f"Task {task_id} does not exist"
        else:
            msg = f"Task {referenced_by} depends on non-existent task {task_id}"
        super().__init__(msg)


class SelfDependencyError(GraphError):
    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task {task_id} cannot depend on itself")


class CycleError(GraphError):
    """Committing ``dependent -> dependency`` would close a loop."""

    def __init__(self, dependent: str, dependency: str):
        self.dependent = dependent
        self.dependency = dependency
        super().__init__(
            f"Making {dependent} depend on {dependency} would create a circular dependency"
        )


class InconsistentGraphError(GraphError):
    """The graph could not be fully ordered, so it already contains a cycle."""

    def __init__(self, unordered: Iterable[str]):
        self.unordered = tuple(unordered)
        super().__init__(
            "Circular dependency detected among tasks: " + ", ".join(self.unordered)
        )
