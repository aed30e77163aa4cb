"""In-memory dependency graph of tasks."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

import networkx as nx

from critpath.errors import InvalidTaskError, UnknownTaskError
from critpath.models import Task


class GraphModel:
    """Tasks plus precedence edges, keyed by task id.

    Edges point from a dependency to its dependent, so ``successors`` are the
    tasks waiting on a node and ``predecessors`` are the ones it waits for.
    Node and edge iteration follow insertion order.

    Structural operations only: cycle checks belong to ``critpath.cycles``
    and are composed by ``critpath.planner.Planner``.
    """

    def __init__(self, tasks: Iterable[Task] = ()):
        self._G = nx.DiGraph()
        self.load(tasks)

    def load(self, tasks: Iterable[Task]) -> None:
        """Replace the whole graph. Raises on duplicate ids or unresolved deps."""
        tasks = list(tasks)
        G = nx.DiGraph()
        for task in tasks:
            if task.id in G:
                raise InvalidTaskError(f"Duplicate task id {task.id}")
            G.add_node(task.id, name=task.name, duration=task.duration_days)
        for task in tasks:
            for dep in task.dependencies:
                if dep not in G:
                    raise UnknownTaskError(dep, referenced_by=task.id)
                G.add_edge(dep, task.id)
        self._G = G

    def copy(self) -> GraphModel:
        clone = GraphModel()
        clone._G = self._G.copy()
        return clone

    def __len__(self) -> int:
        return self._G.number_of_nodes()

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._G

    def __iter__(self) -> Iterator[str]:
        return iter(self._G)

    def require(self, task_id: str) -> None:
        if task_id not in self._G:
            raise UnknownTaskError(task_id)

    def task(self, task_id: str) -> Task:
        """A fresh Task whose ``dependencies`` reflect the committed edges."""
        self.require(task_id)
        return Task(
            id=task_id,
            name=self._G.nodes[task_id]["name"],
            duration_days=self._G.nodes[task_id]["duration"],
            dependencies=self.dependencies_of(task_id),
        )

    def duration(self, task_id: str) -> int:
        return self._G.nodes[task_id]["duration"]

    def dependencies_of(self, task_id: str) -> list[str]:
        return list(self._G.predecessors(task_id))

    def dependents_of(self, task_id: str) -> list[str]:
        return list(self._G.successors(task_id))

    def edge_count(self) -> int:
        return self._G.number_of_edges()

    def has_edge(self, dependent: str, dependency: str) -> bool:
        return self._G.has_edge(dependency, dependent)

    def add_edge(self, dependent: str, dependency: str) -> None:
        self.require(dependent)
        self.require(dependency)
        self._G.add_edge(dependency, dependent)

    def remove_edge(self, dependent: str, dependency: str) -> None:
        if self._G.has_edge(dependency, dependent):
            self._G.remove_edge(dependency, dependent)

    def add_task(self, task: Task) -> None:
        if task.id in self._G:
            raise InvalidTaskError(f"Duplicate task id {task.id}")
        for dep in task.dependencies:
            if dep not in self._G:
                raise UnknownTaskError(dep, referenced_by=task.id)
        self._G.add_node(task.id, name=task.name, duration=task.duration_days)
        for dep in task.dependencies:
            self._G.add_edge(dep, task.id)

    def remove_task(self, task_id: str) -> None:
        """Drop a task along with every edge touching it."""
        self.require(task_id)
        self._G.remove_node(task_id)

    def components(self) -> list[set[str]]:
        """Weakly connected components (independent chains of work)."""
        return [set(c) for c in nx.weakly_connected_components(self._G)]

    def to_networkx(self) -> nx.DiGraph:
        """Detached copy for running networkx algorithms against the graph."""
        return self._G.copy()

    def tasks(self) -> list[Task]:
        """Export tasks with ``dependencies`` reflecting the committed edges."""
        return [self.task(tid) for tid in self._G]
