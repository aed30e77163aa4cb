"""The write surface: dependency mutations with full recomputation."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from critpath.cycles import would_create_cycle
from critpath.errors import CycleError, SelfDependencyError
from critpath.graph import GraphModel
from critpath.models import PlanConfig, Schedule, Task
from critpath.scheduler import calculate_schedule

logger = logging.getLogger(__name__)


class Planner:
    """Owns a task graph and its current schedule snapshot.

    Every successful change recomputes the schedule from scratch and swaps
    it in whole. A failed change raises and leaves both the graph and the
    published snapshot as they were. All operations run under one lock.
    """

    def __init__(self, tasks: Iterable[Task] = (), config: PlanConfig | None = None):
        self.config = config or PlanConfig()
        self._lock = threading.RLock()
        self._graph = GraphModel()
        self._schedule = Schedule.empty()
        self.load(tasks)

    @property
    def schedule(self) -> Schedule:
        return self._schedule

    @property
    def graph(self) -> GraphModel:
        """A detached copy; edits to it never reach the planner."""
        with self._lock:
            return self._graph.copy()

    def tasks(self) -> list[Task]:
        with self._lock:
            return self._graph.tasks()

    def load(self, tasks: Iterable[Task]) -> Schedule:
        """Replace every task and edge. Nothing changes if validation fails."""
        graph = GraphModel(tasks)
        with self._lock:
            self._commit(graph)
            logger.info("Loaded %d tasks, %d dependencies", len(graph), graph.edge_count())
            return self._schedule

    def add_dependency(self, dependent: str, dependency: str) -> bool:
        """Make *dependent* wait for *dependency*.

        Returns False if the edge already exists. Raises UnknownTaskError,
        SelfDependencyError or CycleError without touching the graph.
        """
        with self._lock:
            self._graph.require(dependent)
            self._graph.require(dependency)
            if dependent == dependency:
                raise SelfDependencyError(dependent)
            if self._graph.has_edge(dependent, dependency):
                return False
            if would_create_cycle(self._graph, dependent, dependency):
                logger.warning("Rejected %s -> %s: circular dependency", dependent, dependency)
                raise CycleError(dependent, dependency)

            graph = self._graph.copy()
            graph.add_edge(dependent, dependency)
            self._commit(graph)
            logger.info("%s now depends on %s", dependent, dependency)
            return True

    def remove_dependency(self, dependent: str, dependency: str) -> bool:
        """Drop the edge if present. Returns False when there was nothing to remove."""
        with self._lock:
            self._graph.require(dependent)
            self._graph.require(dependency)
            if not self._graph.has_edge(dependent, dependency):
                return False

            graph = self._graph.copy()
            graph.remove_edge(dependent, dependency)
            self._commit(graph)
            logger.info("%s no longer depends on %s", dependent, dependency)
            return True

    def add_task(self, task: Task) -> Schedule:
        with self._lock:
            graph = self._graph.copy()
            graph.add_task(task)
            self._commit(graph)
            return self._schedule

    def remove_task(self, task_id: str) -> Schedule:
        """Delete a task and every dependency edge that touches it."""
        with self._lock:
            graph = self._graph.copy()
            graph.remove_task(task_id)
            self._commit(graph)
            return self._schedule

    def _commit(self, graph: GraphModel) -> None:
        # schedule first: an unorderable graph must never become current
        schedule = calculate_schedule(graph, self.config)
        self._graph = graph
        self._schedule = schedule
