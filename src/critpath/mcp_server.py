"""MCP server for critpath: exposes dependency and schedule tools to AI assistants."""

from __future__ import annotations

import json

from mcp.server.fastmcp import FastMCP

from critpath.errors import GraphError
from critpath.graph import GraphModel
from critpath.models import PlanConfig, Task
from critpath.persistence import Store
from critpath.planner import Planner

mcp = FastMCP(
    "critpath",
    instructions="""\
critpath computes Critical Path Method metrics over a graph of tasks. Each task \
has a duration in whole days and a set of tasks it depends on. A task cannot start \
until every dependency has finished.

Key concepts:
- **ES/EF**: earliest start / earliest finish day, counted from day 0.
- **LS/LF**: latest start / latest finish day that still meets the plan horizon.
- **Slack**: LS - ES. How many days a task can slip without moving the horizon.
- **Critical path**: the zero-slack chain of tasks, ordered start to end.
- **Horizon**: the plan completion day, max(EF) over all tasks.

Dependencies that would create a circular chain are rejected and nothing changes.\
""",
)


def _get_store() -> Store:
    return Store()


def _open(store: Store) -> tuple[PlanConfig, Planner]:
    config, tasks = store.load()
    config = config or PlanConfig()
    return config, Planner(tasks, config)


def _task_summary(planner: Planner, graph: GraphModel, tid: str) -> dict:
    task = graph.task(tid)
    d = {
        "id": tid,
        "name": task.name,
        "duration_days": task.duration_days,
        "depends_on": task.dependencies,
    }
    d.update(planner.schedule[tid].to_dict())
    return d


# ---------------------------------------------------------------------------
# Write tools
# ---------------------------------------------------------------------------


@mcp.tool()
def add_task(name: str, duration_days: int, depends_on: list[str] | None = None) -> str:
    """Add a new task to the plan.

    Args:
        name: Task name/title
        duration_days: Estimated duration in whole days (0 for a milestone)
        depends_on: List of task IDs this depends on (e.g. ["T-1", "T-3"])
    """
    store = _get_store()
    try:
        config, planner = _open(store)
        tid = store.generate_id(planner.tasks())
        planner.add_task(Task(id=tid, name=name, duration_days=duration_days, dependencies=depends_on or []))
    except GraphError as e:
        return f"Error: {e}"
    store.save(config, planner.tasks())
    return f"Added '{name}' as {tid}"


@mcp.tool()
def add_dependency(dependent_id: str, dependency_id: str) -> str:
    """Make one task wait for another. Rejected if it would create a circular dependency.

    Args:
        dependent_id: The task that must wait
        dependency_id: The task that must finish first
    """
    store = _get_store()
    try:
        config, planner = _open(store)
        changed = planner.add_dependency(dependent_id, dependency_id)
    except GraphError as e:
        return f"Error: {e}"
    if not changed:
        return f"{dependent_id} already depends on {dependency_id}."
    store.save(config, planner.tasks())
    return f"{dependent_id} now depends on {dependency_id}. Horizon: {planner.schedule.horizon} days."


@mcp.tool()
def remove_dependency(dependent_id: str, dependency_id: str) -> str:
    """Remove a dependency between two tasks.

    Args:
        dependent_id: The task that currently waits
        dependency_id: The task it waits for
    """
    store = _get_store()
    try:
        config, planner = _open(store)
        changed = planner.remove_dependency(dependent_id, dependency_id)
    except GraphError as e:
        return f"Error: {e}"
    if not changed:
        return f"{dependent_id} does not depend on {dependency_id}."
    store.save(config, planner.tasks())
    return f"{dependent_id} no longer depends on {dependency_id}. Horizon: {planner.schedule.horizon} days."


# ---------------------------------------------------------------------------
# Read tools
# ---------------------------------------------------------------------------


@mcp.tool()
def get_schedule() -> str:
    """Get ES/EF/LS/LF and slack for every task, in dependency order."""
    try:
        _, planner = _open(_get_store())
    except GraphError as e:
        return f"Error: {e}"
    sched = planner.schedule
    graph = planner.graph
    result = {
        "horizon_days": sched.horizon,
        "critical_path": list(sched.critical_path),
        "tasks": [_task_summary(planner, graph, tid) for tid in sched.order],
    }
    return json.dumps(result, indent=2)


@mcp.tool()
def get_critical_path() -> str:
    """Get the critical path: zero-slack tasks that determine the plan horizon, start to end."""
    try:
        _, planner = _open(_get_store())
    except GraphError as e:
        return f"Error: {e}"
    sched = planner.schedule
    graph = planner.graph
    result = {
        "horizon_days": sched.horizon,
        "task_count": len(sched.critical_path),
        "tasks": [_task_summary(planner, graph, tid) for tid in sched.critical_path],
    }
    return json.dumps(result, indent=2)


def main():
    """Entry point for the MCP server."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
