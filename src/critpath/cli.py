"""Typer CLI for critpath."""

from __future__ import annotations

import json
import logging
import os
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from critpath.errors import GraphError
from critpath.models import PlanConfig, Schedule, Task, estimate_duration_days
from critpath.persistence import Store, load_records
from critpath.planner import Planner

app = typer.Typer(
    name="critpath",
    help="Critical path analysis for task dependency graphs.",
    no_args_is_help=True,
)
console = Console()

LOG_LEVEL_ENV = "CRITPATH_LOG_LEVEL"


def _get_store() -> Store:
    return Store()


def _open(store: Store) -> tuple[PlanConfig, Planner]:
    """Load the stored plan, exiting with an error if it is not schedulable."""
    try:
        config, tasks = store.load()
        config = config or PlanConfig()
        planner = Planner(tasks, config)
    except GraphError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    return config, planner


def _split_ids(values: list[str] | None) -> list[str]:
    """Accept both ``--depends T-1 --depends T-2`` and ``--depends T-1,T-2``."""
    ids: list[str] = []
    for v in values or []:
        ids.extend(part.strip() for part in v.split(",") if part.strip())
    return ids


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log recomputation details")] = False,
) -> None:
    level = "DEBUG" if verbose else os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def init(
    per_component_horizon: Annotated[
        bool,
        typer.Option(help="Give each independent chain of tasks its own finish horizon"),
    ] = False,
) -> None:
    """Initialize (or reinitialize) plan configuration."""
    store = _get_store()
    _, tasks = store.load()
    config = PlanConfig(shared_horizon=not per_component_horizon)
    store.save(config, tasks)
    mode = "per-component" if per_component_horizon else "shared"
    console.print(f"[green]Plan initialized ({mode} horizon).[/green]")


@app.command()
def add(
    name: str,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Duration in days")] = None,
    depends: Annotated[Optional[list[str]], typer.Option("--depends", help="Task IDs this depends on")] = None,
    priority: Annotated[Optional[str], typer.Option(help="High, Medium or Low; used to estimate a missing duration")] = None,
    items: Annotated[int, typer.Option(help="Work items in the task, for the estimate")] = 0,
    done: Annotated[int, typer.Option(help="Work items already completed, for the estimate")] = 0,
) -> None:
    """Add a new task.

    Dependencies can be specified individually (--depends T-1 --depends T-2)
    or comma-separated (--depends T-1,T-2,T-3). Without --duration the
    duration is estimated from --priority, --items and --done.
    """
    store = _get_store()
    config, planner = _open(store)
    tid = store.generate_id(planner.tasks())
    if duration is None:
        duration = estimate_duration_days(priority, items, done)
        console.print(f"[dim]Estimated duration: {duration} days[/dim]")

    try:
        planner.add_task(Task(id=tid, name=name, duration_days=duration, dependencies=_split_ids(depends)))
    except GraphError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    store.save(config, planner.tasks())
    console.print(f"[green]Added '{name}' as {tid}[/green]")


@app.command()
def remove(task_id: str) -> None:
    """Delete a task and every dependency that points at it."""
    store = _get_store()
    config, planner = _open(store)
    try:
        planner.remove_task(task_id)
    except GraphError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    store.save(config, planner.tasks())
    console.print(f"[green]Removed {task_id}[/green]")


@app.command("import")
def import_tasks(
    file: Annotated[str, typer.Argument(help="JSON list of {id, name, durationDays, dependencyIds}")],
) -> None:
    """Replace all tasks with the records in FILE."""
    store = _get_store()
    config, planner = _open(store)
    try:
        planner.load(load_records(file))
    except (OSError, json.JSONDecodeError, KeyError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    store.save(config, planner.tasks())
    console.print(f"[green]Imported {len(planner.graph)} tasks.[/green]")


@app.command()
def link(dependent: str, dependency: str) -> None:
    """Make DEPENDENT wait for DEPENDENCY to finish."""
    store = _get_store()
    config, planner = _open(store)
    try:
        changed = planner.add_dependency(dependent, dependency)
    except GraphError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if not changed:
        console.print(f"[dim]{dependent} already depends on {dependency}.[/dim]")
        return
    store.save(config, planner.tasks())
    console.print(f"[green]{dependent} now depends on {dependency}. Horizon: {planner.schedule.horizon} days[/green]")


@app.command()
def unlink(dependent: str, dependency: str) -> None:
    """Remove the dependency of DEPENDENT on DEPENDENCY."""
    store = _get_store()
    config, planner = _open(store)
    try:
        changed = planner.remove_dependency(dependent, dependency)
    except GraphError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if not changed:
        console.print(f"[dim]{dependent} does not depend on {dependency}.[/dim]")
        return
    store.save(config, planner.tasks())
    console.print(f"[green]{dependent} no longer depends on {dependency}. Horizon: {planner.schedule.horizon} days[/green]")


@app.command()
def schedule(
    as_json: Annotated[bool, typer.Option("--json", help="Print the schedule as JSON")] = False,
) -> None:
    """Show earliest/latest times and slack for every task."""
    store = _get_store()
    _, planner = _open(store)
    sched = planner.schedule

    if as_json:
        typer.echo(json.dumps(sched.to_dict(), indent=2))
        return
    if not sched.order:
        console.print("No tasks to schedule.")
        return

    table = Table(title=f"Schedule (horizon: {sched.horizon} days)")
    table.add_column("ID")
    table.add_column("Task Name")
    table.add_column("Days")
    table.add_column("ES")
    table.add_column("EF")
    table.add_column("LS")
    table.add_column("LF")
    table.add_column("Slack")
    table.add_column("Flags")

    graph = planner.graph
    for tid in sched.order:
        task = graph.task(tid)
        rec = sched[tid]
        table.add_row(
            tid,
            task.name,
            str(task.duration_days),
            str(rec.earliest_start),
            str(rec.earliest_finish),
            str(rec.latest_start),
            str(rec.latest_finish),
            str(rec.slack),
            "CRITICAL" if rec.is_critical else "-",
            style="bold yellow" if rec.is_critical else None,
        )

    console.print(table)


@app.command("critical-path")
def critical_path() -> None:
    """Display only the tasks on the critical path, start to end."""
    store = _get_store()
    _, planner = _open(store)
    sched = planner.schedule

    if not sched.critical_path:
        console.print("No critical path found.")
        return
    _print_critical_table(planner, sched)

    chain = " -> ".join(sched.critical_path)
    console.print(f"\n{chain}")
    console.print(f"Total duration: [bold]{sched.horizon}[/bold] days")


def _print_critical_table(planner: Planner, sched: Schedule) -> None:
    table = Table(title="Critical Path")
    table.add_column("ID")
    table.add_column("Task Name")
    table.add_column("Days")
    table.add_column("Start")
    table.add_column("Finish")

    graph = planner.graph
    for tid in sched.critical_path:
        task = graph.task(tid)
        rec = sched[tid]
        table.add_row(
            tid,
            task.name,
            str(task.duration_days),
            str(rec.earliest_start),
            str(rec.earliest_finish),
        )

    console.print(table)
