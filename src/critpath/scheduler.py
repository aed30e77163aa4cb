"""Forward + backward CPM passes and critical path extraction."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from critpath.graph import GraphModel
from critpath.models import PlanConfig, Schedule, TimeRecord
from critpath.toposort import kahn_order, topological_order

logger = logging.getLogger(__name__)


def forward_pass(
    graph: GraphModel,
    order: list[str],
) -> tuple[dict[str, int], dict[str, int]]:
    """Earliest start / earliest finish per task.

    *order* must be topological: each task's dependencies are finalized
    before it is visited. Every source starts at day 0.
    """
    es: dict[str, int] = {}
    ef: dict[str, int] = {}
    for tid in order:
        preds = graph.dependencies_of(tid)
        es[tid] = max((ef[p] for p in preds), default=0)
        ef[tid] = es[tid] + graph.duration(tid)
    return es, ef


def plan_horizon(ef: Mapping[str, int]) -> int:
    return max(ef.values(), default=0)


def _sink_horizons(
    graph: GraphModel,
    ef: Mapping[str, int],
    shared_horizon: bool,
) -> dict[str, int]:
    """Latest finish assigned to each task that nothing depends on."""
    if shared_horizon:
        horizon = plan_horizon(ef)
        return {tid: horizon for tid in graph}

    horizons: dict[str, int] = {}
    for component in graph.components():
        horizon = max(ef[tid] for tid in component)
        for tid in component:
            horizons[tid] = horizon
    return horizons


def backward_pass(
    graph: GraphModel,
    order: list[str],
    es: Mapping[str, int],
    ef: Mapping[str, int],
    *,
    shared_horizon: bool = True,
) -> dict[str, TimeRecord]:
    """Latest start / latest finish per task, walking *order* in reverse.

    Sinks finish at the plan horizon ``max(EF)``. With ``shared_horizon``
    off, each weakly connected component uses its own ``max(EF)`` instead.
    """
    horizons = _sink_horizons(graph, ef, shared_horizon)
    ls: dict[str, int] = {}
    lf: dict[str, int] = {}
    for tid in reversed(order):
        succs = graph.dependents_of(tid)
        if not succs:
            lf[tid] = horizons[tid]
        else:
            lf[tid] = min(ls[s] for s in succs)
        ls[tid] = lf[tid] - graph.duration(tid)

    return {
        tid: TimeRecord(
            earliest_start=es[tid],
            earliest_finish=ef[tid],
            latest_start=ls[tid],
            latest_finish=lf[tid],
        )
        for tid in order
    }


def critical_path(graph: GraphModel, records: Mapping[str, TimeRecord]) -> list[str]:
    """Zero-slack tasks ordered so dependency edges among them run start to end.

    Only edges whose two ends are both critical are kept; the induced
    subgraph is ordered with the same Kahn tie-breaking as the full graph.
    Returns an empty list when nothing is critical.
    """
    critical = [tid for tid in graph if tid in records and records[tid].is_critical]
    if not critical:
        return []
    return kahn_order(critical, graph.dependents_of)


def calculate_schedule(graph: GraphModel, config: PlanConfig | None = None) -> Schedule:
    """Full recomputation: order, forward pass, backward pass, critical path."""
    config = config or PlanConfig()
    if not len(graph):
        return Schedule.empty()

    order = topological_order(graph)
    es, ef = forward_pass(graph, order)
    records = backward_pass(graph, order, es, ef, shared_horizon=config.shared_horizon)
    path = critical_path(graph, records)
    horizon = plan_horizon(ef)

    logger.debug(
        "Scheduled %d tasks: horizon=%d, %d critical", len(order), horizon, len(path)
    )
    return Schedule(
        records=records,
        order=tuple(order),
        critical_path=tuple(path),
        horizon=horizon,
    )
