"""Kahn's algorithm topological ordering."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterable

from critpath.errors import InconsistentGraphError
from critpath.graph import GraphModel


def kahn_order(
    nodes: Iterable[str],
    dependents_of: Callable[[str], Iterable[str]],
) -> list[str]:
    """Order *nodes* so every node follows the nodes it depends on.

    Ties between simultaneously ready nodes are broken by the order of
    *nodes*, then by the order ``dependents_of`` yields successors. Edges
    leading outside *nodes* are ignored. When the subgraph contains a cycle
    the returned list is shorter than *nodes*; the caller decides what that
    means.
    """
    nodes = list(nodes)
    in_degree = dict.fromkeys(nodes, 0)
    for node in nodes:
        for succ in dependents_of(node):
            if succ in in_degree:
                in_degree[succ] += 1

    queue = deque(n for n in nodes if in_degree[n] == 0)
    order: list[str] = []
    while queue:
        node = queue.popleft()
        order.append(node)
        for succ in dependents_of(node):
            if succ not in in_degree:
                continue
            in_degree[succ] -= 1
            if in_degree[succ] == 0:
                queue.append(succ)
    return order


def topological_order(graph: GraphModel) -> list[str]:
    """Linear order of every task with dependencies first.

    Raises InconsistentGraphError if some tasks cannot be ordered.
    """
    order = kahn_order(graph, graph.dependents_of)
    if len(order) < len(graph):
        placed = set(order)
        raise InconsistentGraphError(tid for tid in graph if tid not in placed)
    return order
