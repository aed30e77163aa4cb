"""Cycle detection for proposed dependency edges."""

from __future__ import annotations

import enum

from critpath.errors import SelfDependencyError
from critpath.graph import GraphModel


class _Color(enum.IntEnum):
    UNVISITED = 0
    ON_PATH = 1
    FINISHED = 2


def would_create_cycle(graph: GraphModel, dependent: str, dependency: str) -> bool:
    """Return True if making *dependent* depend on *dependency* closes a loop.

    The graph is not modified. The walk starts at *dependency* and follows
    "depends on" links, treating the proposed edge as already present; reaching
    a node that is still on the current path is a back edge, i.e. a cycle.

    Raises UnknownTaskError for unknown ids and SelfDependencyError when both
    ids are the same task.
    """
    graph.require(dependent)
    graph.require(dependency)
    if dependent == dependency:
        raise SelfDependencyError(dependent)

    def neighbors(node: str) -> list[str]:
        deps = graph.dependencies_of(node)
        if node == dependent:
            deps.append(dependency)
        return deps

    color: dict[str, _Color] = {}
    # each frame is (node, its neighbors, index of the next neighbor to visit)
    stack: list[tuple[str, list[str], int]] = [(dependency, neighbors(dependency), 0)]
    color[dependency] = _Color.ON_PATH

    while stack:
        node, children, pos = stack[-1]
        if pos == len(children):
            color[node] = _Color.FINISHED
            stack.pop()
            continue
        stack[-1] = (node, children, pos + 1)

        child = children[pos]
        state = color.get(child, _Color.UNVISITED)
        if state is _Color.ON_PATH:
            return True
        if state is _Color.UNVISITED:
            color[child] = _Color.ON_PATH
            stack.append((child, neighbors(child), 0))

    return False
