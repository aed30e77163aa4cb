import pytest

from critpath.errors import InconsistentGraphError
from critpath.graph import GraphModel
from critpath.models import Task
from critpath.toposort import kahn_order, topological_order


def test_dependencies_come_first(fork_graph):
    order = topological_order(fork_graph)
    assert order == ["1", "2", "3"]


def test_ties_follow_insertion_order():
    graph = GraphModel([Task("c", "C", 1), Task("a", "A", 1), Task("b", "B", 1)])
    assert topological_order(graph) == ["c", "a", "b"]


def test_every_edge_respected():
    graph = GraphModel([
        Task("d", "D", 1, dependencies=[]),
        Task("b", "B", 1, dependencies=["d"]),
        Task("a", "A", 1, dependencies=["b", "d"]),
        Task("c", "C", 1, dependencies=["a"]),
        Task("e", "E", 1),
    ])
    order = topological_order(graph)
    assert sorted(order) == sorted(graph)
    pos = {tid: i for i, tid in enumerate(order)}
    for t in graph.tasks():
        for dep in t.dependencies:
            assert pos[dep] < pos[t.id]


def test_cycle_is_reported():
    graph = GraphModel([
        Task("x", "X", 1, dependencies=["y"]),
        Task("y", "Y", 1, dependencies=["x"]),
        Task("z", "Z", 1),
    ])
    with pytest.raises(InconsistentGraphError) as exc:
        topological_order(graph)
    assert exc.value.unordered == ("x", "y")


def test_kahn_order_ignores_outside_edges():
    successors = {"a": ["b", "c"], "b": ["c"], "c": []}
    assert kahn_order(["a", "c"], successors.__getitem__) == ["a", "c"]


def test_empty_graph():
    assert topological_order(GraphModel()) == []
