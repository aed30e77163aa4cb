import pytest

from critpath.graph import GraphModel
from critpath.models import Task


@pytest.fixture
def fork_tasks():
    """1 (3d) feeds both 2 (2d) and 3 (4d)."""
    return [
        Task("1", "Start", 3),
        Task("2", "Mid", 2, dependencies=["1"]),
        Task("3", "End", 4, dependencies=["1"]),
    ]


@pytest.fixture
def fork_graph(fork_tasks):
    return GraphModel(fork_tasks)
