"""Shared test fixtures."""

from pathlib import Path

import pytest

from cluster_rank.graph.loader import parse_graph_matrix
from cluster_rank.graph.model import WeightedGraph

# Four nodes tied to the first column: A<->B (2, 3), A<->C (1, 1), A->D (4).
EXAMPLE_MATRIX = """\
A B C D
0 2 1 4
3 0 0 0
1 0 0 0
0 0 0 0
"""


def build_graph(labels: list[str], edges: dict[tuple[str, str], float]) -> WeightedGraph:
    """Build a graph keyed by label position from ``{(src, dst): weight}``."""
    graph = WeightedGraph()
    keys = {}
    for key, label in enumerate(labels):
        graph.add_node(key, label)
        keys[label] = key
    for (src, dst), weight in edges.items():
        graph.connect(keys[src], keys[dst], weight)
    return graph


def graph_with_features(values: list[float], ranks: list[float] | None = None) -> WeightedGraph:
    """Edgeless graph whose nodes carry the given co-occurrence values."""
    graph = WeightedGraph()
    for key, value in enumerate(values):
        node = graph.add_node(key, f"n{key}")
        node.cooccurrence = value
        if ranks is not None:
            node.rank = ranks[key]
    return graph


@pytest.fixture
def example_graph() -> WeightedGraph:
    """The four-node example graph."""
    return parse_graph_matrix(EXAMPLE_MATRIX.splitlines())


@pytest.fixture
def example_matrix_file(tmp_path: Path) -> Path:
    """The four-node example written to a space-separated file."""
    path = tmp_path / "graph.txt"
    path.write_text(EXAMPLE_MATRIX)
    return path


@pytest.fixture
def two_community_matrix_file(tmp_path: Path) -> Path:
    """Hub with two heavy partners (x1, x2), three light ones (y1..y3) and side edges."""
    rows = [
        "hub x1 x2 y1 y2 y3",
        "0 4 4 1 1 2",
        "10 0 1 0 0 0",
        "10 1 0 0 0 0",
        "1 0 0 0 1 0",
        "1 0 0 1 0 1",
        "2 0 0 0 1 0",
    ]
    path = tmp_path / "communities.txt"
    path.write_text("\n".join(rows) + "\n")
    return path
