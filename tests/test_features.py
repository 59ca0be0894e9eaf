"""Tests for co-occurrence assignment and reference node selection."""

import pytest

from cluster_rank.graph.model import UNSET_COOCCURRENCE
from cluster_rank.ranking.features import (
    Feature,
    ReferenceNode,
    assign_cooccurrence,
    select_reference_node,
)

from conftest import build_graph


def _cooccurrence(graph) -> dict[str, float]:
    return {node.label: node.cooccurrence for node in graph}


class TestAssignCooccurrence:
    def test_example_graph(self, example_graph):
        """Other nodes take max(out, in); the reference takes the best average."""
        reference = select_reference_node(example_graph)
        assign_cooccurrence(example_graph, reference)

        assert reference.label == "A"
        assert _cooccurrence(example_graph) == {
            "A": pytest.approx(2.5),  # B: (3 + 2) / 2
            "B": 3.0,
            "C": 1.0,
            "D": 4.0,
        }

    def test_unconnected_nodes_get_zero(self):
        graph = build_graph(["A", "B", "C"], {("A", "B"): 2.0})
        assign_cooccurrence(graph, graph.node(0))

        assert _cooccurrence(graph) == {"A": 1.0, "B": 2.0, "C": 0.0}

    def test_edges_between_other_nodes_ignored(self):
        graph = build_graph(["A", "B", "C"], {("B", "C"): 9.0, ("C", "A"): 1.0})
        assign_cooccurrence(graph, graph.node(0))

        assert _cooccurrence(graph) == {"A": 0.5, "B": 0.0, "C": 1.0}

    def test_lone_reference_gets_zero(self):
        graph = build_graph(["A"], {})
        assign_cooccurrence(graph, graph.node(0))

        assert graph.node(0).cooccurrence == 0.0

    def test_values_recomputed_every_call(self, example_graph):
        assign_cooccurrence(example_graph, example_graph.node(0))
        example_graph.remove_node(0)
        reference = select_reference_node(example_graph)
        assign_cooccurrence(example_graph, reference)

        # B is the new reference and nothing links to it any more
        assert reference.label == "B"
        assert _cooccurrence(example_graph) == {"B": 0.0, "C": 0.0, "D": 0.0}

    def test_unset_until_assigned(self, example_graph):
        assert all(node.cooccurrence == UNSET_COOCCURRENCE for node in example_graph)


class TestSelectReferenceNode:
    def test_first_key_by_default(self):
        graph = build_graph(["A", "B", "C"], {})
        graph.node(2).rank = 9.0

        assert select_reference_node(graph).label == "A"

    def test_next_key_after_removal(self):
        graph = build_graph(["A", "B", "C"], {})
        graph.remove_node(0)

        assert select_reference_node(graph, ReferenceNode.FIRST_KEY).label == "B"

    def test_top_rank(self):
        graph = build_graph(["A", "B", "C"], {})
        graph.node(2).rank = 9.0

        assert select_reference_node(graph, ReferenceNode.TOP_RANK).label == "C"

    def test_top_rank_ties_go_to_smaller_key(self):
        graph = build_graph(["A", "B", "C"], {})
        graph.node(1).rank = 3.0
        graph.node(2).rank = 3.0

        assert select_reference_node(graph, ReferenceNode.TOP_RANK).label == "B"

    @pytest.mark.parametrize("strategy", list(ReferenceNode))
    def test_empty_graph(self, strategy):
        assert select_reference_node(build_graph([], {}), strategy) is None


class TestFeature:
    def test_value_of(self, example_graph):
        node = example_graph.node(1)
        node.rank = 0.7
        node.cooccurrence = 3.0

        assert Feature.RANK.value_of(node) == 0.7
        assert Feature.COOCCURRENCE.value_of(node) == 3.0
