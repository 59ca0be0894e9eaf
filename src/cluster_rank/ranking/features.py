"""Per-node features used to divide the graph into sets."""

from __future__ import annotations

from enum import Enum

import structlog

from cluster_rank.graph.model import Node, WeightedGraph

logger = structlog.get_logger()


class ReferenceNode(str, Enum):
    """Which live node anchors the co-occurrence feature on each pass."""

    FIRST_KEY = "first_key"
    TOP_RANK = "top_rank"


class Feature(Enum):
    """Node attributes that sets can be divided on."""

    RANK = "rank"
    COOCCURRENCE = "cooccurrence"

    def value_of(self, node: Node) -> float:
        return getattr(node, self.value)


def select_reference_node(
    graph: WeightedGraph, strategy: ReferenceNode = ReferenceNode.FIRST_KEY
) -> Node | None:
    """Pick the node that anchors the co-occurrence feature for a pass.

    ``FIRST_KEY`` takes the live node with the smallest key, so when the
    previous reference has been removed the next live node takes over.
    ``TOP_RANK`` takes the highest-ranked node, ties going to the
    smaller key.
    """
    if strategy is ReferenceNode.TOP_RANK:
        return min(graph, key=lambda node: (-node.rank, node.key), default=None)
    return graph.first_node()


def assign_cooccurrence(graph: WeightedGraph, reference: Node) -> None:
    """Set the co-occurrence feature of every live node.

    Every node other than ``reference`` gets the larger of its edge
    weights to and from ``reference``.  ``reference`` itself gets the
    highest *average* of those two weights seen over the other nodes,
    or 0.0 when it is the only node left.
    """
    highest_average: float | None = None
    for node in graph:
        if node.key == reference.key:
            continue
        outgoing = graph.outgoing_weight(node, reference)
        incoming = graph.incoming_weight(node, reference)
        node.cooccurrence = max(outgoing, incoming)

        average = (outgoing + incoming) / 2.0
        if highest_average is None or average >= highest_average:
            highest_average = average

    reference.cooccurrence = highest_average if highest_average is not None else 0.0
    logger.debug(
        "cooccurrence_assigned",
        reference_key=reference.key,
        reference_label=reference.label,
        reference_cooccurrence=reference.cooccurrence,
    )
