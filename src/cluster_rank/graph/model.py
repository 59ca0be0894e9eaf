"""Weighted directed graph used by every ClusterRank pass.

Node payloads (label, rank, co-occurrence) live in ``Node`` records;
edges live in a ``networkx.DiGraph`` keyed by the integer node key, so
a node's outgoing and incoming maps are the DiGraph's successor and
predecessor views and always mirror each other.
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass

import networkx as nx

from cluster_rank.errors import NodeNotFoundError

INITIAL_RANK = 1.0
UNSET_COOCCURRENCE = -1.0


@dataclass
class Node:
    """A graph node.

    Attributes:
        key: Stable identifier, the node's column index in the input matrix.
        label: Human-readable label from the matrix header row.
        rank: PageRank score, rewritten on every pass.
        cooccurrence: Co-occurrence feature, ``UNSET_COOCCURRENCE`` until
            the first feature assignment.
    """

    key: int
    label: str
    rank: float = INITIAL_RANK
    cooccurrence: float = UNSET_COOCCURRENCE


NodeRef = int | Node


class WeightedGraph:
    """Mutable weighted directed graph of ``Node`` records ordered by key."""

    def __init__(self) -> None:
        self._nodes: dict[int, Node] = {}
        self._edges = nx.DiGraph()

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, ref: object) -> bool:
        if isinstance(ref, Node):
            return self._nodes.get(ref.key) is ref
        return ref in self._nodes

    def __iter__(self) -> Iterator[Node]:
        """Iterate live nodes in ascending key order."""
        return (self._nodes[key] for key in self.keys())

    def __repr__(self) -> str:
        return f"WeightedGraph(nodes={len(self)}, edges={self.edge_count})"

    def size(self) -> int:
        return len(self._nodes)

    def keys(self) -> list[int]:
        return sorted(self._nodes)

    @property
    def edge_count(self) -> int:
        return self._edges.number_of_edges()

    def add_node(self, key: int, label: str) -> Node:
        """Create a node, or return the existing node for ``key``."""
        node = self._nodes.get(key)
        if node is None:
            node = Node(key=key, label=label)
            self._nodes[key] = node
            self._edges.add_node(key)
        return node

    def node(self, ref: NodeRef) -> Node:
        """Return the live node for a key (or node), failing if absent."""
        return self._nodes[self._key(ref)]

    def first_node(self) -> Node | None:
        """Return the live node with the smallest key, if any."""
        if not self._nodes:
            return None
        return self._nodes[min(self._nodes)]

    def connect(self, src: NodeRef, dst: NodeRef, weight: float) -> None:
        """Set the directed edge ``src -> dst`` to ``weight``.

        Raises:
            ValueError: ``weight`` is not a finite positive number.
            NodeNotFoundError: Either endpoint is not in the graph.
        """
        if not math.isfinite(weight) or weight <= 0:
            raise ValueError(f"edge weight must be a finite positive number, got {weight!r}")
        self._edges.add_edge(self._key(src), self._key(dst), weight=float(weight))

    def disconnect(self, src: NodeRef, dst: NodeRef) -> None:
        """Remove the directed edge ``src -> dst`` if present."""
        src_key, dst_key = self._key(src), self._key(dst)
        if self._edges.has_edge(src_key, dst_key):
            self._edges.remove_edge(src_key, dst_key)

    def remove_node(self, ref: NodeRef) -> Node:
        """Sever every edge touching a node, then delete it.

        Returns:
            The removed ``Node`` record, which keeps its last rank and
            co-occurrence values.
        """
        key = self._key(ref)
        for target in list(self._edges.successors(key)):
            self.disconnect(key, target)
        for source in list(self._edges.predecessors(key)):
            self.disconnect(source, key)
        self._edges.remove_node(key)
        return self._nodes.pop(key)

    def outgoing(self, ref: NodeRef) -> dict[int, float]:
        """Map of target key to weight for edges leaving a node."""
        return {
            target: data["weight"]
            for target, data in self._edges.succ[self._key(ref)].items()
        }

    def incoming(self, ref: NodeRef) -> dict[int, float]:
        """Map of source key to weight for edges entering a node."""
        return {
            source: data["weight"]
            for source, data in self._edges.pred[self._key(ref)].items()
        }

    def outgoing_weight(self, src: NodeRef, dst: NodeRef) -> float:
        """Weight of ``src -> dst``, 0.0 when there is no such edge."""
        data = self._edges.succ[self._key(src)].get(self._key(dst))
        return data["weight"] if data is not None else 0.0

    def incoming_weight(self, dst: NodeRef, src: NodeRef) -> float:
        """Weight of the edge into ``dst`` from ``src``, 0.0 if absent."""
        return self.outgoing_weight(src, dst)

    def total_outgoing_weight(self, ref: NodeRef) -> float:
        return sum(data["weight"] for data in self._edges.succ[self._key(ref)].values())

    def out_degree(self, ref: NodeRef) -> int:
        return self._edges.out_degree(self._key(ref))

    def in_degree(self, ref: NodeRef) -> int:
        return self._edges.in_degree(self._key(ref))

    def _key(self, ref: NodeRef) -> int:
        key = ref.key if isinstance(ref, Node) else ref
        if key not in self._nodes:
            raise NodeNotFoundError(key)
        return key
