"""Weighted directed graph model and adjacency-matrix loading."""

from .loader import load_graph, parse_graph_matrix
from .model import INITIAL_RANK, UNSET_COOCCURRENCE, Node, WeightedGraph

__all__ = [
    "INITIAL_RANK",
    "UNSET_COOCCURRENCE",
    "Node",
    "WeightedGraph",
    "load_graph",
    "parse_graph_matrix",
]
