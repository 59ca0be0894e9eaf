"""Node scoring: weighted PageRank and the co-occurrence feature."""

from .features import Feature, ReferenceNode, assign_cooccurrence, select_reference_node
from .pagerank import PageRankResult, PageRankSolver, run_pagerank

__all__ = [
    "Feature",
    "PageRankResult",
    "PageRankSolver",
    "ReferenceNode",
    "assign_cooccurrence",
    "run_pagerank",
    "select_reference_node",
]
