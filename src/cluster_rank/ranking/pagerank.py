"""Weighted PageRank by power iteration.

Each predecessor passes on its rank in proportion to the share of its
*outgoing* weight that points at the node:

    rank(n) = d * sum(w(m -> n) / W_out(m) * rank(m)) + (1 - d)

All ranks of iteration ``i + 1`` are computed from the committed ranks
of iteration ``i``.  The solver runs at most one iteration per live node
and stops early once the standard error of the absolute rank changes
drops below the configured threshold.
"""

from __future__ import annotations

import math
import statistics
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from cluster_rank.errors import AlgorithmInvariantError, RunCancelledError
from cluster_rank.graph.model import WeightedGraph

logger = structlog.get_logger()


@dataclass
class PageRankResult:
    """Outcome of one solver run.

    Attributes:
        iterations: Number of iterations committed.
        standard_error: Standard error after the last iteration, ``None``
            if no iteration ran (empty graph).
        converged: ``True`` if the run stopped on the threshold rather
            than on the iteration cap.
    """

    iterations: int
    standard_error: float | None
    converged: bool


def standard_error(deltas: list[float]) -> float:
    """Sample standard deviation of ``deltas`` over ``sqrt(len(deltas))``.

    Fewer than two values have no spread and give 0.0.
    """
    if len(deltas) < 2:
        return 0.0
    return statistics.stdev(deltas) / math.sqrt(len(deltas))


class PageRankSolver:
    """Runs weighted PageRank over a ``WeightedGraph``, writing ranks in place."""

    def __init__(
        self,
        damping_factor: float,
        standard_error_threshold: float,
        should_stop: Callable[[], bool] | None = None,
    ) -> None:
        if not 0.0 < damping_factor < 1.0:
            raise ValueError(f"damping factor must be in (0, 1), got {damping_factor}")
        if standard_error_threshold <= 0:
            raise ValueError(
                f"standard error threshold must be positive, got {standard_error_threshold}"
            )
        self.damping_factor = damping_factor
        self.standard_error_threshold = standard_error_threshold
        self.should_stop = should_stop

    def run(self, graph: WeightedGraph) -> PageRankResult:
        """Iterate until convergence or ``graph.size()`` iterations.

        Raises:
            AlgorithmInvariantError: A predecessor has no positive total
                outgoing weight to normalize by.
            RunCancelledError: ``should_stop`` returned ``True`` at an
                iteration boundary.
        """
        keys = graph.keys()
        max_iterations = len(keys)
        incoming = {key: graph.incoming(key) for key in keys}
        out_totals = {key: graph.total_outgoing_weight(key) for key in keys}

        result = PageRankResult(iterations=0, standard_error=None, converged=False)
        for iteration in range(max_iterations):
            if self.should_stop is not None and self.should_stop():
                raise RunCancelledError(f"cancelled before PageRank iteration {iteration}")

            previous = {key: graph.node(key).rank for key in keys}
            ranks = {
                key: self._next_rank(key, incoming[key], out_totals, previous)
                for key in keys
            }

            error = standard_error([abs(previous[key] - ranks[key]) for key in keys])
            for key in keys:
                graph.node(key).rank = ranks[key]

            result.iterations = iteration + 1
            result.standard_error = error
            logger.debug("pagerank_iteration", iteration=iteration, error=error)

            if error < self.standard_error_threshold:
                result.converged = True
                break

        logger.debug(
            "pagerank_complete",
            nodes=max_iterations,
            iterations=result.iterations,
            standard_error=result.standard_error,
            converged=result.converged,
        )
        return result

    def _next_rank(
        self,
        key: int,
        predecessors: dict[int, float],
        out_totals: dict[int, float],
        previous: dict[int, float],
    ) -> float:
        total = 0.0
        for source, weight in predecessors.items():
            denominator = out_totals[source]
            if denominator <= 0:
                raise AlgorithmInvariantError(
                    f"node {source} links to node {key} but has total outgoing weight "
                    f"{denominator}"
                )
            total += weight / denominator * previous[source]
        return self.damping_factor * total + (1.0 - self.damping_factor)


def run_pagerank(
    graph: WeightedGraph,
    damping_factor: float,
    standard_error_threshold: float,
    should_stop: Callable[[], bool] | None = None,
) -> PageRankResult:
    """Convenience wrapper around ``PageRankSolver(...).run(graph)``."""
    solver = PageRankSolver(damping_factor, standard_error_threshold, should_stop)
    return solver.run(graph)
