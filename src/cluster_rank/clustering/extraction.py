"""ClusterRank cluster extraction.

Runs ``k`` passes over a shared graph.  Each pass:

1. runs weighted PageRank over the live nodes,
2. assigns the co-occurrence feature against the reference node,
3. divides the nodes into Low/Mid/High co-occurrence sets,
4. takes the High set as the pass's cluster,
5. removes the cluster's nodes from the graph.

Whatever survives the ``k`` passes becomes one final cluster, so a run
yields ``k + 1`` disjoint clusters covering every input node.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from cluster_rank.clustering.config import ClusteringConfig
from cluster_rank.clustering.partition import ClusterRankPartition, SetLevel
from cluster_rank.errors import ClusterRankError, RunCancelledError, RunFailedError
from cluster_rank.graph.loader import load_graph
from cluster_rank.graph.model import Node, WeightedGraph
from cluster_rank.ranking.features import Feature, assign_cooccurrence, select_reference_node
from cluster_rank.ranking.pagerank import PageRankResult, PageRankSolver

logger = structlog.get_logger()


@dataclass(frozen=True)
class ClusterMember:
    """A node as it stood when it was assigned to a cluster."""

    key: int
    label: str
    rank: float
    cooccurrence: float
    outgoing_edges: int
    incoming_edges: int

    @classmethod
    def snapshot(cls, graph: WeightedGraph, node: Node) -> "ClusterMember":
        return cls(
            key=node.key,
            label=node.label,
            rank=node.rank,
            cooccurrence=node.cooccurrence,
            outgoing_edges=graph.out_degree(node),
            incoming_edges=graph.in_degree(node),
        )


@dataclass
class Cluster:
    """Nodes assigned to one cluster, ordered by descending rank."""

    id: str
    members: list[ClusterMember] = field(default_factory=list)

    @classmethod
    def from_nodes(
        cls, cluster_id: str, graph: WeightedGraph, nodes: Iterable[Node]
    ) -> "Cluster":
        ordered = sorted(nodes, key=lambda node: (-node.rank, node.key))
        return cls(
            id=cluster_id,
            members=[ClusterMember.snapshot(graph, node) for node in ordered],
        )

    def __len__(self) -> int:
        return len(self.members)

    def __iter__(self) -> Iterator[ClusterMember]:
        return iter(self.members)

    def keys(self) -> list[int]:
        return [member.key for member in self.members]

    def labels(self) -> list[str]:
        return [member.label for member in self.members]


@dataclass
class PassResult:
    """Diagnostics for one extraction pass."""

    index: int
    cluster: Cluster
    pagerank: PageRankResult
    reference_key: int | None
    remaining_nodes: int


@dataclass
class ClusterRankResult:
    """Result of a complete run.

    Attributes:
        clusters: ``k`` pass clusters followed by the remainder cluster.
        passes: Per-pass diagnostics, one per pass cluster.
        elapsed_ms: Wall time spent forming clusters (loading excluded).
    """

    clusters: list[Cluster]
    passes: list[PassResult] = field(default_factory=list)
    elapsed_ms: float = 0.0


class ClusterRank:
    """Drives the extraction passes over a graph it mutates in place.

    Args:
        config: Run configuration.
        should_stop: Optional hook polled between passes and at every
            PageRank iteration; returning ``True`` aborts the run with
            ``RunCancelledError``.
    """

    def __init__(
        self,
        config: ClusteringConfig,
        should_stop: Callable[[], bool] | None = None,
    ) -> None:
        self.config = config
        self.should_stop = should_stop
        self.solver = PageRankSolver(
            config.pagerank.damping_factor,
            config.pagerank.standard_error_threshold,
            should_stop=should_stop,
        )

    def run(self, graph: WeightedGraph) -> ClusterRankResult:
        """Extract ``config.clusters`` clusters plus the remainder.

        Raises:
            ClusterRankError: Any taxonomy error propagates unchanged.
            RunFailedError: Any other exception, chained as the cause.
        """
        try:
            return self._run(graph)
        except ClusterRankError:
            raise
        except Exception as e:
            raise RunFailedError(f"cluster extraction failed: {e}") from e

    def _run(self, graph: WeightedGraph) -> ClusterRankResult:
        started = time.perf_counter()
        passes: list[PassResult] = []

        for index in range(self.config.clusters):
            if self.should_stop is not None and self.should_stop():
                raise RunCancelledError(f"cancelled before pass {index}")
            passes.append(self.run_pass(graph, index))

        remainder = Cluster.from_nodes(str(self.config.clusters), graph, graph)
        clusters = [p.cluster for p in passes] + [remainder]
        elapsed_ms = (time.perf_counter() - started) * 1000.0

        logger.info(
            "cluster_rank_complete",
            clusters=len(clusters),
            sizes=[len(c) for c in clusters],
            elapsed_ms=round(elapsed_ms, 3),
        )
        return ClusterRankResult(clusters=clusters, passes=passes, elapsed_ms=elapsed_ms)

    def run_pass(self, graph: WeightedGraph, index: int) -> PassResult:
        """Run one pass and remove the extracted cluster from ``graph``."""
        log = logger.bind(pass_index=index)
        log.info("pass_started", nodes=graph.size(), edges=graph.edge_count)

        pagerank = self.solver.run(graph)
        log.info(
            "pagerank_complete",
            iterations=pagerank.iterations,
            standard_error=pagerank.standard_error,
            converged=pagerank.converged,
        )

        reference = select_reference_node(graph, self.config.reference_node)
        if reference is not None:
            assign_cooccurrence(graph, reference)

        partition = ClusterRankPartition.from_config(
            graph, self.config.partition, feature=Feature.COOCCURRENCE
        )
        log.debug("feature_sets_assigned", **partition.describe())

        cluster = Cluster.from_nodes(str(index), graph, partition.feature_set(SetLevel.HIGH))
        log.info("cluster_formed", cluster_id=cluster.id, size=len(cluster), labels=cluster.labels())

        for key in cluster.keys():
            graph.remove_node(key)
        log.info("cluster_nodes_removed", removed=len(cluster), remaining=graph.size())

        return PassResult(
            index=index,
            cluster=cluster,
            pagerank=pagerank,
            reference_key=reference.key if reference is not None else None,
            remaining_nodes=graph.size(),
        )


def run_cluster_rank(
    matrix_path: Path,
    config: ClusteringConfig,
    should_stop: Callable[[], bool] | None = None,
) -> ClusterRankResult:
    """Load a graph matrix and run ClusterRank over it.

    Either all ``config.clusters + 1`` clusters are returned or a single
    ``ClusterRankError`` is raised; no partial results.
    """
    try:
        graph = load_graph(matrix_path, config.graph_file_separator)
    except ClusterRankError:
        raise
    except Exception as e:
        raise RunFailedError(f"loading {matrix_path} failed: {e}") from e
    return ClusterRank(config, should_stop=should_stop).run(graph)
