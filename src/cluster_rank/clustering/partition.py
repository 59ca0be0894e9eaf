"""Division of graph nodes into Low/Mid/High sets.

A ``ClusterRankPartition`` is a read-only snapshot of the graph taken
after PageRank and feature assignment.  It divides the live nodes twice:

* by PageRank score, always with the mean rule and fixed bounds of half
  a standard deviation on either side of the mean;
* by a feature (co-occurrence unless told otherwise), with either the
  mean rule and configurable bounds or the IQR outlier rule.

Both rules use strict inequalities, so with zero spread every node ends
up in the Mid set.  The snapshot must be rebuilt after nodes are removed
or features change.
"""

from __future__ import annotations

import math
import statistics
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from cluster_rank.clustering.config import PartitionConfig, SetDivisionApproach
from cluster_rank.graph.model import Node, WeightedGraph
from cluster_rank.ranking.features import Feature

__all__ = [
    "BucketSummary",
    "ClusterRankPartition",
    "FeatureStatistics",
    "SetDivisionApproach",
    "SetLevel",
    "classify_iqr",
    "classify_mean",
    "describe_values",
    "quartile_positions",
]

PAGERANK_SCORE_LOWER_BOUND = 0.5
PAGERANK_SCORE_UPPER_BOUND = 0.5
IQR_OUTLIER_FACTOR = 1.5


class SetLevel(Enum):
    LOW = "low"
    MID = "mid"
    HIGH = "high"


@dataclass(frozen=True)
class FeatureStatistics:
    """Summary of one value over all live nodes.

    ``variance`` is the sample variance (N - 1 denominator), taken as 0.0
    for fewer than two values.  Every field but ``count`` is ``None`` for
    an empty graph.
    """

    count: int
    mean: float | None
    variance: float | None
    standard_deviation: float | None
    q1: float | None
    q3: float | None

    @property
    def iqr(self) -> float | None:
        if self.q1 is None or self.q3 is None:
            return None
        return self.q3 - self.q1


@dataclass(frozen=True)
class BucketSummary:
    """Aggregates over the nodes of one set; ``None`` when the set is empty."""

    level: SetLevel
    size: int
    feature_min: float | None = None
    feature_max: float | None = None
    feature_mean: float | None = None
    rank_min: float | None = None
    rank_max: float | None = None
    rank_mean: float | None = None

    def as_dict(self) -> dict[str, float | int | str | None]:
        return {
            "level": self.level.value,
            "size": self.size,
            "feature_min": self.feature_min,
            "feature_max": self.feature_max,
            "feature_mean": self.feature_mean,
            "rank_min": self.rank_min,
            "rank_max": self.rank_max,
            "rank_mean": self.rank_mean,
        }


def quartile_positions(size: int) -> tuple[int, int]:
    """Indices of Q1 and Q3 in an ascending list of ``size`` values.

    Q1 sits at ``size / 4`` rounded half-up and Q3 at three times that
    index, clamped to the last element.  This is a nearest-rank
    approximation, not an interpolated quartile.
    """
    if size < 1:
        raise ValueError("quartiles need at least one value")
    q1_position = math.floor(size / 4.0 + 0.5)
    q3_position = q1_position * 3
    return min(q1_position, size - 1), min(q3_position, size - 1)


def describe_values(values: Iterable[float]) -> FeatureStatistics:
    values = list(values)
    if not values:
        return FeatureStatistics(0, None, None, None, None, None)

    ordered = sorted(values)
    q1_position, q3_position = quartile_positions(len(ordered))
    if ordered[0] == ordered[-1]:
        mean, variance = ordered[0], 0.0
    else:
        mean = statistics.fmean(values)
        variance = statistics.variance(values, mean) if len(values) > 1 else 0.0

    return FeatureStatistics(
        count=len(values),
        mean=mean,
        variance=variance,
        standard_deviation=math.sqrt(variance),
        q1=ordered[q1_position],
        q3=ordered[q3_position],
    )


def classify_mean(
    value: float,
    mean: float,
    standard_deviation: float,
    lower_bound: float,
    upper_bound: float,
) -> SetLevel:
    """Low below ``mean - lower_bound * sd``, High above ``mean + upper_bound * sd``."""
    if value < mean - lower_bound * standard_deviation:
        return SetLevel.LOW
    if value > mean + upper_bound * standard_deviation:
        return SetLevel.HIGH
    return SetLevel.MID


def classify_iqr(value: float, q1: float, q3: float) -> SetLevel:
    """Tukey fences: outside ``[q1 - 1.5 * iqr, q3 + 1.5 * iqr]`` is Low/High."""
    iqr = q3 - q1
    if value < q1 - IQR_OUTLIER_FACTOR * iqr:
        return SetLevel.LOW
    if value > q3 + IQR_OUTLIER_FACTOR * iqr:
        return SetLevel.HIGH
    return SetLevel.MID


def _empty_sets() -> dict[SetLevel, list[Node]]:
    return {level: [] for level in SetLevel}


def _summarize(level: SetLevel, nodes: Sequence[Node], feature: Feature) -> BucketSummary:
    if not nodes:
        return BucketSummary(level=level, size=0)
    values = [feature.value_of(node) for node in nodes]
    ranks = [node.rank for node in nodes]
    return BucketSummary(
        level=level,
        size=len(nodes),
        feature_min=min(values),
        feature_max=max(values),
        feature_mean=statistics.fmean(values),
        rank_min=min(ranks),
        rank_max=max(ranks),
        rank_mean=statistics.fmean(ranks),
    )


class ClusterRankPartition:
    """Rank sets and feature sets of the live nodes of a graph.

    Args:
        graph: Graph whose ranks and features are already assigned.
        approach: Rule for the feature sets.
        lower_bound: Standard deviations below the mean for the Low
            feature set (mean rule only).
        upper_bound: Standard deviations above the mean for the High
            feature set (mean rule only).
        feature: Feature to divide on.
    """

    def __init__(
        self,
        graph: WeightedGraph,
        approach: SetDivisionApproach = SetDivisionApproach.MEAN,
        lower_bound: float = 1.0,
        upper_bound: float = 1.0,
        feature: Feature = Feature.COOCCURRENCE,
    ) -> None:
        self.approach = approach
        self.feature = feature
        self.lower_bound = lower_bound
        self.upper_bound = upper_bound
        self._nodes: tuple[Node, ...] = tuple(graph)

        self.rank_statistics = describe_values(node.rank for node in self._nodes)
        self.feature_statistics = describe_values(feature.value_of(node) for node in self._nodes)

        self._rank_sets = self._divide_mean(
            Feature.RANK,
            self.rank_statistics,
            PAGERANK_SCORE_LOWER_BOUND,
            PAGERANK_SCORE_UPPER_BOUND,
        )
        if approach is SetDivisionApproach.MEAN:
            self._feature_sets = self._divide_mean(
                feature, self.feature_statistics, lower_bound, upper_bound
            )
        else:
            self._feature_sets = self._divide_iqr(feature, self.feature_statistics)

    @classmethod
    def from_config(
        cls,
        graph: WeightedGraph,
        config: PartitionConfig,
        feature: Feature = Feature.COOCCURRENCE,
    ) -> "ClusterRankPartition":
        return cls(
            graph,
            approach=config.approach,
            lower_bound=config.edge_weight_lower_bound,
            upper_bound=config.edge_weight_upper_bound,
            feature=feature,
        )

    def __len__(self) -> int:
        return len(self._nodes)

    def _divide_mean(
        self,
        feature: Feature,
        stats: FeatureStatistics,
        lower_bound: float,
        upper_bound: float,
    ) -> dict[SetLevel, list[Node]]:
        sets = _empty_sets()
        if stats.count == 0:
            return sets
        for node in self._nodes:
            level = classify_mean(
                feature.value_of(node),
                stats.mean,
                stats.standard_deviation,
                lower_bound,
                upper_bound,
            )
            sets[level].append(node)
        return sets

    def _divide_iqr(
        self, feature: Feature, stats: FeatureStatistics
    ) -> dict[SetLevel, list[Node]]:
        sets = _empty_sets()
        if stats.count == 0:
            return sets
        for node in self._nodes:
            sets[classify_iqr(feature.value_of(node), stats.q1, stats.q3)].append(node)
        return sets

    def rank_set(self, level: SetLevel) -> list[Node]:
        """Nodes in a PageRank score set, in key order."""
        return list(self._rank_sets[level])

    def feature_set(self, level: SetLevel) -> list[Node]:
        """Nodes in a feature set, in key order."""
        return list(self._feature_sets[level])

    def rank_set_summary(self, level: SetLevel) -> BucketSummary:
        return _summarize(level, self._rank_sets[level], Feature.RANK)

    def feature_set_summary(self, level: SetLevel) -> BucketSummary:
        return _summarize(level, self._feature_sets[level], self.feature)

    def sorted_by_rank(self) -> list[Node]:
        """Nodes by descending rank, ties in key order."""
        return sorted(self._nodes, key=lambda node: -node.rank)

    def sorted_by_feature(self, ascending: bool = True) -> list[Node]:
        """Nodes by feature value, ties in key order."""
        return sorted(self._nodes, key=self.feature.value_of, reverse=not ascending)

    def describe(self) -> dict[str, object]:
        """Statistics and set summaries, shaped for structured logging."""
        return {
            "approach": self.approach.value,
            "feature": self.feature.value,
            "nodes": len(self._nodes),
            "rank_mean": self.rank_statistics.mean,
            "rank_standard_deviation": self.rank_statistics.standard_deviation,
            "feature_mean": self.feature_statistics.mean,
            "feature_variance": self.feature_statistics.variance,
            "feature_standard_deviation": self.feature_statistics.standard_deviation,
            "feature_q1": self.feature_statistics.q1,
            "feature_q3": self.feature_statistics.q3,
            "rank_sets": {
                level.value: len(nodes) for level, nodes in self._rank_sets.items()
            },
            "feature_sets": [
                self.feature_set_summary(level).as_dict() for level in SetLevel
            ],
        }
