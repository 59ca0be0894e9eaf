"""Error taxonomy for a ClusterRank run.

Every failure is deterministic for a given input, so nothing here is
retried.  Callers either get the full list of clusters or one of these.
"""

from __future__ import annotations


class ClusterRankError(Exception):
    """Base class for all ClusterRank failures."""


class ConfigError(ClusterRankError):
    """A configuration value is missing or cannot be parsed."""


class LoadError(ClusterRankError):
    """The graph matrix is missing, unreadable or malformed."""


class AlgorithmInvariantError(ClusterRankError):
    """An internal invariant was violated (e.g. a zero rank denominator)."""


class RunCancelledError(ClusterRankError):
    """The caller's ``should_stop`` hook asked the run to stop."""


class RunFailedError(ClusterRankError):
    """Any other failure while clustering; the cause is chained."""


class NodeNotFoundError(ClusterRankError, KeyError):
    """A node key is not owned by the graph."""

    def __init__(self, key: int) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"node {self.key!r} is not in the graph"
