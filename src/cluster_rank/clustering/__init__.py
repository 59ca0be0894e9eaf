"""ClusterRank clustering.

Divides ranked nodes into Low/Mid/High co-occurrence sets and peels the
High set off the graph as a cluster, pass after pass.
"""

from .config import ClusteringConfig, load_clustering_config
from .extraction import Cluster, ClusterMember, ClusterRank, ClusterRankResult, run_cluster_rank
from .partition import ClusterRankPartition, SetDivisionApproach, SetLevel

__all__ = [
    "Cluster",
    "ClusterMember",
    "ClusterRank",
    "ClusterRankPartition",
    "ClusterRankResult",
    "ClusteringConfig",
    "SetDivisionApproach",
    "SetLevel",
    "load_clustering_config",
    "run_cluster_rank",
]
