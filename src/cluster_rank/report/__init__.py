"""Text and JSON rendering of ClusterRank clusters."""

from .formatter import clusters_to_dict, format_clusters

__all__ = ["clusters_to_dict", "format_clusters"]
