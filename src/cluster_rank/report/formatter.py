"""Rendering of ClusterRank results for the terminal and for JSON."""

from __future__ import annotations

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from cluster_rank.clustering.extraction import Cluster, ClusterMember


def round_half_up(value: float, places: int = 2) -> float:
    """Round a float's shortest decimal form half-up (2.675 -> 2.68)."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def format_member(member: ClusterMember, separator: str = " | ") -> str:
    fields = [
        f"Key: {member.key}",
        f"Label: {member.label}",
        f"Rank: {round_half_up(member.rank)}",
        f"Outgoing Edges: {member.outgoing_edges}",
        f"Incoming Edges: {member.incoming_edges}",
        f"Cooccurrence: {round_half_up(member.cooccurrence)}",
    ]
    return separator.join(fields)


def format_clusters(clusters: Sequence[Cluster], separator: str = " | ") -> str:
    """Format clusters as delimited text.

    Each cluster is a ``Cluster <id>`` header line followed by one line
    per member, in cluster order.

    Args:
        clusters: Clusters to render, in run order.
        separator: String placed between the fields of a member line.

    Returns:
        The rendered text, newline terminated.
    """
    lines: list[str] = []
    for cluster in clusters:
        lines.append(f"Cluster {cluster.id}")
        lines.extend(format_member(member, separator) for member in cluster)
    return "\n".join(lines) + "\n"


def clusters_to_dict(clusters: Sequence[Cluster]) -> dict:
    return {
        "clusters": [
            {
                "id": cluster.id,
                "size": len(cluster),
                "members": [
                    {
                        "key": m.key,
                        "label": m.label,
                        "rank": m.rank,
                        "cooccurrence": m.cooccurrence,
                        "outgoing_edges": m.outgoing_edges,
                        "incoming_edges": m.incoming_edges,
                    }
                    for m in cluster
                ],
            }
            for cluster in clusters
        ],
        "metadata": {
            "clusterCount": len(clusters),
            "nodeCount": sum(len(c) for c in clusters),
        },
    }
