"""Adjacency-matrix loader for ClusterRank graphs.

The matrix file has the node labels on the first row only (no label
column).  Row ``i`` of the remaining lines holds the weights of the
edges from node ``i`` to every column node; a weight of exactly 0 means
no edge.  Example with a space separator::

    label1 label2 label3
    w11 w12 w13
    w21 w22 w23
    w31 w32 w33
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from pathlib import Path

import structlog

from cluster_rank.errors import LoadError
from cluster_rank.graph.model import WeightedGraph

logger = structlog.get_logger()


def split_fields(line: str, separator: str) -> list[str]:
    """Split one matrix line.

    A single-space separator splits on any run of whitespace, so aligned
    matrices load the same as single-spaced ones.  Any other separator,
    tab included, splits exactly and keeps spaces inside labels.
    """
    if separator == " ":
        return line.split()
    return [field.strip() for field in line.rstrip("\r\n").split(separator)]


def _parse_weight(field: str, row: int, column: int) -> float:
    try:
        weight = float(field)
    except ValueError:
        raise LoadError(
            f"row {row + 1}, column {column + 1}: non-numeric weight {field!r}"
        ) from None
    if not math.isfinite(weight) or weight < 0:
        raise LoadError(
            f"row {row + 1}, column {column + 1}: weight must be finite and non-negative, "
            f"got {field!r}"
        )
    return weight


def parse_graph_matrix(lines: Iterable[str], separator: str = " ") -> WeightedGraph:
    """Build a ``WeightedGraph`` from the lines of an adjacency matrix.

    Node keys are the column indices of the header row.  Trailing blank
    lines are ignored; blank lines inside the matrix are not.

    Raises:
        LoadError: The header is missing, a row has the wrong number of
            fields, a weight is not a finite non-negative number, or the
            number of weight rows differs from the number of labels.
    """
    rows = [line.rstrip("\r\n") for line in lines]
    while rows and not rows[-1].strip():
        rows.pop()
    if not rows or not rows[0].strip():
        raise LoadError("graph matrix is empty: expected a header row of node labels")

    labels = split_fields(rows[0], separator)
    graph = WeightedGraph()
    for key, label in enumerate(labels):
        graph.add_node(key, label)

    weight_rows = rows[1:]
    if len(weight_rows) != len(labels):
        raise LoadError(
            f"graph matrix is not square: {len(labels)} labels but {len(weight_rows)} weight rows"
        )

    for row, line in enumerate(weight_rows):
        fields = split_fields(line, separator)
        if len(fields) != len(labels):
            raise LoadError(
                f"row {row + 1}: expected {len(labels)} weights, got {len(fields)}"
            )
        for column, field in enumerate(fields):
            weight = _parse_weight(field, row, column)
            if weight != 0:
                graph.connect(row, column, weight)

    return graph


def load_graph(path: Path, separator: str = " ") -> WeightedGraph:
    """Load a graph matrix file.

    Raises:
        LoadError: The file cannot be read or its contents are malformed.
    """
    try:
        with open(path, encoding="utf-8") as f:
            graph = parse_graph_matrix(f, separator)
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(f"cannot read graph matrix {path}: {e}") from e

    logger.info("graph_loaded", path=str(path), nodes=graph.size(), edges=graph.edge_count)
    return graph
