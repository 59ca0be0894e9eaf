"""Generate a synthetic adjacency matrix for trying out ClusterRank.

Node 0 is a hub.  A handful of "strong" nodes exchange heavy edges with
the hub, the rest exchange light ones, and a sprinkling of random light
edges connects the non-hub nodes to each other.  With the default mean
bounds the strong nodes are what the first pass should peel off.

Usage:
    python scripts/generate_matrix.py [--nodes 30] [--strong 4] [--seed 7] [--output graph.txt]
"""

import argparse
import random
from pathlib import Path


def generate_matrix(
    nodes: int,
    strong: int,
    density: float,
    rng: random.Random,
) -> tuple[list[str], list[list[int]]]:
    """Return labels and an ``nodes x nodes`` integer weight matrix."""
    labels = ["hub"] + [f"n{i}" for i in range(1, nodes)]
    weights = [[0] * nodes for _ in range(nodes)]
    strong_nodes = set(rng.sample(range(1, nodes), min(strong, nodes - 1)))

    for i in range(1, nodes):
        low, high = (8, 12) if i in strong_nodes else (1, 3)
        weights[i][0] = rng.randint(low, high)
        weights[0][i] = rng.randint(low, high)
        for j in range(1, nodes):
            if i != j and rng.random() < density:
                weights[i][j] = rng.randint(1, 2)

    return labels, weights


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate a synthetic ClusterRank matrix")
    parser.add_argument("--nodes", type=int, default=30, help="Number of nodes (default: 30)")
    parser.add_argument("--strong", type=int, default=4, help="Nodes tied strongly to the hub")
    parser.add_argument("--density", type=float, default=0.1, help="Chance of a random edge")
    parser.add_argument("--seed", type=int, default=7, help="Random seed")
    parser.add_argument("--separator", type=str, default=" ", help="Field separator")
    parser.add_argument("--output", type=str, default="graph.txt", help="Output file")
    args = parser.parse_args()

    if args.nodes < 2:
        parser.error("--nodes must be at least 2")

    labels, weights = generate_matrix(
        args.nodes, args.strong, args.density, random.Random(args.seed)
    )
    lines = [args.separator.join(labels)]
    lines.extend(args.separator.join(str(w) for w in row) for row in weights)

    output = Path(args.output)
    output.write_text("\n".join(lines) + "\n", encoding="utf-8")
    print(f"Wrote {args.nodes}x{args.nodes} matrix to {output}")


if __name__ == "__main__":
    main()
