"""ClusterRank: PageRank-driven graph clustering over co-occurrence sets."""

__version__ = "0.1.0"
