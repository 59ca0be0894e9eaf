"""ClusterRank run configuration with sensible defaults.

All parameters can be overridden via ``config/clustering.yaml``.
If the file does not exist, defaults are used.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import structlog
import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from cluster_rank.errors import ConfigError
from cluster_rank.ranking.features import ReferenceNode


class SetDivisionApproach(str, Enum):
    """How nodes are split into Low/Mid/High feature sets."""

    MEAN = "mean"
    IQR = "iqr"


class PageRankConfig(BaseModel):
    """Parameters for the weighted PageRank power iteration."""

    damping_factor: float = Field(default=0.85, gt=0.0, lt=1.0)
    standard_error_threshold: float = Field(default=0.0001, gt=0.0)


class PartitionConfig(BaseModel):
    """Parameters for dividing nodes into feature sets."""

    approach: SetDivisionApproach = SetDivisionApproach.MEAN
    edge_weight_lower_bound: float = Field(default=1.0, ge=0.0)
    edge_weight_upper_bound: float = Field(default=1.0, ge=0.0)

    @field_validator("approach", mode="before")
    @classmethod
    def normalize_approach(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @model_validator(mode="after")
    def warn_if_bounds_unused(self) -> "PartitionConfig":
        """Log a warning when custom bounds are set for the IQR approach."""
        if self.approach is SetDivisionApproach.IQR and (
            self.edge_weight_lower_bound != 1.0 or self.edge_weight_upper_bound != 1.0
        ):
            structlog.get_logger().warning(
                "edge_weight_bounds_ignored",
                approach=self.approach.value,
                lower=self.edge_weight_lower_bound,
                upper=self.edge_weight_upper_bound,
            )
        return self


class ClusteringConfig(BaseModel):
    """Top-level run configuration combining all sub-configs."""

    clusters: int = Field(default=1, ge=0)
    graph_file_separator: str = Field(default=" ", min_length=1)
    reference_node: ReferenceNode = ReferenceNode.FIRST_KEY
    pagerank: PageRankConfig = PageRankConfig()
    partition: PartitionConfig = PartitionConfig()


def load_clustering_config(path: Path, missing_ok: bool = True) -> ClusteringConfig:
    """Load run configuration from a YAML file.

    If the file does not exist and ``missing_ok`` is set, returns a
    ``ClusteringConfig`` with all default values.  Partial overrides are
    supported: only the keys present in the YAML file override defaults.

    Raises:
        ConfigError: The file is missing and ``missing_ok`` is false, is
            not valid YAML, is not a mapping, or holds values that fail
            validation.
    """
    if not path.exists():
        if not missing_ok:
            raise ConfigError(f"configuration file {path} does not exist")
        return ClusteringConfig()

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot read configuration {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"configuration {path} must be a mapping, got {type(data).__name__}")

    try:
        return ClusteringConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"invalid configuration {path}: {e}") from e
