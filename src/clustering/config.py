"""
Incremental clustering engine configuration.

Provides Pydantic settings for the single-pass feedback clustering engine,
including size bounds, theme extraction, confidence scoring, neighbor search
limits, and adaptive threshold estimation.

Parameter Tuning Guide:
    - default_threshold: Cosine similarity a sentence must strictly exceed to
      join an existing cluster. 0.3 suits loosely related feedback; raise to
      0.7-0.8 for near-duplicate grouping.
    - min_cluster_size: Clusters smaller than this are dissolved into
      outliers. 2 keeps every pairing, higher values keep only real trends.
    - max_clusters: Hard cap on open clusters per call. Once reached the
      overflow_policy decides what happens to the remaining items.
    - threshold_offset: Added to the sampled mean pairwise similarity when
      suggesting a threshold. Larger = stricter suggested thresholds.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClusteringConfig(BaseSettings):
    """
    Configuration for the incremental clustering engine.

    All settings can be overridden via environment variables prefixed with CLUSTERING_.

    Example:
        CLUSTERING_DEFAULT_THRESHOLD=0.5
        CLUSTERING_MAX_CLUSTERS=100
        CLUSTERING_OVERFLOW_POLICY=outliers
    """

    model_config = SettingsConfigDict(
        env_prefix="CLUSTERING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Assignment
    default_threshold: float = Field(
        default=0.3,
        ge=0.0,
        le=1.0,
        description="Similarity an item must strictly exceed to join a cluster.",
    )

    # Size bounds
    min_cluster_size: int = Field(
        default=2,
        ge=1,
        le=1000,
        description="Clusters with fewer members are dissolved into outliers.",
    )
    max_clusters: int = Field(
        default=50,
        ge=1,
        le=10_000,
        description="Maximum open clusters before processing stops.",
    )
    max_items: int = Field(
        default=10_000,
        ge=1,
        le=1_000_000,
        description="Maximum items accepted by a single clustering call.",
    )
    overflow_policy: Literal["stop", "outliers"] = Field(
        default="stop",
        description=(
            "What happens to items left over once max_clusters is reached. "
            "'stop' leaves them unassigned, 'outliers' routes them to outliers."
        ),
    )

    # Theme extraction
    theme_top_n: int = Field(
        default=3,
        ge=1,
        le=20,
        description="Number of frequent words joined into a cluster theme.",
    )
    theme_min_token_length: int = Field(
        default=4,
        ge=1,
        le=20,
        description="Tokens shorter than this are ignored for themes.",
    )

    # Confidence scoring
    confidence_size_bonus_step: float = Field(
        default=0.01,
        ge=0.0,
        le=1.0,
        description="Confidence bonus added per cluster member.",
    )
    confidence_size_bonus_cap: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Upper bound on the size bonus.",
    )

    # Neighbor search
    default_max_results: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Default number of neighbors returned by find_similar.",
    )
    max_results_limit: int = Field(
        default=100,
        ge=1,
        le=10_000,
        description="Largest max_results accepted by find_similar.",
    )

    # Threshold estimation
    threshold_min_items: int = Field(
        default=10,
        ge=2,
        description="Below this many items the default threshold is returned.",
    )
    threshold_sample_size: int = Field(
        default=100,
        ge=2,
        le=10_000,
        description="Number of leading items sampled for pairwise similarity.",
    )
    threshold_offset: float = Field(
        default=0.1,
        ge=-1.0,
        le=1.0,
        description="Added to the mean pairwise similarity.",
    )
    threshold_floor: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Lowest threshold suggest_threshold will return.",
    )
    threshold_ceiling: float = Field(
        default=0.8,
        ge=0.0,
        le=1.0,
        description="Highest threshold suggest_threshold will return.",
    )
