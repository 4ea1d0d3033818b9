"""
Incremental clustering of feedback sentences.

This module groups sentence embeddings into named feedback clusters with a
greedy single-pass algorithm, and provides neighbor search, cluster
merging, adaptive threshold suggestion and quality evaluation on top.

Components:
- ClusteringConfig: Configuration for the clustering engine
- ClusterItem / Cluster / ClusterResult: Input and output value types
- IncrementalClusterer: Service implementing all clustering operations
- ClusteringError: Base of the validation error taxonomy
"""

from src.clustering.config import ClusteringConfig
from src.clustering.errors import (
    ClusteringError,
    DimensionMismatchError,
    EmptyClusterError,
    EmptyInputError,
    InvalidArgumentError,
    InvalidItemError,
    InvalidThresholdError,
    MissingMemberError,
    TooManyItemsError,
)
from src.clustering.evaluation import evaluate_clustering
from src.clustering.schemas import (
    Cluster,
    ClusteringQuality,
    ClusterItem,
    ClusterResult,
    SimilarItem,
)
from src.clustering.service import IncrementalClusterer
from src.clustering.similarity import cosine_distance, cosine_similarity, update_centroid
from src.clustering.summary import cluster_confidence, generate_theme

__all__ = [
    "ClusteringConfig",
    "ClusterItem",
    "Cluster",
    "ClusterResult",
    "ClusteringQuality",
    "SimilarItem",
    "IncrementalClusterer",
    "evaluate_clustering",
    "cosine_similarity",
    "cosine_distance",
    "update_centroid",
    "generate_theme",
    "cluster_confidence",
    "ClusteringError",
    "InvalidItemError",
    "DimensionMismatchError",
    "InvalidThresholdError",
    "EmptyInputError",
    "TooManyItemsError",
    "InvalidArgumentError",
    "EmptyClusterError",
    "MissingMemberError",
]
