"""
Quality metrics for a completed clustering.

Computes intra-cluster cohesion (mean pairwise cosine distance between
co-members), inter-cluster separation (mean pairwise cosine distance
between centroids), and a cheap silhouette approximation from the two.
"""

import logging
from typing import Any, Sequence

import numpy as np

from src.clustering.errors import DimensionMismatchError
from src.clustering.schemas import ClusteringQuality, ClusterResult
from src.clustering.similarity import similarity_matrix
from src.clustering.validation import coerce_item

logger = logging.getLogger(__name__)


def _stack(vectors: Sequence[np.ndarray], label: str) -> np.ndarray:
    """Stack equal-length vectors into a matrix."""
    dimension = len(vectors[0])
    for vector in vectors[1:]:
        if len(vector) != dimension:
            raise DimensionMismatchError(
                f"{label} dimension {len(vector)} does not match {dimension}"
            )
    return np.vstack(vectors)


def _pairwise_distance_sum(vectors: np.ndarray) -> tuple[float, int]:
    """Sum of cosine distances over unordered pairs, and the pair count."""
    n = len(vectors)
    if n < 2:
        return 0.0, 0
    distances = 1.0 - similarity_matrix(vectors)
    upper = np.triu_indices(n, k=1)
    return float(np.sum(distances[upper])), len(upper[0])


def evaluate_clustering(
    result: ClusterResult,
    pool: Sequence[Any],
) -> ClusteringQuality:
    """
    Evaluate the quality of a clustering result.

    Args:
        result: Output of IncrementalClusterer.cluster_items().
        pool: Items (ClusterItem objects or mappings) the clusters were
            built from. Member ids missing from the pool are ignored.

    Returns:
        ClusteringQuality. All metrics are 0 and cluster_sizes is empty
        when the result has no clusters.

    Raises:
        InvalidItemError: If a pool item is malformed.
        DimensionMismatchError: If co-members or centroids differ in length.
    """
    if not result.clusters:
        return ClusteringQuality(
            silhouette_score=0.0,
            intra_cluster_distance=0.0,
            inter_cluster_distance=0.0,
            cluster_sizes=[],
        )

    embeddings_by_id: dict[Any, np.ndarray] = {}
    for index, raw in enumerate(pool):
        item = coerce_item(raw, index)
        embeddings_by_id.setdefault(item.id, item.embedding)

    total_intra = 0.0
    intra_pairs = 0
    missing = 0
    for cluster in result.clusters:
        member_vectors = []
        for member_id in cluster.member_ids:
            vector = embeddings_by_id.get(member_id)
            if vector is None:
                missing += 1
                continue
            member_vectors.append(vector)
        if len(member_vectors) < 2:
            continue
        distance_sum, pairs = _pairwise_distance_sum(_stack(member_vectors, "Pool item"))
        total_intra += distance_sum
        intra_pairs += pairs

    if missing:
        logger.debug(f"Evaluation skipped {missing} member ids absent from pool")

    avg_intra = total_intra / intra_pairs if intra_pairs > 0 else 0.0

    centroids = _stack([cluster.centroid for cluster in result.clusters], "Centroid")
    inter_sum, inter_pairs = _pairwise_distance_sum(centroids)
    avg_inter = inter_sum / inter_pairs if inter_pairs > 0 else 0.0

    if avg_inter > 0:
        silhouette = (avg_inter - avg_intra) / max(avg_inter, avg_intra)
    else:
        silhouette = 0.0

    return ClusteringQuality(
        silhouette_score=max(-1.0, min(1.0, silhouette)),
        intra_cluster_distance=avg_intra,
        inter_cluster_distance=avg_inter,
        cluster_sizes=[cluster.size for cluster in result.clusters],
    )
