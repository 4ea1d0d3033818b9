"""
Incremental clustering service for grouping feedback sentences.

Provides single-pass online clustering of sentences using pre-computed
embeddings, plus post-hoc operations on the resulting clusters: neighbor
search, merging, adaptive threshold suggestion and quality evaluation.

Architecture:
- All input is validated up front; failures raise before any work starts
- Greedy assignment to the most similar centroid above the threshold
- Clusters are immutable values replaced on every membership change
- No state survives between calls; each call owns its clusters
"""

import dataclasses
import logging
import time
from typing import Any, Sequence

import numpy as np

from src.clustering.config import ClusteringConfig
from src.clustering.errors import (
    DimensionMismatchError,
    EmptyClusterError,
    InvalidArgumentError,
    MissingMemberError,
)
from src.clustering.evaluation import evaluate_clustering
from src.clustering.schemas import (
    Cluster,
    ClusteringQuality,
    ClusterItem,
    ClusterResult,
    ItemId,
    SimilarItem,
)
from src.clustering.similarity import (
    cosine_similarity,
    mean_pairwise_similarity,
    update_centroid,
)
from src.clustering.summary import cluster_confidence, generate_theme
from src.clustering.validation import coerce_item, validate_items, validate_threshold

logger = logging.getLogger(__name__)


class IncrementalClusterer:
    """
    Greedy single-pass clusterer for sentence embeddings.

    Each item joins the existing cluster whose centroid it is most similar
    to, provided the similarity strictly exceeds the threshold; otherwise it
    starts a new cluster. Clusters that end up below min_cluster_size are
    dissolved into outliers.

    Usage:
        >>> clusterer = IncrementalClusterer()
        >>> result = clusterer.cluster_items(items, threshold=0.8)
        >>> for cluster in result.clusters:
        ...     print(f"{cluster.theme}: {cluster.size} sentences")
        product, quality, features: 2 sentences
        customer, service, support: 2 sentences
    """

    def __init__(self, config: ClusteringConfig | None = None):
        """
        Initialize clustering service.

        Args:
            config: Clustering configuration. If None, uses default config.
        """
        self.config = config or ClusteringConfig()

    def cluster_items(
        self,
        items: Sequence[Any],
        threshold: float | None = None,
    ) -> ClusterResult:
        """
        Partition items into clusters of similar embeddings.

        Args:
            items: ClusterItem objects or mappings with id/text/embedding.
            threshold: Similarity an item must strictly exceed to join a
                cluster. Defaults to config.default_threshold.

        Returns:
            ClusterResult with clusters sorted largest first and the ids of
            dissolved singletons as outliers.

        Raises:
            EmptyInputError: If items is empty.
            TooManyItemsError: If there are more than config.max_items items.
            InvalidItemError: If any item is malformed.
            InvalidThresholdError: If threshold is outside [0, 1].
        """
        validated = validate_items(items, max_items=self.config.max_items)
        threshold = validate_threshold(
            self.config.default_threshold if threshold is None else threshold
        )

        start_time = time.monotonic()

        items_by_id: dict[ItemId, ClusterItem] = {}
        clusters: list[Cluster] = []
        processed: set[ItemId] = set()
        leftover: list[ItemId] = []

        for position, item in enumerate(validated):
            if item.id in processed:
                continue

            if len(clusters) >= self.config.max_clusters:
                leftover = self._remaining_ids(validated[position:], processed)
                break

            items_by_id[item.id] = item
            best_index = self._best_cluster_index(item, clusters, threshold)

            if best_index is not None:
                clusters[best_index] = self._add_member(
                    clusters[best_index], item, items_by_id
                )
            else:
                clusters.append(self._new_cluster(item))

            processed.add(item.id)

        kept: list[Cluster] = []
        outliers: list[ItemId] = []
        for cluster in clusters:
            if cluster.size >= self.config.min_cluster_size:
                kept.append(cluster)
            else:
                outliers.extend(cluster.member_ids)

        # sorted() is stable, so equal sizes keep creation order
        kept = sorted(kept, key=lambda c: c.size, reverse=True)

        unassigned: list[ItemId] = []
        if leftover:
            logger.warning(
                f"Cluster limit of {self.config.max_clusters} reached: "
                f"{len(leftover)} items not clustered "
                f"(overflow_policy={self.config.overflow_policy})"
            )
            if self.config.overflow_policy == "outliers":
                outliers.extend(leftover)
            else:
                unassigned = leftover

        elapsed = time.monotonic() - start_time
        logger.info(
            f"Clustering complete: {len(kept)} clusters, {len(outliers)} outliers, "
            f"{len(unassigned)} unassigned, threshold={threshold:.3f}, "
            f"{elapsed:.3f}s elapsed"
        )

        return ClusterResult(clusters=kept, outliers=outliers, unassigned=unassigned)

    def _best_cluster_index(
        self,
        item: ClusterItem,
        clusters: list[Cluster],
        threshold: float,
    ) -> int | None:
        """Index of the most similar cluster above threshold; first wins ties."""
        best_index: int | None = None
        best_similarity = threshold
        for index, cluster in enumerate(clusters):
            similarity = cosine_similarity(item.embedding, cluster.centroid)
            if similarity > best_similarity:
                best_similarity = similarity
                best_index = index
        return best_index

    def _new_cluster(self, item: ClusterItem) -> Cluster:
        centroid = item.embedding.copy()
        return Cluster(
            cluster_id=Cluster.generate_cluster_id(),
            member_ids=(item.id,),
            centroid=centroid,
            theme=self._theme([item.text]),
            confidence=self._confidence([item.embedding], centroid),
        )

    def _add_member(
        self,
        cluster: Cluster,
        item: ClusterItem,
        items_by_id: dict[ItemId, ClusterItem],
    ) -> Cluster:
        member_ids = cluster.member_ids + (item.id,)
        centroid = update_centroid(cluster.centroid, item.embedding, len(member_ids))
        members = [items_by_id[member_id] for member_id in member_ids]
        return dataclasses.replace(
            cluster,
            member_ids=member_ids,
            centroid=centroid,
            theme=self._theme([m.text for m in members]),
            confidence=self._confidence([m.embedding for m in members], centroid),
        )

    @staticmethod
    def _remaining_ids(
        remaining: Sequence[ClusterItem],
        processed: set[ItemId],
    ) -> list[ItemId]:
        """Distinct ids of items never reached, in input order."""
        seen = set(processed)
        ids: list[ItemId] = []
        for item in remaining:
            if item.id not in seen:
                seen.add(item.id)
                ids.append(item.id)
        return ids

    def _theme(self, texts: list[str]) -> str:
        return generate_theme(
            texts,
            top_n=self.config.theme_top_n,
            min_token_length=self.config.theme_min_token_length,
        )

    def _confidence(self, embeddings: list[np.ndarray], centroid: np.ndarray) -> float:
        return cluster_confidence(
            embeddings,
            centroid,
            size_bonus_step=self.config.confidence_size_bonus_step,
            size_bonus_cap=self.config.confidence_size_bonus_cap,
        )

    def find_similar(
        self,
        target: Any,
        pool: Sequence[Any],
        threshold: float | None = None,
        max_results: int | None = None,
    ) -> list[SimilarItem]:
        """
        Find the pool items most similar to a target item.

        Args:
            target: Query item (ClusterItem or mapping).
            pool: Candidate items. Entries sharing the target's id are skipped.
            threshold: Minimum similarity (inclusive). Defaults to
                config.default_threshold.
            max_results: Maximum hits to return, 1..config.max_results_limit.
                Defaults to config.default_max_results.

        Returns:
            SimilarItem hits sorted by similarity descending; equal
            similarities keep pool order.

        Raises:
            InvalidItemError: If the target or any pool item is malformed.
            EmptyInputError: If pool is empty.
            DimensionMismatchError: If target and pool dimensions differ.
            InvalidThresholdError: If threshold is outside [0, 1].
            InvalidArgumentError: If max_results is out of range.
        """
        target_item = validate_items([target])[0]
        candidates = validate_items(pool)
        threshold = validate_threshold(
            self.config.default_threshold if threshold is None else threshold
        )
        if max_results is None:
            max_results = self.config.default_max_results
        if (
            isinstance(max_results, bool)
            or not isinstance(max_results, int)
            or not 1 <= max_results <= self.config.max_results_limit
        ):
            raise InvalidArgumentError(
                f"max_results must be between 1 and {self.config.max_results_limit}"
            )
        if candidates[0].dimension != target_item.dimension:
            raise DimensionMismatchError(
                f"Target dimension {target_item.dimension} does not match "
                f"pool dimension {candidates[0].dimension}"
            )

        hits = [
            SimilarItem(
                item=candidate,
                similarity=cosine_similarity(target_item.embedding, candidate.embedding),
            )
            for candidate in candidates
            if candidate.id != target_item.id
        ]
        hits = [hit for hit in hits if hit.similarity >= threshold]
        hits.sort(key=lambda hit: hit.similarity, reverse=True)

        return hits[:max_results]

    def merge_clusters(
        self,
        first: Cluster,
        second: Cluster,
        pool: Sequence[Any],
    ) -> Cluster:
        """
        Combine two clusters into a fresh one.

        The new centroid is the size-weighted average of both centroids;
        theme and confidence are recomputed over all combined members.
        Neither input cluster is modified.

        Args:
            first: Cluster whose members come first.
            second: Cluster whose members follow.
            pool: Items the members can be resolved from.

        Returns:
            New Cluster with a fresh id and first + second member ids.

        Raises:
            EmptyClusterError: If either cluster has no members.
            MissingMemberError: If a member id is not in pool.
            DimensionMismatchError: If the centroids differ in length.
        """
        if first.size == 0 or second.size == 0:
            raise EmptyClusterError("Cannot merge empty clusters")

        items_by_id: dict[ItemId, ClusterItem] = {}
        for index, raw in enumerate(pool):
            item = coerce_item(raw, index)
            items_by_id.setdefault(item.id, item)

        member_ids = first.member_ids + second.member_ids
        missing = [member_id for member_id in member_ids if member_id not in items_by_id]
        if missing:
            raise MissingMemberError(missing)

        first_centroid = np.asarray(first.centroid, dtype=np.float64)
        second_centroid = np.asarray(second.centroid, dtype=np.float64)
        if first_centroid.shape != second_centroid.shape:
            raise DimensionMismatchError(
                "Cannot merge clusters with centroids of different dimensions"
            )

        total = len(member_ids)
        centroid = (
            first_centroid * (first.size / total)
            + second_centroid * (second.size / total)
        )
        members = [items_by_id[member_id] for member_id in member_ids]

        merged = Cluster(
            cluster_id=Cluster.generate_cluster_id(),
            member_ids=member_ids,
            centroid=centroid,
            theme=self._theme([m.text for m in members]),
            confidence=self._confidence([m.embedding for m in members], centroid),
        )

        logger.info(
            f"Merged clusters {first.cluster_id} and {second.cluster_id} "
            f"into {merged.cluster_id}: {total} members"
        )
        return merged

    def suggest_threshold(self, items: Sequence[Any]) -> float:
        """
        Suggest a clustering threshold from the data itself.

        Samples the leading items, computes their mean pairwise cosine
        similarity and returns it plus config.threshold_offset, clamped to
        [config.threshold_floor, config.threshold_ceiling].

        Args:
            items: ClusterItem objects or mappings.

        Returns:
            Suggested threshold, or config.default_threshold when there are
            fewer than config.threshold_min_items items.

        Raises:
            EmptyInputError: If items is empty.
            InvalidItemError: If any item is malformed.
        """
        validated = validate_items(items)
        if len(validated) < self.config.threshold_min_items:
            return self.config.default_threshold

        sample = validated[: self.config.threshold_sample_size]
        mean_similarity = mean_pairwise_similarity(
            np.vstack([item.embedding for item in sample])
        )
        suggested = min(
            self.config.threshold_ceiling,
            max(self.config.threshold_floor, mean_similarity + self.config.threshold_offset),
        )

        logger.info(
            f"Suggested threshold {suggested:.3f} from {len(sample)} sampled items "
            f"(mean similarity {mean_similarity:.3f})"
        )
        return suggested

    def evaluate(self, result: ClusterResult, pool: Sequence[Any]) -> ClusteringQuality:
        """
        Compute cohesion, separation and silhouette for a clustering result.

        See evaluate_clustering() for metric definitions.
        """
        return evaluate_clustering(result, pool)

    def get_stats(self, result: ClusterResult) -> dict[str, Any]:
        """
        Summarize a clustering result.

        Returns:
            Dictionary with cluster, outlier and unassigned counts and
            per-cluster stats.
        """
        return {
            "n_clusters": len(result.clusters),
            "n_clustered": sum(cluster.size for cluster in result.clusters),
            "n_outliers": len(result.outliers),
            "n_unassigned": len(result.unassigned),
            "clusters": [
                {
                    "cluster_id": cluster.cluster_id,
                    "theme": cluster.theme,
                    "size": cluster.size,
                    "confidence": cluster.confidence,
                }
                for cluster in result.clusters
            ],
        }
