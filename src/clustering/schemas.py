"""Schema definitions for the incremental clustering engine.

Provides value types for clustering input items, the clusters grown from
them, and the result shapes returned by clustering, neighbor search and
quality evaluation, with serialization methods for storage and API
responses.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Union

import numpy as np

ItemId = Union[int, str]


@dataclass(frozen=True)
class ClusterItem:
    """
    An atomic unit submitted for clustering.

    Attributes:
        id: Externally assigned identifier, stable for one clustering run.
        text: Semantic payload (a sentence or short post).
        embedding: Fixed-length float vector for the text.

    Example:
        >>> item = ClusterItem(id=1, text="Great product quality", embedding=np.array([0.8, 0.2]))
        >>> item.dimension
        2
    """

    id: ItemId
    text: str
    embedding: np.ndarray

    @property
    def dimension(self) -> int:
        """Length of the embedding vector."""
        return int(self.embedding.shape[0])

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "embedding": self.embedding.tolist(),
        }

    def __eq__(self, other: object) -> bool:
        """Check equality based on id."""
        if not isinstance(other, ClusterItem):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on id for use in sets and dicts."""
        return hash(self.id)


@dataclass(frozen=True)
class Cluster:
    """
    A group of semantically similar items grown during one clustering run.

    Clusters are value objects: every membership change produces a new
    Cluster via ``dataclasses.replace`` rather than mutating this one.

    Attributes:
        cluster_id: Opaque identifier in format "cluster_{hex[:12]}".
        member_ids: Member item ids in arrival order.
        centroid: Mean embedding of all members.
        theme: Short human-readable label built from member texts.
        confidence: Cohesion score in [0, 1].
    """

    cluster_id: str
    member_ids: tuple[ItemId, ...]
    centroid: np.ndarray
    theme: str
    confidence: float

    @staticmethod
    def generate_cluster_id() -> str:
        """
        Generate a fresh opaque cluster ID.

        Returns:
            ID string in format "cluster_{hex[:12]}".
        """
        return f"cluster_{uuid.uuid4().hex[:12]}"

    @property
    def size(self) -> int:
        """Number of member items."""
        return len(self.member_ids)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert cluster to dictionary for JSON serialization.

        The centroid ndarray is converted to a plain list for JSON compatibility.
        """
        return {
            "cluster_id": self.cluster_id,
            "member_ids": list(self.member_ids),
            "centroid": self.centroid.tolist(),
            "theme": self.theme,
            "confidence": self.confidence,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Cluster":
        """
        Create a Cluster from a dictionary.

        Raises:
            KeyError: If required fields are missing.
        """
        return cls(
            cluster_id=data["cluster_id"],
            member_ids=tuple(data["member_ids"]),
            centroid=np.asarray(data["centroid"], dtype=np.float64),
            theme=data.get("theme", ""),
            confidence=float(data.get("confidence", 0.0)),
        )

    def __eq__(self, other: object) -> bool:
        """Check equality based on cluster_id."""
        if not isinstance(other, Cluster):
            return NotImplemented
        return self.cluster_id == other.cluster_id

    def __hash__(self) -> int:
        """Hash based on cluster_id for use in sets and dicts."""
        return hash(self.cluster_id)


@dataclass
class ClusterResult:
    """
    Output of one clustering call.

    Attributes:
        clusters: Kept clusters, largest first (ties in creation order).
        outliers: Ids whose cluster was too small to keep.
        unassigned: Ids never processed because the cluster cap was hit.
    """

    clusters: list[Cluster] = field(default_factory=list)
    outliers: list[ItemId] = field(default_factory=list)
    unassigned: list[ItemId] = field(default_factory=list)

    @property
    def clustered_ids(self) -> list[ItemId]:
        """All member ids across kept clusters, in cluster order."""
        return [member_id for cluster in self.clusters for member_id in cluster.member_ids]

    def to_dict(self) -> dict[str, Any]:
        return {
            "clusters": [cluster.to_dict() for cluster in self.clusters],
            "outliers": list(self.outliers),
            "unassigned": list(self.unassigned),
        }


@dataclass(frozen=True)
class SimilarItem:
    """A neighbor search hit."""

    item: ClusterItem
    similarity: float

    def to_dict(self) -> dict[str, Any]:
        return {"item": self.item.to_dict(), "similarity": self.similarity}


@dataclass(frozen=True)
class ClusteringQuality:
    """
    Quality metrics for a completed clustering.

    Attributes:
        silhouette_score: Approximate silhouette in [-1, 1].
        intra_cluster_distance: Mean cosine distance between co-members.
        inter_cluster_distance: Mean cosine distance between centroids.
        cluster_sizes: Member counts in result order.
    """

    silhouette_score: float
    intra_cluster_distance: float
    inter_cluster_distance: float
    cluster_sizes: list[int]

    def to_dict(self) -> dict[str, Any]:
        return {
            "silhouette_score": self.silhouette_score,
            "intra_cluster_distance": self.intra_cluster_distance,
            "inter_cluster_distance": self.inter_cluster_distance,
            "cluster_sizes": list(self.cluster_sizes),
        }
