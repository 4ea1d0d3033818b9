"""Schema definitions for the feedback pipeline.

Covers raw feedback entries, sentences after sentiment scoring and
embedding, and the feedback group drafts built from clusters for the trend
dashboard.
"""

from dataclasses import dataclass, field
from typing import Any

import numpy as np

from src.clustering.schemas import Cluster, ClusterResult

VALID_SENTIMENT_LABELS: frozenset[str] = frozenset({
    "positive",
    "negative",
    "neutral",
})


@dataclass(frozen=True)
class SentimentResult:
    """Sentiment returned by an analyzer for one text.

    Attributes:
        label: One of positive, negative, neutral.
        score: Signed or unsigned polarity score as reported by the analyzer.
        confidence: Classifier confidence in [0, 1].
    """

    label: str
    score: float
    confidence: float

    def __post_init__(self) -> None:
        if self.label not in VALID_SENTIMENT_LABELS:
            raise ValueError(
                f"Invalid label {self.label!r}. "
                f"Must be one of: {sorted(VALID_SENTIMENT_LABELS)}"
            )
        if not (0.0 <= self.confidence <= 1.0):
            raise ValueError(f"Confidence must be 0-1, got {self.confidence}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SentimentResult":
        """Build from an analyzer response dict.

        Raises:
            KeyError: If label or confidence is missing.
        """
        return cls(
            label=data["label"],
            score=float(data.get("score", data["confidence"])),
            confidence=float(data["confidence"]),
        )


@dataclass
class FeedbackEntry:
    """A raw piece of feedback (a post or an uploaded document).

    Attributes:
        entry_id: Caller-assigned identifier.
        text: Full text; split into sentences by the pipeline.
        author: Optional author handle.
        metadata: Source-specific extras (permalink, score, ...).
    """

    entry_id: int | str
    text: str
    author: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class ProcessedSentence:
    """A sentence with sentiment and embedding, ready for clustering."""

    sentence_id: int
    entry_id: int | str
    text: str
    sentiment_label: str
    sentiment_score: float
    sentiment_confidence: float
    embedding: np.ndarray

    def to_cluster_item(self) -> dict[str, Any]:
        """Item mapping accepted by IncrementalClusterer."""
        return {"id": self.sentence_id, "text": self.text, "embedding": self.embedding}

    def to_dict(self) -> dict[str, Any]:
        return {
            "sentence_id": self.sentence_id,
            "entry_id": self.entry_id,
            "text": self.text,
            "sentiment_label": self.sentiment_label,
            "sentiment_score": self.sentiment_score,
            "sentiment_confidence": self.sentiment_confidence,
            "embedding": self.embedding.tolist(),
        }


@dataclass
class FeedbackGroupDraft:
    """A feedback group ready to be persisted by the caller.

    Attributes:
        name: Cluster theme.
        description: Human-readable summary of the group size.
        sentence_ids: Member sentence ids.
        trend_score: Cluster confidence.
        metadata: Cluster id, centroid and confidence for later merges.
    """

    name: str
    description: str
    sentence_ids: list[int | str]
    trend_score: float
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_cluster(cls, cluster: Cluster) -> "FeedbackGroupDraft":
        return cls(
            name=cluster.theme,
            description=f"Cluster of {cluster.size} similar feedback items",
            sentence_ids=list(cluster.member_ids),
            trend_score=cluster.confidence,
            metadata={
                "cluster_id": cluster.cluster_id,
                "centroid": cluster.centroid.tolist(),
                "confidence": cluster.confidence,
            },
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "sentence_ids": list(self.sentence_ids),
            "trend_score": self.trend_score,
            "metadata": self.metadata,
        }


@dataclass
class ProcessingResult:
    """Outcome of one pipeline run."""

    processed_count: int
    sentences_count: int
    clusters_count: int
    outlier_count: int
    processing_time_ms: float
    unassigned_count: int = 0
    sentences: list[ProcessedSentence] = field(default_factory=list)
    groups: list[FeedbackGroupDraft] = field(default_factory=list)
    cluster_result: ClusterResult | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "processed_count": self.processed_count,
            "sentences_count": self.sentences_count,
            "clusters_count": self.clusters_count,
            "outlier_count": self.outlier_count,
            "processing_time_ms": self.processing_time_ms,
            "unassigned_count": self.unassigned_count,
        }
