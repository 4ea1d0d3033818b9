"""
Feedback pipeline - turns raw feedback entries into clustered sentences.

Splits each entry into sentences, scores them with a sentiment analyzer,
drops low-confidence sentences, embeds the rest, and clusters the batch
into feedback group drafts for the trend dashboard.

Features:
- Pluggable async sentiment and embedding collaborators
- Per-sentence failures are logged and skipped
- Clustering failures degrade to an empty cluster result
"""

import time
from typing import Any, Protocol, Sequence

import numpy as np
import structlog

from src.clustering.errors import ClusteringError, InvalidArgumentError
from src.clustering.schemas import ClusterResult
from src.clustering.service import IncrementalClusterer
from src.feedback.config import FeedbackConfig
from src.feedback.schemas import (
    FeedbackEntry,
    FeedbackGroupDraft,
    ProcessedSentence,
    ProcessingResult,
    SentimentResult,
)
from src.feedback.text import split_into_sentences

logger = structlog.get_logger(__name__)


class SentimentAnalyzer(Protocol):
    """Sentiment collaborator returning {"label", "score", "confidence"}."""

    async def analyze(self, text: str) -> dict[str, Any]: ...


class TextEmbedder(Protocol):
    """Embedding collaborator returning a fixed-dimension vector."""

    async def embed(self, text: str) -> Sequence[float]: ...


class FeedbackPipeline:
    """
    Pipeline that processes feedback entries into feedback groups.

    Pipeline stages:
    1. Sentence splitting
    2. Sentiment analysis (low-confidence sentences dropped)
    3. Embedding
    4. Incremental clustering into feedback group drafts

    Usage:
        pipeline = FeedbackPipeline(analyzer=sentiment, embedder=embeddings)
        result = await pipeline.process_entries(entries)
        for group in result.groups:
            print(group.name, group.trend_score)
    """

    def __init__(
        self,
        analyzer: SentimentAnalyzer,
        embedder: TextEmbedder,
        clusterer: IncrementalClusterer | None = None,
        config: FeedbackConfig | None = None,
    ):
        """
        Initialize the pipeline.

        Args:
            analyzer: Sentiment collaborator
            embedder: Embedding collaborator
            clusterer: Clustering engine (or create default)
            config: Pipeline configuration (or load from environment)
        """
        self._analyzer = analyzer
        self._embedder = embedder
        self._clusterer = clusterer or IncrementalClusterer()
        self._config = config or FeedbackConfig()

    @property
    def config(self) -> FeedbackConfig:
        return self._config

    @staticmethod
    def validate_options(
        sentiment_threshold: float,
        clustering_threshold: float,
        max_sentences: int,
    ) -> None:
        """
        Validate per-run options.

        Raises:
            InvalidArgumentError: If any option is out of range.
        """
        if not 0 <= sentiment_threshold <= 1:
            raise InvalidArgumentError("Sentiment threshold must be between 0 and 1")
        if not 0 <= clustering_threshold <= 1:
            raise InvalidArgumentError("Clustering threshold must be between 0 and 1")
        if not 1 <= max_sentences <= 50_000:
            raise InvalidArgumentError("Max sentences must be between 1 and 50,000")

    async def process_entries(
        self,
        entries: Sequence[FeedbackEntry],
        enable_clustering: bool | None = None,
        sentiment_threshold: float | None = None,
        clustering_threshold: float | None = None,
        max_sentences: int | None = None,
    ) -> ProcessingResult:
        """
        Process a batch of feedback entries.

        Options default to the pipeline config when not given.

        Args:
            entries: Raw feedback entries
            enable_clustering: Whether to cluster the processed sentences
            sentiment_threshold: Minimum sentiment confidence to keep a sentence
            clustering_threshold: Similarity threshold for clustering
            max_sentences: Stop after this many processed sentences

        Returns:
            ProcessingResult with counts, sentences and group drafts

        Raises:
            InvalidArgumentError: If an option is out of range
        """
        start_time = time.monotonic()

        if enable_clustering is None:
            enable_clustering = self._config.enable_clustering
        if sentiment_threshold is None:
            sentiment_threshold = self._config.sentiment_threshold
        if clustering_threshold is None:
            clustering_threshold = self._config.clustering_threshold
        if max_sentences is None:
            max_sentences = self._config.max_sentences

        self.validate_options(sentiment_threshold, clustering_threshold, max_sentences)

        sentences = await self._process_sentences(entries, sentiment_threshold, max_sentences)

        cluster_result: ClusterResult | None = None
        groups: list[FeedbackGroupDraft] = []
        if enable_clustering and len(sentences) > 1:
            cluster_result = self._cluster(sentences, clustering_threshold)
            groups = [FeedbackGroupDraft.from_cluster(c) for c in cluster_result.clusters]

        processing_time_ms = (time.monotonic() - start_time) * 1000
        outlier_count = len(cluster_result.outliers) if cluster_result else 0
        unassigned_count = len(cluster_result.unassigned) if cluster_result else 0

        logger.info(
            "Feedback batch processed",
            entries=len(entries),
            sentences=len(sentences),
            groups=len(groups),
            outliers=outlier_count,
            unassigned=unassigned_count,
            processing_time_ms=round(processing_time_ms, 1),
        )

        return ProcessingResult(
            processed_count=len(entries),
            sentences_count=len(sentences),
            clusters_count=len(groups),
            outlier_count=outlier_count,
            processing_time_ms=processing_time_ms,
            unassigned_count=unassigned_count,
            sentences=sentences,
            groups=groups,
            cluster_result=cluster_result,
        )

    async def _process_sentences(
        self,
        entries: Sequence[FeedbackEntry],
        sentiment_threshold: float,
        max_sentences: int,
    ) -> list[ProcessedSentence]:
        sentences: list[ProcessedSentence] = []
        next_id = 1

        for entry in entries:
            if len(sentences) >= max_sentences:
                break

            try:
                texts = split_into_sentences(entry.text, self._config.min_sentence_length)
            except ValueError:
                logger.warning("Skipping entry without text", entry_id=entry.entry_id)
                continue

            for text in texts:
                if len(sentences) >= max_sentences:
                    break

                processed = await self._process_sentence(
                    sentence_id=next_id,
                    entry_id=entry.entry_id,
                    text=text,
                    sentiment_threshold=sentiment_threshold,
                )
                if processed is not None:
                    sentences.append(processed)
                    next_id += 1

        return sentences

    async def _process_sentence(
        self,
        sentence_id: int,
        entry_id: int | str,
        text: str,
        sentiment_threshold: float,
    ) -> ProcessedSentence | None:
        """Score and embed one sentence; None if skipped or failed."""
        try:
            sentiment = SentimentResult.from_dict(await self._analyzer.analyze(text))
            if sentiment.confidence < sentiment_threshold:
                logger.debug(
                    "Skipping low-confidence sentence",
                    entry_id=entry_id,
                    confidence=sentiment.confidence,
                )
                return None

            embedding = np.asarray(await self._embedder.embed(text), dtype=np.float64)
        except Exception as e:
            logger.warning(
                "Failed to process sentence",
                entry_id=entry_id,
                error=str(e),
            )
            return None

        return ProcessedSentence(
            sentence_id=sentence_id,
            entry_id=entry_id,
            text=text,
            sentiment_label=sentiment.label,
            sentiment_score=sentiment.score,
            sentiment_confidence=sentiment.confidence,
            embedding=embedding,
        )

    def _cluster(
        self,
        sentences: list[ProcessedSentence],
        threshold: float,
    ) -> ClusterResult:
        try:
            return self._clusterer.cluster_items(
                [s.to_cluster_item() for s in sentences],
                threshold=threshold,
            )
        except ClusteringError as e:
            logger.warning(
                "Clustering failed, continuing without clustering",
                kind=e.kind,
                error=e.message,
            )
            return ClusterResult()
