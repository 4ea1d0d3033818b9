"""Test fixtures for the feedback pipeline."""

from unittest.mock import AsyncMock

import pytest

from src.clustering.config import ClusteringConfig
from src.clustering.service import IncrementalClusterer
from src.feedback.config import FeedbackConfig
from src.feedback.pipeline import FeedbackPipeline
from src.feedback.schemas import FeedbackEntry

# Keyword -> (embedding, sentiment label, score)
TOPICS = {
    "crash": ([1.0, 0.0, 0.0], "negative", -0.8),
    "billing": ([0.0, 1.0, 0.0], "negative", -0.6),
    "design": ([0.0, 0.0, 1.0], "positive", 0.9),
}
UNCERTAIN_MARKER = "maybe"


def _topic_for(text: str):
    lowered = text.lower()
    for keyword, topic in TOPICS.items():
        if keyword in lowered:
            return topic
    return ([0.5, 0.5, 0.5], "neutral", 0.0)


async def fake_analyze(text: str) -> dict:
    _, label, score = _topic_for(text)
    confidence = 0.3 if UNCERTAIN_MARKER in text.lower() else 0.9
    return {"label": label, "score": score, "confidence": confidence}


async def fake_embed(text: str) -> list[float]:
    embedding, _, _ = _topic_for(text)
    return list(embedding)


@pytest.fixture
def analyzer() -> AsyncMock:
    """Sentiment analyzer keyed off topic keywords."""
    mock = AsyncMock()
    mock.analyze.side_effect = fake_analyze
    return mock


@pytest.fixture
def embedder() -> AsyncMock:
    """Embedder mapping each topic keyword to an axis."""
    mock = AsyncMock()
    mock.embed.side_effect = fake_embed
    return mock


@pytest.fixture
def feedback_config() -> FeedbackConfig:
    return FeedbackConfig(clustering_threshold=0.8)


@pytest.fixture
def pipeline(analyzer, embedder, feedback_config) -> FeedbackPipeline:
    return FeedbackPipeline(
        analyzer=analyzer,
        embedder=embedder,
        clusterer=IncrementalClusterer(ClusteringConfig()),
        config=feedback_config,
    )


@pytest.fixture
def entries() -> list[FeedbackEntry]:
    """Three posts covering crashes, billing and design."""
    return [
        FeedbackEntry(
            entry_id=101,
            text="The app crash on launch is awful. Billing charged me twice this month!",
            author="user_a",
            metadata={"permalink": "/r/app/comments/abc"},
        ),
        FeedbackEntry(
            entry_id=102,
            text="Another crash after the update today. Love the new design of the home screen.",
            author="user_b",
        ),
        FeedbackEntry(
            entry_id=103,
            text="Billing support never answered my refund request. Maybe the design is fine overall?",
            author="user_c",
        ),
    ]
