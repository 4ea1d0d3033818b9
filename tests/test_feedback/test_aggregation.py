"""Tests for feedback sentiment aggregation."""

import numpy as np
import pytest

from src.feedback.aggregation import (
    GroupSentiment,
    sentiment_distribution,
    summarize_group_sentiment,
)
from src.feedback.schemas import FeedbackGroupDraft, ProcessedSentence


def sentence(sentence_id, label, score, confidence=0.9):
    return ProcessedSentence(
        sentence_id=sentence_id,
        entry_id=1,
        text=f"Sentence number {sentence_id}",
        sentiment_label=label,
        sentiment_score=score,
        sentiment_confidence=confidence,
        embedding=np.array([1.0, 0.0]),
    )


def group(sentence_ids, name="crash, launch"):
    return FeedbackGroupDraft(
        name=name,
        description=f"Cluster of {len(sentence_ids)} similar feedback items",
        sentence_ids=list(sentence_ids),
        trend_score=0.9,
    )


@pytest.fixture
def sentences():
    return [
        sentence(1, "negative", -0.8, 0.9),
        sentence(2, "negative", -0.6, 0.7),
        sentence(3, "positive", 0.9, 0.8),
        sentence(4, "neutral", 0.0, 0.6),
    ]


class TestSentimentDistribution:
    """Tests for sentiment_distribution()."""

    def test_counts(self, sentences):
        assert sentiment_distribution(sentences) == {
            "negative": 2,
            "neutral": 1,
            "positive": 1,
        }

    def test_empty_has_all_labels(self):
        assert sentiment_distribution([]) == {"negative": 0, "neutral": 0, "positive": 0}


class TestSummarizeGroupSentiment:
    """Tests for summarize_group_sentiment()."""

    def test_summary(self, sentences):
        summary = summarize_group_sentiment(group([1, 2, 3]), sentences)

        assert isinstance(summary, GroupSentiment)
        assert summary.group_name == "crash, launch"
        assert summary.sentence_count == 3
        assert summary.average_score == pytest.approx((-0.8 - 0.6 + 0.9) / 3)
        assert summary.average_confidence == pytest.approx(0.8)
        assert summary.label_counts == {"negative": 2, "neutral": 0, "positive": 1}
        assert summary.dominant_label == "negative"

    def test_tie_resolves_negative_first(self, sentences):
        summary = summarize_group_sentiment(group([3, 4]), sentences)
        assert summary.dominant_label == "neutral"

        summary = summarize_group_sentiment(group([1, 3]), sentences)
        assert summary.dominant_label == "negative"

    def test_unknown_ids_ignored(self, sentences):
        summary = summarize_group_sentiment(group([3, 99]), sentences)

        assert summary.sentence_count == 1
        assert summary.dominant_label == "positive"

    def test_no_known_members(self, sentences):
        summary = summarize_group_sentiment(group([98, 99]), sentences)

        assert summary.sentence_count == 0
        assert summary.average_score == 0.0
        assert summary.dominant_label is None
        assert summary.label_counts == {"negative": 0, "neutral": 0, "positive": 0}
