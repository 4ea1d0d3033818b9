"""
Sentiment aggregation for feedback groups.

Summarizes how sentences are distributed across sentiment labels, both for
a whole run (dashboard distribution) and per feedback group.

Usage:
    from src.feedback.aggregation import sentiment_distribution, summarize_group_sentiment

    counts = sentiment_distribution(result.sentences)
    summary = summarize_group_sentiment(result.groups[0], result.sentences)
    print(f"{summary.dominant_label}: {summary.average_score:.2f}")
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

import numpy as np

from src.feedback.schemas import FeedbackGroupDraft, ProcessedSentence

# Dominant label tie order
LABEL_ORDER = ("negative", "neutral", "positive")


@dataclass
class GroupSentiment:
    """
    Sentiment summary for one feedback group.

    Sentences referenced by the group but absent from the supplied list are
    not counted.
    """

    group_name: str
    sentence_count: int
    average_score: float
    average_confidence: float
    label_counts: Dict[str, int] = field(default_factory=dict)
    dominant_label: Optional[str] = None


def sentiment_distribution(sentences: Iterable[ProcessedSentence]) -> Dict[str, int]:
    """Count sentences per sentiment label (all three labels always present)."""
    counts = {label: 0 for label in LABEL_ORDER}
    for sentence in sentences:
        counts[sentence.sentiment_label] = counts.get(sentence.sentiment_label, 0) + 1
    return counts


def summarize_group_sentiment(
    group: FeedbackGroupDraft,
    sentences: Iterable[ProcessedSentence],
) -> GroupSentiment:
    """
    Aggregate sentiment over the sentences in a feedback group.

    Args:
        group: Feedback group draft.
        sentences: Sentences from the same run.

    Returns:
        GroupSentiment. dominant_label is None for a group with no known
        sentences; label ties resolve negative first.
    """
    by_id = {sentence.sentence_id: sentence for sentence in sentences}
    members = [by_id[sid] for sid in group.sentence_ids if sid in by_id]

    if not members:
        return GroupSentiment(
            group_name=group.name,
            sentence_count=0,
            average_score=0.0,
            average_confidence=0.0,
            label_counts=sentiment_distribution([]),
        )

    counts = sentiment_distribution(members)
    dominant = max(LABEL_ORDER, key=lambda label: (counts[label], -LABEL_ORDER.index(label)))

    return GroupSentiment(
        group_name=group.name,
        sentence_count=len(members),
        average_score=float(np.mean([m.sentiment_score for m in members])),
        average_confidence=float(np.mean([m.sentiment_confidence for m in members])),
        label_counts=counts,
        dominant_label=dominant,
    )
