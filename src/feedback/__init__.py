"""Feedback pipeline from raw entries to clustered feedback groups.

Components:
- FeedbackConfig: Pydantic settings for the pipeline
- FeedbackPipeline: Sentence splitting, sentiment, embedding and clustering
- FeedbackEntry / ProcessedSentence / FeedbackGroupDraft: Pipeline records
- split_into_sentences: Sentence splitter
- sentiment_distribution / summarize_group_sentiment: Sentiment aggregation
"""

from src.feedback.aggregation import (
    GroupSentiment,
    sentiment_distribution,
    summarize_group_sentiment,
)
from src.feedback.config import FeedbackConfig
from src.feedback.pipeline import FeedbackPipeline, SentimentAnalyzer, TextEmbedder
from src.feedback.schemas import (
    VALID_SENTIMENT_LABELS,
    FeedbackEntry,
    FeedbackGroupDraft,
    ProcessedSentence,
    ProcessingResult,
    SentimentResult,
)
from src.feedback.text import split_into_sentences

__all__ = [
    "FeedbackConfig",
    "FeedbackPipeline",
    "SentimentAnalyzer",
    "TextEmbedder",
    "FeedbackEntry",
    "ProcessedSentence",
    "FeedbackGroupDraft",
    "ProcessingResult",
    "SentimentResult",
    "VALID_SENTIMENT_LABELS",
    "GroupSentiment",
    "sentiment_distribution",
    "summarize_group_sentiment",
    "split_into_sentences",
]
