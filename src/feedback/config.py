"""Feedback pipeline configuration.

Controls how raw feedback entries are turned into clustered sentences.
All settings can be overridden via ``FEEDBACK_*`` environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FeedbackConfig(BaseSettings):
    """Configuration for the feedback processing pipeline."""

    model_config = SettingsConfigDict(
        env_prefix="FEEDBACK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    enable_clustering: bool = Field(
        default=True,
        description="Cluster sentences after sentiment and embedding",
    )
    sentiment_threshold: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Sentences with lower sentiment confidence are skipped",
    )
    clustering_threshold: float = Field(
        default=0.3,
        ge=0.0,
        le=1.0,
        description="Similarity threshold passed to the clusterer",
    )
    max_sentences: int = Field(
        default=1000,
        ge=1,
        le=50_000,
        description="Maximum sentences processed per run",
    )
    min_sentence_length: int = Field(
        default=10,
        ge=1,
        le=1000,
        description="Shorter sentence fragments are dropped when splitting",
    )
