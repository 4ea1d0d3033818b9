"""Pytest fixtures for feedback clustering tests."""

import pytest

from src.config.settings import Settings


@pytest.fixture
def test_settings() -> Settings:
    """Settings configured for testing."""
    return Settings(
        environment="development",
        log_level="DEBUG",
    )


@pytest.fixture
def product_and_support_items() -> list[dict]:
    """Two pairs of near-identical sentences about products and support."""
    return [
        {"id": 1, "text": "Great product quality", "embedding": [0.8, 0.2, 0.1, 0.3]},
        {"id": 2, "text": "Excellent product features", "embedding": [0.82, 0.19, 0.11, 0.29]},
        {"id": 3, "text": "Poor customer service", "embedding": [0.1, 0.8, 0.3, 0.2]},
        {"id": 4, "text": "Bad support experience", "embedding": [0.11, 0.79, 0.31, 0.19]},
    ]


@pytest.fixture
def dissimilar_items() -> list[dict]:
    """Three sentences whose pairwise similarity stays below 0.9."""
    return [
        {"id": 1, "text": "Great product", "embedding": [0.8, 0.2, 0.1]},
        {"id": 2, "text": "Poor service", "embedding": [0.1, 0.8, 0.2]},
        {"id": 3, "text": "Average experience", "embedding": [0.5, 0.5, 0.5]},
    ]
