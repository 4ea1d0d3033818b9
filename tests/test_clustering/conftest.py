"""Shared fixtures for clustering tests."""

import numpy as np
import pytest

from src.clustering.config import ClusteringConfig
from src.clustering.service import IncrementalClusterer

GROUP_TEXTS = [
    # Group 0: app crashes (indices 0-4)
    [
        "The mobile app crashes every time I open settings",
        "App crashes constantly after the latest update",
        "Crashes when uploading photos from the gallery",
        "The app keeps crashing during checkout",
        "Frequent crashes make the mobile app unusable",
    ],
    # Group 1: billing (indices 5-9)
    [
        "Billing charged my card twice this month",
        "Unexpected billing charges on my account",
        "Refund for the duplicate billing never arrived",
        "Billing support ignored my refund request",
        "Confusing billing statement with hidden charges",
    ],
    # Group 2: delivery (indices 10-14)
    [
        "Delivery arrived three days late",
        "Late delivery again with no tracking updates",
        "Delivery driver left the package in the rain",
        "Tracking shows delivery but nothing arrived",
        "Fast delivery would make this service perfect",
    ],
]


@pytest.fixture
def clustering_config():
    """Default engine limits with a mid-range threshold."""
    return ClusteringConfig(default_threshold=0.5)


@pytest.fixture
def clusterer(clustering_config):
    """IncrementalClusterer with the test config."""
    return IncrementalClusterer(config=clustering_config)


@pytest.fixture
def sample_embeddings():
    """
    15x64 synthetic embeddings with 3 separable groups.

    Each group is centered around a distinct random unit vector with small
    per-item noise, giving within-group similarity near 1 and
    between-group similarity near 0.
    """
    rng = np.random.RandomState(42)
    dim = 64
    n_per_group = 5

    centers = rng.randn(3, dim)
    centers = centers / np.linalg.norm(centers, axis=1, keepdims=True)

    embeddings = []
    for center in centers:
        noise = rng.randn(n_per_group, dim) * 0.02
        group = center + noise
        group = group / np.linalg.norm(group, axis=1, keepdims=True)
        embeddings.append(group)

    return np.vstack(embeddings)


@pytest.fixture
def sample_items(sample_embeddings):
    """
    15 feedback items in 3 groups of 5, interleaved across groups.

    Ids are "s_00".."s_14" where the tens digit groups by topic:
    s_00..s_04 crashes, s_05..s_09 billing, s_10..s_14 delivery.
    """
    texts = [text for group in GROUP_TEXTS for text in group]
    items = [
        {"id": f"s_{i:02d}", "text": texts[i], "embedding": sample_embeddings[i].tolist()}
        for i in range(15)
    ]
    # Interleave so groups grow concurrently: 0, 5, 10, 1, 6, 11, ...
    order = [group * 5 + offset for offset in range(5) for group in range(3)]
    return [items[i] for i in order]
