"""Theme labels and cohesion scores for clusters."""

from collections import Counter
from typing import Sequence

import numpy as np

from src.clustering.similarity import cosine_similarity

STOP_WORDS = frozenset(
    {"the", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by"}
)

EMPTY_CLUSTER_THEME = "Empty cluster"
FALLBACK_THEME = "General feedback"


def generate_theme(
    texts: Sequence[str],
    top_n: int = 3,
    min_token_length: int = 4,
) -> str:
    """
    Build a short label from the most frequent significant words.

    Texts are split on whitespace and lowercased; tokens shorter than
    min_token_length and stop words are dropped. Ties in frequency keep
    first-seen order.

    Args:
        texts: Member texts of a cluster.
        top_n: Number of words in the label.
        min_token_length: Shortest token that counts as significant.

    Returns:
        Comma-joined top words, "General feedback" if none survive
        filtering, or "Empty cluster" for no texts.
    """
    if not texts:
        return EMPTY_CLUSTER_THEME

    counts: Counter[str] = Counter(
        token
        for text in texts
        for token in text.lower().split()
        if len(token) >= min_token_length and token not in STOP_WORDS
    )
    # most_common is stable, so equal counts stay in first-seen order
    words = [word for word, _ in counts.most_common(top_n)]

    return ", ".join(words) if words else FALLBACK_THEME


def cluster_confidence(
    embeddings: Sequence[np.ndarray],
    centroid: np.ndarray,
    size_bonus_step: float = 0.01,
    size_bonus_cap: float = 0.1,
) -> float:
    """
    Score how tightly members sit around their centroid.

    Args:
        embeddings: Member embeddings.
        centroid: Cluster centroid.
        size_bonus_step: Bonus added per member.
        size_bonus_cap: Maximum total size bonus.

    Returns:
        Mean member-to-centroid similarity clamped to [0, 1], plus
        min(size_bonus_cap, n * size_bonus_step), capped at 1.0.
        Returns 0.0 for no members.
    """
    if len(embeddings) == 0:
        return 0.0

    similarities = [cosine_similarity(embedding, centroid) for embedding in embeddings]
    cohesion = max(0.0, min(1.0, float(np.mean(similarities))))
    size_bonus = min(size_bonus_cap, len(embeddings) * size_bonus_step)

    return min(1.0, cohesion + size_bonus)
