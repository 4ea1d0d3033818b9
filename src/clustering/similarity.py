"""
Vector similarity primitives for embedding clustering.

Zero-norm vectors never divide by zero: they are treated as maximally
dissimilar (similarity 0, distance 1) to everything, including themselves.
"""

from typing import Sequence, Union

import numpy as np

from src.clustering.errors import DimensionMismatchError, InvalidArgumentError

VectorLike = Union[np.ndarray, Sequence[float]]


def _as_vector(values: VectorLike) -> np.ndarray:
    return np.asarray(values, dtype=np.float64)


def _rescale(vector: np.ndarray) -> np.ndarray:
    """Divide by the largest magnitude so squares cannot overflow or underflow."""
    scale = float(np.max(np.abs(vector))) if vector.size else 0.0
    return vector / scale if scale > 0 else vector


def _check_dimensions(a: np.ndarray, b: np.ndarray) -> None:
    if a.shape != b.shape:
        raise DimensionMismatchError(
            f"Vectors must have the same dimension ({a.shape[0]} != {b.shape[0]})"
        )


def cosine_similarity(a: VectorLike, b: VectorLike) -> float:
    """
    Cosine similarity between two equal-length vectors.

    Args:
        a: First vector.
        b: Second vector.

    Returns:
        dot(a, b) / (|a| * |b|), or 0.0 if either vector has zero norm.

    Raises:
        DimensionMismatchError: If the vectors differ in length.
    """
    a = _as_vector(a)
    b = _as_vector(b)
    _check_dimensions(a, b)

    # Cosine is scale-invariant
    a = _rescale(a)
    b = _rescale(b)
    norm_a = float(np.linalg.norm(a))
    norm_b = float(np.linalg.norm(b))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    similarity = float(np.dot(a, b)) / (norm_a * norm_b)
    return max(-1.0, min(1.0, similarity))


def cosine_distance(a: VectorLike, b: VectorLike) -> float:
    """
    Cosine distance between two equal-length vectors.

    Returns:
        1 - cosine_similarity(a, b). Zero-norm vectors give the maximum
        distance of 1.0.

    Raises:
        DimensionMismatchError: If the vectors differ in length.
    """
    return 1.0 - cosine_similarity(a, b)


def update_centroid(
    current: VectorLike,
    new_point: VectorLike,
    new_count: int,
) -> np.ndarray:
    """
    Fold one point into a running mean.

    Args:
        current: Centroid over the previous new_count - 1 members.
        new_point: Embedding of the member being added.
        new_count: Member count after adding new_point.

    Returns:
        (current * (new_count - 1) + new_point) / new_count as a new array.

    Raises:
        DimensionMismatchError: If the vectors differ in length.
        InvalidArgumentError: If new_count is less than 1.
    """
    current = _as_vector(current)
    new_point = _as_vector(new_point)
    _check_dimensions(current, new_point)
    if new_count < 1:
        raise InvalidArgumentError(f"new_count must be >= 1, got {new_count}")

    return current * ((new_count - 1) / new_count) + new_point / new_count


def normalize_rows(matrix: np.ndarray) -> np.ndarray:
    """L2-normalize each row, leaving zero-norm rows as zeros."""
    scales = np.max(np.abs(matrix), axis=1, keepdims=True)
    scaled = matrix / np.where(scales == 0, 1.0, scales)
    norms = np.linalg.norm(scaled, axis=1, keepdims=True)
    safe_norms = np.where(norms == 0, 1.0, norms)
    return np.where(norms == 0, 0.0, scaled / safe_norms)


def similarity_matrix(vectors: np.ndarray) -> np.ndarray:
    """
    Pairwise cosine similarity for a stack of vectors.

    Args:
        vectors: Matrix of shape (n, dim).

    Returns:
        Symmetric (n, n) matrix. Rows for zero-norm vectors are all 0.0.
    """
    normalized = normalize_rows(np.asarray(vectors, dtype=np.float64))
    return normalized @ normalized.T


def mean_pairwise_similarity(vectors: np.ndarray) -> float:
    """
    Mean cosine similarity over all unordered pairs.

    Returns:
        Average over the strict upper triangle, 0.0 for fewer than 2 vectors.
    """
    n = len(vectors)
    if n < 2:
        return 0.0
    sims = similarity_matrix(vectors)
    upper = np.triu_indices(n, k=1)
    return float(np.mean(sims[upper]))
