"""
Up-front validation for clustering input.

All checks run in a single pass before any clustering work starts, so an
operation either receives a clean list of ClusterItem objects or fails
with a named ClusteringError and produces no partial result.
"""

import math
import numbers
from collections.abc import Mapping
from typing import Any, Sequence

import numpy as np

from src.clustering.errors import (
    EmptyInputError,
    InvalidItemError,
    InvalidThresholdError,
    TooManyItemsError,
)
from src.clustering.schemas import ClusterItem


def _is_number(value: Any) -> bool:
    return isinstance(value, (numbers.Real, np.number)) and not isinstance(value, (bool, np.bool_))


def _validate_id(item_id: Any, index: int) -> int | str:
    """Return the id as a plain int or str (numpy scalars included)."""
    if isinstance(item_id, (bool, np.bool_)):
        raise InvalidItemError(index, "must have an integer or string id")
    if isinstance(item_id, (numbers.Integral, np.integer)):
        return int(item_id)
    if not isinstance(item_id, str):
        raise InvalidItemError(index, "must have an integer or string id")
    if not item_id.strip():
        raise InvalidItemError(index, "must have a non-empty id")
    return str(item_id)


def _validate_embedding(embedding: Any, index: int) -> np.ndarray:
    if isinstance(embedding, np.ndarray):
        if embedding.ndim != 1 or embedding.size == 0:
            raise InvalidItemError(index, "must have a non-empty one-dimensional embedding")
        if embedding.dtype.kind not in "fiu":
            raise InvalidItemError(index, "has invalid embedding values")
        vector = embedding.astype(np.float64)
    else:
        if isinstance(embedding, (str, bytes)) or not isinstance(embedding, Sequence):
            raise InvalidItemError(index, "must have a valid embedding array")
        if len(embedding) == 0:
            raise InvalidItemError(index, "must have a non-empty embedding")
        if not all(_is_number(value) for value in embedding):
            raise InvalidItemError(index, "has invalid embedding values")
        vector = np.asarray(embedding, dtype=np.float64)

    if not np.all(np.isfinite(vector)):
        raise InvalidItemError(index, "has non-finite embedding values")
    return vector


def coerce_item(raw: Any, index: int) -> ClusterItem:
    """
    Validate one raw item and convert it to a ClusterItem.

    Args:
        raw: A ClusterItem or a mapping with "id", "text" and "embedding" keys.
        index: Position of the item in its input list, used in error messages.

    Returns:
        ClusterItem with a float64 embedding copy.

    Raises:
        InvalidItemError: If any field is missing or malformed.
    """
    if isinstance(raw, ClusterItem):
        item_id, text, embedding = raw.id, raw.text, raw.embedding
    elif isinstance(raw, Mapping):
        item_id = raw.get("id")
        text = raw.get("text")
        embedding = raw.get("embedding")
    else:
        raise InvalidItemError(index, "must be a ClusterItem or a mapping")

    item_id = _validate_id(item_id, index)
    if not isinstance(text, str) or not text.strip():
        raise InvalidItemError(index, "must have valid text")
    vector = _validate_embedding(embedding, index)

    return ClusterItem(id=item_id, text=text, embedding=vector)


def validate_items(
    items: Sequence[Any],
    max_items: int | None = None,
) -> list[ClusterItem]:
    """
    Validate a batch of items that will be compared with each other.

    Args:
        items: Raw items (ClusterItem objects or mappings).
        max_items: Optional upper bound on the batch size.

    Returns:
        List of validated ClusterItem objects in input order.

    Raises:
        EmptyInputError: If items is empty.
        TooManyItemsError: If len(items) exceeds max_items.
        InvalidItemError: If an item is malformed or its embedding length
            differs from the first item's.
    """
    if items is None or len(items) == 0:
        raise EmptyInputError("Items list cannot be empty")
    if max_items is not None and len(items) > max_items:
        raise TooManyItemsError(
            f"Too many items to cluster ({len(items)} > max {max_items:,})"
        )

    validated: list[ClusterItem] = []
    dimension: int | None = None
    for index, raw in enumerate(items):
        item = coerce_item(raw, index)
        if dimension is None:
            dimension = item.dimension
        elif item.dimension != dimension:
            raise InvalidItemError(
                index,
                f"has embedding dimension {item.dimension}, expected {dimension}",
            )
        validated.append(item)

    return validated


def validate_threshold(threshold: Any) -> float:
    """
    Validate a similarity threshold.

    Returns:
        The threshold as a float.

    Raises:
        InvalidThresholdError: If threshold is not a number in [0, 1].
    """
    if not _is_number(threshold) or math.isnan(float(threshold)):
        raise InvalidThresholdError("Threshold must be a valid number")
    if threshold < 0 or threshold > 1:
        raise InvalidThresholdError(f"Threshold must be between 0 and 1, got {threshold}")
    return float(threshold)
