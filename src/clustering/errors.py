"""Error taxonomy for the clustering engine.

Every validation failure is raised before any clustering work begins and
carries a machine-readable ``kind`` so callers can map it to a response
without string matching.
"""

from typing import Any


class ClusteringError(ValueError):
    """Base exception for clustering engine errors."""

    kind = "clustering_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for logging or API responses."""
        return {"kind": self.kind, "message": self.message}


class InvalidItemError(ClusteringError):
    """Raised when an item fails structural validation."""

    kind = "invalid_item"

    def __init__(self, index: int, reason: str):
        super().__init__(f"Item at index {index} {reason}")
        self.index = index

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["index"] = self.index
        return data


class DimensionMismatchError(ClusteringError):
    """Raised when vectors of different lengths are compared."""

    kind = "dimension_mismatch"


class InvalidThresholdError(ClusteringError):
    """Raised when a similarity threshold is outside [0, 1]."""

    kind = "invalid_threshold"


class EmptyInputError(ClusteringError):
    """Raised when an operation receives no items."""

    kind = "empty_input"


class TooManyItemsError(ClusteringError):
    """Raised when the item count exceeds the configured maximum."""

    kind = "too_many_items"


class InvalidArgumentError(ClusteringError):
    """Raised when a per-operation parameter is out of range."""

    kind = "invalid_argument"


class EmptyClusterError(ClusteringError):
    """Raised when merging a cluster that has no members."""

    kind = "empty_cluster"


class MissingMemberError(ClusteringError):
    """Raised when cluster member ids cannot be resolved in the item pool."""

    kind = "missing_member"

    def __init__(self, missing_ids: list[Any]):
        preview = ", ".join(repr(i) for i in missing_ids[:5])
        more = f" (+{len(missing_ids) - 5} more)" if len(missing_ids) > 5 else ""
        super().__init__(f"Cluster members not found in pool: {preview}{more}")
        self.missing_ids = missing_ids

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["missing_ids"] = list(self.missing_ids)
        return data
