"""Tests for clustering input validation."""

import math

import numpy as np
import pytest

from src.clustering.errors import (
    ClusteringError,
    EmptyInputError,
    InvalidItemError,
    InvalidThresholdError,
    TooManyItemsError,
)
from src.clustering.schemas import ClusterItem
from src.clustering.validation import coerce_item, validate_items, validate_threshold


def item(item_id=1, text="Great product quality", embedding=(0.1, 0.2, 0.3)):
    return {"id": item_id, "text": text, "embedding": list(embedding)}


class TestCoerceItem:
    """Tests for single-item validation."""

    def test_mapping_converted(self):
        result = coerce_item(item(), 0)
        assert isinstance(result, ClusterItem)
        assert result.embedding.dtype == np.float64
        np.testing.assert_array_equal(result.embedding, [0.1, 0.2, 0.3])

    def test_cluster_item_accepted(self):
        original = ClusterItem(id="a", text="Fast delivery", embedding=np.array([1, 2]))
        result = coerce_item(original, 0)
        assert result.id == "a"
        assert result.embedding.dtype == np.float64

    def test_string_and_zero_ids_accepted(self):
        assert coerce_item(item(item_id="post_1"), 0).id == "post_1"
        assert coerce_item(item(item_id=0), 0).id == 0

    @pytest.mark.parametrize("numpy_id", [np.int64(7), np.int32(7), np.uint16(7)])
    def test_numpy_integer_ids_become_int(self, numpy_id):
        result = coerce_item(item(item_id=numpy_id), 0)

        assert result.id == 7
        assert type(result.id) is int

    def test_numpy_string_id_becomes_str(self):
        result = coerce_item(item(item_id=np.str_("post_1")), 0)
        assert type(result.id) is str

    @pytest.mark.parametrize(
        "bad_id", [None, "", "   ", True, np.bool_(True), 1.5, np.float64(2.0), ["x"]]
    )
    def test_invalid_id(self, bad_id):
        with pytest.raises(InvalidItemError):
            coerce_item(item(item_id=bad_id), 0)

    @pytest.mark.parametrize("bad_text", [None, "", "   ", 42])
    def test_invalid_text(self, bad_text):
        with pytest.raises(InvalidItemError):
            coerce_item(item(text=bad_text), 0)

    @pytest.mark.parametrize(
        "bad_embedding",
        [
            [],
            None,
            "0.1,0.2",
            [0.1, "0.2"],
            [0.1, None],
            [0.1, True],
            [float("nan"), 0.5, 0.3],
            [float("inf"), 0.5],
        ],
    )
    def test_invalid_embedding(self, bad_embedding):
        with pytest.raises(InvalidItemError):
            coerce_item({"id": 1, "text": "Some text", "embedding": bad_embedding}, 0)

    def test_invalid_numpy_embedding(self):
        with pytest.raises(InvalidItemError):
            coerce_item({"id": 1, "text": "Text", "embedding": np.zeros((2, 2))}, 0)
        with pytest.raises(InvalidItemError):
            coerce_item({"id": 1, "text": "Text", "embedding": np.array([np.nan, 1.0])}, 0)

    def test_not_a_mapping(self):
        with pytest.raises(InvalidItemError):
            coerce_item(("id", "text", [1.0]), 0)

    def test_error_names_index(self):
        with pytest.raises(InvalidItemError) as exc_info:
            coerce_item(item(text=""), 7)

        assert exc_info.value.index == 7
        assert "index 7" in str(exc_info.value)
        assert exc_info.value.to_dict()["kind"] == "invalid_item"
        assert exc_info.value.to_dict()["index"] == 7


class TestValidateItems:
    """Tests for batch validation."""

    def test_valid_batch(self):
        result = validate_items([item(1), item(2), item(3)])
        assert [i.id for i in result] == [1, 2, 3]

    def test_empty(self):
        with pytest.raises(EmptyInputError):
            validate_items([])

    def test_too_many(self):
        items = [item(i) for i in range(1, 6)]
        with pytest.raises(TooManyItemsError):
            validate_items(items, max_items=4)

    def test_at_limit_ok(self):
        items = [item(i) for i in range(1, 5)]
        assert len(validate_items(items, max_items=4)) == 4

    def test_dimension_mismatch_names_index(self):
        items = [item(1), item(2), item(3, embedding=(0.1, 0.2))]
        with pytest.raises(InvalidItemError) as exc_info:
            validate_items(items)

        assert exc_info.value.index == 2

    def test_first_bad_item_reported(self):
        items = [item(1), item(2, text=""), item(3, embedding=[])]
        with pytest.raises(InvalidItemError) as exc_info:
            validate_items(items)

        assert exc_info.value.index == 1

    def test_errors_are_value_errors(self):
        """The taxonomy stays catchable as ValueError."""
        with pytest.raises(ValueError):
            validate_items([])
        assert issubclass(InvalidItemError, ClusteringError)


class TestValidateThreshold:
    """Tests for threshold validation."""

    @pytest.mark.parametrize("threshold", [0, 0.0, 0.3, 1, 1.0, np.float32(0.5)])
    def test_valid(self, threshold):
        assert validate_threshold(threshold) == pytest.approx(float(threshold))

    @pytest.mark.parametrize("threshold", [-0.1, 1.1, math.nan, "0.5", None, True])
    def test_invalid(self, threshold):
        with pytest.raises(InvalidThresholdError):
            validate_threshold(threshold)
