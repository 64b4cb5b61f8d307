import pytest

from gridminimax.agents.weights import (
    WeightRange,
    WeightVector,
    candidate_vectors,
    count_candidates,
)
from gridminimax.errors import ConfigurationError


class TestWeightVector:

    def test_from_dict_keeps_order(self):
        weights = WeightVector.from_dict({"b": 1, "a": 2})
        assert weights.names == ("b", "a")
        assert weights.values == (1.0, 2.0)
        assert weights["a"] == 2.0
        assert weights.as_dict() == {"b": 1.0, "a": 2.0}

    def test_unknown_name_raises_key_error(self):
        with pytest.raises(KeyError):
            WeightVector.from_dict({"a": 1})["missing"]

    def test_length_mismatch_rejected(self):
        with pytest.raises(ConfigurationError):
            WeightVector(names=("a", "b"), values=(1.0,))

    def test_with_value(self):
        weights = WeightVector.from_dict({"a": 1, "b": 2}).with_value("b", 5)
        assert weights.values == (1.0, 5.0)


class TestQuantizedKey:

    def test_values_within_resolution_share_key(self):
        first = WeightVector.from_dict({"a": 0.51, "b": 1.0})
        second = WeightVector.from_dict({"a": 0.55, "b": 1.04})
        assert first.quantized_key() == second.quantized_key() == (5, 10)

    def test_full_resolution_step_changes_key(self):
        first = WeightVector.from_dict({"a": 0.5, "b": 1.0})
        second = WeightVector.from_dict({"a": 0.6, "b": 1.0})
        assert first.quantized_key() != second.quantized_key()

    def test_accumulated_drift_lands_in_intended_bucket(self):
        value = 0.0
        for _ in range(8):
            value += 0.1
        assert value != 0.8
        assert WeightVector.from_dict({"a": value}).quantized_key() == (8,)

    def test_small_negative_and_positive_weights_do_not_collide(self):
        negative = WeightVector.from_dict({"a": -0.05})
        positive = WeightVector.from_dict({"a": 0.05})
        assert negative.quantized_key() != positive.quantized_key()

    def test_from_key_inverts_scaling(self):
        weights = WeightVector.from_key(("a", "b"), (5, 10))
        assert weights.values == (0.5, 1.0)
        assert weights.quantized_key() == (5, 10)

    def test_custom_factor(self):
        weights = WeightVector.from_dict({"a": 0.25})
        assert weights.quantized_key(factor=100) == (25,)
        assert weights.quantized_key(factor=10) == (2,)


class TestWeightRange:

    def test_integer_range_is_inclusive(self):
        assert WeightRange(0, 2, 1).values() == [0, 1, 2]

    def test_count_matches_enumeration(self):
        weight_range = WeightRange(0.0, 1.0, 0.1)
        assert len(weight_range) == len(weight_range.values()) == 11

    def test_accumulation_decides_the_upper_bound(self):
        # 0.1 + 0.1 + 0.1 overshoots 0.3, so the range stops at 0.2
        weight_range = WeightRange(0.0, 0.3, 0.1)
        assert len(weight_range) == len(weight_range.values()) == 3

    def test_empty_range_rejected(self):
        with pytest.raises(ConfigurationError):
            WeightRange(1.0, 0.0, 0.1)

    def test_non_positive_step_rejected(self):
        with pytest.raises(ConfigurationError):
            WeightRange(0.0, 1.0, 0.0)


class TestCandidates:

    def test_cartesian_product_order(self):
        ranges = {"a": WeightRange(0, 1, 1), "b": WeightRange(0, 1, 1)}
        vectors = list(candidate_vectors(ranges))
        assert [v.values for v in vectors] == [(0, 0), (0, 1), (1, 0), (1, 1)]
        assert all(v.names == ("a", "b") for v in vectors)

    def test_count_agrees_with_enumeration_under_drift(self):
        ranges = {
            "a": WeightRange(0.0, 0.3, 0.1),
            "b": WeightRange(0.0, 1.0, 0.1),
            "c": WeightRange(1, 3, 1),
        }
        assert count_candidates(ranges) == len(list(candidate_vectors(ranges))) == 3 * 11 * 3

    def test_no_ranges_rejected(self):
        with pytest.raises(ConfigurationError):
            count_candidates({})
