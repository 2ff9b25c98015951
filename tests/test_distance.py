import math

import pytest

from format_knn.data.corpus import Corpus
from format_knn.exceptions import InvalidInputError
from format_knn.models.distance import DistanceMetric, HEOMDistance, L0Distance, build_metric


class TestL0Distance:

    def test_identical_vectors(self):
        metric = L0Distance([True, False, False])
        assert metric.distance([1, 2, 3], [1, 2, 3]) == 0.0

    def test_fraction_of_mismatches(self):
        metric = L0Distance([True, False, False, True])
        assert metric.distance([1, 2, 3, 4], [1, 0, 3, 0]) == pytest.approx(0.5)
        assert metric.distance([1, 2, 3, 4], [0, 0, 0, 0]) == pytest.approx(1.0)

    def test_weights(self):
        metric = L0Distance([True, False], weights=[3.0, 1.0])
        assert metric.distance([1, 1], [0, 1]) == pytest.approx(0.75)
        assert metric.distance([1, 1], [1, 0]) == pytest.approx(0.25)

    def test_rejects_bad_weights(self):
        with pytest.raises(InvalidInputError):
            L0Distance([True, False], weights=[1.0])
        with pytest.raises(InvalidInputError):
            L0Distance([True, False], weights=[1.0, -1.0])

    def test_symmetric(self):
        metric = L0Distance([True, False, False])
        a, b = [1, 5, 9], [1, 6, 2]
        assert metric.distance(a, b) == metric.distance(b, a)


class TestHEOMDistance:

    def test_mixed_features(self):
        metric = HEOMDistance([True, False], ranges=[1, 10])
        # categorical mismatch 1, numeric 5/10
        assert metric.distance([1, 0], [2, 5]) == pytest.approx(math.sqrt((1 + 0.25) / 2))

    def test_numeric_difference_is_clipped(self):
        metric = HEOMDistance([False], ranges=[10])
        assert metric.distance([0], [50]) == pytest.approx(1.0)

    def test_from_corpus_fits_ranges(self):
        corpus = Corpus([[1, 0, 7], [2, 10, 7]], [0, 1], [True, False, False])
        metric = HEOMDistance.from_corpus(corpus)
        assert list(metric.ranges) == [1.0, 10.0, 1.0]
        assert 0.0 <= metric.distance([1, 0, 7], [2, 10, 7]) <= 1.0

    def test_constant_feature_does_not_divide_by_zero(self):
        metric = HEOMDistance([False, False], ranges=[0, 4])
        assert metric.distance([3, 0], [3, 2]) == pytest.approx(math.sqrt(0.25 / 2))


def test_describe_marks_categorical_features():
    metric = L0Distance([True, False])
    assert metric.describe([3, 12]) == "[#3 12]"
    named = L0Distance([True, False], feature_names=["prev", "col"])
    assert named.describe([3, 12]) == "[prev=#3 col=12]"


def test_metrics_satisfy_protocol():
    assert isinstance(L0Distance([True]), DistanceMetric)
    assert isinstance(HEOMDistance([True], ranges=[1]), DistanceMetric)


def test_build_metric(small_corpus):
    assert isinstance(build_metric("l0", small_corpus), L0Distance)
    assert isinstance(build_metric("HEOM", small_corpus), HEOMDistance)
    with pytest.raises(InvalidInputError, match="Unknown distance metric"):
        build_metric("cosine", small_corpus)
