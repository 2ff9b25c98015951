"""
Distance metrics between feature vectors.

A metric is a strategy object with one operation, ``distance(a, b)``, plus a
``describe(vector)`` rendering used only for diagnostics. Both metrics here
return values in [0, 1], which is what the classifier's default distance
threshold of 1.0 assumes.
"""

from typing import Optional, Protocol, Sequence, runtime_checkable

import numpy as np

from format_knn.data.corpus import Corpus
from format_knn.exceptions import InvalidInputError


@runtime_checkable
class DistanceMetric(Protocol):
    """Non-negative, deterministic dissimilarity between two equal-width vectors."""

    def distance(self, a: Sequence[int], b: Sequence[int]) -> float: ...

    def describe(self, vector: Sequence[int]) -> str: ...


class _MaskedMetric:
    """Shared state for metrics that know which features are categorical."""

    def __init__(self, categorical: Sequence[bool], feature_names: Optional[Sequence[str]] = None):
        self.categorical = np.array(categorical, dtype=bool)
        if feature_names is not None and len(feature_names) != len(self.categorical):
            raise InvalidInputError(
                f"Got {len(feature_names)} feature names for {len(self.categorical)} features"
            )
        self.feature_names = list(feature_names) if feature_names is not None else None

    def describe(self, vector: Sequence[int]) -> str:
        """
        Render a feature vector for trace output.

        Categorical values are prefixed with '#'; named features render as
        ``name=value``.
        """
        parts = []
        for i, value in enumerate(vector):
            text = f"#{value}" if self.categorical[i] else str(value)
            if self.feature_names is not None:
                text = f"{self.feature_names[i]}={text}"
            parts.append(text)
        return "[" + " ".join(parts) + "]"


class L0Distance(_MaskedMetric):
    """
    Weighted fraction of features whose values differ.

    Every feature, categorical or numeric, counts as an exact-match test;
    per-feature weights let callers emphasise some features.

    d(a,b) = sum(w_i * [a_i != b_i]) / sum(w_i)
    """

    def __init__(
        self,
        categorical: Sequence[bool],
        weights: Optional[Sequence[float]] = None,
        feature_names: Optional[Sequence[str]] = None
    ):
        super().__init__(categorical, feature_names)
        if weights is None:
            weights = np.ones(len(self.categorical))
        self.weights = np.array(weights, dtype=np.float64)
        if self.weights.shape != self.categorical.shape:
            raise InvalidInputError(
                f"Got {len(self.weights)} weights for {len(self.categorical)} features"
            )
        if np.any(self.weights < 0):
            raise InvalidInputError("Feature weights must be non-negative")
        self._total_weight = float(self.weights.sum())

    @classmethod
    def from_corpus(cls, corpus: Corpus, **kwargs) -> "L0Distance":
        return cls(corpus.categorical, **kwargs)

    def distance(self, a: Sequence[int], b: Sequence[int]) -> float:
        if self._total_weight == 0:
            return 0.0
        mismatch = np.asarray(a) != np.asarray(b)
        return float(np.sum(self.weights[mismatch]) / self._total_weight)


class HEOMDistance(_MaskedMetric):
    """
    Heterogeneous Euclidean-Overlap Metric.

    Categorical features contribute 0 or 1 (overlap); numeric features
    contribute |a_i - b_i| / range_i, clipped to 1. The root of the summed
    squares is divided by sqrt(width) to keep the result in [0, 1].
    """

    def __init__(
        self,
        categorical: Sequence[bool],
        ranges: Sequence[float],
        feature_names: Optional[Sequence[str]] = None
    ):
        super().__init__(categorical, feature_names)
        self.ranges = np.array(ranges, dtype=np.float64)
        if self.ranges.shape != self.categorical.shape:
            raise InvalidInputError(
                f"Got {len(self.ranges)} ranges for {len(self.categorical)} features"
            )
        # Constant features never contribute
        self.ranges[self.ranges <= 0] = 1.0

    @classmethod
    def from_corpus(cls, corpus: Corpus, **kwargs) -> "HEOMDistance":
        """Fit per-feature numeric ranges from the corpus vectors."""
        ranges = corpus.X.max(axis=0) - corpus.X.min(axis=0)
        return cls(corpus.categorical, ranges, **kwargs)

    def distance(self, a: Sequence[int], b: Sequence[int]) -> float:
        width = len(self.categorical)
        if width == 0:
            return 0.0
        a = np.asarray(a, dtype=np.float64)
        b = np.asarray(b, dtype=np.float64)
        diff = np.where(
            self.categorical,
            (a != b).astype(np.float64),
            np.minimum(np.abs(a - b) / self.ranges, 1.0)
        )
        return float(np.sqrt(np.sum(diff ** 2) / width))


METRICS = {
    "l0": L0Distance,
    "heom": HEOMDistance,
}


def build_metric(name: str, corpus: Corpus, **kwargs) -> DistanceMetric:
    """
    Build a named metric fitted to `corpus`.

    Args:
        name: One of the keys of METRICS.
        corpus: Corpus supplying the categorical mask (and ranges for 'heom').
        **kwargs: Extra constructor arguments (weights, feature_names).

    Raises:
        InvalidInputError: If the name is unknown.
    """
    try:
        metric_cls = METRICS[name.lower()]
    except KeyError:
        raise InvalidInputError(
            f"Unknown distance metric '{name}', expected one of {sorted(METRICS)}"
        ) from None
    return metric_cls.from_corpus(corpus, **kwargs)
