"""
Nearest-neighbor search over a corpus.
"""

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from format_knn.data.corpus import Corpus
from format_knn.models.distance import DistanceMetric


@dataclass(frozen=True)
class Neighbor:
    """One corpus sample's label and distance to the current query."""
    category: int
    distance: float
    corpus_index: int


def distances(corpus: Corpus, metric: DistanceMetric, query: Sequence[int]) -> np.ndarray:
    """
    Distance from `query` to every corpus vector, in corpus order.

    Raises:
        InvalidInputError: If the query width differs from the corpus width.
    """
    corpus.check_width(query)
    return np.array([metric.distance(x, query) for x in corpus.X], dtype=np.float64)


def k_nearest(corpus: Corpus, metric: DistanceMetric, k: int, query: Sequence[int]) -> List[Neighbor]:
    """
    Return the `k` corpus samples closest to `query`, nearest first.

    Samples at equal distance keep their corpus order. When `k` exceeds the
    corpus size every sample is returned; `k <= 0` yields an empty list.
    """
    corpus.check_width(query)
    if k <= 0:
        return []
    d = distances(corpus, metric, query)

    # Stable sort keeps corpus order among ties
    order = np.argsort(d, kind="stable")[:k]
    labels = corpus.labels
    return [Neighbor(labels[i], float(d[i]), int(i)) for i in order]
