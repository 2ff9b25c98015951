import numpy as np
from typing import Any, Callable, List, Optional, Sequence, Tuple

from format_knn.data.corpus import Corpus
from format_knn.models.distance import DistanceMetric, build_metric
from format_knn.models.neighbors import Neighbor, k_nearest
from format_knn.models.votes import DEFAULT_DISTANCE_THRESHOLD, VoteTally, tally_votes

# Returned by classify() when no neighbor is close enough to vote
NO_PREDICTION = None
DEFAULT_K = 5


class KNNClassifier:
    """
    K-Nearest Neighbors classifier over an immutable corpus.

    Finds the k corpus samples closest to a query under a pluggable distance
    metric and lets those within the distance threshold vote. No state is
    kept between queries, so one instance can serve concurrent callers.
    """

    def __init__(self, corpus: Corpus,
                 metric: Optional[DistanceMetric] = None,
                 cfg: Optional[Any] = None,
                 k: int = DEFAULT_K,
                 distance_threshold: float = DEFAULT_DISTANCE_THRESHOLD,
                 default_category: Optional[int] = NO_PREDICTION,
                 trace: bool = False,
                 trace_neighbors: int = 16,
                 log_function: Optional[Callable[[str], Any]] = None):
        """
        Initialize KNN classifier.

        Args:
            corpus: Labeled reference vectors.
            metric: Distance strategy; when None one is built from the
                configured metric name ('l0' by default).
            cfg: Optional config object (e.g., cfg.model.knn)
            k: Default number of neighbors (default: 5)
            distance_threshold: Default cutoff beyond which neighbors don't vote
            default_category: Returned when no neighbor votes
            trace: Emit per-query diagnostics through `log_function`
            trace_neighbors: How many nearest neighbors a trace lists
            log_function: Diagnostic sink (default: print)
        """
        metric_name = 'l0'
        if cfg is not None:
            k = getattr(cfg, 'k', k)
            distance_threshold = getattr(cfg, 'distance_threshold', distance_threshold)
            default_category = getattr(cfg, 'default_category', default_category)
            trace = getattr(cfg, 'trace', trace)
            trace_neighbors = getattr(cfg, 'trace_neighbors', trace_neighbors)
            metric_name = getattr(cfg, 'metric', metric_name)

        self.corpus = corpus
        self.metric = metric if metric is not None else build_metric(metric_name, corpus)
        self.k = k
        self.distance_threshold = distance_threshold
        self.default_category = default_category
        self.trace = trace
        self.trace_neighbors = trace_neighbors
        self.log = log_function or print

    def kNN(self, query: Sequence[int], k: Optional[int] = None) -> List[Neighbor]:
        """Return the k nearest corpus samples, nearest first."""
        return k_nearest(self.corpus, self.metric, self.k if k is None else k, query)

    def votes(self, query: Sequence[int],
              k: Optional[int] = None,
              distance_threshold: Optional[float] = None,
              trace: Optional[bool] = None) -> VoteTally:
        """
        Vote distribution among the k nearest neighbors within the threshold.

        Useful when a caller needs a confidence or margin, not just the winner.
        """
        votes, _ = self._vote(query, k, distance_threshold, trace)
        return votes

    def classify(self, query: Sequence[int],
                 k: Optional[int] = None,
                 distance_threshold: Optional[float] = None,
                 trace: Optional[bool] = None) -> Optional[int]:
        """
        Predict the category of a single feature vector.

        Returns:
            The majority category, or `default_category` when no neighbor
            lies within the distance threshold.
        """
        _, category = self._vote(query, k, distance_threshold, trace)
        return category

    def predict(self, X_test) -> np.ndarray:
        """
        Predict categories for a batch of feature vectors using the configured k.
        """
        predictions = [self.classify(x) for x in X_test]
        return np.array(predictions, dtype=object)

    def _vote(self, query, k, distance_threshold, trace) -> Tuple[VoteTally, Optional[int]]:
        if distance_threshold is None:
            distance_threshold = self.distance_threshold
        neighbors = self.kNN(query, k)
        votes = tally_votes(neighbors, distance_threshold)
        category = votes.majority()
        if category is None:
            category = self.default_category

        if self.trace if trace is None else trace:
            self._dump(query, votes, category, neighbors)
        return votes, category

    def _dump(self, query, votes: VoteTally, category, neighbors: List[Neighbor]) -> None:
        self.log(f"{self.metric.describe(query)} -> {dict(votes)} => {category}")
        for n in neighbors[:self.trace_neighbors]:
            features = self.metric.describe(self.corpus.X[n.corpus_index])
            self.log(f"   {features} (cat={n.category},d={n.distance:.2f})")
