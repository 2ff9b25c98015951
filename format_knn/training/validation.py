"""
Leave-one-out validation over the documents of a corpus.

Each document's samples are withheld in turn, a classifier is built from the
remaining documents, and the withheld samples are classified against it.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np
from sklearn.metrics import accuracy_score

from format_knn.data.corpus import Corpus
from format_knn.exceptions import InvalidStateError
from format_knn.models.KNN import KNNClassifier


@dataclass
class DocumentResult:
    """Outcome of classifying one withheld document."""
    document: str
    y_true: np.ndarray
    y_pred: np.ndarray  # object array; None where no neighbor voted

    @property
    def n_samples(self) -> int:
        return len(self.y_true)

    @property
    def n_abstained(self) -> int:
        return sum(1 for p in self.y_pred if p is None)

    @property
    def accuracy(self) -> float:
        """Fraction classified correctly; abstentions count as errors."""
        covered = [i for i, p in enumerate(self.y_pred) if p is not None]
        if not covered:
            return 0.0
        correct = accuracy_score(
            self.y_true[covered],
            self.y_pred[covered].astype(np.int64),
            normalize=False
        )
        return float(correct) / self.n_samples


@dataclass
class ValidationResult:
    """Per-document results of one leave-one-out pass."""
    k: int
    distance_threshold: float
    documents: List[DocumentResult] = field(default_factory=list)

    @property
    def accuracies(self) -> np.ndarray:
        return np.array([d.accuracy for d in self.documents])

    @property
    def median_accuracy(self) -> float:
        return float(np.median(self.accuracies))

    @property
    def mean_accuracy(self) -> float:
        return float(np.mean(self.accuracies))

    @property
    def error_variance(self) -> float:
        """Population variance of the per-document error rates."""
        return float(np.var(1.0 - self.accuracies))

    def predictions(self) -> Tuple[np.ndarray, np.ndarray]:
        """All (y_true, y_pred) pairs concatenated in document order."""
        y_true = np.concatenate([d.y_true for d in self.documents])
        y_pred = np.concatenate([d.y_pred for d in self.documents])
        return y_true, y_pred


class LeaveOneOutValidator:
    """Scores a classifier configuration by withholding one document at a time."""

    def __init__(self, corpus: Corpus, cfg: Optional[Any] = None,
                 log_function: Optional[Callable[[str], Any]] = None):
        """
        Args:
            corpus: Corpus built with document names.
            cfg: Classifier config (e.g., cfg.model.knn), passed to every
                per-fold KNNClassifier.
            log_function: Progress sink (default: print)

        Raises:
            InvalidStateError: If the corpus has no document names or fewer
                than two documents.
        """
        names = corpus.document_names()
        if len(names) < 2:
            raise InvalidStateError(
                f"Leave-one-out needs at least two documents, corpus has {len(names)}"
            )
        self.corpus = corpus
        self.cfg = cfg
        self.document_names = names
        self.log = log_function or print

        defaults = self._classifier(corpus)
        self.k = defaults.k
        self.distance_threshold = defaults.distance_threshold

    def _classifier(self, train: Corpus) -> KNNClassifier:
        # Metric is rebuilt per fold so fitted ranges never see the withheld document
        return KNNClassifier(train, cfg=self.cfg, log_function=self.log)

    def validate_document(self, name: str, k: Optional[int] = None,
                          distance_threshold: Optional[float] = None) -> DocumentResult:
        """Classify document `name` against a corpus of every other document."""
        classifier = self._classifier(self.corpus.without_document(name))
        withheld = self.corpus.only_document(name)
        y_pred = np.array(
            [classifier.classify(x, k=k, distance_threshold=distance_threshold) for x in withheld.X],
            dtype=object
        )
        return DocumentResult(name, np.array(withheld.labels, dtype=np.int64), y_pred)

    def validate_documents(self, k: Optional[int] = None,
                           distance_threshold: Optional[float] = None) -> ValidationResult:
        """
        Run one full leave-one-out pass.

        Args:
            k: Neighbor count (default: the classifier config's k)
            distance_threshold: Vote cutoff (default: the config's threshold)
        """
        k = self.k if k is None else k
        if distance_threshold is None:
            distance_threshold = self.distance_threshold

        result = ValidationResult(k=k, distance_threshold=distance_threshold)
        for name in self.document_names:
            doc = self.validate_document(name, k=k, distance_threshold=distance_threshold)
            result.documents.append(doc)
            self.log(f"     {name}: {doc.accuracy*100:.1f}% "
                     f"({doc.n_samples} samples, {doc.n_abstained} abstained)")
        return result

    def sweep(self, k_values: List[int], thresholds: List[float]) -> Dict[Tuple[int, float], ValidationResult]:
        """Validate every (k, threshold) combination."""
        results = {}
        for k in k_values:
            for threshold in thresholds:
                self.log(f"   k={k}, threshold={threshold}:")
                result = self.validate_documents(k=k, distance_threshold=threshold)
                self.log(f"   -> median accuracy {result.median_accuracy*100:.1f}%")
                results[(k, threshold)] = result
        return results


def best_setting(results: Dict[Tuple[int, float], ValidationResult]) -> Tuple[int, float]:
    """(k, threshold) with the highest median accuracy; earlier entries win ties."""
    best_key = None
    best_acc = -1.0
    for key, result in results.items():
        if result.median_accuracy > best_acc:
            best_acc = result.median_accuracy
            best_key = key
    return best_key
