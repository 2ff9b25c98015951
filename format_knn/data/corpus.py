"""
Labeled feature-vector corpus used as the reference set for nearest-neighbor lookup.
"""

from collections import Counter
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from format_knn.exceptions import InvalidInputError, InvalidStateError


class Corpus:
    """
    Immutable store of labeled feature vectors plus a categorical mask.

    The corpus is built once by the feature-extraction pipeline and is only
    read afterwards. Vectors are kept in a read-only integer matrix so that
    classifiers can borrow rows without copying.
    """

    def __init__(
        self,
        vectors: Sequence[Sequence[int]],
        labels: Sequence[int],
        categorical: Sequence[bool],
        documents: Optional[Sequence[str]] = None
    ):
        """
        Build the corpus from three (optionally four) parallel structures.

        Args:
            vectors: One fixed-width integer feature vector per sample.
            labels: Category of each sample; any signed integer.
            categorical: One flag per feature index, True for nominal features.
            documents: Optional name of the source document of each sample.

        Raises:
            InvalidStateError: If no samples are given.
            InvalidInputError: If the parallel structures disagree in length
                or a vector's width differs from the mask length, or a
                feature or label is not a whole number.
        """
        if len(vectors) == 0:
            raise InvalidStateError("Corpus requires at least one sample")
        if len(labels) != len(vectors):
            raise InvalidInputError(
                f"Number of vectors ({len(vectors)}) and labels ({len(labels)}) must match"
            )
        if documents is not None and len(documents) != len(vectors):
            raise InvalidInputError(
                f"Number of documents ({len(documents)}) must match number of samples ({len(vectors)})"
            )

        self._categorical: Tuple[bool, ...] = tuple(bool(c) for c in categorical)
        width = len(self._categorical)
        for i, vector in enumerate(vectors):
            if len(vector) != width:
                raise InvalidInputError(
                    f"Sample {i} has width {len(vector)}, expected {width} "
                    f"(length of categorical mask)"
                )

        X = _as_int_array(vectors, "Feature vectors").reshape(len(vectors), width)
        X.setflags(write=False)
        self._X = X
        self._y: Tuple[int, ...] = tuple(int(label) for label in _as_int_array(labels, "Labels"))
        self._documents: Optional[Tuple[str, ...]] = (
            tuple(documents) if documents is not None else None
        )

    @property
    def X(self) -> np.ndarray:
        """Read-only matrix of shape (n_samples, width)."""
        return self._X

    @property
    def labels(self) -> Tuple[int, ...]:
        return self._y

    @property
    def categorical(self) -> Tuple[bool, ...]:
        return self._categorical

    @property
    def documents(self) -> Optional[Tuple[str, ...]]:
        return self._documents

    @property
    def width(self) -> int:
        """Number of features per vector."""
        return len(self._categorical)

    def __len__(self) -> int:
        """Return the number of samples in the corpus."""
        return len(self._y)

    def __getitem__(self, idx: int) -> Tuple[np.ndarray, int]:
        """
        Return a sample from the corpus.

        Args:
            idx: Index of the sample.

        Returns:
            Tuple of (feature_vector, label).
        """
        if idx < 0 or idx >= len(self._y):
            raise IndexError(
                f"Index {idx} out of range for corpus "
                f"with {len(self._y)} samples"
            )
        return self._X[idx], self._y[idx]

    def check_width(self, vector: Sequence[int]) -> None:
        """Raise InvalidInputError unless `vector` has the corpus width."""
        if len(vector) != self.width:
            raise InvalidInputError(
                f"Query vector has width {len(vector)}, corpus width is {self.width}"
            )

    def document_names(self) -> List[str]:
        """
        Distinct document names in first-appearance order.

        Raises:
            InvalidStateError: If the corpus was built without document names.
        """
        if self._documents is None:
            raise InvalidStateError("Corpus was built without document names")
        return list(dict.fromkeys(self._documents))

    def _check_document(self, name: str) -> None:
        if name not in self.document_names():
            raise InvalidInputError(f"Corpus has no document named '{name}'")

    def _create_subset(self, indices: List[int]) -> "Corpus":
        """
        Create a new corpus holding the samples at the given indices, in order.

        Args:
            indices: Sample indices to keep.

        Returns:
            New Corpus sharing this corpus's categorical mask.
        """
        documents = None
        if self._documents is not None:
            documents = [self._documents[i] for i in indices]
        return Corpus(
            self._X[indices],
            [self._y[i] for i in indices],
            self._categorical,
            documents
        )

    def without_document(self, name: str) -> "Corpus":
        """
        Corpus of every sample not extracted from document `name`.

        Raises:
            InvalidInputError: If no sample came from document `name`.
            InvalidStateError: If no sample would remain.
        """
        self._check_document(name)
        keep = [i for i, doc in enumerate(self._documents) if doc != name]
        return self._create_subset(keep)

    def only_document(self, name: str) -> "Corpus":
        """
        Corpus of the samples extracted from document `name`.

        Raises:
            InvalidInputError: If no sample came from document `name`.
        """
        self._check_document(name)
        keep = [i for i, doc in enumerate(self._documents) if doc == name]
        return self._create_subset(keep)

    def summary(self) -> Dict[str, Any]:
        """
        Get a summary of the corpus.

        Returns:
            Dictionary with corpus statistics.
        """
        label_distribution = dict(sorted(Counter(self._y).items()))
        return {
            "total_samples": len(self._y),
            "width": self.width,
            "num_categorical": sum(self._categorical),
            "num_documents": len(self.document_names()) if self._documents is not None else None,
            "label_distribution": label_distribution
        }

    def print_summary(self, title: str = "Corpus Summary") -> None:
        """
        Print a formatted summary of the corpus.

        Args:
            title: Title to display at the top of the summary.
        """
        stats = self.summary()

        print(f"\n   {title}")
        print(f"   {'=' * 50}")
        print(f"   Total Samples: {stats['total_samples']}")
        print(f"   Features: {stats['width']} ({stats['num_categorical']} categorical)")
        if stats['num_documents'] is not None:
            print(f"   Documents: {stats['num_documents']}")
        print(f"\n   Label Distribution:")
        print(f"   {'-' * 30}")

        for label, count in stats['label_distribution'].items():
            percentage = (count / stats['total_samples']) * 100
            bar = '█' * int(percentage / 5)
            print(f"   {label:12} | {count:4} samples | {percentage:5.1f}% | {bar}")

        print(f"   {'-' * 30}")

    def __repr__(self) -> str:
        """Return string representation of the corpus."""
        return f"Corpus(samples={len(self._y)}, width={self.width})"


def _as_int_array(values, what: str) -> np.ndarray:
    """Convert to int64, rejecting values that are not whole numbers."""
    arr = np.asarray(values)
    if arr.dtype.kind in "biu":
        return arr.astype(np.int64)
    if arr.dtype.kind == "f" and np.all(np.isfinite(arr)) and np.all(arr == np.trunc(arr)):
        return arr.astype(np.int64)
    raise InvalidInputError(f"{what} must be integers, got dtype {arr.dtype}")
