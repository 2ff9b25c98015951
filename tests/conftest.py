"""
Shared corpora for the classifier tests.
"""

import pytest

from format_knn.data.corpus import Corpus


@pytest.fixture
def small_corpus():
    """Five samples; only the first one matches the query [0, 0] exactly."""
    return Corpus(
        vectors=[[0, 0], [5, 5], [1, 1], [2, 2], [3, 3]],
        labels=[0, 0, 1, 1, 1],
        categorical=[True, False]
    )


@pytest.fixture
def document_corpus():
    """Three documents; c.java holds a vector nothing else resembles."""
    return Corpus(
        vectors=[[1, 0], [2, 0], [1, 0], [2, 0], [9, 9]],
        labels=[0, 1, 0, 1, 1],
        categorical=[True, False],
        documents=["a.java", "a.java", "b.java", "b.java", "c.java"]
    )
