"""
Nearest-neighbor classifier for source-code formatting decisions
"""

from format_knn.data.corpus import Corpus
from format_knn.exceptions import InvalidInputError, InvalidStateError
from format_knn.models.KNN import KNNClassifier, NO_PREDICTION

__all__ = ['Corpus', 'KNNClassifier', 'NO_PREDICTION', 'InvalidInputError', 'InvalidStateError']
