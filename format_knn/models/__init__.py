"""
Distance metrics, neighbor search, voting and the classifier facade
"""

from format_knn.models.distance import DistanceMetric, L0Distance, HEOMDistance, build_metric
from format_knn.models.neighbors import Neighbor, k_nearest
from format_knn.models.votes import VoteTally, tally_votes
from format_knn.models.KNN import KNNClassifier, NO_PREDICTION

__all__ = [
    'DistanceMetric', 'L0Distance', 'HEOMDistance', 'build_metric',
    'Neighbor', 'k_nearest', 'VoteTally', 'tally_votes',
    'KNNClassifier', 'NO_PREDICTION'
]
