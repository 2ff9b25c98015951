from format_knn.data.corpus import Corpus

__all__ = ['Corpus']
