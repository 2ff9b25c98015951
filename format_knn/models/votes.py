"""
Threshold-gated vote counting over an ordered neighbor list.
"""

from collections import Counter
from typing import Iterable, List, Optional, Tuple

from format_knn.exceptions import InvalidInputError
from format_knn.models.neighbors import Neighbor

DEFAULT_DISTANCE_THRESHOLD = 1.0


class VoteTally(Counter):
    """
    Category -> vote count for one query.

    Besides the counts, the tally remembers when each category reached its
    current count, which is what `majority` uses to break ties.
    """

    def __init__(self, iterable=None, **kwds):
        self._cast = 0
        self._reached = {}
        super().__init__(iterable, **kwds)

    def copy(self) -> "VoteTally":
        """Copy counts together with arrival order."""
        other = self.__class__(self)
        other._cast = self._cast
        other._reached = dict(self._reached)
        return other

    def __reduce__(self):
        return self.__class__, (dict(self),), {"_cast": self._cast, "_reached": dict(self._reached)}

    def add(self, category: int) -> None:
        """Record one vote for `category`."""
        self[category] += 1
        self._reached[category] = self._cast
        self._cast += 1

    @property
    def n_votes(self) -> int:
        return sum(self.values())

    def majority(self) -> Optional[int]:
        """
        Category with the most votes, or None for an empty tally.

        Ties go to the category that reached the winning count first, with
        votes taken nearest to farthest. With one vote each, the nearest
        neighbor's category wins.
        """
        if not self:
            return None
        return self.most_common(1)[0][0]

    def most_common(self, n: Optional[int] = None) -> List[Tuple[int, int]]:
        """
        (category, count) pairs by descending count, ties broken as in `majority`.
        """
        # Counts copied in without add() have no arrival order; insertion order decides
        ordered = sorted(
            self.items(),
            key=lambda item: (-item[1], self._reached.get(item[0], float("inf")))
        )
        return ordered if n is None else ordered[:n]

    def confidence(self) -> float:
        """Share of votes held by the winning category (0.0 when empty)."""
        if not self:
            return 0.0
        return self[self.majority()] / self.n_votes


def tally_votes(
    neighbors: Iterable[Neighbor],
    distance_threshold: float = DEFAULT_DISTANCE_THRESHOLD
) -> VoteTally:
    """
    Count one vote per neighbor no farther than `distance_threshold`.

    `neighbors` must be sorted nearest first: counting stops at the first
    neighbor beyond the threshold.

    Raises:
        InvalidInputError: If the threshold is negative or NaN.
    """
    if not distance_threshold >= 0:
        raise InvalidInputError(
            f"distance_threshold must be non-negative, got {distance_threshold}"
        )
    votes = VoteTally()
    for neighbor in neighbors:
        # Don't count votes from samples that are too distant
        if neighbor.distance > distance_threshold:
            break
        votes.add(neighbor.category)
    return votes
