"""
EcoSwarm Spatial Queries
========================
Nearest / within-radius lookups over agent sets, and a bucket grid for
static items such as food.

Candidate sets are small per-species lists, so agent queries are plain
linear scans. Only queryable candidates are considered: alive, and for
ants, not hidden inside a nest. Objects without those attributes (food)
are always queryable.

Exact ties resolve to the first candidate encountered; callers must not
rely on a particular winner.
"""

import math
from collections import defaultdict
from typing import Callable, Dict, Iterable, List, Optional, Tuple, TypeVar

T = TypeVar("T")


def distance(ax: float, ay: float, bx: float, by: float) -> float:
    return math.hypot(bx - ax, by - ay)


def _is_queryable(candidate) -> bool:
    if not getattr(candidate, "alive", True):
        return False
    return not getattr(candidate, "inside_nest", False)


def nearest(candidates: Iterable[T],
            x: float,
            y: float,
            max_distance: float = math.inf,
            predicate: Optional[Callable[[T], bool]] = None) -> Optional[T]:
    """
    Closest queryable candidate strictly under max_distance.

    Args:
        candidates: Objects with x/y attributes
        x, y: Query origin
        max_distance: Exclusive search radius
        predicate: Optional extra filter

    Returns:
        The nearest candidate, or None
    """
    best = None
    best_dist = max_distance

    for candidate in candidates:
        if not _is_queryable(candidate):
            continue
        if predicate is not None and not predicate(candidate):
            continue

        dist = distance(x, y, candidate.x, candidate.y)
        if dist < best_dist:
            best_dist = dist
            best = candidate

    return best


def within_radius(candidates: Iterable[T],
                  x: float,
                  y: float,
                  radius: float,
                  predicate: Optional[Callable[[T], bool]] = None) -> List[T]:
    """All queryable candidates strictly inside radius, in input order"""
    found = []
    for candidate in candidates:
        if not _is_queryable(candidate):
            continue
        if predicate is not None and not predicate(candidate):
            continue
        if distance(x, y, candidate.x, candidate.y) < radius:
            found.append(candidate)
    return found


class SpatialHash:
    """
    Uniform bucket grid over an unbounded plane.

    Items are bucketed by floor(coord / bucket_size). Queries visit only
    the buckets overlapping the search circle and then apply the exact
    distance test, so results match `nearest` / `within_radius` over the
    same items (tie order aside).
    """

    def __init__(self, bucket_size: float = 50.0):
        assert bucket_size > 0, "Bucket size must be positive"
        self.bucket_size = bucket_size
        self.buckets: Dict[Tuple[int, int], List] = defaultdict(list)
        self._count = 0

    def _key(self, x: float, y: float) -> Tuple[int, int]:
        return (int(math.floor(x / self.bucket_size)),
                int(math.floor(y / self.bucket_size)))

    def __len__(self) -> int:
        return self._count

    def insert(self, item):
        self.buckets[self._key(item.x, item.y)].append(item)
        self._count += 1

    def remove(self, item) -> bool:
        key = self._key(item.x, item.y)
        bucket = self.buckets.get(key)
        if not bucket:
            return False
        for i, other in enumerate(bucket):
            if other is item:
                del bucket[i]
                if not bucket:
                    del self.buckets[key]
                self._count -= 1
                return True
        return False

    def clear(self):
        self.buckets.clear()
        self._count = 0

    def rebuild(self, items: Iterable):
        self.clear()
        for item in items:
            self.insert(item)

    def _candidates(self, x: float, y: float, radius: float):
        if not (math.isfinite(x) and math.isfinite(y)):
            return
        if math.isinf(radius):
            for bucket in self.buckets.values():
                yield from bucket
            return

        min_col, min_row = self._key(x - radius, y - radius)
        max_col, max_row = self._key(x + radius, y + radius)

        # Sparse buckets: iterating stored keys is cheaper than a huge window
        window = (max_col - min_col + 1) * (max_row - min_row + 1)
        if window > len(self.buckets):
            for (col, row), bucket in self.buckets.items():
                if min_col <= col <= max_col and min_row <= row <= max_row:
                    yield from bucket
            return

        for col in range(min_col, max_col + 1):
            for row in range(min_row, max_row + 1):
                bucket = self.buckets.get((col, row))
                if bucket:
                    yield from bucket

    def nearest(self, x: float, y: float, max_distance: float = math.inf,
                predicate: Optional[Callable] = None):
        return nearest(self._candidates(x, y, max_distance), x, y, max_distance, predicate)

    def within_radius(self, x: float, y: float, radius: float,
                      predicate: Optional[Callable] = None) -> List:
        return within_radius(self._candidates(x, y, radius), x, y, radius, predicate)
