"""
Unit tests for ecoswarm/spatial.py

Tests nearest / within-radius queries and the bucket grid.
"""

import math
import pytest
import numpy as np
from dataclasses import dataclass

from ecoswarm.spatial import SpatialHash, distance, nearest, within_radius


@dataclass(eq=False)
class Point:
    x: float
    y: float
    alive: bool = True
    inside_nest: bool = False


class TestNearest:
    """Tests for nearest()"""

    def test_empty(self):
        """No candidates gives None"""
        assert nearest([], 0.0, 0.0) is None

    def test_closest_wins(self):
        """Closest candidate is returned"""
        far = Point(10.0, 0.0)
        close = Point(3.0, 4.0)
        assert nearest([far, close], 0.0, 0.0) is close

    def test_max_distance_exclusive(self):
        """Candidates exactly at max distance are out of range"""
        p = Point(5.0, 0.0)
        assert nearest([p], 0.0, 0.0, max_distance=5.0) is None
        assert nearest([p], 0.0, 0.0, max_distance=5.01) is p

    def test_dead_and_nested_skipped(self):
        """Dead agents and ants inside a nest are not queryable"""
        dead = Point(1.0, 0.0, alive=False)
        hidden = Point(2.0, 0.0, inside_nest=True)
        visible = Point(3.0, 0.0)
        assert nearest([dead, hidden, visible], 0.0, 0.0) is visible

    def test_predicate(self):
        """Extra filter applies"""
        a = Point(1.0, 0.0)
        b = Point(2.0, 0.0)
        assert nearest([a, b], 0.0, 0.0, predicate=lambda p: p is not a) is b

    def test_tie_first_wins(self):
        """Exact ties resolve to the first candidate"""
        a = Point(1.0, 0.0)
        b = Point(-1.0, 0.0)
        assert nearest([a, b], 0.0, 0.0) is a


class TestWithinRadius:
    """Tests for within_radius()"""

    def test_input_order(self):
        """All candidates inside the radius, in input order"""
        pts = [Point(3.0, 0.0), Point(20.0, 0.0), Point(1.0, 0.0)]
        assert within_radius(pts, 0.0, 0.0, 5.0) == [pts[0], pts[2]]

    def test_distance(self):
        """Euclidean distance"""
        assert distance(0.0, 0.0, 3.0, 4.0) == pytest.approx(5.0)


class TestSpatialHash:
    """Tests for SpatialHash"""

    def test_insert_remove(self):
        """Count follows inserts and removals"""
        index = SpatialHash(10.0)
        p = Point(5.0, 5.0)
        index.insert(p)
        assert len(index) == 1
        assert index.remove(p)
        assert len(index) == 0
        assert not index.remove(p)

    def test_matches_linear_scan(self, rng):
        """Bucketed queries agree with a linear scan"""
        pts = [Point(float(x), float(y)) for x, y in rng.uniform(-200, 200, size=(200, 2))]
        index = SpatialHash(25.0)
        index.rebuild(pts)

        for qx, qy in rng.uniform(-250, 250, size=(30, 2)):
            expected = nearest(pts, qx, qy, 60.0)
            found = index.nearest(qx, qy, 60.0)
            if expected is None:
                assert found is None
            else:
                assert found is not None
                assert distance(qx, qy, found.x, found.y) == pytest.approx(
                    distance(qx, qy, expected.x, expected.y))

            assert set(map(id, index.within_radius(qx, qy, 40.0))) == \
                set(map(id, within_radius(pts, qx, qy, 40.0)))

    def test_unbounded_query(self):
        """Infinite radius visits every bucket"""
        index = SpatialHash(10.0)
        far = Point(1e6, -1e6)
        index.insert(far)
        assert index.nearest(0.0, 0.0) is far

    def test_non_finite_query(self):
        """Non-finite query positions find nothing"""
        index = SpatialHash(10.0)
        index.insert(Point(0.0, 0.0))
        assert index.nearest(math.nan, 0.0, 50.0) is None
        assert index.within_radius(0.0, math.inf, 50.0) == []
