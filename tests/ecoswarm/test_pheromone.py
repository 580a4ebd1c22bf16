"""
Unit tests for ecoswarm/pheromone.py

Tests the Ant Colony Optimization-inspired sparse pheromone field.
"""

import math
import pytest
import numpy as np
from ecoswarm.pheromone import PheromoneField
from ecoswarm.config import PheromoneConfig


class TestGridMapping:
    """Tests for world <-> grid mapping"""

    def test_world_to_grid(self, pheromone_field):
        """Cells are floor(coord / cell_size), (row, col) = (y, x)"""
        assert pheromone_field.world_to_grid(25.0, 5.0) == (0, 2)
        assert pheromone_field.world_to_grid(-0.5, -10.5) == (-2, -1)

    def test_grid_to_world(self, pheromone_field):
        """Cell centers"""
        assert pheromone_field.grid_to_world(0, 2) == (25.0, 5.0)


class TestDeposit:
    """Tests for deposition"""

    def test_deposit_accumulates(self, pheromone_field):
        """Deposits in the same cell add up"""
        pheromone_field.deposit(3.0, 3.0, 10.0)
        pheromone_field.deposit(7.0, 1.0, 5.0)
        assert pheromone_field.strength_at(5.0, 5.0) == pytest.approx(15.0)
        assert len(pheromone_field) == 1

    def test_deposit_clamped(self, pheromone_field):
        """Strength never exceeds max_strength"""
        for _ in range(100):
            pheromone_field.deposit(0.0, 0.0, 10.0)
        assert pheromone_field.strength_at(0.0, 0.0) == pheromone_field.max_strength

    def test_default_amount(self, pheromone_field):
        """Deposit amount defaults to the configured value"""
        pheromone_field.deposit(0.0, 0.0)
        assert pheromone_field.strength_at(0.0, 0.0) == pytest.approx(10.0)

    def test_rejects_non_finite(self, pheromone_field):
        """Non-finite positions and non-positive amounts are ignored"""
        assert not pheromone_field.deposit(math.nan, 0.0, 10.0)
        assert not pheromone_field.deposit(0.0, math.inf, 10.0)
        assert not pheromone_field.deposit(0.0, 0.0, 0.0)
        assert len(pheromone_field) == 0

    def test_negative_coordinates(self, pheromone_field):
        """The field is unbounded"""
        pheromone_field.deposit(-5000.0, -3000.0, 20.0)
        assert pheromone_field.strength_at(-5000.0, -3000.0) == pytest.approx(20.0)


class TestEvaporate:
    """Tests for evaporation"""

    def test_geometric_decay(self, pheromone_field):
        """After n evaporations strength <= initial * r^n"""
        pheromone_field.deposit(0.0, 0.0, 200.0)
        rate = 0.9
        for n in range(1, 30):
            pheromone_field.evaporate(rate)
            assert pheromone_field.strength_at(0.0, 0.0) <= 200.0 * rate ** n + 1e-9

    def test_sub_epsilon_removed(self, pheromone_field):
        """Cells falling under epsilon disappear from storage"""
        pheromone_field.deposit(0.0, 0.0, 1.0)
        for _ in range(50):
            pheromone_field.evaporate(0.9)
        assert len(pheromone_field) == 0
        assert (0, 0) not in pheromone_field.grid

    def test_strength_bounded_under_random_use(self, rng):
        """Strength stays in [0, max] under mixed deposits and evaporation"""
        field = PheromoneField(PheromoneConfig())
        for _ in range(500):
            x, y = rng.uniform(-50, 50, size=2)
            field.deposit(float(x), float(y), float(rng.uniform(0, 100)))
            field.evaporate()
            values = list(field.grid.values())
            assert all(field.epsilon <= v <= field.max_strength for v in values)


class TestStrongestDirection:
    """Tests for greedy lookup"""

    def test_all_zero(self, pheromone_field):
        """An empty neighborhood gives None"""
        assert pheromone_field.strongest_direction(5.0, 5.0) is None

    def test_single_neighbor(self, pheromone_field):
        """Exactly one nonzero neighbor is returned"""
        pheromone_field.deposit(15.0, 25.0, 30.0)  # cell (2, 1)
        target = pheromone_field.strongest_direction(5.0, 15.0)  # cell (1, 0)
        assert target is not None
        assert (target.x, target.y) == (15.0, 25.0)
        assert target.strength == pytest.approx(30.0)

    def test_center_excluded(self, pheromone_field):
        """The query cell itself is never returned"""
        pheromone_field.deposit(5.0, 5.0, 100.0)
        assert pheromone_field.strongest_direction(5.0, 5.0) is None

    def test_row_major_tie(self, pheromone_field):
        """First maximum in row-major order wins"""
        pheromone_field.deposit(15.0, 15.0, 50.0)   # (1, 1)
        pheromone_field.deposit(-5.0, -5.0, 50.0)   # (-1, -1)
        target = pheromone_field.strongest_direction(5.0, 5.0)
        assert (target.x, target.y) == (-5.0, -5.0)


class TestNonFiniteQueries:
    """Lookups at NaN or infinite positions"""

    @pytest.mark.parametrize("x, y", [(math.nan, 5.0), (5.0, math.inf)])
    def test_queries_are_empty(self, pheromone_field, rng, x, y):
        """Neighborhood lookups find nothing even with trail nearby"""
        pheromone_field.deposit(15.0, 15.0, 50.0)

        assert pheromone_field.strength_at(x, y) == 0.0
        assert pheromone_field.surrounding(x, y) == []
        assert pheromone_field.strongest_direction(x, y) is None
        assert pheromone_field.select_direction_probabilistic(x, y, 1.0, 0.0, rng=rng) is None


class TestProbabilisticSelection:
    """Tests for roulette-wheel direction selection"""

    def test_empty_returns_none(self, pheromone_field, rng):
        """Zero total weight gives None"""
        assert pheromone_field.select_direction_probabilistic(0.0, 0.0, 1.0, 0.0, rng=rng) is None

    def test_single_cell_always_selected(self, pheromone_field, rng):
        """With one nonzero cell, it is always chosen"""
        pheromone_field.deposit(-15.0, 25.0, 5.0)
        for _ in range(20):
            target = pheromone_field.select_direction_probabilistic(5.0, 5.0, 1.0, 0.0, rng=rng)
            assert (target.x, target.y) == (-15.0, 25.0)

    def test_forward_bias(self, pheromone_field):
        """Cells ahead of the heading get extra weight"""
        pheromone_field.deposit(25.0, 5.0, 10.0)    # ahead (+x)
        pheromone_field.deposit(-15.0, 5.0, 10.0)   # behind
        cells, weights = pheromone_field.direction_weights(5.0, 5.0, 1.0, 0.0, 2, 2)
        by_pos = {(c.world_x, c.world_y): w for c, w in zip(cells, weights)}
        assert by_pos[(25.0, 5.0)] == pytest.approx(20.0)
        assert by_pos[(-15.0, 5.0)] == pytest.approx(10.0)

    def test_selection_frequency_follows_weight(self, pheromone_field):
        """Stronger cells are chosen more often"""
        rng = np.random.default_rng(3)
        pheromone_field.deposit(5.0, 25.0, 90.0)
        pheromone_field.deposit(5.0, -15.0, 10.0)
        hits = 0
        for _ in range(2000):
            target = pheromone_field.select_direction_probabilistic(5.0, 5.0, 0.0, 0.0, rng=rng)
            if target.y == 25.0:
                hits += 1
        assert 0.85 < hits / 2000 < 0.95


class TestStatistics:
    """Tests for statistics and export"""

    def test_statistics(self, pheromone_field):
        """Aggregate values"""
        pheromone_field.deposit(0.0, 0.0, 10.0)
        pheromone_field.deposit(100.0, 0.0, 30.0)
        stats = pheromone_field.get_statistics()
        assert stats["active_cells"] == 2
        assert stats["total_strength"] == pytest.approx(40.0)
        assert stats["max_strength"] == pytest.approx(30.0)

    def test_heatmap(self, pheromone_field):
        """Dense window over active cells"""
        pheromone_field.deposit(0.0, 0.0, 10.0)
        pheromone_field.deposit(30.0, 20.0, 5.0)
        heatmap, (row0, col0) = pheromone_field.get_heatmap()
        assert (row0, col0) == (0, 0)
        assert heatmap.shape == (3, 4)
        assert heatmap[0, 0] == pytest.approx(10.0)
        assert heatmap[2, 3] == pytest.approx(5.0)

    def test_reset(self, pheromone_field):
        """Reset clears the field"""
        pheromone_field.deposit(0.0, 0.0, 10.0)
        pheromone_field.reset()
        assert len(pheromone_field) == 0
        assert pheromone_field.get_statistics()["total_depositions"] == 0
