"""
Unit tests for ecoswarm/genetics.py

Tests the bounded mutation operator.
"""

import pytest
import numpy as np
from ecoswarm.config import SimulationConfig, Species
from ecoswarm.genetics import (
    Gene, GeneBounds, mutate, default_gene, crossover, fitness, format_gene,
)


class TestGeneBounds:
    """Tests for GeneBounds"""

    def test_default_bounds(self):
        """Declared per-field ranges"""
        bounds = GeneBounds()
        assert bounds.speed == (0.5, 15.0)
        assert bounds.perception == (10.0, 200.0)
        assert bounds.size == (0.3, 10.0)

    def test_clamp(self):
        """Out-of-range fields are clamped"""
        gene = GeneBounds().clamp(Gene(speed=100.0, perception=1.0, size=5.0))
        assert gene == Gene(speed=15.0, perception=10.0, size=5.0)

    def test_from_config(self):
        """Bounds follow the genetics configuration"""
        config = SimulationConfig()
        config.genetics.speed_bounds = (1.0, 2.0)
        assert GeneBounds.from_config(config.genetics).speed == (1.0, 2.0)


class TestMutate:
    """Tests for the mutation operator"""

    def test_rate_zero_is_identity(self, rng):
        """No field mutates at rate 0"""
        gene = Gene(speed=2.0, perception=50.0, size=1.0)
        assert mutate(gene, 0.0, 0.3, rng=rng) == gene

    def test_rate_one_changes_fields(self, rng):
        """Every field may change at rate 1, within the relative amount"""
        gene = Gene(speed=2.0, perception=50.0, size=1.0)
        child = mutate(gene, 1.0, 0.3, rng=rng)
        assert child.speed == pytest.approx(2.0, rel=0.3)
        assert child.perception == pytest.approx(50.0, rel=0.3)
        assert child.size == pytest.approx(1.0, rel=0.3)

    def test_parent_untouched(self, rng):
        """Mutation is pure"""
        gene = Gene(speed=2.0, perception=50.0, size=1.0)
        mutate(gene, 1.0, 0.3, rng=rng)
        assert gene == Gene(speed=2.0, perception=50.0, size=1.0)

    def test_always_within_bounds(self):
        """Output stays in bounds for extreme inputs and many draws"""
        bounds = GeneBounds()
        rng = np.random.default_rng(7)
        parents = [
            Gene(speed=15.0, perception=200.0, size=10.0),
            Gene(speed=0.5, perception=10.0, size=0.3),
            Gene(speed=1000.0, perception=-5.0, size=0.0),
        ]
        for parent in parents:
            gene = parent
            for _ in range(300):
                gene = mutate(gene, 1.0, 0.9, bounds=bounds, rng=rng)
                assert bounds.contains(gene)

    def test_custom_bounds(self, rng):
        """Tighter bounds are honoured"""
        bounds = GeneBounds(speed=(1.0, 1.5), perception=(40.0, 45.0), size=(1.0, 1.1))
        gene = Gene(speed=1.2, perception=42.0, size=1.05)
        for _ in range(100):
            gene = mutate(gene, 1.0, 0.5, bounds=bounds, rng=rng)
            assert bounds.contains(gene)


class TestHelpers:
    """Tests for gene helpers"""

    def test_default_gene(self):
        """Base gene from the species table"""
        gene = default_gene(Species.BIRD, SimulationConfig())
        assert gene == Gene(speed=5.0, perception=60.0, size=3.0)

    def test_crossover_picks_parent_fields(self, rng):
        """Each child field comes from one of the parents"""
        a = Gene(speed=1.0, perception=20.0, size=1.0)
        b = Gene(speed=2.0, perception=40.0, size=2.0)
        child = crossover(a, b, rng)
        assert child.speed in (1.0, 2.0)
        assert child.perception in (20.0, 40.0)
        assert child.size in (1.0, 2.0)

    def test_fitness_of_base_gene(self):
        """The base gene scores the sum of the weights"""
        config = SimulationConfig()
        gene = default_gene(Species.ANT, config)
        assert fitness(gene, Species.ANT, config) == pytest.approx(1.0)

    def test_format_gene(self):
        """Two-decimal formatting"""
        assert format_gene(Gene(speed=1.234, perception=60.0, size=1.0)) == {
            "speed": "1.23", "perception": "60.00", "size": "1.00",
        }
