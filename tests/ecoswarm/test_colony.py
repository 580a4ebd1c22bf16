"""
Unit tests for ecoswarm/colony.py

Tests nest food accounting and ant spawning.
"""

import math
import pytest
from ecoswarm.agents import create_ant
from ecoswarm.colony import Nest, create_nest, home_nest, step_nest, find_nearest_nest
from ecoswarm.config import create_small_test_config
from ecoswarm.simulation import Simulation


class TestStepNest:
    """Tests for step_nest()"""

    def test_spawn_consumes_food(self, ctx):
        """Two units of food buy one ant on the perimeter"""
        nest = Nest(x=100.0, y=100.0, food_stored=2)

        ant = step_nest(nest, [], ctx)

        assert ant is not None
        assert nest.food_stored == 0
        assert nest.spawn_cooldown == ctx.config.nest.spawn_interval
        assert nest.total_spawned == 1
        assert (ant.traits.nest_x, ant.traits.nest_y) == (100.0, 100.0)
        assert math.hypot(ant.x - 100.0, ant.y - 100.0) == pytest.approx(20.0)

    def test_not_enough_food(self, ctx):
        """One unit is not enough"""
        nest = Nest(x=0.0, y=0.0, food_stored=1)
        assert step_nest(nest, [], ctx) is None
        assert nest.food_stored == 1

    def test_cooldown(self, ctx):
        """Spawning waits for the cooldown"""
        nest = Nest(x=0.0, y=0.0, food_stored=4, spawn_cooldown=5)
        assert step_nest(nest, [], ctx) is None
        assert nest.spawn_cooldown == 4

    def test_spawn_when_cooldown_expires(self, ctx):
        """The tick the cooldown reaches zero can spawn"""
        nest = Nest(x=0.0, y=0.0, food_stored=2, spawn_cooldown=1)
        assert step_nest(nest, [], ctx) is not None

    def test_population_cap(self, ctx):
        """A full nest stops spawning"""
        nest = Nest(x=0.0, y=0.0, food_stored=10)
        ants = [create_ant(0.0, 0.0, 0.0, 0.0, ctx.config, ctx.rng)
                for _ in range(ctx.config.nest.max_ants)]
        assert step_nest(nest, ants, ctx) is None
        assert nest.food_stored == 10

    def test_only_own_ants_count(self, ctx):
        """Ants of other nests do not fill this one"""
        nest = Nest(x=0.0, y=0.0, food_stored=2)
        ants = [create_ant(0.0, 0.0, 500.0, 500.0, ctx.config, ctx.rng)
                for _ in range(ctx.config.nest.max_ants)]
        assert step_nest(nest, ants, ctx) is not None

    def test_occupant_count(self, ctx):
        """Occupancy counts the nest's ants resting inside"""
        nest = Nest(x=0.0, y=0.0)
        ants = [create_ant(0.0, 0.0, 0.0, 0.0, ctx.config, ctx.rng) for _ in range(3)]
        ants[0].traits.inside_nest = True
        ants[1].traits.inside_nest = True
        step_nest(nest, ants, ctx)
        assert nest.occupant_count == 2


class TestNestLookup:
    """Tests for nest registration and matching"""

    def test_create_nest(self, ctx):
        """New nests are registered on the context"""
        nest = create_nest(10.0, 20.0, ctx)
        assert ctx.nests == [nest]
        assert nest.body_size == ctx.config.nest.body_size

    def test_home_nest(self, ctx):
        """Ants deliver to the nest at their home coordinates"""
        near = create_nest(0.0, 0.0, ctx)
        create_nest(300.0, 0.0, ctx)
        ant = create_ant(250.0, 0.0, 0.0, 0.0, ctx.config, ctx.rng)
        assert home_nest(ctx.nests, ant, ctx) is near

    def test_nearest_nest_radius(self, ctx):
        """Lookup respects the search radius"""
        create_nest(0.0, 0.0, ctx)
        assert find_nearest_nest(ctx.nests, 150.0, 0.0, 100.0) is None
        assert find_nearest_nest(ctx.nests, 50.0, 0.0, 100.0) is ctx.nests[0]


class TestDeliveryToSpawn:
    """Delivery and spawning through a full simulation tick"""

    def test_delivery_completes_purchase(self):
        """A nest holding one unit spawns after the next delivery"""
        config = create_small_test_config()
        config.initial_population = {}
        config.world.max_food = 0
        config.world.food_spawn_rate = 0.0
        sim = Simulation(config, seed=1)

        nest = create_nest(100.0, 100.0, sim.ctx)
        nest.food_stored = 1
        ant = create_ant(105.0, 100.0, 100.0, 100.0, config, sim.ctx.rng)
        ant.traits.has_food = True
        sim.ctx.agents.append(sim.ctx.register(ant))

        stats = sim.step()

        assert nest.food_stored == 0
        assert stats["population"]["ant"] == 2
        assert stats["nest_spawns"] == 1
        assert ant.traits.inside_nest
