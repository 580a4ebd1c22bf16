"""
Unit tests for ecoswarm/behaviors/ant.py

Tests pheromone-guided foraging, fleeing and nest arrival.
"""

import math
import pytest
from ecoswarm.behaviors.ant import step_ant, separate, check_nest_arrival
from ecoswarm.config import AntState


class TestNestArrival:
    """Tests for returning home with food"""

    def test_delivery(self, ctx, make_agent, lists):
        """A carrying ant within 15 units of the nest delivers its food"""
        ant = make_agent("ant", x=10.0, y=0.0, nest=(0.0, 0.0))
        ant.traits.has_food = True
        energy_before = ant.energy

        outcome = step_ant(ant, ctx, lists())

        assert outcome.delivered_food
        assert not ant.traits.has_food
        assert ant.traits.inside_nest
        assert ant.traits.state == AntState.RESTING
        assert ant.traits.stay_timer == ctx.config.ant.rest_ticks
        assert ant.energy > energy_before

    def test_no_delivery_without_food(self, ctx, make_agent):
        """Low-energy ants enter the nest but deliver nothing"""
        ant = make_agent("ant", x=5.0, y=0.0, nest=(0.0, 0.0))
        assert not check_nest_arrival(ant, ctx)
        assert ant.traits.inside_nest

    def test_low_energy_returns_home(self, ctx, make_agent, lists):
        """Energy below 30% of initial sends the ant home"""
        ant = make_agent("ant", x=300.0, y=0.0, nest=(0.0, 0.0), energy=20.0)
        step_ant(ant, ctx, lists())
        assert ant.traits.state == AntState.RETURNING

    def test_metabolism_below_threshold_enters_nest(self, ctx, make_agent, lists):
        """Dropping under the low-energy line this tick still lets the ant in"""
        threshold = ctx.config.energy.initial_energy * ctx.config.ant.low_energy_fraction
        ant = make_agent("ant", x=5.0, y=0.0, nest=(0.0, 0.0), energy=threshold + 1e-6)

        outcome = step_ant(ant, ctx, lists())

        assert ant.energy < threshold
        assert not outcome.delivered_food
        assert ant.traits.inside_nest
        assert ant.traits.state == AntState.RESTING


class TestNest:
    """Tests for resting inside the nest"""

    def test_rest_then_leave(self, ctx, make_agent, lists):
        """Stay timer counts down, then the ant exits on the perimeter"""
        ant = make_agent("ant", x=0.0, y=0.0, nest=(0.0, 0.0))
        ant.traits.inside_nest = True
        ant.traits.stay_timer = 1

        step_ant(ant, ctx, lists())
        assert ant.traits.inside_nest
        assert ant.traits.stay_timer == 0

        step_ant(ant, ctx, lists())
        assert not ant.traits.inside_nest
        assert math.hypot(ant.x, ant.y) == pytest.approx(ctx.config.ant.nest_exit_radius)
        # Heading points outward
        assert ant.vx * ant.x + ant.vy * ant.y > 0

    def test_resting_ant_hidden(self, make_agent):
        """Ants inside the nest are not queryable"""
        ant = make_agent("ant")
        ant.traits.inside_nest = True
        assert not ant.queryable


class TestFlee:
    """Tests for predator avoidance"""

    def test_flee_from_anteater(self, ctx, make_agent, lists):
        """A predator in perception triggers a latched flee"""
        ant = make_agent("ant", x=0.0, y=0.0, nest=(1000.0, 1000.0))
        make_agent("anteater", x=30.0, y=0.0)

        step_ant(ant, ctx, lists())

        assert ant.traits.state == AntState.FLEEING
        assert ant.traits.flee_timer == ctx.config.ant.flee_ticks - 1
        assert ant.vx < 0

    def test_snake_is_not_a_threat(self, ctx, make_agent, lists):
        """Snakes do not hunt ants"""
        ant = make_agent("ant", x=0.0, y=0.0, nest=(1000.0, 1000.0))
        make_agent("snake", x=20.0, y=0.0)
        step_ant(ant, ctx, lists())
        assert ant.traits.state != AntState.FLEEING


class TestForaging:
    """Tests for pickup and trail laying"""

    def test_pickup_reverses(self, ctx, make_agent, lists):
        """Food in reach is picked up and the ant turns around"""
        ant = make_agent("ant", x=0.0, y=0.0, nest=(500.0, 500.0))
        food = ctx.world.spawn_food(0.0, 0.0)

        step_ant(ant, ctx, lists())

        assert ant.traits.has_food
        assert food not in ctx.world.foods

    def test_deposit_only_with_food(self, ctx, make_agent, lists):
        """Trail is laid only while carrying food, clear of the nest"""
        carrier = make_agent("ant", x=100.0, y=0.0, nest=(0.0, 0.0))
        carrier.traits.has_food = True
        outcome = step_ant(carrier, ctx, lists())
        assert len(outcome.deposits) == 1
        x, y, amount = outcome.deposits[0]
        assert amount == pytest.approx(
            ctx.config.pheromone.deposit_amount * ctx.config.ant.deposit_multiplier)

        searcher = make_agent("ant", x=-100.0, y=0.0, nest=(0.0, 0.0))
        assert step_ant(searcher, ctx, lists()).deposits == []

    def test_no_deposit_near_nest(self, ctx, make_agent, lists):
        """No deposits inside the nest buffer"""
        ant = make_agent("ant", x=20.0, y=0.0, nest=(0.0, 0.0))
        ant.traits.has_food = True
        assert step_ant(ant, ctx, lists()).deposits == []

    def test_energy_non_increasing_while_searching(self, ctx, make_agent, lists):
        """Metabolism only drains energy when nothing is eaten"""
        ant = make_agent("ant", x=300.0, y=300.0, nest=(0.0, 0.0))
        previous = ant.energy
        for _ in range(50):
            step_ant(ant, ctx, lists())
            assert ant.energy < previous
            previous = ant.energy

    def test_heading_stays_unit(self, ctx, make_agent, lists):
        """Foraging keeps a unit heading"""
        ant = make_agent("ant", x=300.0, y=300.0, nest=(0.0, 0.0))
        ctx.pheromone.deposit(320.0, 300.0, 100.0)
        for _ in range(20):
            step_ant(ant, ctx, lists())
            assert math.hypot(ant.vx, ant.vy) == pytest.approx(1.0)


class TestSeparation:
    """Tests for crowd separation"""

    def test_counts_close_neighbors(self, ctx, make_agent):
        """Only ants within the separation radius count"""
        ant = make_agent("ant", x=0.0, y=0.0)
        near = make_agent("ant", x=2.0, y=0.0)
        far = make_agent("ant", x=50.0, y=0.0)
        assert separate(ant, [ant, near, far], ctx) == 1
        assert ant.vx < 0

    def test_coincident_pair(self, ctx, make_agent):
        """Overlapping ants still get a usable heading"""
        ant = make_agent("ant", x=0.0, y=0.0)
        other = make_agent("ant", x=0.0, y=0.0)
        assert separate(ant, [other], ctx) == 1
        assert math.hypot(ant.vx, ant.vy) == pytest.approx(1.0)
