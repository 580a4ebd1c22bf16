"""
Pytest configuration and shared fixtures for EcoSwarm tests.
"""

import pytest
import numpy as np
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests"""
    return np.random.default_rng(42)


@pytest.fixture
def simulation_config():
    """Default simulation configuration"""
    from ecoswarm.config import SimulationConfig
    return SimulationConfig()


@pytest.fixture
def small_config():
    """Small world configuration for fast tests"""
    from ecoswarm.config import create_small_test_config
    return create_small_test_config()


@pytest.fixture
def pheromone_config():
    """Default pheromone configuration"""
    from ecoswarm.config import PheromoneConfig
    return PheromoneConfig()


@pytest.fixture
def pheromone_field(pheromone_config):
    """Empty pheromone field"""
    from ecoswarm.pheromone import PheromoneField
    return PheromoneField(pheromone_config)


@pytest.fixture
def empty_world(simulation_config, rng):
    """Food world with no plants placed"""
    from ecoswarm.world import FoodWorld
    return FoodWorld(simulation_config.world, simulation_config.energy.food_energy, rng)


@pytest.fixture
def ctx(simulation_config, rng, empty_world, pheromone_field):
    """Simulation context over an empty world"""
    from ecoswarm.context import SimulationContext
    return SimulationContext(
        config=simulation_config,
        rng=rng,
        world=empty_world,
        pheromone=pheromone_field,
    )


@pytest.fixture
def make_agent(ctx):
    """Factory placing a registered agent of any species into the context"""
    from ecoswarm.agents import create_agent
    from ecoswarm.config import Species

    def _make(species, x=0.0, y=0.0, nest=(0.0, 0.0), **overrides):
        species = Species(species)
        agent = create_agent(species, x, y, ctx.config, ctx.rng,
                             nest=nest if species == Species.ANT else None)
        for name, value in overrides.items():
            setattr(agent, name, value)
        ctx.register(agent)
        ctx.agents.append(agent)
        return agent

    return _make


@pytest.fixture
def lists(ctx):
    """Callable gathering the context's live agents into species lists"""
    from ecoswarm.context import SpeciesLists

    def _gather():
        return SpeciesLists.gather(ctx.agents)

    return _gather
