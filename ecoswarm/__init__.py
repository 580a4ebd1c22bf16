"""
EcoSwarm Simulator
==================
A multi-species ecosystem simulation built from local rules.

Species:
- Ants forage with Ant Colony Optimization pheromone trails and feed a nest
- Birds flock with Boids rules and perch when tired
- Anteaters pursue ants, throttled by a stamina model
- Snakes ambush birds from a wander/stop/ambush/strike/recover cycle

Population dynamics emerge from energy economics, a two-phase reproduction
lifecycle with bounded gene mutation, and death that feeds plants back into
the world.

Modules:
--------
- config: Configuration dataclasses, enums and the per-species table
- genetics: Bounded gene mutation
- agents: Common agent record and per-species payloads
- spatial: Nearest / within-radius queries and a bucket grid
- pheromone: Sparse pheromone field
- world: Food collaborator
- behaviors: Per-species step functions and the dispatch table
- lifecycle: Reproduction and death
- colony: Ant nests
- simulation: Tick driver
- metrics: Per-step metrics collection
- visualize: matplotlib plots
- main: CLI and simulation runner

Example Usage:
--------------
>>> from ecoswarm import create_small_test_config, Simulation
>>> sim = Simulation(create_small_test_config(), seed=42)
>>> stats = sim.run(100)
>>> sim.spawn_creature("snake", 200.0, 150.0)
"""

__version__ = "1.0.0"
__author__ = "EcoSwarm Research Team"

# Configuration
from .config import (
    SimulationConfig,
    WorldConfig,
    EnergyConfig,
    GeneticsConfig,
    PheromoneConfig,
    AntConfig,
    BirdConfig,
    AnteaterConfig,
    SnakeConfig,
    NestConfig,
    LifecycleConfig,
    SpeciesConfig,
    create_default_config,
    create_small_test_config,
    Species,
    AntState,
    BirdState,
    SnakeState,
    ReproductionPhase,
)

# Core model
from .genetics import Gene, GeneBounds, mutate
from .agents import Agent, ReproductionState, create_agent
from .pheromone import PheromoneField
from .world import Food, FoodSource, FoodWorld
from .context import SimulationContext, SpeciesLists, AgentOutcome
from .behaviors import BEHAVIORS, step_agent
from .colony import Nest, step_nest
from .simulation import Simulation, step_pheromone_field
from .metrics import MetricsCollector, StepMetrics

# Main runner utilities
from .main import (
    run_simulation,
    create_benchmark_config,
    print_config_summary,
)

__all__ = [
    # Version
    "__version__",

    # Configuration
    "SimulationConfig",
    "WorldConfig",
    "EnergyConfig",
    "GeneticsConfig",
    "PheromoneConfig",
    "AntConfig",
    "BirdConfig",
    "AnteaterConfig",
    "SnakeConfig",
    "NestConfig",
    "LifecycleConfig",
    "SpeciesConfig",
    "create_default_config",
    "create_small_test_config",
    "Species",
    "AntState",
    "BirdState",
    "SnakeState",
    "ReproductionPhase",

    # Model
    "Gene",
    "GeneBounds",
    "mutate",
    "Agent",
    "ReproductionState",
    "create_agent",
    "PheromoneField",
    "Food",
    "FoodSource",
    "FoodWorld",
    "SimulationContext",
    "SpeciesLists",
    "AgentOutcome",
    "BEHAVIORS",
    "step_agent",
    "Nest",
    "step_nest",
    "Simulation",
    "step_pheromone_field",
    "MetricsCollector",
    "StepMetrics",

    # Main
    "run_simulation",
    "create_benchmark_config",
    "print_config_summary",
]
