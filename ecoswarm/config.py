"""
EcoSwarm Configuration
======================
Static configuration for the ecosystem simulation.

Every tunable of the simulation lives here as a dataclass section:
world and food, energy economics, genetics, the pheromone field, per-species
behavior constants and the per-species constant table (base gene,
reproduction thresholds/costs, cooldowns, pregnancy durations).

The configuration is loaded once per simulation and never mutated by the
simulation itself.
"""

from dataclasses import dataclass, field
from typing import Dict, Tuple
from enum import Enum


class Species(Enum):
    """Creature species"""
    ANT = "ant"
    BIRD = "bird"
    ANTEATER = "anteater"
    SNAKE = "snake"


class AntState(Enum):
    """Ant behavioral states"""
    FORAGING = "foraging"
    RETURNING = "returning"
    FLEEING = "fleeing"
    RESTING = "resting"


class BirdState(Enum):
    """Bird flight state machine"""
    FLYING = "flying"
    PERCHING = "perching"
    TAKING_OFF = "taking_off"


class SnakeState(Enum):
    """Snake ambush state machine"""
    WANDER = "wander"
    STOPPING = "stopping"
    AMBUSH = "ambush"
    STRIKE = "strike"
    RECOVER = "recover"


class ReproductionPhase(Enum):
    """Reproduction lifecycle phases"""
    IDLE = "idle"
    PREGNANT = "pregnant"


@dataclass
class WorldConfig:
    """World extent and food placement"""
    width: float = 2000.0
    height: float = 1500.0

    # Food placement policy (rate-limited random placement)
    food_spawn_rate: float = 0.5  # Probability of one new food item per tick
    max_food: int = 120
    initial_food_fraction: float = 0.5  # Fraction of max_food placed at reset
    central_food_bias: float = 0.7  # Share of food concentrated near the center

    # Bucket size for the food spatial hash
    food_bucket_size: float = 50.0


@dataclass
class EnergyConfig:
    """Energy economics shared by all species"""
    initial_energy: float = 200.0
    move_cost: float = 0.03  # Base cost per tick, scaled per species
    food_energy: float = 100.0

    # Reproduction (scaled per species by SpeciesConfig multipliers)
    reproduction_threshold: float = 180.0
    reproduction_cost: float = 50.0
    offspring_energy_fraction: float = 0.8  # Offspring energy = cost * fraction


@dataclass
class GeneticsConfig:
    """Mutation operator and gene bounds"""
    mutation_rate: float = 0.2  # Per-field mutation probability
    mutation_amount: float = 0.3  # Max relative perturbation

    speed_bounds: Tuple[float, float] = (0.5, 15.0)
    perception_bounds: Tuple[float, float] = (10.0, 200.0)
    size_bounds: Tuple[float, float] = (0.3, 10.0)


@dataclass
class PheromoneConfig:
    """Sparse pheromone field configuration"""
    cell_size: float = 10.0  # World units per grid cell
    deposit_amount: float = 10.0
    evaporation_rate: float = 0.995  # Retention factor applied each tick
    max_strength: float = 255.0
    epsilon: float = 0.1  # Cells below this are dropped

    # Probabilistic direction selection
    forward_bias: float = 1.0  # Extra weight for cells ahead of the heading
    sample_radius: int = 2


@dataclass
class AntConfig:
    """Ant foraging behavior constants"""
    flee_ticks: int = 30
    flee_noise: float = 0.3
    rest_ticks: int = 60
    nest_exit_radius: float = 20.0

    low_energy_fraction: float = 0.3  # Return home below this share of initial energy
    nest_arrival_radius: float = 15.0
    home_turn_rate: float = 0.2
    food_turn_rate: float = 0.2

    # Pheromone handling
    pheromone_follow_weight: float = 0.5
    pheromone_buffer: float = 80.0  # No trail following this close to the nest
    deposit_buffer: float = 30.0  # No deposits this close to the nest
    deposit_multiplier: float = 2.0

    pickup_margin: float = 5.0  # Pickup radius = body size + margin
    wander_turn: float = 0.5

    # Crowd separation
    separation_radius_factor: float = 2.5  # x body size
    separation_strength: float = 5.0
    separation_weight: float = 3.0
    separation_overlap_push: float = 10.0
    crowd_jitter_threshold: int = 2
    crowd_jitter_per_neighbor: float = 0.2
    crowd_jitter_max: float = 2.0

    energy_cost: Tuple[float, float, float] = (1.0, 0.005, 0.01)  # base, speed², size


@dataclass
class BirdConfig:
    """Boids flocking and perching constants"""
    max_force: float = 0.1
    separation_weight: float = 1.5
    alignment_weight: float = 1.0
    cohesion_weight: float = 1.0
    separation_radius_factor: float = 0.4  # x perception

    flee_weight: float = 3.0
    flee_force_factor: float = 3.0  # Flee steer cap = max_force * factor
    seek_weight: float = 0.8
    seek_force_factor: float = 2.0
    hunger_energy: float = 50.0  # Seek steering doubled below this
    hunger_factor: float = 2.0
    ant_prey_fraction: float = 0.3  # Ants are prey only below this share of initial energy
    ant_energy_fraction: float = 0.02  # Share of food_energy gained from an ant

    min_speed_fraction: float = 0.3
    eat_margin: float = 3.0

    # Fatigue and perching
    fatigue_gain: float = 0.1
    fatigue_recovery: float = 0.5
    max_fatigue: float = 100.0
    landing_fatigue: float = 50.0
    landing_divisor: float = 5000.0
    perch_energy_gain: float = 0.1
    perch_energy_cap_factor: float = 1.5
    perch_ticks_range: Tuple[int, int] = (100, 300)
    rested_fatigue: float = 10.0
    rested_takeoff_chance: float = 0.01
    hungry_takeoff_energy: float = 50.0
    hungry_takeoff_chance: float = 0.05
    takeoff_ticks: int = 20
    takeoff_speed_fraction: float = 0.5

    # Ambushing snakes are only seen inside this share of perception
    ambush_visibility: float = 0.3

    energy_cost: Tuple[float, float, float] = (1.0, 0.002, 0.01)


@dataclass
class AnteaterConfig:
    """Continuous-pursuit predator constants"""
    initial_energy_factor: float = 1.5
    hunt_turn_rate: float = 0.1
    catch_margin: float = 5.0
    energy_gain: float = 0.4  # Share of food_energy per catch
    satiated_cooldown: int = 120
    hungry_cooldown: int = 10
    satiety_factor: float = 1.5  # Satiated above initial_energy * factor

    # Stamina sampling
    stamina_interval: int = 60
    stamina_window: int = 5
    high_drain: float = 3.0
    low_drain: float = 1.0
    fatigue_step_down: float = 0.1
    fatigue_step_up: float = 0.05
    min_fatigue_factor: float = 0.5

    # Wander
    wander_jitter: float = 0.2
    wander_limit: float = 1.0
    wander_decay: float = 0.98
    wander_gain: float = 0.05
    wander_jump_chance: float = 0.005
    wander_jump: float = 2.0

    energy_cost: Tuple[float, float, float] = (2.0, 0.005, 0.02)


@dataclass
class SnakeConfig:
    """Ambush predator constants"""
    initial_energy_factor: float = 1.5
    wander_speed: float = 0.4
    stop_ticks: int = 60
    ambush_ticks_range: Tuple[int, int] = (200, 500)
    wander_ticks_range: Tuple[int, int] = (100, 300)
    strike_range: float = 150.0
    strike_ticks: int = 90
    strike_speed: float = 3.5
    strike_turn_rate: float = 0.3
    recover_ticks: int = 120
    lost_target_recover_ticks: int = 60
    recover_speed: float = 0.3
    post_recover_wander_ticks: int = 100

    catch_margin: float = 8.0
    energy_gain: float = 0.5
    satiated_cooldown: int = 120
    hungry_cooldown: int = 10
    satiety_factor: float = 1.5

    # Weave
    wander_jitter: float = 0.2
    wander_limit: float = 1.0
    wander_gain: float = 0.05
    weave_rate: float = 0.08  # Radians of weave phase per tick
    weave_amplitude: float = 0.2
    weave_gain: float = 0.1

    # Body chain
    n_segments: int = 24
    segment_spacing_factor: float = 0.4  # x body size

    energy_cost: Tuple[float, float, float] = (1.5, 0.004, 0.015)


@dataclass
class NestConfig:
    """Ant nest spawn control"""
    body_size: float = 15.0
    max_ants: int = 50
    spawn_interval: int = 60
    spawn_food_cost: int = 2
    merge_radius: float = 100.0  # Placed ants join a nest this close
    delivery_match_radius: float = 20.0


@dataclass
class LifecycleConfig:
    """Death and nutrient cycle"""
    corpse_food_chance: float = 0.8
    corpse_food_range: Tuple[int, int] = (1, 3)
    corpse_scatter: float = 20.0
    placement_scatter: float = 30.0  # Spread of externally placed creatures


@dataclass
class SpeciesConfig:
    """
    Per-species constant table entry.

    Reproduction values are multipliers over EnergyConfig so that the whole
    table scales with the shared economy.
    """
    name: str
    body_size: float
    size_divisor: float
    base_gene: Tuple[float, float, float]  # speed, perception, size
    prey: Tuple[str, ...] = ()
    predators: Tuple[str, ...] = ()

    can_self_reproduce: bool = True
    threshold_multiplier: float = 1.0
    cost_multiplier: float = 1.0
    reproduction_cooldown: int = 600
    pregnancy_ticks: int = 300
    spawn_offset: float = 25.0

    fitness_weights: Tuple[float, float, float] = (0.33, 0.33, 0.34)


def default_species_table() -> Dict[Species, SpeciesConfig]:
    """Build the default per-species constant table"""
    return {
        Species.ANT: SpeciesConfig(
            name="ant", body_size=3.0, size_divisor=1.0,
            base_gene=(1.8, 60.0, 1.0),
            prey=(), predators=("anteater", "bird"),
            can_self_reproduce=False,
            threshold_multiplier=1.0, cost_multiplier=1.0,
            reproduction_cooldown=300, pregnancy_ticks=180, spawn_offset=20.0,
            fitness_weights=(0.3, 0.4, 0.3),
        ),
        Species.BIRD: SpeciesConfig(
            name="bird", body_size=8.0, size_divisor=3.0,
            base_gene=(5.0, 60.0, 3.0),
            prey=("ant", "food"), predators=("snake",),
            threshold_multiplier=1.2, cost_multiplier=1.2,
            reproduction_cooldown=600, pregnancy_ticks=360, spawn_offset=30.0,
            fitness_weights=(0.4, 0.3, 0.3),
        ),
        Species.ANTEATER: SpeciesConfig(
            name="anteater", body_size=20.0, size_divisor=8.0,
            base_gene=(3.0, 80.0, 8.0),
            prey=("ant",), predators=(),
            threshold_multiplier=1.8, cost_multiplier=2.0,
            reproduction_cooldown=1200, pregnancy_ticks=600, spawn_offset=40.0,
            fitness_weights=(0.2, 0.5, 0.3),
        ),
        Species.SNAKE: SpeciesConfig(
            name="snake", body_size=18.0, size_divisor=5.0,
            base_gene=(4.0, 80.0, 5.0),
            prey=("bird",), predators=(),
            threshold_multiplier=1.8, cost_multiplier=2.0,
            reproduction_cooldown=1200, pregnancy_ticks=480, spawn_offset=50.0,
            fitness_weights=(0.3, 0.4, 0.3),
        ),
    }


@dataclass
class SimulationConfig:
    """Master configuration combining all subsystems"""
    world: WorldConfig = field(default_factory=WorldConfig)
    energy: EnergyConfig = field(default_factory=EnergyConfig)
    genetics: GeneticsConfig = field(default_factory=GeneticsConfig)
    pheromone: PheromoneConfig = field(default_factory=PheromoneConfig)

    # Behavior
    ant: AntConfig = field(default_factory=AntConfig)
    bird: BirdConfig = field(default_factory=BirdConfig)
    anteater: AnteaterConfig = field(default_factory=AnteaterConfig)
    snake: SnakeConfig = field(default_factory=SnakeConfig)

    # Colony and lifecycle
    nest: NestConfig = field(default_factory=NestConfig)
    lifecycle: LifecycleConfig = field(default_factory=LifecycleConfig)

    # Per-species constant table
    species: Dict[Species, SpeciesConfig] = field(default_factory=default_species_table)

    # Initial population placed at reset (species name -> count)
    initial_population: Dict[str, int] = field(default_factory=lambda: {"ant": 5})

    scenario_name: str = "default"

    def validate(self):
        """Validate configuration consistency"""
        assert self.world.width > 0 and self.world.height > 0, "World must have positive extent"
        assert 0 <= self.world.food_spawn_rate <= 1, "Food spawn rate must be in [0, 1]"
        assert 0 < self.pheromone.evaporation_rate < 1, "Evaporation rate must be in (0, 1)"
        assert self.pheromone.cell_size > 0, "Pheromone cell size must be positive"
        assert self.pheromone.epsilon < self.pheromone.max_strength, "Epsilon must be below max strength"
        assert 0 <= self.genetics.mutation_rate <= 1, "Mutation rate must be in [0, 1]"
        assert self.energy.reproduction_cost > 0, "Reproduction cost must be positive"

        for bounds in [self.genetics.speed_bounds,
                       self.genetics.perception_bounds,
                       self.genetics.size_bounds]:
            assert bounds[0] <= bounds[1], f"Invalid bounds: {bounds}"

        for species in Species:
            assert species in self.species, f"Missing species entry: {species.value}"
            entry = self.species[species]
            threshold = self.energy.reproduction_threshold * entry.threshold_multiplier
            cost = self.energy.reproduction_cost * entry.cost_multiplier
            # Half the cost is debited when a pregnancy starts
            assert threshold >= cost * 0.5, f"Threshold below pregnancy debit for {species.value}"

        for name in self.initial_population:
            Species(name)

        return True

    def reproduction_threshold(self, species: Species) -> float:
        return self.energy.reproduction_threshold * self.species[species].threshold_multiplier

    def reproduction_cost(self, species: Species) -> float:
        return self.energy.reproduction_cost * self.species[species].cost_multiplier


def create_default_config() -> SimulationConfig:
    """Create default configuration"""
    return SimulationConfig()


def create_small_test_config() -> SimulationConfig:
    """Create small configuration for testing"""
    config = SimulationConfig()
    config.world.width = 400.0
    config.world.height = 300.0
    config.world.max_food = 20
    config.initial_population = {"ant": 5, "bird": 3}
    config.scenario_name = "small"
    return config
