"""
EcoSwarm Agents
===============
Common agent record shared by every species, plus per-species payloads.

Species behavior is not attached to the record: an Agent is plain state and
`ecoswarm.behaviors.BEHAVIORS` dispatches on `Agent.species`.
"""

import math
import numpy as np
from typing import List, Optional, Tuple, Union
from dataclasses import dataclass, field

from .config import (
    SimulationConfig, Species, BirdState, SnakeState, AntState, ReproductionPhase
)
from .genetics import Gene, default_gene


@dataclass
class ReproductionState:
    """Explicit reproduction state: Idle or Pregnant{ticks_remaining}"""
    phase: ReproductionPhase = ReproductionPhase.IDLE
    ticks_remaining: int = 0
    cooldown: int = 0

    @property
    def pregnant(self) -> bool:
        return self.phase == ReproductionPhase.PREGNANT


@dataclass
class AntTraits:
    """Ant-specific state"""
    nest_x: float
    nest_y: float
    has_food: bool = False
    flee_timer: int = 0
    inside_nest: bool = False
    stay_timer: int = 0
    state: AntState = AntState.FORAGING


@dataclass
class BirdTraits:
    """Bird-specific state"""
    state: BirdState = BirdState.FLYING
    state_timer: int = 0
    fatigue: float = 0.0


@dataclass
class AnteaterTraits:
    """Anteater stamina and wander state"""
    hunt_cooldown: int = 0
    energy_history: List[float] = field(default_factory=list)
    history_timer: int = 0
    energy_drop_rate: float = 0.0
    fatigue_factor: float = 1.0
    is_hunting: bool = False
    wander_angle: float = 0.0


@dataclass
class SnakeTraits:
    """Snake state machine and cosmetic body chain"""
    state: SnakeState = SnakeState.WANDER
    state_timer: int = 0
    strike_target: Optional['Agent'] = None
    hunt_cooldown: int = 0
    wander_angle: float = 0.0
    weave_phase: float = 0.0
    segments: List[Tuple[float, float]] = field(default_factory=list)
    segment_spacing: float = 0.0


Traits = Union[AntTraits, BirdTraits, AnteaterTraits, SnakeTraits]


@dataclass(eq=False)
class Agent:
    """
    Common agent record.

    Identity semantics (eq=False): agents are compared by reference so they
    can be removed from lists and used as strike targets safely.
    """
    species: Species
    x: float
    y: float
    vx: float
    vy: float
    energy: float
    gene: Gene
    traits: Traits
    body_size: float
    generation: int = 0
    alive: bool = True
    reproduction: ReproductionState = field(default_factory=ReproductionState)
    id: int = -1

    @property
    def inside_nest(self) -> bool:
        return isinstance(self.traits, AntTraits) and self.traits.inside_nest

    @property
    def queryable(self) -> bool:
        """Visible to spatial queries: alive and not hidden inside a nest"""
        return self.alive and not self.inside_nest

    @property
    def position_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    def distance_to(self, other) -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def die(self):
        self.alive = False


def body_size_for(species: Species, gene: Gene, config: SimulationConfig) -> float:
    """Rendered/contact body size: species size scaled by the size gene"""
    entry = config.species[species]
    return entry.body_size * gene.size / entry.size_divisor


def _random_heading(rng: np.random.Generator) -> Tuple[float, float]:
    angle = rng.uniform(0.0, 2.0 * math.pi)
    return math.cos(angle), math.sin(angle)


def create_ant(x: float, y: float, nest_x: float, nest_y: float,
               config: SimulationConfig, rng: np.random.Generator,
               gene: Optional[Gene] = None) -> Agent:
    gene = gene or default_gene(Species.ANT, config)
    vx, vy = _random_heading(rng)
    return Agent(
        species=Species.ANT, x=x, y=y, vx=vx, vy=vy,
        energy=config.energy.initial_energy,
        gene=gene,
        traits=AntTraits(nest_x=nest_x, nest_y=nest_y),
        body_size=body_size_for(Species.ANT, gene, config),
    )


def create_bird(x: float, y: float, config: SimulationConfig,
                rng: np.random.Generator, gene: Optional[Gene] = None) -> Agent:
    gene = gene or default_gene(Species.BIRD, config)
    vx, vy = _random_heading(rng)
    return Agent(
        species=Species.BIRD, x=x, y=y,
        vx=vx * gene.speed, vy=vy * gene.speed,
        energy=config.energy.initial_energy,
        gene=gene,
        traits=BirdTraits(),
        body_size=body_size_for(Species.BIRD, gene, config),
    )


def create_anteater(x: float, y: float, config: SimulationConfig,
                    rng: np.random.Generator, gene: Optional[Gene] = None) -> Agent:
    gene = gene or default_gene(Species.ANTEATER, config)
    vx, vy = _random_heading(rng)
    return Agent(
        species=Species.ANTEATER, x=x, y=y, vx=vx, vy=vy,
        energy=config.energy.initial_energy * config.anteater.initial_energy_factor,
        gene=gene,
        traits=AnteaterTraits(),
        body_size=body_size_for(Species.ANTEATER, gene, config),
    )


def create_snake(x: float, y: float, config: SimulationConfig,
                 rng: np.random.Generator, gene: Optional[Gene] = None) -> Agent:
    gene = gene or default_gene(Species.SNAKE, config)
    vx, vy = _random_heading(rng)
    size = body_size_for(Species.SNAKE, gene, config)
    spacing = size * config.snake.segment_spacing_factor

    # Body laid out straight behind the head
    segments = [
        (x - i * spacing * vx, y - i * spacing * vy)
        for i in range(config.snake.n_segments)
    ]

    return Agent(
        species=Species.SNAKE, x=x, y=y, vx=vx, vy=vy,
        energy=config.energy.initial_energy * config.snake.initial_energy_factor,
        gene=gene,
        traits=SnakeTraits(segments=segments, segment_spacing=spacing),
        body_size=size,
    )


def create_agent(species: Species, x: float, y: float,
                 config: SimulationConfig, rng: np.random.Generator,
                 gene: Optional[Gene] = None,
                 nest: Optional[Tuple[float, float]] = None) -> Agent:
    """
    Create an agent of any species.

    Ants need the coordinates of the nest they belong to.
    """
    if species == Species.ANT:
        if nest is None:
            raise ValueError("Ants must be created with a nest position")
        return create_ant(x, y, nest[0], nest[1], config, rng, gene)
    if species == Species.BIRD:
        return create_bird(x, y, config, rng, gene)
    if species == Species.ANTEATER:
        return create_anteater(x, y, config, rng, gene)
    return create_snake(x, y, config, rng, gene)
