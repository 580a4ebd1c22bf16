"""
EcoSwarm Simulation Context
===========================
Explicit simulation state passed to every step function.

Nothing in the behavior core reads module-level state: the food world, the
pheromone field, the random generator and the agent/nest collections all
hang off a SimulationContext created at session start.
"""

import numpy as np
from typing import List, Optional, Tuple, TYPE_CHECKING
from dataclasses import dataclass, field

from .config import SimulationConfig, Species
from .agents import Agent
from .pheromone import PheromoneField
from .world import FoodSource

if TYPE_CHECKING:
    from .colony import Nest


@dataclass
class SpeciesLists:
    """Per-tick live agent lists handed to behaviors"""
    ants: List[Agent] = field(default_factory=list)
    birds: List[Agent] = field(default_factory=list)
    anteaters: List[Agent] = field(default_factory=list)
    snakes: List[Agent] = field(default_factory=list)

    @property
    def predators(self) -> List[Agent]:
        """Anteaters then snakes"""
        return self.anteaters + self.snakes

    @classmethod
    def gather(cls, agents: List[Agent]) -> 'SpeciesLists':
        lists = cls()
        by_species = {
            Species.ANT: lists.ants,
            Species.BIRD: lists.birds,
            Species.ANTEATER: lists.anteaters,
            Species.SNAKE: lists.snakes,
        }
        for agent in agents:
            if agent.alive:
                by_species[agent.species].append(agent)
        return lists


@dataclass
class AgentOutcome:
    """
    Side effects of one agent's behavior step.

    Pheromone deposits and nest deliveries are applied by the caller right
    after the agent runs, so the order of effects matches sequential
    processing.
    """
    deposits: List[Tuple[float, float, float]] = field(default_factory=list)
    delivered_food: bool = False
    caught: Optional[Agent] = None


@dataclass
class SimulationContext:
    """Everything a tick needs, created once per session"""
    config: SimulationConfig
    rng: np.random.Generator
    world: FoodSource
    pheromone: PheromoneField
    agents: List[Agent] = field(default_factory=list)
    nests: List['Nest'] = field(default_factory=list)
    tick: int = 0
    next_agent_id: int = 0

    def register(self, agent: Agent) -> Agent:
        """Assign an id to a new agent"""
        agent.id = self.next_agent_id
        self.next_agent_id += 1
        return agent
