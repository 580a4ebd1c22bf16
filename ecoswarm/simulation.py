"""
EcoSwarm Simulation
===================
Tick driver tying together the food world, the pheromone field, the agent
behaviors, the lifecycle and the ant nests.

One step:
1. Evaporate the pheromone field and let the food world regrow
2. Snapshot live agents per species
3. Run every live agent in list order, applying its deposits and food
   deliveries immediately (later agents see earlier agents' updates)
4. Lifecycle: reproduction timers and births, death by exhaustion
5. Purge dead and non-finite agents, then add newborns
6. Nest updates (may spawn ants)

Collections are only changed in steps 5 and 6, never mid-iteration.
"""

import math
import logging
import numpy as np
from typing import Any, Dict, List, Optional, Union

from .agents import Agent, create_agent
from .behaviors import step_agent
from .colony import Nest, create_nest, find_nearest_nest, home_nest, step_nest
from .config import SimulationConfig, Species
from .context import SimulationContext, SpeciesLists
from .lifecycle import advance_reproduction, is_finite_agent, max_generation, resolve_death
from .pheromone import PheromoneField
from .world import FoodWorld

logger = logging.getLogger(__name__)


def step_pheromone_field(ctx: SimulationContext, decay_rate: Optional[float] = None):
    """Evaporate the shared pheromone field by one tick"""
    ctx.pheromone.evaporate(decay_rate)


class Simulation:
    """
    EcoSwarm ecosystem simulation.

    Owns the SimulationContext; everything a behavior needs is reached
    through it, so several simulations can run side by side.
    """

    def __init__(self, config: SimulationConfig, seed: Optional[int] = None):
        config.validate()
        self.config = config
        self.seed = seed
        self.ctx: Optional[SimulationContext] = None

        self.births = 0
        self.deaths = 0
        self.kills = 0
        self.nest_spawns = 0

        self.reset(seed)

    # ==================== Session ====================

    def reset(self, seed: Optional[int] = None) -> Dict[str, Any]:
        """Create a fresh context and place the initial population"""
        if seed is not None:
            self.seed = seed
        rng = np.random.default_rng(self.seed)

        world = FoodWorld(self.config.world, self.config.energy.food_energy, rng)
        world.init()

        self.ctx = SimulationContext(
            config=self.config,
            rng=rng,
            world=world,
            pheromone=PheromoneField(self.config.pheromone),
        )

        self.births = 0
        self.deaths = 0
        self.kills = 0
        self.nest_spawns = 0

        self._place_initial_population()

        logger.info(f"Simulation reset (scenario={self.config.scenario_name}, "
                    f"seed={self.seed}, agents={len(self.ctx.agents)})")
        return self.get_statistics()

    def _place_initial_population(self):
        cx = self.config.world.width / 2
        cy = self.config.world.height / 2

        for name, count in self.config.initial_population.items():
            species = Species(name)
            if count <= 0:
                continue
            if species == Species.ANT:
                # One colony at the center
                self.spawn_creature(species, cx, cy, count)
            else:
                for _ in range(count):
                    x = self.ctx.rng.uniform(0.0, self.config.world.width)
                    y = self.ctx.rng.uniform(0.0, self.config.world.height)
                    self.spawn_creature(species, x, y)

    # ==================== External spawn requests ====================

    def spawn_creature(self, species: Union[Species, str], x: float, y: float,
                       count: int = 1) -> List[Agent]:
        """
        Place creatures around a world position.

        Ants join the nearest nest within `merge_radius`; a new nest is
        founded at the requested position when there is none.

        Raises:
            ValueError: Unknown species name or non-finite position
        """
        species = Species(species)
        if not (math.isfinite(x) and math.isfinite(y)):
            raise ValueError(f"Cannot place {species.value} at non-finite position ({x}, {y})")
        scatter = self.config.lifecycle.placement_scatter
        placed = []

        for _ in range(count):
            sx = x + (self.ctx.rng.random() - 0.5) * scatter
            sy = y + (self.ctx.rng.random() - 0.5) * scatter

            nest_pos = None
            if species == Species.ANT:
                nest = self._nest_for_placement(sx, sy)
                nest_pos = (nest.x, nest.y)

            agent = create_agent(species, sx, sy, self.config, self.ctx.rng, nest=nest_pos)
            self._add_agent(agent)
            placed.append(agent)

        logger.debug(f"Placed {count} {species.value}(s) near ({x:.0f}, {y:.0f})")
        return placed

    def _nest_for_placement(self, x: float, y: float) -> Nest:
        nest = find_nearest_nest(self.ctx.nests, x, y, self.config.nest.merge_radius)
        if nest is None:
            nest = create_nest(x, y, self.ctx)
        return nest

    def _add_agent(self, agent: Agent):
        self.ctx.register(agent)
        self.ctx.agents.append(agent)

    # ==================== Tick ====================

    def step(self) -> Dict[str, Any]:
        """Advance the simulation by one tick"""
        ctx = self.ctx
        ctx.tick += 1

        step_pheromone_field(ctx)
        ctx.world.update()

        lists = SpeciesLists.gather(ctx.agents)

        for agent in ctx.agents:
            # Non-finite agents sit out the tick and are purged below
            if not agent.alive or not is_finite_agent(agent):
                continue
            outcome = step_agent(agent, ctx, lists)

            for x, y, amount in outcome.deposits:
                ctx.pheromone.deposit(x, y, amount)

            if outcome.delivered_food:
                nest = home_nest(ctx.nests, agent, ctx)
                if nest is not None:
                    nest.store_food(1)

            if outcome.caught is not None:
                self.kills += 1

        newborns = []
        for agent in ctx.agents:
            if not agent.alive or not is_finite_agent(agent):
                continue
            child = advance_reproduction(agent, ctx)
            if child is not None:
                newborns.append(child)
            if resolve_death(agent, ctx):
                self.deaths += 1

        self._purge()

        for child in newborns:
            self._add_agent(child)
        self.births += len(newborns)

        ants = [a for a in ctx.agents if a.species == Species.ANT]
        for nest in ctx.nests:
            ant = step_nest(nest, ants, ctx)
            if ant is not None:
                self._add_agent(ant)
                self.nest_spawns += 1

        return self.get_statistics()

    def _purge(self):
        """Drop dead agents and any agent whose state went non-finite"""
        kept = []
        for agent in self.ctx.agents:
            if not agent.alive:
                continue
            if not is_finite_agent(agent):
                logger.warning(f"Removing {agent.species.value} {agent.id} with non-finite state "
                               f"(x={agent.x}, y={agent.y}, energy={agent.energy})")
                continue
            kept.append(agent)
        self.ctx.agents = kept

    def run(self, n_steps: int) -> Dict[str, Any]:
        """Run several ticks and return the final statistics"""
        stats = self.get_statistics()
        for _ in range(n_steps):
            stats = self.step()
        return stats

    # ==================== Queries ====================

    @property
    def agents(self) -> List[Agent]:
        return self.ctx.agents

    @property
    def nests(self) -> List[Nest]:
        return self.ctx.nests

    @property
    def tick(self) -> int:
        return self.ctx.tick

    def population_counts(self) -> Dict[str, int]:
        counts = {species.value: 0 for species in Species}
        for agent in self.ctx.agents:
            if agent.alive:
                counts[agent.species.value] += 1
        return counts

    def get_statistics(self) -> Dict[str, Any]:
        """Snapshot of the current tick"""
        ctx = self.ctx
        return {
            "tick": ctx.tick,
            "population": self.population_counts(),
            "food": len(ctx.world),
            "nests": len(ctx.nests),
            "nest_food": sum(n.food_stored for n in ctx.nests),
            "max_generation": max_generation(ctx.agents),
            "births": self.births,
            "deaths": self.deaths,
            "kills": self.kills,
            "nest_spawns": self.nest_spawns,
            "pheromone": ctx.pheromone.get_statistics(),
        }
