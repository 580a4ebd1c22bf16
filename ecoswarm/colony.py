"""
EcoSwarm Colony
===============
Ant nests: food store, occupancy and ant spawning.

Ants belong to a nest by coordinates (AntTraits.nest_x / nest_y). Returning
foragers deliver one unit of food each; every `spawn_food_cost` units buy a
new ant, rate-limited by a cooldown and capped by the nest population.
"""

import math
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .agents import Agent, create_ant
from .config import Species
from .context import SimulationContext
from .spatial import nearest

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Nest:
    """Ant nest"""
    x: float
    y: float
    body_size: float = 15.0
    food_stored: int = 0
    occupant_count: int = 0  # Ants currently resting inside
    spawn_cooldown: int = 0
    total_spawned: int = 0

    def store_food(self, amount: int = 1):
        self.food_stored += amount

    def owns(self, ant: Agent) -> bool:
        return (ant.species == Species.ANT
                and ant.traits.nest_x == self.x
                and ant.traits.nest_y == self.y)


def owned_ants(nest: Nest, ants: Iterable[Agent]) -> List[Agent]:
    """Live ants whose home is this nest"""
    return [a for a in ants if a.alive and nest.owns(a)]


def can_spawn(nest: Nest, ants: Iterable[Agent], ctx: SimulationContext) -> bool:
    cfg = ctx.config.nest
    return (nest.food_stored >= cfg.spawn_food_cost
            and nest.spawn_cooldown == 0
            and len(owned_ants(nest, ants)) < cfg.max_ants)


def spawn_ant(nest: Nest, ctx: SimulationContext) -> Agent:
    """Pay for and place a new ant on the nest perimeter"""
    cfg = ctx.config.nest
    nest.food_stored -= cfg.spawn_food_cost
    nest.spawn_cooldown = cfg.spawn_interval
    nest.total_spawned += 1

    angle = ctx.rng.uniform(0.0, 2.0 * math.pi)
    distance = nest.body_size + 5
    ant = create_ant(
        nest.x + math.cos(angle) * distance,
        nest.y + math.sin(angle) * distance,
        nest.x, nest.y,
        ctx.config, ctx.rng,
    )
    logger.debug(f"Nest at ({nest.x:.0f}, {nest.y:.0f}) spawned an ant "
                 f"({nest.food_stored} food left)")
    return ant


def step_nest(nest: Nest, ants: List[Agent], ctx: SimulationContext) -> Optional[Agent]:
    """
    Advance a nest by one tick.

    Args:
        nest: Nest to update
        ants: All ants (ownership is resolved by nest coordinates)
        ctx: Simulation context

    Returns:
        A newborn ant, or None
    """
    nest.occupant_count = sum(1 for a in owned_ants(nest, ants) if a.inside_nest)

    if nest.spawn_cooldown > 0:
        nest.spawn_cooldown -= 1

    if can_spawn(nest, ants, ctx):
        return spawn_ant(nest, ctx)
    return None


def find_nearest_nest(nests: List[Nest], x: float, y: float,
                      max_distance: float = math.inf) -> Optional[Nest]:
    return nearest(nests, x, y, max_distance)


def home_nest(nests: List[Nest], ant: Agent, ctx: SimulationContext) -> Optional[Nest]:
    """The nest an ant delivers to, matched by its home coordinates"""
    return find_nearest_nest(nests, ant.traits.nest_x, ant.traits.nest_y,
                             ctx.config.nest.delivery_match_radius)


def create_nest(x: float, y: float, ctx: SimulationContext) -> Nest:
    nest = Nest(x=x, y=y, body_size=ctx.config.nest.body_size)
    ctx.nests.append(nest)
    logger.debug(f"Founded nest at ({x:.0f}, {y:.0f})")
    return nest
