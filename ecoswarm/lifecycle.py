"""
EcoSwarm Lifecycle
==================
Reproduction and death shared by every species.

Reproduction is an explicit two-phase state machine on the agent record:

    IDLE --(energy >= threshold, cooldown == 0)--> PREGNANT
         debit half of the reproduction cost
    PREGNANT --(pregnancy ticks elapse)--> IDLE
         debit the other half, set cooldown, emit one offspring

A completed pregnancy yields exactly one birth, and no new pregnancy starts
on the tick a birth happens. Ants never self-reproduce; nests spawn them.

Death closes the nutrient cycle: an exhausted creature may seed a few
plants around its body.
"""

import math
import logging
import numpy as np
from typing import List, Optional

from .agents import Agent, create_agent
from .behaviors.bird import limit_speed
from .config import ReproductionPhase, Species
from .context import SimulationContext
from .genetics import GeneBounds, format_gene, mutate
from .world import Food

logger = logging.getLogger(__name__)


def can_reproduce(agent: Agent, ctx: SimulationContext) -> bool:
    """Energy and cooldown preconditions for starting a pregnancy"""
    if not agent.alive:
        return False
    if not ctx.config.species[agent.species].can_self_reproduce:
        return False

    state = agent.reproduction
    if state.pregnant or state.cooldown > 0:
        return False
    return agent.energy >= ctx.config.reproduction_threshold(agent.species)


def start_pregnancy(agent: Agent, ctx: SimulationContext) -> bool:
    """
    Commit to reproduction: debit half the cost and start the timer.

    Returns:
        False (and no change) when the preconditions are not met
    """
    if not can_reproduce(agent, ctx):
        return False

    cost = ctx.config.reproduction_cost(agent.species)
    agent.energy -= cost * 0.5

    state = agent.reproduction
    state.phase = ReproductionPhase.PREGNANT
    state.ticks_remaining = ctx.config.species[agent.species].pregnancy_ticks
    return True


def spawn_offset(species: Species, ctx: SimulationContext):
    span = ctx.config.species[species].spawn_offset
    return (ctx.rng.random() - 0.5) * span, (ctx.rng.random() - 0.5) * span


def give_birth(agent: Agent, ctx: SimulationContext) -> Optional[Agent]:
    """
    Complete a pregnancy.

    The mother pays the second half of the cost. If she cannot cover it the
    pregnancy is lost; the cooldown applies either way.

    Returns:
        The offspring, or None if the pregnancy was lost
    """
    config = ctx.config
    entry = config.species[agent.species]
    cost = config.reproduction_cost(agent.species)

    state = agent.reproduction
    state.phase = ReproductionPhase.IDLE
    state.ticks_remaining = 0
    state.cooldown = entry.reproduction_cooldown

    if agent.energy < cost * 0.5:
        logger.debug(f"{entry.name} {agent.id} lost pregnancy (energy {agent.energy:.1f})")
        return None

    agent.energy -= cost * 0.5

    gene = mutate(
        agent.gene,
        config.genetics.mutation_rate,
        config.genetics.mutation_amount,
        bounds=GeneBounds.from_config(config.genetics),
        rng=ctx.rng,
    )
    dx, dy = spawn_offset(agent.species, ctx)
    child = create_agent(agent.species, agent.x + dx, agent.y + dy, config, ctx.rng, gene=gene)
    child.generation = agent.generation + 1
    child.energy = cost * config.energy.offspring_energy_fraction

    if child.species == Species.BIRD:
        child.vx = agent.vx + (ctx.rng.random() - 0.5) * 2
        child.vy = agent.vy + (ctx.rng.random() - 0.5) * 2
        limit_speed(child, config.bird.min_speed_fraction)

    logger.debug(f"{entry.name} {agent.id} gave birth (generation {child.generation}, "
                 f"gene {format_gene(child.gene)})")
    return child


def advance_reproduction(agent: Agent, ctx: SimulationContext) -> Optional[Agent]:
    """
    One tick of the reproduction state machine.

    Returns:
        A newborn if a pregnancy completed this tick
    """
    if not agent.alive or not ctx.config.species[agent.species].can_self_reproduce:
        return None

    state = agent.reproduction
    if state.cooldown > 0:
        state.cooldown -= 1

    if state.pregnant:
        state.ticks_remaining -= 1
        if state.ticks_remaining <= 0:
            return give_birth(agent, ctx)
        return None

    start_pregnancy(agent, ctx)
    return None


def seed_corpse_food(agent: Agent, ctx: SimulationContext) -> List[Food]:
    """With a fixed chance, grow 1-3 plants around a dead body"""
    cfg = ctx.config.lifecycle
    planted = []

    if ctx.rng.random() >= cfg.corpse_food_chance:
        return planted
    if not agent.position_finite:
        return planted

    lo, hi = cfg.corpse_food_range
    for _ in range(int(ctx.rng.integers(lo, hi + 1))):
        x = agent.x + (ctx.rng.random() - 0.5) * cfg.corpse_scatter
        y = agent.y + (ctx.rng.random() - 0.5) * cfg.corpse_scatter
        food = ctx.world.spawn_food(x, y)
        if food is not None:
            planted.append(food)

    return planted


def resolve_death(agent: Agent, ctx: SimulationContext) -> bool:
    """
    Kill an exhausted agent.

    Returns:
        True if the agent died of exhaustion this tick
    """
    if not agent.alive or agent.energy > 0:
        return False

    agent.die()
    agent.energy = 0.0
    planted = seed_corpse_food(agent, ctx)
    logger.debug(f"{agent.species.value} {agent.id} starved; {len(planted)} plants seeded")
    return True


def mean_generation(agents: List[Agent]) -> float:
    if not agents:
        return 0.0
    return float(np.mean([a.generation for a in agents]))


def max_generation(agents: List[Agent]) -> int:
    return max((a.generation for a in agents), default=0)


def is_finite_agent(agent: Agent) -> bool:
    return agent.position_finite and math.isfinite(agent.energy)
