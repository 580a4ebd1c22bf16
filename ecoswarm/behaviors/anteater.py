"""
Anteater behavior: continuous pursuit of ants.

Cruise speed is throttled by a fatigue factor derived from how fast the
anteater has been burning energy; pursuit always runs at full speed.
"""

import math
from typing import List

from ..agents import Agent, AnteaterTraits
from ..config import Species
from ..context import AgentOutcome, SimulationContext, SpeciesLists
from ..spatial import nearest
from . import steering


def update_stamina(agent: Agent, ctx: SimulationContext):
    """
    Sample energy every `stamina_interval` ticks over a short window.

    A sustained drop above `high_drain` per sample lowers the fatigue
    factor; a drop below `low_drain` lets it recover.
    """
    cfg = ctx.config.anteater
    t: AnteaterTraits = agent.traits

    t.history_timer += 1
    if t.history_timer < cfg.stamina_interval:
        return

    t.history_timer = 0
    t.energy_history.append(agent.energy)
    if len(t.energy_history) > cfg.stamina_window:
        t.energy_history.pop(0)

    if len(t.energy_history) >= 2:
        t.energy_drop_rate = (t.energy_history[0] - agent.energy) / (len(t.energy_history) - 1)

        if t.energy_drop_rate > cfg.high_drain:
            t.fatigue_factor = max(cfg.min_fatigue_factor, t.fatigue_factor - cfg.fatigue_step_down)
        elif t.energy_drop_rate < cfg.low_drain:
            t.fatigue_factor = min(1.0, t.fatigue_factor + cfg.fatigue_step_up)


def wander_smooth(agent: Agent, ctx: SimulationContext):
    """Bounded, mean-reverting heading drift with rare large jumps"""
    cfg = ctx.config.anteater
    t: AnteaterTraits = agent.traits

    t.wander_angle += (ctx.rng.random() - 0.5) * cfg.wander_jitter
    t.wander_angle = max(-cfg.wander_limit, min(cfg.wander_limit, t.wander_angle))
    t.wander_angle *= cfg.wander_decay

    angle = math.atan2(agent.vy, agent.vx) + t.wander_angle * cfg.wander_gain

    if ctx.rng.random() < cfg.wander_jump_chance:
        t.wander_angle += cfg.wander_jump if ctx.rng.random() > 0.5 else -cfg.wander_jump

    agent.vx = math.cos(angle)
    agent.vy = math.sin(angle)


def catch_prey(agent: Agent, prey: Agent, ctx: SimulationContext,
               energy_gain: float, satiated_cooldown: int, hungry_cooldown: int,
               satiety_factor: float) -> bool:
    """
    Kill prey and feed; the hunt cooldown depends on resulting satiety.

    Shared by both predator species.
    """
    if not prey.alive:
        return False

    prey.die()
    agent.energy += ctx.config.energy.food_energy * energy_gain

    if agent.energy > ctx.config.energy.initial_energy * satiety_factor:
        agent.traits.hunt_cooldown = satiated_cooldown
    else:
        agent.traits.hunt_cooldown = hungry_cooldown
    return True


def check_catch(agent: Agent, ants: List[Agent], ctx: SimulationContext,
                outcome: AgentOutcome) -> bool:
    cfg = ctx.config.anteater
    if agent.traits.hunt_cooldown > 0:
        return False

    radius = agent.body_size + cfg.catch_margin
    for ant in ants:
        if ant.queryable and agent.distance_to(ant) < radius:
            catch_prey(agent, ant, ctx, cfg.energy_gain, cfg.satiated_cooldown,
                       cfg.hungry_cooldown, cfg.satiety_factor)
            outcome.caught = ant
            return True
    return False


def step_anteater(agent: Agent, ctx: SimulationContext, lists: SpeciesLists) -> AgentOutcome:
    """Advance one anteater by one tick"""
    outcome = AgentOutcome()
    if not agent.alive:
        return outcome

    cfg = ctx.config.anteater
    t: AnteaterTraits = agent.traits

    if t.hunt_cooldown > 0:
        t.hunt_cooldown -= 1

    prey_names = ctx.config.species[Species.ANTEATER].prey
    target = None
    if t.hunt_cooldown == 0:
        target = nearest(lists.ants, agent.x, agent.y, agent.gene.perception,
                         lambda a: a.species.value in prey_names)

    t.is_hunting = target is not None
    if t.is_hunting:
        steering.move_towards(agent, target.x, target.y, ctx.rng, cfg.hunt_turn_rate)
    else:
        wander_smooth(agent, ctx)

    steering.move(agent, 1.0 if t.is_hunting else t.fatigue_factor)

    check_catch(agent, lists.ants, ctx, outcome)

    update_stamina(agent, ctx)
    steering.consume_energy(agent, ctx.config.energy.move_cost, *cfg.energy_cost)
    return outcome
