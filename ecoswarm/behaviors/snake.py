"""
Snake behavior: ambush predator of birds.

State machine:
    wander   -> stopping  (wander timer expires)
    stopping -> ambush    (60 ticks of quadratic deceleration)
    ambush   -> strike    (bird inside strike range)
    ambush   -> wander    (ambush timer expires)
    strike   -> recover   (catch, target lost, or strike timer expires)
    recover  -> wander

The body is a chain of segments relaxed behind the head each tick. Only
the head position takes part in distance and contact checks.
"""

import math
from typing import List

from ..agents import Agent, SnakeTraits
from ..config import SnakeState, Species
from ..context import AgentOutcome, SimulationContext, SpeciesLists
from ..spatial import nearest
from . import steering
from .anteater import catch_prey


def _uniform_ticks(ctx: SimulationContext, bounds) -> int:
    lo, hi = bounds
    return int(ctx.rng.uniform(lo, hi))


def _is_prey(ctx: SimulationContext):
    prey_names = ctx.config.species[Species.SNAKE].prey
    return lambda other: other.species.value in prey_names


def wander_snake(agent: Agent, ctx: SimulationContext):
    """Slow random drift with a sinusoidal weave driven by the tick count"""
    cfg = ctx.config.snake
    t: SnakeTraits = agent.traits

    t.weave_phase += cfg.weave_rate
    wave = math.sin(t.weave_phase) * cfg.weave_amplitude

    t.wander_angle += (ctx.rng.random() - 0.5) * cfg.wander_jitter
    t.wander_angle = max(-cfg.wander_limit, min(cfg.wander_limit, t.wander_angle))

    angle = math.atan2(agent.vy, agent.vx) + t.wander_angle * cfg.wander_gain + wave * cfg.weave_gain
    agent.vx = math.cos(angle)
    agent.vy = math.sin(angle)


def enter_recover(agent: Agent, ticks: int):
    t: SnakeTraits = agent.traits
    t.state = SnakeState.RECOVER
    t.state_timer = ticks
    t.strike_target = None


def hunt_strike(agent: Agent, target: Agent, ctx: SimulationContext,
                outcome: AgentOutcome):
    """
    Lunge at the strike target.

    A target closer than one strike step is taken directly: the head lands
    on it and the catch resolves immediately.
    """
    cfg = ctx.config.snake
    strike_step = agent.gene.speed * cfg.strike_speed

    if agent.distance_to(target) < strike_step:
        agent.x = target.x
        agent.y = target.y
        if catch_prey(agent, target, ctx, cfg.energy_gain, cfg.satiated_cooldown,
                      cfg.hungry_cooldown, cfg.satiety_factor):
            outcome.caught = target
            enter_recover(agent, cfg.recover_ticks)
        return

    steering.move_towards(agent, target.x, target.y, ctx.rng, cfg.strike_turn_rate)


def update_state(agent: Agent, birds: List[Agent], ctx: SimulationContext,
                 outcome: AgentOutcome):
    cfg = ctx.config.snake
    t: SnakeTraits = agent.traits

    t.state_timer -= 1

    if t.state == SnakeState.WANDER:
        wander_snake(agent, ctx)
        if t.state_timer <= 0:
            t.state = SnakeState.STOPPING
            t.state_timer = cfg.stop_ticks

    elif t.state == SnakeState.STOPPING:
        if t.state_timer <= 0:
            t.state = SnakeState.AMBUSH
            t.state_timer = _uniform_ticks(ctx, cfg.ambush_ticks_range)
            agent.vx = 0.0
            agent.vy = 0.0

    elif t.state == SnakeState.AMBUSH:
        target = None
        if t.hunt_cooldown == 0:
            target = nearest(birds, agent.x, agent.y, cfg.strike_range, _is_prey(ctx))

        if target is not None:
            t.state = SnakeState.STRIKE
            t.state_timer = cfg.strike_ticks
            t.strike_target = target
            hunt_strike(agent, target, ctx, outcome)
        elif t.state_timer <= 0:
            t.state = SnakeState.WANDER
            t.state_timer = _uniform_ticks(ctx, cfg.wander_ticks_range)
            agent.vx, agent.vy = steering.random_heading(ctx.rng)

    elif t.state == SnakeState.STRIKE:
        target = t.strike_target
        if target is not None and target.alive:
            hunt_strike(agent, target, ctx, outcome)
        else:
            enter_recover(agent, cfg.lost_target_recover_ticks)

        if t.state == SnakeState.STRIKE and t.state_timer <= 0:
            enter_recover(agent, cfg.recover_ticks)

    elif t.state == SnakeState.RECOVER:
        if t.state_timer <= 0:
            t.state = SnakeState.WANDER
            t.state_timer = cfg.post_recover_wander_ticks
            if math.hypot(agent.vx, agent.vy) < steering.VELOCITY_EPSILON:
                agent.vx, agent.vy = steering.random_heading(ctx.rng)


def current_speed(agent: Agent, ctx: SimulationContext) -> float:
    cfg = ctx.config.snake
    t: SnakeTraits = agent.traits

    if t.state == SnakeState.AMBUSH:
        return 0.0
    if t.state == SnakeState.STOPPING:
        progress = max(0, t.state_timer) / cfg.stop_ticks
        return agent.gene.speed * cfg.wander_speed * progress * progress
    if t.state == SnakeState.STRIKE:
        return agent.gene.speed * cfg.strike_speed
    if t.state == SnakeState.RECOVER:
        return agent.gene.speed * cfg.recover_speed
    return agent.gene.speed * cfg.wander_speed


def update_body(agent: Agent):
    """Relax each segment to the fixed spacing from the one ahead of it"""
    t: SnakeTraits = agent.traits
    if not t.segments:
        return

    spacing = t.segment_spacing
    t.segments[0] = (agent.x, agent.y)

    for i in range(1, len(t.segments)):
        px, py = t.segments[i - 1]
        cx, cy = t.segments[i]
        dx = cx - px
        dy = cy - py
        dist = math.hypot(dx, dy)

        if dist > 0:
            scale = spacing / dist
            t.segments[i] = (px + dx * scale, py + dy * scale)
        else:
            t.segments[i] = (px - agent.vx * spacing, py - agent.vy * spacing)


def check_catch(agent: Agent, birds: List[Agent], ctx: SimulationContext,
                outcome: AgentOutcome) -> bool:
    """Contact kill by the head; any catch ends the current hunt"""
    cfg = ctx.config.snake
    t: SnakeTraits = agent.traits
    if t.hunt_cooldown > 0:
        return False

    radius = agent.body_size + cfg.catch_margin
    is_prey = _is_prey(ctx)
    for bird in birds:
        if bird.queryable and is_prey(bird) and agent.distance_to(bird) < radius:
            catch_prey(agent, bird, ctx, cfg.energy_gain, cfg.satiated_cooldown,
                       cfg.hungry_cooldown, cfg.satiety_factor)
            outcome.caught = bird
            enter_recover(agent, cfg.recover_ticks)
            return True
    return False


def step_snake(agent: Agent, ctx: SimulationContext, lists: SpeciesLists) -> AgentOutcome:
    """Advance one snake by one tick"""
    outcome = AgentOutcome()
    if not agent.alive:
        return outcome

    cfg = ctx.config.snake
    t: SnakeTraits = agent.traits

    if t.hunt_cooldown > 0:
        t.hunt_cooldown -= 1

    update_state(agent, lists.birds, ctx, outcome)

    speed = current_speed(agent, ctx)
    agent.x += agent.vx * speed
    agent.y += agent.vy * speed
    update_body(agent)

    if outcome.caught is None:
        check_catch(agent, lists.birds, ctx, outcome)

    steering.consume_energy(agent, ctx.config.energy.move_cost, *cfg.energy_cost)
    return outcome
