"""
Bird behavior: Boids flocking with perching.

Flight combines three capped steering forces over neighbors within
perception:
    separation (1/d² repulsion inside 0.4 x perception)  weight 1.5
    alignment  (toward mean neighbor velocity)           weight 1.0
    cohesion   (toward neighbor centroid)                weight 1.0
plus food seeking. A visible snake replaces all of it with a strong flee
force. Speed is kept within [0.3 x max, max].

State machine: flying -> perching (fatigue) -> taking_off -> flying.
"""

import math
from typing import List, Optional, Tuple

from ..agents import Agent, BirdTraits
from ..config import BirdState, SnakeState, Species
from ..context import AgentOutcome, SimulationContext, SpeciesLists
from ..spatial import within_radius
from . import steering


def max_speed(agent: Agent) -> float:
    return agent.gene.speed


def limit_speed(agent: Agent, min_fraction: float = 0.3):
    speed = math.hypot(agent.vx, agent.vy)
    top = max_speed(agent)
    if speed > top:
        agent.vx = agent.vx / speed * top
        agent.vy = agent.vy / speed * top
    low = top * min_fraction
    if 0 < speed < low:
        agent.vx = agent.vx / speed * low
        agent.vy = agent.vy / speed * low


def _steer_towards(agent: Agent, tx: float, ty: float) -> Tuple[float, float]:
    """Desired velocity at max speed toward a point, minus current velocity"""
    dx = tx - agent.x
    dy = ty - agent.y
    dist = math.hypot(dx, dy)
    if dist <= 0:
        return 0.0, 0.0
    top = max_speed(agent)
    return dx / dist * top - agent.vx, dy / dist * top - agent.vy


# ==================== Boids rules ====================

def separation(agent: Agent, neighbors: List[Agent], radius: float,
               max_force: float) -> Tuple[float, float]:
    steer_x = 0.0
    steer_y = 0.0
    count = 0

    for other in neighbors:
        dist = agent.distance_to(other)
        if 0 < dist < radius:
            steer_x += (agent.x - other.x) / (dist * dist)
            steer_y += (agent.y - other.y) / (dist * dist)
            count += 1

    if count == 0:
        return 0.0, 0.0

    steer_x /= count
    steer_y /= count
    mag = math.hypot(steer_x, steer_y)
    if mag > 0:
        # Separation always pushes at full force
        steer_x = steer_x / mag * max_force
        steer_y = steer_y / mag * max_force
    return steer_x, steer_y


def alignment(agent: Agent, neighbors: List[Agent], max_force: float) -> Tuple[float, float]:
    if not neighbors:
        return 0.0, 0.0
    avg_vx = sum(o.vx for o in neighbors) / len(neighbors)
    avg_vy = sum(o.vy for o in neighbors) / len(neighbors)
    return steering.limit_force(avg_vx - agent.vx, avg_vy - agent.vy, max_force)


def cohesion(agent: Agent, neighbors: List[Agent], max_force: float) -> Tuple[float, float]:
    if not neighbors:
        return 0.0, 0.0
    cx = sum(o.x for o in neighbors) / len(neighbors)
    cy = sum(o.y for o in neighbors) / len(neighbors)
    fx, fy = _steer_towards(agent, cx, cy)
    return steering.limit_force(fx, fy, max_force)


def flock(agent: Agent, birds: List[Agent], ctx: SimulationContext) -> Tuple[float, float]:
    cfg = ctx.config.bird
    neighbors = within_radius(birds, agent.x, agent.y, agent.gene.perception,
                              lambda o: o is not agent)
    if not neighbors:
        return 0.0, 0.0

    sep = separation(agent, neighbors, agent.gene.perception * cfg.separation_radius_factor,
                     cfg.max_force)
    ali = alignment(agent, neighbors, cfg.max_force)
    coh = cohesion(agent, neighbors, cfg.max_force)

    return (
        sep[0] * cfg.separation_weight + ali[0] * cfg.alignment_weight + coh[0] * cfg.cohesion_weight,
        sep[1] * cfg.separation_weight + ali[1] * cfg.alignment_weight + coh[1] * cfg.cohesion_weight,
    )


# ==================== Foraging and threats ====================

def eats_ants(agent: Agent, ctx: SimulationContext) -> bool:
    """Ants are prey only when the bird is starving"""
    return agent.energy < ctx.config.energy.initial_energy * ctx.config.bird.ant_prey_fraction


def seek_food(agent: Agent, ants: List[Agent], ctx: SimulationContext) -> Tuple[float, float]:
    cfg = ctx.config.bird
    hunger = cfg.hunger_factor if agent.energy < cfg.hunger_energy else 1.0

    target = None
    best = agent.gene.perception

    plant = ctx.world.nearest_food(agent.x, agent.y, best)
    if plant is not None:
        target = plant
        best = agent.distance_to(plant)

    if eats_ants(agent, ctx):
        for ant in ants:
            if not ant.queryable:
                continue
            dist = agent.distance_to(ant)
            if dist < best:
                best = dist
                target = ant

    if target is None:
        return 0.0, 0.0

    fx, fy = _steer_towards(agent, target.x, target.y)
    return steering.limit_force(fx * hunger, fy * hunger, cfg.max_force * cfg.seek_force_factor)


def find_threat(agent: Agent, predators: List[Agent], ctx: SimulationContext) -> Optional[Agent]:
    """
    Nearest visible predator.

    An ambushing snake is only noticed inside a fraction of perception.
    """
    cfg = ctx.config.bird
    predator_names = ctx.config.species[Species.BIRD].predators
    nearest = None
    best = agent.gene.perception

    for predator in predators:
        if not predator.queryable or predator.species.value not in predator_names:
            continue
        dist = agent.distance_to(predator)
        if (predator.species == Species.SNAKE
                and predator.traits.state == SnakeState.AMBUSH
                and dist > agent.gene.perception * cfg.ambush_visibility):
            continue
        if dist < best:
            best = dist
            nearest = predator

    return nearest


def flee(agent: Agent, threat: Agent, ctx: SimulationContext) -> Tuple[float, float]:
    cfg = ctx.config.bird
    dx = agent.x - threat.x
    dy = agent.y - threat.y
    dist = math.hypot(dx, dy)
    if dist <= 0:
        return 0.0, 0.0
    top = max_speed(agent)
    return steering.limit_force(dx / dist * top - agent.vx, dy / dist * top - agent.vy,
                                cfg.max_force * cfg.flee_force_factor)


def check_food_pickup(agent: Agent, ants: List[Agent], ctx: SimulationContext,
                      outcome: AgentOutcome) -> bool:
    """Eat a plant in reach, or a starving bird eats an ant in reach"""
    cfg = ctx.config.bird
    eat_radius = agent.body_size + cfg.eat_margin

    plant = ctx.world.nearest_food(agent.x, agent.y, eat_radius)
    if plant is not None:
        ctx.world.remove_food(plant)
        agent.energy += ctx.config.energy.food_energy
        return True

    if eats_ants(agent, ctx):
        for ant in ants:
            if ant.queryable and agent.distance_to(ant) < eat_radius:
                ant.die()
                agent.energy += ctx.config.energy.food_energy * cfg.ant_energy_fraction
                outcome.caught = ant
                return True

    return False


# ==================== State machine ====================

def land(agent: Agent, ctx: SimulationContext):
    t: BirdTraits = agent.traits
    lo, hi = ctx.config.bird.perch_ticks_range
    t.state = BirdState.PERCHING
    t.state_timer = int(ctx.rng.integers(lo, hi + 1))
    agent.vx = 0.0
    agent.vy = 0.0


def take_off(agent: Agent, ctx: SimulationContext):
    cfg = ctx.config.bird
    t: BirdTraits = agent.traits
    t.state = BirdState.TAKING_OFF
    t.state_timer = cfg.takeoff_ticks
    hx, hy = steering.random_heading(ctx.rng)
    agent.vx = hx * max_speed(agent) * cfg.takeoff_speed_fraction
    agent.vy = hy * max_speed(agent) * cfg.takeoff_speed_fraction


def update_state(agent: Agent, predators: List[Agent], ctx: SimulationContext):
    cfg = ctx.config.bird
    t: BirdTraits = agent.traits

    if t.state_timer > 0:
        t.state_timer -= 1

    if t.state == BirdState.FLYING:
        if t.fatigue > cfg.landing_fatigue and ctx.rng.random() < t.fatigue / cfg.landing_divisor:
            if find_threat(agent, predators, ctx) is None:
                land(agent, ctx)

    elif t.state == BirdState.PERCHING:
        rested = t.fatigue < cfg.rested_fatigue and ctx.rng.random() < cfg.rested_takeoff_chance
        hungry = (agent.energy < cfg.hungry_takeoff_energy
                  and ctx.rng.random() < cfg.hungry_takeoff_chance)
        if rested or hungry or t.state_timer <= 0:
            take_off(agent, ctx)

    elif t.state == BirdState.TAKING_OFF:
        if t.state_timer <= 0:
            t.state = BirdState.FLYING


def update_flight(agent: Agent, lists: SpeciesLists, ctx: SimulationContext):
    cfg = ctx.config.bird
    ax = 0.0
    ay = 0.0

    threat = find_threat(agent, lists.predators, ctx)
    if threat is not None:
        fx, fy = flee(agent, threat, ctx)
        ax += fx * cfg.flee_weight
        ay += fy * cfg.flee_weight
    else:
        fx, fy = flock(agent, lists.birds, ctx)
        ax += fx
        ay += fy

        sx, sy = seek_food(agent, lists.ants, ctx)
        ax += sx * cfg.seek_weight
        ay += sy * cfg.seek_weight

    agent.vx += ax
    agent.vy += ay

    if math.hypot(agent.vx, agent.vy) < steering.VELOCITY_EPSILON:
        hx, hy = steering.random_heading(ctx.rng)
        agent.vx = hx * max_speed(agent) * cfg.min_speed_fraction
        agent.vy = hy * max_speed(agent) * cfg.min_speed_fraction

    limit_speed(agent, cfg.min_speed_fraction)


def step_bird(agent: Agent, ctx: SimulationContext, lists: SpeciesLists) -> AgentOutcome:
    """Advance one bird by one tick"""
    outcome = AgentOutcome()
    if not agent.alive:
        return outcome

    cfg = ctx.config.bird
    t: BirdTraits = agent.traits

    update_state(agent, lists.predators, ctx)

    if t.state == BirdState.PERCHING:
        t.fatigue = max(0.0, t.fatigue - cfg.fatigue_recovery)
        cap = ctx.config.energy.initial_energy * cfg.perch_energy_cap_factor
        if agent.energy < cap:
            agent.energy = min(cap, agent.energy + cfg.perch_energy_gain)

        if find_threat(agent, lists.predators, ctx) is not None:
            take_off(agent, ctx)
    else:
        update_flight(agent, lists, ctx)
        t.fatigue = min(cfg.max_fatigue, t.fatigue + cfg.fatigue_gain)
        steering.consume_energy(agent, ctx.config.energy.move_cost, *cfg.energy_cost)
        agent.x += agent.vx
        agent.y += agent.vy

    check_food_pickup(agent, lists.ants, ctx, outcome)
    return outcome
