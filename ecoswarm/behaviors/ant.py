"""
Ant behavior: pheromone-guided foraging.

Decision order per tick (outside the nest):
1. predator in perception -> flee, latched for `flee_ticks`
2. carrying food or low on energy -> steer home
3. forage: visible food first, else a pheromone-biased direction, else
   random walk (always random walk near the nest)
then crowd separation, movement, trail deposit, metabolism, nest arrival
and food pickup.

Ants only lay trail on the way home with food, so trails record
successful round trips rather than search paths.
"""

import math

from ..agents import Agent, AntTraits
from ..config import AntState, Species
from ..context import AgentOutcome, SimulationContext, SpeciesLists
from ..spatial import nearest
from . import steering


def _distance_to_nest(agent: Agent) -> float:
    t: AntTraits = agent.traits
    return math.hypot(agent.x - t.nest_x, agent.y - t.nest_y)


def leave_nest(agent: Agent, ctx: SimulationContext):
    """Exit at a random point on the nest perimeter, heading outward"""
    t: AntTraits = agent.traits
    cfg = ctx.config.ant
    angle = ctx.rng.uniform(0.0, 2.0 * math.pi)
    t.inside_nest = False
    agent.x = t.nest_x + math.cos(angle) * cfg.nest_exit_radius
    agent.y = t.nest_y + math.sin(angle) * cfg.nest_exit_radius
    agent.vx = math.cos(angle)
    agent.vy = math.sin(angle)
    t.state = AntState.FORAGING


def find_threat(agent: Agent, ctx: SimulationContext, lists: SpeciesLists):
    """Nearest predator of ants within perception"""
    predator_names = ctx.config.species[Species.ANT].predators
    candidates = lists.anteaters + lists.birds
    return nearest(candidates, agent.x, agent.y, agent.gene.perception,
                   lambda p: p.species.value in predator_names)


def follow_pheromone(agent: Agent, ctx: SimulationContext):
    """
    Probabilistic trail following.

    Near the nest the trail is ignored: outbound ants would otherwise walk
    straight back into the returning trail.
    """
    cfg = ctx.config.ant

    if _distance_to_nest(agent) < cfg.pheromone_buffer:
        steering.wander(agent, ctx.rng, cfg.wander_turn)
        return

    radius = ctx.config.pheromone.sample_radius
    selected = ctx.pheromone.select_direction_probabilistic(
        agent.x, agent.y, agent.vx, agent.vy, radius, radius, rng=ctx.rng
    )
    if selected is None:
        steering.wander(agent, ctx.rng, cfg.wander_turn)
        return

    dx = selected.x - agent.x
    dy = selected.y - agent.y
    dist = math.hypot(dx, dy)
    if dist > 0:
        w = cfg.pheromone_follow_weight
        agent.vx = agent.vx * (1 - w) + (dx / dist) * w
        agent.vy = agent.vy * (1 - w) + (dy / dist) * w
        steering.normalize_velocity(agent, ctx.rng)


def search_for_food(agent: Agent, ctx: SimulationContext):
    """Sight beats smell: go for visible food, otherwise follow the trail"""
    food = ctx.world.nearest_food(agent.x, agent.y, agent.gene.perception)
    if food is not None:
        steering.move_towards(agent, food.x, food.y, ctx.rng, ctx.config.ant.food_turn_rate)
    else:
        follow_pheromone(agent, ctx)


def separate(agent: Agent, neighbors, ctx: SimulationContext) -> int:
    """
    Crowd separation against other ants.

    Repulsion falls off as ((R - d) / R)²; coincident pairs get a random
    push. With more than a few neighbors a jitter proportional to the
    crowd breaks symmetric standoffs.

    Returns:
        Number of neighbors inside the separation radius
    """
    cfg = ctx.config.ant
    radius = agent.body_size * cfg.separation_radius_factor
    sum_x = 0.0
    sum_y = 0.0
    count = 0

    for other in neighbors:
        if other is agent or not other.queryable:
            continue
        dist = agent.distance_to(other)
        if not dist < radius:
            continue

        if dist < 1.0:
            angle = ctx.rng.uniform(0.0, 2.0 * math.pi)
            sum_x += math.cos(angle) * cfg.separation_overlap_push
            sum_y += math.sin(angle) * cfg.separation_overlap_push
        else:
            force = ((radius - dist) / radius) ** 2
            sum_x += (agent.x - other.x) / dist * force * cfg.separation_strength
            sum_y += (agent.y - other.y) / dist * force * cfg.separation_strength
        count += 1

    if count > 0:
        agent.vx += sum_x / count * cfg.separation_weight
        agent.vy += sum_y / count * cfg.separation_weight

        if count > cfg.crowd_jitter_threshold:
            angle = ctx.rng.uniform(0.0, 2.0 * math.pi)
            jitter = min(cfg.crowd_jitter_max, count * cfg.crowd_jitter_per_neighbor)
            agent.vx += math.cos(angle) * jitter
            agent.vy += math.sin(angle) * jitter

        steering.normalize_velocity(agent, ctx.rng)

    return count


def deposit_trail(agent: Agent, ctx: SimulationContext, outcome: AgentOutcome):
    """Lay trail only when carrying food and clear of the nest entrance"""
    t: AntTraits = agent.traits
    cfg = ctx.config.ant
    if t.has_food and _distance_to_nest(agent) > cfg.deposit_buffer:
        amount = ctx.config.pheromone.deposit_amount * cfg.deposit_multiplier
        outcome.deposits.append((agent.x, agent.y, amount))


def check_nest_arrival(agent: Agent, ctx: SimulationContext) -> bool:
    """
    Enter the nest when close enough.

    Returns:
        True if food was delivered
    """
    t: AntTraits = agent.traits
    if _distance_to_nest(agent) >= ctx.config.ant.nest_arrival_radius:
        return False

    delivered = t.has_food
    if delivered:
        t.has_food = False
        agent.energy += ctx.config.energy.food_energy

    t.inside_nest = True
    t.stay_timer = ctx.config.ant.rest_ticks
    t.flee_timer = 0
    t.state = AntState.RESTING
    return delivered


def check_food_pickup(agent: Agent, ctx: SimulationContext) -> bool:
    food = ctx.world.nearest_food(agent.x, agent.y, agent.body_size + ctx.config.ant.pickup_margin)
    if food is None:
        return False

    agent.traits.has_food = True
    ctx.world.remove_food(food)
    agent.vx = -agent.vx
    agent.vy = -agent.vy
    return True


def step_ant(agent: Agent, ctx: SimulationContext, lists: SpeciesLists) -> AgentOutcome:
    """Advance one ant by one tick"""
    outcome = AgentOutcome()
    if not agent.alive:
        return outcome

    t: AntTraits = agent.traits
    cfg = ctx.config.ant

    if t.inside_nest:
        if t.stay_timer > 0:
            t.stay_timer -= 1
        else:
            leave_nest(agent, ctx)
        return outcome

    threat = find_threat(agent, ctx, lists)
    if threat is not None:
        steering.flee_from(agent, threat, ctx.rng, cfg.flee_noise)
        t.flee_timer = cfg.flee_ticks

    low_energy = agent.energy < ctx.config.energy.initial_energy * cfg.low_energy_fraction

    if t.flee_timer > 0:
        t.flee_timer -= 1
        t.state = AntState.FLEEING
    elif t.has_food or low_energy:
        t.state = AntState.RETURNING
        steering.move_towards(agent, t.nest_x, t.nest_y, ctx.rng, cfg.home_turn_rate)
    else:
        t.state = AntState.FORAGING
        search_for_food(agent, ctx)

    separate(agent, lists.ants, ctx)

    if math.hypot(agent.vx, agent.vy) < 0.1:
        agent.vx, agent.vy = steering.random_heading(ctx.rng)
    steering.move(agent)

    deposit_trail(agent, ctx, outcome)
    steering.consume_energy(agent, ctx.config.energy.move_cost, *cfg.energy_cost)

    low_energy = agent.energy < ctx.config.energy.initial_energy * cfg.low_energy_fraction
    if t.has_food or low_energy:
        outcome.delivered_food = check_nest_arrival(agent, ctx)

    if not t.inside_nest and not t.has_food and t.flee_timer == 0:
        check_food_pickup(agent, ctx)

    return outcome
