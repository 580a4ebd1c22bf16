"""
Steering primitives shared by every species.

All helpers mutate the agent in place. Headings are kept unit-length for
speed-scaled movers (ants, predators); birds carry their speed in the
velocity vector and use their own integration.
"""

import math
import numpy as np
from typing import Tuple

from ..agents import Agent

# Below this magnitude a velocity has no usable direction
VELOCITY_EPSILON = 0.01


def random_heading(rng: np.random.Generator) -> Tuple[float, float]:
    angle = rng.uniform(0.0, 2.0 * math.pi)
    return math.cos(angle), math.sin(angle)


def normalize_velocity(agent: Agent, rng: np.random.Generator):
    """Unit-length heading; degenerate velocities get a random heading"""
    mag = math.hypot(agent.vx, agent.vy)
    if mag > VELOCITY_EPSILON and math.isfinite(mag):
        agent.vx /= mag
        agent.vy /= mag
    else:
        agent.vx, agent.vy = random_heading(rng)


def move(agent: Agent, speed_multiplier: float = 1.0):
    """Advance along the heading at gene speed x multiplier"""
    speed = agent.gene.speed * speed_multiplier
    agent.x += agent.vx * speed
    agent.y += agent.vy * speed


def wander(agent: Agent, rng: np.random.Generator, turn_amount: float = 0.5):
    """Random walk: rotate heading by U(-turn/2, turn/2)"""
    angle = math.atan2(agent.vy, agent.vx) + (rng.random() - 0.5) * turn_amount
    agent.vx = math.cos(angle)
    agent.vy = math.sin(angle)


def move_towards(agent: Agent, target_x: float, target_y: float,
                 rng: np.random.Generator, turn_rate: float = 0.2):
    """
    Blend the heading toward a target.

    v' = normalize((1 - k) * v + k * d̂); no change within 1 unit of the
    target, where the direction is unstable.
    """
    dx = target_x - agent.x
    dy = target_y - agent.y
    dist = math.hypot(dx, dy)

    if dist > 1.0:
        agent.vx = agent.vx * (1 - turn_rate) + (dx / dist) * turn_rate
        agent.vy = agent.vy * (1 - turn_rate) + (dy / dist) * turn_rate
        normalize_velocity(agent, rng)


def flee_from(agent: Agent, threat, rng: np.random.Generator, randomness: float = 0.3):
    """Point directly away from a threat, with noise"""
    dx = agent.x - threat.x
    dy = agent.y - threat.y
    dist = math.hypot(dx, dy)

    if dist > 0:
        agent.vx = dx / dist + (rng.random() - 0.5) * randomness
        agent.vy = dy / dist + (rng.random() - 0.5) * randomness
        normalize_velocity(agent, rng)


def consume_energy(agent: Agent, move_cost: float,
                   base_multiplier: float = 1.0,
                   speed_multiplier: float = 0.005,
                   size_multiplier: float = 0.01) -> float:
    """
    Per-tick metabolic cost: base + speed² + size terms.

    Returns:
        Energy spent
    """
    cost = (move_cost * base_multiplier
            + agent.gene.speed * agent.gene.speed * speed_multiplier
            + agent.gene.size * size_multiplier)
    agent.energy -= cost
    return cost


def limit_force(fx: float, fy: float, max_force: float) -> Tuple[float, float]:
    """Cap a steering vector's magnitude"""
    mag = math.hypot(fx, fy)
    if mag > max_force:
        return fx / mag * max_force, fy / mag * max_force
    return fx, fy
