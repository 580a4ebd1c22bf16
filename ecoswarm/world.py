"""
EcoSwarm Food World
===================
Food collaborator consumed by the behavior core.

The core only relies on the `FoodSource` protocol:
    nearest_food(x, y, max_dist), remove_food(food), spawn_food(x, y)

`FoodWorld` is the default implementation: a capped set of plants placed
by a rate-limited random policy, indexed with a SpatialHash.
"""

import math
import numpy as np
from typing import List, Optional, Protocol
from dataclasses import dataclass

from .config import WorldConfig
from .spatial import SpatialHash


@dataclass(eq=False)
class Food:
    """A plant that can be eaten or carried"""
    x: float
    y: float
    energy: float = 100.0


class FoodSource(Protocol):
    """Interface the behavior core calls for food"""

    def nearest_food(self, x: float, y: float, max_dist: float = math.inf) -> Optional[Food]:
        ...

    def remove_food(self, food: Food) -> bool:
        ...

    def spawn_food(self, x: Optional[float] = None, y: Optional[float] = None) -> Optional[Food]:
        ...


class FoodWorld:
    """
    Plants in an open world.

    Placement favours the world center: a share `central_food_bias` of
    random placements is concentrated toward the middle, the rest spread
    uniformly over a disc covering the world.
    """

    def __init__(self, config: WorldConfig, food_energy: float = 100.0,
                 rng: Optional[np.random.Generator] = None):
        self.config = config
        self.food_energy = food_energy
        self.rng = rng if rng is not None else np.random.default_rng()
        self.max_food = config.max_food

        self.foods: List[Food] = []
        self.index = SpatialHash(config.food_bucket_size)

        self.total_spawned = 0
        self.total_eaten = 0

    def __len__(self) -> int:
        return len(self.foods)

    def init(self):
        """Clear and place the initial food stock"""
        self.foods = []
        self.index.clear()
        for _ in range(int(self.max_food * self.config.initial_food_fraction)):
            self.spawn_food()

    def _random_position(self):
        cx = self.config.width / 2
        cy = self.config.height / 2
        max_radius = math.hypot(self.config.width, self.config.height) / 2 * 0.8

        angle = self.rng.uniform(0.0, 2.0 * math.pi)
        if self.rng.random() < 1.0 - self.config.central_food_bias:
            dist = max_radius * math.sqrt(self.rng.random())
        else:
            dist = max_radius * self.rng.random() ** 1.5

        return cx + math.cos(angle) * dist, cy + math.sin(angle) * dist

    def spawn_food(self, x: Optional[float] = None, y: Optional[float] = None) -> Optional[Food]:
        """
        Place a plant.

        Args:
            x, y: Position; a random position is drawn when either is None

        Returns:
            The new plant, or None when the world is at capacity
        """
        if len(self.foods) >= self.max_food:
            return None

        if x is None or y is None:
            x, y = self._random_position()

        food = Food(x=float(x), y=float(y), energy=self.food_energy)
        self.foods.append(food)
        self.index.insert(food)
        self.total_spawned += 1
        return food

    def remove_food(self, food: Food) -> bool:
        """Remove an eaten or picked-up plant"""
        for i, other in enumerate(self.foods):
            if other is food:
                del self.foods[i]
                self.index.remove(food)
                self.total_eaten += 1
                return True
        return False

    def nearest_food(self, x: float, y: float, max_dist: float = math.inf) -> Optional[Food]:
        return self.index.nearest(x, y, max_dist)

    def update(self):
        """Rate-limited random placement"""
        if self.rng.random() < self.config.food_spawn_rate and len(self.foods) < self.max_food:
            self.spawn_food()
