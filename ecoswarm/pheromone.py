"""
EcoSwarm Pheromone Field
========================
Ant Colony Optimization-inspired sparse pheromone field.

- Cell-based storage τ(row, col), kept only where a trail exists
- Evaporation: τ(t+1) = ρ * τ(t), cells with τ < ε are dropped
- Deposition: τ += δ, clipped to τ_max
- Direction choice: p(cell) ∝ τ * (1 + b * max(0, cos θ)), θ being the
  angle between the agent heading and the cell offset

Short round trips reinforce a trail faster than evaporation removes it,
long ones decay away. Sampling in proportion to strength rather than
always taking the maximum keeps ants from collapsing onto a single cell.
"""

import math
import numpy as np
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass

from .config import PheromoneConfig


@dataclass
class PheromoneCell:
    """A neighborhood cell as seen from a query position"""
    row: int
    col: int
    strength: float
    world_x: float
    world_y: float


@dataclass
class PheromoneTarget:
    """Result of a direction query: world point to steer toward"""
    x: float
    y: float
    strength: float


class PheromoneField:
    """
    Sparse 2-D pheromone accumulator over an unbounded world.

    Storage is proportional to active trails, not world area: a dict keyed
    by (row, col). Coordinates may be negative.

    Key operations:
    1. Deposition: agents add pheromone at their position
    2. Evaporation: global multiplicative decay with pruning
    3. Sampling: greedy strongest neighbor, or roulette-wheel selection
    """

    def __init__(self, config: Optional[PheromoneConfig] = None):
        self.config = config or PheromoneConfig()
        self.cell_size = self.config.cell_size
        self.max_strength = self.config.max_strength
        self.epsilon = self.config.epsilon

        # (row, col) -> strength
        self.grid: Dict[Tuple[int, int], float] = {}

        # Statistics
        self.total_depositions = 0
        self.step_count = 0

    def __len__(self) -> int:
        return len(self.grid)

    def world_to_grid(self, x: float, y: float) -> Tuple[int, int]:
        """World coordinates to (row, col)"""
        return (int(math.floor(y / self.cell_size)),
                int(math.floor(x / self.cell_size)))

    def grid_to_world(self, row: int, col: int) -> Tuple[float, float]:
        """(row, col) to the world coordinates of the cell center"""
        return ((col + 0.5) * self.cell_size, (row + 0.5) * self.cell_size)

    def deposit(self, x: float, y: float, amount: Optional[float] = None) -> bool:
        """
        Deposit pheromone at a world position.

        Args:
            x, y: World position
            amount: Amount to add (default: config.deposit_amount)

        Returns:
            True if deposited, False for non-finite positions or amounts
        """
        if amount is None:
            amount = self.config.deposit_amount
        if not (math.isfinite(x) and math.isfinite(y) and math.isfinite(amount)):
            return False
        if amount <= 0:
            return False

        key = self.world_to_grid(x, y)
        self.grid[key] = min(self.max_strength, self.grid.get(key, 0.0) + amount)
        self.total_depositions += 1
        return True

    def evaporate(self, rate: Optional[float] = None):
        """
        Apply global evaporation.

        τ(t+1) = rate * τ(t); cells falling under epsilon are removed.

        Args:
            rate: Retention factor in (0, 1) (default: config.evaporation_rate)
        """
        if rate is None:
            rate = self.config.evaporation_rate

        for key, strength in list(self.grid.items()):
            new_strength = strength * rate
            if new_strength < self.epsilon:
                del self.grid[key]
            else:
                self.grid[key] = new_strength

        self.step_count += 1

    def strength_at(self, x: float, y: float) -> float:
        if not (math.isfinite(x) and math.isfinite(y)):
            return 0.0
        return self.grid.get(self.world_to_grid(x, y), 0.0)

    def surrounding(self, x: float, y: float,
                    radius_x: int = 1, radius_y: Optional[int] = None) -> List[PheromoneCell]:
        """
        Cells around a position, center excluded, row-major order.

        Zero-strength cells are included so callers see the full window.
        Non-finite positions have no neighborhood.
        """
        if radius_y is None:
            radius_y = radius_x
        if not (math.isfinite(x) and math.isfinite(y)):
            return []
        row, col = self.world_to_grid(x, y)
        cells = []

        for dr in range(-radius_y, radius_y + 1):
            for dc in range(-radius_x, radius_x + 1):
                if dr == 0 and dc == 0:
                    continue
                r, c = row + dr, col + dc
                wx, wy = self.grid_to_world(r, c)
                cells.append(PheromoneCell(r, c, self.grid.get((r, c), 0.0), wx, wy))

        return cells

    def strongest_direction(self, x: float, y: float,
                            radius: int = 1) -> Optional[PheromoneTarget]:
        """
        Greedy lookup of the strongest neighbor cell.

        Scans the (2r+1)² window minus the center; the first maximum in
        row-major order wins.

        Returns:
            World center of the strongest cell, or None if all are zero
        """
        best: Optional[PheromoneCell] = None
        for cell in self.surrounding(x, y, radius):
            if best is None or cell.strength > best.strength:
                best = cell

        if best is None or best.strength <= 0:
            return None
        return PheromoneTarget(best.world_x, best.world_y, best.strength)

    def direction_weights(self, x: float, y: float, vx: float, vy: float,
                          radius_x: int, radius_y: int) -> Tuple[List[PheromoneCell], np.ndarray]:
        """
        Selection weights for the neighborhood around (x, y).

        w = τ * (1 + forward_bias * max(0, cos θ)), θ between heading
        (vx, vy) and the offset to the cell center. Zero heading means no
        bias.
        """
        cells = self.surrounding(x, y, radius_x, radius_y)
        weights = np.zeros(len(cells))

        heading = math.hypot(vx, vy)
        for i, cell in enumerate(cells):
            if cell.strength <= 0:
                continue
            bias = 0.0
            if heading > 1e-9:
                dx = cell.world_x - x
                dy = cell.world_y - y
                dist = math.hypot(dx, dy)
                if dist > 1e-9:
                    cos_theta = (dx * vx + dy * vy) / (dist * heading)
                    bias = self.config.forward_bias * max(0.0, cos_theta)
            weights[i] = cell.strength * (1.0 + bias)

        return cells, weights

    def select_direction_probabilistic(self, x: float, y: float,
                                       vx: float, vy: float,
                                       radius_x: int = 2, radius_y: int = 2,
                                       rng: Optional[np.random.Generator] = None
                                       ) -> Optional[PheromoneTarget]:
        """
        Roulette-wheel selection of a neighbor cell.

        Args:
            x, y: Query position
            vx, vy: Current heading (forward cells get extra weight)
            radius_x, radius_y: Neighborhood half-extent in cells
            rng: Random generator

        Returns:
            World center of the selected cell, or None if total weight is zero
        """
        cells, weights = self.direction_weights(x, y, vx, vy, radius_x, radius_y)
        total = float(np.sum(weights))
        if not total > 0:
            return None

        if rng is None:
            rng = np.random.default_rng()

        pick = rng.random() * total
        cumulative = np.cumsum(weights)
        idx = int(np.searchsorted(cumulative, pick, side="right"))
        # First index whose cumulative weight exceeds the pick: never a zero-weight cell
        idx = min(idx, len(cells) - 1)

        cell = cells[idx]
        return PheromoneTarget(cell.world_x, cell.world_y, cell.strength)

    def get_statistics(self) -> Dict[str, float]:
        """Get statistics about the pheromone field"""
        values = list(self.grid.values())
        return {
            "active_cells": len(values),
            "total_strength": float(np.sum(values)) if values else 0.0,
            "max_strength": float(np.max(values)) if values else 0.0,
            "mean_strength": float(np.mean(values)) if values else 0.0,
            "total_depositions": self.total_depositions,
            "steps": self.step_count,
        }

    def get_heatmap(self, bounds: Optional[Tuple[float, float, float, float]] = None
                    ) -> Tuple[np.ndarray, Tuple[int, int]]:
        """
        Dense copy of the field for plotting.

        Args:
            bounds: (min_x, min_y, max_x, max_y) world window; defaults to the
                    bounding box of active cells

        Returns:
            (heatmap, (row0, col0)) where heatmap[r, c] is cell (row0 + r, col0 + c)
        """
        if bounds is not None:
            min_x, min_y, max_x, max_y = bounds
            row0, col0 = self.world_to_grid(min_x, min_y)
            row1, col1 = self.world_to_grid(max_x, max_y)
        elif self.grid:
            rows = [r for r, _ in self.grid]
            cols = [c for _, c in self.grid]
            row0, row1 = min(rows), max(rows)
            col0, col1 = min(cols), max(cols)
        else:
            return np.zeros((0, 0)), (0, 0)

        heatmap = np.zeros((row1 - row0 + 1, col1 - col0 + 1))
        for (r, c), strength in self.grid.items():
            if row0 <= r <= row1 and col0 <= c <= col1:
                heatmap[r - row0, c - col0] = strength

        return heatmap, (row0, col0)

    def reset(self):
        """Reset pheromone field to initial state"""
        self.grid.clear()
        self.total_depositions = 0
        self.step_count = 0
