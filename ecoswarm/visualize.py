"""
Visualization utilities for EcoSwarm runs.

matplotlib is imported inside the plotting functions so the simulation core
never pays for it.
"""

import numpy as np
from typing import Dict, List, Optional

from .pheromone import PheromoneField

SPECIES_COLORS = {
    "ant": "#8b4513",
    "bird": "#1f77b4",
    "anteater": "#7f7f7f",
    "snake": "#2e8b57",
}


def plot_population_history(history: Dict[str, List[int]],
                            output_path: Optional[str] = None,
                            title: str = "Population"):
    """
    Plot per-species population over time.

    Args:
        history: Species name -> population per step
        output_path: Path to save figure (shown interactively if None)
        title: Axes title
    """
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(figsize=(10, 5))
    for name, series in history.items():
        if not series or max(series) == 0:
            continue
        ax.plot(np.arange(len(series)), series, label=name, color=SPECIES_COLORS.get(name))

    ax.set_xlabel("Step")
    ax.set_ylabel("Individuals")
    ax.set_title(title)
    ax.legend(loc="upper right")
    fig.tight_layout()

    if output_path:
        fig.savefig(output_path)
        plt.close(fig)
    else:
        plt.show()
    return fig


def plot_pheromone_heatmap(field: PheromoneField,
                           bounds=None,
                           output_path: Optional[str] = None,
                           ax=None):
    """
    Render the pheromone field as a heatmap in world coordinates.

    Args:
        field: Pheromone field to draw
        bounds: Optional (min_x, min_y, max_x, max_y) world window
        output_path: Path to save figure
        ax: Existing axes to draw into
    """
    import matplotlib.pyplot as plt

    heatmap, (row0, col0) = field.get_heatmap(bounds)
    cell = field.cell_size

    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 6))
    else:
        fig = ax.figure

    if heatmap.size == 0:
        ax.set_title("Pheromone (empty)")
    else:
        extent = [
            col0 * cell, (col0 + heatmap.shape[1]) * cell,
            (row0 + heatmap.shape[0]) * cell, row0 * cell,
        ]
        im = ax.imshow(heatmap, cmap="YlOrBr", vmin=0, vmax=field.max_strength,
                       extent=extent, interpolation="nearest")
        fig.colorbar(im, ax=ax, label="Strength")
        ax.set_title("Pheromone")

    ax.set_xlabel("x")
    ax.set_ylabel("y")

    if output_path:
        fig.savefig(output_path)
        plt.close(fig)
    return fig


def plot_run_summary(history: Dict[str, List[int]], field: PheromoneField,
                     output_path: Optional[str] = None):
    """Population curves next to the final pheromone field"""
    import matplotlib.pyplot as plt

    fig, axes = plt.subplots(1, 2, figsize=(14, 5))

    for name, series in history.items():
        if series and max(series) > 0:
            axes[0].plot(series, label=name, color=SPECIES_COLORS.get(name))
    axes[0].set_xlabel("Step")
    axes[0].set_ylabel("Individuals")
    axes[0].set_title("Population")
    axes[0].legend(loc="upper right")

    plot_pheromone_heatmap(field, ax=axes[1])

    fig.tight_layout()
    if output_path:
        fig.savefig(output_path)
        print(f"Saved visualization to {output_path}")
        plt.close(fig)
    else:
        plt.show()
    return fig
