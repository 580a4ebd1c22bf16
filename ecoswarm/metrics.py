"""
Metrics Collection
==================
Per-tick population, energy and genetic drift metrics.

Tracks the emergent dynamics of a run rather than raw agent state:
- Population per species (boom/bust cycles)
- Mean energy per species
- Mean gene per species (evolutionary drift)
- Pheromone trail extent
- Colony food economy
"""

import json
import time
import numpy as np
from pathlib import Path
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, asdict

from .config import Species
from .genetics import GENE_FIELDS, fitness
from .lifecycle import mean_generation


@dataclass
class StepMetrics:
    """Metrics collected at each simulation step"""
    step: int
    timestamp: float

    # Populations
    population: Dict[str, int]
    n_alive: int

    # Energy and genetics
    mean_energy: Dict[str, float]
    mean_gene: Dict[str, Dict[str, float]]
    mean_fitness: Dict[str, float]
    mean_generation: float
    max_generation: int

    # Stigmergy
    pheromone_active_cells: int
    pheromone_total_strength: float

    # Resources
    food_count: int
    nest_food: int

    # Cumulative events
    births: int = 0
    deaths: int = 0
    kills: int = 0
    nest_spawns: int = 0


class MetricsCollector:
    """
    Collect StepMetrics from a running Simulation and summarize a run.
    """

    def __init__(self, scenario_name: str = "default", seed: Optional[int] = None):
        self.scenario_name = scenario_name
        self.seed = seed
        self.start_time = time.time()
        self.end_time = 0.0
        self.step_metrics: List[StepMetrics] = []

    def collect_step(self, sim) -> StepMetrics:
        """Record metrics for the simulation's current tick"""
        stats = sim.get_statistics()
        alive = [a for a in sim.agents if a.alive]

        mean_energy = {}
        mean_gene = {}
        mean_fitness = {}
        for species in Species:
            members = [a for a in alive if a.species == species]
            if not members:
                continue
            mean_energy[species.value] = float(np.mean([a.energy for a in members]))
            genes = np.array([a.gene.as_tuple() for a in members])
            mean_gene[species.value] = {
                name: float(value) for name, value in zip(GENE_FIELDS, genes.mean(axis=0))
            }
            mean_fitness[species.value] = float(np.mean(
                [fitness(a.gene, species, sim.config) for a in members]
            ))

        pheromone = stats["pheromone"]
        metric = StepMetrics(
            step=stats["tick"],
            timestamp=time.time() - self.start_time,
            population=dict(stats["population"]),
            n_alive=len(alive),
            mean_energy=mean_energy,
            mean_gene=mean_gene,
            mean_fitness=mean_fitness,
            mean_generation=mean_generation(alive),
            max_generation=stats["max_generation"],
            pheromone_active_cells=int(pheromone["active_cells"]),
            pheromone_total_strength=float(pheromone["total_strength"]),
            food_count=stats["food"],
            nest_food=stats["nest_food"],
            births=stats["births"],
            deaths=stats["deaths"],
            kills=stats["kills"],
            nest_spawns=stats["nest_spawns"],
        )
        self.step_metrics.append(metric)
        return metric

    def finalize(self):
        self.end_time = time.time()

    def population_history(self) -> Dict[str, List[int]]:
        """Per-species population series, one entry per collected step"""
        history = {species.value: [] for species in Species}
        for m in self.step_metrics:
            for name in history:
                history[name].append(m.population.get(name, 0))
        return history

    def summary(self) -> Dict[str, Any]:
        """Derived statistics over the whole run"""
        if not self.step_metrics:
            return {"n_steps": 0}

        history = self.population_history()
        last = self.step_metrics[-1]

        return {
            "n_steps": len(self.step_metrics),
            "final_population": dict(last.population),
            "peak_population": {name: max(series) for name, series in history.items()},
            "mean_population": {name: float(np.mean(series)) for name, series in history.items()},
            "extinct": [name for name, series in history.items()
                        if max(series) > 0 and series[-1] == 0],
            "max_generation": max(m.max_generation for m in self.step_metrics),
            "peak_pheromone_cells": max(m.pheromone_active_cells for m in self.step_metrics),
            "births": last.births,
            "deaths": last.deaths,
            "kills": last.kills,
            "nest_spawns": last.nest_spawns,
            "final_mean_gene": last.mean_gene,
            "final_mean_fitness": last.mean_fitness,
        }

    def to_dict(self, include_steps: bool = False) -> Dict[str, Any]:
        """Export metrics as dictionary"""
        end = self.end_time or time.time()
        result = {
            "scenario": self.scenario_name,
            "seed": self.seed,
            "duration": end - self.start_time,
            "summary": self.summary(),
        }
        if include_steps:
            result["steps"] = [asdict(m) for m in self.step_metrics]
        return result

    def save(self, path: Path, include_steps: bool = False):
        """Save metrics to a JSON file"""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(self.to_dict(include_steps), f, indent=2)
