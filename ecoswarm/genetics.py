"""
EcoSwarm Genetics
=================
Bounded trait genes and the mutation operator.

A gene is a triple (speed, perception, size). Mutation perturbs each field
independently by a relative amount and clamps it back into the field's
declared range:

    g' = clip(g * (1 + U(-amount, amount)), lo, hi)   with probability rate
    g' = g                                             otherwise
"""

import numpy as np
from typing import Dict, Optional, Tuple
from dataclasses import dataclass

from .config import GeneticsConfig, SimulationConfig, Species

GENE_FIELDS = ("speed", "perception", "size")


@dataclass(frozen=True)
class Gene:
    """Heritable trait triple"""
    speed: float
    perception: float
    size: float

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.speed, self.perception, self.size)


@dataclass(frozen=True)
class GeneBounds:
    """Per-field [min, max] ranges"""
    speed: Tuple[float, float] = (0.5, 15.0)
    perception: Tuple[float, float] = (10.0, 200.0)
    size: Tuple[float, float] = (0.3, 10.0)

    @classmethod
    def from_config(cls, config: GeneticsConfig) -> 'GeneBounds':
        return cls(
            speed=tuple(config.speed_bounds),
            perception=tuple(config.perception_bounds),
            size=tuple(config.size_bounds),
        )

    def clamp(self, gene: Gene) -> Gene:
        """Clamp every field of a gene into bounds"""
        return Gene(
            speed=float(np.clip(gene.speed, *self.speed)),
            perception=float(np.clip(gene.perception, *self.perception)),
            size=float(np.clip(gene.size, *self.size)),
        )

    def contains(self, gene: Gene) -> bool:
        return all(
            getattr(self, name)[0] <= getattr(gene, name) <= getattr(self, name)[1]
            for name in GENE_FIELDS
        )


DEFAULT_BOUNDS = GeneBounds()


def mutate(gene: Gene,
           rate: float,
           amount: float,
           bounds: Optional[GeneBounds] = None,
           rng: Optional[np.random.Generator] = None) -> Gene:
    """
    Mutate a gene field by field.

    Args:
        gene: Parent gene
        rate: Probability that each field mutates
        amount: Maximum relative perturbation
        bounds: Per-field clamp ranges (default: GeneBounds())
        rng: Random generator (default: fresh unseeded generator)

    Returns:
        New gene; the input is left untouched
    """
    if bounds is None:
        bounds = DEFAULT_BOUNDS
    if rng is None:
        rng = np.random.default_rng()

    values = {}
    for name in GENE_FIELDS:
        value = getattr(gene, name)
        if rng.random() < rate:
            change = rng.uniform(-amount, amount)
            lo, hi = getattr(bounds, name)
            value = float(np.clip(value * (1.0 + change), lo, hi))
        values[name] = value

    return Gene(**values)


def default_gene(species: Species, config: SimulationConfig) -> Gene:
    """Base gene of a species from the constant table"""
    speed, perception, size = config.species[species].base_gene
    return Gene(speed=speed, perception=perception, size=size)


def crossover(gene_a: Gene, gene_b: Gene,
              rng: Optional[np.random.Generator] = None) -> Gene:
    """Uniform crossover: each field picked from either parent with p=0.5"""
    if rng is None:
        rng = np.random.default_rng()
    return Gene(**{
        name: getattr(gene_a, name) if rng.random() < 0.5 else getattr(gene_b, name)
        for name in GENE_FIELDS
    })


def fitness(gene: Gene, species: Species, config: SimulationConfig) -> float:
    """
    Weighted trait score relative to the species base gene.

    Only used to observe evolutionary drift; selection itself is implicit
    (energy-gated reproduction).
    """
    base = default_gene(species, config)
    weights = config.species[species].fitness_weights
    return float(sum(
        w * getattr(gene, name) / getattr(base, name)
        for w, name in zip(weights, GENE_FIELDS)
    ))


def format_gene(gene: Gene) -> Dict[str, str]:
    return {name: f"{getattr(gene, name):.2f}" for name in GENE_FIELDS}

