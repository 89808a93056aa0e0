import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .population import Population


@dataclass
class GenerationStats:
    generation: int
    best_distance: float
    mean_distance: float
    worst_distance: float
    total_fitness: float
    gap: float


def relative_gap(length: float, optimum: Optional[float]) -> float:
    if optimum is None or math.isclose(optimum, 0.0):
        return float("inf")
    return (length - optimum) / optimum


def generation_stats(population: Population, optimum: Optional[float] = None) -> GenerationStats:
    distances = np.array([ind.distance for ind in population.current_generation], dtype=float)
    best = float(distances.min())
    return GenerationStats(
        generation=population.generation_number,
        best_distance=best,
        mean_distance=float(distances.mean()),
        worst_distance=float(distances.max()),
        total_fitness=float(population.total_fitness),
        gap=relative_gap(best, optimum),
    )
