"""
Genetic algorithm for approximating traveling salesman tours over 2D points.
"""

from .geometry import GraphMetric, Point, as_points, euclidean, tour_length
from .individual import Individual, ordered_crossover
from .population import Population, PopulationConfig

__all__ = [
    "GraphMetric",
    "Point",
    "as_points",
    "euclidean",
    "tour_length",
    "Individual",
    "ordered_crossover",
    "Population",
    "PopulationConfig",
    "data",
    "evaluation",
]
