import random
from typing import List, Optional, Sequence, Tuple

from .geometry import Metric, Point, euclidean, tour_length


# Fitness used when every edge of a tour has zero length (all points coincide).
ZERO_DISTANCE_FITNESS = 1e12


def is_valid_tour(tour: Sequence[Point], points: Sequence[Point]) -> bool:
    if len(tour) != len(points):
        return False
    return {p.index for p in tour} == {p.index for p in points}


def ordered_crossover(donor: Sequence[Point], filler: Sequence[Point], rng: random.Random) -> List[Point]:
    """Ordered crossover (OX).

    A random slice ``donor[idx1:idx2]`` is copied in place; the remaining
    slots, starting at ``idx2`` and wrapping around, are filled with the
    filler's genes in the order they appear in the filler rotated to start
    at ``idx2``.
    """
    n = len(donor)
    idx1 = rng.randint(0, n - 2)
    idx2 = rng.randint(idx1 + 1, n)
    child: List[Optional[Point]] = [None] * n
    child[idx1:idx2] = donor[idx1:idx2]
    inherited = {p.index for p in donor[idx1:idx2]}
    rotation = list(filler[idx2:]) + list(filler[:idx2])
    pos = idx2 % n
    for gene in rotation:
        if gene.index in inherited:
            continue
        child[pos] = gene
        pos = (pos + 1) % n
    assert None not in child, "ordered crossover left an empty slot"
    return child


class Individual:
    def __init__(
        self,
        chromosome: Sequence[Point],
        mutation_probability: float,
        metric: Metric = euclidean,
        rng: Optional[random.Random] = None,
    ):
        self.chromosome: List[Point] = list(chromosome)
        self.mutation_probability = mutation_probability
        self.metric = metric
        self.rng = rng or random.Random()
        self.distance = 0.0
        self.fitness = 0.0
        self.compute_fitness()

    def compute_fitness(self) -> float:
        self.distance = tour_length(self.chromosome, self.metric)
        if self.distance == 0:
            self.fitness = ZERO_DISTANCE_FITNESS
        else:
            self.fitness = 1.0 / self.distance
        return self.fitness

    def mutate(self) -> None:
        """Swap two random genes with ``mutation_probability``."""
        if len(self.chromosome) > 1 and self.rng.random() < self.mutation_probability:
            i, j = self.rng.sample(range(len(self.chromosome)), 2)
            self.chromosome[i], self.chromosome[j] = self.chromosome[j], self.chromosome[i]
        self.compute_fitness()

    def clone(self, mutation_probability: Optional[float] = None) -> "Individual":
        if mutation_probability is None:
            mutation_probability = self.mutation_probability
        return Individual(self.chromosome[:], mutation_probability, metric=self.metric, rng=self.rng)

    def mate(
        self, other: "Individual", crossover_probability: float, mutation_probability: float
    ) -> Tuple["Individual", "Individual"]:
        if self.rng.random() < crossover_probability:
            # Both children take their segment from self.
            child1 = Individual(
                ordered_crossover(self.chromosome, other.chromosome, self.rng),
                mutation_probability,
                metric=self.metric,
                rng=self.rng,
            )
            child2 = Individual(
                ordered_crossover(self.chromosome, other.chromosome, self.rng),
                mutation_probability,
                metric=self.metric,
                rng=self.rng,
            )
        else:
            child1 = self.clone(mutation_probability)
            child2 = other.clone(mutation_probability)
        child1.mutate()
        child2.mutate()
        return child1, child2

    def __repr__(self) -> str:
        order = "-".join(str(p.index) for p in self.chromosome)
        return f"Individual(distance={self.distance:.3f}, tour={order})"
