import math
import random
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .geometry import Metric, Point, as_points, euclidean
from .individual import Individual, is_valid_tour
from .shuffle import fisher_yates


@dataclass
class PopulationConfig:
    population_size: int = 40
    crossover_probability: float = 0.8
    mutation_probability: float = 0.05
    elitism_rate: float = 0.1
    random_seed: Optional[int] = 123

    def __post_init__(self):
        if self.population_size < 2:
            raise ValueError(f"population_size must be at least 2, got {self.population_size}")
        for name in ("crossover_probability", "mutation_probability", "elitism_rate"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {value}")

    @property
    def elite_count(self) -> int:
        return math.floor(self.elitism_rate * self.population_size)


class Population:
    """A generation of tours evolved by selection, ordered crossover and mutation.

    The population is built once per configuration; callers that change the
    points or any parameter construct a new instance.
    """

    def __init__(
        self,
        coordinates: Sequence[Union[Point, Tuple[float, float]]],
        config: Optional[PopulationConfig] = None,
        metric: Metric = euclidean,
        rng: Optional[random.Random] = None,
    ):
        self.cfg = config or PopulationConfig()
        self.coordinates: List[Point] = as_points(coordinates)
        if len(self.coordinates) < 2:
            raise ValueError(f"need at least 2 coordinates, got {len(self.coordinates)}")
        self.metric = metric
        self.rng = rng or random.Random(self.cfg.random_seed)
        self.current_generation: List[Individual] = []
        self.generation_number = 0
        self.total_fitness = 0.0
        self.initialize()

    def _individual(self, chromosome: Sequence[Point]) -> Individual:
        return Individual(chromosome, self.cfg.mutation_probability, metric=self.metric, rng=self.rng)

    def _compute_total_fitness(self) -> float:
        self.total_fitness = sum(ind.fitness for ind in self.current_generation)
        return self.total_fitness

    def initialize(self) -> None:
        self.current_generation = [
            self._individual(fisher_yates(self.coordinates, self.rng))
            for _ in range(self.cfg.population_size)
        ]
        self.generation_number = 0
        self._compute_total_fitness()

    def select_elites(self) -> List[Individual]:
        ranked = sorted(self.current_generation, key=lambda ind: ind.fitness, reverse=True)
        return ranked[: self.cfg.elite_count]

    def select_parent(self, pool: Sequence[Individual]) -> Individual:
        """Roulette-wheel draw over ``pool`` weighted by fitness."""
        threshold = self.rng.random() * self.total_fitness
        cumulative = 0.0
        for ind in pool:
            cumulative += ind.fitness
            if cumulative >= threshold:
                return ind
        # Rounding can leave the running sum just under the threshold.
        return pool[-1]

    def advance_generation(self) -> None:
        elites = self.select_elites()
        target = self.cfg.population_size - len(elites)
        offspring: List[Individual] = []
        while len(offspring) < target:
            parent1 = self.select_parent(fisher_yates(self.current_generation, self.rng))
            parent2 = self.select_parent(fisher_yates(self.current_generation, self.rng))
            offspring.extend(
                parent1.mate(parent2, self.cfg.crossover_probability, self.cfg.mutation_probability)
            )
        del offspring[target:]
        self.current_generation = elites + offspring
        assert len(self.current_generation) == self.cfg.population_size
        self.generation_number += 1
        self._compute_total_fitness()

    # Alias used by render loops that think in terms of steps.
    step = advance_generation

    def best(self) -> Individual:
        return min(self.current_generation, key=lambda ind: ind.distance)

    def is_consistent(self) -> bool:
        return len(self.current_generation) == self.cfg.population_size and all(
            is_valid_tour(ind.chromosome, self.coordinates) for ind in self.current_generation
        )

    def to_state(self) -> Dict:
        version, internal, gauss_next = self.rng.getstate()
        return {
            "cfg": asdict(self.cfg),
            "generation": self.generation_number,
            "coordinates": [[p.x, p.y] for p in self.coordinates],
            "population": [[p.index for p in ind.chromosome] for ind in self.current_generation],
            "rng_state": [version, list(internal), gauss_next],
        }

    @classmethod
    def from_state(cls, state: Dict, metric: Optional[Metric] = None) -> "Population":
        cfg = PopulationConfig(**state["cfg"])
        pop = cls(state["coordinates"], cfg, metric=metric or euclidean)
        tours = state.get("population", [])
        n = len(pop.coordinates)
        if tours and (
            len(tours) != cfg.population_size or any(sorted(tour) != list(range(n)) for tour in tours)
        ):
            raise ValueError(
                f"saved population must hold {cfg.population_size} permutations of {n} points"
            )
        if tours:
            pop.current_generation = [
                pop._individual([pop.coordinates[i] for i in tour]) for tour in tours
            ]
        pop.generation_number = state.get("generation", 0)
        rng_state = state.get("rng_state")
        if rng_state:
            version, internal, gauss_next = rng_state
            pop.rng.setstate((version, tuple(internal), gauss_next))
        pop._compute_total_fitness()
        return pop
