import math
import random

import pytest

from tour_ga.geometry import as_points
from tour_ga.individual import Individual
from tour_ga.population import Population, PopulationConfig


@pytest.mark.parametrize(
    "kwargs",
    [
        {"population_size": 1},
        {"population_size": 0},
        {"crossover_probability": 1.5},
        {"mutation_probability": -0.1},
        {"elitism_rate": 1.01},
    ],
)
def test_config_rejects_out_of_range_values(kwargs):
    with pytest.raises(ValueError):
        PopulationConfig(**kwargs)


@pytest.mark.parametrize("coords", [[], [(0, 0)]])
def test_population_needs_two_coordinates(coords):
    with pytest.raises(ValueError):
        Population(coords, PopulationConfig(population_size=4))


def test_elite_count_floors():
    assert PopulationConfig(population_size=20, elitism_rate=0.1).elite_count == 2
    assert PopulationConfig(population_size=5, elitism_rate=0.5).elite_count == 2
    assert PopulationConfig(population_size=2, elitism_rate=1.0).elite_count == 2
    assert PopulationConfig(population_size=10, elitism_rate=0.0).elite_count == 0


def test_initialize_builds_valid_generation(random_points):
    pop = Population(random_points, PopulationConfig(population_size=15, random_seed=1))
    assert pop.generation_number == 0
    assert len(pop.current_generation) == 15
    assert pop.is_consistent()
    assert pop.total_fitness == pytest.approx(sum(i.fitness for i in pop.current_generation))


def test_size_holds_across_generations_with_odd_target(random_points):
    # 11 - floor(0.1 * 11) = 10 bred, 9 - 0 = 9 bred (odd, needs truncation).
    for size, rate in ((11, 0.1), (9, 0.0), (7, 0.3)):
        pop = Population(random_points, PopulationConfig(population_size=size, elitism_rate=rate, random_seed=size))
        for gen in range(1, 21):
            pop.advance_generation()
            assert len(pop.current_generation) == size
            assert pop.generation_number == gen
            assert pop.is_consistent()
            assert pop.total_fitness == pytest.approx(sum(i.fitness for i in pop.current_generation))


def test_select_elites_returns_fittest(random_points):
    pop = Population(random_points, PopulationConfig(population_size=10, elitism_rate=0.3, random_seed=2))
    elites = pop.select_elites()
    ranked = sorted(pop.current_generation, key=lambda i: i.fitness, reverse=True)
    assert elites == ranked[:3]


def test_elites_survive_by_reference(random_points):
    pop = Population(random_points, PopulationConfig(population_size=10, elitism_rate=0.2, mutation_probability=1.0, random_seed=3))
    elites = pop.select_elites()
    chromosomes = [list(e.chromosome) for e in elites]
    pop.advance_generation()
    assert pop.current_generation[:2] == elites
    assert [e.chromosome for e in pop.current_generation[:2]] == chromosomes


def test_best_distance_never_regresses_with_elitism(random_points):
    pop = Population(random_points, PopulationConfig(population_size=20, elitism_rate=0.1, mutation_probability=0.2, random_seed=4))
    best = pop.best().distance
    for _ in range(60):
        pop.advance_generation()
        current = pop.best().distance
        assert current <= best + 1e-9
        best = current


def test_full_elitism_freezes_population(square_with_center):
    pop = Population(square_with_center, PopulationConfig(population_size=2, elitism_rate=1.0, random_seed=5))
    members = set(map(id, pop.current_generation))
    tours = sorted(tuple(p.index for p in i.chromosome) for i in pop.current_generation)
    for _ in range(10):
        pop.advance_generation()
        assert set(map(id, pop.current_generation)) == members
        assert sorted(tuple(p.index for p in i.chromosome) for i in pop.current_generation) == tours
    assert pop.generation_number == 10


def test_square_with_center_reaches_optimum(square_with_center):
    cfg = PopulationConfig(
        population_size=20,
        crossover_probability=0.8,
        mutation_probability=0.05,
        elitism_rate=0.1,
        random_seed=7,
    )
    pop = Population(square_with_center, cfg)
    initial_best = pop.best().distance
    for _ in range(100):
        pop.advance_generation()
    optimal = 300 + 2 * math.hypot(50, 50)
    assert pop.best().distance <= initial_best
    assert pop.best().distance == pytest.approx(optimal)


def test_roulette_selection_is_fitness_proportional():
    pts = as_points([(0, 0), (1, 0), (1, 1), (0, 1)])
    pop = Population(pts, PopulationConfig(population_size=4, random_seed=8))
    tours = [
        [pts[0], pts[1], pts[2], pts[3]],
        [pts[0], pts[2], pts[1], pts[3]],
        [pts[0], pts[1], pts[3], pts[2]],
        [pts[0], pts[3], pts[2], pts[1]],
    ]
    pop.current_generation = [Individual(t, 0.0, rng=pop.rng) for t in tours]
    pop.total_fitness = sum(i.fitness for i in pop.current_generation)
    draws = 40000
    counts = {id(i): 0 for i in pop.current_generation}
    for _ in range(draws):
        counts[id(pop.select_parent(pop.current_generation))] += 1
    for ind in pop.current_generation:
        expected = ind.fitness / pop.total_fitness
        assert counts[id(ind)] / draws == pytest.approx(expected, abs=0.015)


def test_same_seed_same_run(random_points):
    runs = []
    for _ in range(2):
        pop = Population(random_points, PopulationConfig(population_size=12, random_seed=99))
        for _ in range(15):
            pop.advance_generation()
        runs.append([[p.index for p in i.chromosome] for i in pop.current_generation])
    assert runs[0] == runs[1]


def test_injected_rng_is_used(random_points):
    a = Population(random_points, PopulationConfig(population_size=6, random_seed=None), rng=random.Random(1))
    b = Population(random_points, PopulationConfig(population_size=6, random_seed=None), rng=random.Random(1))
    assert [i.chromosome for i in a.current_generation] == [i.chromosome for i in b.current_generation]


def test_initialize_resets_generation(random_points):
    pop = Population(random_points, PopulationConfig(population_size=6, random_seed=3))
    pop.advance_generation()
    pop.step()
    assert pop.generation_number == 2
    pop.initialize()
    assert pop.generation_number == 0
    assert len(pop.current_generation) == 6


def test_state_round_trip_continues_identically(random_points):
    pop = Population(random_points, PopulationConfig(population_size=10, random_seed=12))
    for _ in range(5):
        pop.advance_generation()
    restored = Population.from_state(pop.to_state())
    assert restored.generation_number == 5
    assert restored.total_fitness == pytest.approx(pop.total_fitness)
    for _ in range(5):
        pop.advance_generation()
        restored.advance_generation()
    assert [[p.index for p in i.chromosome] for i in restored.current_generation] == [
        [p.index for p in i.chromosome] for i in pop.current_generation
    ]


@pytest.mark.parametrize(
    "damage",
    [
        lambda tours: tours.pop(),
        lambda tours: tours[0].__setitem__(0, tours[0][1]),
        lambda tours: tours[0].append(99),
    ],
)
def test_from_state_rejects_damaged_population(random_points, damage):
    state = Population(random_points, PopulationConfig(population_size=6, random_seed=4)).to_state()
    damage(state["population"])
    with pytest.raises(ValueError):
        Population.from_state(state)
