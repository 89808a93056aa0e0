from tour_ga.evaluation import generation_stats
from tour_ga.population import Population, PopulationConfig


def main():
    # Square with its center point.
    coordinates = [(0, 0), (100, 0), (100, 100), (0, 100), (50, 50)]
    cfg = PopulationConfig(
        population_size=20,
        crossover_probability=0.8,
        mutation_probability=0.05,
        elitism_rate=0.1,
        random_seed=7,
    )
    population = Population(coordinates, cfg)
    generations = 100
    for g in range(generations):
        population.advance_generation()
        if (g + 1) % 20 == 0:
            stats = generation_stats(population)
            print(f"gen {g+1}: best={stats.best_distance:.2f} avg={stats.mean_distance:.2f}")
    best = population.best()
    print("best tour:", [p.index for p in best.chromosome], f"{best.distance:.2f}")


if __name__ == "__main__":
    main()
