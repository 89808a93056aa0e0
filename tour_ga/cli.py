import argparse
import json
import time
from pathlib import Path
from typing import Optional

from tour_ga.data import Instance, load_instance, load_points_csv
from tour_ga.evaluation import generation_stats
from tour_ga.population import Population, PopulationConfig


CHECKPOINT_PATH = Path("checkpoints/population_state.json")


def log(msg: str) -> None:
    ts = time.strftime("%H:%M:%S")
    print(f"[{ts}] {msg}", flush=True)


def save_checkpoint(population: Population, path: Path = CHECKPOINT_PATH, source: Optional[str] = None) -> None:
    state = population.to_state()
    state["source"] = source
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(state, indent=2))


def load_checkpoint(instance: Instance, path: Path = CHECKPOINT_PATH) -> Population:
    state = json.loads(path.read_text())
    source = state.get("source")
    saved = len(state.get("coordinates", []))
    if source != str(instance.path) or saved != len(instance.points):
        raise RuntimeError(
            f"{path} was saved for {source} ({saved} points), not {instance.path} "
            f"({len(instance.points)} points); drop --resume to start a new population."
        )
    return Population.from_state(state, metric=instance.metric)


def _load_source(args) -> Instance:
    if args.tsp:
        instance = load_instance(Path(args.tsp))
    else:
        instance = load_points_csv(Path(args.points))
    if len(instance.points) < 2:
        raise RuntimeError(
            f"{instance.path} has {len(instance.points)} points; supply at least 2 coordinates."
        )
    return instance


def _print_generation(population: Population, optimum: Optional[float]) -> None:
    stats = generation_stats(population, optimum)
    gap = "n/a" if stats.gap == float("inf") else f"{stats.gap:.2%}"
    print(
        f"gen {stats.generation}: best={stats.best_distance:.2f} "
        f"avg={stats.mean_distance:.2f} worst={stats.worst_distance:.2f} gap={gap}"
    )


def run(args) -> None:
    t0 = time.perf_counter()
    instance = _load_source(args)
    log(f"loaded {instance.name} ({len(instance.points)} points) in {time.perf_counter() - t0:.2f}s")
    checkpoint = Path(args.checkpoint)
    if args.resume and checkpoint.exists():
        log(f"resuming from {checkpoint}")
        population = load_checkpoint(instance, checkpoint)
    else:
        cfg = PopulationConfig(
            population_size=args.population_size,
            crossover_probability=args.crossover,
            mutation_probability=args.mutation,
            elitism_rate=args.elitism,
            random_seed=args.seed,
        )
        population = Population(instance.points, cfg, metric=instance.metric)
        log("starting new population")
    _print_generation(population, instance.optimum)
    try:
        for _ in range(args.generations):
            population.advance_generation()
            if population.generation_number % max(1, args.report_every) == 0:
                _print_generation(population, instance.optimum)
    except KeyboardInterrupt:
        log("interrupted")
    best = population.best()
    log(f"best tour after {population.generation_number} generations: {best.distance:.2f}")
    print(" ".join(str(p.index) for p in best.chromosome))
    save_checkpoint(population, checkpoint, source=str(instance.path))
    log(f"checkpoint saved to {checkpoint}")


def data(args) -> None:
    checkpoint = Path(args.checkpoint)
    if not checkpoint.exists():
        print("No checkpoint found; run `tour-ga run` first.")
        return
    state = json.loads(checkpoint.read_text())
    metric = None
    source = state.get("source")
    if source and Path(source).suffix == ".tsp" and Path(source).exists():
        metric = load_instance(Path(source)).metric
    population = Population.from_state(state, metric=metric)
    stats = generation_stats(population)
    print(
        f"generation={stats.generation}, size={len(population.current_generation)}, "
        f"best={stats.best_distance:.2f}, avg={stats.mean_distance:.2f}, "
        f"total_fitness={stats.total_fitness:.6g}"
    )
    print(f"config: {state['cfg']}")
    print("best tour: " + " ".join(str(p.index) for p in population.best().chromosome))


def main():
    parser = argparse.ArgumentParser(description="Genetic algorithm TSP CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Evolve tours for a TSPLIB instance or a CSV of points")
    source = run_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--tsp", help="TSPLIB .tsp file")
    source.add_argument("--points", help="CSV file of x,y rows")
    run_parser.add_argument("--generations", type=int, default=100)
    run_parser.add_argument("--population-size", type=int, default=40)
    run_parser.add_argument("--crossover", type=float, default=0.8)
    run_parser.add_argument("--mutation", type=float, default=0.05)
    run_parser.add_argument("--elitism", type=float, default=0.1)
    run_parser.add_argument("--seed", type=int, default=123)
    run_parser.add_argument("--report-every", type=int, default=10)
    run_parser.add_argument("--checkpoint", default=str(CHECKPOINT_PATH))
    run_parser.add_argument("--resume", action="store_true")
    run_parser.set_defaults(func=run)

    data_parser = subparsers.add_parser("data", help="Inspect current checkpoint")
    data_parser.add_argument("--checkpoint", default=str(CHECKPOINT_PATH))
    data_parser.set_defaults(func=data)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
