from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

import networkx as nx
import numpy as np
import tsplib95

from .geometry import GraphMetric, Metric, Point, as_points, euclidean


@dataclass
class Instance:
    name: str
    path: Path
    points: List[Point]
    metric: Metric
    graph: Optional[nx.Graph] = None
    optimum: Optional[float] = None


def _solution_candidates(path: Path) -> Iterable[Path]:
    yield path.with_suffix(".opt.tour")
    for ext in (".opt.tour", ".opt", ".tour"):
        yield path.parent / "solutions" / f"{path.stem}{ext}"


def _load_optimum(problem, path: Path) -> Optional[float]:
    for candidate in _solution_candidates(path):
        if not candidate.exists():
            continue
        try:
            tour_file = tsplib95.parse(candidate.read_text())
            nodes = list(tour_file.tours[0])
            dist = sum(problem.get_weight(a, b) for a, b in zip(nodes, nodes[1:] + nodes[:1]))
        except Exception:
            continue
        return float(dist)
    return None


def load_instance(path: Path) -> Instance:
    path = Path(path)
    problem = tsplib95.load(path)
    nodes = list(problem.get_nodes())
    coords = problem.node_coords or problem.display_data or {}
    points = as_points(tuple(coords.get(n, (0.0, 0.0)))[:2] for n in nodes)
    graph = problem.get_graph()
    return Instance(
        name=problem.name or path.stem,
        path=path,
        points=points,
        metric=GraphMetric(graph, nodes),
        graph=graph,
        optimum=_load_optimum(problem, path),
    )


def load_points_csv(path: Path) -> Instance:
    """Read ``x,y`` rows; lines starting with ``#`` are ignored."""
    path = Path(path)
    rows = np.loadtxt(path, delimiter=",", comments="#", ndmin=2)
    points = as_points((float(row[0]), float(row[1])) for row in rows)
    return Instance(name=path.stem, path=path, points=points, metric=euclidean)
