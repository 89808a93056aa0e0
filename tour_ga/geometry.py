import math
from dataclasses import dataclass
from typing import Callable, Hashable, Iterable, List, Sequence, Tuple, Union

import networkx as nx


@dataclass(frozen=True)
class Point:
    index: int
    x: float
    y: float


Metric = Callable[[Point, Point], float]


def as_points(coordinates: Iterable[Union[Point, Tuple[float, float]]]) -> List[Point]:
    points = []
    for i, c in enumerate(coordinates):
        if isinstance(c, Point):
            x, y = c.x, c.y
        else:
            x, y = c
        points.append(Point(i, float(x), float(y)))
    return points


def euclidean(a: Point, b: Point) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


class GraphMetric:
    """Edge weights of a complete networkx graph, addressed by point index."""

    def __init__(self, graph: nx.Graph, nodes: Sequence[Hashable]):
        self.graph = graph
        self.nodes = list(nodes)

    def __call__(self, a: Point, b: Point) -> float:
        if a.index == b.index:
            return 0.0
        u = self.nodes[a.index]
        v = self.nodes[b.index]
        return float(self.graph[u][v]["weight"])


def tour_length(tour: Sequence[Point], metric: Metric = euclidean) -> float:
    dist = 0.0
    n = len(tour)
    for i in range(n):
        a = tour[i]
        b = tour[(i + 1) % n]
        dist += metric(a, b)
    return float(dist)
