import random

import pytest

from tour_ga.geometry import as_points


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def square_with_center():
    return as_points([(0, 0), (100, 0), (100, 100), (0, 100), (50, 50)])


@pytest.fixture
def random_points():
    r = random.Random(5)
    return as_points((r.uniform(0, 500), r.uniform(0, 500)) for _ in range(12))
