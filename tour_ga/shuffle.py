import random
from typing import List, Sequence, TypeVar


T = TypeVar("T")


def fisher_yates(items: Sequence[T], rng: random.Random) -> List[T]:
    """Return a shuffled copy of ``items``; the input is left untouched."""
    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = rng.randint(0, i)
        out[i], out[j] = out[j], out[i]
    return out
