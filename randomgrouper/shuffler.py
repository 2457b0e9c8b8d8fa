import random
from typing import Sequence, TypeVar

T = TypeVar("T")


def shuffle(sequence: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """Return a uniformly shuffled copy of sequence; the input is left untouched."""
    rng = rng or random
    items = list(sequence)
    # Fisher-Yates, walking down from the end
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items
