"""Weighted random selection."""

from __future__ import annotations
import random
from typing import Callable, Sequence, TypeVar

T = TypeVar("T")


def weighted_choice(
    items: Sequence[T],
    weight_fn: Callable[[T], int],
    rng: random.Random,
) -> T | None:
    """
    Pick one item with probability proportional to its weight.

    Returns None for an empty sequence. When the total weight is not
    positive every item is equally likely.
    """
    if not items:
        return None

    weights = [max(weight_fn(item), 0) for item in items]
    total = sum(weights)
    if total <= 0:
        return rng.choice(items)

    roll = rng.random() * total
    for item, weight in zip(items, weights):
        roll -= weight
        if roll < 0:
            return item
    # Float rounding can leave roll at exactly 0 after the last item
    return next(item for item, weight in zip(reversed(items), reversed(weights)) if weight > 0)


def by_random_weight(entity) -> int:
    return entity.random_weight
