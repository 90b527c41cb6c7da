"""Task selection for a session: category filtering and the one-time shuffle."""

from __future__ import annotations

import random
from typing import List, Sequence, TypeVar

from shortcut_master.core.catalog import Shortcut
from shortcut_master.core.settings import ALL_CATEGORIES

T = TypeVar("T")


def shuffle_tasks(items: Sequence[T], rng: random.Random) -> List[T]:
    """Return a Fisher-Yates shuffled copy of *items* drawn from *rng*."""
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def select_quiz_tasks(
    shortcuts: Sequence[Shortcut],
    category: str,
    count: int,
    rng: random.Random,
) -> List[Shortcut]:
    """Filter by category, shuffle once, and keep at most *count* shortcuts."""
    if category == ALL_CATEGORIES:
        pool = list(shortcuts)
    else:
        pool = [s for s in shortcuts if s.category == category]
    return shuffle_tasks(pool, rng)[: max(0, min(count, len(pool)))]
