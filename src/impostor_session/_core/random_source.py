# Area: Core
"""
impostor_session._core.random_source — Seedable random selection
=================================================================

Word pair, impostor and speaking order are drawn through a RandomSource
so tests can pin the outcome with a seed. Fairness is the requirement,
not unpredictability, so the standard Mersenne Twister is enough.
"""

import random
from typing import List, Optional, Protocol, Sequence, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    """Protocol for the random selections the core makes."""

    def randrange(self, stop: int) -> int:
        """Return a uniform integer in ``[0, stop)``."""
        ...

    def choice(self, items: Sequence[T]) -> T:
        """Return one uniformly chosen element."""
        ...

    def permutation(self, items: Sequence[T]) -> List[T]:
        """Return a uniformly random permutation as a new list."""
        ...


class SeededRandom:
    """RandomSource backed by ``random.Random``."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._random = random.Random(seed)

    def randrange(self, stop: int) -> int:
        return self._random.randrange(stop)

    def choice(self, items: Sequence[T]) -> T:
        return self._random.choice(items)

    def permutation(self, items: Sequence[T]) -> List[T]:
        return self._random.sample(list(items), len(items))
