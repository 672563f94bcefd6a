"""
Injectable, seedable random source shared by randomized strategies.
"""

import random
import threading
from typing import Any, Optional, Sequence, TypeVar

from .errors import InvalidArgumentError


T = TypeVar("T")


class RandomSource:
    """
    Thread-safe wrapper around ``random.Random``.

    Every draw holds a lock so one configuration can be used from several
    threads without corrupting the generator state.
    """

    __slots__ = ("_rng", "_lock", "seed")

    def __init__(self, seed: Optional[int] = None):
        if seed is None:
            seed = random.randint(0, 2**31 - 1)
        self.seed = seed
        self._rng = random.Random(seed)
        self._lock = threading.Lock()

    def randint(self, low: int, high: int) -> int:
        with self._lock:
            return self._rng.randint(low, high)

    def uniform(self, low: float, high: float) -> float:
        with self._lock:
            return self._rng.uniform(low, high)

    def random(self) -> float:
        with self._lock:
            return self._rng.random()

    def choice(self, options: Sequence[T]) -> T:
        with self._lock:
            return self._rng.choice(options)

    def getrandbits(self, bits: int) -> int:
        with self._lock:
            return self._rng.getrandbits(bits)

    def randbytes(self, size: int) -> bytes:
        with self._lock:
            return self._rng.randbytes(size)

    def fork(self) -> "RandomSource":
        """Derive an independent source seeded from this one."""
        return RandomSource(self.randint(0, 2**31 - 1))

    def __repr__(self) -> str:
        return f"RandomSource(seed={self.seed})"


def coerce_random_source(value: Any) -> RandomSource:
    """Accept a ``RandomSource``, an int seed or ``None``."""
    if isinstance(value, RandomSource):
        return value
    if value is None or isinstance(value, int):
        return RandomSource(value)
    raise InvalidArgumentError(
        f"Expected RandomSource or int seed, got {type(value).__name__}",
        "random_source",
    )
