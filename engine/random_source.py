"""Injectable randomness for the draw: uniform shuffle and uniform pick."""

import random
import secrets
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")


class RandomSource:
    """Seedable random source used for every ordering and pick in a draw.

    The seed is always known (drawn from the OS when not supplied) and is
    stored on the session, so any draw can be replayed exactly.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self.seed = seed if seed is not None else secrets.randbits(32)
        self._rng = random.Random(self.seed)

    def shuffle(self, items: Sequence[T]) -> List[T]:
        """Return a uniformly shuffled copy (Fisher-Yates); the input is untouched."""
        shuffled = list(items)
        self._rng.shuffle(shuffled)
        return shuffled

    def pick(self, items: Sequence[T]) -> Optional[T]:
        """Uniformly pick one element, or None when empty."""
        if not items:
            return None
        return items[self._rng.randrange(len(items))]
