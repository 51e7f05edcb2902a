"""Random lowercase tokens used as stream content."""

import random
import string


class WordGenerator:
    """Callable source of pseudo-random lowercase words.

    Pass a seeded ``random.Random`` for reproducible output.
    """

    def __init__(self, min_length: int = 3, max_length: int = 10, rng: random.Random | None = None):
        if min_length < 1:
            raise ValueError("min_length must be at least 1")
        if min_length > max_length:
            raise ValueError("min_length must not exceed max_length")
        self.min_length = min_length
        self.max_length = max_length
        self._rng = rng or random.Random()

    def __call__(self) -> str:
        length = self._rng.randint(self.min_length, self.max_length)
        return "".join(self._rng.choice(string.ascii_lowercase) for _ in range(length))
