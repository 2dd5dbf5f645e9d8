from __future__ import annotations

import numpy as np

_generator: np.random.Generator = np.random.default_rng()


def seed_all(seed: int | None) -> None:
    """Reseed the process-wide generator used by particle initialization.

    Passing ``None`` draws fresh entropy from the OS.
    """

    global _generator
    _generator = np.random.default_rng(seed)


def default_generator() -> np.random.Generator:
    return _generator
