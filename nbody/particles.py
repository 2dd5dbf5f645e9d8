from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .errors import AllocationError
from .rng import default_generator
from .types import DIMS, VALUES_PER_PARTICLE, Layout


@dataclass
class ParticleState:
    """Flat state buffer of ``6n`` reals plus the stride pair addressing it."""

    buffer: np.ndarray
    n: int
    layout: Layout

    def __post_init__(self) -> None:
        if self.buffer.ndim != 1 or self.buffer.size != VALUES_PER_PARTICLE * self.n:
            raise ValueError(
                f"state buffer must be 1-D with {VALUES_PER_PARTICLE * self.n} values, "
                f"got shape {self.buffer.shape}"
            )

    @property
    def dtype(self) -> np.dtype:
        return self.buffer.dtype

    def _check(self, i: int, j: int) -> None:
        if not 0 <= i < self.n:
            raise IndexError(f"particle index {i} out of range [0, {self.n})")
        if not 0 <= j < DIMS:
            raise IndexError(f"component index {j} out of range [0, {DIMS})")

    def position_offset(self, i: int, j: int) -> int:
        if __debug__:
            self._check(i, j)
        return i * self.layout.ps + j * self.layout.vs

    def velocity_offset(self, i: int, j: int) -> int:
        if __debug__:
            self._check(i, j)
        return i * self.layout.ps + (DIMS + j) * self.layout.vs

    def position(self, i: int, j: int):
        return self.buffer[self.position_offset(i, j)]

    def velocity(self, i: int, j: int):
        return self.buffer[self.velocity_offset(i, j)]

    def set_position(self, i: int, j: int, value: float) -> None:
        self.buffer[self.position_offset(i, j)] = value

    def set_velocity(self, i: int, j: int, value: float) -> None:
        self.buffer[self.velocity_offset(i, j)] = value

    def _block(self, first: int) -> np.ndarray:
        # (n, 3) strided view; writes go straight to the buffer
        item = self.buffer.itemsize
        base = self.buffer[first * self.layout.vs:]
        return np.lib.stride_tricks.as_strided(
            base,
            shape=(self.n, DIMS),
            strides=(self.layout.ps * item, self.layout.vs * item),
        )

    def positions(self) -> np.ndarray:
        return self._block(0)

    def velocities(self) -> np.ndarray:
        return self._block(DIMS)

    def copy(self) -> "ParticleState":
        return ParticleState(self.buffer.copy(), self.n, self.layout)


def allocate_particles(num_particles: int, dtype: str = "float64", layout: Layout | None = None) -> ParticleState:
    """Allocate a zeroed state buffer of ``6 * num_particles`` reals.

    Defaults to the array-of-structures layout.
    """

    dt = np.float32 if dtype == "float32" else np.float64
    if layout is None:
        layout = Layout.aos()
    try:
        buffer = np.zeros(VALUES_PER_PARTICLE * num_particles, dtype=dt)
    except (MemoryError, ValueError) as exc:
        raise AllocationError(
            f"cannot allocate state for {num_particles} particles ({dtype})"
        ) from exc
    return ParticleState(buffer, num_particles, layout)


def initialize_particles(state: ParticleState, rng: np.random.Generator | None = None) -> None:
    """Uniform random positions in [-1, 1], zero velocities (in place).

    Values are drawn particle-major so a given generator yields the same
    particles regardless of layout.
    """

    if rng is None:
        rng = default_generator()
    state.positions()[:] = rng.uniform(-1.0, 1.0, size=(state.n, DIMS)).astype(state.dtype)
    state.velocities()[:] = 0.0
