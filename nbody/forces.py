from __future__ import annotations

import numpy as np
from numba import njit, prange

G = 1.0
SOFTENING = 1.0e-6


@njit(["float32(float64, float32)", "float64(float64, float64)"], cache=True)
def as_real(value, like):
    """``value`` rounded to the precision of ``like``."""

    return value


@njit(["float32(float32)", "float64(float64)"], cache=True)
def force_factor(rr):
    """``-G / (rr*sqrt(rr) + eps)`` rounded to the precision of ``rr``.

    The softening is added to the cubed distance, not to ``rr`` before the
    power. The sum and quotient are formed in double precision.
    """

    return -G / (rr * np.sqrt(rr) + SOFTENING)


@njit(cache=True)
def pair_acceleration(dx: float, dy: float, dz: float):
    """Acceleration on a particle separated by (dx, dy, dz) from its partner."""

    rr = dx * dx + dy * dy + dz * dz
    f = force_factor(rr)
    return f * dx, f * dy, f * dz


@njit(cache=True)
def acceleration(states: np.ndarray, n: int, k: int, ps: int, vs: int):
    """Net softened gravitational acceleration on particle k (read only).

    Sums are kept in the buffer's precision.
    """

    xk = states[k * ps]
    yk = states[k * ps + vs]
    zk = states[k * ps + 2 * vs]
    ax = as_real(0.0, xk)
    ay = as_real(0.0, xk)
    az = as_real(0.0, xk)
    for l in range(n):
        if l == k:
            continue
        fx, fy, fz = pair_acceleration(
            xk - states[l * ps],
            yk - states[l * ps + vs],
            zk - states[l * ps + 2 * vs],
        )
        ax += fx
        ay += fy
        az += fz
    return ax, ay, az


@njit(parallel=True, cache=True)
def accelerations(states: np.ndarray, n: int, ps: int, vs: int) -> np.ndarray:
    """Accelerations of all particles as an (n, 3) float64 array."""

    out = np.empty((n, 3), dtype=np.float64)
    for k in prange(n):
        ax, ay, az = acceleration(states, n, k, ps, vs)
        out[k, 0] = ax
        out[k, 1] = ay
        out[k, 2] = az
    return out
