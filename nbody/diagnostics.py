from __future__ import annotations

import numpy as np

from .particles import ParticleState

# All particles carry unit mass.


def total_momentum(state: ParticleState) -> np.ndarray:
    return np.sum(state.velocities().astype(np.float64), axis=0)


def center_of_mass(state: ParticleState) -> np.ndarray:
    return np.mean(state.positions().astype(np.float64), axis=0)


def kinetic_energy(state: ParticleState) -> float:
    v = state.velocities().astype(np.float64)
    return float(0.5 * np.sum(v * v))


def potential_energy(state: ParticleState) -> float:
    """Unsoftened pairwise potential, -sum_{k<l} 1/|r_k - r_l| (G = 1)."""

    r = state.positions().astype(np.float64)
    n = r.shape[0]
    if n < 2:
        return 0.0
    d = r[:, None, :] - r[None, :, :]
    dist = np.sqrt(np.sum(d * d, axis=2))
    iu = np.triu_indices(n, k=1)
    return float(-np.sum(1.0 / dist[iu]))


def total_energy(state: ParticleState) -> float:
    return kinetic_energy(state) + potential_energy(state)
