import numpy as np

from nbody.forces import SOFTENING, acceleration, accelerations, pair_acceleration
from nbody.particles import allocate_particles, initialize_particles
from nbody.types import Layout


def _reference(x: np.ndarray) -> np.ndarray:
    n = x.shape[0]
    a = np.zeros_like(x)
    for k in range(n):
        for l in range(n):
            if l == k:
                continue
            d = x[k] - x[l]
            rr = float(np.dot(d, d))
            a[k] += -d / (rr * np.sqrt(rr) + SOFTENING)
    return a


def test_pair_is_antisymmetric():
    rng = np.random.default_rng(0)
    for _ in range(20):
        d = rng.uniform(-2.0, 2.0, size=3)
        fwd = np.array(pair_acceleration(d[0], d[1], d[2]))
        bwd = np.array(pair_acceleration(-d[0], -d[1], -d[2]))
        np.testing.assert_array_equal(fwd, -bwd)
        # attractive: points back toward the partner
        assert np.dot(fwd, d) < 0.0


def test_softening_on_cubed_distance():
    ax, ay, az = pair_acceleration(-1.0, 0.0, 0.0)
    assert ax == 1.0 / (1.0 + 1.0e-6)
    assert ay == 0.0 and az == 0.0


def test_single_particle_feels_nothing():
    st = allocate_particles(1)
    initialize_particles(st, np.random.default_rng(1))
    assert acceleration(st.buffer, 1, 0, st.layout.ps, st.layout.vs) == (0.0, 0.0, 0.0)


def test_coincident_particles_stay_finite():
    st = allocate_particles(2)
    st.positions()[:] = 0.25
    acc = accelerations(st.buffer, 2, st.layout.ps, st.layout.vs)
    assert np.all(np.isfinite(acc))
    np.testing.assert_array_equal(acc, 0.0)


def test_matches_reference_in_both_layouts():
    n = 16
    for layout in (Layout.aos(), Layout.soa(n)):
        st = allocate_particles(n, layout=layout)
        initialize_particles(st, np.random.default_rng(5))
        acc = accelerations(st.buffer, n, layout.ps, layout.vs)
        np.testing.assert_allclose(acc, _reference(np.array(st.positions())), rtol=1e-12)


def test_net_force_vanishes():
    n = 32
    st = allocate_particles(n)
    initialize_particles(st, np.random.default_rng(9))
    acc = accelerations(st.buffer, n, st.layout.ps, st.layout.vs)
    net = np.abs(acc.sum(axis=0)).max()
    assert net < 1e-12 * n * np.abs(acc).max()
