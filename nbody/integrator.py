from __future__ import annotations

import enum
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np
from numba import njit, prange

from .diagnostics import total_energy, total_momentum
from .errors import ComputeDispatchError, ConfigurationError, NbodyError
from .forces import acceleration
from .particles import ParticleState
from .snapshot import SnapshotWriter


@njit(parallel=True, cache=True)
def drift(states: np.ndarray, n: int, ps: int, vs: int, h: float) -> None:
    """Advance positions by h * velocity (in-place)."""

    for k in prange(n):
        for l in range(3):
            states[k * ps + l * vs] += h * states[k * ps + (l + 3) * vs]


@njit(parallel=True, cache=True)
def kick(states: np.ndarray, n: int, ps: int, vs: int, dt: float) -> None:
    """Advance velocities by dt * acceleration (in-place).

    Every iteration reads all positions and writes only its own velocity
    slots, so positions must not change while this runs.
    """

    for k in prange(n):
        ax, ay, az = acceleration(states, n, k, ps, vs)
        states[k * ps + 3 * vs] += dt * ax
        states[k * ps + 4 * vs] += dt * ay
        states[k * ps + 5 * vs] += dt * az


class Phase(enum.Enum):
    DRIFT1 = "drift1"
    KICK = "kick"
    DRIFT2 = "drift2"


class Status(enum.Enum):
    UNINITIALIZED = "uninitialized"
    RUNNING = "running"
    CHECKPOINTING = "checkpointing"
    DONE = "done"
    FAILED = "failed"


@dataclass
class StepTiming:
    step: int
    compute: float
    io: float
    energy_drift: Optional[float] = None
    momentum: Optional[float] = None


class LeapfrogIntegrator:
    """Drift-kick-drift leapfrog over ``steps`` outer steps of ``substeps`` each.

    Each phase is one parallel kernel call; the call returns only when every
    particle is done, which is the barrier the next phase relies on. The
    integrator owns ``state`` for the whole run and lends the buffer to the
    writer only between the last Drift2 of a step and the next Drift1.
    """

    def __init__(
        self,
        state: ParticleState,
        steps: int,
        substeps: int,
        writer: Optional[SnapshotWriter] = None,
        report: Optional[Callable[[str], None]] = print,
        track_energy: bool = False,
    ) -> None:
        if steps < 1 or substeps < 1:
            raise ConfigurationError(f"steps and substeps must be positive, got {steps} x {substeps}")
        self.state = state
        self.steps = steps
        self.substeps = substeps
        self.writer = writer
        self.report = report
        self.track_energy = track_energy
        self.status = Status.UNINITIALIZED
        self.phase: Optional[Phase] = None
        self.step_index = 0
        self.substep_index = 0

    @property
    def dt(self) -> float:
        return 1.0 / (self.substeps * self.steps)

    @property
    def half_dt(self) -> float:
        return 0.5 * self.dt

    def _dispatch(self, phase: Phase, kernel, h: float) -> None:
        self.phase = phase
        st = self.state
        # step sizes in the buffer's precision
        h = st.buffer.dtype.type(h)
        try:
            kernel(st.buffer, st.n, st.layout.ps, st.layout.vs, h)
        except Exception as exc:
            self.status = Status.FAILED
            raise ComputeDispatchError(
                f"{phase.value} failed at step {self.step_index}, substep {self.substep_index}: {exc}"
            ) from exc

    def substep(self) -> None:
        self.status = Status.RUNNING
        self._dispatch(Phase.DRIFT1, drift, self.half_dt)
        self._dispatch(Phase.KICK, kick, self.dt)
        self._dispatch(Phase.DRIFT2, drift, self.half_dt)

    def advance(self) -> None:
        """Run all substeps of the current outer step."""

        for j in range(self.substeps):
            self.substep_index = j
            self.substep()

    def checkpoint(self, index: int) -> None:
        if self.writer is None:
            return
        self.status = Status.CHECKPOINTING
        try:
            self.writer.write(self.state, index)
        except NbodyError:
            self.status = Status.FAILED
            raise

    def run(self) -> List[StepTiming]:
        """Snapshot the initial state, then integrate and snapshot each step."""

        timings: List[StepTiming] = []
        e0 = total_energy(self.state) if self.track_energy else 0.0
        self.checkpoint(0)
        for i in range(self.steps):
            self.step_index = i
            t0 = time.perf_counter()
            self.advance()
            t1 = time.perf_counter()
            self.checkpoint(i + 1)
            t2 = time.perf_counter()
            timing = StepTiming(step=i, compute=t1 - t0, io=t2 - t1)
            line = f"{i:6d}:\tcompute: {timing.compute:.3g} sec; I/O: {timing.io:.3g} sec"
            if self.track_energy:
                timing.energy_drift = total_energy(self.state) - e0
                timing.momentum = float(np.linalg.norm(total_momentum(self.state)))
                line += f"; dE: {timing.energy_drift:.3g}; |P|: {timing.momentum:.3g}"
            timings.append(timing)
            if self.report is not None:
                self.report(line)
        if self.writer is not None:
            try:
                self.writer.flush()
            except NbodyError:
                self.status = Status.FAILED
                raise
        self.status = Status.DONE
        self.phase = None
        return timings
