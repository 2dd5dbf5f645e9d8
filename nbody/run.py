from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path
from typing import List, Optional, Sequence, Union

import numpy as np

from .errors import NbodyError
from .integrator import LeapfrogIntegrator, StepTiming
from .particles import allocate_particles, initialize_particles
from .snapshot import SnapshotWriter
from .types import Layout, RunParams

logger = logging.getLogger("nbody")


def run_simulation(
    params: RunParams,
    output_dir: Union[str, Path] = ".",
    rng: Optional[np.random.Generator] = None,
    overlap_io: bool = False,
    report=print,
) -> List[StepTiming]:
    """Allocate, initialize and integrate one run, writing every snapshot."""

    start = time.perf_counter()
    state = allocate_particles(params.n, dtype=params.dtype, layout=Layout.from_name(params.layout, params.n))
    if report is not None:
        report(f"Instantized:\t{time.perf_counter() - start:.3g} sec")

    initialize_particles(state, rng)
    with SnapshotWriter(output_dir, overlap=overlap_io) as writer:
        integrator = LeapfrogIntegrator(
            state, params.t, params.s, writer=writer, report=report, track_energy=True
        )
        if report is not None:
            report(f"Initialized:\t{time.perf_counter() - start:.3g} sec")
        return integrator.run()


def _configure_logging() -> None:
    if not logger.hasHandlers():
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(logging.INFO)


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="nbody", description="direct N-body leapfrog integrator")
    ap.add_argument("n", type=int, nargs="?", default=256, help="number of particles")
    ap.add_argument("t", type=int, nargs="?", default=32, help="number of outer steps (snapshots)")
    ap.add_argument("s", type=int, nargs="?", default=128, help="number of substeps per outer step")
    args = ap.parse_args(argv)

    _configure_logging()
    print("nbody: direct N-body leapfrog integrator")

    try:
        params = RunParams(n=args.n, t=args.t, s=args.s)
        print(f"Configurations:\t{params.n}-body with {params.t} x {params.s} steps")
        run_simulation(params)
    except NbodyError as exc:
        logger.error("%s", exc)
        return 1
    return 0
