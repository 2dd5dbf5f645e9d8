from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Optional, Union

import numpy as np

from .errors import NbodyError, SnapshotIOError
from .particles import ParticleState
from .types import VALUES_PER_PARTICLE, Layout

logger = logging.getLogger("nbody")

SUFFIX = ".raw"

PathLike = Union[str, Path]


def snapshot_path(output_dir: PathLike, index: int) -> Path:
    return Path(output_dir) / f"{index:06d}{SUFFIX}"


def _dump(buffer: np.ndarray, path: Path) -> None:
    try:
        with open(path, "wb") as f:
            buffer.tofile(f)
    except OSError as exc:
        raise SnapshotIOError(f"cannot write snapshot {path}: {exc}") from exc


def write_snapshot(state: ParticleState, index: int, output_dir: PathLike) -> Path:
    """Dump the whole state buffer to ``<output_dir>/<index:06d>.raw``.

    No header: native byte order and width, in the buffer's layout order.
    """

    path = snapshot_path(output_dir, index)
    _dump(state.buffer, path)
    return path


def read_snapshot(path: PathLike, n: int, dtype: str = "float64", layout: Optional[Layout] = None) -> ParticleState:
    if layout is None:
        layout = Layout.aos()
    try:
        buffer = np.fromfile(path, dtype=np.dtype(dtype))
    except OSError as exc:
        raise SnapshotIOError(f"cannot read snapshot {path}: {exc}") from exc
    if buffer.size != VALUES_PER_PARTICLE * n:
        raise SnapshotIOError(
            f"snapshot {path} holds {buffer.size} values, expected {VALUES_PER_PARTICLE * n}"
        )
    return ParticleState(buffer, n, layout)


class SnapshotWriter:
    """Numbered snapshot files in one directory.

    With ``overlap=True`` each call copies the buffer and hands the copy to a
    single background worker, so the caller may resume mutating the state as
    soon as ``write`` returns. At most one write is in flight; its failure
    is raised from the next ``write``, ``flush`` or ``close``.
    """

    def __init__(self, output_dir: PathLike = ".", overlap: bool = False) -> None:
        self.output_dir = Path(output_dir)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise SnapshotIOError(f"cannot create output directory {self.output_dir}: {exc}") from exc
        self.overlap = overlap
        self._executor: Optional[ThreadPoolExecutor] = (
            ThreadPoolExecutor(max_workers=1, thread_name_prefix="snapshot") if overlap else None
        )
        self._pending: Optional[Future] = None

    def write(self, state: ParticleState, index: int) -> Path:
        path = snapshot_path(self.output_dir, index)
        if self._executor is None:
            _dump(state.buffer, path)
        else:
            self.flush()
            self._pending = self._executor.submit(_dump, state.buffer.copy(), path)
        logger.debug("snapshot %d -> %s", index, path)
        return path

    def flush(self) -> None:
        pending, self._pending = self._pending, None
        if pending is not None:
            pending.result()

    def close(self) -> None:
        try:
            self.flush()
        finally:
            if self._executor is not None:
                self._executor.shutdown(wait=True)
                self._executor = None

    def __enter__(self) -> "SnapshotWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
            return
        # already unwinding; keep the first fatal error
        try:
            self.close()
        except NbodyError as err:
            logger.error("snapshot writer failed during shutdown: %s", err)
