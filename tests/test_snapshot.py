import numpy as np
import pytest

from nbody.errors import SnapshotIOError
from nbody.particles import allocate_particles, initialize_particles
from nbody.snapshot import SnapshotWriter, read_snapshot, snapshot_path, write_snapshot
from nbody.types import Layout


def _state(n=4, dtype="float64", layout=None, seed=0):
    st = allocate_particles(n, dtype=dtype, layout=layout)
    initialize_particles(st, np.random.default_rng(seed))
    return st


def test_snapshot_naming(tmp_path):
    assert snapshot_path(tmp_path, 0).name == "000000.raw"
    assert snapshot_path(tmp_path, 123).name == "000123.raw"


def test_raw_dump_has_no_header(tmp_path):
    st = _state(n=5, dtype="float32")
    path = write_snapshot(st, 7, tmp_path)
    assert path.stat().st_size == 6 * 5 * 4
    np.testing.assert_array_equal(np.fromfile(path, dtype=np.float32), st.buffer)


def test_read_back_in_layout_order(tmp_path):
    n = 3
    st = _state(n=n, layout=Layout.soa(n))
    path = write_snapshot(st, 1, tmp_path)
    back = read_snapshot(path, n, layout=Layout.soa(n))
    np.testing.assert_array_equal(back.positions(), st.positions())
    with pytest.raises(SnapshotIOError):
        read_snapshot(path, n + 1)


def test_write_into_missing_directory_fails(tmp_path):
    with pytest.raises(SnapshotIOError):
        write_snapshot(_state(), 0, tmp_path / "nope")


def test_writer_rejects_file_as_directory(tmp_path):
    target = tmp_path / "taken"
    target.write_text("x")
    with pytest.raises(SnapshotIOError):
        SnapshotWriter(target)


def test_overlapped_writer_uses_private_copy(tmp_path):
    st = _state()
    expected = st.buffer.copy()
    with SnapshotWriter(tmp_path, overlap=True) as writer:
        path = writer.write(st, 0)
        st.buffer[:] = -99.0
    np.testing.assert_array_equal(np.fromfile(path, dtype=np.float64), expected)


def test_overlapped_failure_surfaces(tmp_path):
    snapshot_path(tmp_path, 1).mkdir()
    writer = SnapshotWriter(tmp_path, overlap=True)
    writer.write(_state(), 1)
    with pytest.raises(SnapshotIOError):
        writer.close()
