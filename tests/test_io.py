import logging

import numpy as np
import pytest

from iqdemod.io import read_samples, write_samples


def test_round_trip(tmp_path, rng):
    path = tmp_path / "capture.cf32"
    samples = (rng.standard_normal(100) + 1j * rng.standard_normal(100)).astype(
        np.complex64
    )
    write_samples(str(path), samples)

    assert path.stat().st_size == 100 * 8
    loaded = read_samples(str(path))
    assert loaded.dtype == np.complex64
    np.testing.assert_array_equal(loaded, samples)


def test_interleaved_layout(tmp_path):
    path = tmp_path / "capture.cf32"
    np.array([1.0, 2.0, -3.0, 0.5], dtype=np.float32).tofile(path)
    np.testing.assert_array_equal(read_samples(str(path)), [1 + 2j, -3 + 0.5j])


def test_partial_float_rejected(tmp_path):
    path = tmp_path / "broken.cf32"
    path.write_bytes(b"\x00" * 10)
    with pytest.raises(ValueError):
        read_samples(str(path))


def test_unpaired_float_dropped(tmp_path, caplog):
    path = tmp_path / "odd.cf32"
    np.array([1.0, 2.0, 3.0], dtype=np.float32).tofile(path)

    with caplog.at_level(logging.WARNING, logger="iqdemod"):
        samples = read_samples(str(path))

    np.testing.assert_array_equal(samples, [1 + 2j])
    assert "unpaired" in caplog.text


def test_empty_file(tmp_path):
    path = tmp_path / "empty.cf32"
    path.write_bytes(b"")
    assert read_samples(str(path)).shape == (0,)


def test_missing_file(tmp_path):
    with pytest.raises(OSError):
        read_samples(str(tmp_path / "missing.cf32"))
