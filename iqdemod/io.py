"""
Raw I/Q sample file access.

Sample files hold interleaved native-endian float32 pairs (real, imaginary),
the layout produced by most SDR capture tools ("cf32").

Functions
---------
read_samples :
    Loads a cf32 file as a complex64 array.
write_samples :
    Stores complex samples in the same layout.
"""

import os

import numpy as np

from .logger import get_logger

logger = get_logger(__name__)

_FLOAT_BYTES = np.dtype(np.float32).itemsize


def read_samples(path: str) -> np.ndarray:
    """
    Loads interleaved float32 I/Q samples.

    Args:
        path: Path to the sample file.

    Returns:
        complex64 array, one element per (real, imaginary) pair.

    Raises:
        ValueError: If the file size is not a whole number of float32 values.
    """
    size = os.path.getsize(path)
    if size % _FLOAT_BYTES != 0:
        raise ValueError(
            f"{path}: size {size} bytes is not a multiple of {_FLOAT_BYTES}."
        )

    floats = np.fromfile(path, dtype=np.float32)
    if floats.shape[0] % 2 != 0:
        logger.warning(f"{path}: dropping trailing unpaired float32 value.")
        floats = floats[:-1]

    samples = floats.view(np.complex64)
    logger.debug(f"Read {samples.shape[0]} samples from {path}.")
    return samples


def write_samples(path: str, samples: np.ndarray) -> None:
    """
    Writes complex samples as interleaved float32 pairs.

    Args:
        path: Destination file.
        samples: Complex samples; converted to complex64.
    """
    np.asarray(samples, dtype=np.complex64).tofile(path)
