"""
Bit and byte packing.

Thin wrappers around `numpy.packbits` / `numpy.unpackbits` with the length
checks required by the packet decoder.
"""

from typing import Literal

import numpy as np

BitOrder = Literal["big", "little"]


def pack_bits(bits: np.ndarray, bitorder: BitOrder = "big") -> bytes:
    """
    Packs a flat bit sequence into bytes.

    Args:
        bits: Bits (bool or 0/1 integers). Length must be a multiple of 8.
        bitorder: 'big' for most-significant bit first, 'little' for
            least-significant bit first.

    Returns:
        Packed bytes, one per group of 8 bits.

    Raises:
        ValueError: If the bit count is not a multiple of 8 or the bit order
            is unknown.
    """
    bits = np.asarray(bits, dtype=bool)
    if bits.ndim != 1 or bits.shape[0] % 8 != 0:
        raise ValueError(
            f"Bit count must be a multiple of 8, got {bits.size} bits."
        )
    if bitorder not in ("big", "little"):
        raise ValueError(f"Unknown bit order: {bitorder}")
    return np.packbits(bits, bitorder=bitorder).tobytes()


def unpack_bits(data: bytes, bitorder: BitOrder = "big") -> np.ndarray:
    """
    Expands bytes into a bool array, 8 bits per byte.

    Args:
        data: Bytes to expand.
        bitorder: Bit order within each byte ('big' or 'little').

    Returns:
        Bool array of length ``8 * len(data)``.
    """
    if bitorder not in ("big", "little"):
        raise ValueError(f"Unknown bit order: {bitorder}")
    raw = np.frombuffer(bytes(data), dtype=np.uint8)
    return np.unpackbits(raw, bitorder=bitorder).astype(bool)
