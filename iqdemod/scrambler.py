"""
Pseudo-random bit sequences for payload whitening.

This module provides:
- A Galois-form linear-feedback shift register (LFSR) bit generator.
- XOR descrambling of captured payloads against a freshly seeded LFSR.

Scrambling and descrambling are the same operation; both ends only need to
agree on polynomial and seed.
"""

from typing import Iterator

import numpy as np

# Payload whitening taps and initial register state.
DEFAULT_POLYNOMIAL = 0b10101001
DEFAULT_SEED = 0xFF


class LFSR(Iterator[bool]):
    """
    Shift register producing an endless bit stream.

    Each step outputs the low bit of the state, computes the parity of
    ``state & polynomial`` and shifts it in at the top.

    Args:
        polynomial: Feedback tap mask.
        seed: Initial register state.
        width: Register width in bits.
    """

    def __init__(
        self,
        polynomial: int = DEFAULT_POLYNOMIAL,
        seed: int = DEFAULT_SEED,
        width: int = 8,
    ):
        if width < 1:
            raise ValueError(f"Register width must be positive, got {width}.")
        mask = (1 << width) - 1
        if not 0 <= polynomial <= mask or not 0 <= seed <= mask:
            raise ValueError(
                f"Polynomial and seed must fit in {width} bits, "
                f"got polynomial={polynomial:#x}, seed={seed:#x}."
            )
        self.polynomial = polynomial
        self.state = seed
        self.width = width

    def __next__(self) -> bool:
        out = bool(self.state & 1)
        feedback = bin(self.state & self.polynomial).count("1") & 1
        self.state = (feedback << (self.width - 1)) | (self.state >> 1)
        return out

    def take(self, n: int) -> np.ndarray:
        """Returns the next `n` bits as a bool array."""
        bits = np.empty(n, dtype=bool)
        for i in range(n):
            bits[i] = next(self)
        return bits


def descramble(
    bits: np.ndarray,
    polynomial: int = DEFAULT_POLYNOMIAL,
    seed: int = DEFAULT_SEED,
) -> np.ndarray:
    """
    XORs `bits` with an LFSR stream started from `seed`.

    Args:
        bits: Bit array (bool or 0/1 integers).
        polynomial: LFSR feedback mask.
        seed: LFSR initial state.

    Returns:
        New bool array of the same length.
    """
    bits = np.asarray(bits, dtype=bool)
    return bits ^ LFSR(polynomial, seed).take(bits.shape[0])


scramble = descramble
