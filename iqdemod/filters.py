"""
Streaming amplitude and smoothing filters.

This module provides the per-sample filters that condition the raw I/Q
stream before symbol timing recovery:
- Single-pole exponential smoothing (ExponentialSmoother).
- Automatic gain control on instantaneous power (AGC).
- Fixed-tap FIR filter over a circular history (FIRFilter).
"""

import math
import sys
from typing import Any, Sequence

import numpy as np

from .ringbuffer import RingBuffer

# ============================================================================
# TAP GENERATORS
# ============================================================================


def boxcar_taps(num_taps: int) -> np.ndarray:
    """
    Generates boxcar (moving average) taps.

    Args:
        num_taps: Number of taps.

    Returns:
        Array of `num_taps` equal taps with unity gain normalization.
    """
    if num_taps < 1:
        raise ValueError(f"Number of taps must be positive, got {num_taps}.")
    return np.full(num_taps, 1.0 / num_taps)


# ============================================================================
# STREAMING FILTERS
# ============================================================================


class ExponentialSmoother:
    """
    Single-pole IIR smoother: ``state = state * (1 - alpha) + value * alpha``.

    Args:
        alpha: Smoothing factor in (0, 1). Larger values track faster.
        initial: Initial filter state.
    """

    def __init__(self, alpha: float, initial: Any = 0.0):
        if not 0.0 < alpha < 1.0:
            raise ValueError(f"Smoothing factor must be in (0, 1), got {alpha}.")
        self.alpha = alpha
        self.state = initial

    def tick(self, value: Any) -> Any:
        self.state = self.state * (1.0 - self.alpha) + value * self.alpha
        return self.state


class AGC:
    """
    Automatic gain control normalizing the smoothed sample power to one.

    The power estimate starts at unit power, so the first samples pass
    through unscaled.

    Args:
        alpha: Smoothing factor of the power estimate, in (0, 1).
    """

    # Keeps the divisor positive after a long run of zero-valued samples.
    _POWER_FLOOR = sys.float_info.min

    def __init__(self, alpha: float):
        self.power = ExponentialSmoother(alpha, initial=1.0)

    def tick(self, sample: complex) -> complex:
        power = sample.real * sample.real + sample.imag * sample.imag
        smoothed = self.power.tick(float(power))
        return sample / math.sqrt(max(smoothed, self._POWER_FLOOR))


class FIRFilter:
    """
    Fixed-tap FIR filter over a circular history.

    ``taps[0]`` weighs the newest input, ``taps[-1]`` the oldest one.

    Args:
        taps: Filter coefficients. Their count fixes the history depth.
        dtype: NumPy dtype of the history (e.g. float32, complex64).
        fill: Initial history value.
    """

    def __init__(
        self, taps: Sequence[Any], dtype: Any = np.complex64, fill: Any = 1.0
    ):
        self.taps = np.asarray(taps, dtype=dtype)
        if self.taps.ndim != 1 or self.taps.shape[0] == 0:
            raise ValueError("FIR taps must be a non-empty 1-D sequence.")
        self._history = RingBuffer(self.taps.shape[0], dtype=dtype, fill=fill)

    @property
    def num_taps(self) -> int:
        return self.taps.shape[0]

    def tick(self, value: Any) -> Any:
        self._history.push(value)
        # newest first, aligned with taps[0]
        window = self._history.to_array()[::-1]
        return np.dot(self.taps, window).item()
