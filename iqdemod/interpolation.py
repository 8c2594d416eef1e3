"""
Fractional-delay interpolation.

The symbol synchronizer samples its input at instants that fall between the
received samples. `interpolate` evaluates a cubic Lagrange polynomial,
written in Farrow form, through the four newest samples of a history buffer.

The interpolant is evaluated on the interval between the second and third
newest samples, so it has support on both sides of the evaluation point and
the output lags the newest input by one sample. The timing loop absorbs this
constant delay.
"""

import numpy as np

from .ringbuffer import RingBuffer

# Farrow coefficient matrix of the cubic Lagrange interpolator. Rows are the
# polynomial orders (mu^0 .. mu^3), columns the taps
# (history[0], history[-1], history[-2], history[-3]).
_FARROW_CUBIC = np.array(
    [
        [0.0, 1.0, 0.0, 0.0],
        [-1.0 / 3.0, -1.0 / 2.0, 1.0, -1.0 / 6.0],
        [1.0 / 2.0, -1.0, 1.0 / 2.0, 0.0],
        [-1.0 / 6.0, 1.0 / 2.0, -1.0 / 2.0, 1.0 / 6.0],
    ]
)

NUM_TAPS = _FARROW_CUBIC.shape[1]


def farrow_weights(mu: float) -> np.ndarray:
    """
    Returns the four tap weights for fractional offset `mu`.

    Args:
        mu: Fractional offset in [0, 1).

    Returns:
        Weights for (history[0], history[-1], history[-2], history[-3]).
        They always sum to one.
    """
    powers = np.array([1.0, mu, mu * mu, mu * mu * mu])
    return powers @ _FARROW_CUBIC


def interpolate(history: RingBuffer, mu: float) -> complex:
    """
    Interpolates a sample between ``history[-1]`` and ``history[-2]``.

    Args:
        history: Buffer of recent complex samples, at least four deep.
        mu: Fractional offset in [0, 1). ``0`` returns ``history[-1]``
            exactly; values towards ``1`` move towards ``history[-2]``.

    Returns:
        Interpolated complex sample.

    Raises:
        ValueError: If `mu` is outside [0, 1) or the buffer is too short.
    """
    if not 0.0 <= mu < 1.0:
        raise ValueError(f"Fractional offset must be in [0, 1), got {mu}.")
    if len(history) < NUM_TAPS:
        raise ValueError(
            f"Interpolation needs at least {NUM_TAPS} samples of history, "
            f"buffer holds {len(history)}."
        )

    taps = np.array([history[0], history[-1], history[-2], history[-3]])
    return complex(farrow_weights(mu) @ taps)
