"""
Loop filters for timing and carrier recovery.

This module provides the discrete proportional-integral controller shared by
the feedback loops of the receiver, the standard second-order loop design
equations that derive its gains, and a carrier phase-locked loop built on it.

Functions
---------
loop_gains :
    Proportional and integral gains from noise bandwidth and damping factor.

Classes
-------
PILoopFilter :
    Discrete PI controller with an optional integrator bound.
CarrierPLL :
    Phase-locked loop tracking the phase of a complex tone.
"""

import cmath
import math
from typing import Any, Optional, Tuple

from .clock import TWO_PI, PhaseClock
from .logger import get_logger

logger = get_logger(__name__)


def loop_gains(
    bandwidth: float, damping: float, samples_per_symbol: float = 1.0
) -> Tuple[float, float]:
    r"""
    Computes the gains of a second-order loop.

    Parameters
    ----------
    bandwidth : float
        Normalized loop noise bandwidth $B_n$. Zero opens the loop.
    damping : float
        Damping factor $\zeta$. Must be positive.
    samples_per_symbol : float, default 1.0
        Rate divisor applied when the loop drives a sample-rate clock.

    Returns
    -------
    tuple of float
        ``(kp, ki)``.

    Notes
    -----
    - $k_p = \frac{4\zeta}{\zeta + 1/(4\zeta)} \frac{B_n}{sps}$
    - $k_i = \frac{4}{(\zeta + 1/(4\zeta))^2} \frac{B_n^2}{sps^2}$
    """
    if damping <= 0:
        raise ValueError(f"Damping factor must be positive, got {damping}.")
    if samples_per_symbol <= 0:
        raise ValueError(
            f"Samples per symbol must be positive, got {samples_per_symbol}."
        )

    denom = damping + 1.0 / (4.0 * damping)
    kp = 4.0 * damping / denom * bandwidth / samples_per_symbol
    ki = 4.0 / denom**2 * bandwidth**2 / samples_per_symbol**2
    return kp, ki


class PILoopFilter:
    """
    Discrete proportional-integral controller.

    Works on any value supporting addition and scalar multiplication
    (floats, complex numbers, NumPy scalars).

    Args:
        kp: Proportional gain.
        ki: Integral gain.
        integrator_limit: Optional symmetric bound on the integrator magnitude.
            None (default) leaves the integrator unbounded.
        zero: Initial integrator value, also used by `reset`.
    """

    def __init__(
        self,
        kp: float,
        ki: float,
        integrator_limit: Optional[float] = None,
        zero: Any = 0.0,
    ):
        if integrator_limit is not None and integrator_limit <= 0:
            raise ValueError(
                f"Integrator limit must be positive, got {integrator_limit}."
            )
        self.kp = kp
        self.ki = ki
        self.integrator_limit = integrator_limit
        self._zero = zero
        self.integrator = zero

    @classmethod
    def from_bandwidth(
        cls,
        bandwidth: float,
        damping: float,
        samples_per_symbol: float = 1.0,
        integrator_limit: Optional[float] = None,
    ) -> "PILoopFilter":
        kp, ki = loop_gains(bandwidth, damping, samples_per_symbol)
        return cls(kp, ki, integrator_limit=integrator_limit)

    def update(self, error: Any) -> Any:
        """
        Integrates `error` and returns the control output.

        Args:
            error: Measured error signal.

        Returns:
            integrator + kp * error
        """
        self.integrator = self.integrator + self.ki * error
        if self.integrator_limit is not None:
            magnitude = abs(self.integrator)
            if magnitude > self.integrator_limit:
                self.integrator = self.integrator * (
                    self.integrator_limit / magnitude
                )
        return self.integrator + self.kp * error

    def reset(self) -> None:
        self.integrator = self._zero


class CarrierPLL:
    """
    Phase-locked loop tracking the phase of a complex input tone.

    The loop compares the argument of each input sample to the phase of an
    internal `PhaseClock`, filters the difference with a `PILoopFilter` and
    steers the clock by the filter output.

    Args:
        rate: Nominal phase increment per sample, in radians.
        bandwidth: Normalized loop noise bandwidth.
        damping: Loop damping factor.
        phase: Initial phase of the internal oscillator.
    """

    def __init__(
        self, rate: float, bandwidth: float, damping: float, phase: float = 0.0
    ):
        self.clock = PhaseClock(rate, phase)
        self.controller = PILoopFilter.from_bandwidth(bandwidth, damping)
        self.last_error = 0.0
        logger.debug(
            f"CarrierPLL: rate={rate:.4f}, kp={self.controller.kp:.3e}, "
            f"ki={self.controller.ki:.3e}."
        )

    def tick(self, sample: complex) -> complex:
        """
        Consumes one input sample.

        Args:
            sample: Complex input sample.

        Returns:
            The oscillator phasor before this sample's correction is applied.
        """
        diff = cmath.phase(sample) - self.clock.phase
        if diff < -math.pi:
            diff += TWO_PI
        self.last_error = diff

        adjust = self.controller.update(diff)
        out = self.clock.cis()

        self.clock.advance_by(adjust)
        self.clock.tick()
        return out
