"""
Closed-loop symbol timing recovery.

The synchronizer runs an interpolation clock at twice the symbol rate. Each
clock overrun triggers one fractional-delay interpolation; the Gardner
discriminator compares three consecutive interpolants (early, on-time,
late) and a PI loop filter steers the clock phase with the result. Every
second interpolant is a symbol decision point and is emitted.

Classes
-------
GardnerEstimator :
    Gardner timing-error discriminator over a 3-deep interpolant history.
SymbolSync :
    Timing recovery loop turning raw samples into symbol-rate samples.
LoopDivergenceError :
    Raised when a loop correction wraps the interpolation clock.
"""

import math
from typing import Literal, Optional

import numpy as np

from .clock import TWO_PI, PhaseClock
from .interpolation import interpolate
from .logger import get_logger
from .loops import PILoopFilter, loop_gains
from .ringbuffer import RingBuffer

logger = get_logger(__name__)

# Raw sample history depth and interpolant history depth.
INPUT_HISTORY = 8
INTERP_HISTORY = 3

_MAX_DELAY = math.nextafter(1.0, 0.0)
_MAX_PHASE = math.nextafter(TWO_PI, 0.0)


class LoopDivergenceError(RuntimeError):
    """The timing loop correction advanced the clock by a full cycle."""


def gardner_error(a: complex, b: complex, c: complex) -> float:
    """
    Gardner timing error for early `a`, on-time `b` and late `c` samples.

    Zero at correct timing. With `b` taken half a symbol after `a`, the
    error is positive when sampling is early and negative when it is late.
    """
    return b.real * (a.real - c.real) + b.imag * (a.imag - c.imag)


class GardnerEstimator:
    """Reads early/on-time/late samples oldest-first from a history buffer."""

    def estimate(self, history: RingBuffer) -> float:
        return float(
            gardner_error(history.oldest(0), history.oldest(1), history.oldest(2))
        )


class SymbolSync:
    """
    Symbol timing recovery loop.

    Parameters
    ----------
    samples_per_symbol : float
        Nominal input samples per symbol. Must exceed 2 so that the
        interpolation clock overruns at most once per input sample.
    bandwidth : float
        Normalized loop noise bandwidth. Zero keeps the loop open.
    damping : float
        Loop damping factor.
    estimator : GardnerEstimator, optional
        Timing-error discriminator. Defaults to `GardnerEstimator`.
    on_divergence : {'raise', 'clamp'}, default 'raise'
        What to do when a loop correction would wrap the clock:
        - 'raise': raise `LoopDivergenceError`.
        - 'clamp': hold the clock just below the wrap instead, counting
          each such correction in `cycle_slips`.
    timing_update : {'symbol', 'every'}, default 'symbol'
        When the loop filter is updated:
        - 'symbol': only on interpolants that are emitted, where the
          discriminator window is (symbol, transition, symbol).
        - 'every': on every interpolant. The windows centred on a symbol
          cancel the restoring force of the others, so this mode holds the
          initial timing instead of tracking it.
    integrator_limit : float, optional
        Bound on the loop integrator. None leaves it unbounded.

    Notes
    -----
    An overrun of ``phi`` radians is a fraction ``phi / 2pi`` of a clock
    cycle, i.e. ``phi / 2pi * sps / 2`` input samples. The interpolant is
    taken that many samples before the second-newest input sample, so the
    sampling instant moves continuously with the clock phase. A positive
    loop output retards the clock, delaying the next sampling instant.
    """

    def __init__(
        self,
        samples_per_symbol: float,
        bandwidth: float,
        damping: float,
        estimator: Optional[GardnerEstimator] = None,
        on_divergence: Literal["raise", "clamp"] = "raise",
        timing_update: Literal["symbol", "every"] = "symbol",
        integrator_limit: Optional[float] = None,
    ):
        if samples_per_symbol <= 2:
            raise ValueError(
                f"Samples per symbol must exceed 2, got {samples_per_symbol}."
            )
        if on_divergence not in ("raise", "clamp"):
            raise ValueError(f"Unknown divergence policy: {on_divergence}")
        if timing_update not in ("symbol", "every"):
            raise ValueError(f"Unknown timing update mode: {timing_update}")

        self.samples_per_symbol = samples_per_symbol
        self.on_divergence = on_divergence
        self.timing_update = timing_update
        self.estimator = estimator if estimator is not None else GardnerEstimator()

        # two overruns per symbol period
        self.clock = PhaseClock(rate=2.0 * TWO_PI / samples_per_symbol)
        self._samples_per_cycle = samples_per_symbol / 2.0

        kp, ki = loop_gains(bandwidth, damping, samples_per_symbol)
        self.controller = PILoopFilter(kp, ki, integrator_limit=integrator_limit)

        self._inputs = RingBuffer(INPUT_HISTORY, dtype=np.complex64)
        self._interps = RingBuffer(INTERP_HISTORY, dtype=np.complex64)
        self._emit = True

        self.last_error = 0.0
        self.cycle_slips = 0

        logger.debug(
            f"SymbolSync: sps={samples_per_symbol}, kp={kp:.3e}, ki={ki:.3e}, "
            f"update={timing_update}, policy={on_divergence}."
        )

    def tick(self, sample: complex) -> Optional[complex]:
        """
        Consumes one input sample.

        Args:
            sample: Complex input sample.

        Returns:
            A symbol-rate sample when this input completes a symbol period,
            otherwise None.

        Raises:
            LoopDivergenceError: If the loop correction wraps the clock and
                the policy is 'raise'.
        """
        self._inputs.push(sample)
        overrun = self.clock.tick()
        if overrun is None:
            return None

        mu = overrun / TWO_PI
        delay = min(mu * self._samples_per_cycle, _MAX_DELAY)
        value = interpolate(self._inputs, delay)
        self._interps.push(value)

        emit = not self._emit
        self.last_error = self.estimator.estimate(self._interps)
        if emit or self.timing_update == "every":
            self._correct(self.controller.update(self.last_error))

        self._emit = emit
        if emit:
            return value
        return None

    def _correct(self, adjust: float) -> None:
        step = -adjust
        if self.on_divergence == "clamp" and self.clock.phase + step >= TWO_PI:
            # hold just short of the wrap; the next tick overruns as usual
            self.clock.phase = _MAX_PHASE
            self.cycle_slips += 1
            logger.warning(
                f"cycle slip #{self.cycle_slips}: correction {adjust:.4f} rad "
                f"clamped at the clock boundary."
            )
            return

        slip = self.clock.advance_by(step)
        if slip is not None:
            raise LoopDivergenceError(
                f"Timing correction {adjust:.4f} rad advanced the interpolation "
                f"clock by a full cycle (overrun {slip:.4f} rad); loop "
                f"bandwidth/damping do not suit the input rate."
            )
