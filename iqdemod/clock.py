"""
Free-running phase accumulator.

`PhaseClock` advances a phase by a fixed rate per tick and reports the
excess phase ("overrun") whenever a full cycle of 2π has elapsed. The
symbol synchronizer uses it to schedule interpolation instants and the
carrier PLL uses it as its numerically controlled oscillator.
"""

import math
from typing import Optional

TWO_PI = 2.0 * math.pi


class PhaseClock:
    """
    Phase accumulator with overrun reporting.

    Args:
        rate: Phase increment per `tick`, in radians.
        phase: Initial phase in radians.
    """

    def __init__(self, rate: float = TWO_PI, phase: float = 0.0):
        self.rate = float(rate)
        self.phase = float(phase)

    def __repr__(self) -> str:
        return f"PhaseClock(rate={self.rate!r}, phase={self.phase!r})"

    def tick(self) -> Optional[float]:
        """Advances by one rate step. See `advance_by`."""
        return self.advance_by(self.rate)

    def advance_by(self, delta: float) -> Optional[float]:
        """
        Adds `delta` to the phase.

        Reaching 2π wraps the phase by exactly one cycle. Negative deltas may
        take the phase below zero; they never report an overrun.

        Args:
            delta: Phase increment in radians.

        Returns:
            The wrapped phase (the overrun) if a full cycle elapsed, else None.
        """
        self.phase += delta
        if self.phase >= TWO_PI:
            self.phase -= TWO_PI
            return self.phase
        return None

    @property
    def headroom(self) -> float:
        """Phase left before the next overrun."""
        return TWO_PI - self.phase

    def sin(self) -> float:
        return math.sin(self.phase)

    def cos(self) -> float:
        return math.cos(self.phase)

    def cis(self) -> complex:
        """Unit phasor exp(j*phase)."""
        return complex(math.cos(self.phase), math.sin(self.phase))
