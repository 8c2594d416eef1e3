"""
iqdemod: a streaming packet receiver for complex baseband samples.

This package provides:
- Amplitude conditioning (AGC, FIR smoothing).
- Closed-loop symbol timing recovery (Gardner detector, PI loop filter,
  Farrow interpolation) and a carrier PLL.
- Syncword correlation and fixed-length packet capture.
- LFSR descrambling and bit packing.
- Test-signal synthesis, cf32 file I/O and diagnostic plots.
"""

from .config import (
    ReceiverConfig,
    clear_config,
    get_config,
    require_config,
    set_config,
)
from .logger import set_log_level
from .pipeline import Packet, Receiver
from .timing import LoopDivergenceError, SymbolSync

__all__ = [
    "Receiver",
    "Packet",
    "ReceiverConfig",
    "SymbolSync",
    "LoopDivergenceError",
    "set_config",
    "get_config",
    "clear_config",
    "require_config",
    "set_log_level",
]
