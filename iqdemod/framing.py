"""
Syncword detection and packet framing.

A `SyncwordCorrelator` tracks one running mismatch count per rotation of a
known bit pattern and reports when the count of a fully compared rotation is
within a Hamming-distance threshold. A `SyncwordPacketizer` uses it to find
the start of a frame and then captures a fixed number of payload symbols.
"""

import enum
from typing import Any, Optional, Sequence

import numpy as np

from .ringbuffer import RingBuffer

# CCSDS attached sync marker 0x1ACFFC1D, MSB first.
DEFAULT_SYNCWORD = np.unpackbits(
    np.array([0x1A, 0xCF, 0xFC, 0x1D], dtype=np.uint8)
).astype(bool)


class SyncwordCorrelator:
    """
    Sliding Hamming-distance scan over every rotation of a pattern.

    Entry ``i`` of the error history holds the mismatch count of the
    hypothesis that the pattern started ``i`` symbols before the newest one.
    The oldest entry is the only one compared against the whole pattern.

    Args:
        pattern: Known symbol sequence marking the frame start.
        threshold: Largest mismatch count still reported as a detection.
    """

    def __init__(self, pattern: Sequence[Any], threshold: int = 0):
        self.pattern = np.array(pattern)
        if self.pattern.ndim != 1 or self.pattern.shape[0] == 0:
            raise ValueError("Syncword pattern must be a non-empty 1-D sequence.")
        if threshold < 0:
            raise ValueError(f"Threshold must be non-negative, got {threshold}.")
        self.pattern.setflags(write=False)
        self.threshold = int(threshold)
        self._errors = RingBuffer(
            self.pattern.shape[0], dtype=np.uint16, fill=self.threshold + 1
        )

    def __len__(self) -> int:
        return self.pattern.shape[0]

    def tick(self, symbol: Any) -> bool:
        """
        Feeds one symbol.

        Returns:
            True if the pattern ended with this symbol, within the threshold.
        """
        self._errors.push(0)
        for idx in np.flatnonzero(self.pattern != symbol):
            self._errors[-int(idx)] += 1
        return self._locked()

    def reset(self) -> bool:
        """Forces every hypothesis above the threshold."""
        self._errors.fill(self.threshold + 1)
        return self._locked()

    def _locked(self) -> bool:
        return bool(self._errors.oldest(0) <= self.threshold)


class PacketizerState(enum.Enum):
    SCANNING = "scanning"
    CAPTURING = "capturing"


class SyncwordPacketizer:
    """
    Scans for a syncword, then captures a fixed-length payload.

    The symbol completing the syncword is not part of the payload; the next
    symbol is the first one captured.

    Args:
        pattern: Syncword symbols.
        payload_length: Number of symbols captured after each syncword.
        threshold: Correlator mismatch threshold.
        dtype: NumPy dtype of the payload buffer.
    """

    def __init__(
        self,
        pattern: Sequence[Any],
        payload_length: int,
        threshold: int = 0,
        dtype: Any = bool,
    ):
        if payload_length < 1:
            raise ValueError(
                f"Payload length must be positive, got {payload_length}."
            )
        self.correlator = SyncwordCorrelator(pattern, threshold)
        self.payload_length = int(payload_length)
        self.state = PacketizerState.SCANNING
        self._buffer = np.zeros(self.payload_length, dtype=dtype)
        self._index = 0

    def tick(self, symbol: Any) -> Optional[np.ndarray]:
        """
        Feeds one symbol.

        Returns:
            A view of the payload buffer when a capture completes, else None.
            The view is overwritten by the next capture.
        """
        if self.state is PacketizerState.CAPTURING:
            self._buffer[self._index] = symbol
            self._index += 1
            if self._index == self.payload_length:
                self.state = PacketizerState.SCANNING
                self._index = 0
                return self._buffer[:]
            return None

        if self.correlator.tick(symbol):
            self.correlator.reset()
            self.state = PacketizerState.CAPTURING
        return None
