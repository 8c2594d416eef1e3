"""
End-to-end packet receiver.

`Receiver` wires the per-sample blocks into the fixed receive chain:

    AGC -> FIR smoothing -> SymbolSync -> hard decision
        -> SyncwordPacketizer -> descramble -> pack_bits

Each call to `Receiver.tick` consumes one complex sample and returns a
`Packet` when that sample completes a payload capture.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional

import numpy as np

from .bits import pack_bits
from .config import ReceiverConfig, get_config
from .filters import AGC, FIRFilter
from .framing import SyncwordPacketizer
from .logger import get_logger
from .scrambler import descramble
from .timing import SymbolSync

logger = get_logger(__name__)


@dataclass
class Packet:
    """Decoded packet.

    Attributes
    ----------
    sample_index : int
        Index (from 0) of the input sample that completed the capture.
    bits : np.ndarray
        Descrambled payload bits (bool).
    payload : bytes
        `bits` packed into bytes.
    """

    sample_index: int
    bits: np.ndarray
    payload: bytes


def format_bytes(data: bytes) -> str:
    """Renders bytes as an ASCII-escaped literal, e.g. ``b'AB\\x00'``."""
    return repr(bytes(data))


class Receiver:
    """
    Streaming demodulator from raw I/Q samples to packets.

    Args:
        config: Receiver parameters. Falls back to the global configuration,
            then to `ReceiverConfig` defaults.
        record_symbols: Keep every recovered symbol in `symbols` (for
            constellation plots).
    """

    def __init__(
        self, config: Optional[ReceiverConfig] = None, record_symbols: bool = False
    ):
        if config is None:
            config = get_config() or ReceiverConfig()
        self.config = config

        self.agc = AGC(config.agc_alpha)
        self.smoother = FIRFilter(config.smoothing_taps, dtype=np.complex64)
        self.symbol_sync = SymbolSync(
            config.samples_per_symbol,
            config.loop_bandwidth,
            config.damping,
            on_divergence=config.on_divergence,
            timing_update=config.timing_update,
            integrator_limit=config.integrator_limit,
        )
        self.packetizer = SyncwordPacketizer(
            np.asarray(config.syncword, dtype=bool),
            config.payload_length,
            config.error_threshold,
        )

        self.sample_index = -1
        self.num_symbols = 0
        self.symbols: Optional[List[complex]] = [] if record_symbols else None

        logger.debug(
            f"Receiver: sps={config.samples_per_symbol}, "
            f"syncword={len(config.syncword)} bits, "
            f"payload={config.payload_length} bits."
        )

    def tick(self, sample: complex) -> Optional[Packet]:
        """
        Runs one sample through the chain.

        Args:
            sample: Complex input sample.

        Returns:
            The decoded packet if this sample completed one, else None.

        Raises:
            LoopDivergenceError: If the timing loop diverges.
        """
        self.sample_index += 1

        conditioned = self.smoother.tick(self.agc.tick(sample))
        symbol = self.symbol_sync.tick(conditioned)
        if symbol is None:
            return None

        self.num_symbols += 1
        if self.symbols is not None:
            self.symbols.append(symbol)

        captured = self.packetizer.tick(symbol.real >= 0.0)
        if captured is None:
            return None

        bits = descramble(
            captured, self.config.scrambler_polynomial, self.config.scrambler_seed
        )
        packet = Packet(
            sample_index=self.sample_index,
            bits=bits,
            payload=pack_bits(bits, self.config.bitorder),
        )
        logger.info(f"packet @ {packet.sample_index:6d}: {format_bytes(packet.payload)}")
        return packet

    def process(self, samples: Iterable[complex]) -> Iterator[Packet]:
        """
        Yields every packet decoded from `samples`.

        Args:
            samples: Iterable or array of complex samples.
        """
        for sample in samples:
            packet = self.tick(sample)
            if packet is not None:
                yield packet
