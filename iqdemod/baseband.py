"""
Transmit-side test signal generation.

This module builds the waveforms the receiver expects, for loopback tests
and synthetic captures:
- Frame assembly: syncword followed by the scrambled payload bits.
- BPSK waveform synthesis at a (possibly fractional) sample rate with a
  sub-symbol timing offset.
- Additive white Gaussian noise.
"""

from typing import Optional, Sequence

import numpy as np
import scipy.signal

from .bits import BitOrder, unpack_bits
from .logger import get_logger
from .scrambler import DEFAULT_POLYNOMIAL, DEFAULT_SEED, scramble

logger = get_logger(__name__)


def random_bits(length: int, seed: Optional[int] = None) -> np.ndarray:
    """
    Generates a sequence of random bits.

    Args:
        length: Length of the sequence to generate.
        seed: Random seed for reproducibility.

    Returns:
        Bool array of length `length`.
    """
    rng = np.random.default_rng(seed)
    return rng.integers(0, 2, size=length).astype(bool)


def frame_bits(
    payload: bytes,
    syncword: Sequence[int],
    polynomial: int = DEFAULT_POLYNOMIAL,
    seed: int = DEFAULT_SEED,
    bitorder: BitOrder = "big",
) -> np.ndarray:
    """
    Assembles the bits of one frame.

    Args:
        payload: Payload bytes.
        syncword: Syncword bits, first transmitted bit first.
        polynomial: Scrambler LFSR feedback mask.
        seed: Scrambler LFSR initial state.
        bitorder: Bit order used to expand each payload byte.

    Returns:
        Bool array: syncword followed by the scrambled payload.
    """
    body = scramble(unpack_bits(payload, bitorder), polynomial, seed)
    return np.concatenate([np.asarray(syncword, dtype=bool), body])


def bpsk_waveform(
    bits: np.ndarray,
    sps: float,
    timing_offset: float = 0.0,
    amplitude: float = 1.0,
    phase: float = 0.0,
    tx_taps: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Synthesizes rectangular-pulse BPSK.

    Sample ``n`` is taken at symbol time ``(n + timing_offset) / sps``; a
    fractional `sps` models a sample clock offset between transmitter and
    receiver.

    Args:
        bits: Bits to transmit; ``1`` maps to ``+amplitude``.
        sps: Samples per symbol, may be fractional.
        timing_offset: Sampling offset in samples.
        amplitude: Symbol amplitude.
        phase: Constant carrier phase rotation in radians.
        tx_taps: Optional FIR taps applied after pulse generation.

    Returns:
        complex64 samples.
    """
    if sps <= 0:
        raise ValueError(f"Samples per symbol must be positive, got {sps}.")

    bits = np.asarray(bits, dtype=bool)
    symbols = np.where(bits, amplitude, -amplitude)

    num_samples = int(np.floor(bits.shape[0] * sps - timing_offset))
    t = (np.arange(num_samples) + timing_offset) / sps
    idx = np.clip(np.floor(t).astype(int), 0, bits.shape[0] - 1)
    samples = symbols[idx].astype(np.complex128)

    if tx_taps is not None:
        samples = scipy.signal.lfilter(tx_taps, 1.0, samples)

    samples = samples * np.exp(1j * phase)
    logger.debug(
        f"Generated BPSK waveform: {bits.shape[0]} bits, sps={sps}, "
        f"offset={timing_offset}, {num_samples} samples."
    )
    return samples.astype(np.complex64)


def add_noise(
    samples: np.ndarray, snr_db: float, seed: Optional[int] = None
) -> np.ndarray:
    """
    Adds complex white Gaussian noise at a target SNR.

    Args:
        samples: Complex input samples.
        snr_db: Signal-to-noise ratio in dB relative to the mean sample power.
        seed: Random seed.

    Returns:
        Noisy complex64 samples.
    """
    rng = np.random.default_rng(seed)
    samples = np.asarray(samples)
    signal_power = np.mean(np.abs(samples) ** 2)
    noise_power = signal_power / 10 ** (snr_db / 10)

    # power is split between real and imaginary parts
    noise = rng.normal(scale=np.sqrt(noise_power / 2), size=(2, samples.shape[0]))
    return (samples + noise[0] + 1j * noise[1]).astype(np.complex64)
