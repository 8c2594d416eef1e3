"""Receiver configuration management for iqdemod.

This module holds every construction-time constant of the receiver chain in
a validated pydantic model and provides a global configuration context that
can be accessed without explicit passing.
"""

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .framing import DEFAULT_SYNCWORD
from .scrambler import DEFAULT_POLYNOMIAL, DEFAULT_SEED


class ReceiverConfig(BaseModel):
    """Construction-time parameters of the receiver chain.

    Defaults describe a link at 5 samples per symbol with a 32-bit CCSDS
    syncword and 10200-bit payloads whitened with an 8-bit LFSR.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    # Timing Recovery
    samples_per_symbol: float = Field(
        5.0, gt=2, description="Nominal input samples per symbol"
    )
    loop_bandwidth: float = Field(
        0.05, ge=0, description="Normalized timing loop noise bandwidth"
    )
    damping: float = Field(0.7071, gt=0, description="Timing loop damping factor")
    on_divergence: Literal["raise", "clamp"] = Field(
        "raise", description="Policy when a loop correction wraps the clock"
    )
    timing_update: Literal["symbol", "every"] = Field(
        "symbol", description="Update the timing loop on symbols or every interpolant"
    )
    integrator_limit: Optional[float] = Field(
        None, gt=0, description="Bound on the loop integrator (None: unbounded)"
    )

    # Amplitude Conditioning
    agc_alpha: float = Field(0.01, gt=0, lt=1, description="AGC smoothing factor")
    smoothing_taps: List[float] = Field(
        default_factory=lambda: [0.2] * 5,
        min_length=1,
        description="FIR smoothing taps, newest sample first",
    )

    # Framing
    syncword: List[int] = Field(
        default_factory=lambda: DEFAULT_SYNCWORD.astype(int).tolist(),
        min_length=1,
        description="Syncword bits, first transmitted bit first",
    )
    payload_length: int = Field(
        10200, gt=0, description="Payload length in bits after the syncword"
    )
    error_threshold: int = Field(
        1, ge=0, le=255, description="Maximum syncword bit mismatches"
    )

    # Descrambling and Packing
    scrambler_polynomial: int = Field(
        DEFAULT_POLYNOMIAL, ge=0, le=0xFF, description="LFSR feedback mask"
    )
    scrambler_seed: int = Field(
        DEFAULT_SEED, ge=0, le=0xFF, description="LFSR initial state"
    )
    bitorder: Literal["big", "little"] = Field(
        "big", description="Bit order within each decoded byte"
    )

    @field_validator("syncword", mode="before")
    @classmethod
    def parse_syncword(cls, v: Any) -> Any:
        """Accept a bit string such as '0001 1010 ...' as well as a list."""
        if isinstance(v, str):
            digits = v.replace(" ", "").replace("_", "")
            if not digits or set(digits) - {"0", "1"}:
                raise ValueError(f"Syncword string must contain only 0/1: {v!r}")
            return [int(d) for d in digits]
        if hasattr(v, "tolist"):
            v = v.tolist()
        if isinstance(v, (list, tuple)):
            return [int(b) for b in v]
        return v

    @field_validator("syncword")
    @classmethod
    def check_syncword_bits(cls, v: List[int]) -> List[int]:
        if any(b not in (0, 1) for b in v):
            raise ValueError("Syncword entries must be 0 or 1.")
        return v

    @field_validator("payload_length")
    @classmethod
    def check_payload_bytes(cls, v: int) -> int:
        if v % 8 != 0:
            raise ValueError(f"Payload length must be a multiple of 8, got {v}.")
        return v

    @model_validator(mode="after")
    def check_threshold(self) -> "ReceiverConfig":
        """A threshold at or above the syncword length would lock on anything."""
        if self.error_threshold >= len(self.syncword):
            raise ValueError(
                f"Error threshold {self.error_threshold} must be smaller than "
                f"the syncword length {len(self.syncword)}."
            )
        return self

    @classmethod
    def from_yaml(cls, path: str) -> "ReceiverConfig":
        """Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            ReceiverConfig instance
        """
        import yaml

        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
        return cls.model_validate(data)

    def to_yaml(self, path: str):
        """Save configuration to YAML file.

        Args:
            path: Path where YAML file will be saved
        """
        import yaml

        with open(path, "w") as f:
            yaml.dump(self.model_dump(), f, default_flow_style=False, sort_keys=False)


# ============================================================================
# Global Configuration Context
# ============================================================================

_global_config: Optional[ReceiverConfig] = None


def set_config(config: ReceiverConfig):
    """Set the global receiver configuration."""
    global _global_config
    _global_config = config


def get_config() -> Optional[ReceiverConfig]:
    """Get the current global receiver configuration, or None if not set."""
    return _global_config


def clear_config():
    """Clear the global configuration."""
    global _global_config
    _global_config = None


def require_config() -> ReceiverConfig:
    """Get the current config, raising an error if not set.

    Returns:
        Current ReceiverConfig instance

    Raises:
        RuntimeError: If no config is currently set
    """
    config = get_config()
    if config is None:
        raise RuntimeError(
            "No receiver configuration is set. Please call set_config(config) first."
        )
    return config
