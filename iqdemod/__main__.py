"""Command-line entry point: decode packets from a cf32 sample file."""

import argparse
import sys
from typing import Optional, Sequence

import yaml
from pydantic import ValidationError

from .config import ReceiverConfig
from .io import read_samples
from .logger import get_logger, set_log_level
from .pipeline import Receiver
from .timing import LoopDivergenceError

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="iqdemod", description="Decode syncword-framed BPSK packets from I/Q samples"
    )
    ap.add_argument("samples", help="Interleaved float32 I/Q sample file")
    ap.add_argument("--config", help="Receiver configuration (YAML)")
    ap.add_argument("--output", help="Append decoded payload bytes to this file")
    ap.add_argument("--plot", help="Save a constellation of recovered symbols (PNG)")
    ap.add_argument("--log-level", default="INFO", help="DEBUG, INFO, WARNING, ...")
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    try:
        set_log_level(args.log_level)
    except ValueError as e:
        ap.error(str(e))

    try:
        config = ReceiverConfig.from_yaml(args.config) if args.config else ReceiverConfig()
    except (OSError, yaml.YAMLError, ValidationError) as e:
        logger.error(f"Failed to load receiver configuration: {e}")
        return 1

    try:
        samples = read_samples(args.samples)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to open source file: {e}")
        return 1

    receiver = Receiver(config, record_symbols=args.plot is not None)
    try:
        packets = list(receiver.process(samples))
    except LoopDivergenceError as e:
        logger.error(str(e))
        return 1

    logger.info(
        f"Decoded {len(packets)} packet(s) from {receiver.sample_index + 1} samples "
        f"({receiver.num_symbols} symbols)."
    )

    if args.output:
        with open(args.output, "ab") as f:
            for packet in packets:
                f.write(packet.payload)

    if args.plot:
        import matplotlib

        matplotlib.use("Agg")
        from . import plotting

        plotting.apply_default_theme()
        fig, _ = plotting.constellation(receiver.symbols)
        fig.savefig(args.plot)

    return 0


if __name__ == "__main__":
    sys.exit(main())
