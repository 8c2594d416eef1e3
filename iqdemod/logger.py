"""
Logging for the iqdemod receiver.

Every module logs through a child of the ``iqdemod`` logger
(``get_logger(__name__)``), so a line names the stage that emitted it::

    2026-01-01 12:00:00 [INFO] [iqdemod.pipeline] packet @  10755: b'...'
    2026-01-01 12:00:00 [WARNING] [iqdemod.timing] cycle slip ...

Only the package logger carries a handler; stage loggers propagate to it and
share its level.
"""

import logging
import sys
from typing import Union

PACKAGE = "iqdemod"


class ColorFormatter(logging.Formatter):
    """Formats a record and wraps the whole line in its level's ANSI color."""

    RESET = "\x1b[0m"
    LEVEL_COLORS = {
        logging.DEBUG: "\x1b[36;20m",
        logging.INFO: "\x1b[32;20m",
        logging.WARNING: "\x1b[33;20m",
        logging.ERROR: "\x1b[31;20m",
        logging.CRITICAL: "\x1b[31;1m",
    }

    def __init__(self):
        super().__init__(
            "%(asctime)s [%(levelname)s] [%(name)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        color = self.LEVEL_COLORS.get(record.levelno)
        if color is None:
            return line
        return f"{color}{line}{self.RESET}"


def get_logger(name: str = PACKAGE) -> logging.Logger:
    """
    Returns the logger for a receiver stage.

    Names outside the package are placed under it, so ``get_logger("timing")``
    and ``get_logger("iqdemod.timing")`` are the same logger. The stdout
    handler is attached to the package logger once.

    Args:
        name: Module or stage name, usually ``__name__``.

    Returns:
        A logging.Logger that propagates to the package logger.
    """
    root = logging.getLogger(PACKAGE)
    if not root.handlers:
        root.setLevel(logging.INFO)
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(ColorFormatter())
        root.addHandler(handler)

    if name != PACKAGE and not name.startswith(PACKAGE + "."):
        name = f"{PACKAGE}.{name}"
    return logging.getLogger(name)


def set_log_level(level: Union[int, str]) -> None:
    """
    Sets the level of the package logger, and with it every stage logger.

    Args:
        level: A logging level, or its name in any case ("debug", "INFO").

    Raises:
        ValueError: If `level` is not a known level name.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        level = resolved
    get_logger().setLevel(level)
