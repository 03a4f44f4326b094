"""
Colour-coded console logging.

Messages are printed as ``[INFO] message`` with a colorama colour per level, plus an
extra ``SUCCESS`` level rendered as ``[OK]`` for completed conversions.
"""

import logging
import sys
from typing import Optional

from colorama import Fore, Style, init

# Initialize colorama for cross-platform colored output
init(autoreset=True)

ROOT_LOGGER = "html_to_pdf"

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

_LEVEL_PREFIXES = {
    logging.DEBUG: (Fore.CYAN, "DEBUG"),
    logging.INFO: (Fore.GREEN, "INFO"),
    SUCCESS: (Fore.GREEN, "OK"),
    logging.WARNING: (Fore.YELLOW, "WARNING"),
    logging.ERROR: (Fore.RED, "ERROR"),
    logging.CRITICAL: (Fore.RED, "ERROR"),
}


class ColorFormatter(logging.Formatter):
    """Render records as ``<colour>[LEVEL]<reset> message``."""

    def __init__(self, use_color: bool = True) -> None:
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        color, label = _LEVEL_PREFIXES.get(record.levelno, (Fore.WHITE, record.levelname))
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        if not self.use_color:
            return f"[{label}] {message}"
        return f"{color}[{label}]{Style.RESET_ALL} {message}"


class ConverterLogger(logging.LoggerAdapter):
    """Logger adapter adding ``success()`` for the ``[OK]`` level."""

    def success(self, message: str, *args, **kwargs) -> None:
        self.log(SUCCESS, message, *args, **kwargs)


def get_logger(name: Optional[str] = None) -> ConverterLogger:
    """Return a logger in the ``html_to_pdf`` namespace."""
    if not name:
        name = ROOT_LOGGER
    elif not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return ConverterLogger(logging.getLogger(name), {})


def setup_logging(debug: bool = False, stream=None) -> None:
    """Attach the colour handler to the package logger (idempotent)."""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    for handler in logger.handlers:
        if getattr(handler, "_html_to_pdf", False):
            handler.setLevel(logger.level)
            return

    target = stream or sys.stderr
    handler = logging.StreamHandler(target)
    handler._html_to_pdf = True
    handler.setLevel(logger.level)
    handler.setFormatter(ColorFormatter(use_color=hasattr(target, "isatty") and target.isatty()))
    logger.addHandler(handler)
    logger.propagate = False


__all__ = ["ColorFormatter", "ConverterLogger", "SUCCESS", "get_logger", "setup_logging"]
