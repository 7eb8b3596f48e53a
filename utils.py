# utils.py
"""
Utility functions for the fireworks show.

This module provides helpers, such as logging setup and command line
parsing, that are used across the application but do not belong to the
simulation or the renderer.
"""
import logging
import logging.handlers
import os
import shutil
from typing import Any, Dict, Sequence, Tuple

from constants import (
    DEFAULT_DURATION_SECONDS, DEFAULT_TERMINAL_HEIGHT, DEFAULT_TERMINAL_WIDTH,
    FRAME_CHROME_ROWS, FRAME_MARGIN, MIN_FIELD_HEIGHT, MIN_FIELD_WIDTH
)

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary containing a "logging" key with "level",
#       "console_level", "format", and "log_file" sub-keys.
#   - Side Effects: Configures the root Python logger. Creates the log
#     directory if it doesn't exist. Sets up a stderr console handler and,
#     when log_file is set, a rotating file handler.
#
# parse_duration(argv: Sequence[str]) -> int:
#   - Outputs: A positive number of seconds. Never raises.
#
# get_terminal_dimensions() -> Tuple[int, int]:
#   - Outputs: (columns, rows), falling back to 80x24. Never raises.


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the logging system from a configuration dictionary.

    The console only gets warnings so it does not scribble over the
    animation. A rotating file receives full detail when log_file is set.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    console_level = log_config.get('console_level', 'WARNING').upper()
    log_format = log_config.get('format', '%(asctime)s - %(levelname)s - %(message)s')
    log_file_path = log_config.get('log_file')

    # Get the root logger
    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    if logger.hasHandlers():
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(log_format)

    # Console Handler (stderr)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file_path:
        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        # Rotates when the log reaches 1MB, keeps 5 backup logs.
        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path, maxBytes=1024*1024, backupCount=5, encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}.")
    logging.debug(f"Log file path: {log_file_path}")


def parse_duration(argv: Sequence[str], default: int = DEFAULT_DURATION_SECONDS) -> int:
    """
    Reads the optional duration_seconds argument.

    Leading digits are accepted ("12s" is 12). Missing, non-numeric or
    non-positive values fall back to the default.
    """
    if not argv:
        return default

    raw = argv[0].strip()
    sign = ''
    if raw and raw[0] in '+-':
        sign, raw = raw[0], raw[1:]
    digits = ''
    for ch in raw:
        if not ch.isdecimal():
            break
        digits += ch

    if not digits:
        logging.warning(f"Invalid duration {argv[0]!r}; using {default} seconds.")
        return default

    value = int(sign + digits)
    if value <= 0:
        logging.warning(f"Non-positive duration {argv[0]!r}; using {default} seconds.")
        return default
    return value


def get_terminal_dimensions() -> Tuple[int, int]:
    """Returns the terminal's (columns, rows), or the 80x24 fallback."""
    fallback = (DEFAULT_TERMINAL_WIDTH, DEFAULT_TERMINAL_HEIGHT)
    try:
        columns, rows = shutil.get_terminal_size(fallback)
    except (OSError, ValueError) as e:
        logging.warning(f"Could not read terminal size ({e}); using {fallback[0]}x{fallback[1]}.")
        return fallback

    if columns <= 0 or rows <= 0:
        logging.warning(
            f"Terminal reported {columns}x{rows}; using {fallback[0]}x{fallback[1]}."
        )
        return fallback
    return columns, rows


def field_dimensions(columns: int, rows: int) -> Tuple[int, int]:
    """
    Converts terminal size to playing-field size.

    The margin and the banner/status rows are taken off so a full frame
    fits on screen without scrolling.
    """
    width = max(MIN_FIELD_WIDTH, columns - len(FRAME_MARGIN))
    height = max(MIN_FIELD_HEIGHT, rows - FRAME_CHROME_ROWS)
    return width, height
