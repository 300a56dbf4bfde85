#!/usr/bin/env python3
"""
Logger setup for the sales tax driver
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from .config import LOGGING


def setup_logger(log_level: str = 'INFO', log_dir: Optional[Path] = None) -> logging.Logger:
    """
    Setup logging configuration

    Receipts are written to stdout, so log records go to stderr
    (and to log_dir/salestax.log when a log directory is given).

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_dir: Directory for the log file (no file logging if None)

    Returns:
        Configured logger instance
    """
    handlers = [logging.StreamHandler(sys.stderr)]

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_dir / LOGGING['log_file']))

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=LOGGING['format'],
        handlers=handlers,
        force=True
    )

    return logging.getLogger(__name__)
