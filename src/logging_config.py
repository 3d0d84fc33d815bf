"""
Logging configuration for the puzzle generators.
Console handler on stderr plus an optional rotating file handler.
"""
#
# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Optional


def setup_logging(
    log_level: str = "INFO",
    log_directory: Optional[str] = None,
    log_file_prefix: str = "puzzle_generator",
    enable_console: bool = True,
) -> Optional[str]:
    """
    Configure logging with a console handler and, optionally, a rotating file.

    Console output goes to stderr so puzzles written to stdout stay clean.

    Args:
        log_level: Logging level for the console (DEBUG, INFO, WARNING, ...)
        log_directory: Directory for the log file; no file when None
        log_file_prefix: Prefix for log filename
        enable_console: Whether to enable console logging

    Returns:
        Path to the log file, or None when file logging is disabled
    """
    # Convert string level to logging constant
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    # Create formatter with detailed information
    detailed_formatter = logging.Formatter(
        fmt="%(asctime)s - %(levelname)-8s - %(name)s:%(lineno)d - %(funcName)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    # Console formatter (simpler, no line numbers)
    console_formatter = logging.Formatter(
        fmt="%(levelname)-8s - %(message)s"
    )

    # Get root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture everything, handlers will filter

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    log_path = None
    if log_directory:
        os.makedirs(log_directory, exist_ok=True)

        # Generate timestamped log filename
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_path = os.path.join(log_directory, f"{log_file_prefix}_{timestamp}.log")

        # File handler with rotation (DEBUG level - capture everything)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(detailed_formatter)
        root_logger.addHandler(file_handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(console_formatter)
        root_logger.addHandler(console_handler)

    if not root_logger.handlers:
        root_logger.addHandler(logging.NullHandler())

    logger = logging.getLogger(__name__)
    if log_path:
        logger.info(f"Logging initialized: {log_path}")
    logger.debug(f"Log level: {log_level}, Console: {enable_console}")

    return log_path
