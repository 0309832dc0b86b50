# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2026 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Logging setup utilities for the pseudonymization core.

Logging is configured explicitly with a ``LogConfig`` and ``setup_logging``.
Components receive the resulting logger as an argument instead of configuring
one at import time.
"""

from __future__ import annotations

import logging
import os
import warnings
from dataclasses import dataclass
from pathlib import Path

LOGGER_NAME = 'pseudonymize'
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR')


@dataclass
class LogConfig:
    """Logger settings."""

    level: str = 'INFO'
    log_dir: Path | None = None
    log_file: str = 'pseudonymization.log'
    append: bool = True
    log_to_console: bool = True
    name: str = LOGGER_NAME

    @classmethod
    def from_env(cls, **overrides: object) -> LogConfig:
        """Build settings from LOG_LEVEL, LOG_DIR and LOG_TO_CONSOLE, then apply overrides."""
        config = cls()

        if 'LOG_LEVEL' in os.environ:
            config.level = os.environ['LOG_LEVEL']
        if os.environ.get('LOG_DIR'):
            config.log_dir = Path(os.environ['LOG_DIR'])
        if 'LOG_TO_CONSOLE' in os.environ:
            config.log_to_console = os.environ['LOG_TO_CONSOLE'].lower() == 'true'

        for key, value in overrides.items():
            if value is not None:
                setattr(config, key, value)

        return config


def _get_log_level(level: str) -> int:
    """Get the numeric log level, falling back to INFO for unknown names."""
    level = level.upper()

    if level == 'WARN':
        level = 'WARNING'

    if level not in LOG_LEVELS:
        warnings.warn(f'Invalid log level "{level}" specified. Using INFO as default.', stacklevel=3)
        return logging.INFO

    return logging.getLevelName(level)


def get_logger(logger: logging.Logger | None = None) -> logging.Logger:
    """Return the given logger or the unconfigured package logger."""
    return logger if logger is not None else logging.getLogger(LOGGER_NAME)


def setup_logging(config: LogConfig | None = None) -> logging.Logger:
    """Set up logging with file and console handlers from the given settings."""
    config = config or LogConfig()
    log_level = _get_log_level(config.level)

    # Create formatters
    file_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    logger = logging.getLogger(config.name)
    logger.setLevel(log_level)
    logger.propagate = False

    # Clear existing handlers to prevent duplicates
    if logger.hasHandlers():
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()

    if config.log_to_console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter('%(levelname)s - %(message)s'))
        console_handler.setLevel(log_level)
        logger.addHandler(console_handler)

    if config.log_dir is None:
        return logger

    log_path = Path(config.log_dir)

    try:
        log_path.mkdir(parents=True, exist_ok=True)
    except OSError as error:
        warnings.warn(f'Cannot create log directory "{log_path}": {error}', stacklevel=2)
        return logger

    log_file_path = log_path / config.log_file
    try:
        file_handler = logging.FileHandler(str(log_file_path), mode='a' if config.append else 'w', encoding='utf-8')
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(max(log_level, logging.INFO))
        logger.addHandler(file_handler)
    except OSError as error:
        warnings.warn(f'Cannot create log file "{log_file_path}": {error}', stacklevel=2)

    # debug file handler if log level is DEBUG
    if log_level == logging.DEBUG:
        debug_file_path = log_path / 'debug.log'

        try:
            debug_handler = logging.FileHandler(str(debug_file_path), encoding='utf-8')
            debug_handler.setFormatter(file_formatter)
            debug_handler.setLevel(logging.DEBUG)
            logger.addHandler(debug_handler)
        except OSError as error:
            warnings.warn(f'Cannot create debug log file "{debug_file_path}": {error}', stacklevel=2)

    return logger


def setup_test_logging() -> logging.Logger:
    """Set up simplified logging specifically for tests."""
    test_formatter = logging.Formatter('%(message)s')

    logger = logging.getLogger('test')
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    # Clear existing handlers to prevent duplicates
    if logger.hasHandlers():
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()

    # Add console handler with simple formatting
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(test_formatter)
    logger.addHandler(console_handler)

    return logger
