# src/morphologycore/logging_config.py
"""
Logging configuration for the 'morphologycore' logger namespace.
"""
from __future__ import annotations

# General imports (stdlib)
import logging
import sys
from typing import Optional

# Local imports
from .config import Config, make_config


def setup_logging(cfg: Optional[Config] = None) -> logging.Logger:
    """
    Configure the package logger from cfg.logging.

    Args:
        cfg (Optional[Config]): Configuration; defaults from make_config() if None.

    Returns:
        logging.Logger: The configured 'morphologycore' logger.
    """
    cfg = cfg or make_config()
    level = logging.getLevelName(cfg.logging.level)

    logger = logging.getLogger("morphologycore")
    logger.setLevel(level)

    # Avoid duplicate handlers when called more than once
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if cfg.logging.log_file:
        file_handler = logging.FileHandler(cfg.logging.log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
    return logger
