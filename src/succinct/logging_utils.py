"""Logging helpers."""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import Config


def setup_logging(log_dir: str = "logs", level: int = logging.INFO) -> tuple[logging.Logger, str]:
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, "succinct.log")

    logger = logging.getLogger("succinct")
    logger.setLevel(level)

    if not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        handler = RotatingFileHandler(log_path, maxBytes=2_000_000, backupCount=3)
        fmt = logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(fmt)
        logger.addHandler(handler)

    return logger, log_path


def setup_logging_for(config: "Config", debug: bool = False) -> tuple[logging.Logger, str]:
    """Log to ``config.log_dir``; ``debug`` or ``config.debug_logging`` enables DEBUG."""
    level = logging.DEBUG if debug or config.debug_logging else logging.INFO
    return setup_logging(log_dir=config.log_dir, level=level)
