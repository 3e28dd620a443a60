# -*- coding: utf-8 -*-
# rhcrypto/utils/logger.py

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(name="rhcrypto", log_dir=None, level="INFO"):
    """
    Configure and return a logger.

    Args:
        name: logger name; 'rhcrypto' covers every module in the package
        log_dir: when set, also write <log_dir>/<name>.log rotated at midnight (30 days kept)
        level: level name or number

    Calling it again for the same logger does not add duplicate handlers.
    """
    logger = logging.getLogger(name)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logger.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        stream = logging.StreamHandler()
        stream.setFormatter(formatter)
        logger.addHandler(stream)

    if log_dir and not any(isinstance(h, TimedRotatingFileHandler) for h in logger.handlers):
        log_path = Path(log_dir).expanduser()
        log_path.mkdir(parents=True, exist_ok=True)
        handler = TimedRotatingFileHandler(
            filename=log_path / f"{name}.log",
            when="midnight",
            interval=1,
            backupCount=30,
            encoding="utf-8",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
