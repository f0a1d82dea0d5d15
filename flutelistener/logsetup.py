"""Location of the data directory and set-up of the log file."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import platformdirs

PROJECT_NAME = "FLUTE_LISTENER"
PACKAGE_NAME = "flute-listener"
DATA_FOLDER_ENV = f"{PROJECT_NAME}_DATA"
LOG_ENV = f"{PROJECT_NAME}_LOGLEVEL"
LOG_FILE = f"{PACKAGE_NAME}.log"
LOGGER_NAME = "flutelistener"


def get_data_dir() -> Path:
    """The data directory: from the environment, else the platform's local data dir."""
    override = os.environ.get(DATA_FOLDER_ENV)
    if override is not None:
        return Path(override)
    return Path(platformdirs.user_data_dir(PACKAGE_NAME, "light"))


def _level_from_env() -> int:
    level = logging.getLevelName(os.environ.get(LOG_ENV, "ERROR").strip().upper())
    return level if isinstance(level, int) else logging.ERROR


def initialize_logging() -> Path:
    """Send the package's log records to a fresh log file; return its path."""
    directory = get_data_dir()
    directory.mkdir(parents=True, exist_ok=True)
    log_path = directory / LOG_FILE
    handler = logging.FileHandler(log_path, mode="w", encoding="utf-8")
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(levelname)s %(filename)s:%(lineno)d: %(message)s"
        )
    )
    logger = logging.getLogger(LOGGER_NAME)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    logger.addHandler(handler)
    logger.setLevel(_level_from_env())
    logger.propagate = False
    return log_path