"""Application log under ``<home>/logs`` plus optional per-run log files."""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from standbydesk.settings import app_home

LOG_NAME = "standbydesk.log"
ROOT_LOGGER = "standbydesk"

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def log_path() -> Path:
    return app_home() / "logs" / LOG_NAME


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(logging.INFO)
    target = log_path()
    target.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        target, maxBytes=1_500_000, backupCount=5, encoding="utf-8"
    )
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    return logger


def attach_run_file(log_file: Path, level: int = logging.INFO) -> logging.Logger:
    """Add a plain file handler for ``log_file`` to the package logger once."""

    logger = get_logger()
    logger.setLevel(level)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    attached = {getattr(handler, "baseFilename", None) for handler in logger.handlers}
    if str(log_file) not in attached:
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s", "%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)
    return logger


__all__ = ["attach_run_file", "get_logger", "log_path"]
