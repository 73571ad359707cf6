"""Logging helpers."""
from __future__ import annotations

import logging
from logging import handlers
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(log_path: Path, level: int = logging.INFO) -> None:
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = handlers.RotatingFileHandler(
        log_path, maxBytes=512000, backupCount=3, encoding="utf-8"
    )
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=[handler])
    # requests/urllib3 log every connection at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
