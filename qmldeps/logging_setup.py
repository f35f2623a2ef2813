"""
JSONL scan log for the qmldeps CLI.
Records from the qmldeps loggers go to one file, one JSON object per line.
"""

import json
import logging
import os
from datetime import UTC
from datetime import datetime
from pathlib import Path

ENV_LOG_PATH = "QMLDEPS_LOG_PATH"
ENV_LOG_LEVEL = "QMLDEPS_LOG_LEVEL"

DEFAULT_PATH = "./qmldeps.log.jsonl"
DEFAULT_LEVEL = "INFO"

PACKAGE_LOGGER = "qmldeps"

# Passed by the scanner through `extra=`
SCAN_FIELDS = ("token", "path", "reason")


class JsonlHandler(logging.Handler):
    def __init__(self, path: str | Path):
        super().__init__()
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry = {
                "ts": datetime.fromtimestamp(record.created, UTC).isoformat(timespec="milliseconds"),
                "lvl": record.levelname,
                "logger": record.name,
                "message": record.getMessage(),
            }
            for field in SCAN_FIELDS:
                value = getattr(record, field, None)
                if value is not None:
                    entry[field] = str(value)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(entry, ensure_ascii=False) + "\n")
        except Exception:
            self.handleError(record)


def init_json_logging(path: str | Path | None = None, level: str | None = None) -> Path:
    """Attach the JSONL sink to the qmldeps package logger.

    Args:
        path: Log file; defaults to $QMLDEPS_LOG_PATH, then ./qmldeps.log.jsonl
        level: Level name; defaults to $QMLDEPS_LOG_LEVEL, then INFO

    Returns:
        The log file path in use
    """
    path = Path(path or os.environ.get(ENV_LOG_PATH, DEFAULT_PATH))
    level = (level or os.environ.get(ENV_LOG_LEVEL, DEFAULT_LEVEL)).upper()
    levelno = getattr(logging, level, logging.INFO)
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(levelno)
    for h in list(package_logger.handlers):
        if isinstance(h, JsonlHandler):
            package_logger.removeHandler(h)
            h.close()
    handler = JsonlHandler(path)
    # -v may lower the logger level later; the file keeps its own
    handler.setLevel(levelno)
    package_logger.addHandler(handler)
    return path
