"""
Structured logging.

Loggers accept keyword fields alongside the event message:

    logger.info("User registered", identifier=identifier)

With the json format every record is one JSON object per line
(timestamp, level, logger, event, data).
"""

import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

from .config import LoggingSettings


TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s%(fields)s"


class JsonFormatter(logging.Formatter):
    """Render a record as a single JSON line"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
            "data": getattr(record, "data", {}) or {},
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    def __init__(self):
        super().__init__(TEXT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        data = getattr(record, "data", {}) or {}
        record.fields = (" " + " ".join(f"{k}={v}" for k, v in data.items())) if data else ""
        return super().format(record)


class StructuredLogger:
    """Thin wrapper that turns keyword arguments into record data"""

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    @property
    def name(self) -> str:
        return self._logger.name

    def _log(self, level: int, event: str, exc_info: Any = None, **fields: Any) -> None:
        if self._logger.isEnabledFor(level):
            self._logger.log(level, event, exc_info=exc_info, extra={"data": fields})

    def debug(self, event: str, **fields: Any) -> None:
        self._log(logging.DEBUG, event, **fields)

    def info(self, event: str, **fields: Any) -> None:
        self._log(logging.INFO, event, **fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._log(logging.WARNING, event, **fields)

    def error(self, event: str, **fields: Any) -> None:
        self._log(logging.ERROR, event, **fields)

    def exception(self, event: str, **fields: Any) -> None:
        self._log(logging.ERROR, event, exc_info=True, **fields)


def configure_logging(settings: Optional[LoggingSettings] = None) -> None:
    """Install root handlers: stdout, plus a rotating file when configured"""
    settings = settings or LoggingSettings()
    formatter: logging.Formatter = JsonFormatter() if settings.format == "json" else TextFormatter()

    handlers: list = [logging.StreamHandler(sys.stdout)]
    if settings.file_path:
        log_path = Path(settings.file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_path,
                maxBytes=settings.max_bytes,
                backupCount=settings.backup_count,
                encoding="utf-8",
            )
        )
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(
        level=getattr(logging, settings.level.upper(), logging.INFO),
        handlers=handlers,
        force=True,
    )


def get_logger(name: str) -> StructuredLogger:
    return StructuredLogger(logging.getLogger(name))
