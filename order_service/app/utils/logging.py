"""
Order Service Logging
=====================
One JSON line per record. Handlers live on the ``order_service`` logger;
component loggers such as ``order_service.clients.product`` only set their
level and propagate to it.
"""

import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

ROOT_LOGGER = "order_service"

# Everything a bare LogRecord carries; the rest came in through ``extra``
_RECORD_FIELDS = frozenset(vars(logging.makeLogRecord({}))) | {
    "message",
    "asctime",
    "taskName",
}


class OrderJSONFormatter(logging.Formatter):
    """Render a record and its ``extra`` context as a JSON object"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "service": ROOT_LOGGER,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RECORD_FIELDS
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, ensure_ascii=False)


def _rotating(path: Path, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = RotatingFileHandler(path, maxBytes=50 * 1024 * 1024, backupCount=5)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_order_logging(
    service_name: str = ROOT_LOGGER,
    log_level: str = "INFO",
    enable_file_logging: bool = False,
    log_dir: Optional[str] = None,
) -> logging.Logger:
    """
    Return the logger for ``service_name``.

    Only the service's root logger gets handlers: stdout always, and with
    ``enable_file_logging`` a rotating file plus an errors-only file.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    logger = logging.getLogger(service_name)
    logger.setLevel(level)

    if service_name != ROOT_LOGGER:
        return logger

    logger.handlers.clear()
    formatter = OrderJSONFormatter()

    stream = logging.StreamHandler(sys.stdout)
    stream.setFormatter(formatter)
    logger.addHandler(stream)

    if enable_file_logging:
        directory = Path(log_dir) if log_dir else Path.cwd() / "logs"
        directory.mkdir(parents=True, exist_ok=True)
        logger.addHandler(_rotating(directory / "order_service.log", level, formatter))
        logger.addHandler(
            _rotating(directory / "order_service_errors.log", logging.ERROR, formatter)
        )

    return logger
