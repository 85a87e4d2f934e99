"""
Notification Service Logging
============================
JSON log output for the ``notification_service`` logger tree.
"""

import json
import logging
import sys
from typing import Any, Dict

_RESERVED = set(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


class NotificationJSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "service": "notification_service",
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_entry.update(
            {k: v for k, v in record.__dict__.items() if k not in _RESERVED}
        )
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str, ensure_ascii=False)


def setup_notification_logging(
    service_name: str = "notification_service", log_level: str = "INFO"
) -> logging.Logger:
    """Configure the service's root logger; module loggers propagate to it"""
    logger = logging.getLogger(service_name)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(NotificationJSONFormatter())
    logger.addHandler(handler)
    return logger
