import json
import logging
import sys
from typing import Optional

from .client import LogShipper

# Records from these loggers are never shipped; the HTTP stack logs while a
# line is being sent.
_SKIPPED_LOGGERS = ("httpx", "httpcore", "logdna_shipper")


class JsonFormatter(logging.Formatter):
    def format(self, record):
        base = {
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
        }
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(base, separators=(",", ":"))


def configure_logging(level: int = logging.INFO):
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)


class ShipperHandler(logging.Handler):
    """Forward standard library log records to the ingestion API."""

    def __init__(self, shipper: LogShipper, level: int = logging.NOTSET):
        super().__init__(level)
        self.shipper = shipper

    def filter(self, record: logging.LogRecord) -> bool:
        if _is_skipped(record.name):
            return False
        return super().filter(record)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            self.shipper.submit_blocking(message, record.levelname.lower())
        except Exception:
            self.handleError(record)


def _is_skipped(name: Optional[str]) -> bool:
    if not name:
        return False
    return any(name == prefix or name.startswith(prefix + ".") for prefix in _SKIPPED_LOGGERS)
