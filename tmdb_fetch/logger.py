"""Logging setup for tmdb_fetch.

The fetcher, retry policy and cache stores attach request metadata through
``extra=`` (``url``, ``attempt``, ``attempts``, ``status``, ``error``).
``LOG_FORMAT=json`` emits one JSON object per line carrying those fields;
the default text format keeps them in the message only.
"""
import json
import logging
import os

METADATA_FIELDS = ("url", "attempt", "attempts", "status", "error")

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record, DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in METADATA_FIELDS:
            if hasattr(record, name):
                payload[name] = getattr(record, name)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def build_formatter(log_format: str | None = None) -> logging.Formatter:
    log_format = (log_format or os.environ.get("LOG_FORMAT", "text")).lower()
    if log_format == "json":
        return JsonFormatter()
    return logging.Formatter(fmt=TEXT_FORMAT, datefmt=DATE_FORMAT)


def setup_logging(log_format: str | None = None) -> None:
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(build_formatter(log_format))
        root.addHandler(handler)
    root.setLevel(level)

    # httpx logs every request at INFO; misses and retries are logged here
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


__all__ = ["JsonFormatter", "build_formatter", "setup_logging"]
