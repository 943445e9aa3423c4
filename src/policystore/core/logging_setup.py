"""Logging setup for the policystore CLI."""

from __future__ import annotations

import json
import logging

from policystore.core.config import LoggingConfig

_TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def configure_logging(cfg: LoggingConfig) -> logging.Logger:
    """Attach a stderr handler to the ``policystore`` logger. Safe to call twice."""
    logger = logging.getLogger("policystore")
    logger.setLevel(cfg.level)

    for handler in list(logger.handlers):
        if getattr(handler, "_policystore", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler._policystore = True  # type: ignore[attr-defined]
    if cfg.format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT))
    logger.addHandler(handler)
    return logger
