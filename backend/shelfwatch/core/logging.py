"""Logging setup for shelfwatch.

Records carry tenant context as ``ctx_*`` attributes (see ``TenantLogger``).
The JSON formatter gathers those under a ``context`` object so a log
pipeline can filter by network or location without parsing messages.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, MutableMapping

import orjson

_DEFAULT_LEVEL = os.environ.get("SHW_LOG_LEVEL", "INFO")
_CONTEXT_PREFIX = "ctx_"
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
# the observer thread logs every filesystem event at DEBUG
_NOISY_LOGGERS = ("watchdog",)


class JsonFormatter(logging.Formatter):
    """One JSON object per record, tenant context nested under ``context``."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = {
            key[len(_CONTEXT_PREFIX):]: value
            for key, value in record.__dict__.items()
            if key.startswith(_CONTEXT_PREFIX) and value is not None
        }
        if context:
            payload["context"] = context
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(payload, default=str).decode("utf-8")


class TenantLogger(logging.LoggerAdapter):
    """Adapter stamping the store name and bound tenant onto each record.

    ``context`` is read on every call, so rebinding a store to another
    location is reflected without recreating the adapter.
    """

    def __init__(self, logger: logging.Logger, context: Any) -> None:
        super().__init__(logger, {})
        self._context = context

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        for key, value in self._context().items():
            extra.setdefault(f"{_CONTEXT_PREFIX}{key}", value)
        kwargs["extra"] = extra
        return msg, kwargs


def configure_logging(level: str | int = _DEFAULT_LEVEL, use_json: bool = True) -> None:
    """Install a single stdout handler on the root logger."""
    logging.captureWarnings(True)
    root = logging.getLogger()
    root.setLevel(level)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter() if use_json else logging.Formatter(_PLAIN_FORMAT))
    root.handlers = [handler]
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(root.level, logging.WARNING))


def get_logger(name: str = "shelfwatch") -> logging.Logger:
    """Return a logger, configuring the root on first use."""
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


__all__ = ["JsonFormatter", "TenantLogger", "configure_logging", "get_logger"]
