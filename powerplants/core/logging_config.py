"""Shared logging configuration and request-scoped logger handles."""

from __future__ import annotations

import logging
import os
import uuid
from typing import Optional

from pythonjsonlogger import jsonlogger

_CONFIGURED = False


class _ServiceNameFilter(logging.Filter):
    def __init__(self, service_name: str) -> None:
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - trivial
        record.service = self.service_name
        return True


class RequestLoggerAdapter(logging.LoggerAdapter):
    """Attach the request id to every record emitted through the handle."""

    def process(self, msg, kwargs):
        extra = dict(self.extra)
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return msg, kwargs


def setup_logging(service_name: Optional[str] = None) -> None:
    """Configure root logging with a JSON formatter and consistent metadata."""

    global _CONFIGURED
    if _CONFIGURED:
        return

    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    service = service_name or os.getenv("SERVICE_NAME", "powerplants")

    handler = logging.StreamHandler()
    handler.setFormatter(
        jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s %(service)s")
    )
    handler.addFilter(_ServiceNameFilter(service))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(log_level)
    logging.captureWarnings(True)
    _CONFIGURED = True


def request_logger(request_id: str | None = None, name: str = "powerplants.request") -> RequestLoggerAdapter:
    """Return a logger handle bound to one request."""

    return RequestLoggerAdapter(
        logging.getLogger(name),
        {"request_id": request_id or uuid.uuid4().hex},
    )


__all__ = ["setup_logging", "request_logger", "RequestLoggerAdapter"]
