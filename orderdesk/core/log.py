from __future__ import annotations

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar

from fastapi import Request, Response
from uvicorn.logging import ColourizedFormatter

from orderdesk.core.config import settings

_RESERVED_ATTRS = frozenset(
    (
        "message", "args", "levelname", "levelno", "name", "pathname", "filename",
        "module", "lineno", "funcName", "exc_info", "exc_text", "stack_info",
        "created", "msecs", "relativeCreated", "thread", "threadName",
        "processName", "process", "taskName", "msg",
    )
)


# Set by access_log_middleware for the lifetime of one request; "-" elsewhere.
request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


def _install_request_id_factory() -> None:
    """Stamps every LogRecord with the current request_id, whichever logger emits it."""
    base_factory = logging.getLogRecordFactory()
    if getattr(base_factory, "stamps_request_id", False):
        return

    def factory(*args, **kwargs) -> logging.LogRecord:
        record = base_factory(*args, **kwargs)
        record.request_id = request_id_var.get()
        return record

    factory.stamps_request_id = True  # type: ignore[attr-defined]
    logging.setLogRecordFactory(factory)


class _JsonLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname.upper(),
            "logger": record.name,
            "msg": record.getMessage(),
            "service": getattr(settings, "APP_NAME", "orderdesk"),
            "request_id": getattr(record, "request_id", "-"),
        }

        # Merge extras (method, path, status, latency_ms, etc.)
        for k, v in record.__dict__.items():
            if k not in log_obj and k not in _RESERVED_ATTRS:
                log_obj[k] = v

        if record.exc_info:
            log_obj["exc"] = self.formatException(record.exc_info)

        return json.dumps(log_obj, ensure_ascii=False, default=str)


def setup_logging() -> None:
    """Configures logging for the application."""
    log_level = settings.LOG_LEVEL.upper()
    log_format = settings.LOG_FORMAT.lower()

    handler = logging.StreamHandler(sys.stdout)

    if log_format == "json":
        formatter: logging.Formatter = _JsonLogFormatter(datefmt="%Y-%m-%dT%H:%M:%S%z")
    else:
        formatter = ColourizedFormatter("%(levelprefix)s %(name)s - %(message)s", use_colors=True)

    handler.setFormatter(formatter)
    _install_request_id_factory()

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.addHandler(handler)

    # Less noise
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


async def access_log_middleware(request: Request, call_next) -> Response:
    """Logs every request/response pair with a request_id."""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    token = request_id_var.set(request_id)

    logger = logging.getLogger("orderdesk.access")
    extra = {
        "method": request.method,
        "path": request.url.path,
        "client_ip": request.client.host if request.client else "-",
        "user_agent": request.headers.get("user-agent", "-"),
    }

    start = time.time()
    try:
        response = await call_next(request)
        duration_ms = round((time.time() - start) * 1000, 2)

        extra["status"] = response.status_code
        extra["latency_ms"] = duration_ms

        logger.info("request", extra=extra)
    finally:
        request_id_var.reset(token)
    response.headers["X-Request-ID"] = request_id

    return response
