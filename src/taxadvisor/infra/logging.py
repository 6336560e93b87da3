"""Root logger setup for the API process.

``setup_logging`` installs one stdout handler shared by the root logger and
uvicorn.  Records are rendered as JSON lines tagged with the service name,
or as coloured text when ``LoggingConfig.json_output`` is off.  Chat and
store modules log through ``logging.getLogger(__name__)`` and need no setup
of their own.

Records emitted inside an active OpenTelemetry span carry its ``trace_id``
and ``span_id``.
"""

from __future__ import annotations

import logging
import sys

from opentelemetry import trace
from pythonjsonlogger.json import JsonFormatter
from uvicorn.logging import DefaultFormatter

from taxadvisor.configs.system import LoggingConfig

SERVICE_NAME = "taxadvisor"

_JSON_FIELDS = (
    "%(asctime)s %(levelname)s %(name)s %(message)s %(trace_id)s %(span_id)s"
)
_JSON_RENAMES = {"asctime": "timestamp", "levelname": "level", "name": "logger"}
_TEXT_FORMAT = "%(levelprefix)s %(asctime)s %(name)s  %(message)s"
_TEXT_DATEFMT = "%H:%M:%S"

_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")
# Client libraries log every request at INFO.
_NOISY_LOGGERS = ("httpx", "httpcore", "openai", "sqlalchemy.engine")


class _SpanContextFilter(logging.Filter):
    """Copies the active span's ids onto the record (empty when none)."""

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = trace.get_current_span().get_span_context()
        valid = ctx is not None and ctx.is_valid
        trace_id = format(ctx.trace_id, "032x") if valid else ""
        span_id = format(ctx.span_id, "016x") if valid else ""
        record.trace_id = trace_id  # type: ignore[attr-defined]
        record.span_id = span_id  # type: ignore[attr-defined]
        return True


def build_formatter(config: LoggingConfig) -> logging.Formatter:
    if not config.json_output:
        return DefaultFormatter(
            fmt=_TEXT_FORMAT, datefmt=_TEXT_DATEFMT, use_colors=True
        )
    return JsonFormatter(
        fmt=_JSON_FIELDS,
        rename_fields=_JSON_RENAMES,
        static_fields={"service": SERVICE_NAME},
        defaults={"trace_id": "", "span_id": ""},
    )


def build_handler(config: LoggingConfig) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(_SpanContextFilter())
    handler.setFormatter(build_formatter(config))
    return handler


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Route root and uvicorn logging through a single stdout handler."""
    config = config or LoggingConfig()
    handler = build_handler(config)

    root = logging.getLogger()
    root.setLevel(config.level.upper())
    root.handlers = [handler]

    for name in _UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = [handler]
        uvicorn_logger.propagate = False

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
