"""Root logger setup for the chat backend.

``setup_logging`` runs once from the app factory.  Every record goes to a
single stdout handler, as JSON lines for log shipping or as coloured text
(``logging.json_output: false``) when running locally.  Records emitted
inside a span carry its ``trace_id`` and ``span_id`` so a chat turn's log
lines can be joined with its trace.
"""

from __future__ import annotations

import logging
import sys

from opentelemetry import trace

from flybus.configs.system import LoggingConfig

# Third-party loggers that are only interesting when something goes wrong.
QUIET_LOGGERS = ("httpx", "httpcore", "openai", "opentelemetry", "redis")

# uvicorn installs its own handlers; they are replaced with ours.
UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

_CONSOLE_FORMAT = "%(levelprefix)s %(asctime)s [%(trace_id)s] %(name)s: %(message)s"
_CONSOLE_DATEFMT = "%H:%M:%S"
_JSON_FORMAT = (
    "%(asctime)s %(levelname)s %(name)s %(message)s %(trace_id)s %(span_id)s"
)


class SpanContextFilter(logging.Filter):
    """Copies the active span's IDs onto the record (empty outside a span)."""

    def filter(self, record: logging.LogRecord) -> bool:
        span_context = trace.get_current_span().get_span_context()
        valid = span_context is not None and span_context.is_valid
        record.trace_id = format(span_context.trace_id, "032x") if valid else ""
        record.span_id = format(span_context.span_id, "016x") if valid else ""
        return True


def _json_formatter() -> logging.Formatter:
    from pythonjsonlogger.json import JsonFormatter

    return JsonFormatter(
        fmt=_JSON_FORMAT,
        rename_fields={"asctime": "timestamp", "levelname": "level", "name": "logger"},
    )


def _console_formatter() -> logging.Formatter:
    from uvicorn.logging import DefaultFormatter

    return DefaultFormatter(
        fmt=_CONSOLE_FORMAT, datefmt=_CONSOLE_DATEFMT, use_colors=True
    )


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Install the stdout handler on the root and uvicorn loggers."""
    config = config or LoggingConfig()

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(SpanContextFilter())
    handler.setFormatter(
        _json_formatter() if config.json_output else _console_formatter()
    )

    root = logging.getLogger()
    root.setLevel(config.level.upper())
    root.handlers = [handler]

    for name in UVICORN_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers = [handler]
        server_logger.propagate = False

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
