# user_service/shared/logging_config.py
import logging
import sys

import structlog
from opentelemetry import trace

from user_service.shared.config import AppEnv, settings

# Third-party loggers and the level they are held at.
# uvicorn.access is redundant with the http_request event of the API middleware.
NOISY_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
}

_handler = None


def add_open_telemetry_spans(_, __, event_dict):
    """Adds trace_id/span_id of the active span so logs join their trace."""
    span = trace.get_current_span()
    if not span.is_recording():
        return event_dict

    ctx = span.get_span_context()
    event_dict["trace_id"] = format(ctx.trace_id, "032x")
    event_dict["span_id"] = format(ctx.span_id, "016x")
    return event_dict


def add_service_context(_, __, event_dict):
    event_dict.setdefault("service", settings.APP_NAME)
    event_dict.setdefault("env", settings.APP_ENV.value)
    event_dict.setdefault("version", settings.APP_VERSION)
    return event_dict


def select_renderer():
    """JSON in production or when LOG_FORMAT=json, colored console output otherwise."""
    if settings.LOG_FORMAT == "json" or settings.APP_ENV == AppEnv.PRODUCTION:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def configure_logging():
    """
    Configures structlog and routes standard-library records (uvicorn,
    SQLAlchemy) through the same processors and renderer, so every line the
    service prints has one format.

    Safe to call more than once (each app factory call does).
    """
    global _handler
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_service_context,
        add_open_telemetry_spans,
    ]

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.filter_by_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            select_renderer(),
        ],
    )
    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)
    _handler = logging.StreamHandler(sys.stdout)
    _handler.setFormatter(formatter)
    root.addHandler(_handler)
    root.setLevel(level)

    for name, floor in NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(max(level, floor))
    if settings.DB_ECHO:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
