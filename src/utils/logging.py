"""Structured logging for viralcut.

structlog renders both its own events and plain ``logging.getLogger(__name__)``
records, so every line carries the same timestamp, level and request id.
"""

import logging
import sys

import structlog

# Third-party loggers and the level they are capped at
QUIET_LOGGERS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "google_genai": logging.WARNING,
    "google_genai.models": logging.WARNING,
    "urllib3.connectionpool": logging.WARNING,
    # yt-dlp reports every extraction failure; the metadata chain logs its own summary
    "yt_dlp": logging.CRITICAL,
    "yt_dlp.extractor": logging.CRITICAL,
    "yt_dlp.downloader": logging.CRITICAL,
}


def _shared_processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def setup_logging(log_level: str = "INFO", json_output: bool = False) -> None:
    """Configure structured logging for the API process.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        json_output: JSON lines for log aggregation instead of colored console output
    """
    shared = _shared_processors()
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper()))

    for logger_name, level in QUIET_LOGGERS.items():
        logging.getLogger(logger_name).setLevel(level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger bound to ``name``."""
    return structlog.get_logger(name)


def set_request_context(request_id: str, **values) -> None:
    """Bind a request id (and any extra values) for the current task."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, **values)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def current_request_id() -> str | None:
    """Request id bound to the current task, if any."""
    return structlog.contextvars.get_contextvars().get("request_id")
