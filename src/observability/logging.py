"""
Structured logging configuration using structlog.

Emits JSON logs in production and coloured console logs elsewhere. Engine
modules log through the standard library, which is routed through the same
handler, so a single setup_logging() call covers the whole package.

The package never configures logging on import. Applications embedding the
clustering engine or the feedback pipeline call setup_logging() once at
startup, before building an IncrementalClusterer or FeedbackPipeline:

    from src.observability import setup_logging

    setup_logging()
    pipeline = FeedbackPipeline(analyzer=sentiment, embedder=embeddings)
"""

import logging
import sys

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from src.config.settings import Settings, get_settings


def _service_name_adder(service_name: str) -> Processor:
    """Processor stamping every event with the service name."""

    def add_service_name(
        logger: WrappedLogger, method_name: str, event_dict: EventDict
    ) -> EventDict:
        event_dict.setdefault("service", service_name)
        return event_dict

    return add_service_name


def setup_logging(settings: Settings | None = None) -> None:
    """
    Configure structured logging for the application.

    Safe to call again (for example after changing settings in tests); the
    latest call wins.

    Args:
        settings: Settings to read environment, log level and service name
            from. Defaults to the cached application settings. debug=True
            forces DEBUG level.

    Usage:
        setup_logging()
        logger = structlog.get_logger()
        logger.info("Clustered batch", clusters=4, outliers=2)
    """
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        _service_name_adder(settings.service_name),
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.is_production:
        renderer: Processor = structlog.processors.JSONRenderer()
        processors = shared_processors + [structlog.processors.format_exc_info, renderer]
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
        processors = shared_processors + [renderer]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Replace any handler left by an earlier call
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
        force=True,
    )

    # Quiet noisy libraries
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger.

    Args:
        name: Logger name (defaults to module name)

    Returns:
        Bound logger instance
    """
    return structlog.get_logger(name)


def bind_context(**kwargs) -> None:
    """
    Bind context variables to all subsequent log messages.

    Useful for batch or run ids that should appear in every pipeline log.

    Args:
        **kwargs: Key-value pairs to bind
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
