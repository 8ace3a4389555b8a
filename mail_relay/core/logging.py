"""
Structlog setup for the relay.

Every event is a snake_case name plus keyword fields. Context bound with
``structlog.contextvars`` (the hosting route binds the envelope sender and
Message-ID) is merged into each event of that invocation.
"""

import logging
import sys

import structlog

from mail_relay.config import Settings

# Fields shared by both renderers
SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
]


def configure_logging(relay_settings: Settings) -> None:
    """
    Configure stdlib logging and structlog from settings.

    LOG_LEVEL is already validated by Settings, so an unknown level never
    reaches this point. LOG_JSON picks one JSON object per line for
    production; otherwise the colored console renderer is used.
    """
    level = logging.getLevelName(relay_settings.log_level)

    # Plain message format: structlog renders the whole line
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger().setLevel(level)

    if relay_settings.log_json:
        renderers = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=True)]

    structlog.configure(
        processors=[*SHARED_PROCESSORS, *renderers],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, usually for ``__name__``."""
    return structlog.get_logger(name)
