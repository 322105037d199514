"""structlog setup shared by the API server and the CLI.

Every event carries the service name and deployment profile so that logs
from several demo instances can be told apart.
"""

import logging
import sys

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from openfga_demo.core.config import settings

# Libraries whose debug output drowns out the request log
NOISY_LOGGERS = ("openfga_sdk", "aiohttp.access", "httpx", "httpcore")


def add_service_context(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", settings.SERVICE_NAME)
    event_dict.setdefault("profile", settings.PROFILE)
    return event_dict


def _renderer() -> list[Processor]:
    if settings.ENVIRONMENT == "development" and sys.stderr.isatty():
        return [structlog.dev.ConsoleRenderer(colors=True)]
    return [
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]


def setup_logging() -> None:
    """Route structlog and stdlib logging through one renderer."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_service_context,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        *_renderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    # uvicorn records go through the root handler
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).handlers = []
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
