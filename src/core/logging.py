"""
Structured logging for the suggestion service (structlog).

Every event carries ``service`` plus whatever the request middleware bound
(``request_id``, ``method``, ``path``), so engine lines such as
"Ranking candidates" or "Candidate scoring failed" can be traced back to
the request that produced them.

Usage:
    from core.logging import configure_logging, get_logger

    configure_logging(json_logs=settings.use_json_logs, log_level=settings.log_level)

    logger = get_logger(__name__)
    logger.info("Ranking candidates", candidate_count=42, location="Madison")
"""

import logging
import sys
from typing import Any, List, Optional

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

SERVICE_NAME = "suggestion-api"

# Chatty third-party loggers kept at WARNING regardless of the app level
QUIET_LOGGERS = ("uvicorn.access", "httpx")


def add_service_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def configure_logging(json_logs: bool = False, log_level: str = "INFO") -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        json_logs: JSON lines (production) instead of the colored console renderer.
        log_level: Minimum level for both structlog events and stdlib records
                   (the context resolver logs through stdlib ``logging``).
    """
    processors: List[Processor] = [
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.contextvars.merge_contextvars,
        add_service_name,
        structlog.stdlib.add_log_level,
    ]

    if json_logs:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        ))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    level = getattr(logging, log_level.upper())
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger().setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Attach key/values to every event logged in the current request."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
