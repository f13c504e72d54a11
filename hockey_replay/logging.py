"""
structlog setup for replay sessions.

Every synthesis and playback step logs one JSON line to stdout, keyed by
event name with game_pk, feed index or clock time as context, so a bad
feed record can be traced back to the play that caused it. Set LOG_LEVEL
to DEBUG to see penalty ledger changes and timeline reordering.
"""

from __future__ import annotations

import logging

import structlog

from .config import settings


def _normalize_log_level(level: str | None, environment: str) -> int:
    env = environment.lower()
    if level:
        normalized = level.strip().upper()
    else:
        normalized = "INFO" if env == "production" else "DEBUG"
    return logging._nameToLevel.get(normalized, logging.INFO)


def configure_logging() -> None:
    """Configure structlog once; LOG_LEVEL wins, else DEBUG outside production."""
    resolved_level = _normalize_log_level(settings.log_level, settings.environment)
    logging.basicConfig(level=resolved_level)
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.EventRenamer("message"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(resolved_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )


# Configure logging at module import time
configure_logging()

# Global logger instance with service context
logger = structlog.get_logger("hockey-replay").bind(
    logger="hockey-replay",
    service="hockey-replay",
    environment=settings.environment,
)
