"""Structured logging for the Herald runtime.

Every module logs through structlog on top of stdlib logging:
- JSON lines when ``HERALD_ENV=production``
- Colored console output otherwise
- Each event carries the runtime environment, and any context bound with
  :func:`bind_context` (a running robot binds its name)

Robots choose their verbosity with ``config.robot.log_level``, which is
applied to the stdlib logger through :func:`get_logger`.
"""

import logging
import os
import sys
from typing import Any

import structlog
from structlog.types import Processor

HERALD_ENV = os.getenv("HERALD_ENV", "development")
IS_PRODUCTION = HERALD_ENV == "production"

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def add_runtime_info(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Tag log events with the service and environment."""
    event_dict.setdefault("service", "herald")
    event_dict.setdefault("environment", HERALD_ENV)
    return event_dict


def configure_structlog(production: bool = IS_PRODUCTION) -> None:
    """Configure structlog and the stdlib root handler.

    Args:
        production: Render JSON instead of console output.
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_runtime_info,
    ]

    if production:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.INFO if production else logging.DEBUG,
    )


def resolve_level(level: str | int) -> int:
    """Translate a config log level ("info", "warning", ...) to a stdlib level."""
    if isinstance(level, int):
        return level
    return LOG_LEVELS.get(str(level).strip().lower(), logging.INFO)


def get_logger(name: str | None = None, level: str | int | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger, optionally setting the stdlib level for ``name``.

    Args:
        name: Logger name (usually __name__ from the calling module)
        level: Config log level applied to the underlying stdlib logger

    Returns:
        A bound structlog logger instance
    """
    if level is not None:
        logging.getLogger(name).setLevel(resolve_level(level))
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind key-value pairs to every event logged from this context."""
    structlog.contextvars.bind_contextvars(**kwargs)


configure_structlog()
