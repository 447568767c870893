"""Infrastructure support for the runtime."""

from .logging_config import (
    bind_context,
    configure_structlog,
    get_logger,
    resolve_level,
)

__all__ = [
    "bind_context",
    "configure_structlog",
    "get_logger",
    "resolve_level",
]
