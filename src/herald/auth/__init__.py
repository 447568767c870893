"""Authorization groups and results."""

from .authorization import (
    ADMIN_GROUP,
    UNAUTHORIZED,
    AuthorizationResult,
    AuthorizationService,
    Changed,
    Unauthorized,
    normalize_group,
)

__all__ = [
    "ADMIN_GROUP",
    "UNAUTHORIZED",
    "AuthorizationResult",
    "AuthorizationService",
    "Changed",
    "Unauthorized",
    "normalize_group",
]
