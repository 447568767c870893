"""Data models for robots and users."""

from .config import (
    ConfigSection,
    RedisSection,
    RobotConfig,
    RobotSection,
    Settings,
    default_config,
    get_settings,
)
from .user import User, UserDirectory, UserLookup

__all__ = [
    "ConfigSection",
    "RedisSection",
    "RobotConfig",
    "RobotSection",
    "Settings",
    "default_config",
    "get_settings",
    "User",
    "UserDirectory",
    "UserLookup",
]
