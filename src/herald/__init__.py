"""Herald: a chat-automation runtime.

Provides the plugin registry for adapters and handlers, the manager that
builds and runs robots, and authorization groups backed by a namespaced
key-value store.
"""

from collections.abc import Callable
from typing import Any

from .auth import UNAUTHORIZED, AuthorizationService, Changed, Unauthorized
from .core import (
    Adapter,
    Handler,
    PluginRegistry,
    Robot,
    RobotManager,
    get_plugin_registry,
    get_robot_manager,
)
from .exceptions import ConfigurationError, FrozenConfigError, HeraldError
from .legacy import REDIS_NAMESPACE, Authorization, clear_config, config, configure, logger, redis
from .models import RobotConfig, User, UserDirectory

__version__ = "0.1.0"


def register_adapter(key: object, adapter: type[Adapter]) -> None:
    """Add an adapter to the default registry under the provided key."""
    get_plugin_registry().register_adapter(key, adapter)


def adapters() -> dict[str, type[Adapter]]:
    """The adapters in the default registry."""
    return get_plugin_registry().adapters()


def register_handler(handler: type[Handler]) -> None:
    """Add a handler to the default registry."""
    get_plugin_registry().register_handler(handler)


def handlers() -> frozenset[type[Handler]]:
    """The handlers in the default registry."""
    return get_plugin_registry().handlers()


def add_robot(configurator: Callable[[RobotConfig], Any] | None = None) -> Robot:
    """Add a robot to the default manager."""
    return get_robot_manager().add_robot(configurator)


def run(config_path: str | None = None) -> None:
    """Load user configuration and run the default manager's robots."""
    get_robot_manager().run(config_path)


__all__ = [
    "Adapter",
    "Authorization",
    "AuthorizationService",
    "Changed",
    "ConfigurationError",
    "FrozenConfigError",
    "Handler",
    "HeraldError",
    "PluginRegistry",
    "REDIS_NAMESPACE",
    "Robot",
    "RobotConfig",
    "RobotManager",
    "UNAUTHORIZED",
    "Unauthorized",
    "User",
    "UserDirectory",
    "adapters",
    "add_robot",
    "clear_config",
    "config",
    "configure",
    "handlers",
    "logger",
    "redis",
    "register_adapter",
    "register_handler",
    "run",
]
