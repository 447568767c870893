"""Deprecated process-global API.

Older plugins and config files talk to a single implicit robot through
module-level functions (``herald.config()``, ``herald.configure(...)``)
and the static ``Authorization`` class. Those calls keep working, but
each one logs a ``deprecated`` warning naming its replacement. The state
behind them is built lazily, once per process, and is independent of
robots added through a RobotManager.
"""

import threading
from collections.abc import Callable
from typing import Any

import structlog

from .auth.authorization import AuthorizationService, Changed, Unauthorized
from .infrastructure.logging_config import get_logger
from .models.config import RobotConfig, default_config
from .models.user import User
from .store.keyvalue import KeyValueStore, Namespace, build_store

# The base namespace for all Herald data.
REDIS_NAMESPACE = "herald"


class DeprecatedGlobalFacade:
    """Lazily built default config, logger and root store.

    Each piece is constructed at most once, under a lock, on first access.
    """

    def __init__(
        self,
        config_factory: Callable[[], RobotConfig] = default_config,
        store_factory: Callable[[Any], KeyValueStore] = build_store,
    ) -> None:
        self._config_factory = config_factory
        self._store_factory = store_factory
        self._lock = threading.RLock()
        self._default_robot_config: RobotConfig | None = None
        self._logger: structlog.stdlib.BoundLogger | None = None
        self._redis: Namespace | None = None

    def default_robot_config(self) -> RobotConfig:
        """The implicit robot's config, without a deprecation warning."""
        if self._default_robot_config is None:
            with self._lock:
                if self._default_robot_config is None:
                    self._default_robot_config = self._config_factory()
        return self._default_robot_config

    def logger(self) -> structlog.stdlib.BoundLogger:
        """The global logger.

        Its level comes from the default config's ``robot.log_level`` at first
        access; later changes to the config do not affect it.
        """
        if self._logger is None:
            with self._lock:
                if self._logger is None:
                    level = self.default_robot_config().robot.log_level
                    self._logger = get_logger(REDIS_NAMESPACE, level=level)
        return self._logger

    def redis(self) -> Namespace:
        """The root store, namespaced under ``herald``."""
        if self._redis is None:
            with self._lock:
                if self._redis is None:
                    store = self._store_factory(self.default_robot_config().redis)
                    self._redis = Namespace(REDIS_NAMESPACE, store)
        return self._redis

    def deprecated(self, old_method: str, new_method: str) -> None:
        """Log a deprecation notice. Never affects the caller's result."""
        self.logger().warning("deprecated", old_method=old_method, new_method=new_method)

    def config(self) -> RobotConfig:
        """The global configuration object.

        Deprecated: use the ``config`` attribute of a Robot instead.
        """
        self.deprecated("herald.config", "Robot.config")
        return self.default_robot_config()

    def configure(self, configurator: Callable[[RobotConfig], Any]) -> None:
        """Call configurator with the global configuration object.

        Deprecated: use ``RobotManager.add_robot`` instead.
        """
        self.deprecated("herald.configure", "RobotManager.add_robot")
        configurator(self.default_robot_config())

    def clear_config(self) -> None:
        """Drop the global configuration; the next access builds a fresh one."""
        self.deprecated("herald.clear_config", "RobotManager.add_robot")
        with self._lock:
            self._default_robot_config = None


_facade: DeprecatedGlobalFacade | None = None
_facade_lock = threading.Lock()


def get_facade() -> DeprecatedGlobalFacade:
    """Get the process-wide facade."""
    global _facade
    if _facade is None:
        with _facade_lock:
            if _facade is None:
                _facade = DeprecatedGlobalFacade()
    return _facade


def reset_facade() -> None:
    """Reset the process-wide facade (for testing)."""
    global _facade
    with _facade_lock:
        _facade = None


def config() -> RobotConfig:
    """Deprecated. See :meth:`DeprecatedGlobalFacade.config`."""
    return get_facade().config()


def configure(configurator: Callable[[RobotConfig], Any]) -> None:
    """Deprecated. See :meth:`DeprecatedGlobalFacade.configure`."""
    get_facade().configure(configurator)


def clear_config() -> None:
    """Deprecated. See :meth:`DeprecatedGlobalFacade.clear_config`."""
    get_facade().clear_config()


def logger() -> structlog.stdlib.BoundLogger:
    return get_facade().logger()


def redis() -> Namespace:
    return get_facade().redis()


def _legacy_authorization(method: str) -> AuthorizationService:
    facade = get_facade()
    facade.deprecated(
        f"herald.Authorization.{method}",
        f"AuthorizationService.{method}",
    )
    return AuthorizationService(facade.default_robot_config(), redis=facade.redis())


class Authorization:
    """Static-style authorization API.

    Deprecated: use the ``auth`` attribute of a Robot (an
    AuthorizationService) instead.
    """

    @staticmethod
    def add_user_to_group(requesting_user: User, user: User, group: object) -> Unauthorized | Changed:
        return _legacy_authorization("add_user_to_group").add_user_to_group(requesting_user, user, group)

    @staticmethod
    def remove_user_from_group(
        requesting_user: User, user: User, group: object
    ) -> Unauthorized | Changed:
        return _legacy_authorization("remove_user_from_group").remove_user_from_group(
            requesting_user, user, group
        )

    @staticmethod
    def user_in_group(user: User, group: object) -> bool:
        return _legacy_authorization("user_in_group").user_in_group(user, group)

    @staticmethod
    def user_is_admin(user: User) -> bool:
        return _legacy_authorization("user_is_admin").user_is_admin(user)

    @staticmethod
    def groups() -> list[str]:
        return _legacy_authorization("groups").groups()

    @staticmethod
    def groups_with_users() -> dict[str, list[User | None]]:
        return _legacy_authorization("groups_with_users").groups_with_users()
