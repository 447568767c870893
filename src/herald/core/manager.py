"""Multi-robot lifecycle management.

The RobotManager builds Robot instances from configurator callbacks and
runs them. It never runs robots in parallel: each ``Robot.run`` blocks,
so an embedding runtime that wants several robots live at once must give
each its own thread, task or process.
"""

import threading
from collections.abc import Callable
from typing import Any

from ..exceptions import ConfigurationError
from ..infrastructure.logging_config import get_logger
from ..models.config import RobotConfig, default_config
from ..store.keyvalue import KeyValueStore
from .loader import ConfigLoader
from .registry import PluginRegistry, get_plugin_registry
from .robot import Robot

logger = get_logger(__name__)

Configurator = Callable[[RobotConfig], Any]


def _legacy_shared_config() -> RobotConfig:
    from ..legacy import get_facade

    return get_facade().default_robot_config()


class RobotManager:
    """Holds the robots of one runtime.

    Example:
        manager = RobotManager(registry=registry)

        def configure(config):
            config.robot.adapter = "slack"
            config.robot.admins = ["U123"]

        manager.add_robot(configure)
        manager.run()

    Attributes:
        configure_shared_config: When True (the default, matching earlier
            releases), configurators receive the shared default config
            rather than the config of the robot being added, so the new
            robot is built from untouched defaults. Set it to False to hand
            each configurator its own robot's config.
    """

    def __init__(
        self,
        registry: PluginRegistry | None = None,
        config_factory: Callable[[], RobotConfig] = default_config,
        loader: ConfigLoader | None = None,
        shared_config: Callable[[], RobotConfig] | None = None,
        configure_shared_config: bool = True,
        redis: KeyValueStore | None = None,
    ) -> None:
        self.registry = registry or get_plugin_registry()
        self.loader = loader or ConfigLoader()
        self.configure_shared_config = configure_shared_config
        self._config_factory = config_factory
        self._shared_config = shared_config or _legacy_shared_config
        self._redis = redis
        self._robots: list[Robot] = []
        self._lock = threading.Lock()

    @property
    def robots(self) -> tuple[Robot, ...]:
        """The robots added so far, in registration order."""
        with self._lock:
            return tuple(self._robots)

    def shared_config(self) -> RobotConfig:
        """The shared default config used by the implicit default robot."""
        return self._shared_config()

    def add_robot(
        self,
        configurator: Configurator | None = None,
        *,
        configure_shared: bool | None = None,
    ) -> Robot:
        """Build a robot from a configurator callback and add it.

        Args:
            configurator: Callable that receives a RobotConfig to mutate.
            configure_shared: Overrides ``configure_shared_config`` for this
                call only.

        Returns:
            The new Robot.

        Raises:
            ConfigurationError: If no configurator is supplied, or the
                resulting config names an unregistered adapter.
        """
        if configurator is None:
            raise ConfigurationError("add_robot requires a configurator callback")

        new_config = self._config_factory()
        if configure_shared is None:
            configure_shared = self.configure_shared_config
        target = self.shared_config() if configure_shared else new_config
        configurator(target)

        robot = self._build_robot(new_config)
        with self._lock:
            self._robots.append(robot)
            total = len(self._robots)

        logger.info("robot_added", robot=robot.name, total=total)
        return robot

    def _build_robot(self, config: RobotConfig) -> Robot:
        return Robot(config, registry=self.registry, redis=self._redis)

    def run(self, config_path: str | None = None) -> None:
        """Load user configuration and run the robots.

        With no robots added, builds and runs one robot from a copy of the
        shared default config. Otherwise runs every added robot in registration
        order; each call blocks until that robot stops.
        """
        self.loader.load(config_path, manager=self)

        robots = self.robots
        if not robots:
            logger.info("running_default_robot")
            # The shared config itself must never be frozen.
            self._build_robot(self.shared_config().model_copy(deep=True)).run()
            return

        for robot in robots:
            robot.run()


_manager: RobotManager | None = None
_manager_lock = threading.Lock()


def get_robot_manager() -> RobotManager:
    """Get the process-default robot manager."""
    global _manager
    if _manager is None:
        with _manager_lock:
            if _manager is None:
                _manager = RobotManager()
    return _manager


def reset_robot_manager() -> None:
    """Reset the process-default robot manager (for testing)."""
    global _manager
    with _manager_lock:
        _manager = None
