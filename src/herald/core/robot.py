"""A configured robot: one adapter, its handlers and its authorization service."""

from typing import Any

from ..auth.authorization import AuthorizationService
from ..exceptions import ConfigurationError
from ..infrastructure.logging_config import bind_context, get_logger
from ..models.config import RobotConfig
from ..models.user import UserDirectory, UserLookup
from ..store.keyvalue import KeyValueStore, Namespace
from .plugins import Adapter, Handler
from .registry import PluginRegistry, get_plugin_registry

logger = get_logger(__name__)


class Robot:
    """A runtime instance built from a single RobotConfig.

    Building a robot freezes its config, resolves the configured adapter in
    the plugin registry and instantiates every registered handler.
    """

    def __init__(
        self,
        config: RobotConfig,
        registry: PluginRegistry | None = None,
        redis: KeyValueStore | None = None,
        users: UserLookup | None = None,
    ) -> None:
        """Initialize the robot.

        Args:
            config: The robot's configuration. Frozen by this call.
            registry: Plugin registry to resolve adapters and handlers from.
            redis: Root store namespace. Defaults to the process root store.
            users: User lookup. Defaults to a directory over the root store.

        Raises:
            ConfigurationError: If the configured adapter is not registered.
        """
        config.freeze()
        self.config = config
        self.registry = registry or get_plugin_registry()

        if redis is None:
            from ..legacy import get_facade

            redis = get_facade().redis()
        self.redis = Namespace(f"robots:{self.name}", redis)
        self.users = users or UserDirectory(redis)
        self.auth = AuthorizationService(config, redis=redis, users=self.users)

        self.adapter = self._load_adapter()
        self.handlers: tuple[Handler, ...] = tuple(
            handler_cls(self)
            for handler_cls in sorted(
                self.registry.handlers(),
                key=lambda cls: f"{cls.__module__}.{cls.__qualname__}",
            )
        )

    @property
    def name(self) -> str:
        return self.config.robot.name

    @property
    def mention_name(self) -> str:
        return self.config.robot.mention_name or self.config.robot.name

    def _load_adapter(self) -> Adapter:
        key = self.config.robot.adapter
        adapter_cls = self.registry.adapter(key)
        if adapter_cls is None:
            logger.critical("unknown_adapter", robot=self.name, adapter=key)
            raise ConfigurationError(
                f"Unknown adapter '{key}'. Registered adapters: "
                f"{', '.join(sorted(self.registry.adapters())) or 'none'}"
            )
        return adapter_cls(self)

    def run(self) -> None:
        """Start the adapter. Blocks until the adapter returns."""
        bind_context(robot=self.name)
        logger.info("robot_starting", adapter=self.config.robot.adapter, handlers=len(self.handlers))
        self.trigger("loaded")
        try:
            self.adapter.run()
        except KeyboardInterrupt:
            self.shut_down()

    def shut_down(self) -> None:
        """Stop the adapter, notifying handlers before and after."""
        logger.info("robot_shutting_down")
        self.trigger("shut_down_started")
        self.adapter.shut_down()
        self.trigger("shut_down_complete")

    def send_messages(self, target: Any, *strings: str) -> None:
        """Send one or more messages through the adapter."""
        self.adapter.send_messages(target, list(strings))

    def trigger(self, event: str, **payload: Any) -> None:
        """Call ``on_<event>(payload)`` on every handler that defines it."""
        for handler in self.handlers:
            callback = getattr(handler, f"on_{event}", None)
            if callback is not None:
                callback(payload)

    def __repr__(self) -> str:
        return f"<Robot name={self.name!r} adapter={self.config.robot.adapter!r}>"
