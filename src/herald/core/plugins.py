"""Base classes for adapters and handlers.

Adapters connect a robot to a chat platform; handlers react to events the
robot triggers. Concrete implementations live outside the core and are
made available by registering them with a PluginRegistry.
"""

import re
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar

from ..store.keyvalue import Namespace

if TYPE_CHECKING:
    from .robot import Robot


class Adapter(ABC):
    """Abstract base class for chat-platform adapters.

    ``run`` must block for as long as the connection to the platform is
    alive. ``shut_down`` is called from another context to end it.
    """

    def __init__(self, robot: "Robot") -> None:
        self.robot = robot

    @property
    def config(self) -> dict[str, Any]:
        """This adapter's section of the robot config."""
        return self.robot.config.adapters.get(self.robot.config.robot.adapter, {})

    @abstractmethod
    def run(self) -> None:
        """Connect to the chat platform and process messages until shut down."""

    @abstractmethod
    def shut_down(self) -> None:
        """Disconnect from the chat platform."""

    @abstractmethod
    def send_messages(self, target: Any, strings: list[str]) -> None:
        """Send messages to a user or room."""


def _snake_case(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


class Handler:
    """Base class for handlers.

    A handler class is instantiated once per robot. Event callbacks are
    plain methods named ``on_<event>`` that receive the event payload.

    Example:
        class Greeter(Handler):
            def on_loaded(self, payload: dict) -> None:
                self.robot.send_messages("#general", "Hello!")
    """

    namespace: ClassVar[str | None] = None

    def __init__(self, robot: "Robot") -> None:
        self.robot = robot

    @classmethod
    def handler_namespace(cls) -> str:
        """The name used for this handler's config section and storage."""
        return cls.namespace or _snake_case(cls.__name__)

    @property
    def config(self) -> dict[str, Any]:
        """This handler's section of the robot config."""
        return self.robot.config.handlers.get(self.handler_namespace(), {})

    @property
    def redis(self) -> Namespace:
        """Storage private to this handler within the robot's namespace."""
        return Namespace(f"handlers:{self.handler_namespace()}", self.robot.redis)
