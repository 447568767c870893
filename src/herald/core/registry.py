"""Plugin registry for adapter and handler types.

The PluginRegistry maps adapter keys to adapter classes and keeps the set
of handler classes that every robot instantiates. Plugins register once,
at load time; robots read the registry when they are built.
"""

import threading
from typing import TYPE_CHECKING

from ..infrastructure.logging_config import get_logger

if TYPE_CHECKING:
    from .plugins import Adapter, Handler

logger = get_logger(__name__)


def normalize_adapter_key(key: object) -> str:
    """Normalize an adapter key (``"Slack "`` and ``"slack"`` are the same adapter)."""
    return str(key).strip().lower()


class PluginRegistry:
    """Registry of adapter and handler types.

    The registry provides:
    - Adapter registration by key (last registration wins)
    - Idempotent handler registration
    - Snapshot read views that are safe to take while robots run

    Example:
        registry = PluginRegistry()
        registry.register_adapter("shell", ShellAdapter)
        registry.register_handler(HelpHandler)

        manager = RobotManager(registry=registry)
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._adapters: dict[str, type["Adapter"]] = {}
        self._handlers: set[type["Handler"]] = set()
        self._lock = threading.RLock()

    def register_adapter(self, key: object, adapter: type["Adapter"]) -> None:
        """Register an adapter class under a key.

        No duplicate check is made: registering a key again replaces the
        previous adapter.

        Args:
            key: The key that identifies the adapter (e.g. "slack").
            adapter: The adapter class.
        """
        key = normalize_adapter_key(key)
        with self._lock:
            previous = self._adapters.get(key)
            self._adapters[key] = adapter

        if previous is not None and previous is not adapter:
            logger.warning(
                "adapter_replaced",
                key=key,
                previous=previous.__name__,
                adapter=adapter.__name__,
            )
        else:
            logger.debug("adapter_registered", key=key, adapter=adapter.__name__)

    def adapters(self) -> dict[str, type["Adapter"]]:
        """Get a snapshot of all registered adapters.

        Returns:
            Dictionary of adapter key to adapter class.
        """
        with self._lock:
            return self._adapters.copy()

    def adapter(self, key: object) -> type["Adapter"] | None:
        """Get the adapter class registered under a key, or None."""
        with self._lock:
            return self._adapters.get(normalize_adapter_key(key))

    def register_handler(self, handler: type["Handler"]) -> None:
        """Register a handler class. Registering the same class twice is a no-op."""
        with self._lock:
            self._handlers.add(handler)
        logger.debug("handler_registered", handler=handler.__name__)

    def handlers(self) -> frozenset[type["Handler"]]:
        """Get a snapshot of all registered handler classes."""
        with self._lock:
            return frozenset(self._handlers)

    def clear(self) -> None:
        """Clear all registered plugins.

        Primarily used for testing.
        """
        with self._lock:
            self._adapters.clear()
            self._handlers.clear()
        logger.info("plugin_registry_cleared")

    def __len__(self) -> int:
        """Return the number of registered plugins."""
        with self._lock:
            return len(self._adapters) + len(self._handlers)

    def __contains__(self, plugin: object) -> bool:
        """Check if an adapter key or handler class is registered."""
        with self._lock:
            if isinstance(plugin, type) and plugin in self._handlers:
                return True
            return normalize_adapter_key(plugin) in self._adapters

    def __repr__(self) -> str:
        """String representation of the registry."""
        with self._lock:
            adapters = ", ".join(sorted(self._adapters)) or "empty"
            return f"<PluginRegistry adapters=[{adapters}] handlers={len(self._handlers)}>"


# Process-default registry
_registry: PluginRegistry | None = None
_registry_lock = threading.Lock()


def get_plugin_registry() -> PluginRegistry:
    """Get the process-default plugin registry."""
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = PluginRegistry()
    return _registry


def reset_plugin_registry() -> None:
    """Reset the process-default plugin registry (for testing)."""
    global _registry
    with _registry_lock:
        _registry = None
