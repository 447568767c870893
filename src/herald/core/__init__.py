"""Plugin registry, robots and their lifecycle."""

from .loader import ConfigLoader
from .manager import RobotManager, get_robot_manager, reset_robot_manager
from .plugins import Adapter, Handler
from .registry import PluginRegistry, get_plugin_registry, reset_plugin_registry
from .robot import Robot

__all__ = [
    "Adapter",
    "ConfigLoader",
    "Handler",
    "PluginRegistry",
    "Robot",
    "RobotManager",
    "get_plugin_registry",
    "get_robot_manager",
    "reset_plugin_registry",
    "reset_robot_manager",
]
