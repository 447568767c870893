"""Pytest configuration and shared fixtures."""

import logging

import pytest

from herald.core.manager import reset_robot_manager
from herald.core.plugins import Adapter
from herald.core.registry import PluginRegistry, reset_plugin_registry
from herald.legacy import reset_facade
from herald.models import RobotConfig, User
from herald.store import InMemoryKeyValueStore, Namespace


@pytest.fixture(autouse=True)
def isolated_runtime(monkeypatch, tmp_path):
    """Give every test fresh process defaults and an in-memory store."""
    monkeypatch.setenv("HERALD_STORE_BACKEND", "memory")
    monkeypatch.setenv("HERALD_CONFIG_PATH", str(tmp_path / "missing_config.py"))
    monkeypatch.delenv("HERALD_ADMINS", raising=False)
    monkeypatch.delenv("HERALD_LOG_LEVEL", raising=False)
    monkeypatch.delenv("HERALD_ADAPTER", raising=False)
    reset_plugin_registry()
    reset_facade()
    reset_robot_manager()

    yield

    reset_plugin_registry()
    reset_facade()
    reset_robot_manager()
    logging.getLogger("herald").setLevel(logging.NOTSET)


@pytest.fixture
def store():
    """Create a fresh in-memory store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def root(store):
    """Root namespace over the in-memory store."""
    return Namespace("herald", store)


@pytest.fixture
def registry():
    """Create an empty plugin registry."""
    return PluginRegistry()


@pytest.fixture
def fake_adapter_cls():
    """An adapter class that records lifecycle calls instead of connecting anywhere."""

    class FakeAdapter(Adapter):
        events: list[tuple[str, str]] = []

        def run(self):
            FakeAdapter.events.append(("run", self.robot.name))

        def shut_down(self):
            FakeAdapter.events.append(("shut_down", self.robot.name))

        def send_messages(self, target, strings):
            FakeAdapter.events.append(("send", f"{target}:{'|'.join(strings)}"))

    return FakeAdapter


@pytest.fixture
def shell_registry(registry, fake_adapter_cls):
    """Registry with the fake adapter registered under the default key."""
    registry.register_adapter("shell", fake_adapter_cls)
    return registry


@pytest.fixture
def admin():
    return User(id="1", name="Alice Admin")


@pytest.fixture
def user():
    return User(id="2", name="Carl")


@pytest.fixture
def config(admin):
    """Robot config with a single admin."""
    config = RobotConfig()
    config.robot.admins = [admin.id]
    return config
