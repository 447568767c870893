"""Tests for the multi-robot manager."""

from unittest.mock import MagicMock

import pytest

from herald.core.manager import RobotManager, get_robot_manager, reset_robot_manager
from herald.exceptions import ConfigurationError
from herald.models import RobotConfig


@pytest.fixture
def shared():
    """A stand-in for the legacy shared default config."""
    return RobotConfig()


@pytest.fixture
def loader():
    return MagicMock()


@pytest.fixture
def manager(shell_registry, root, shared, loader) -> RobotManager:
    return RobotManager(
        registry=shell_registry,
        loader=loader,
        shared_config=lambda: shared,
        redis=root,
    )


class TestAddRobot:
    """Tests for add_robot."""

    def test_requires_configurator(self, manager: RobotManager):
        with pytest.raises(ConfigurationError):
            manager.add_robot()
        assert manager.robots == ()

    def test_missing_configurator_keeps_earlier_robots(self, manager: RobotManager):
        first = manager.add_robot(lambda config: None)

        with pytest.raises(ConfigurationError):
            manager.add_robot(None)

        assert manager.robots == (first,)

    def test_noop_configurator_adds_one_robot(self, manager: RobotManager):
        robot = manager.add_robot(lambda config: None)

        assert manager.robots == (robot,)

    def test_robots_keep_registration_order(self, manager: RobotManager):
        robots = [manager.add_robot(lambda config: None) for _ in range(3)]
        assert manager.robots == tuple(robots)

    def test_each_robot_gets_a_fresh_config(self, manager: RobotManager):
        one = manager.add_robot(lambda config: None)
        two = manager.add_robot(lambda config: None)

        assert one.config is not two.config

    def test_configurator_receives_shared_config_by_default(self, manager: RobotManager, shared):
        """Pin the legacy behavior: mutations land on the shared config, not the robot's."""
        received = []

        def configure(config):
            received.append(config)
            config.robot.name = "Opsbot"

        robot = manager.add_robot(configure)

        assert len(received) == 1 and received[0] is shared
        assert shared.robot.name == "Opsbot"
        assert robot.config is not shared
        assert robot.name == "Herald"

    def test_configurator_receives_robot_config_when_opted_in(
        self, shell_registry, root, shared, loader
    ):
        manager = RobotManager(
            registry=shell_registry,
            loader=loader,
            shared_config=lambda: shared,
            configure_shared_config=False,
            redis=root,
        )

        def configure(config):
            config.robot.name = "Opsbot"

        robot = manager.add_robot(configure)

        assert robot.name == "Opsbot"
        assert shared.robot.name == "Herald"

    def test_per_call_override(self, manager: RobotManager, shared):
        robot = manager.add_robot(
            lambda config: setattr(config.robot, "name", "Opsbot"),
            configure_shared=False,
        )

        assert robot.name == "Opsbot"
        assert shared.robot.name == "Herald"
        assert manager.configure_shared_config is True

    def test_unknown_adapter_aborts_call(self, registry, root, shared, loader):
        manager = RobotManager(registry=registry, loader=loader, shared_config=lambda: shared, redis=root)

        with pytest.raises(ConfigurationError, match="Unknown adapter"):
            manager.add_robot(lambda config: None)
        assert manager.robots == ()


class TestRun:
    """Tests for run."""

    def test_loads_config_path(self, manager: RobotManager, loader):
        manager.run("custom_config.py")
        loader.load.assert_called_once_with("custom_config.py", manager=manager)

    def test_runs_one_default_robot_when_none_added(self, manager: RobotManager, shared, fake_adapter_cls):
        shared.robot.name = "Default"

        manager.run()

        assert fake_adapter_cls.events == [("run", "Default")]
        assert manager.robots == ()

    def test_default_robot_leaves_shared_config_writable(self, manager: RobotManager, shared, fake_adapter_cls):
        """Test that running the implicit robot does not freeze the shared config."""
        manager.run()

        assert shared.frozen is False
        robot = manager.add_robot(lambda config: setattr(config.robot, "name", "Late"))
        assert shared.robot.name == "Late"
        assert robot.name == "Herald"

    def test_runs_added_robots_in_order(self, shell_registry, root, loader, fake_adapter_cls):
        manager = RobotManager(
            registry=shell_registry,
            loader=loader,
            shared_config=RobotConfig,
            configure_shared_config=False,
            redis=root,
        )
        for name in ("first", "second", "third"):
            manager.add_robot(lambda config, name=name: setattr(config.robot, "name", name))

        manager.run()

        assert fake_adapter_cls.events == [("run", "first"), ("run", "second"), ("run", "third")]

    def test_robots_added_by_config_file_are_run(self, manager: RobotManager, loader, fake_adapter_cls):
        loader.load.side_effect = lambda path, manager: manager.add_robot(lambda config: None)

        manager.run()

        assert len(manager.robots) == 1
        assert fake_adapter_cls.events == [("run", "Herald")]


class TestDefaultManager:
    def test_default_manager_uses_legacy_shared_config(self):
        from herald.legacy import get_facade

        assert get_robot_manager().shared_config() is get_facade().default_robot_config()

    def test_reset(self):
        first = get_robot_manager()
        reset_robot_manager()
        assert get_robot_manager() is not first
