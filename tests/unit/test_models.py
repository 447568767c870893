"""Tests for configuration and user models."""

import pytest
from pydantic import ValidationError

from herald.exceptions import ConfigurationError, FrozenConfigError
from herald.models import RobotConfig, Settings, User, UserDirectory, default_config


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self):
        settings = Settings()

        assert settings.robot_name == "Herald"
        assert settings.adapter == "shell"
        assert settings.admins == []

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("HERALD_ROBOT_NAME", "Opsbot")
        monkeypatch.setenv("HERALD_ADMINS", '["1", "2"]')
        monkeypatch.setenv("HERALD_LOG_LEVEL", "debug")

        config = default_config()

        assert config.robot.name == "Opsbot"
        assert config.robot.admins == ["1", "2"]
        assert config.robot.log_level == "debug"
        assert config.redis.backend == "memory"


class TestRobotConfig:
    """Tests for RobotConfig."""

    def test_default_config_is_fresh_each_time(self):
        one = default_config()
        two = default_config()
        one.robot.admins.append("1")

        assert two.robot.admins == []

    def test_mention_name_defaults_to_name(self):
        assert default_config().robot.mention_name == "Herald"

    def test_log_level_is_validated(self):
        config = RobotConfig()
        config.robot.log_level = "WARNING"
        assert config.robot.log_level == "warning"

        with pytest.raises(ValidationError):
            config.robot.log_level = "loud"

    def test_freeze_rejects_assignment(self):
        """Test that a frozen config and its sections reject assignment."""
        config = RobotConfig()
        config.freeze()

        assert config.frozen is True
        with pytest.raises(FrozenConfigError):
            config.robot.name = "Other"
        with pytest.raises(FrozenConfigError):
            config.redis = config.redis

    def test_freeze_makes_containers_read_only(self):
        """Test that lists and dicts in a frozen config cannot be changed in place."""
        config = RobotConfig()
        config.robot.admins = ["1"]
        config.adapters["slack"] = {"token": "abc", "channels": ["#ops"]}
        config.freeze()

        with pytest.raises(AttributeError):
            config.robot.admins.append("2")
        with pytest.raises(TypeError):
            config.adapters["irc"] = {}
        with pytest.raises(TypeError):
            config.adapters["slack"]["token"] = "other"
        assert config.robot.admins == ("1",)
        assert config.adapters["slack"]["channels"] == ("#ops",)

    def test_apply_rejects_frozen_config(self):
        config = RobotConfig()
        config.freeze()

        with pytest.raises(FrozenConfigError):
            config.apply({"handlers": {"karma": {}}})

    def test_frozen_error_is_configuration_error(self):
        assert issubclass(FrozenConfigError, ConfigurationError)

    def test_apply_mapping(self):
        config = RobotConfig()
        config.apply(
            {
                "robot": {"name": "Opsbot", "admins": ["1"]},
                "adapters": {"slack": {"token": "abc"}},
            }
        )

        assert config.robot.name == "Opsbot"
        assert config.robot.admins == ["1"]
        assert config.adapters == {"slack": {"token": "abc"}}

    def test_apply_unknown_section(self):
        with pytest.raises(ValueError, match="Unknown configuration section"):
            RobotConfig().apply({"bogus": {}})


class TestUser:
    def test_names_default_to_id(self):
        user = User(id="42")

        assert user.name == "42"
        assert user.mention_name == "42"

    def test_users_are_hashable(self):
        assert len({User(id="1"), User(id="1")}) == 1


class TestUserDirectory:
    """Tests for the persistent user directory."""

    def test_create_and_find(self, root):
        directory = UserDirectory(root)
        directory.create("1", name="Alice", mention_name="alice")

        assert directory.find_by_id("1") == User(id="1", name="Alice", mention_name="alice")
        assert directory.find_by_mention_name("alice") == User(id="1", name="Alice", mention_name="alice")

    def test_missing_user(self, root):
        directory = UserDirectory(root)

        assert directory.find_by_id("nobody") is None
        assert directory.find_by_mention_name("nobody") is None

    def test_storage_layout(self, root, store):
        UserDirectory(root).create("1", name="Alice")

        assert sorted(store.keys("*")) == ["herald:users:id:1", "herald:users:mention_name:Alice"]
