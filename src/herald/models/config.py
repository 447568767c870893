"""Configuration settings and per-robot configuration models."""

from types import MappingProxyType
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator
from pydantic_settings import BaseSettings

from ..exceptions import FrozenConfigError
from ..infrastructure.logging_config import LOG_LEVELS

# =============================================================================
# Application Settings
# =============================================================================


class Settings(BaseSettings):
    """Process settings loaded from environment variables."""

    model_config = ConfigDict(
        env_prefix="HERALD_",
        env_file=".env",
        extra="ignore",
    )

    env: str = "development"
    config_path: str = "herald_config.py"

    # Robot defaults
    robot_name: str = "Herald"
    mention_name: str = ""
    adapter: str = "shell"
    log_level: str = "info"
    admins: list[str] = []

    # Store Configuration
    store_backend: Literal["redis", "memory"] = "redis"
    redis_url: str = "redis://localhost:6379/0"


def get_settings() -> Settings:
    """Get a fresh settings instance."""
    return Settings()


# =============================================================================
# Robot Configuration
# =============================================================================


class ConfigSection(BaseModel):
    """A configuration section that can be frozen once a robot is built."""

    model_config = ConfigDict(validate_assignment=True)

    _frozen: bool = PrivateAttr(default=False)

    def __setattr__(self, name: str, value: Any) -> None:
        if not name.startswith("_") and self._frozen:
            raise FrozenConfigError(
                f"Cannot set '{name}' on {type(self).__name__}: "
                "configuration is frozen once a robot has been built from it"
            )
        super().__setattr__(name, value)

    def freeze(self) -> None:
        """Make this section and everything it holds read-only.

        Attribute assignment raises FrozenConfigError afterwards. Lists
        become tuples and dicts become read-only mappings, so in-place
        mutation fails too.
        """
        for name in type(self).model_fields:
            self.__dict__[name] = _freeze_value(getattr(self, name))
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen


def _freeze_value(value: Any) -> Any:
    if isinstance(value, ConfigSection):
        value.freeze()
        return value
    if isinstance(value, dict):
        return MappingProxyType({key: _freeze_value(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze_value(item) for item in value)
    if isinstance(value, set):
        return frozenset(value)
    return value


class RobotSection(ConfigSection):
    """General robot settings."""

    name: str = "Herald"
    mention_name: str = ""
    adapter: str = "shell"
    admins: list[str] = Field(default_factory=list)
    log_level: str = "info"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = str(value).strip().lower()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level '{value}'. Expected one of: {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("adapter")
    @classmethod
    def normalize_adapter(cls, value: str) -> str:
        return str(value).strip().lower()


class RedisSection(ConfigSection):
    """Connection parameters for the key-value store."""

    backend: Literal["redis", "memory"] = "redis"
    url: str = "redis://localhost:6379/0"


class RobotConfig(ConfigSection):
    """Configuration for a single robot.

    Mutable while a configurator callback runs, frozen once a Robot has
    been constructed from it.

    Example:
        def configure(config: RobotConfig) -> None:
            config.robot.name = "Ops Bot"
            config.robot.admins = ["U123"]
            config.adapters["slack"] = {"token": "xoxb-..."}
    """

    robot: RobotSection = Field(default_factory=RobotSection)
    redis: RedisSection = Field(default_factory=RedisSection)
    adapters: dict[str, dict[str, Any]] = Field(default_factory=dict)
    handlers: dict[str, dict[str, Any]] = Field(default_factory=dict)

    def apply(self, data: dict[str, Any]) -> None:
        """Merge a nested mapping (e.g. parsed YAML) into this config.

        Args:
            data: Mapping of section name to section values.

        Raises:
            FrozenConfigError: If the config is frozen.
            ValueError: If the mapping names an unknown section.
        """
        if self._frozen:
            raise FrozenConfigError("Cannot apply a mapping to a frozen configuration")
        for section_name, values in data.items():
            if section_name not in type(self).model_fields:
                raise ValueError(f"Unknown configuration section '{section_name}'")
            section = getattr(self, section_name)
            if isinstance(section, ConfigSection):
                for key, value in (values or {}).items():
                    setattr(section, key, value)
            else:
                section.update(values or {})


def default_config(settings: Settings | None = None) -> RobotConfig:
    """Build a fresh RobotConfig from process settings."""
    settings = settings or get_settings()
    return RobotConfig(
        robot=RobotSection(
            name=settings.robot_name,
            mention_name=settings.mention_name or settings.robot_name,
            adapter=settings.adapter,
            admins=list(settings.admins),
            log_level=settings.log_level,
        ),
        redis=RedisSection(
            backend=settings.store_backend,
            url=settings.redis_url,
        ),
    )
