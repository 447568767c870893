"""Loading of user configuration files.

Two formats are supported:

* Python scripts (``herald_config.py``), executed with ``herald`` and the
  running ``manager`` in their globals. They usually call
  ``manager.add_robot(configure)`` once per robot.
* YAML files. A ``robots:`` list adds one robot per entry; any other
  top-level sections (``robot``, ``redis``, ``adapters``, ``handlers``)
  are applied to the manager's shared default config.
"""

import runpy
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from ..exceptions import ConfigurationError
from ..infrastructure.logging_config import get_logger
from ..models.config import RobotConfig, Settings, get_settings

if TYPE_CHECKING:
    from .manager import RobotManager

logger = get_logger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}


def _apply_section(data: dict[str, Any], config: RobotConfig) -> None:
    config.apply(data)


class ConfigLoader:
    """Loads a configuration file into a RobotManager."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings

    def default_path(self) -> Path:
        settings = self.settings or get_settings()
        return Path(settings.config_path)

    def load(self, path: str | Path | None = None, manager: "RobotManager | None" = None) -> None:
        """Load the configuration file at path.

        A missing file is skipped. Any error while processing an existing
        file is logged and re-raised as a ConfigurationError.

        Args:
            path: Config file path. Defaults to ``Settings.config_path``.
            manager: Manager that receives the robots defined in the file.

        Raises:
            ConfigurationError: If the file exists but cannot be processed.
        """
        path = Path(path) if path is not None else self.default_path()
        if not path.exists():
            logger.debug("config_file_not_found", path=str(path))
            return

        if manager is None:
            from .manager import get_robot_manager

            manager = get_robot_manager()

        try:
            if path.suffix.lower() in YAML_SUFFIXES:
                self._load_yaml(path, manager)
            else:
                self._load_script(path, manager)
        except Exception as e:
            logger.critical("config_load_failed", path=str(path), error=str(e))
            raise ConfigurationError(
                f"Configuration file {path} could not be processed. The exact error was: {e}"
            ) from e

        logger.info("config_loaded", path=str(path), robots=len(manager.robots))

    def _load_script(self, path: Path, manager: "RobotManager") -> None:
        import herald

        runpy.run_path(str(path), init_globals={"herald": herald, "manager": manager})

    def _load_yaml(self, path: Path, manager: "RobotManager") -> None:
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError("top level of a YAML config must be a mapping")

        robots = data.pop("robots", None) or []
        if data:
            manager.shared_config().apply(data)

        for entry in robots:
            manager.add_robot(partial(_apply_section, entry), configure_shared=False)
