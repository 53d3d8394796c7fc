"""Stage configuration file parsing."""

import os
from pathlib import Path
from string import Template
from typing import TYPE_CHECKING, Any, Dict, Union

import structlog
import yaml

from .exceptions import ConfigFileNotFound, ConfigurationError

if TYPE_CHECKING:
    from .configuration import Configuration

logger = structlog.get_logger()


class Parser:
    """Reads a YAML stage file into a mapping of stage name -> settings."""

    def parse(self, configuration: "Configuration") -> Dict[str, Dict[str, Any]]:
        """Parse `configuration.config_file` and store the result on it."""
        configuration.configuration = self.load(configuration.config_file)
        return configuration.configuration

    def load(self, path: Union[str, Path]) -> Dict[str, Dict[str, Any]]:
        """Load and normalize a stage file.

        `$VAR` / `${VAR}` references are substituted from the environment
        before the YAML is read; unknown variables are left as they are.

        Raises:
            ConfigFileNotFound: If the file does not exist
            ConfigurationError: If the file is not a YAML mapping
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise ConfigFileNotFound(f"Config file not found: {path}") from None

        text = Template(text).safe_substitute(os.environ)

        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"{path}: expected a mapping of stage names to settings")

        stages = self.normalize(data)
        logger.info("config.parsed", path=str(path), stages=list(stages))
        return stages

    def normalize(self, data: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
        if isinstance(data.get("apps"), dict):
            data = self._convert_legacy_format(data)

        stages = {}
        for name, settings in data.items():
            # A bare `staging:` is a stage with no settings.
            if settings is None:
                settings = {}
            # Anchor holders like `default_addons: &addons [...]` are not stages.
            if not isinstance(settings, dict):
                logger.debug("config.entry_skipped", entry=name)
                continue
            settings = dict(settings)
            settings["config"] = settings.get("config") or {}
            stages[str(name)] = settings
        return stages

    def _convert_legacy_format(self, data: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
        """Turn `apps: {stage: app}` plus a shared `config:` into per-stage entries."""
        logger.warning("config.legacy_format")
        shared_config = data.get("config") or {}
        return {
            stage: {"app": app, "config": dict(shared_config)}
            for stage, app in data["apps"].items()
        }
