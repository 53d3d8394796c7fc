"""Turns a stage configuration file into Stage objects."""

import shutil
from pathlib import Path
from typing import Any, Dict, Optional, Union

import structlog

from .client.platform import HerokuAPI
from .config import SanSettings
from .deploy import get_strategy
from .git import GitHelper
from .parser import Parser
from .stage import Stage

logger = structlog.get_logger()

TEMPLATE = Path(__file__).parent / "templates" / "heroku.example.yml"


class Configuration:
    """Stage configuration loaded from a YAML file."""

    def __init__(
        self,
        config_file: Optional[Union[str, Path]] = None,
        options: Optional[Dict[str, Any]] = None,
        settings: Optional[SanSettings] = None,
        parser: Optional[Parser] = None,
    ):
        """Initialize configuration.

        Args:
            config_file: Stage file (settings.config_file when omitted)
            options: Overrides for the global options; `deploy` names the
                default deploy strategy
            settings: Tool settings
            parser: Stage file parser
        """
        self.settings = settings or SanSettings()
        self.config_file = Path(config_file or self.settings.config_file)
        self.options = {"deploy": self.settings.default_deploy_strategy}
        self.options.update(options or {})
        self.parser = parser or Parser()
        # None until parsed; {} is a parsed, empty file
        self.configuration: Optional[Dict[str, Dict[str, Any]]] = None

    def parse(self) -> Dict[str, Dict[str, Any]]:
        return self.parser.parse(self)

    def configured(self) -> bool:
        return self.configuration is not None

    def stages(
        self,
        api: Optional[HerokuAPI] = None,
        git: Optional[GitHelper] = None,
    ) -> Dict[str, Stage]:
        """Build one Stage per configured entry.

        A stage's own `deploy:` key overrides the default strategy in
        `options` for that stage only. Every call builds new Stage objects.

        Args:
            api: API client handed to every stage (each stage builds its own
                when omitted)
            git: Git helper handed to every stage
        """
        if not self.configured():
            self.parse()

        stages = {}
        for name, settings in self.configuration.items():
            strategy = get_strategy(settings.get("deploy") or self.options["deploy"])
            logger.debug("config.stage", stage=name, strategy=strategy.name)
            stages[name] = Stage(
                name,
                {**settings, "deploy": strategy},
                settings=self.settings,
                api=api,
                git=git,
            )
        return stages

    @property
    def template(self) -> Path:
        return TEMPLATE

    def generate_config(self) -> bool:
        """Copy the example stage file into place.

        Returns:
            False if the config file already exists, True once it was written
        """
        if self.config_file.exists():
            return False
        self.config_file.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy(self.template, self.config_file)
        logger.info("config.generated", path=str(self.config_file))
        return True
