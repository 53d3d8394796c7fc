"""Configuration module for heroku-san."""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class SanSettings(BaseSettings):
    """Tool configuration from environment variables."""

    # Heroku API
    api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("HEROKU_SAN_API_KEY", "HEROKU_API_KEY"),
        description="Heroku API key",
    )
    api_url: str = Field(
        default="https://api.heroku.com",
        description="Heroku API base URL",
    )
    request_timeout: int = Field(
        default=30,
        description="API request timeout in seconds",
    )

    # Git remotes
    git_host: str = Field(
        default="heroku.com",
        description="Host used to derive a stage's default git remote",
    )

    # Heroku CLI
    cli_binary: str = Field(
        default="heroku",
        description="Heroku command line client used for one-off commands",
    )
    modern_stack_pattern: str = Field(
        default=r"cedar|heroku-\d+|container",
        description="Stacks matching this pattern use `run <cmd>` instead of `run:<cmd>`",
    )

    # Stage configuration
    config_file: str = Field(
        default="config/heroku.yml",
        description="Stage configuration file",
    )
    default_deploy_strategy: str = Field(
        default="rails",
        description="Deploy strategy used when a stage sets no `deploy:` key",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    class Config:
        """Pydantic config."""
        env_prefix = "HEROKU_SAN_"
        case_sensitive = False
        populate_by_name = True

    @property
    def has_api_key(self) -> bool:
        """Whether an API key was configured."""
        return bool(self.api_key)
