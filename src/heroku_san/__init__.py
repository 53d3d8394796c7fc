"""heroku-san: manage multiple Heroku stages of one application."""

__version__ = "4.3.0"

from .configuration import Configuration  # noqa: E402
from .deploy import DeployStrategy, get_strategy  # noqa: E402
from .exceptions import (  # noqa: E402
    HerokuAPIError,
    HerokuSanError,
    InvalidMaintenanceAction,
    MissingApplication,
)
from .project import Project  # noqa: E402
from .stage import MaintenanceAction, Stage  # noqa: E402

__all__ = [
    "Configuration",
    "DeployStrategy",
    "HerokuAPIError",
    "HerokuSanError",
    "InvalidMaintenanceAction",
    "MaintenanceAction",
    "MissingApplication",
    "Project",
    "Stage",
    "get_strategy",
]
