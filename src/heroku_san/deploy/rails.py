"""Rails deploy strategy."""

from typing import Optional

import structlog

from .base import DeploymentResult
from .push import PushStrategy

logger = structlog.get_logger()


class RailsStrategy(PushStrategy):
    """Push, then run database migrations and restart."""

    name = "rails"

    def execute(self, stage, revision: Optional[str] = None, force: bool = False) -> DeploymentResult:
        result = super().execute(stage, revision, force)

        logger.info("deploy.rails.migrating", stage=stage.name)
        stage.migrate()

        result.migrated = True
        result.message = f"{result.message}; migrated and restarted"
        return result
