"""Push-only deploy strategies."""

from typing import Optional

import structlog

from .base import DeploymentResult, DeployStrategy

logger = structlog.get_logger()


class PushStrategy(DeployStrategy):
    """Push the code and nothing else."""

    name = "base"

    def execute(self, stage, revision: Optional[str] = None, force: bool = False) -> DeploymentResult:
        logger.info(
            "deploy.push.starting",
            strategy=self.name,
            stage=stage.name,
            revision=revision,
            force=force,
        )
        stage.deploy(revision, force)

        return DeploymentResult(
            status="success",
            stage=stage.name,
            revision=revision,
            message=f"Pushed {revision or 'default revision'} to {stage.app_name}",
        )


class SinatraStrategy(PushStrategy):
    """Sinatra apps have no migrations; a push is the whole deploy."""

    name = "sinatra"
