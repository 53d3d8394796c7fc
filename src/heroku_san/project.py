"""The set of stages of one configuration."""

from typing import Any, Callable, Dict, Iterable, List, Optional

import structlog

from .client.platform import HerokuAPI
from .configuration import Configuration
from .exceptions import NoStagesSelected, UnknownStage
from .stage import Stage

logger = structlog.get_logger()

ALL_STAGES = "all"


class Project:
    """Selects stages by name and runs operations across them."""

    def __init__(
        self,
        configuration: Configuration,
        stages: Optional[Dict[str, Stage]] = None,
        api: Optional[HerokuAPI] = None,
    ):
        """Initialize a project.

        Args:
            configuration: Stage configuration
            stages: Pre-built stages (built from `configuration` when omitted)
            api: API client shared by every stage built here
        """
        self.configuration = configuration
        self.api = api
        self._stages = stages

    @property
    def stages(self) -> Dict[str, Stage]:
        if self._stages is None:
            self._stages = self.configuration.stages(api=self.api)
        return self._stages

    @property
    def all_names(self) -> List[str]:
        return list(self.stages)

    def __getitem__(self, name: str) -> Stage:
        try:
            return self.stages[name]
        except KeyError:
            raise UnknownStage(
                f"Unknown stage {name!r}. Configured stages: {', '.join(self.all_names) or 'none'}"
            ) from None

    def select(self, names: Iterable[str]) -> List[Stage]:
        """Resolve stage names, `all` meaning every configured stage."""
        selected: List[Stage] = []
        for name in names:
            candidates = list(self.stages.values()) if name == ALL_STAGES else [self[name]]
            for stage in candidates:
                if stage not in selected:
                    selected.append(stage)
        return selected

    def each_app(self, names: Iterable[str], fn: Callable[[Stage], Any]) -> Dict[str, Any]:
        """Call `fn` on each selected stage in order; the first error stops the run.

        Raises:
            NoStagesSelected: If `names` selects nothing
        """
        stages = self.select(names)
        if not stages:
            raise NoStagesSelected(
                "You must first specify at least one Heroku stage "
                f"({', '.join(self.all_names + [ALL_STAGES])})"
            )

        results = {}
        for stage in stages:
            logger.info("project.stage", stage=stage.name)
            results[stage.name] = fn(stage)
        return results
