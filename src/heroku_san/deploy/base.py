"""Base deploy strategy interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..stage import Stage


@dataclass
class DeploymentResult:
    """Result of a deploy strategy run."""

    status: str
    stage: str
    revision: Optional[str] = None  # None means the tag/HEAD default was pushed
    migrated: bool = False
    message: Optional[str] = None


class DeployStrategy(ABC):
    """Base class for deploy strategies.

    A strategy decides which steps a deploy entails. Every strategy pushes
    code; subclasses may add steps after the push. A failing step raises and
    halts the sequence, nothing is rolled back.
    """

    name = "base"

    @abstractmethod
    def execute(
        self,
        stage: "Stage",
        revision: Optional[str] = None,
        force: bool = False,
    ) -> DeploymentResult:
        """Deploy `revision` to `stage`.

        Args:
            stage: Target stage
            revision: Commit to push; the stage's tag is used when omitted
            force: Force-push

        Returns:
            DeploymentResult
        """
        pass

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"
