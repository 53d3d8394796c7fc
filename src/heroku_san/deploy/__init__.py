"""Deploy strategies and their registry."""

from typing import Dict, Type, Union

from ..exceptions import UnknownDeployStrategy
from .base import DeploymentResult, DeployStrategy
from .push import PushStrategy, SinatraStrategy
from .rails import RailsStrategy

STRATEGIES: Dict[str, Type[DeployStrategy]] = {
    "base": PushStrategy,
    "sinatra": SinatraStrategy,
    "rails": RailsStrategy,
}


def get_strategy(ref: Union[str, Type[DeployStrategy], DeployStrategy]) -> DeployStrategy:
    """Resolve a strategy reference to a strategy instance.

    Args:
        ref: Registered name (case-insensitive), DeployStrategy subclass or
            instance

    Raises:
        UnknownDeployStrategy: If `ref` names no registered strategy
    """
    if isinstance(ref, DeployStrategy):
        return ref
    if isinstance(ref, type) and issubclass(ref, DeployStrategy):
        return ref()
    if isinstance(ref, str):
        strategy_class = STRATEGIES.get(ref.strip().lower())
        if strategy_class is not None:
            return strategy_class()
    raise UnknownDeployStrategy(
        f"Unknown deploy strategy {ref!r}. Must be one of {sorted(STRATEGIES)}"
    )


def register_strategy(name: str, strategy_class: Type[DeployStrategy]):
    """Make a strategy class available under `name` for `deploy:` keys."""
    STRATEGIES[name.lower()] = strategy_class


__all__ = [
    "DeploymentResult",
    "DeployStrategy",
    "PushStrategy",
    "RailsStrategy",
    "SinatraStrategy",
    "STRATEGIES",
    "get_strategy",
    "register_strategy",
]
