from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final

from domain.errors import ConfigurationError

from .model import (
    LEAST_OPEN,
    MANUAL,
    ROUND_ROBIN,
    StrategyKind,
    normalize_strategy_key,
)
from .strategies import AssignmentStrategy, LeastOpenStrategy, ManualStrategy, RoundRobinStrategy

BUILTINS: Final[Mapping[str, AssignmentStrategy]] = {
    ROUND_ROBIN: RoundRobinStrategy(),
    LEAST_OPEN: LeastOpenStrategy(),
    MANUAL: ManualStrategy(),
}


@dataclass(frozen=True)
class Resolution:
    """Outcome of a registry lookup.

    `kind` is one of a closed set: the three built-in policies, "custom" for
    tenant-defined aliases, and "fallback" when an unregistered key was
    replaced by round_robin.
    """

    key: str
    kind: StrategyKind
    strategy: AssignmentStrategy

    @property
    def fell_back(self) -> bool:
        return self.kind == "fallback"


class StrategyRegistry:
    """Normalized strategy key -> strategy.

    Custom keys are aliases of a built-in policy, so dispatch stays closed
    over the known strategy classes.
    """

    def __init__(self, strategies: Mapping[str, AssignmentStrategy] | None = None) -> None:
        self._entries: dict[str, tuple[StrategyKind, AssignmentStrategy]] = {}
        for key, strategy in (strategies or {}).items():
            norm = normalize_strategy_key(key)
            kind: StrategyKind = norm if norm in BUILTINS else "custom"  # type: ignore[assignment]
            self._entries[norm] = (kind, strategy)

    def register_alias(self, key: str, target: str) -> None:
        norm = normalize_strategy_key(key)
        target_norm = normalize_strategy_key(target)
        if norm in BUILTINS:
            raise ConfigurationError(f"cannot redefine built-in strategy: {norm}")
        entry = self._entries.get(target_norm)
        if entry is None or target_norm not in BUILTINS:
            raise ConfigurationError(f"alias target is not a built-in strategy: {target!r}")
        self._entries[norm] = ("custom", entry[1])

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key in self._entries

    def keys(self) -> list[str]:
        return sorted(self._entries)

    def get(self, key: str) -> Resolution | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        kind, strategy = entry
        return Resolution(key=key, kind=kind, strategy=strategy)

    def fallback(self) -> Resolution:
        entry = self._entries.get(ROUND_ROBIN)
        if entry is None:
            raise ConfigurationError("assignment_strategy_not_found")
        return Resolution(key=ROUND_ROBIN, kind="fallback", strategy=entry[1])


def default_registry(aliases: Mapping[str, str] | None = None) -> StrategyRegistry:
    """Registry with the built-in policies plus optional tenant-defined aliases."""
    reg = StrategyRegistry(BUILTINS)
    for key, target in (aliases or {}).items():
        reg.register_alias(key, target)
    return reg
