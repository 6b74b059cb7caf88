from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final, Literal

from domain.types import AgentCandidate

ROUND_ROBIN: Final = "round_robin"
LEAST_OPEN: Final = "least_open"
MANUAL: Final = "manual"

# sentinel queue token for "tenant default pool"; "*" is the tenant-wide config row
DEFAULT_GROUP_KEY: Final = "__default__"
WILDCARD_GROUP_KEY: Final = "*"

_ALIASES: Final = {
    "roundrobin": ROUND_ROBIN,
    "leastopen": LEAST_OPEN,
}

StrategyKind = Literal["round_robin", "least_open", "manual", "custom", "fallback"]


def normalize_strategy_key(raw: str | None) -> str:
    """Lowercase, trimmed, underscore-separated; blank means round_robin."""
    key = (raw or "").strip().lower().replace("-", "_")
    if not key:
        return ROUND_ROBIN
    return _ALIASES.get(key, key)


def normalize_group_key(group_key: str | None) -> str:
    gk = (group_key or "").strip()
    return gk or DEFAULT_GROUP_KEY


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


@dataclass(frozen=True)
class AssignmentContext:
    """Snapshot handed to a strategy. Built fresh per decision, never mutated."""

    tenant_id: str | None
    group_key: str | None = None
    last_agent_user_id: str | None = None
    candidates: tuple[AgentCandidate, ...] = ()
    active_loads: Mapping[str, int] | None = field(default=None, hash=False)

    def __post_init__(self) -> None:
        # copy caller-owned containers so later mutation on their side can't leak in
        object.__setattr__(self, "candidates", tuple(self.candidates))
        if self.active_loads is not None:
            object.__setattr__(self, "active_loads", MappingProxyType(dict(self.active_loads)))

    @classmethod
    def build(
        cls,
        tenant_id: str | None,
        group_key: str | None,
        last_agent_user_id: str | None,
        candidates: Iterable[AgentCandidate],
        active_loads: Mapping[str, int] | None = None,
    ) -> AssignmentContext:
        return cls(
            tenant_id=tenant_id,
            group_key=group_key,
            last_agent_user_id=last_agent_user_id,
            candidates=tuple(candidates),
            active_loads=active_loads,
        )

    def active_for(self, user_id: str) -> int:
        if self.active_loads is None:
            return 0
        return self.active_loads.get(user_id, 0)

    @property
    def cursor(self) -> str | None:
        """Last assigned agent, or None when absent/blank."""
        return None if is_blank(self.last_agent_user_id) else self.last_agent_user_id
