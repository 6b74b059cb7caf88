from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping, Sequence

from domain.assignment.model import normalize_group_key
from domain.types import AgentCandidate
from ports.directory import CandidateProviderPort, CursorProviderPort, LoadProviderPort


class InMemoryAgentDirectory(CandidateProviderPort, LoadProviderPort, CursorProviderPort):
    """Online candidates and rotation cursor per queue plus active counts per agent."""

    def __init__(self) -> None:
        self._pools: dict[tuple[str, str], tuple[AgentCandidate, ...]] = {}
        self._loads: dict[tuple[str, str], int] = {}
        self._cursors: dict[tuple[str, str], str] = {}
        self._lock = threading.Lock()

    def set_pool(
        self, tenant_id: str, group_key: str | None, candidates: Iterable[AgentCandidate]
    ) -> None:
        with self._lock:
            self._pools[(tenant_id, normalize_group_key(group_key))] = tuple(candidates)

    def set_load(self, tenant_id: str, user_id: str, active: int) -> None:
        with self._lock:
            self._loads[(tenant_id, user_id)] = max(0, int(active))

    def set_last_agent(self, tenant_id: str, group_key: str | None, user_id: str | None) -> None:
        key = (tenant_id, normalize_group_key(group_key))
        with self._lock:
            if user_id is None:
                self._cursors.pop(key, None)
            else:
                self._cursors[key] = user_id

    def candidates(self, tenant_id: str, group_key: str) -> list[AgentCandidate]:
        with self._lock:
            return list(self._pools.get((tenant_id, normalize_group_key(group_key)), ()))

    def active_loads(self, tenant_id: str, user_ids: Sequence[str]) -> Mapping[str, int]:
        with self._lock:
            return {
                uid: self._loads[(tenant_id, uid)]
                for uid in user_ids
                if (tenant_id, uid) in self._loads
            }

    def last_agent(self, tenant_id: str, group_key: str) -> str | None:
        with self._lock:
            return self._cursors.get((tenant_id, normalize_group_key(group_key)))
