from __future__ import annotations

import threading
from collections.abc import Mapping

from domain.assignment.model import (
    WILDCARD_GROUP_KEY,
    is_blank,
    normalize_group_key,
    normalize_strategy_key,
)
from domain.errors import InvalidArgumentError
from ports.config import TenantStrategyConfigPort


class InMemoryStrategyConfig(TenantStrategyConfigPort):
    """Strategy rows keyed by (tenant, group).

    Lookup order:
      1) exact match (tenant, group)
      2) tenant wildcard row (tenant, "*")
    """

    def __init__(self) -> None:
        self._rows: dict[tuple[str, str], str] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_mapping(cls, table: Mapping[str, str]) -> InMemoryStrategyConfig:
        """Seed from {"tenant|group": "strategy"}; a bare "tenant" means the default queue."""
        store = cls()
        for compound, strategy_key in table.items():
            tenant_id, _, group_key = compound.partition("|")
            store.upsert(tenant_id.strip(), group_key, strategy_key)
        return store

    def lookup(self, tenant_id: str, group_key: str) -> str | None:
        if is_blank(tenant_id):
            return None
        gk = normalize_group_key(group_key)
        with self._lock:
            exact = self._rows.get((tenant_id, gk))
            if exact is not None:
                return exact
            return self._rows.get((tenant_id, WILDCARD_GROUP_KEY))

    def find_exact(self, tenant_id: str, group_key: str | None) -> str | None:
        if is_blank(tenant_id):
            return None
        with self._lock:
            return self._rows.get((tenant_id, normalize_group_key(group_key)))

    def upsert(self, tenant_id: str, group_key: str | None, strategy_key: str | None) -> str:
        if is_blank(tenant_id):
            raise InvalidArgumentError("tenant_required")
        key = normalize_strategy_key(strategy_key)
        with self._lock:
            self._rows[(tenant_id, normalize_group_key(group_key))] = key
        return key
