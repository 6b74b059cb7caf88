from __future__ import annotations

from ports.config import TenantStrategyConfigPort


class CountingStrategyConfig(TenantStrategyConfigPort):
    """Returns canned keys and records every lookup."""

    def __init__(self, keys: dict[tuple[str, str], str] | None = None) -> None:
        self.keys: dict[tuple[str, str], str] = dict(keys or {})
        self.calls: list[tuple[str, str]] = []

    def lookup(self, tenant_id: str, group_key: str) -> str | None:
        self.calls.append((tenant_id, group_key))
        return self.keys.get((tenant_id, group_key))
