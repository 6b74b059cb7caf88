from __future__ import annotations

from abc import ABC, abstractmethod


class TenantStrategyConfigPort(ABC):
    """Per-tenant/per-queue strategy configuration (owned outside the engine)."""

    @abstractmethod
    def lookup(self, tenant_id: str, group_key: str) -> str | None:
        """Raw configured strategy key for the queue, or None when unset."""
