# libs/domain/assignment/resolver.py
from __future__ import annotations

import logging
import threading
from typing import Final, NamedTuple

from domain.errors import InvalidArgumentError
from ports.config import TenantStrategyConfigPort
from ports.time import ClockPort

from .model import (
    ROUND_ROBIN,
    AssignmentContext,
    is_blank,
    normalize_group_key,
    normalize_strategy_key,
)
from .registry import Resolution, StrategyRegistry
from .strategies import AssignmentStrategy

LOG: Final = logging.getLogger("assignment.resolver")

CACHE_TTL_MS: Final = 5_000


class _CacheEntry(NamedTuple):
    key: str
    expires_at: float
    fell_back: bool


class StrategyResolver:
    """Maps (tenant, queue) to a strategy, caching the configured key for a short TTL.

    Entries are expired lazily on read and never swept, so the table grows with
    the number of distinct tenant/queue pairs seen. Entries are immutable and
    replaced whole; the config lookup happens outside the lock, so two threads
    missing the same key at once may both query the config port.
    """

    def __init__(
        self,
        registry: StrategyRegistry,
        config: TenantStrategyConfigPort,
        clock: ClockPort,
        global_default_key: str = ROUND_ROBIN,
        ttl_ms: int = CACHE_TTL_MS,
    ) -> None:
        self.registry: Final = registry
        self.config: Final = config
        self.clock: Final = clock
        self.global_default_key = global_default_key
        self._ttl_s = max(0, ttl_ms) / 1000.0
        self._cache: dict[tuple[str, str], _CacheEntry] = {}
        self._lock = threading.Lock()

    def resolve(self, ctx: AssignmentContext | None) -> AssignmentStrategy:
        return self.resolution(ctx).strategy

    def resolution(self, ctx: AssignmentContext | None) -> Resolution:
        if ctx is None:
            raise InvalidArgumentError("ctx_required")

        tenant_id = ctx.tenant_id
        if tenant_id is None or is_blank(tenant_id):
            return self._from_registry(normalize_strategy_key(self.global_default_key))

        group_key = normalize_group_key(ctx.group_key)
        cache_key = (tenant_id, group_key)

        now = self.clock.now()
        with self._lock:
            entry = self._cache.get(cache_key)
        if entry is not None and entry.expires_at > now:
            hit = self.registry.get(entry.key)
            if hit is not None:
                return self.registry.fallback() if entry.fell_back else hit

        raw = self.config.lookup(tenant_id, group_key)
        key = normalize_strategy_key(raw if raw is not None else self.global_default_key)
        res = self._from_registry(key)

        with self._lock:
            self._cache[cache_key] = _CacheEntry(res.key, now + self._ttl_s, res.fell_back)
        return res

    def _from_registry(self, key: str) -> Resolution:
        res = self.registry.get(key)
        if res is not None:
            return res
        fallback = self.registry.fallback()
        LOG.warning("unknown_assignment_strategy strategy=%s fallback=round_robin", key)
        return fallback

    def cache_size(self) -> int:
        with self._lock:
            return len(self._cache)
