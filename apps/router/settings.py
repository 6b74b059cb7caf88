from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RouterSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CLA_", extra="ignore")

    # used when a tenant/queue has no configured strategy, or tenant_id is blank
    global_strategy: str = "round_robin"
    cache_ttl_ms: int = Field(default=5000, ge=0)

    strategy_aliases: dict[str, str] = {}  # custom key -> built-in key
    tenant_strategies: dict[str, str] = {}  # "tenant|group" -> strategy key

    log_level: str = "INFO"
