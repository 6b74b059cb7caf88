from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from domain.assignment.model import normalize_strategy_key
from domain.assignment.registry import BUILTINS
from domain.errors import ConfigurationError

from apps.router.settings import RouterSettings

ENV_PREFIX = "CLA_"

# --- paths --------------------------------------------------------------------


def _repo_root() -> Path:
    """Heuristic: walk up from this file until we find pyproject.toml."""
    p = Path(__file__).resolve()
    for ancestor in [p, *p.parents]:
        if (ancestor / "pyproject.toml").exists():
            return ancestor
    return Path.cwd()


def _profiles_dir(env: Mapping[str, str]) -> Path:
    # CLA_CONFIG_DIR points *at* profiles/
    override = env.get(f"{ENV_PREFIX}CONFIG_DIR")
    if override:
        return Path(override)
    return _repo_root() / "configs" / "profiles"


def _profile_path(env: Mapping[str, str], profile: str) -> Path:
    return _profiles_dir(env) / f"{profile}.toml"


def _load_profile_table(env: Mapping[str, str], profile: str) -> dict[str, Any]:
    f = _profile_path(env, profile)
    if not f.exists():
        return {}
    text = f.read_text("utf-8")
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise RuntimeError(f"Failed to parse profile TOML: {f}") from e


# --- env overlay helpers ------------------------------------------------------


def _coerce_env_value(raw: str) -> Any:
    """
    Try to parse JSON first (so dicts/numbers/bools work),
    then fall back to the original string.
    """
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _collect_env_for(
    fields: set[str], env: Mapping[str, str], prefix: str = ENV_PREFIX
) -> dict[str, Any]:
    """
    Collect overrides like CLA_GLOBAL_STRATEGY, CLA_CACHE_TTL_MS -> {'global_strategy': ...}.
    Case-insensitive after the prefix; underscores only.
    """
    out: dict[str, Any] = {}
    upper_to_field = {f.upper(): f for f in fields}
    plen = len(prefix)
    for k, v in env.items():
        if not k.startswith(prefix):
            continue
        key = k[plen:].upper()
        if key in upper_to_field:
            out[upper_to_field[key]] = _coerce_env_value(v)
    return out


# --- strategy tables -----------------------------------------------------------


def _normalize_aliases(raw: Mapping[str, str], source: str) -> dict[str, str]:
    """
    Normalize custom key -> built-in key. An alias may not shadow a built-in
    or point at anything other than a built-in; `source` names where it came from.
    """
    out: dict[str, str] = {}
    for key, target in raw.items():
        alias = normalize_strategy_key(key)
        builtin = normalize_strategy_key(target)
        if alias in BUILTINS:
            raise ConfigurationError(f"alias {key!r} redefines a built-in strategy ({source})")
        if builtin not in BUILTINS:
            raise ConfigurationError(
                f"alias {key!r} targets unknown strategy {target!r} ({source})"
            )
        out[alias] = builtin
    return out


# --- public API ---------------------------------------------------------------


def load_router_settings(
    env: Mapping[str, str] | None = None, profile: str | None = None
) -> RouterSettings:
    """
    Merge defaults (RouterSettings) <- TOML [assignment] <- env CLA_*.
    Env examples: CLA_GLOBAL_STRATEGY=least_open, CLA_CACHE_TTL_MS=2000,
    CLA_TENANT_STRATEGIES={"acme|billing":"least_open"}
    """
    env = os.environ if env is None else env
    profile = (profile or env.get(f"{ENV_PREFIX}PROFILE") or "dev").strip()

    # start from defaults declared on the model, not from the process env
    base = RouterSettings.model_construct().model_dump()

    sources = dict.fromkeys(base, "defaults")

    toml_table = _load_profile_table(env, profile)
    toml_assign = toml_table.get("assignment", {}) if isinstance(toml_table, dict) else {}
    if isinstance(toml_assign, dict):
        base.update(toml_assign)
        sources.update(dict.fromkeys(toml_assign, f"profile {_profile_path(env, profile)}"))

    env_over = _collect_env_for(set(base.keys()), env)
    base.update(env_over)
    sources.update({k: f"env {ENV_PREFIX}{k.upper()}" for k in env_over})

    settings = RouterSettings.model_validate(base)
    settings.strategy_aliases = _normalize_aliases(
        settings.strategy_aliases, sources.get("strategy_aliases", "defaults")
    )
    return settings
