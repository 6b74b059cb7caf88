from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Final

from domain.errors import ConfigurationError, InvalidArgumentError
from pydantic import ValidationError
from shared.config.loader import load_router_settings
from shared.contracts.v1.assignment import AssignRequest, AssignResponse

from apps.router.compose import build_service

LOG: Final = logging.getLogger("router")

EXIT_OK = 0
EXIT_BAD_INPUT = 2
EXIT_CONFIG = 3

LOG_FORMAT: Final = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _read_snapshot(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text("utf-8")


def main(argv: Sequence[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="chatlive-assign")
    ap.add_argument(
        "--snapshot",
        default="-",
        help="JSON AssignRequest file ('-' reads stdin).",
    )
    ap.add_argument("--profile", default=None, help="Config profile name (default: dev).")
    ap.add_argument("--pretty", action="store_true", help="Indent the JSON response.")
    ap.add_argument("--quiet", action="store_true", help="Only log errors.")
    args = ap.parse_args(argv)

    try:
        settings = load_router_settings(profile=args.profile)
    except (RuntimeError, ValidationError) as ex:
        # ConfigurationError and broken TOML are both RuntimeError
        logging.basicConfig(level=logging.ERROR, format=LOG_FORMAT)
        LOG.error("settings_error profile=%s error=%s", args.profile or "dev", ex)
        return EXIT_CONFIG
    logging.basicConfig(
        level=logging.ERROR if args.quiet else settings.log_level.upper(),
        format=LOG_FORMAT,
    )

    try:
        req = AssignRequest.model_validate_json(_read_snapshot(args.snapshot))
    except (OSError, ValidationError) as ex:
        LOG.error("bad_snapshot source=%s error=%s", args.snapshot, ex)
        return EXIT_BAD_INPUT

    try:
        svc = build_service(settings)
        decision = svc.decide(req.to_context())
    except InvalidArgumentError as ex:
        LOG.error("bad_snapshot source=%s error=%s", args.snapshot, ex)
        return EXIT_BAD_INPUT
    except ConfigurationError as ex:
        LOG.error("assignment_config_error error=%s", ex)
        return EXIT_CONFIG

    resp = AssignResponse(
        agent_user_id=decision.agent_user_id,
        group_key=decision.group_key,
        strategy=decision.strategy_key,
        kind=decision.kind,
        fell_back=decision.fell_back,
    )
    print(resp.model_dump_json(indent=2 if args.pretty else None))
    if not args.quiet:
        LOG.info(
            "decision tenant=%s group=%s strategy=%s agent=%s",
            req.tenant_id,
            decision.group_key,
            decision.strategy_key,
            decision.agent_user_id or "-",
        )
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
