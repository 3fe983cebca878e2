#!/usr/bin/env python3
"""Inspect or reset a charades game's phrase pool from the command line."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from charades_config import load_config_from_env  # noqa: E402
from charades_errors import CharadesError  # noqa: E402
from charades_service import CharadesService  # noqa: E402
from kv_store import build_kv_stores  # noqa: E402


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Charades phrase pool admin.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("create", help="Create a new game and print its id.")

    stats_parser = subparsers.add_parser("stats", help="Show usage counts for a game.")
    stats_parser.add_argument("game_id")

    reset_parser = subparsers.add_parser(
        "reset", help="Mark every phrase in a game unused again."
    )
    reset_parser.add_argument("game_id")
    return parser


def run(args: argparse.Namespace, service: CharadesService) -> dict:
    if args.command == "create":
        return service.create_game()
    if args.command == "stats":
        return service.stats(args.game_id)
    return service.reset(args.game_id)


def main(argv: list[str] | None = None, service: CharadesService | None = None) -> int:
    args = build_parser().parse_args(argv)

    if service is None:
        config = load_config_from_env()
        service = CharadesService(stores=build_kv_stores(config))

    try:
        result = run(args, service)
    except CharadesError as exc:
        print(json.dumps({"ok": False, "error": f"{type(exc).__name__}: {exc}"}, indent=2))
        return 2

    print(json.dumps({"ok": True, "command": args.command, "result": result}, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
