"""Terminal host for the conference deadline list.

Usage:
  deadlines list --source sample
  deadlines list -q aaai --json
  deadlines show AAAI
  deadlines open AAAI
  deadlines copy AAAI

Configuration comes from the environment / .env via pydantic settings;
``--source`` and ``--root`` override it for one run.
"""

from __future__ import annotations

import argparse
import json
import webbrowser
from dataclasses import asdict
from typing import List, Optional

from pydantic import ValidationError

from deadlines.connectors.registry import build_source
from deadlines.pipeline import LoadResult, LoadStatus, load_items_sync
from deadlines.presenter import (
    ActionKind,
    ListRow,
    ListState,
    MetadataLabel,
    build_rows,
    empty_state,
)
from deadlines.settings import Settings, get_settings
from deadlines.utils.logging import configure_logging

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_LOAD_FAILED = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="deadlines", description="Academic conference deadlines")
    parser.add_argument("--source", choices=["local", "remote", "sample"], help="Override DEADLINES_SOURCE")
    parser.add_argument("--root", help="Override DEADLINES_ROOT_DIR (local source)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="List conference series")
    p_list.add_argument("-q", "--query", default="", help="Filter on title/category")
    p_list.add_argument("--no-detail", action="store_true", help="Hide the detail pane")
    p_list.add_argument("--json", action="store_true", help="Print rows as JSON")

    for name, help_text in (
        ("show", "Show the detail view of one series"),
        ("open", "Open the latest occurrence website"),
        ("copy", "Print the one-line summary"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("title", help="Conference title, case-insensitive")
    return parser


def _resolve_settings(args: argparse.Namespace) -> Settings:
    overrides = {}
    if args.source:
        overrides["source"] = args.source
    if args.root:
        overrides["root_dir"] = args.root
        overrides.setdefault("source", "local")
    if not overrides:
        return get_settings()
    # overrides win over the environment before validation runs
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        raise RuntimeError(f"Invalid deadline settings: {exc}") from exc


def _find(rows: List[ListRow], title: str) -> Optional[ListRow]:
    wanted = title.strip().lower()
    for row in rows:
        if row.title.lower() == wanted:
            return row
    return None


def _print_detail(row: ListRow) -> None:
    print(row.detail.markdown)
    print()
    for entry in row.detail.metadata:
        if isinstance(entry, MetadataLabel):
            print(f"  {entry.title:<14} {entry.text}")
        else:
            print("  " + "-" * 40)


def _print_list(state: ListState) -> None:
    for row in state.visible_rows():
        print(f"{row.title:<12} {row.subtitle:<6} {'  '.join(row.accessories)}")
        if state.is_showing_detail:
            _print_detail(row)
            print()


def _action_payload(row: ListRow, kind: ActionKind) -> Optional[str]:
    for action in row.actions:
        if action.kind is kind:
            return action.payload
    return None


def main(argv: List[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        cfg = _resolve_settings(args)
    except (RuntimeError, ValueError) as exc:
        print(f"Configuration error: {exc}")
        return EXIT_LOAD_FAILED
    configure_logging(cfg.log_level, json_enabled=cfg.log_json)

    result: LoadResult = load_items_sync(build_source(cfg), cfg)
    rows = build_rows(result.items)
    message = empty_state(result)

    if args.command == "list":
        state = ListState(is_showing_detail=not args.no_detail, query=args.query, rows=rows)
        if args.json:
            print(json.dumps([asdict(row) for row in state.visible_rows()], ensure_ascii=False, indent=2, default=str))
        elif message:
            print(message)
        else:
            _print_list(state)
        return EXIT_LOAD_FAILED if result.status is LoadStatus.FAILED else EXIT_OK

    if result.status is LoadStatus.FAILED:
        print(message)
        return EXIT_LOAD_FAILED

    row = _find(rows, args.title)
    if row is None:
        print(f"No conference titled {args.title!r}.")
        return EXIT_NOT_FOUND

    if args.command == "show":
        _print_detail(row)
        return EXIT_OK
    if args.command == "copy":
        print(_action_payload(row, ActionKind.COPY))
        return EXIT_OK

    link = _action_payload(row, ActionKind.OPEN_URL)
    if not link:
        print(f"{row.title} has no website yet.")
        return EXIT_NOT_FOUND
    webbrowser.open(link)
    print(link)
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
