"""Command line interface for todoledger."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from .config import configure_logging, get_settings
from .errors import TodoLedgerError
from .store import TodoStore

logger = logging.getLogger(__name__)


def _open_store(args: argparse.Namespace) -> TodoStore:
    db_path = args.db_path if args.db_path else get_settings().store.db_path
    return TodoStore(db_path)


def _print_list(store: TodoStore) -> None:
    entries = store.read_all()
    print(f"Todo Count: {len(entries)}")
    for position, entry in enumerate(entries):
        mark = "x" if entry.completed else " "
        print(f"[{mark}] {position}: {entry.text}")


def _fail(action: str, err: Exception) -> None:
    logger.error(f"Failed to {action} todo: {err}")
    raise SystemExit(1)


def cmd_add(args: argparse.Namespace) -> None:
    configure_logging(get_settings())

    if args.text.strip() == "":
        logger.error("Refusing to add a blank todo")
        raise SystemExit(1)

    with _open_store(args) as store:
        position = store.append(args.text)
        logger.info(f"Added todo at position {position}")
        _print_list(store)


def cmd_toggle(args: argparse.Namespace) -> None:
    configure_logging(get_settings())

    with _open_store(args) as store:
        try:
            completed = store.toggle(args.position)
        except TodoLedgerError as e:
            _fail("toggle", e)
        logger.info(f"Todo {args.position} is now {'done' if completed else 'open'}")
        _print_list(store)


def cmd_remove(args: argparse.Namespace) -> None:
    configure_logging(get_settings())

    with _open_store(args) as store:
        try:
            store.remove(args.position)
        except TodoLedgerError as e:
            _fail("remove", e)
        logger.info(f"Removed todo {args.position}; later positions shifted down")
        _print_list(store)


def cmd_list(args: argparse.Namespace) -> None:
    configure_logging(get_settings())

    with _open_store(args) as store:
        _print_list(store)


def cmd_count(args: argparse.Namespace) -> None:
    configure_logging(get_settings())

    with _open_store(args) as store:
        print(store.count())


def cmd_export_events(args: argparse.Namespace) -> None:
    """Export the audit log to JSON."""
    configure_logging(get_settings())

    with _open_store(args) as store:
        events = store.events.events(since=args.since, limit=args.limit)
        payload = {
            "db_path": store.db_path,
            "count": store.count(),
            "events": [e.to_dict() for e in events],
        }

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with open(out_path, "w") as f:
            json.dump(payload, f, indent=2)
        logger.info(f"Exported {len(payload['events'])} events to {out_path}")
    else:
        print(json.dumps(payload, indent=2))


def cmd_serve(args: argparse.Namespace) -> None:
    import uvicorn

    settings = get_settings()
    configure_logging(settings)

    host = args.host if args.host else settings.api.host
    port = args.port if args.port is not None else settings.api.port
    uvicorn.run(
        "todoledger.services.store_svc:app",
        host=host,
        port=port,
        log_level=settings.log_level.lower(),
    )


def main() -> None:
    settings = get_settings()

    parser = argparse.ArgumentParser(prog="todoledger")
    sub = parser.add_subparsers(dest="cmd", required=True)

    def store_parser(name: str, help: str) -> argparse.ArgumentParser:
        p = sub.add_parser(name, help=help)
        p.add_argument("--db-path", default=None, help=f"Path to store SQLite DB (default: {settings.store.db_path})")
        return p

    p_add = store_parser("add", "Append a todo at the end of the list")
    p_add.add_argument("text")
    p_add.set_defaults(func=cmd_add)

    p_toggle = store_parser("toggle", "Flip the completed flag of a todo")
    p_toggle.add_argument("position", type=int)
    p_toggle.set_defaults(func=cmd_toggle)

    p_remove = store_parser("remove", "Remove a todo; later todos move up one position")
    p_remove.add_argument("position", type=int)
    p_remove.set_defaults(func=cmd_remove)

    p_list = store_parser("list", "Print every todo in position order")
    p_list.set_defaults(func=cmd_list)

    p_count = store_parser("count", "Print the number of todos")
    p_count.set_defaults(func=cmd_count)

    p_export = store_parser("export-events", "Export the audit log to JSON")
    p_export.add_argument("--since", type=int, default=0, help="Only events after this sequence number")
    p_export.add_argument("--limit", type=int, default=None, help="Max events to export")
    p_export.add_argument("--out", type=str, help="Output JSON file (defaults to stdout)")
    p_export.set_defaults(func=cmd_export_events)

    p_serve = sub.add_parser("serve", help="Run the HTTP service")
    p_serve.add_argument("--host", default=None, help=f"Bind address (default: {settings.api.host})")
    p_serve.add_argument("--port", type=int, default=None, help=f"Port (default: {settings.api.port})")
    p_serve.set_defaults(func=cmd_serve)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
