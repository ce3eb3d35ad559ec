"""Command line access to a json-tables store."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from json_tables.config import DEFAULT_DB_FILE, StorageConfig
from json_tables.errors import StorageError
from json_tables.selectors import All, ByFilter, ById, Selector
from json_tables.storage import JsonStorage, open_storage
from json_tables.tables import TABLE_NAMES


class UsageError(Exception):
    """Bad JSON or selector on the command line."""


def _parse_json(text: str, what: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise UsageError(f"Invalid JSON for {what}: {e}") from e


def _parse_object(text: str, what: str) -> dict[str, Any]:
    value = _parse_json(text, what)
    if not isinstance(value, dict):
        raise UsageError(f"{what} must be a JSON object")
    return value


def _selector(args: argparse.Namespace) -> Selector:
    if args.id is not None:
        return ById(args.id)
    if args.where is not None:
        return ByFilter(_parse_object(args.where, "--where"))
    return All()


def print_json(value: Any) -> None:
    """Print a result as indented JSON."""
    print(json.dumps(value, indent=2, ensure_ascii=False))


def _cmd_tables(storage: JsonStorage, args: argparse.Namespace) -> int:
    for name, table in TABLE_NAMES.items():
        records = storage.select_all(table)
        count = "?" if records is None else len(records)
        print(f"{name}: {count}")
    return 0


def _cmd_reset(storage: JsonStorage, args: argparse.Namespace) -> int:
    storage.reset()
    print("Store reset")
    return 0


def _cmd_insert(storage: JsonStorage, args: argparse.Namespace) -> int:
    value = _parse_json(args.value, "value")
    if isinstance(value, list):
        if not all(isinstance(item, dict) for item in value):
            raise UsageError("Every value in a batch must be a JSON object")
        if not storage.insert_many(args.table, value):
            print(f"Error: could not insert into {args.table}", file=sys.stderr)
            return 1
        print(f"Inserted {len(value)} record(s)")
        return 0
    if not isinstance(value, dict):
        raise UsageError("value must be a JSON object or an array of objects")

    record_id = storage.insert(args.table, value)
    if record_id is None:
        print(f"Error: could not insert into {args.table}", file=sys.stderr)
        return 1
    print(record_id)
    return 0


def _cmd_select(storage: JsonStorage, args: argparse.Namespace) -> int:
    result = storage.select(args.table, _selector(args))
    if result is None:
        print(f"Error: nothing found in {args.table}", file=sys.stderr)
        return 1
    print_json(result)
    return 0


def _cmd_update(storage: JsonStorage, args: argparse.Namespace) -> int:
    value = _parse_object(args.value, "value")
    if not storage.update(args.table, _selector(args), value):
        print(f"Error: could not update {args.table}", file=sys.stderr)
        return 1
    print("Updated")
    return 0


def _cmd_delete(storage: JsonStorage, args: argparse.Namespace) -> int:
    if not storage.delete(args.table, _selector(args)):
        print(f"Error: could not delete from {args.table}", file=sys.stderr)
        return 1
    print("Deleted")
    return 0


def _add_selector_arguments(parser: argparse.ArgumentParser, required: bool) -> None:
    group = parser.add_mutually_exclusive_group(required=required)
    group.add_argument("--id", type=int, help="Select the record with this id")
    group.add_argument("--where", type=str, help="Select records matching this JSON object")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    arg_parser = argparse.ArgumentParser(
        prog="json-tables",
        description="Inspect and edit a json-tables store",
    )
    arg_parser.add_argument(
        "--db",
        type=Path,
        default=Path(DEFAULT_DB_FILE),
        help=f"Path to the database file (default: {DEFAULT_DB_FILE})",
    )
    arg_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log document access to stderr",
    )

    commands = arg_parser.add_subparsers(dest="command", required=True)
    table_names = list(TABLE_NAMES)

    tables_parser = commands.add_parser("tables", help="List tables and their record counts")
    tables_parser.set_defaults(handler=_cmd_tables)

    reset_parser = commands.add_parser("reset", help="Empty every table")
    reset_parser.set_defaults(handler=_cmd_reset)

    insert_parser = commands.add_parser("insert", help="Insert a record or an array of records")
    insert_parser.add_argument("table", choices=table_names)
    insert_parser.add_argument("value", help="JSON object, or array of objects for a batch")
    insert_parser.set_defaults(handler=_cmd_insert)

    select_parser = commands.add_parser("select", help="Print records")
    select_parser.add_argument("table", choices=table_names)
    _add_selector_arguments(select_parser, required=False)
    select_parser.set_defaults(handler=_cmd_select)

    update_parser = commands.add_parser("update", help="Replace by id, or merge into matches")
    update_parser.add_argument("table", choices=table_names)
    _add_selector_arguments(update_parser, required=True)
    update_parser.add_argument("value", help="JSON object")
    update_parser.set_defaults(handler=_cmd_update)

    delete_parser = commands.add_parser("delete", help="Delete records")
    delete_parser.add_argument("table", choices=table_names)
    _add_selector_arguments(delete_parser, required=True)
    delete_parser.set_defaults(handler=_cmd_delete)

    return arg_parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        storage = open_storage(StorageConfig(file_path=args.db))
    except StorageError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    with storage:
        try:
            return args.handler(storage, args)
        except UsageError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 2


if __name__ == "__main__":
    sys.exit(main())
