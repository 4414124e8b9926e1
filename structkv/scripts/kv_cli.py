import argparse
import json
import logging
import sys

from pydantic import ValidationError

from structkv.stores import create_table
from structkv.utils.config import StoreConfig, load_config, open_store_from_config
from structkv.utils.exceptions import ConfigError, StoreError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Read and write records of a structkv table.")
    parser.add_argument("--config", help="Path to the store configuration file (e.g., store.yaml).")
    parser.add_argument("--url", help="Store URL, used instead of --config.")
    parser.add_argument("--table", help="Table name, used instead of --config.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("init-table", help="Create the table if it does not exist.")

    get_cmd = commands.add_parser("get", help="Print the JSON value of a key.")
    get_cmd.add_argument("key")

    set_cmd = commands.add_parser("set", help="Store a JSON value under a key.")
    set_cmd.add_argument("key")
    set_cmd.add_argument("value", help="JSON document, e.g. '{\"x\": 10}'")

    rm_cmd = commands.add_parser("rm", help="Remove a key.")
    rm_cmd.add_argument("key")
    return parser


def _resolve_config(args) -> StoreConfig:
    if args.config:
        return load_config(args.config)
    if not (args.url and args.table):
        raise ConfigError("Either --config or both --url and --table are required")
    try:
        return StoreConfig(url=args.url, table=args.table)
    except ValidationError as exc:
        raise ConfigError(f"Invalid store settings: {exc}") from exc


def run(args) -> int:
    cfg = _resolve_config(args)

    if args.command == "init-table":
        create_table(cfg.url, cfg.table)
        print(f"Table {cfg.table} is ready")
        return 0

    with open_store_from_config(cfg) as store:
        if args.command == "get":
            found, value = store.get(args.key)
            if not found:
                print(f"Key {args.key!r} not found", file=sys.stderr)
                return 1
            print(json.dumps(value, indent=4))
        elif args.command == "set":
            try:
                value = json.loads(args.value)
            except json.JSONDecodeError as exc:
                raise ConfigError(f"Value is not valid JSON: {exc}") from exc
            store.set(args.key, value)
            logger.info("Stored %s", args.key)
        elif args.command == "rm":
            store.remove(args.key)
            logger.info("Removed %s", args.key)
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return run(args)
    except (ConfigError, StoreError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
