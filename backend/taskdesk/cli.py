from __future__ import annotations

import argparse
import json
import sys

from taskdesk.common.exceptions import TaskDeskError
from taskdesk.core.collections import Collection, CollectionStore
from taskdesk.core.config_store import ConfigStore


def _store() -> CollectionStore:
    return CollectionStore.from_config(ConfigStore())


def storage_path(action: str, path: str | None) -> None:
    store = _store()
    if action == "set":
        store.set_storage_path(path or "")
        return
    print(store.get_storage_path())


def theme(action: str, name: str | None) -> None:
    config_store = ConfigStore()
    if action == "set":
        if not name:
            raise SystemExit("theme set requires a NAME")
        config_store.set_theme(name)
        return
    print(config_store.get_theme())


def load(collection: str) -> None:
    sys.stdout.write(_store().load(Collection(collection)))


def save(collection: str) -> None:
    _store().save(Collection(collection), sys.stdin.read())


def has_todos(list_id: str) -> None:
    print(json.dumps(_store().list_has_todos(list_id)))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="taskdesk")
    sub = parser.add_subparsers(dest="command")

    serve_cmd = sub.add_parser("serve")
    serve_cmd.add_argument("--mode", choices=["debug", "prod"], default="prod")

    path_cmd = sub.add_parser("storage-path")
    path_cmd.add_argument("action", choices=["get", "set"])
    path_cmd.add_argument("path", nargs="?")

    theme_cmd = sub.add_parser("theme")
    theme_cmd.add_argument("action", choices=["get", "set"])
    theme_cmd.add_argument("name", nargs="?")

    collections = [c.value for c in Collection]
    load_cmd = sub.add_parser("load")
    load_cmd.add_argument("collection", choices=collections)
    save_cmd = sub.add_parser("save")
    save_cmd.add_argument("collection", choices=collections)

    has_cmd = sub.add_parser("has-todos")
    has_cmd.add_argument("list_id")

    args = parser.parse_args(argv)

    try:
        if args.command == "serve":
            from taskdesk.server import run

            run(args.mode)
        elif args.command == "storage-path":
            storage_path(args.action, args.path)
        elif args.command == "theme":
            theme(args.action, args.name)
        elif args.command == "load":
            load(args.collection)
        elif args.command == "save":
            save(args.collection)
        elif args.command == "has-todos":
            has_todos(args.list_id)
        else:
            parser.print_help()
    except (TaskDeskError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
