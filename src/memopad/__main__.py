"""Entry point: python -m memopad <command>

- list                         List memos in display order
- show <file>                  Print one memo
- new [md|txt]                 Create an empty memo
- save <file|-> [--title T]    Save stdin as a memo (title from content if omitted)
- rm <file>                    Delete a memo
- pin <file>                   Toggle the pin of a memo
- order <file>...              Set the display order
- import <path>...             Import .md/.txt files
- config [key=value...]        Show or update memoDirectory / autoSaveDelay
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys

from memopad.config import load_settings
from memopad.memo.errors import MemoError
from memopad.memo.title import extract_title
from memopad.picker import PathListPicker
from memopad.service import MemoService

USAGE = __doc__.split("\n\n", 1)[1]


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _print_note_line(note) -> None:
    mark = "*" if note.pinned else " "
    print(f"{mark} {note.filename}  ({note.updated_at:%Y-%m-%d %H:%M})")


def _parse_config_args(args: list[str]) -> dict:
    partial: dict = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        if not sep:
            raise ValueError(f"Expected key=value, got '{arg}'")
        partial[key] = int(value) if key == "autoSaveDelay" else value
    return partial


async def _dispatch(service: MemoService, cmd: str, args: list[str]) -> int:
    if cmd == "list":
        for note in await service.list_memos():
            _print_note_line(note)
    elif cmd == "show" and len(args) == 1:
        note = await service.read_memo(args[0])
        print(json.dumps(note.to_dict(), ensure_ascii=False, indent=2))
    elif cmd == "new" and len(args) <= 1:
        note = await service.create_memo(args[0] if args else None)
        print(note.filename)
    elif cmd == "save" and args:
        target, rest = args[0], args[1:]
        title = None
        if len(rest) == 2 and rest[0] == "--title":
            title = rest[1]
        elif rest:
            return _usage()
        content = sys.stdin.read()
        old_filename = None if target == "-" else target
        filename = await service.save_memo(title or extract_title(content), content, old_filename)
        print(filename)
    elif cmd == "rm" and len(args) == 1:
        await service.delete_memo(args[0])
    elif cmd == "pin" and len(args) == 1:
        pinned = await service.toggle_pin(args[0])
        print("pinned" if pinned else "unpinned")
    elif cmd == "order" and args:
        await service.update_order(args)
    elif cmd == "import" and args:
        for note in await service.import_from_dialog(PathListPicker(args)):
            print(note.filename)
    elif cmd == "config":
        if args:
            config = await service.update_config(_parse_config_args(args))
        else:
            config = await service.get_config()
        print(json.dumps(config.to_dict(), ensure_ascii=False, indent=2))
    else:
        return _usage()
    return 0


def _usage() -> int:
    print("Usage: python -m memopad <command> [args]", file=sys.stderr)
    print(USAGE, file=sys.stderr)
    return 2


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        return _usage()

    settings = load_settings()
    _setup_logging(settings.log_level)
    service = MemoService.from_settings(settings)
    try:
        return asyncio.run(_dispatch(service, argv[0], argv[1:]))
    except (MemoError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        service.close()


if __name__ == "__main__":
    sys.exit(main())
