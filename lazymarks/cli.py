"""Command-line front door for lazymarks.

Parses subcommands, loads the bookmarks file, and maps each command onto a
``BookmarkSession`` operation. Bookmark errors become ``SystemExit`` messages.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import config
from .bookmarks import Bookmark, BookmarkSession, ResolvedPosition
from .documents.syntax import colorize_source
from .documents.text import line_start_offsets
from .errors import LazymarksError

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _nonnegative_int(value: str) -> int:
    """argparse type for integer values that may be zero."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def format_bookmark(bookmark: Bookmark) -> str:
    location = bookmark.location
    text = f"{bookmark.name}  [{bookmark.type_tag.value}] {location.document_path}:{location.line}"
    symbol_name = getattr(location, "symbol_name", None)
    if symbol_name:
        text += f" ({symbol_name})"
    return text


def render_snippet(resolved: ResolvedPosition, context_lines: int, style: str, no_color: bool) -> str:
    """Render numbered lines around a resolved position, marking its line."""
    text = resolved.handle.text
    starts = line_start_offsets(text)
    first_line = max(1, resolved.line - context_lines)
    last_line = min(len(starts), resolved.line + context_lines)
    end = starts[last_line] if last_line < len(starts) else len(text)
    excerpt = text[starts[first_line - 1] : end].rstrip("\n")
    highlighted = colorize_source(excerpt, resolved.handle.path, style=style, no_color=no_color)

    width = len(str(last_line))
    out: list[str] = []
    for line_number, row in enumerate(highlighted.split("\n"), start=first_line):
        marker = ">" if line_number == resolved.line else " "
        out.append(f"{marker} {line_number:>{width}} | {row}")
    return "\n".join(out) + "\n"


def _cmd_types(session: BookmarkSession, args: argparse.Namespace) -> None:
    context = session.context_at(args.path, line=args.line, column=args.column)
    descriptors = session.applicable_types(context)
    if not descriptors:
        print("No bookmark types apply here.")
        return
    for descriptor in descriptors:
        print(f"{descriptor.tag.value}\t{descriptor.display_name}\t{descriptor.suggest_name(context) or ''}")


def _cmd_add(session: BookmarkSession, args: argparse.Namespace) -> None:
    context = session.context_at(args.path, line=args.line, column=args.column)
    group_name = args.group if args.group is not None else config.load_default_group()
    bookmark = session.add_bookmark(context, args.type, group_name, args.name)
    session.save()
    print(f"{group_name}: {format_bookmark(bookmark)}")


def _cmd_goto(session: BookmarkSession, args: argparse.Namespace) -> None:
    resolved = session.goto_bookmark(args.group, args.name)
    if args.update and session.refresh_bookmark(args.group, args.name, resolved) is not None:
        session.save()
        logger.info("Updated drifted bookmark %s/%s", args.group, args.name)
    style = args.style or config.load_style()
    sys.stdout.write(f"{resolved.handle.path}:{resolved.line}:{resolved.column + 1}\n")
    sys.stdout.write(render_snippet(resolved, args.context, style, args.no_color))


def _cmd_list(session: BookmarkSession, args: argparse.Namespace) -> None:
    for group_name, bookmarks in session.list_groups_and_bookmarks():
        if args.group is not None and group_name != args.group:
            continue
        print(group_name)
        for bookmark in bookmarks:
            print(f"  {format_bookmark(bookmark)}")


def _cmd_delete(session: BookmarkSession, args: argparse.Namespace) -> None:
    session.store.delete_bookmark(args.group, args.name)
    session.save()


def _cmd_delete_group(session: BookmarkSession, args: argparse.Namespace) -> None:
    session.store.delete_group(args.group)
    session.save()


def _cmd_rename(session: BookmarkSession, args: argparse.Namespace) -> None:
    session.store.rename_bookmark(args.group, args.old_name, args.new_name)
    session.save()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazymarks",
        description="Record named bookmarks into documents and jump back to them after edits.",
    )
    parser.add_argument("--file", default=None, help="Bookmarks file (default: per-user data directory).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log resolution and storage details.")
    commands = parser.add_subparsers(dest="command", required=True)

    def add_position_args(command: argparse.ArgumentParser) -> None:
        command.add_argument("path", help="Document file or directory.")
        command.add_argument("--line", type=_positive_int, default=1, help="Cursor line (1-based).")
        command.add_argument("--column", type=_nonnegative_int, default=0, help="Cursor column (0-based).")

    types_cmd = commands.add_parser("types", help="List bookmark types that apply at a position.")
    add_position_args(types_cmd)
    types_cmd.set_defaults(handler=_cmd_types)

    add_cmd = commands.add_parser("add", help="Bookmark a position.")
    add_position_args(add_cmd)
    add_cmd.add_argument("--type", default=None, help="Bookmark type tag or display name.")
    add_cmd.add_argument("--group", default=None, help="Group name (default from config).")
    add_cmd.add_argument("--name", default=None, help="Bookmark name (default: suggested).")
    add_cmd.set_defaults(handler=_cmd_add)

    goto_cmd = commands.add_parser("goto", help="Resolve a bookmark and show where it points.")
    goto_cmd.add_argument("group")
    goto_cmd.add_argument("name")
    goto_cmd.add_argument("--update", action="store_true", help="Re-save the bookmark if it drifted.")
    goto_cmd.add_argument("--context", type=_nonnegative_int, default=2, help="Lines of context to print.")
    goto_cmd.add_argument("--style", default=None, help="Pygments style name.")
    goto_cmd.add_argument("--no-color", action="store_true", help="Disable color output.")
    goto_cmd.set_defaults(handler=_cmd_goto)

    list_cmd = commands.add_parser("list", help="List groups and their bookmarks.")
    list_cmd.add_argument("group", nargs="?", default=None)
    list_cmd.set_defaults(handler=_cmd_list)

    delete_cmd = commands.add_parser("delete", help="Delete one bookmark.")
    delete_cmd.add_argument("group")
    delete_cmd.add_argument("name")
    delete_cmd.set_defaults(handler=_cmd_delete)

    delete_group_cmd = commands.add_parser("delete-group", help="Delete a group and all its bookmarks.")
    delete_group_cmd.add_argument("group")
    delete_group_cmd.set_defaults(handler=_cmd_delete_group)

    rename_cmd = commands.add_parser("rename", help="Rename a bookmark within its group.")
    rename_cmd.add_argument("group")
    rename_cmd.add_argument("old_name")
    rename_cmd.add_argument("new_name")
    rename_cmd.set_defaults(handler=_cmd_rename)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run one bookmark command."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        session = BookmarkSession.load(config.resolve_bookmarks_path(args.file))
        args.handler(session, args)
    except LazymarksError as exc:
        raise SystemExit(f"lazymarks: {exc}") from exc
