"""Versioned JSON persistence for the bookmark store.

The file holds ``{"formatVersion": 1, "groups": [[group, [[name, entry], ...]], ...]}``
where each entry is ``{"type": tag, "location": payload}``. Saves write a
sibling temp file and replace the target in one step.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path

from ..errors import InvalidName, MalformedStore, PersistenceUnavailable, UnsupportedFormatVersion
from .model import Bookmark
from .registry import BookmarkTypeRegistry
from .store import BookmarkStore

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


def _decode_bookmark(raw_entry: object, registry: BookmarkTypeRegistry) -> Bookmark:
    if not isinstance(raw_entry, list) or len(raw_entry) != 2:
        raise MalformedStore("Bookmark entries must be [name, {type, location}] pairs.")
    name, body = raw_entry
    if not isinstance(name, str) or not isinstance(body, dict):
        raise MalformedStore("Bookmark entries must be [name, {type, location}] pairs.")

    descriptor = registry.descriptor_for_tag(body.get("type"))
    if descriptor is None:
        raise MalformedStore(f"Bookmark {name!r} has unknown type {body.get('type')!r}.")
    location = body.get("location")
    if not isinstance(location, dict):
        raise MalformedStore(f"Bookmark {name!r} has no location.")
    try:
        payload = descriptor.location_type.from_dict(location)
    except ValueError as exc:
        raise MalformedStore(f"Bookmark {name!r} has an invalid location: {exc}") from exc
    return Bookmark(name=name, type_tag=descriptor.tag, location=payload)


def decode_store(data: object, registry: BookmarkTypeRegistry) -> BookmarkStore:
    """Build a store from decoded JSON, validating the format version first."""
    if not isinstance(data, dict):
        raise MalformedStore("Bookmarks file must contain a JSON object.")
    version = data.get("formatVersion")
    if isinstance(version, bool) or not isinstance(version, int) or version != FORMAT_VERSION:
        raise UnsupportedFormatVersion(version, FORMAT_VERSION)

    raw_groups = data.get("groups", [])
    if not isinstance(raw_groups, list):
        raise MalformedStore("'groups' must be a list.")

    store = BookmarkStore()
    try:
        for raw_group in raw_groups:
            if not isinstance(raw_group, list) or len(raw_group) != 2:
                raise MalformedStore("Groups must be [name, bookmarks] pairs.")
            group_name, raw_bookmarks = raw_group
            if not isinstance(group_name, str) or not isinstance(raw_bookmarks, list):
                raise MalformedStore("Groups must be [name, bookmarks] pairs.")
            store.ensure_group(group_name)
            # Adding prepends, so replay oldest first to keep file order.
            for raw_entry in reversed(raw_bookmarks):
                store.add_bookmark(group_name, _decode_bookmark(raw_entry, registry))
    except InvalidName as exc:
        raise MalformedStore(str(exc)) from exc
    return store


def encode_store(store: BookmarkStore) -> dict[str, object]:
    return {
        "formatVersion": FORMAT_VERSION,
        "groups": [
            [
                group_name,
                [
                    [bookmark.name, {"type": bookmark.type_tag.value, "location": bookmark.location.to_dict()}]
                    for bookmark in bookmarks
                ],
            ]
            for group_name, bookmarks in store.snapshot()
        ],
    }


def load_store(path: Path, registry: BookmarkTypeRegistry | None = None) -> BookmarkStore:
    """Load the store from ``path``.

    A missing file yields an empty store. Unreadable files raise
    ``PersistenceUnavailable``, undecodable ones ``MalformedStore``, and any
    other format version ``UnsupportedFormatVersion``.
    """
    registry = registry or BookmarkTypeRegistry.default()
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("No bookmarks file at %s; starting empty", path)
        return BookmarkStore()
    except UnicodeDecodeError as exc:
        raise MalformedStore(f"Bookmarks file {path} is not UTF-8: {exc}") from exc
    except OSError as exc:
        raise PersistenceUnavailable(f"Cannot read bookmarks file {path}: {exc}") from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise MalformedStore(f"Bookmarks file {path} is not valid JSON: {exc}") from exc

    store = decode_store(data, registry)
    logger.debug("Loaded %d bookmarks in %d groups from %s", len(store), len(store.group_names()), path)
    return store


def save_store(store: BookmarkStore, path: Path) -> None:
    """Atomically replace ``path`` with the serialized store.

    Creates the storage directory on first use. Raises
    ``PersistenceUnavailable`` when the target cannot be written; the store
    itself is never modified.
    """
    path = Path(path)
    text = json.dumps(encode_store(store), indent=2, ensure_ascii=False) + "\n"
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path.write_text(text, encoding="utf-8")
        os.replace(tmp_path, path)
    except OSError as exc:
        with contextlib.suppress(OSError):
            tmp_path.unlink()
        raise PersistenceUnavailable(f"Cannot write bookmarks file {path}: {exc}") from exc
    logger.debug("Saved %d bookmarks to %s", len(store), path)
