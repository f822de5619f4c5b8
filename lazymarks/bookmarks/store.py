"""In-memory group/bookmark store.

Groups keep the order in which they were first created. Bookmarks inside a
group are newest first, and a group holds at most one bookmark per name.
"""

from __future__ import annotations

import logging

from ..errors import BookmarkNotFound, GroupNotFound, InvalidName
from .model import Bookmark

logger = logging.getLogger(__name__)


def _require_name(kind: str, name: str) -> None:
    if not isinstance(name, str) or not name:
        raise InvalidName(f"{kind} name must be a non-empty string.")


class BookmarkStore:
    """Mapping of group name to an ordered list of uniquely named bookmarks.

    Deleting the last bookmark of a group leaves the empty group in place;
    only ``delete_group`` removes groups.
    """

    def __init__(self) -> None:
        self._groups: dict[str, list[Bookmark]] = {}

    def __len__(self) -> int:
        return sum(len(bookmarks) for bookmarks in self._groups.values())

    def group_names(self) -> list[str]:
        return list(self._groups)

    def has_group(self, group_name: str) -> bool:
        return group_name in self._groups

    def bookmarks(self, group_name: str) -> list[Bookmark]:
        return list(self._groups.get(group_name, ()))

    def bookmark_names(self, group_name: str) -> list[str]:
        return [bookmark.name for bookmark in self._groups.get(group_name, ())]

    def get_bookmark(self, group_name: str, bookmark_name: str) -> Bookmark | None:
        for bookmark in self._groups.get(group_name, ()):
            if bookmark.name == bookmark_name:
                return bookmark
        return None

    def require_bookmark(self, group_name: str, bookmark_name: str) -> Bookmark:
        """Like ``get_bookmark`` but raises when the group or bookmark is missing."""
        if group_name not in self._groups:
            raise GroupNotFound(f"No bookmark group named {group_name!r}.")
        bookmark = self.get_bookmark(group_name, bookmark_name)
        if bookmark is None:
            raise BookmarkNotFound(f"No bookmark named {bookmark_name!r} in group {group_name!r}.")
        return bookmark

    def ensure_group(self, group_name: str) -> None:
        """Create an empty group unless it already exists."""
        _require_name("Group", group_name)
        self._groups.setdefault(group_name, [])

    def add_bookmark(self, group_name: str, bookmark: Bookmark) -> None:
        """Prepend ``bookmark`` to its group, replacing any same-named entry."""
        _require_name("Group", group_name)
        _require_name("Bookmark", bookmark.name)
        existing = self._groups.setdefault(group_name, [])
        existing[:] = [entry for entry in existing if entry.name != bookmark.name]
        existing.insert(0, bookmark)
        logger.debug("Added bookmark %r to group %r", bookmark.name, group_name)

    def delete_bookmark(self, group_name: str, bookmark_name: str) -> None:
        """Remove a bookmark; missing groups or bookmarks are ignored."""
        existing = self._groups.get(group_name)
        if existing is None:
            return
        existing[:] = [entry for entry in existing if entry.name != bookmark_name]

    def delete_group(self, group_name: str) -> None:
        if self._groups.pop(group_name, None) is not None:
            logger.debug("Deleted group %r", group_name)

    def rename_bookmark(self, group_name: str, old_name: str, new_name: str) -> Bookmark:
        """Rename a bookmark in place; another entry already called ``new_name`` is dropped."""
        _require_name("Bookmark", new_name)
        bookmark = self.require_bookmark(group_name, old_name)
        renamed = Bookmark(name=new_name, type_tag=bookmark.type_tag, location=bookmark.location)
        self._groups[group_name] = [
            renamed if entry is bookmark else entry
            for entry in self._groups[group_name]
            if entry is bookmark or entry.name != new_name
        ]
        return renamed

    def snapshot(self) -> tuple[tuple[str, tuple[Bookmark, ...]], ...]:
        """Return a read-only view of every group and its bookmarks."""
        return tuple((name, tuple(bookmarks)) for name, bookmarks in self._groups.items())
