"""Bookmark error taxonomy.

Every failure the core reports derives from ``LazymarksError``.
Registry lookups are the exception: they return ``None`` for "no result".
"""

from __future__ import annotations


class LazymarksError(Exception):
    """Base for all bookmark errors surfaced to the user."""


class InvalidName(LazymarksError):
    """A group or bookmark name is empty."""


class GroupNotFound(LazymarksError):
    """The named group does not exist in the store."""


class BookmarkNotFound(LazymarksError):
    """The named bookmark does not exist in its group."""


class NoApplicableType(LazymarksError):
    """No bookmark type applies to the current document context."""


class DocumentUnavailable(LazymarksError):
    """The bookmarked document cannot be opened or read."""


class SymbolNotFound(LazymarksError):
    """Drift resolution scanned the whole document without a match."""


class UnsupportedFormatVersion(LazymarksError):
    """The bookmarks file was written with a different format version."""

    def __init__(self, found: object, supported: int) -> None:
        super().__init__(f"Unsupported bookmarks format version {found!r} (expected {supported}).")
        self.found = found
        self.supported = supported


class PersistenceUnavailable(LazymarksError):
    """The bookmarks file cannot be read or written."""


class MalformedStore(PersistenceUnavailable):
    """The bookmarks file was read but does not decode to a valid store."""
