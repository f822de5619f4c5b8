"""Public API surface for the bookmark core.

Groups the type registry and resolvers, the in-memory store, versioned
persistence, and the session object that drives them.
"""

from __future__ import annotations

from .model import (
    Bookmark,
    BookmarkType,
    DocumentContext,
    LocationPayload,
    PositionLocation,
    ResolvedPosition,
    SymbolLocation,
)
from .persistence import FORMAT_VERSION, load_store, save_store
from .registry import BookmarkTypeDescriptor, BookmarkTypeRegistry
from .resolver import refreshed_location, resolve_position, resolve_symbol
from .session import BookmarkSession
from .store import BookmarkStore

__all__ = [
    "FORMAT_VERSION",
    "Bookmark",
    "BookmarkSession",
    "BookmarkStore",
    "BookmarkType",
    "BookmarkTypeDescriptor",
    "BookmarkTypeRegistry",
    "DocumentContext",
    "LocationPayload",
    "PositionLocation",
    "ResolvedPosition",
    "SymbolLocation",
    "load_store",
    "refreshed_location",
    "resolve_position",
    "resolve_symbol",
    "save_store",
]
