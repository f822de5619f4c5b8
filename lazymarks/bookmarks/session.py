"""Command-surface operations over one loaded store.

``BookmarkSession`` ties together the store, the type registry, and the
document accessor so callers (the CLI, tests) never reach for module state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..documents.access import DocumentAccess, FileDocumentAccess
from ..errors import InvalidName, NoApplicableType, PersistenceUnavailable
from .model import Bookmark, BookmarkType, DocumentContext, ResolvedPosition
from .persistence import load_store, save_store
from .registry import BookmarkTypeDescriptor, BookmarkTypeRegistry
from .resolver import refreshed_location
from .store import BookmarkStore

logger = logging.getLogger(__name__)


@dataclass
class BookmarkSession:
    store: BookmarkStore = field(default_factory=BookmarkStore)
    registry: BookmarkTypeRegistry = field(default_factory=BookmarkTypeRegistry.default)
    access: DocumentAccess = field(default_factory=FileDocumentAccess)
    path: Path | None = None

    @classmethod
    def load(
        cls,
        path: Path,
        registry: BookmarkTypeRegistry | None = None,
        access: DocumentAccess | None = None,
    ) -> BookmarkSession:
        """Load the store at ``path``; format and read errors abort the session."""
        registry = registry or BookmarkTypeRegistry.default()
        return cls(
            store=load_store(path, registry),
            registry=registry,
            access=access or FileDocumentAccess(),
            path=Path(path),
        )

    def save(self) -> None:
        if self.path is None:
            raise PersistenceUnavailable("This session has no bookmarks file to save to.")
        save_store(self.store, self.path)

    def context_at(self, path: str | Path, line: int = 1, column: int = 0) -> DocumentContext:
        return DocumentContext.at_path(self.access, path, line=line, column=column)

    def applicable_types(self, context: DocumentContext) -> list[BookmarkTypeDescriptor]:
        return self.registry.types_applicable_to(context)

    def _descriptor_for_add(
        self,
        context: DocumentContext,
        type_tag: BookmarkType | str | None,
    ) -> BookmarkTypeDescriptor:
        applicable = self.applicable_types(context)
        if type_tag is None:
            if not applicable:
                raise NoApplicableType("No bookmark type applies to this document.")
            return applicable[0]

        descriptor = self.registry.descriptor_for_tag(type_tag)
        if descriptor is None:
            descriptor = self.registry.descriptor_for_display_name(str(type_tag))
        if descriptor is None or descriptor not in applicable:
            raise NoApplicableType(f"Bookmark type {type_tag!r} does not apply to this document.")
        return descriptor

    def add_bookmark(
        self,
        context: DocumentContext,
        type_tag: BookmarkType | str | None,
        group_name: str,
        bookmark_name: str | None = None,
    ) -> Bookmark:
        """Create a bookmark of ``type_tag`` at ``context`` and add it to ``group_name``.

        ``type_tag`` may be a tag or a display name; ``None`` picks the first
        applicable type. A missing ``bookmark_name`` uses the type's suggestion.
        """
        descriptor = self._descriptor_for_add(context, type_tag)
        if bookmark_name is None:
            bookmark_name = descriptor.suggest_name(context)
        if not bookmark_name:
            raise InvalidName("Bookmark name must be a non-empty string.")
        if not group_name:
            raise InvalidName("Group name must be a non-empty string.")

        bookmark = Bookmark(
            name=bookmark_name,
            type_tag=descriptor.tag,
            location=descriptor.create_location(context),
        )
        self.store.add_bookmark(group_name, bookmark)
        return bookmark

    def goto_bookmark(self, group_name: str, bookmark_name: str) -> ResolvedPosition:
        """Resolve a stored bookmark against its document's current content."""
        bookmark = self.store.require_bookmark(group_name, bookmark_name)
        descriptor = self.registry.descriptor_for_tag(bookmark.type_tag)
        if descriptor is None:
            raise NoApplicableType(f"Unknown bookmark type {bookmark.type_tag.value!r}.")
        resolved = descriptor.resolve(bookmark.location, self.access)
        logger.debug("Resolved %s/%s to line %d", group_name, bookmark_name, resolved.line)
        return resolved

    def refresh_bookmark(self, group_name: str, bookmark_name: str, resolved: ResolvedPosition) -> Bookmark | None:
        """Replace a drifted bookmark with one pointing at ``resolved``.

        Returns the replacement, or ``None`` when the stored payload already
        matches the resolved position.
        """
        bookmark = self.store.require_bookmark(group_name, bookmark_name)
        location = refreshed_location(bookmark.location, resolved)
        if location == bookmark.location:
            return None
        replacement = Bookmark(name=bookmark.name, type_tag=bookmark.type_tag, location=location)
        self.store.add_bookmark(group_name, replacement)
        return replacement

    def list_groups_and_bookmarks(self) -> tuple[tuple[str, tuple[Bookmark, ...]], ...]:
        return self.store.snapshot()
