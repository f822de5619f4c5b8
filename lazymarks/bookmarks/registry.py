"""Bookmark type descriptors and the read-only registry that dispatches on them.

A descriptor bundles everything one bookmark kind needs: an applicability
test, a location constructor, a resolver, and a name suggester. Adding a kind
means adding a descriptor to ``DEFAULT_DESCRIPTORS``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

from ..documents.access import DocumentAccess
from ..errors import NoApplicableType
from .model import (
    BookmarkType,
    DocumentContext,
    LocationPayload,
    PositionLocation,
    ResolvedPosition,
    SymbolLocation,
)
from .resolver import resolve_position, resolve_symbol


@dataclass(frozen=True)
class BookmarkTypeDescriptor:
    tag: BookmarkType
    display_name: str
    location_type: type
    applies: Callable[[DocumentContext], bool]
    create_location: Callable[[DocumentContext], LocationPayload]
    resolve: Callable[[LocationPayload, DocumentAccess], ResolvedPosition]
    suggest_name: Callable[[DocumentContext], str | None]


def _basename(path: Path) -> str:
    return path.name or str(path)


def _position_applies(context: DocumentContext) -> bool:
    return context.handle is not None


def _create_position(context: DocumentContext) -> PositionLocation:
    if context.handle is None:
        raise NoApplicableType("Position bookmarks need a document backed by a file or directory.")
    return PositionLocation(
        document_path=str(context.handle.path),
        line=context.line,
        offset=context.cursor_offset(),
    )


def _suggest_position_name(context: DocumentContext) -> str | None:
    if context.handle is None:
        return None
    return f"{_basename(context.handle.path)}:{context.line}"


def _symbol_applies(context: DocumentContext) -> bool:
    handle = context.handle
    if handle is None or handle.is_directory or handle.language is None:
        return False
    return context.enclosing_symbol() is not None


def _create_symbol(context: DocumentContext) -> SymbolLocation:
    symbol_name = context.enclosing_symbol() if _symbol_applies(context) else None
    if context.handle is None or symbol_name is None:
        raise NoApplicableType("Symbol bookmarks need a cursor inside a named construct of a source file.")
    return SymbolLocation(
        document_path=str(context.handle.path),
        line=context.line,
        offset=context.cursor_offset(),
        symbol_name=symbol_name,
    )


def _suggest_symbol_name(context: DocumentContext) -> str | None:
    if not _symbol_applies(context):
        return None
    return f"{_basename(context.handle.path)}:{context.enclosing_symbol()}()"


POSITION_DESCRIPTOR = BookmarkTypeDescriptor(
    tag=BookmarkType.POSITION,
    display_name="Position",
    location_type=PositionLocation,
    applies=_position_applies,
    create_location=_create_position,
    resolve=resolve_position,
    suggest_name=_suggest_position_name,
)

SYMBOL_DESCRIPTOR = BookmarkTypeDescriptor(
    tag=BookmarkType.SYMBOL,
    display_name="Symbol",
    location_type=SymbolLocation,
    applies=_symbol_applies,
    create_location=_create_symbol,
    resolve=resolve_symbol,
    suggest_name=_suggest_symbol_name,
)

DEFAULT_DESCRIPTORS: tuple[BookmarkTypeDescriptor, ...] = (POSITION_DESCRIPTOR, SYMBOL_DESCRIPTOR)


class BookmarkTypeRegistry:
    """Static table of bookmark type descriptors.

    Lookups return ``None`` or an empty list instead of raising: finding no
    applicable type is an ordinary outcome.
    """

    def __init__(self, descriptors: Iterable[BookmarkTypeDescriptor]) -> None:
        self._descriptors = tuple(descriptors)
        tags = [descriptor.tag for descriptor in self._descriptors]
        if len(set(tags)) != len(tags):
            raise ValueError("bookmark type tags must be unique")

    @classmethod
    def default(cls) -> BookmarkTypeRegistry:
        return cls(DEFAULT_DESCRIPTORS)

    @property
    def descriptors(self) -> tuple[BookmarkTypeDescriptor, ...]:
        return self._descriptors

    def types_applicable_to(self, context: DocumentContext) -> list[BookmarkTypeDescriptor]:
        """Return descriptors whose ``applies`` accepts ``context``, in table order."""
        return [descriptor for descriptor in self._descriptors if descriptor.applies(context)]

    def descriptor_for_tag(self, tag: BookmarkType | str) -> BookmarkTypeDescriptor | None:
        for descriptor in self._descriptors:
            if descriptor.tag == tag:
                return descriptor
        return None

    def descriptor_for_display_name(self, name: str) -> BookmarkTypeDescriptor | None:
        for descriptor in self._descriptors:
            if descriptor.display_name == name:
                return descriptor
        return None
