"""Bookmark datatypes: type tags, location payloads, bookmarks, and contexts.

Location payloads form a small tagged union keyed by ``BookmarkType`` so the
store can hold heterogeneous payloads and persistence can decode them by tag.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import ClassVar, Union

from ..documents.access import DocumentAccess, DocumentHandle
from ..documents.text import clamp_offset, line_for_offset, offset_for_line_and_column


class BookmarkType(str, Enum):
    """Type tag shared by descriptors, payloads, and the persisted file."""

    POSITION = "position"
    SYMBOL = "symbol"


def _require_int(data: dict, key: str, minimum: int) -> int:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer")
    if value < minimum:
        raise ValueError(f"{key} must be >= {minimum}")
    return value


def _require_str(data: dict, key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise ValueError(f"{key} must be a non-empty string")
    return value


@dataclass(frozen=True)
class DocumentLocation:
    """Fields shared by every location payload."""

    document_path: str
    line: int
    offset: int

    def __post_init__(self) -> None:
        if not self.document_path:
            raise ValueError("document_path must be non-empty")
        if self.line < 1:
            raise ValueError("line must be >= 1")
        if self.offset < 0:
            raise ValueError("offset must be >= 0")

    def to_dict(self) -> dict[str, object]:
        return {"documentPath": self.document_path, "line": self.line, "offset": self.offset}


@dataclass(frozen=True)
class PositionLocation(DocumentLocation):
    """Plain document position."""

    tag: ClassVar[BookmarkType] = BookmarkType.POSITION

    @classmethod
    def from_dict(cls, data: dict) -> PositionLocation:
        return cls(
            document_path=_require_str(data, "documentPath"),
            line=_require_int(data, "line", 1),
            offset=_require_int(data, "offset", 0),
        )


@dataclass(frozen=True)
class SymbolLocation(DocumentLocation):
    """Position bound to the named construct enclosing it at creation time."""

    symbol_name: str

    tag: ClassVar[BookmarkType] = BookmarkType.SYMBOL

    def __post_init__(self) -> None:
        super().__post_init__()
        if not self.symbol_name:
            raise ValueError("symbol_name must be non-empty")

    def to_dict(self) -> dict[str, object]:
        data = super().to_dict()
        data["symbolName"] = self.symbol_name
        return data

    @classmethod
    def from_dict(cls, data: dict) -> SymbolLocation:
        return cls(
            document_path=_require_str(data, "documentPath"),
            line=_require_int(data, "line", 1),
            offset=_require_int(data, "offset", 0),
            symbol_name=_require_str(data, "symbolName"),
        )


LocationPayload = Union[PositionLocation, SymbolLocation]


@dataclass(frozen=True)
class Bookmark:
    """Named, typed reference to a location; replaced rather than mutated."""

    name: str
    type_tag: BookmarkType
    location: LocationPayload

    def __post_init__(self) -> None:
        object.__setattr__(self, "type_tag", BookmarkType(self.type_tag))
        if self.location.tag != self.type_tag:
            raise ValueError(f"{self.type_tag.value} bookmark cannot hold a {self.location.tag.value} location")


@dataclass(frozen=True)
class ResolvedPosition:
    """Concrete current position of a bookmark inside an opened document."""

    handle: DocumentHandle
    offset: int
    line: int
    column: int


@dataclass(frozen=True)
class DocumentContext:
    """Current document and cursor offset, plus the accessor used to probe it.

    ``handle`` is ``None`` for buffers without a stable identity.
    """

    access: DocumentAccess
    handle: DocumentHandle | None
    offset: int = 0

    @classmethod
    def at_path(
        cls,
        access: DocumentAccess,
        path: str | Path,
        line: int = 1,
        column: int = 0,
    ) -> DocumentContext:
        """Open ``path`` and place the cursor at ``line``/``column``."""
        handle = access.open(path)
        return cls(access=access, handle=handle, offset=offset_for_line_and_column(handle.text, line, column))

    @property
    def line(self) -> int:
        if self.handle is None:
            return 1
        return line_for_offset(self.handle.text, self.offset)

    def cursor_offset(self) -> int:
        if self.handle is None:
            return 0
        return clamp_offset(self.handle.text, self.offset)

    def enclosing_symbol(self) -> str | None:
        if self.handle is None:
            return None
        return self.access.enclosing_symbol(self.handle, self.cursor_offset())
