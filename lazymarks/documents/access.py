"""Document access collaborator.

The bookmark core only ever needs three capabilities from a document host:
open a document by path, probe the named construct enclosing an offset, and
translate an offset into a displayable line/column. ``FileDocumentAccess``
provides them over the local filesystem.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from ..errors import DocumentUnavailable
from .symbols import collect_symbol_spans_cached, enclosing_symbol, language_for_path
from .syntax import read_text
from .text import line_and_column

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentHandle:
    """Opened document: identity, current full text, and source language."""

    path: Path
    text: str
    language: str | None = None
    is_directory: bool = False


class DocumentAccess(Protocol):
    def open(self, path: str | Path) -> DocumentHandle:
        """Open ``path`` or raise ``DocumentUnavailable``."""
        ...

    def enclosing_symbol(self, handle: DocumentHandle, offset: int) -> str | None:
        """Return the name of the construct enclosing ``offset``, if any."""
        ...

    def navigate(self, handle: DocumentHandle, offset: int) -> tuple[int, int]:
        """Return the ``(line, column)`` to display for ``offset``."""
        ...


def directory_listing(path: Path) -> str:
    """Render a directory as sorted entry names; subdirectories end with ``/``."""
    entries: list[str] = []
    with os.scandir(path) as iterator:
        for entry in iterator:
            try:
                is_dir = entry.is_dir()
            except OSError:
                is_dir = False
            entries.append(entry.name + ("/" if is_dir else ""))
    entries.sort(key=str.casefold)
    return "".join(f"{name}\n" for name in entries)


class FileDocumentAccess:
    """Filesystem-backed ``DocumentAccess`` with Tree-sitter construct probing."""

    def open(self, path: str | Path) -> DocumentHandle:
        target = Path(path).expanduser()
        try:
            if target.is_dir():
                return DocumentHandle(path=target.resolve(), text=directory_listing(target), is_directory=True)
            if not target.is_file():
                raise DocumentUnavailable(f"Document not found: {target}")
            text = read_text(target)
        except OSError as exc:
            raise DocumentUnavailable(f"Cannot read {target}: {exc}") from exc
        logger.debug("Opened %s (%d chars)", target, len(text))
        return DocumentHandle(path=target.resolve(), text=text, language=language_for_path(target))

    def enclosing_symbol(self, handle: DocumentHandle, offset: int) -> str | None:
        if handle.is_directory or handle.language is None:
            return None
        spans = collect_symbol_spans_cached(handle.path, handle.text, handle.language)
        span = enclosing_symbol(spans, offset)
        return span.name if span is not None else None

    def navigate(self, handle: DocumentHandle, offset: int) -> tuple[int, int]:
        return line_and_column(handle.text, offset)
