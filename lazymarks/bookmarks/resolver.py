"""Location resolution against a document's current content.

Plain positions re-anchor to their stored line when the offset has drifted.
Symbol-bound positions try, in order: the stored offset, the start of the
stored line, then the first occurrence of the symbol name in document order
whose enclosing construct carries that name.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from ..documents.access import DocumentAccess, DocumentHandle
from ..documents.text import line_for_offset, line_start_offset
from ..errors import SymbolNotFound
from .model import LocationPayload, PositionLocation, ResolvedPosition, SymbolLocation

logger = logging.getLogger(__name__)


def _resolved(access: DocumentAccess, handle: DocumentHandle, offset: int) -> ResolvedPosition:
    line, column = access.navigate(handle, offset)
    return ResolvedPosition(handle=handle, offset=offset, line=line, column=column)


def resolve_position(location: PositionLocation, access: DocumentAccess) -> ResolvedPosition:
    """Resolve a plain position, re-anchoring to the stored line on drift.

    Never fails on drift; a stored line past the end anchors at the end of
    the document. Raises ``DocumentUnavailable`` when the document cannot be
    opened.
    """
    handle = access.open(location.document_path)
    text = handle.text

    if location.offset <= len(text) and line_for_offset(text, location.offset) == location.line:
        return _resolved(access, handle, location.offset)

    line_start = line_start_offset(text, location.line)
    anchored = len(text) if line_start is None else line_start
    logger.debug(
        "Re-anchored %s from offset %d to line %d (offset %d)",
        location.document_path,
        location.offset,
        location.line,
        anchored,
    )
    return _resolved(access, handle, anchored)


def resolve_symbol(location: SymbolLocation, access: DocumentAccess) -> ResolvedPosition:
    """Resolve a symbol-bound position, tolerating line and offset drift.

    Raises ``DocumentUnavailable`` when the document cannot be opened and
    ``SymbolNotFound`` when no occurrence of the name sits inside a construct
    of that name.
    """
    handle = access.open(location.document_path)
    text = handle.text
    name = location.symbol_name

    if location.offset <= len(text) and access.enclosing_symbol(handle, location.offset) == name:
        return _resolved(access, handle, location.offset)

    line_start = line_start_offset(text, location.line)
    if line_start is not None and access.enclosing_symbol(handle, line_start) == name:
        logger.debug("Resolved %s at start of line %d", name, location.line)
        return _resolved(access, handle, line_start)

    index = text.find(name)
    while index >= 0:
        if access.enclosing_symbol(handle, index) == name:
            logger.debug("Resolved drifted %s by scan at offset %d", name, index)
            return _resolved(access, handle, index)
        index = text.find(name, index + 1)

    raise SymbolNotFound(f"Symbol {name!r} not found in {location.document_path}")


def refreshed_location(location: LocationPayload, resolved: ResolvedPosition) -> LocationPayload:
    """Return ``location`` re-pointed at a resolved position.

    Resolution itself never rewrites payloads; callers that want drifted
    bookmarks re-saved use this to build the replacement.
    """
    return replace(location, line=resolved.line, offset=resolved.offset)
