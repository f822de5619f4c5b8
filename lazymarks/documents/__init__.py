"""Public API surface for document access.

This package groups everything the bookmark core needs from documents:
- opening files and directory listings
- enclosing-construct probing over symbol spans
- line/offset arithmetic and terminal highlighting for display
"""

from __future__ import annotations

from .access import DocumentAccess, DocumentHandle, FileDocumentAccess, directory_listing
from .symbols import clear_symbol_span_cache, collect_symbol_spans, enclosing_symbol, language_for_path
from .symbols_types import SymbolSpan
from .syntax import colorize_source, read_text

__all__ = [
    "DocumentAccess",
    "DocumentHandle",
    "FileDocumentAccess",
    "SymbolSpan",
    "clear_symbol_span_cache",
    "collect_symbol_spans",
    "colorize_source",
    "directory_listing",
    "enclosing_symbol",
    "language_for_path",
    "read_text",
]
