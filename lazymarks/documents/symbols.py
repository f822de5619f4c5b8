"""Enclosing-construct probing for source documents.

Collects named class/function spans with Tree-sitter when a parser loads and
falls back to regex patterns with indentation-based extents otherwise.
Spans are cached per document text in a small LRU.
"""

from __future__ import annotations

import logging
import re
from bisect import bisect_right
from collections import OrderedDict
from functools import lru_cache
from pathlib import Path

from .symbols_config import (
    CLASS_NODE_TYPES,
    CLOSING_LINE_PREFIXES,
    DECORATED_NODE_TYPES,
    FALLBACK_PATTERNS_BY_LANGUAGE,
    FUNCTION_NODE_TYPES,
    GENERIC_FALLBACK_PATTERNS,
    IDENTIFIER_NODE_TYPES,
    LANGUAGE_BY_SUFFIX,
    MISSING_PARSER_ERROR,
    SYMBOL_SPAN_CACHE_MAX,
)
from .symbols_types import SymbolSpan

logger = logging.getLogger(__name__)

_SYMBOL_SPAN_CACHE: OrderedDict[tuple[str, int, int], tuple[SymbolSpan, ...]] = OrderedDict()


def language_for_path(path: Path) -> str | None:
    """Map file suffix to configured Tree-sitter language key."""
    return LANGUAGE_BY_SUFFIX.get(path.suffix.lower())


@lru_cache(maxsize=32)
def _load_parser(language_name: str):
    """Load a Tree-sitter parser using supported provider packages.

    Tries ``tree_sitter_languages`` first, then ``tree_sitter_language_pack``.
    Returns ``(parser, error_message)``.
    """
    errors: list[str] = []

    try:
        from tree_sitter_languages import get_parser

        return get_parser(language_name), None
    except ModuleNotFoundError:
        pass
    except Exception as exc:
        errors.append(f"Failed to load Tree-sitter parser for {language_name}: {exc}")

    try:
        from tree_sitter_language_pack import get_parser

        return get_parser(language_name), None
    except ModuleNotFoundError:
        pass
    except Exception as exc:
        errors.append(f"Failed to load Tree-sitter parser for {language_name}: {exc}")

    if errors:
        return None, errors[0]
    return None, MISSING_PARSER_ERROR


def _char_offset_mapper(source: str, source_bytes: bytes):
    """Return a callable translating UTF-8 byte offsets into character offsets."""
    if len(source_bytes) == len(source):
        return lambda byte_offset: byte_offset

    byte_starts: list[int] = []
    position = 0
    for ch in source:
        byte_starts.append(position)
        position += len(ch.encode("utf-8", errors="replace"))

    def to_char(byte_offset: int) -> int:
        return bisect_right(byte_starts, byte_offset) - 1 if byte_offset < position else len(source)

    return to_char


def _node_name(source_bytes: bytes, node) -> str | None:
    """Extract the declared name of a construct node, if it has one."""
    for field_name in ("name", "declarator"):
        child = node.child_by_field_name(field_name)
        while child is not None and child.child_by_field_name("declarator") is not None:
            child = child.child_by_field_name("declarator")
        if child is None:
            continue
        nested = child.child_by_field_name("name")
        target = nested if nested is not None else child
        return source_bytes[target.start_byte : target.end_byte].decode("utf-8", errors="replace").strip()

    for child in node.named_children:
        if child.type in IDENTIFIER_NODE_TYPES:
            return source_bytes[child.start_byte : child.end_byte].decode("utf-8", errors="replace").strip()
    return None


def _symbol_kind(node_type: str) -> str | None:
    if node_type in FUNCTION_NODE_TYPES:
        return "fn"
    if node_type in CLASS_NODE_TYPES:
        return "class"
    return None


def _collect_tree_sitter_spans(parser, source: str) -> list[SymbolSpan]:
    source_bytes = source.encode("utf-8", errors="replace")
    to_char = _char_offset_mapper(source, source_bytes)
    tree = parser.parse(source_bytes)
    spans: list[SymbolSpan] = []

    def walk(node) -> None:
        """Depth-first traversal collecting named construct nodes."""
        if node.type in DECORATED_NODE_TYPES:
            definition = node.child_by_field_name("definition")
            if definition is not None:
                walk(definition)
                return

        kind = _symbol_kind(node.type)
        if kind is not None:
            name = _node_name(source_bytes, node)
            if name:
                spans.append(
                    SymbolSpan(
                        kind=kind,
                        name=name,
                        start=to_char(node.start_byte),
                        end=to_char(node.end_byte),
                        line=int(node.start_point[0]),
                    )
                )

        for child in node.named_children:
            walk(child)

    # The root node spans the whole document and never names a construct.
    for child in tree.root_node.named_children:
        walk(child)
    return spans


def leading_indent_columns(text: str) -> int:
    """Return leading indentation width where tabs count as four columns."""
    count = 0
    for ch in text:
        if ch == " ":
            count += 1
        elif ch == "\t":
            count += 4
        else:
            break
    return count


def _collect_fallback_spans(source: str, language_name: str | None) -> list[SymbolSpan]:
    """Collect spans via regex headers; a span ends at the next dedented line."""
    patterns = FALLBACK_PATTERNS_BY_LANGUAGE.get(language_name or "", GENERIC_FALLBACK_PATTERNS)
    lines = source.splitlines(keepends=True)
    line_starts = [0]
    for line in lines:
        line_starts.append(line_starts[-1] + len(line))

    spans: list[SymbolSpan] = []
    for line_idx, line in enumerate(lines):
        for kind, pattern in patterns:
            match = pattern.match(line)
            if match is None:
                continue
            name = re.sub(r"\s+", " ", match.group("name")).strip()
            if not name:
                break
            indent = leading_indent_columns(line)
            end = len(source)
            for next_idx in range(line_idx + 1, len(lines)):
                stripped = lines[next_idx].strip()
                if not stripped or stripped.startswith(CLOSING_LINE_PREFIXES):
                    continue
                if leading_indent_columns(lines[next_idx]) <= indent:
                    end = line_starts[next_idx]
                    break
            spans.append(SymbolSpan(kind=kind, name=name, start=line_starts[line_idx], end=end, line=line_idx))
            break
    return spans


def collect_symbol_spans(source: str, language_name: str | None) -> list[SymbolSpan]:
    """Collect named construct spans for ``source`` ordered by start offset.

    Tree-sitter is preferred; a regex fallback runs when no parser loads or
    parsing fails.
    """
    parser = None
    if language_name is not None:
        parser, parser_error = _load_parser(language_name)
        if parser is None:
            logger.debug("Using regex symbol fallback for %s: %s", language_name, parser_error)

    spans: list[SymbolSpan] | None = None
    if parser is not None:
        try:
            spans = _collect_tree_sitter_spans(parser, source)
        except Exception as exc:
            logger.debug("Tree-sitter parse failed for %s: %s", language_name, exc)
    if spans is None:
        spans = _collect_fallback_spans(source, language_name)

    spans.sort(key=lambda span: (span.start, -span.end))
    return spans


def collect_symbol_spans_cached(path: Path, source: str, language_name: str | None) -> tuple[SymbolSpan, ...]:
    """Collect spans with a small LRU cache keyed by path and text identity."""
    cache_key = (str(path), len(source), hash(source))
    cached = _SYMBOL_SPAN_CACHE.get(cache_key)
    if cached is not None:
        _SYMBOL_SPAN_CACHE.move_to_end(cache_key)
        return cached

    spans = tuple(collect_symbol_spans(source, language_name))
    _SYMBOL_SPAN_CACHE[cache_key] = spans
    while len(_SYMBOL_SPAN_CACHE) > SYMBOL_SPAN_CACHE_MAX:
        _SYMBOL_SPAN_CACHE.popitem(last=False)
    return spans


def clear_symbol_span_cache() -> None:
    """Drop cached symbol spans."""
    _SYMBOL_SPAN_CACHE.clear()


def enclosing_symbol(spans: tuple[SymbolSpan, ...] | list[SymbolSpan], offset: int) -> SymbolSpan | None:
    """Return the innermost span containing ``offset``."""
    innermost: SymbolSpan | None = None
    for span in spans:
        if span.start > offset:
            break
        if span.contains(offset) and (innermost is None or span.start >= innermost.start):
            innermost = span
    return innermost
