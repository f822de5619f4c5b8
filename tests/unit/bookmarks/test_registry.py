"""Tests for bookmark type descriptors and registry dispatch."""

from __future__ import annotations

import unittest
from dataclasses import replace
from pathlib import Path

from scripted_access import ScriptedDocumentAccess

from lazymarks.bookmarks.model import BookmarkType, DocumentContext, PositionLocation, SymbolLocation
from lazymarks.bookmarks.registry import POSITION_DESCRIPTOR, BookmarkTypeRegistry
from lazymarks.documents.access import DocumentHandle
from lazymarks.errors import NoApplicableType

SOURCE = "import os\n\ndef alpha():\n    return 1\n"


def _context(path: str, text: str, offset: int, language: str | None = "python") -> DocumentContext:
    access = ScriptedDocumentAccess({path: text}, language=language)
    return DocumentContext(access=access, handle=access.open(path), offset=offset)


class RegistryLookupTests(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = BookmarkTypeRegistry.default()

    def test_lookup_by_tag_accepts_enum_and_string(self) -> None:
        self.assertEqual(self.registry.descriptor_for_tag(BookmarkType.SYMBOL).display_name, "Symbol")
        self.assertEqual(self.registry.descriptor_for_tag("position").display_name, "Position")
        self.assertIsNone(self.registry.descriptor_for_tag("nope"))

    def test_lookup_by_display_name(self) -> None:
        self.assertEqual(self.registry.descriptor_for_display_name("Symbol").tag, BookmarkType.SYMBOL)
        self.assertIsNone(self.registry.descriptor_for_display_name("symbol"))

    def test_duplicate_tags_are_rejected(self) -> None:
        with self.assertRaises(ValueError):
            BookmarkTypeRegistry([POSITION_DESCRIPTOR, POSITION_DESCRIPTOR])

    def test_extra_descriptor_dispatches_without_other_changes(self) -> None:
        scratch = replace(POSITION_DESCRIPTOR, tag="scratch", display_name="Scratch", applies=lambda _context: True)
        registry = BookmarkTypeRegistry([*self.registry.descriptors, scratch])
        context = DocumentContext(access=ScriptedDocumentAccess({}), handle=None)

        self.assertEqual(registry.descriptor_for_tag("scratch"), scratch)
        self.assertEqual(registry.types_applicable_to(context), [scratch])


class ApplicabilityTests(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = BookmarkTypeRegistry.default()

    def _tags(self, context: DocumentContext) -> list[BookmarkType]:
        return [descriptor.tag for descriptor in self.registry.types_applicable_to(context)]

    def test_document_without_identity_supports_no_type(self) -> None:
        context = DocumentContext(access=ScriptedDocumentAccess({}), handle=None)
        self.assertEqual(self._tags(context), [])

    def test_plain_text_supports_position_only(self) -> None:
        context = _context("/notes.txt", "hello\nworld\n", 7, language=None)
        self.assertEqual(self._tags(context), [BookmarkType.POSITION])

    def test_cursor_inside_construct_supports_both_in_table_order(self) -> None:
        context = _context("/m.py", SOURCE, SOURCE.index("return"))
        self.assertEqual(self._tags(context), [BookmarkType.POSITION, BookmarkType.SYMBOL])

    def test_cursor_outside_construct_supports_position_only(self) -> None:
        context = _context("/m.py", SOURCE, 2)
        self.assertEqual(self._tags(context), [BookmarkType.POSITION])

    def test_directory_listing_supports_position_only(self) -> None:
        access = ScriptedDocumentAccess({})
        handle = DocumentHandle(path=Path("/proj"), text="a.py\nb/\n", is_directory=True)
        context = DocumentContext(access=access, handle=handle, offset=5)
        self.assertEqual(self._tags(context), [BookmarkType.POSITION])


class DescriptorBehaviorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = BookmarkTypeRegistry.default()
        self.position = self.registry.descriptor_for_tag(BookmarkType.POSITION)
        self.symbol = self.registry.descriptor_for_tag(BookmarkType.SYMBOL)

    def test_position_captures_line_and_offset(self) -> None:
        context = _context("/notes.txt", "hello\nworld\n", 8, language=None)
        self.assertEqual(self.position.create_location(context), PositionLocation("/notes.txt", line=2, offset=8))
        self.assertEqual(self.position.suggest_name(context), "notes.txt:2")

    def test_symbol_captures_enclosing_construct(self) -> None:
        offset = SOURCE.index("return")
        context = _context("/src/m.py", SOURCE, offset)
        self.assertEqual(
            self.symbol.create_location(context),
            SymbolLocation("/src/m.py", line=4, offset=offset, symbol_name="alpha"),
        )
        self.assertEqual(self.symbol.suggest_name(context), "m.py:alpha()")

    def test_symbol_outside_construct_has_no_suggestion_and_cannot_create(self) -> None:
        context = _context("/m.py", SOURCE, 0)
        self.assertIsNone(self.symbol.suggest_name(context))
        with self.assertRaises(NoApplicableType):
            self.symbol.create_location(context)

    def test_position_without_identity_cannot_create(self) -> None:
        context = DocumentContext(access=ScriptedDocumentAccess({}), handle=None)
        self.assertIsNone(self.position.suggest_name(context))
        with self.assertRaises(NoApplicableType):
            self.position.create_location(context)


if __name__ == "__main__":
    unittest.main()
