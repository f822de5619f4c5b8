"""Tests for plain and symbol-bound location resolution.

Covers the undrifted fast path, line re-anchoring, the occurrence scan with
its earliest-match tie-break, and the failure modes.
"""

from __future__ import annotations

import unittest

from scripted_access import ScriptedDocumentAccess

from lazymarks.bookmarks.model import PositionLocation, SymbolLocation
from lazymarks.bookmarks.resolver import refreshed_location, resolve_position, resolve_symbol
from lazymarks.errors import DocumentUnavailable, SymbolNotFound

TWO_FUNCTIONS = "def alpha():\n    return 1\n\ndef beta():\n    return 2\n"


class PositionResolverTests(unittest.TestCase):
    def test_unchanged_document_resolves_to_recorded_offset(self) -> None:
        access = ScriptedDocumentAccess({"/a.txt": "one\ntwo\nthree\n"})
        resolved = resolve_position(PositionLocation("/a.txt", line=2, offset=5), access)
        self.assertEqual(resolved.offset, 5)
        self.assertEqual((resolved.line, resolved.column), (2, 1))

    def test_drifted_offset_re_anchors_to_stored_line_start(self) -> None:
        access = ScriptedDocumentAccess({"/a.txt": "new line\none\ntwo\nthree\n"})
        resolved = resolve_position(PositionLocation("/a.txt", line=3, offset=8), access)
        self.assertEqual(resolved.offset, 13)
        self.assertEqual((resolved.line, resolved.column), (3, 0))

    def test_line_past_end_anchors_at_document_end(self) -> None:
        access = ScriptedDocumentAccess({"/a.txt": "one\n"})
        resolved = resolve_position(PositionLocation("/a.txt", line=5, offset=50), access)
        self.assertEqual(resolved.offset, 4)
        self.assertEqual(resolved.line, 2)

    def test_missing_document_raises_document_unavailable(self) -> None:
        access = ScriptedDocumentAccess({})
        with self.assertRaises(DocumentUnavailable):
            resolve_position(PositionLocation("/gone.txt", line=1, offset=0), access)


class SymbolResolverTests(unittest.TestCase):
    def test_fast_path_probes_only_the_stored_offset(self) -> None:
        access = ScriptedDocumentAccess({"/m.py": TWO_FUNCTIONS})
        resolved = resolve_symbol(SymbolLocation("/m.py", line=1, offset=4, symbol_name="alpha"), access)
        self.assertEqual(resolved.offset, 4)
        self.assertEqual(access.probe_offsets, [4])

    def test_falls_back_to_start_of_stored_line(self) -> None:
        access = ScriptedDocumentAccess({"/m.py": TWO_FUNCTIONS})
        resolved = resolve_symbol(SymbolLocation("/m.py", line=2, offset=31, symbol_name="alpha"), access)
        self.assertEqual(resolved.offset, 13)
        self.assertEqual(resolved.line, 2)
        self.assertEqual(access.probe_offsets, [31, 13])

    def test_scan_finds_construct_that_moved_to_another_line(self) -> None:
        text = "def helper():\n    return alpha_value\n\ndef alpha():\n    return 1\n"
        access = ScriptedDocumentAccess({"/m.py": text})
        resolved = resolve_symbol(SymbolLocation("/m.py", line=1, offset=4, symbol_name="alpha"), access)
        self.assertEqual(resolved.offset, text.index("def alpha") + 4)
        self.assertEqual((resolved.line, resolved.column), (4, 4))

    def test_scan_prefers_earliest_matching_occurrence(self) -> None:
        text = (
            "def alpha():\n    return 1\n\n"
            "def gamma():\n    pass\n    pass\n    pass\n\n"
            "def alpha():\n    return 2\n"
        )
        access = ScriptedDocumentAccess({"/m.py": text})
        # Originally bookmarked on the second definition, before gamma was inserted.
        resolved = resolve_symbol(SymbolLocation("/m.py", line=4, offset=31, symbol_name="alpha"), access)
        self.assertEqual(resolved.offset, 4)
        self.assertEqual(resolved.line, 1)

    def test_scan_skips_mentions_outside_the_construct(self) -> None:
        text = "# alpha lives below\ndef alpha():\n    return 1\n"
        access = ScriptedDocumentAccess({"/m.py": text})
        resolved = resolve_symbol(SymbolLocation("/m.py", line=5, offset=60, symbol_name="alpha"), access)
        self.assertEqual(resolved.offset, 24)
        self.assertEqual((resolved.line, resolved.column), (2, 4))

    def test_scan_trusts_the_probe_for_earlier_textual_mentions(self) -> None:
        text = "# alpha lives below\ndef alpha():\n    return 1\n"
        access = ScriptedDocumentAccess({"/m.py": text}, probe=lambda _text, _offset: "alpha")
        resolved = resolve_symbol(SymbolLocation("/m.py", line=9, offset=99, symbol_name="alpha"), access)
        self.assertEqual(resolved.offset, 2)

    def test_missing_symbol_raises_symbol_not_found(self) -> None:
        access = ScriptedDocumentAccess({"/m.py": "def beta():\n    pass\n"})
        with self.assertRaises(SymbolNotFound):
            resolve_symbol(SymbolLocation("/m.py", line=1, offset=4, symbol_name="alpha"), access)

    def test_missing_document_raises_document_unavailable(self) -> None:
        access = ScriptedDocumentAccess({})
        with self.assertRaises(DocumentUnavailable):
            resolve_symbol(SymbolLocation("/m.py", line=1, offset=4, symbol_name="alpha"), access)

    def test_refreshed_location_repoints_without_touching_original(self) -> None:
        text = "def helper():\n    return alpha_value\n\ndef alpha():\n    return 1\n"
        access = ScriptedDocumentAccess({"/m.py": text})
        location = SymbolLocation("/m.py", line=1, offset=4, symbol_name="alpha")
        resolved = resolve_symbol(location, access)

        refreshed = refreshed_location(location, resolved)

        self.assertEqual(refreshed, SymbolLocation("/m.py", line=4, offset=42, symbol_name="alpha"))
        self.assertEqual(location, SymbolLocation("/m.py", line=1, offset=4, symbol_name="alpha"))


if __name__ == "__main__":
    unittest.main()
