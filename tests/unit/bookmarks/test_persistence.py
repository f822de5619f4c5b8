"""Tests for versioned bookmark-file persistence.

Validates save/load round-tripping, the on-disk layout, format-version
checks, and failure reporting for unreadable or unwritable files.
"""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from lazymarks.bookmarks.model import Bookmark, BookmarkType, PositionLocation, SymbolLocation
from lazymarks.bookmarks.persistence import FORMAT_VERSION, load_store, save_store
from lazymarks.bookmarks.store import BookmarkStore
from lazymarks.errors import MalformedStore, PersistenceUnavailable, UnsupportedFormatVersion


def _sample_store() -> BookmarkStore:
    store = BookmarkStore()
    store.add_bookmark("proj", Bookmark("entry", BookmarkType.POSITION, PositionLocation("/a.txt", 5, 120)))
    store.add_bookmark(
        "proj",
        Bookmark("main", BookmarkType.SYMBOL, SymbolLocation("/src/app.py", 12, 340, symbol_name="main")),
    )
    store.add_bookmark("notes", Bookmark("todo", BookmarkType.POSITION, PositionLocation("/notes", 1, 0)))
    store.ensure_group("empty")
    return store


class PersistenceRoundTripTests(unittest.TestCase):
    def test_missing_file_loads_empty_store(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            store = load_store(Path(tmp) / "absent.json")
        self.assertEqual(store.group_names(), [])

    def test_save_then_load_reproduces_store(self) -> None:
        original = _sample_store()
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bookmarks.json"
            save_store(original, path)
            loaded = load_store(path)

        self.assertEqual(loaded.snapshot(), original.snapshot())
        self.assertEqual(loaded.group_names(), ["proj", "notes", "empty"])
        self.assertEqual(loaded.bookmark_names("proj"), ["main", "entry"])

    def test_file_layout(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bookmarks.json"
            save_store(_sample_store(), path)
            data = json.loads(path.read_text(encoding="utf-8"))

        self.assertEqual(data["formatVersion"], FORMAT_VERSION)
        self.assertEqual(data["groups"][0][0], "proj")
        self.assertEqual(
            data["groups"][0][1][0],
            [
                "main",
                {
                    "type": "symbol",
                    "location": {"documentPath": "/src/app.py", "line": 12, "offset": 340, "symbolName": "main"},
                },
            ],
        )
        self.assertEqual(data["groups"][2], ["empty", []])

    def test_save_creates_storage_directory_and_leaves_no_temp_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "nested" / "dir" / "bookmarks.json"
            save_store(_sample_store(), path)
            self.assertTrue(path.is_file())
            self.assertEqual(sorted(p.name for p in path.parent.iterdir()), ["bookmarks.json"])

    def test_duplicate_names_in_file_keep_first_listed(self) -> None:
        data = {
            "formatVersion": FORMAT_VERSION,
            "groups": [
                [
                    "g",
                    [
                        ["x", {"type": "position", "location": {"documentPath": "/new.txt", "line": 2, "offset": 4}}],
                        ["x", {"type": "position", "location": {"documentPath": "/old.txt", "line": 1, "offset": 0}}],
                    ],
                ]
            ],
        }
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bookmarks.json"
            path.write_text(json.dumps(data), encoding="utf-8")
            store = load_store(path)
        self.assertEqual(store.bookmark_names("g"), ["x"])
        self.assertEqual(store.get_bookmark("g", "x").location.document_path, "/new.txt")


class PersistenceFailureTests(unittest.TestCase):
    def _load_json(self, payload: object) -> BookmarkStore:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bookmarks.json"
            path.write_text(json.dumps(payload), encoding="utf-8")
            return load_store(path)

    def test_other_format_version_is_rejected(self) -> None:
        with self.assertRaises(UnsupportedFormatVersion) as caught:
            self._load_json({"formatVersion": FORMAT_VERSION + 1, "groups": []})
        self.assertEqual(caught.exception.found, FORMAT_VERSION + 1)

    def test_missing_or_non_integer_version_is_rejected(self) -> None:
        for payload in ({"groups": []}, {"formatVersion": True, "groups": []}, {"formatVersion": "1"}):
            with self.subTest(payload=payload):
                with self.assertRaises(UnsupportedFormatVersion):
                    self._load_json(payload)

    def test_invalid_json_is_malformed(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bookmarks.json"
            path.write_text("{not json", encoding="utf-8")
            with self.assertRaises(MalformedStore):
                load_store(path)

    def test_malformed_structures_are_rejected(self) -> None:
        bad_groups = [
            "not-a-list",
            [["g"]],
            [["g", [["x"]]]],
            [["g", [["x", {"type": "teleport", "location": {}}]]]],
            [["g", [["x", {"type": "position", "location": {"documentPath": "/a", "line": 0, "offset": 0}}]]]],
            [["g", [["x", {"type": "symbol", "location": {"documentPath": "/a", "line": 1, "offset": 0}}]]]],
            [["", []]],
        ]
        for groups in bad_groups:
            with self.subTest(groups=groups):
                with self.assertRaises(MalformedStore):
                    self._load_json({"formatVersion": FORMAT_VERSION, "groups": groups})

    def test_malformed_store_is_a_persistence_failure(self) -> None:
        self.assertTrue(issubclass(MalformedStore, PersistenceUnavailable))

    def test_unreadable_path_raises_persistence_unavailable(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bookmarks.json"
            path.mkdir()
            with self.assertRaises(PersistenceUnavailable):
                load_store(path)

    def test_unwritable_target_raises_and_keeps_store(self) -> None:
        store = _sample_store()
        before = store.snapshot()
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bookmarks.json"
            path.mkdir()
            with self.assertRaises(PersistenceUnavailable):
                save_store(store, path)
            self.assertEqual(sorted(p.name for p in Path(tmp).iterdir()), ["bookmarks.json"])
        self.assertEqual(store.snapshot(), before)


if __name__ == "__main__":
    unittest.main()
