"""Shared symbol datatypes."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SymbolSpan:
    """Named construct covering ``[start, end)`` character offsets of a document."""

    kind: str
    name: str
    start: int
    end: int
    line: int

    def contains(self, offset: int) -> bool:
        return self.start <= offset < self.end
