"""Line/offset arithmetic over plain document text.

Lines are 1-based, offsets are 0-based character indexes.
"""

from __future__ import annotations

from bisect import bisect_right


def line_start_offsets(text: str) -> list[int]:
    """Return the offset at which each line of ``text`` begins."""
    starts = [0]
    index = text.find("\n")
    while index >= 0:
        starts.append(index + 1)
        index = text.find("\n", index + 1)
    return starts


def line_count(text: str) -> int:
    return text.count("\n") + 1


def clamp_offset(text: str, offset: int) -> int:
    return max(0, min(len(text), int(offset)))


def line_for_offset(text: str, offset: int) -> int:
    """Return the 1-based line containing ``offset`` (clamped into the text)."""
    return text.count("\n", 0, clamp_offset(text, offset)) + 1


def line_start_offset(text: str, line: int) -> int | None:
    """Return the offset where 1-based ``line`` starts, or ``None`` past the end."""
    if line < 1:
        return None
    starts = line_start_offsets(text)
    if line > len(starts):
        return None
    return starts[line - 1]


def line_and_column(text: str, offset: int) -> tuple[int, int]:
    """Return ``(line, column)`` for ``offset``; line is 1-based, column 0-based."""
    offset = clamp_offset(text, offset)
    starts = line_start_offsets(text)
    line_index = bisect_right(starts, offset) - 1
    return line_index + 1, offset - starts[line_index]


def offset_for_line_and_column(text: str, line: int, column: int = 0) -> int:
    """Convert a 1-based line and 0-based column into an offset.

    Lines past the end map to the end of the text; columns are clamped to the
    line's length.
    """
    start = line_start_offset(text, max(1, line))
    if start is None:
        return len(text)
    line_end = text.find("\n", start)
    if line_end < 0:
        line_end = len(text)
    return start + max(0, min(column, line_end - start))
