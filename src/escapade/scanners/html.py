"""HTML block range scanning over a list of lines.

A single forward pass groups lines into HTML blocks using the GFM start
and end conditions from escapade.classifiers.html:

- Types 1-5 consume lines until the type's end marker. The start line can
  close its own block (``<!-- note -->``).
- Types 6 and 7 consume lines until the line before the next blank line.
- A block whose end condition never appears extends to the last line.

Ranges from one scan never overlap; scanning resumes at ``end + 1``.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from escapade.classifiers.html import HtmlBlockType, classify_block_start, is_block_end

_BLANK_TERMINATED = frozenset({HtmlBlockType.BLOCK_LEVEL, HtmlBlockType.OTHER})


@dataclass(frozen=True, slots=True)
class HtmlBlockRange:
    """Inclusive, zero-based line range of one HTML block."""

    start: int
    end: int
    type: HtmlBlockType

    def contains(self, line_number: int) -> bool:
        """True if line_number falls inside this range."""
        return self.start <= line_number <= self.end

    @property
    def line_count(self) -> int:
        return self.end - self.start + 1


def find_block_end(lines: Sequence[str], start: int, block_type: HtmlBlockType) -> int:
    """Index of the last line of the block of block_type starting at start."""
    last = len(lines) - 1
    if block_type in _BLANK_TERMINATED:
        end = start
        while end < last and lines[end + 1].strip():
            end += 1
        return end

    for index in range(start, len(lines)):
        if is_block_end(lines[index], block_type):
            return index
    return last


def iter_html_blocks(lines: Sequence[str]) -> Iterator[HtmlBlockRange]:
    """Yield HTML block ranges in document order.

    Args:
        lines: Document lines, already split on ``\\n``

    Yields:
        HtmlBlockRange for each block found
    """
    index = 0
    total = len(lines)
    while index < total:
        block_type = classify_block_start(lines[index])
        if block_type is None:
            index += 1
            continue
        end = find_block_end(lines, index, block_type)
        yield HtmlBlockRange(index, end, block_type)
        index = end + 1


def find_html_blocks(lines: Sequence[str]) -> list[HtmlBlockRange]:
    """Return every HTML block range in lines."""
    return list(iter_html_blocks(lines))


def line_in_html_block(line_number: int, lines: Sequence[str]) -> HtmlBlockRange | None:
    """Return the block containing line_number, or None."""
    for block in iter_html_blocks(lines):
        if block.contains(line_number):
            return block
        if block.start > line_number:
            break
    return None


def is_range_in_html_block(start_line: int, end_line: int, lines: Sequence[str]) -> bool:
    """True if any line in ``start_line..end_line`` (inclusive) is in a block."""
    for block in iter_html_blocks(lines):
        if block.start > end_line:
            break
        if block.end >= start_line:
            return True
    return False


__all__ = [
    "HtmlBlockRange",
    "find_block_end",
    "find_html_blocks",
    "is_range_in_html_block",
    "iter_html_blocks",
    "line_in_html_block",
]
