"""Table region detection for the table-context escaping pass.

A region opens only at a strict table row whose next line is a delimiter
row, continues through contiguous strict rows and delimiter rows, and closes
at the first line that is neither. Lines inside fenced code never belong to
a region. Lines outside every region are prose and keep their escapes.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from escapade.classifiers.table import is_gfm_table_row, is_separator_row
from escapade.scanners.code import fenced_code_mask


@dataclass(frozen=True, slots=True)
class TableRegion:
    """Inclusive, zero-based line range of one table."""

    start: int
    end: int

    def contains(self, line_number: int) -> bool:
        return self.start <= line_number <= self.end


def _is_delimiter_line(line: str) -> bool:
    # A delimiter line without any pipe is a thematic break or setext underline
    return "|" in line and is_separator_row(line)


def find_table_regions(lines: Sequence[str]) -> list[TableRegion]:
    """Find table regions in serialized Markdown lines.

    Args:
        lines: Document lines

    Returns:
        Regions in document order, non-overlapping
    """
    regions: list[TableRegion] = []
    total = len(lines)
    fenced = fenced_code_mask(lines)

    def is_row(i: int) -> bool:
        return not fenced[i] and is_gfm_table_row(lines[i])

    def is_delimiter(i: int) -> bool:
        return not fenced[i] and _is_delimiter_line(lines[i])

    index = 0
    while index < total:
        opens = index + 1 < total and is_row(index) and is_delimiter(index + 1)
        if not opens:
            index += 1
            continue

        end = index + 1
        while end + 1 < total and (is_row(end + 1) or is_delimiter(end + 1)):
            end += 1
        regions.append(TableRegion(index, end))
        index = end + 1
    return regions


def table_line_mask(lines: Sequence[str]) -> list[bool]:
    """Per-line flags: True where the line belongs to a table region."""
    mask = [False] * len(lines)
    for region in find_table_regions(lines):
        for line_number in range(region.start, region.end + 1):
            mask[line_number] = True
    return mask


__all__ = ["TableRegion", "find_table_regions", "table_line_mask"]
