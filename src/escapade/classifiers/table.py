r"""GFM table row and delimiter row detection.

Two row predicates live here and they are meant to disagree:

- is_gfm_table_row is strict (at least two unescaped pipes). The table
  context escaper uses it so that prose with one stray ``|`` never opens a
  table.
- is_table_row_text is loose (the line starts with ``|``). Styling and row
  splitting use it, where a half-typed row should still be recognised.

Separator (delimiter) rows and cell counts follow GFM: one optional leading
and one optional trailing pipe are stripped before splitting, and the header
row must have as many cells as the delimiter row.

Example:
    >>> is_gfm_table_row("| a | b |")
    True
    >>> is_gfm_table_row("prose with a | pipe")
    False
    >>> is_valid_table("| A | B |", "| - | - |")
    True
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from escapade.patterns import TABLE_ROW_PATTERN

_SEPARATOR_CELL = re.compile(r"^:?-+:?$")
_ESCAPED_PIPE_START = re.compile(r"^\s*\\\|")

TABLE_CLASS = "escapade-table"
INVALID_TABLE_CLASS = "escapade-table-invalid"


@dataclass(frozen=True, slots=True)
class TableValidation:
    """Result of validating a block of pipe rows for styling."""

    is_valid: bool
    css_class: str


@dataclass(frozen=True, slots=True)
class TableShape:
    """Row and column counts of a candidate table."""

    is_valid: bool
    row_count: int
    column_count: int


def count_unescaped_pipes(line: str) -> int:
    """Count ``|`` characters not preceded by an escaping backslash."""
    count = 0
    escaped = False
    for char in line:
        if escaped:
            escaped = False
            continue
        if char == "\\":
            escaped = True
        elif char == "|":
            count += 1
    return count


def is_gfm_table_row(line: str) -> bool:
    """Strict table row test used to confirm table membership.

    Args:
        line: One line of serialized Markdown

    Returns:
        True if the line has at least two unescaped pipes and does not start
        with an escaped pipe.
    """
    if not line.strip():
        return False
    if _ESCAPED_PIPE_START.match(line):
        return False
    return count_unescaped_pipes(line) >= 2


def is_table_row_text(text: str) -> bool:
    """Loose table row test: the text (its first line) starts with a pipe."""
    return TABLE_ROW_PATTERN.match(text.strip()) is not None


def _split_cells(line: str) -> list[str]:
    content = line.strip()
    if content.startswith("|"):
        content = content[1:]
    if content.endswith("|"):
        content = content[:-1]
    return content.split("|")


def is_separator_row(line: str) -> bool:
    """Check if a line is a GFM delimiter row (``| :-- | :-: | --: |``)."""
    if not line or not line.strip() or "-" not in line:
        return False
    return all(_SEPARATOR_CELL.match(cell.strip()) for cell in _split_cells(line))


def count_cells(line: str) -> int:
    """Count cells in a table row after stripping the outer pipes."""
    if not line or not line.strip():
        return 0
    return len(_split_cells(line))


def is_valid_table(header_line: str, separator_line: str) -> bool:
    """True if the pair forms a GFM table header.

    The delimiter row must be valid and match the header's cell count.
    """
    return is_separator_row(separator_line) and count_cells(header_line) == count_cells(
        separator_line
    )


def _pipe_lines(text: str) -> list[str]:
    return [line.strip() for line in text.split("\n") if is_table_row_text(line)]


def validate_table_structure(text: str) -> TableValidation:
    """Validate the pipe rows of a textblock for highlighting.

    A single pipe row is always acceptable table content. With two or more,
    only the first two matter: they must form a valid header.
    """
    if not text or not text.strip():
        return TableValidation(False, INVALID_TABLE_CLASS)

    rows = _pipe_lines(text)
    if not rows:
        return TableValidation(False, INVALID_TABLE_CLASS)
    if len(rows) == 1:
        return TableValidation(True, TABLE_CLASS)
    if is_valid_table(rows[0], rows[1]):
        return TableValidation(True, TABLE_CLASS)
    return TableValidation(False, INVALID_TABLE_CLASS)


def validate_table(markdown: str) -> TableShape:
    """Validate that markdown holds a GFM table and report its shape."""
    if not markdown:
        return TableShape(False, 0, 0)

    rows = _pipe_lines(markdown)
    if len(rows) < 2:
        return TableShape(False, len(rows), 0)
    if not is_separator_row(rows[1]):
        return TableShape(False, len(rows), 0)

    header_cells = count_cells(rows[0])
    if header_cells != count_cells(rows[1]):
        return TableShape(False, len(rows), header_cells)
    return TableShape(True, len(rows), header_cells)


def extract_table_rows(markdown: str) -> list[str]:
    """Return the lines of markdown that look like table rows (loose test)."""
    if not markdown:
        return []
    return [line for line in markdown.split("\n") if is_table_row_text(line)]


__all__ = [
    "INVALID_TABLE_CLASS",
    "TABLE_CLASS",
    "TableShape",
    "TableValidation",
    "count_cells",
    "count_unescaped_pipes",
    "extract_table_rows",
    "is_gfm_table_row",
    "is_separator_row",
    "is_table_row_text",
    "is_valid_table",
    "validate_table",
    "validate_table_structure",
]
