"""Single-line classifiers for HTML blocks and GFM tables.

These functions look at one line (or one textblock's text) at a time and
never raise on malformed input. The scanners package builds multi-line
views on top of them.
"""

from escapade.classifiers.html import (
    BLOCK_LEVEL_TAGS,
    HtmlBlockType,
    classify_block_start,
    is_block_end,
    is_html_block_start,
)
from escapade.classifiers.table import (
    count_cells,
    is_gfm_table_row,
    is_separator_row,
    is_table_row_text,
    is_valid_table,
    validate_table,
    validate_table_structure,
)

__all__ = [
    "BLOCK_LEVEL_TAGS",
    "HtmlBlockType",
    "classify_block_start",
    "count_cells",
    "is_block_end",
    "is_gfm_table_row",
    "is_html_block_start",
    "is_separator_row",
    "is_table_row_text",
    "is_valid_table",
    "validate_table",
    "validate_table_structure",
]
