"""Multi-line scanners built on the line classifiers.

- html: HTML block ranges (GFM types 1-7)
- table: table regions for context-aware unescaping
- blocks: portable block splitter
- code: fenced code and code spans, for passes that must skip code
"""

from escapade.scanners.blocks import BlockSpan, BlockType, block_types, blocks_of_type, split_blocks
from escapade.scanners.code import (
    code_ranges,
    code_span_ranges,
    fenced_code_mask,
    map_outside_code,
    map_outside_code_spans,
)
from escapade.scanners.html import (
    HtmlBlockRange,
    find_html_blocks,
    is_range_in_html_block,
    iter_html_blocks,
    line_in_html_block,
)
from escapade.scanners.table import TableRegion, find_table_regions

__all__ = [
    "BlockSpan",
    "BlockType",
    "HtmlBlockRange",
    "TableRegion",
    "block_types",
    "blocks_of_type",
    "code_ranges",
    "code_span_ranges",
    "fenced_code_mask",
    "find_html_blocks",
    "find_table_regions",
    "is_range_in_html_block",
    "iter_html_blocks",
    "line_in_html_block",
    "map_outside_code",
    "map_outside_code_spans",
    "split_blocks",
]
