"""
Escapade — GFM-aware Markdown round trips for Python

Parses Markdown into a schema-typed document tree with markdown-it-py,
serializes it back, and post-processes the output so escapes only appear
where GitHub Flavored Markdown needs them: table rows stay readable,
prose keeps its escapes, and disallowed raw HTML is neutralised.

Quick Start:
    >>> from escapade import create_markdown_system
    >>> system = create_markdown_system()
    >>> system.round_trip("| a \\\\* b |\\n| --- |\\n\\nprose \\\\*")
    '| a * b |\\n| --- |\\n\\nprose \\\\*'

    >>> # Or the one-shot helper
    >>> from escapade import round_trip
    >>> round_trip("Some ~~old~~ text", extensions=["strikethrough"])
    'Some ~~old~~ text'

Standalone classifiers:
    >>> from escapade import classify_block_start, filter_disallowed_tags
    >>> classify_block_start("<!-- note -->")
    <HtmlBlockType.COMMENT: 2>
    >>> filter_disallowed_tags("<script>alert(1)</script>")
    '&lt;script>alert(1)</script>'

Installation:
    pip install escapade
"""

from collections.abc import Iterable

from escapade.classifiers.html import (
    BLOCK_LEVEL_TAGS,
    HtmlBlockType,
    classify_block_start,
    is_block_end,
    is_html_block_start,
)
from escapade.classifiers.table import (
    TableShape,
    TableValidation,
    count_cells,
    extract_table_rows,
    is_gfm_table_row,
    is_separator_row,
    is_table_row_text,
    is_valid_table,
    validate_table,
    validate_table_structure,
)
from escapade.config import (
    MarkdownConfig,
    get_markdown_config,
    markdown_config_context,
    reset_markdown_config,
    set_markdown_config,
)
from escapade.errors import (
    ConfigurationError,
    EscapadeError,
    ExtensionError,
    ParseError,
    SerializationError,
)
from escapade.extensions import (
    BUILTIN_EXTENSIONS,
    Capability,
    Extension,
    get_extension,
    register_extension,
)
from escapade.nodes import Mark, Node
from escapade.parser import DEFAULT_TOKENS, MarkdownParser, TokenSpec
from escapade.patterns import DEFAULT_ESCAPE_CACHE, EscapeCache, EscapePattern
from escapade.processing import (
    DISALLOWED_TAGS,
    TextPass,
    TextProcessingPlugin,
    compose_plugins,
    create_pattern_processor,
    create_table_context_escaper,
    create_table_row_processor,
    create_tagfilter_processor,
    create_text_processor,
    default_text_processing,
    filter_disallowed_tags,
    get_preset,
    unescape_table_context,
)
from escapade.scanners import (
    BlockSpan,
    HtmlBlockRange,
    TableRegion,
    block_types,
    blocks_of_type,
    find_html_blocks,
    find_table_regions,
    is_range_in_html_block,
    line_in_html_block,
    split_blocks,
)
from escapade.schema import DEFAULT_SCHEMA, MarkSpec, NodeSpec, Schema
from escapade.serializer import MarkdownSerializer, MarkRule, SerializerState, safe_serialize
from escapade.styling import (
    Decoration,
    PatternNodeStyler,
    collect_decorations,
    html_literal_styler,
    table_row_styler,
)
from escapade.system import MarkdownSystem, create_markdown_system

__version__ = "0.3.0"


def round_trip(
    source: str,
    *,
    extensions: Iterable[Extension | str] = (),
    text_processing: TextProcessingPlugin | None = None,
) -> str:
    """Parse Markdown and serialize it back through a fresh system.

    Builds a new system per call; keep a MarkdownSystem around when
    converting many documents.

    Args:
        source: Markdown source text
        extensions: Extension descriptors or registered names
        text_processing: Plugin replacing the default pass chain

    Returns:
        Serialized Markdown
    """
    system = create_markdown_system(extensions, text_processing=text_processing)
    return system.round_trip(source)


__all__ = [  # noqa: RUF022 — grouped by category for maintainability
    # Version
    "__version__",
    # Core API
    "create_markdown_system",
    "MarkdownSystem",
    "round_trip",
    # Configuration
    "MarkdownConfig",
    "get_markdown_config",
    "markdown_config_context",
    "reset_markdown_config",
    "set_markdown_config",
    # Errors
    "ConfigurationError",
    "EscapadeError",
    "ExtensionError",
    "ParseError",
    "SerializationError",
    # Document tree
    "DEFAULT_SCHEMA",
    "Mark",
    "MarkSpec",
    "Node",
    "NodeSpec",
    "Schema",
    # Parsing and serialization
    "DEFAULT_TOKENS",
    "MarkRule",
    "MarkdownParser",
    "MarkdownSerializer",
    "SerializerState",
    "TokenSpec",
    "safe_serialize",
    # Extensions
    "BUILTIN_EXTENSIONS",
    "Capability",
    "Extension",
    "get_extension",
    "register_extension",
    # Escape patterns
    "DEFAULT_ESCAPE_CACHE",
    "EscapeCache",
    "EscapePattern",
    # HTML blocks
    "BLOCK_LEVEL_TAGS",
    "HtmlBlockRange",
    "HtmlBlockType",
    "classify_block_start",
    "find_html_blocks",
    "is_block_end",
    "is_html_block_start",
    "is_range_in_html_block",
    "line_in_html_block",
    # Tables
    "TableRegion",
    "TableShape",
    "TableValidation",
    "count_cells",
    "extract_table_rows",
    "find_table_regions",
    "is_gfm_table_row",
    "is_separator_row",
    "is_table_row_text",
    "is_valid_table",
    "validate_table",
    "validate_table_structure",
    # Text processing
    "DISALLOWED_TAGS",
    "TextPass",
    "TextProcessingPlugin",
    "compose_plugins",
    "create_pattern_processor",
    "create_table_context_escaper",
    "create_table_row_processor",
    "create_tagfilter_processor",
    "create_text_processor",
    "default_text_processing",
    "filter_disallowed_tags",
    "get_preset",
    "unescape_table_context",
    # Block splitting
    "BlockSpan",
    "block_types",
    "blocks_of_type",
    "split_blocks",
    # Styling
    "Decoration",
    "PatternNodeStyler",
    "collect_decorations",
    "html_literal_styler",
    "table_row_styler",
]
