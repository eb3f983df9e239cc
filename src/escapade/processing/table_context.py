r"""Table-context-aware unescaping.

The serializer escapes ``|``, ``*``, ``_`` and ``~`` wherever they appear,
which is right for prose but makes table rows typed as text unreadable.
This pass removes those escapes only on lines that belong to a table:
a strict row directly followed by a delimiter row, and the contiguous rows
after it (see escapade.scanners.table).

Inside a table, for each character:

- ``\\X`` (escaped backslash, then the character) becomes ``\X``
- ``\X`` becomes ``X``

The second rule only runs on the text between matches of the first, so a
``\X`` produced by resolving a double escape is not unescaped again.

Code is never touched: fenced code never forms a table region, and code
spans inside a table row keep their escapes.

Example:
    >>> unescape_table_context("| a \\* b |\n| --- |\nprose \\*", ("*",))
    '| a * b |\n| --- |\nprose \\*'
"""

from __future__ import annotations

from collections.abc import Sequence

from escapade.config import DEFAULT_TABLE_UNESCAPE_CHARS
from escapade.patterns import DEFAULT_ESCAPE_CACHE, EscapeCache
from escapade.processing.base import PassPlugin, TextPass
from escapade.scanners.code import map_outside_code_spans
from escapade.scanners.table import table_line_mask

TABLE_CONTEXT_PASS = "table_context_escaping"


def unescape_table_line(
    line: str, chars: Sequence[str], cache: EscapeCache | None = None
) -> str:
    """Resolve single and double escapes of chars on one table line.

    Code spans on the line are left as written.
    """
    if cache is None:
        cache = DEFAULT_ESCAPE_CACHE
    escapes = cache.get_all(tuple(chars))

    def unescape(text: str) -> str:
        for escape in escapes:
            text = escape.unescape_both(text)
        return text

    return map_outside_code_spans(line, unescape)


def unescape_table_context(
    markdown: str,
    chars: Sequence[str] = DEFAULT_TABLE_UNESCAPE_CHARS,
    cache: EscapeCache | None = None,
) -> str:
    """Unescape chars on table lines only.

    Args:
        markdown: Serialized Markdown
        chars: Characters to unescape inside tables
        cache: Escape pattern cache (default: DEFAULT_ESCAPE_CACHE)

    Returns:
        Markdown with table lines unescaped and everything else untouched
    """
    if not markdown or "|" not in markdown:
        return markdown

    lines = markdown.split("\n")
    mask = table_line_mask(lines)
    if not any(mask):
        return markdown

    return "\n".join(
        unescape_table_line(line, chars, cache) if in_table else line
        for line, in_table in zip(lines, mask, strict=True)
    )


def create_table_context_escaper(
    unescape_chars: Sequence[str] = DEFAULT_TABLE_UNESCAPE_CHARS,
    cache: EscapeCache | None = None,
) -> PassPlugin:
    """Create the plugin that runs unescape_table_context after serializing."""
    chars = tuple(unescape_chars)

    def process(text: str) -> str:
        return unescape_table_context(text, chars, cache)

    return PassPlugin(TABLE_CONTEXT_PASS, TextPass(TABLE_CONTEXT_PASS, process))


__all__ = [
    "TABLE_CONTEXT_PASS",
    "create_table_context_escaper",
    "unescape_table_context",
    "unescape_table_line",
]
