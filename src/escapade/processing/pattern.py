r"""Pattern-conditional unescaping.

The serializer escapes Markdown punctuation everywhere. Some lines, most
often hand-typed table rows that the parser kept as paragraph text, read
better with certain escapes removed. A pattern processor does that per line:

1. Characters in ``global_unescape_chars`` are unescaped in the whole text.
2. On each line matching ``pattern``, characters in ``unescape_chars`` are
   unescaped in single form (``\X`` to ``X``), then in double form
   (``\\X`` to ``\X``), then ``custom_replacements`` are applied in order.

Lines that do not match are left alone.

Example:
    >>> plugin = create_pattern_processor(r"^\|", unescape_chars=("|", "*"))
    >>> plugin.text_pass("| a \\* b |\nprose \\*")
    '| a * b |\nprose \\*'
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from typing import TypeAlias

from escapade.classifiers.table import is_table_row_text
from escapade.errors import ConfigurationError
from escapade.patterns import DEFAULT_ESCAPE_CACHE, EscapeCache, PatternLike, safe_pattern_tester
from escapade.processing.base import CombinedPlugin, PassPlugin, TextPass

TABLE_ROW_JOIN_PASS = "table_row_joining"

Replacement: TypeAlias = tuple[str | re.Pattern[str], str | Callable[[re.Match[str]], str]]

# A pipe row ending in a hard-break backslash, continued on the next line
_SOFT_BREAK_ROW = re.compile(r"(\|[^|\n]*)\\\n([^|\n]*\|)")
# Two pipe rows separated by a blank line
_BLANK_BETWEEN_ROWS = re.compile(r"(\|.*\|[ \t]*)\n\n(\|.*\|[ \t]*)")


def compile_replacements(
    replacements: Sequence[Replacement],
) -> tuple[tuple[re.Pattern[str], str | Callable[[re.Match[str]], str]], ...]:
    compiled = []
    for source, target in replacements:
        if isinstance(source, str):
            source = re.compile(source)
        compiled.append((source, target))
    return tuple(compiled)


def create_pattern_processor(
    pattern: PatternLike | None,
    *,
    unescape_chars: Sequence[str] = ("|",),
    custom_replacements: Sequence[Replacement] = (),
    global_unescape_chars: Sequence[str] = (),
    enabled: bool = True,
    name: str = "pattern_text_processing",
    cache: EscapeCache | None = None,
) -> PassPlugin:
    """Create a plugin that unescapes characters on lines matching pattern.

    Args:
        pattern: Regex source, compiled regex, or line predicate
        unescape_chars: Characters unescaped on matching lines
        custom_replacements: ``(from, to)`` pairs applied to matching lines;
            a string ``from`` is a regular expression
        global_unescape_chars: Characters unescaped on every line
        enabled: When False the plugin leaves serializers unchanged
        name: Plugin name and duplicate-pass guard key
        cache: Escape pattern cache (default: DEFAULT_ESCAPE_CACHE)

    Returns:
        PassPlugin carrying the processing pass

    Raises:
        ConfigurationError: If pattern is missing
    """
    if pattern is None or (isinstance(pattern, str) and not pattern):
        raise ConfigurationError("'pattern' option is required", option="pattern")

    if cache is None:
        cache = DEFAULT_ESCAPE_CACHE
    matches = safe_pattern_tester(pattern)
    global_patterns = cache.get_all(tuple(global_unescape_chars))
    line_patterns = cache.get_all(tuple(unescape_chars))
    replacements = compile_replacements(custom_replacements)

    def process(text: str) -> str:
        for escape in global_patterns:
            text = escape.unescape_single(text)

        lines = text.split("\n")
        for index, line in enumerate(lines):
            if not matches(line):
                continue
            for escape in line_patterns:
                line = escape.unescape_double(escape.unescape_single(line))
            for source, target in replacements:
                line = source.sub(target, line)
            lines[index] = line
        return "\n".join(lines)

    return PassPlugin(name, TextPass(name, process), enabled)


def join_split_table_rows(text: str) -> str:
    """Rejoin table rows the serializer split into separate paragraphs.

    A row continued after a hard-break backslash is joined with a newline,
    and blank lines between consecutive pipe rows collapse to a single
    newline, repeatedly until nothing changes.
    """
    text = _SOFT_BREAK_ROW.sub(r"\1\n\2", text)
    while True:
        joined = _BLANK_BETWEEN_ROWS.sub(r"\1\n\2", text)
        if joined == text:
            return text
        text = joined


def create_table_row_joiner() -> PassPlugin:
    """Create the plugin that runs join_split_table_rows after serializing."""
    return PassPlugin(TABLE_ROW_JOIN_PASS, TextPass(TABLE_ROW_JOIN_PASS, join_split_table_rows))


def create_table_row_processor(
    unescape_chars: Sequence[str] = ("|", "*", "_"),
    custom_replacements: Sequence[Replacement] = (),
    *,
    join_rows: bool = True,
) -> PassPlugin | CombinedPlugin:
    """Pattern processor preset for lines that look like table rows.

    Tildes are unescaped everywhere. With ``join_rows`` the result also
    rejoins rows split across paragraphs.
    """
    base = create_pattern_processor(
        is_table_row_text,
        unescape_chars=unescape_chars,
        custom_replacements=custom_replacements,
        global_unescape_chars=("~",),
        name="table_row_text_processing",
    )
    if not join_rows:
        return base
    return CombinedPlugin("table_row_text_processing_with_joins", (base, create_table_row_joiner()))


__all__ = [
    "Replacement",
    "TABLE_ROW_JOIN_PASS",
    "compile_replacements",
    "create_table_row_joiner",
    "create_pattern_processor",
    "create_table_row_processor",
    "join_split_table_rows",
]
