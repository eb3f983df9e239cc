"""GFM HTML block classification.

Implements the start and end conditions of the seven GFM HTML block types
(GFM 4.6) for single lines of Markdown text. Used both by the range scanner
and by styling code that highlights raw HTML paragraphs.

Classification order matters: some start conditions are prefixes of others
(``<![CDATA[`` would otherwise look like a declaration), so types are tried
in their numeric order and the first match wins.

Declarations (type 4) are matched case-insensitively, as in current
CommonMark: ``<!doctype html>`` and ``<!DOCTYPE html>`` both start a block.
"""

from __future__ import annotations

import re
from enum import IntEnum


class HtmlBlockType(IntEnum):
    """GFM HTML block types, numbered as in GFM section 4.6."""

    SCRIPT_STYLE_PRE = 1
    COMMENT = 2
    PROCESSING_INSTRUCTION = 3
    DECLARATION = 4
    CDATA = 5
    BLOCK_LEVEL = 6
    OTHER = 7


# Type 6 tag names (case-insensitive)
BLOCK_LEVEL_TAGS = frozenset(
    {
        "address",
        "article",
        "aside",
        "base",
        "basefont",
        "blockquote",
        "body",
        "caption",
        "center",
        "col",
        "colgroup",
        "dd",
        "details",
        "dialog",
        "dir",
        "div",
        "dl",
        "dt",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "form",
        "frame",
        "frameset",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "head",
        "header",
        "hr",
        "html",
        "iframe",
        "legend",
        "li",
        "link",
        "main",
        "menu",
        "menuitem",
        "nav",
        "noframes",
        "ol",
        "optgroup",
        "option",
        "p",
        "param",
        "section",
        "source",
        "summary",
        "table",
        "tbody",
        "td",
        "tfoot",
        "th",
        "thead",
        "title",
        "tr",
        "track",
        "ul",
    }
)

# Type 1 tag names; their blocks end at the matching closing tag
SCRIPT_STYLE_PRE_TAGS = frozenset({"script", "pre", "style"})

# More than three columns of indentation make an indented code block
MAX_INDENT = 3

_TYPE1_START = re.compile(r"^<(?:script|pre|style)(?:\s|>|$)", re.IGNORECASE)
_TYPE1_END = re.compile(r"</(?:script|pre|style)>", re.IGNORECASE)
_DECLARATION_START = re.compile(r"^<![A-Za-z]")
_TAG_NAME = re.compile(r"^</?([A-Za-z][A-Za-z0-9-]*)")
_COMPLETE_BLOCK_TAG = re.compile(r"^</?[A-Za-z][A-Za-z0-9-]*(?:\s[^>]*>|/?>)")
_COMPLETE_OPEN_TAG = re.compile(r"^<[A-Za-z][\w-]*(?:\s[^>]*)?/?>$")
_COMPLETE_CLOSE_TAG = re.compile(r"^</[A-Za-z][\w-]*>$")


def _leading_indent(line: str) -> int | None:
    """Count leading spaces; None when a tab appears before content."""
    indent = 0
    for char in line:
        if char == " ":
            indent += 1
        elif char == "\t":
            return None
        else:
            break
    return indent


def extract_tag_name(content: str) -> str | None:
    """Extract the tag name from an opening or closing tag at line start.

    Args:
        content: Line content starting with ``<``

    Returns:
        Tag name as written, or None if content does not start with a tag.
    """
    match = _TAG_NAME.match(content)
    return match.group(1) if match else None


def classify_block_start(line: str) -> HtmlBlockType | None:
    """Determine which HTML block type, if any, the line starts.

    Args:
        line: One line of Markdown, leading indentation included

    Returns:
        HtmlBlockType, or None if the line does not start an HTML block.
    """
    indent = _leading_indent(line)
    if indent is None or indent > MAX_INDENT:
        return None

    content = line.strip()
    if not content or content[0] != "<":
        return None

    # Type 1: <script, <pre, <style
    if _TYPE1_START.match(content):
        return HtmlBlockType.SCRIPT_STYLE_PRE

    # Type 2: <!--
    if content.startswith("<!--"):
        return HtmlBlockType.COMMENT

    # Type 3: <?
    if content.startswith("<?"):
        return HtmlBlockType.PROCESSING_INSTRUCTION

    # Type 4: <! followed by a letter
    if _DECLARATION_START.match(content):
        return HtmlBlockType.DECLARATION

    # Type 5: <![CDATA[
    if content.startswith("<![CDATA["):
        return HtmlBlockType.CDATA

    # Type 6: complete open/close tag of a block-level element
    tag_name = extract_tag_name(content)
    if (
        tag_name is not None
        and tag_name.lower() in BLOCK_LEVEL_TAGS
        and _COMPLETE_BLOCK_TAG.match(content)
    ):
        return HtmlBlockType.BLOCK_LEVEL

    # Type 7: a single complete tag and nothing else on the line
    if _COMPLETE_OPEN_TAG.match(content) or _COMPLETE_CLOSE_TAG.match(content):
        return HtmlBlockType.OTHER

    return None


def is_block_end(line: str, block_type: HtmlBlockType | int) -> bool:
    """Check whether line satisfies the end condition of block_type.

    Types 6 and 7 end at a blank line, which the scanner checks itself, so
    this always returns False for them.

    Args:
        line: The line to check
        block_type: Type of the open block

    Returns:
        True if this line closes the block.
    """
    match block_type:
        case HtmlBlockType.SCRIPT_STYLE_PRE:
            return _TYPE1_END.search(line) is not None
        case HtmlBlockType.COMMENT:
            return "-->" in line
        case HtmlBlockType.PROCESSING_INSTRUCTION:
            return "?>" in line
        case HtmlBlockType.DECLARATION:
            return ">" in line
        case HtmlBlockType.CDATA:
            return "]]>" in line
        case _:
            return False


def is_html_block_start(text: str) -> bool:
    """True if text (typically a paragraph's content) starts an HTML block."""
    if not text.strip():
        return False
    first_line = text.split("\n", 1)[0]
    return classify_block_start(first_line) is not None


__all__ = [
    "BLOCK_LEVEL_TAGS",
    "HtmlBlockType",
    "MAX_INDENT",
    "SCRIPT_STYLE_PRE_TAGS",
    "classify_block_start",
    "extract_tag_name",
    "is_block_end",
    "is_html_block_start",
]
