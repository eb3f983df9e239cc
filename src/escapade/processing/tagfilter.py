"""GFM disallowed raw HTML filter (tagfilter extension).

Opening tags of nine elements are neutralised by replacing their leading
``<`` with ``&lt;``. Matching is case-insensitive, attributes and a
self-closing slash are kept, and closing tags are left alone.

Replacement repeats until no disallowed opening tag remains. A single
pass can leave one behind when it sits inside the attribute text of
another (``<script a<script>``), and the filter must be idempotent.

The serializer pass skips code: ``<script>`` in a fenced block or a code
span is sample code, written verbatim and rendered escaped anyway.

Example:
    >>> filter_disallowed_tags('<SCRIPT src="x.js"></SCRIPT>')
    '&lt;SCRIPT src="x.js"></SCRIPT>'
"""

from __future__ import annotations

import re

from escapade.processing.base import PassPlugin, TextPass
from escapade.scanners.code import map_outside_code

DISALLOWED_TAGS: tuple[str, ...] = (
    "title",
    "textarea",
    "style",
    "xmp",
    "iframe",
    "noembed",
    "noframes",
    "script",
    "plaintext",
)

TAGFILTER_PASS = "tagfilter_text_processing"

_DISALLOWED_OPEN_TAG = re.compile(
    rf"<({'|'.join(DISALLOWED_TAGS)})((?:\s[^>]*)?)(/?)>",
    re.IGNORECASE,
)


def filter_disallowed_tags(text: str) -> str:
    """Escape the opening bracket of every disallowed tag in text."""
    if "<" not in text:
        return text
    while True:
        text, count = _DISALLOWED_OPEN_TAG.subn(r"&lt;\1\2\3>", text)
        if not count:
            return text


def filter_disallowed_tags_outside_code(markdown: str) -> str:
    """Filter disallowed tags everywhere except fenced code and code spans."""
    if "<" not in markdown:
        return markdown
    return map_outside_code(markdown, filter_disallowed_tags)


def create_tagfilter_processor() -> PassPlugin:
    """Create the plugin that filters serialized Markdown, skipping code."""
    return PassPlugin(
        TAGFILTER_PASS, TextPass(TAGFILTER_PASS, filter_disallowed_tags_outside_code)
    )


__all__ = [
    "DISALLOWED_TAGS",
    "TAGFILTER_PASS",
    "create_tagfilter_processor",
    "filter_disallowed_tags",
    "filter_disallowed_tags_outside_code",
]
