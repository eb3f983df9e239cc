"""Post-serialization text processing.

Every transform here runs on the Markdown string a serializer produced,
after the tree has been rendered. Plugins append named passes to a
serializer; the default chain is:

1. table-context escaping (unescape ``| * _ ~`` inside tables only)
2. GFM tagfilter (neutralise disallowed raw HTML)
3. strikethrough delimiters (``\\~\\~`` back to ``~~``), when configured

Usage:
    >>> from escapade.processing import compose_plugins, create_tagfilter_processor
    >>> plugin = compose_plugins(create_tagfilter_processor())
    >>> serializer = plugin.enhance_serializer(serializer)

"""

from __future__ import annotations

import re

from escapade.config import MarkdownConfig, get_markdown_config
from escapade.processing.base import (
    CombinedPlugin,
    PassPlugin,
    TextPass,
    TextProcessingPlugin,
    compose_plugins,
)
from escapade.processing.pattern import (
    create_pattern_processor,
    create_table_row_processor,
    join_split_table_rows,
)
from escapade.processing.presets import PRESETS, create_text_processor, get_preset
from escapade.processing.table_context import (
    create_table_context_escaper,
    unescape_table_context,
)
from escapade.processing.tagfilter import (
    DISALLOWED_TAGS,
    create_tagfilter_processor,
    filter_disallowed_tags,
    filter_disallowed_tags_outside_code,
)

STRIKETHROUGH_PASS = "strikethrough_delimiters"

_ESCAPED_STRIKE_DELIMITER = re.compile(r"\\~\\~")


def unescape_strikethrough_delimiters(text: str) -> str:
    """Turn every escaped ``\\~\\~`` pair back into ``~~``."""
    return _ESCAPED_STRIKE_DELIMITER.sub("~~", text)


def create_strikethrough_unescaper() -> PassPlugin:
    return PassPlugin(
        STRIKETHROUGH_PASS, TextPass(STRIKETHROUGH_PASS, unescape_strikethrough_delimiters)
    )


def default_text_processing(config: MarkdownConfig | None = None) -> CombinedPlugin:
    """Build the default pass chain for config (default: the current config)."""
    if config is None:
        config = get_markdown_config()

    plugins: list[TextProcessingPlugin] = [
        create_table_context_escaper(config.table_unescape_chars),
    ]
    if config.tagfilter_enabled:
        plugins.append(create_tagfilter_processor())
    if config.unescape_strikethrough:
        plugins.append(create_strikethrough_unescaper())
    return compose_plugins(*plugins, name="default_text_processing")


__all__ = [
    "CombinedPlugin",
    "DISALLOWED_TAGS",
    "PRESETS",
    "PassPlugin",
    "STRIKETHROUGH_PASS",
    "TextPass",
    "TextProcessingPlugin",
    "compose_plugins",
    "create_pattern_processor",
    "create_strikethrough_unescaper",
    "create_table_context_escaper",
    "create_table_row_processor",
    "create_tagfilter_processor",
    "create_text_processor",
    "default_text_processing",
    "filter_disallowed_tags",
    "filter_disallowed_tags_outside_code",
    "get_preset",
    "join_split_table_rows",
    "unescape_strikethrough_delimiters",
    "unescape_table_context",
]
