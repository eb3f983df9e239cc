"""Markdown system factory.

A MarkdownSystem bundles everything needed for a round trip: the schema,
a parser over a configured markdown-it instance, and a serializer carrying
its text passes. Systems are independent; building one never changes
another, and no state is shared between them besides the escape cache.

Example:
    >>> system = create_markdown_system(["strikethrough"])
    >>> system.round_trip("Some ~~old~~ text")
    'Some ~~old~~ text'

"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from markdown_it import MarkdownIt

from escapade.config import MarkdownConfig, get_markdown_config
from escapade.errors import ConfigurationError, ExtensionError
from escapade.extensions import Capability, Extension, get_extension
from escapade.nodes import Node
from escapade.parser import DEFAULT_TOKENS, MarkdownParser
from escapade.processing import TextProcessingPlugin, default_text_processing
from escapade.schema import DEFAULT_SCHEMA, Schema
from escapade.serializer import (
    DEFAULT_MARK_RULES,
    DEFAULT_NODE_RULES,
    MarkdownSerializer,
    safe_serialize,
)
from escapade.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class MarkdownSystem:
    """A configured parser/serializer pair."""

    schema: Schema
    parser: MarkdownParser
    serializer: MarkdownSerializer
    md: MarkdownIt
    extensions: tuple[Extension, ...]
    config: MarkdownConfig

    def parse(self, text: str) -> Node:
        return self.parser.parse(text)

    def serialize(self, doc: Node) -> str:
        return self.serializer.serialize(doc)

    def safe_serialize(self, doc: Node) -> str:
        return safe_serialize(self.serializer, doc)

    def round_trip(self, text: str) -> str:
        """Parse text and serialize the result."""
        return self.serializer.serialize(self.parser.parse(text))


def _resolve(entry: Extension | str) -> Extension:
    if isinstance(entry, Extension):
        return entry
    if isinstance(entry, str):
        return get_extension(entry)
    raise ExtensionError(repr(entry), f"expected an Extension or a name, got {type(entry).__name__}")


def create_markdown_system(
    extensions: Iterable[Extension | str] = (),
    *,
    text_processing: TextProcessingPlugin | None = None,
    config: MarkdownConfig | None = None,
) -> MarkdownSystem:
    """Build a markdown system.

    Extensions are applied in order; a later extension's specs and rules
    replace an earlier one's of the same name.

    Args:
        extensions: Extension descriptors or registered extension names
        text_processing: Plugin applied to the serializer after extension
            passes; None means the default chain (see MarkdownConfig)
        config: System options (default: the current context's config)

    Returns:
        MarkdownSystem

    Raises:
        ExtensionError: If an entry is not an Extension or a known name
        ConfigurationError: If text_processing is not a text processing plugin
    """
    if config is None:
        config = get_markdown_config()

    resolved = tuple(_resolve(entry) for entry in extensions)

    md = MarkdownIt("commonmark", {"html": config.html_enabled})
    schema = DEFAULT_SCHEMA
    tokens = dict(DEFAULT_TOKENS)
    node_rules = dict(DEFAULT_NODE_RULES)
    mark_rules = dict(DEFAULT_MARK_RULES)
    extension_plugins: list[TextProcessingPlugin] = []

    for extension in resolved:
        caps = extension.capabilities
        if caps & (Capability.NODES | Capability.MARKS):
            schema = schema.extend(extension.nodes, extension.marks)
        if Capability.MARKDOWN_IT in caps and extension.configure_markdown_it is not None:
            extension.configure_markdown_it(md)
        if Capability.PARSER_TOKENS in caps:
            tokens.update(extension.tokens)
        if Capability.SERIALIZER_RULES in caps:
            node_rules.update(extension.to_markdown_nodes)
            mark_rules.update(extension.to_markdown_marks)
        if Capability.TEXT_PASSES in caps:
            extension_plugins.extend(extension.text_processing)
        logger.debug("Applied extension %r (%s)", extension.name, caps)

    serializer = MarkdownSerializer(node_rules, mark_rules)
    for plugin in extension_plugins:
        serializer = plugin.enhance_serializer(serializer)

    if text_processing is None and config.default_passes:
        text_processing = default_text_processing(config)
    if text_processing is not None:
        if not isinstance(text_processing, TextProcessingPlugin):
            raise ConfigurationError(
                f"text_processing must provide name and enhance_serializer, "
                f"got {type(text_processing).__name__}",
                option="text_processing",
            )
        serializer = text_processing.enhance_serializer(serializer)

    logger.debug(
        "Built markdown system: extensions=%s passes=%s",
        [extension.name for extension in resolved],
        serializer.pass_names,
    )

    return MarkdownSystem(
        schema=schema,
        parser=MarkdownParser(schema, md, tokens),
        serializer=serializer,
        md=md,
        extensions=resolved,
        config=config,
    )


__all__ = ["MarkdownSystem", "create_markdown_system"]
