"""Extension system for Escapade.

Extensions add syntax to a markdown system. Each one is an Extension
descriptor; the fields it fills in decide which build steps it takes part
in, summarised by its ``capabilities``:

- NODES / MARKS: schema additions
- MARKDOWN_IT: a hook that configures the markdown-it instance
- PARSER_TOKENS: token name to TokenSpec entries
- SERIALIZER_RULES: node and mark rules for writing Markdown back
- TEXT_PASSES: text processing plugins run before the system's own passes

Built-in extensions:
- strikethrough: ~~deleted~~ syntax
- enhanced_link: links with target/rel, written as ``<a>`` for new tabs
- table_row_splitting: one paragraph per hand-typed table row

Usage:
    >>> from escapade import create_markdown_system
    >>> system = create_markdown_system(["strikethrough", "enhanced_link"])

Thread Safety:
Extensions are frozen and stateless. The registry is filled at import time
and only read afterwards.

"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Flag, auto

from markdown_it import MarkdownIt

from escapade.errors import ExtensionError
from escapade.parser import TokenSpec
from escapade.processing.base import TextProcessingPlugin
from escapade.schema import MarkSpec, NodeSpec
from escapade.serializer import MarkRule, NodeRule

__all__ = [
    "BUILTIN_EXTENSIONS",
    "Capability",
    "Extension",
    "get_extension",
    "register_extension",
]


class Capability(Flag):
    """Build steps an extension takes part in."""

    NONE = 0
    NODES = auto()
    MARKS = auto()
    MARKDOWN_IT = auto()
    PARSER_TOKENS = auto()
    SERIALIZER_RULES = auto()
    TEXT_PASSES = auto()


@dataclass(frozen=True, slots=True)
class Extension:
    """Descriptor of one markdown system extension.

    Attributes:
        name: Registry name
        nodes: Node specs added to (or replacing in) the schema
        marks: Mark specs added to (or replacing in) the schema
        configure_markdown_it: Called once with the system's MarkdownIt
        tokens: Parser token table entries
        to_markdown_nodes: Serializer node rules
        to_markdown_marks: Serializer mark rules
        text_processing: Plugins applied to the serializer before the
            system's default or caller-supplied passes

    """

    name: str
    nodes: tuple[NodeSpec, ...] = ()
    marks: tuple[MarkSpec, ...] = ()
    configure_markdown_it: Callable[[MarkdownIt], object] | None = None
    tokens: Mapping[str, TokenSpec] = field(default_factory=dict)
    to_markdown_nodes: Mapping[str, NodeRule] = field(default_factory=dict)
    to_markdown_marks: Mapping[str, MarkRule] = field(default_factory=dict)
    text_processing: tuple[TextProcessingPlugin, ...] = ()

    @property
    def capabilities(self) -> Capability:
        caps = Capability.NONE
        if self.nodes:
            caps |= Capability.NODES
        if self.marks:
            caps |= Capability.MARKS
        if self.configure_markdown_it is not None:
            caps |= Capability.MARKDOWN_IT
        if self.tokens:
            caps |= Capability.PARSER_TOKENS
        if self.to_markdown_nodes or self.to_markdown_marks:
            caps |= Capability.SERIALIZER_RULES
        if self.text_processing:
            caps |= Capability.TEXT_PASSES
        return caps


# Registry of built-in extensions
BUILTIN_EXTENSIONS: dict[str, Extension] = {}


def register_extension(extension: Extension, *, replace: bool = False) -> Extension:
    """Register an extension under its name.

    Args:
        extension: Extension to register
        replace: Allow replacing an extension of the same name

    Returns:
        The registered extension

    Raises:
        ExtensionError: If the name is taken and replace is False

    """
    if not replace and extension.name in BUILTIN_EXTENSIONS:
        raise ExtensionError(extension.name, "already registered")
    BUILTIN_EXTENSIONS[extension.name] = extension
    return extension


def get_extension(name: str) -> Extension:
    """Get a registered extension by name.

    Raises:
        ExtensionError: If the name is not registered

    """
    if name not in BUILTIN_EXTENSIONS:
        available = ", ".join(sorted(BUILTIN_EXTENSIONS))
        raise ExtensionError(name, f"unknown extension. Available: {available}")
    return BUILTIN_EXTENSIONS[name]


# Import built-in extensions to register them
from escapade.extensions.enhanced_link import ENHANCED_LINK  # noqa: E402
from escapade.extensions.strikethrough import STRIKETHROUGH  # noqa: E402
from escapade.extensions.table_rows import TABLE_ROW_SPLITTING  # noqa: E402

__all__ += [
    "ENHANCED_LINK",
    "STRIKETHROUGH",
    "TABLE_ROW_SPLITTING",
]
