"""Node styling: which textblocks get which CSS class.

Stylers walk a document tree and report decorations, a child-index path
plus a class name, for textblocks whose text matches a rule. Nothing here
touches a view; an editor or renderer applies the decorations however it
likes.

Built-in stylers:
- table_row_styler: paragraphs that look like pipe rows, with a class that
  says whether the rows form a valid table
- html_literal_styler: paragraphs (optionally headings) whose text would
  start a GFM HTML block

Example:
    >>> from escapade.nodes import block, doc, text
    >>> tree = doc(block("paragraph", text("TODO: write tests")))
    >>> PatternNodeStyler(r"^TODO", "todo").decorations(tree)
    [Decoration(index_path=(0,), css_class='todo')]
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from escapade.classifiers.html import is_html_block_start
from escapade.classifiers.table import is_table_row_text, validate_table_structure
from escapade.errors import ConfigurationError
from escapade.nodes import Node
from escapade.patterns import PatternLike, safe_pattern_tester
from escapade.schema import DEFAULT_SCHEMA, Schema

HTML_LITERAL_CLASS = "escapade-html-literal"


@dataclass(frozen=True, slots=True)
class Decoration:
    """A CSS class for the node at index_path (child indices from the root)."""

    index_path: tuple[int, ...]
    css_class: str


class NodeStyler(Protocol):
    def decorations(self, doc: Node) -> list[Decoration]: ...


class PatternNodeStyler:
    """Decorate textblocks whose text content matches pattern.

    Args:
        pattern: Regex source, compiled regex, or predicate over the text
        class_name: CSS class for matching nodes
        node_types: Node types to check; empty means every textblock
        exclude_types: Node types never decorated
        schema: Schema deciding which node types are textblocks

    Raises:
        ConfigurationError: If pattern or class_name is missing

    """

    __slots__ = ("class_name", "node_types", "exclude_types", "schema", "_matches")

    def __init__(
        self,
        pattern: PatternLike | None,
        class_name: str | None,
        *,
        node_types: Sequence[str] = ("paragraph",),
        exclude_types: Sequence[str] = ("code_block",),
        schema: Schema = DEFAULT_SCHEMA,
    ) -> None:
        if not pattern or not class_name:
            raise ConfigurationError(
                "Both 'pattern' and 'class_name' options are required",
                option="pattern" if not pattern else "class_name",
            )
        self.class_name = class_name
        self.node_types = tuple(node_types)
        self.exclude_types = tuple(exclude_types)
        self.schema = schema
        self._matches = safe_pattern_tester(pattern)

    def matches(self, node: Node) -> bool:
        if self.node_types and node.type not in self.node_types:
            return False
        if node.type in self.exclude_types:
            return False
        return self._matches(node.text_content)

    def decorations(self, doc: Node) -> list[Decoration]:
        return [
            Decoration(path, self.class_name)
            for node, path in doc.descendants()
            if self.schema.is_textblock(node.type) and self.matches(node)
        ]


class TableRowStyler:
    """Decorate pipe-row textblocks as valid or invalid table content."""

    __slots__ = ("schema",)

    def __init__(self, schema: Schema = DEFAULT_SCHEMA) -> None:
        self.schema = schema

    def decorations(self, doc: Node) -> list[Decoration]:
        result = []
        for node, path in doc.descendants():
            if not self.schema.is_textblock(node.type) or node.type == "code_block":
                continue
            text = node.text_content
            if not text or not is_table_row_text(text):
                continue
            result.append(Decoration(path, validate_table_structure(text).css_class))
        return result


def table_row_styler(schema: Schema = DEFAULT_SCHEMA) -> TableRowStyler:
    return TableRowStyler(schema)


def _starts_html_block(text: str) -> bool:
    return is_html_block_start(text.strip())


def html_literal_styler(
    class_name: str = HTML_LITERAL_CLASS,
    include_headings: bool = False,
    schema: Schema = DEFAULT_SCHEMA,
) -> PatternNodeStyler:
    """Styler for paragraphs whose text reads as a raw HTML block."""
    return PatternNodeStyler(
        _starts_html_block,
        class_name,
        node_types=("paragraph", "heading") if include_headings else ("paragraph",),
        schema=schema,
    )


def collect_decorations(doc: Node, *stylers: NodeStyler) -> list[Decoration]:
    """Run every styler over doc; decorations are ordered by path."""
    found = [decoration for styler in stylers for decoration in styler.decorations(doc)]
    return sorted(found, key=lambda decoration: decoration.index_path)


__all__ = [
    "Decoration",
    "HTML_LITERAL_CLASS",
    "NodeStyler",
    "PatternNodeStyler",
    "TableRowStyler",
    "collect_decorations",
    "html_literal_styler",
    "table_row_styler",
]
