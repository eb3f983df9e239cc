"""Document tree for Escapade.

The tree is schema-typed rather than class-typed: every block and inline is
a Node whose ``type`` names a NodeSpec in the active Schema, so extensions
can add node and mark types without subclassing.

- Text nodes carry ``text`` and ``marks`` and have no children.
- Every other node carries ``children`` and ``attrs``.
- Marks (emphasis, links, strikethrough...) annotate text nodes.

Node Layout:
doc
├── paragraph
│   ├── text "Hello "
│   └── text "world" [strong]
└── bullet_list
    └── list_item
        └── paragraph

Thread Safety:
All nodes and marks are frozen and safe to share across threads.

"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

TEXT = "text"


@dataclass(frozen=True, slots=True)
class Mark:
    """Inline annotation on a text node.

    Markdown: *x* is ``Mark("em")``, [x](u) is ``Mark("link", {"href": "u"})``

    """

    type: str
    attrs: dict[str, Any] = field(default_factory=dict)

    def same_as(self, other: Mark) -> bool:
        return self.type == other.type and self.attrs == other.attrs


@dataclass(frozen=True, slots=True)
class Node:
    """A block, inline or text node in the document tree."""

    type: str
    children: tuple[Node, ...] = ()
    text: str | None = None
    attrs: dict[str, Any] = field(default_factory=dict)
    marks: tuple[Mark, ...] = ()

    @property
    def is_text(self) -> bool:
        return self.type == TEXT

    @property
    def child_count(self) -> int:
        return len(self.children)

    @property
    def text_content(self) -> str:
        """Concatenated text of this node and all its descendants."""
        if self.is_text:
            return self.text or ""
        return "".join(child.text_content for child in self.children)

    def has_mark(self, mark_type: str) -> bool:
        return any(mark.type == mark_type for mark in self.marks)

    def descendants(self) -> Iterator[tuple[Node, tuple[int, ...]]]:
        """Yield every node below this one with its child-index path, depth first."""
        stack: list[tuple[Node, tuple[int, ...]]] = [
            (child, (index,)) for index, child in reversed(list(enumerate(self.children)))
        ]
        while stack:
            node, path = stack.pop()
            yield node, path
            stack.extend(
                (child, (*path, index))
                for index, child in reversed(list(enumerate(node.children)))
            )

    def child(self, index: int) -> Node:
        return self.children[index]


def text(value: str, marks: tuple[Mark, ...] = ()) -> Node:
    """Create a text node."""
    return Node(TEXT, text=value, marks=marks)


def block(node_type: str, *children: Node, **attrs: Any) -> Node:
    """Create a non-text node from children and keyword attrs."""
    return Node(node_type, children=children, attrs=attrs)


def doc(*children: Node) -> Node:
    """Create a document node."""
    return Node("doc", children=children)


__all__ = ["Mark", "Node", "TEXT", "block", "doc", "text"]
