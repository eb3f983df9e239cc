"""Node and mark specifications.

A Schema is an ordered set of NodeSpecs and MarkSpecs. Extensions add their
own specs with Schema.extend, which returns a new schema; an existing name
is replaced where it stands so order (and serializer mark nesting) is kept.

"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, TypeVar

# Content expressions of nodes whose children are inline
_INLINE_CONTENT = frozenset({"inline*", "inline+", "text*", "text+"})


@dataclass(frozen=True, slots=True)
class NodeSpec:
    """Specification of one node type.

    Attributes:
        name: Node type name
        content: Content expression, e.g. ``"block+"`` or ``"inline*"``
        group: Group the node belongs to (``"block"`` or ``"inline"``)
        attrs: Attribute defaults
        code: Content is literal code (no inline marks, no escaping)
        atom: Leaf node without editable content

    """

    name: str
    content: str | None = None
    group: str | None = "block"
    attrs: dict[str, Any] = field(default_factory=dict)
    code: bool = False
    atom: bool = False

    @property
    def is_inline(self) -> bool:
        return self.group == "inline"

    @property
    def is_textblock(self) -> bool:
        return self.content in _INLINE_CONTENT


@dataclass(frozen=True, slots=True)
class MarkSpec:
    """Specification of one mark type."""

    name: str
    attrs: dict[str, Any] = field(default_factory=dict)
    inclusive: bool = True


S = TypeVar("S", NodeSpec, MarkSpec)


def _merge(existing: tuple[S, ...], added: Iterable[S]) -> tuple[S, ...]:
    specs = list(existing)
    positions = {spec.name: index for index, spec in enumerate(specs)}
    for spec in added:
        if spec.name in positions:
            specs[positions[spec.name]] = spec
        else:
            positions[spec.name] = len(specs)
            specs.append(spec)
    return tuple(specs)


@dataclass(frozen=True, slots=True)
class Schema:
    """Ordered node and mark specs."""

    nodes: tuple[NodeSpec, ...]
    marks: tuple[MarkSpec, ...] = ()

    def node_spec(self, name: str) -> NodeSpec | None:
        for spec in self.nodes:
            if spec.name == name:
                return spec
        return None

    def mark_spec(self, name: str) -> MarkSpec | None:
        for spec in self.marks:
            if spec.name == name:
                return spec
        return None

    def has_node(self, name: str) -> bool:
        return self.node_spec(name) is not None

    def has_mark(self, name: str) -> bool:
        return self.mark_spec(name) is not None

    def is_textblock(self, name: str) -> bool:
        spec = self.node_spec(name)
        return spec is not None and spec.is_textblock

    def node_attrs(self, name: str, given: dict[str, Any] | None = None) -> dict[str, Any]:
        """Attribute defaults of node type name, overridden by given."""
        spec = self.node_spec(name)
        attrs = dict(spec.attrs) if spec else {}
        if given:
            attrs.update(given)
        return attrs

    def mark_attrs(self, name: str, given: dict[str, Any] | None = None) -> dict[str, Any]:
        spec = self.mark_spec(name)
        attrs = dict(spec.attrs) if spec else {}
        if given:
            attrs.update(given)
        return attrs

    def mark_rank(self, name: str) -> int:
        """Position of mark type name; unknown marks sort last."""
        for index, spec in enumerate(self.marks):
            if spec.name == name:
                return index
        return len(self.marks)

    def extend(
        self,
        nodes: Iterable[NodeSpec] = (),
        marks: Iterable[MarkSpec] = (),
    ) -> Schema:
        """Return a schema with nodes and marks added or replaced."""
        return Schema(_merge(self.nodes, nodes), _merge(self.marks, marks))


DEFAULT_SCHEMA = Schema(
    nodes=(
        NodeSpec("doc", content="block+", group=None),
        NodeSpec("paragraph", content="inline*"),
        NodeSpec("blockquote", content="block+"),
        NodeSpec("horizontal_rule", atom=True),
        NodeSpec("heading", content="inline*", attrs={"level": 1}),
        NodeSpec("code_block", content="text*", attrs={"params": ""}, code=True),
        NodeSpec("ordered_list", content="list_item+", attrs={"order": 1, "tight": False}),
        NodeSpec("bullet_list", content="list_item+", attrs={"tight": False}),
        NodeSpec("list_item", content="block+", group=None),
        NodeSpec("text", group="inline"),
        NodeSpec(
            "image", group="inline", attrs={"src": "", "alt": None, "title": None}, atom=True
        ),
        NodeSpec("hard_break", group="inline", atom=True),
    ),
    marks=(
        MarkSpec("em"),
        MarkSpec("strong"),
        MarkSpec("link", attrs={"href": "", "title": None}, inclusive=False),
        MarkSpec("code"),
    ),
)


__all__ = ["DEFAULT_SCHEMA", "MarkSpec", "NodeSpec", "Schema"]
