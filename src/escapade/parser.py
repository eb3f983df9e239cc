"""Markdown to document tree, over markdown-it-py's token stream.

markdown-it-py does the CommonMark work. This module only maps its flat
token stream onto Nodes and Marks using a table of TokenSpecs keyed by
token name (without the ``_open``/``_close`` suffix):

- ``block``: open/close tokens become a node with children
- ``node``: a single token becomes a leaf node
- ``mark``: open/close tokens add and remove a mark on the text between
- ``no_close_token``: the token stands alone; its content is the text
- ``ignore``: the token (and its open/close pair) is skipped

Soft breaks become ``"\\n"`` inside text so a multi-line paragraph keeps
its line shape; the table passes rely on that.

Example:
    >>> from markdown_it import MarkdownIt
    >>> parser = MarkdownParser(DEFAULT_SCHEMA, MarkdownIt("commonmark"), DEFAULT_TOKENS)
    >>> parser.parse("Hello *world*").child(0).child(1).marks[0].type
    'em'
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, TypeAlias

from markdown_it import MarkdownIt
from markdown_it.token import Token

from escapade.errors import ParseError
from escapade.nodes import TEXT, Mark, Node
from escapade.schema import DEFAULT_SCHEMA, Schema

AttrGetter: TypeAlias = Callable[[Token, Sequence[Token], int], dict[str, Any]]
_Handler: TypeAlias = Callable[["_ParseState", Token, Sequence[Token], int], None]


@dataclass(frozen=True, slots=True)
class TokenSpec:
    """How one markdown-it token name maps onto the tree."""

    block: str | None = None
    node: str | None = None
    mark: str | None = None
    attrs: AttrGetter | None = None
    no_close_token: bool = False
    ignore: bool = False


def _is_tight(tokens: Sequence[Token], index: int) -> bool:
    # markdown-it hides paragraph tokens of tight lists
    return index + 2 < len(tokens) and tokens[index + 2].hidden


def _fence_params(token: Token, _tokens: Sequence[Token], _index: int) -> dict[str, Any]:
    return {"params": token.info or ""}


def _link_attrs(token: Token, _tokens: Sequence[Token], _index: int) -> dict[str, Any]:
    return {"href": token.attrGet("href") or "", "title": token.attrGet("title") or None}


def _image_attrs(token: Token, _tokens: Sequence[Token], _index: int) -> dict[str, Any]:
    return {
        "src": token.attrGet("src") or "",
        "title": token.attrGet("title") or None,
        "alt": token.content or None,
    }


DEFAULT_TOKENS: dict[str, TokenSpec] = {
    "blockquote": TokenSpec(block="blockquote"),
    "paragraph": TokenSpec(block="paragraph"),
    "list_item": TokenSpec(block="list_item"),
    "bullet_list": TokenSpec(
        block="bullet_list",
        attrs=lambda tok, toks, i: {"tight": _is_tight(toks, i), "bullet": tok.markup or "*"},
    ),
    "ordered_list": TokenSpec(
        block="ordered_list",
        attrs=lambda tok, toks, i: {
            "order": int(tok.attrGet("start") or 1),
            "tight": _is_tight(toks, i),
        },
    ),
    "heading": TokenSpec(block="heading", attrs=lambda tok, _toks, _i: {"level": int(tok.tag[1:])}),
    "code_block": TokenSpec(block="code_block", no_close_token=True),
    "fence": TokenSpec(block="code_block", attrs=_fence_params, no_close_token=True),
    "hr": TokenSpec(node="horizontal_rule"),
    "image": TokenSpec(node="image", attrs=_image_attrs),
    "hardbreak": TokenSpec(node="hard_break"),
    "em": TokenSpec(mark="em"),
    "strong": TokenSpec(mark="strong"),
    "link": TokenSpec(mark="link", attrs=_link_attrs),
    "code_inline": TokenSpec(mark="code", no_close_token=True),
}


class _OpenNode:
    __slots__ = ("type", "attrs", "content")

    def __init__(self, node_type: str, attrs: dict[str, Any]) -> None:
        self.type = node_type
        self.attrs = attrs
        self.content: list[Node] = []


class _ParseState:
    """Stack of open nodes plus the active mark set."""

    __slots__ = ("schema", "stack", "marks")

    def __init__(self, schema: Schema) -> None:
        self.schema = schema
        self.stack: list[_OpenNode] = [_OpenNode("doc", {})]
        self.marks: tuple[Mark, ...] = ()

    def top(self) -> _OpenNode:
        return self.stack[-1]

    def add_text(self, value: str) -> None:
        if not value:
            return
        content = self.top().content
        if content:
            last = content[-1]
            if last.is_text and last.marks == self.marks:
                content[-1] = Node(TEXT, text=(last.text or "") + value, marks=last.marks)
                return
        content.append(Node(TEXT, text=value, marks=self.marks))

    def open_mark(self, mark: Mark) -> None:
        rank = self.schema.mark_rank(mark.type)
        marks = [m for m in self.marks if m.type != mark.type]
        position = len(marks)
        for index, existing in enumerate(marks):
            if self.schema.mark_rank(existing.type) > rank:
                position = index
                break
        marks.insert(position, mark)
        self.marks = tuple(marks)

    def close_mark(self, mark_type: str) -> None:
        self.marks = tuple(m for m in self.marks if m.type != mark_type)

    def add_node(self, node_type: str, attrs: dict[str, Any]) -> None:
        self.top().content.append(
            Node(node_type, attrs=self.schema.node_attrs(node_type, attrs), marks=self.marks)
        )

    def open_node(self, node_type: str, attrs: dict[str, Any]) -> None:
        self.stack.append(_OpenNode(node_type, self.schema.node_attrs(node_type, attrs)))

    def close_node(self) -> Node:
        self.marks = ()
        opened = self.stack.pop()
        node = Node(opened.type, children=tuple(opened.content), attrs=opened.attrs)
        if self.stack:
            self.top().content.append(node)
        return node


def _no_op(_state: _ParseState, _token: Token, _tokens: Sequence[Token], _index: int) -> None:
    return None


def _strip_trailing_newline(value: str) -> str:
    return value[:-1] if value.endswith("\n") else value


class MarkdownParser:
    """Parse Markdown text into a document tree.

    Args:
        schema: Node and mark specs the tree must use
        md: Configured markdown-it instance
        tokens: Token name to TokenSpec table

    """

    __slots__ = ("schema", "md", "tokens", "_handlers")

    def __init__(
        self,
        schema: Schema = DEFAULT_SCHEMA,
        md: MarkdownIt | None = None,
        tokens: Mapping[str, TokenSpec] = DEFAULT_TOKENS,
    ) -> None:
        self.schema = schema
        self.md = md if md is not None else MarkdownIt("commonmark", {"html": False})
        self.tokens = dict(tokens)
        self._handlers = self._build_handlers()

    def parse(self, text: str) -> Node:
        """Parse Markdown text into a ``doc`` node.

        Raises:
            ParseError: If markdown-it produced a token with no TokenSpec
        """
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        state = _ParseState(self.schema)
        self._parse_tokens(state, self.md.parse(text))
        while len(state.stack) > 1:
            state.close_node()
        return state.close_node()

    def _parse_tokens(self, state: _ParseState, tokens: Sequence[Token]) -> None:
        for index, token in enumerate(tokens):
            handler = self._handlers.get(token.type)
            if handler is None:
                lineno = token.map[0] + 1 if token.map else None
                raise ParseError(
                    f"Token type {token.type!r} not supported by Markdown parser",
                    lineno=lineno,
                    token_type=token.type,
                )
            handler(state, token, tokens, index)

    def _build_handlers(self) -> dict[str, _Handler]:
        handlers: dict[str, _Handler] = {}

        for name, spec in self.tokens.items():
            get_attrs = spec.attrs

            def attrs_of(
                token: Token, tokens: Sequence[Token], index: int, get_attrs=get_attrs
            ) -> dict[str, Any]:
                return get_attrs(token, tokens, index) if get_attrs else {}

            if spec.ignore:
                handlers[name] = _no_op
                handlers[f"{name}_open"] = _no_op
                handlers[f"{name}_close"] = _no_op
            elif spec.block is not None:
                node_type = spec.block
                if spec.no_close_token:

                    def leaf_block(state, token, tokens, index, node_type=node_type, attrs_of=attrs_of):
                        state.open_node(node_type, attrs_of(token, tokens, index))
                        state.add_text(_strip_trailing_newline(token.content))
                        state.close_node()

                    handlers[name] = leaf_block
                else:

                    def open_block(state, token, tokens, index, node_type=node_type, attrs_of=attrs_of):
                        state.open_node(node_type, attrs_of(token, tokens, index))

                    def close_block(state, _token, _tokens, _index):
                        state.close_node()

                    handlers[f"{name}_open"] = open_block
                    handlers[f"{name}_close"] = close_block
            elif spec.node is not None:
                node_type = spec.node

                def leaf(state, token, tokens, index, node_type=node_type, attrs_of=attrs_of):
                    state.add_node(node_type, attrs_of(token, tokens, index))

                handlers[name] = leaf
            elif spec.mark is not None:
                mark_type = spec.mark
                if spec.no_close_token:

                    def marked_text(state, token, tokens, index, mark_type=mark_type, attrs_of=attrs_of):
                        mark = Mark(
                            mark_type,
                            state.schema.mark_attrs(mark_type, attrs_of(token, tokens, index)),
                        )
                        state.open_mark(mark)
                        state.add_text(token.content)
                        state.close_mark(mark_type)

                    handlers[name] = marked_text
                else:

                    def open_mark(state, token, tokens, index, mark_type=mark_type, attrs_of=attrs_of):
                        state.open_mark(
                            Mark(
                                mark_type,
                                state.schema.mark_attrs(mark_type, attrs_of(token, tokens, index)),
                            )
                        )

                    def close_mark(state, _token, _tokens, _index, mark_type=mark_type):
                        state.close_mark(mark_type)

                    handlers[f"{name}_open"] = open_mark
                    handlers[f"{name}_close"] = close_mark

        def add_text(state, token, _tokens, _index):
            state.add_text(token.content)

        def soft_break(state, _token, _tokens, _index):
            state.add_text("\n")

        def inline(state, token, _tokens, _index):
            self._parse_tokens(state, token.children or [])

        def html_block(state, token, _tokens, _index):
            state.open_node("paragraph", {})
            state.add_text(_strip_trailing_newline(token.content))
            state.close_node()

        handlers.setdefault("text", add_text)
        handlers.setdefault("text_special", add_text)
        handlers.setdefault("html_inline", add_text)
        handlers.setdefault("html_block", html_block)
        handlers.setdefault("softbreak", soft_break)
        handlers.setdefault("inline", inline)
        return handlers


__all__ = ["DEFAULT_TOKENS", "MarkdownParser", "TokenSpec"]
