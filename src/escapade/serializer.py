r"""Document tree to Markdown.

Rendering is driven by two rule tables:

- node rules: ``fn(state, node, parent, index)`` write a node's Markdown
- mark rules: MarkRule with ``open``/``close`` strings or callables

SerializerState tracks the output, the current block prefix (``"> "``
inside quotes, list indentation inside items), and pending block closes,
so rules only ever say what to write, never how blocks are separated.

After rendering, the serializer runs its text passes in order. Passes are
the seam for post-processing: ``with_pass`` returns a new serializer with
one more pass and shares the rule tables, so enhancing a serializer never
changes one already in use.

Text escaping:
    ``esc`` backslash-escapes `` ` * \ ~ [ ] _ `` everywhere (``_`` inside a
    word is left alone) and ``# - + >``, ``N.``, ``N)`` and ``=`` underlines at
    the start of a line, including a line that follows a hard or soft break.
    ``|`` is never escaped; pipes only matter in tables, and the table
    passes decide what a table is.

Example:
    >>> from escapade.nodes import doc, block, text
    >>> serializer = MarkdownSerializer(DEFAULT_NODE_RULES, DEFAULT_MARK_RULES)
    >>> serializer.serialize(doc(block("paragraph", text("a*b"))))
    'a\\*b'
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from escapade.errors import SerializationError
from escapade.nodes import Mark, Node
from escapade.processing.base import TextPass
from escapade.utils.logger import get_logger, log_pass_result

logger = get_logger(__name__)

NodeRule: TypeAlias = Callable[["SerializerState", Node, Node, int], None]
MarkString: TypeAlias = str | Callable[["SerializerState", Mark, Node, int], str]

_ESCAPE_ANYWHERE = re.compile(r"[`*\\~\[\]_]")
_LINE_START_MARKER = re.compile(r"^(\+[ ]|[\-*>])")
_LINE_START_HEADING = re.compile(r"^(\s*)(#{1,6})(\s|$)")
_LINE_START_ORDERED = re.compile(r"^(\s*\d+)([.)])(\s|$)")
_LINE_START_SETEXT = re.compile(r"^(\s*)(=+\s*)$")
_AT_BLANK = re.compile(r"(?:^|\n)$")
_BACKTICKS = re.compile(r"`+")
_FENCE_RUN = re.compile(r"`{3,}", re.MULTILINE)
_LEADING_SPACE = re.compile(r"^(\s*)(.*)$", re.DOTALL)
_TRAILING_SPACE = re.compile(r"^(.*?)(\s*)$", re.DOTALL)
_PLAIN_URL = re.compile(r"^\w+:")
_WORD_CHAR = re.compile(r"\w")


@dataclass(frozen=True, slots=True)
class MarkRule:
    """How a mark opens and closes in Markdown.

    Attributes:
        open: Opening delimiter or ``fn(state, mark, parent, index)``
        close: Closing delimiter or ``fn(state, mark, parent, index)``
        mixable: May be reordered against other mixable marks (``*`` and
            ``**`` can close in either order)
        expel_enclosing_whitespace: Move leading/trailing whitespace of the
            marked text outside the delimiters
        escape: Escape the marked text (False for code spans)

    """

    open: MarkString
    close: MarkString
    mixable: bool = False
    expel_enclosing_whitespace: bool = False
    escape: bool = True


class SerializerState:
    """Output buffer and block context for one serialize call."""

    def __init__(self, nodes: Mapping[str, NodeRule], marks: Mapping[str, MarkRule]) -> None:
        self.nodes = nodes
        self.marks = marks
        self.delim = ""
        self.out = ""
        self.closed: Node | None = None
        self.in_tight_list = False
        self.in_autolink = False
        self.at_block_start = False

    # -- block bookkeeping --------------------------------------------------

    def flush_close(self, size: int = 2) -> None:
        if self.closed is None:
            return
        if not self.at_blank():
            self.out += "\n"
        if size > 1:
            delim_min = self.delim.rstrip()
            for _ in range(1, size):
                self.out += delim_min + "\n"
        self.closed = None

    def wrap_block(
        self, delim: str, first_delim: str | None, node: Node, fn: Callable[[], None]
    ) -> None:
        """Render fn's output with delim prefixed to every line.

        The first line gets first_delim instead, when given.
        """
        old = self.delim
        self.write(first_delim if first_delim is not None else delim)
        self.delim += delim
        fn()
        self.delim = old
        self.close_block(node)

    def at_blank(self) -> bool:
        return _AT_BLANK.search(self.out) is not None

    def ensure_new_line(self) -> None:
        if not self.at_blank():
            self.out += "\n"

    def write(self, content: str | None = None) -> None:
        """Write content, after any pending block close and line prefix."""
        self.flush_close()
        if self.delim and self.at_blank():
            self.out += self.delim
        if content:
            self.out += content

    def close_block(self, node: Node) -> None:
        self.closed = node

    # -- text ---------------------------------------------------------------

    def text(self, text: str, escape: bool = True) -> None:
        """Write text, splitting on newlines so each line gets the prefix."""
        lines = text.split("\n")
        last = len(lines) - 1
        for index, line in enumerate(lines):
            # Checked before write() adds the quote or list prefix
            start_of_line = self.at_block_start or index > 0 or self.at_blank()
            self.write()
            if not escape and line.startswith("[") and re.search(r"(?:^|[^\\])!$", self.out):
                self.out = self.out[:-1] + "\\!"
            if escape:
                line = self.esc(line, start_of_line)
            self.out += line
            if index != last:
                self.out += "\n"

    def esc(self, text: str, start_of_line: bool = False) -> str:
        """Backslash-escape Markdown syntax characters in text."""

        def escape_char(match: re.Match[str]) -> str:
            char = match.group(0)
            pos = match.start()
            if (
                char == "_"
                and 0 < pos < len(text) - 1
                and _WORD_CHAR.match(text[pos - 1])
                and _WORD_CHAR.match(text[pos + 1])
            ):
                return char
            return "\\" + char

        text = _ESCAPE_ANYWHERE.sub(escape_char, text)
        if start_of_line:
            text = _LINE_START_MARKER.sub(r"\\\1", text)
            text = _LINE_START_HEADING.sub(r"\1\\\2\3", text)
            text = _LINE_START_ORDERED.sub(r"\1\\\2\3", text)
            text = _LINE_START_SETEXT.sub(r"\1\\\2", text)
        return text

    def repeat(self, value: str, count: int) -> str:
        return value * count

    def quote(self, value: str) -> str:
        """Wrap value in the first quote style it does not contain."""
        if '"' not in value:
            wrap = '""'
        elif "'" not in value:
            wrap = "''"
        else:
            wrap = "()"
        return wrap[0] + value + wrap[1]

    # -- rendering ----------------------------------------------------------

    def render(self, node: Node, parent: Node, index: int) -> None:
        rule = self.nodes.get(node.type)
        if rule is None:
            raise SerializationError(
                f"Token type {node.type!r} not supported by Markdown renderer",
                node_type=node.type,
            )
        rule(self, node, parent, index)

    def render_content(self, parent: Node) -> None:
        for index, child in enumerate(parent.children):
            self.render(child, parent, index)

    def mark_rule(self, mark_type: str) -> MarkRule:
        rule = self.marks.get(mark_type)
        if rule is None:
            raise SerializationError(
                f"Mark type {mark_type!r} not supported by Markdown renderer",
                node_type=mark_type,
            )
        return rule

    def mark_string(self, mark: Mark, opening: bool, parent: Node, index: int) -> str:
        rule = self.mark_rule(mark.type)
        value = rule.open if opening else rule.close
        return value if isinstance(value, str) else value(self, mark, parent, index)

    def render_inline(self, parent: Node, from_block_start: bool = True) -> None:
        """Render inline children, opening and closing marks as they change."""
        self.at_block_start = from_block_start
        active: list[Mark] = []
        trailing = ""
        count = parent.child_count

        def progress(node: Node | None, index: int) -> None:
            nonlocal active, trailing
            marks = list(node.marks) if node is not None else []

            # A hard break that ends its marks would put the newline inside them
            if node is not None and node.type == "hard_break":
                if index + 1 == count:
                    marks = []
                else:
                    following = parent.child(index + 1)
                    marks = [
                        mark
                        for mark in marks
                        if mark in following.marks
                        and (not following.is_text or (following.text or "").strip())
                    ]

            leading = trailing
            trailing = ""

            if (
                node is not None
                and node.is_text
                and any(
                    self._expels(mark) and mark not in active for mark in marks
                )
            ):
                lead, rest = _LEADING_SPACE.match(node.text or "").groups()
                if lead:
                    leading += lead
                    node = Node(node.type, text=rest, marks=node.marks) if rest else None
                    if node is None:
                        marks = list(active)

            if (
                node is not None
                and node.is_text
                and any(
                    self._expels(mark)
                    and (index == count - 1 or mark not in parent.child(index + 1).marks)
                    for mark in marks
                )
            ):
                rest, trail = _TRAILING_SPACE.match(node.text or "").groups()
                if trail:
                    trailing = trail
                    node = Node(node.type, text=rest, marks=node.marks) if rest else None
                    if node is None:
                        marks = list(active)

            inner = marks[-1] if marks else None
            no_escape = inner is not None and not self.mark_rule(inner.type).escape
            length = len(marks) - (1 if no_escape else 0)

            marks = self._reorder_mixable(marks, active, length)

            keep = 0
            while keep < min(len(active), length) and marks[keep] == active[keep]:
                keep += 1

            while keep < len(active):
                self.text(self.mark_string(active.pop(), False, parent, index), False)

            if leading:
                self.text(leading)

            if node is not None:
                while len(active) < length:
                    add = marks[len(active)]
                    active.append(add)
                    self.text(self.mark_string(add, True, parent, index), False)
                    self.at_block_start = False

                if no_escape and node.is_text and inner is not None:
                    self.text(
                        self.mark_string(inner, True, parent, index)
                        + (node.text or "")
                        + self.mark_string(inner, False, parent, index + 1),
                        False,
                    )
                else:
                    self.render(node, parent, index)
                self.at_block_start = False

        for index, child in enumerate(parent.children):
            progress(child, index)
        progress(None, count)
        self.at_block_start = False

    def _expels(self, mark: Mark) -> bool:
        rule = self.marks.get(mark.type)
        return rule is not None and rule.expel_enclosing_whitespace

    def _mixable(self, mark: Mark) -> bool:
        rule = self.marks.get(mark.type)
        return rule is not None and rule.mixable

    def _reorder_mixable(self, marks: list[Mark], active: list[Mark], length: int) -> list[Mark]:
        """Match the order of mixable marks to the already open ones."""
        for i in range(length):
            mark = marks[i]
            if not self._mixable(mark):
                break
            for j, other in enumerate(active):
                if not self._mixable(other):
                    break
                if mark == other:
                    if i > j:
                        marks = marks[:j] + [mark] + marks[j:i] + marks[i + 1 :]
                    elif j > i:
                        marks = marks[:i] + marks[i + 1 : j] + [mark] + marks[j:]
                    break
        return marks

    def render_list(self, node: Node, delim: str, first_delim: Callable[[int], str]) -> None:
        """Render list items, tight or loose."""
        if self.closed is not None and self.closed.type == node.type:
            self.flush_close(3)
        elif self.in_tight_list:
            self.flush_close(1)

        is_tight = bool(node.attrs.get("tight", False))
        previous_tight = self.in_tight_list
        self.in_tight_list = is_tight
        for index, child in enumerate(node.children):
            if index and is_tight:
                self.flush_close(1)
            self.wrap_block(
                delim, first_delim(index), node, lambda child=child, index=index: self.render(child, node, index)
            )
        self.in_tight_list = previous_tight


# -- default rules ------------------------------------------------------------


def _blockquote(state: SerializerState, node: Node, _parent: Node, _index: int) -> None:
    state.wrap_block("> ", None, node, lambda: state.render_content(node))


def _code_block(state: SerializerState, node: Node, _parent: Node, _index: int) -> None:
    content = node.text_content
    runs = _FENCE_RUN.findall(content)
    fence = (max(runs, key=len) + "`") if runs else "```"
    state.write(fence + (node.attrs.get("params") or "") + "\n")
    state.text(content, False)
    state.write("\n")
    state.write(fence)
    state.close_block(node)


def _heading(state: SerializerState, node: Node, _parent: Node, _index: int) -> None:
    state.write(state.repeat("#", int(node.attrs.get("level", 1))) + " ")
    state.render_inline(node, False)
    state.close_block(node)


def _horizontal_rule(state: SerializerState, node: Node, _parent: Node, _index: int) -> None:
    state.write(node.attrs.get("markup") or "---")
    state.close_block(node)


def _bullet_list(state: SerializerState, node: Node, _parent: Node, _index: int) -> None:
    bullet = node.attrs.get("bullet") or "*"
    state.render_list(node, "  ", lambda _i: bullet + " ")


def _ordered_list(state: SerializerState, node: Node, _parent: Node, _index: int) -> None:
    start = int(node.attrs.get("order") or 1)
    max_width = len(str(start + node.child_count - 1))
    space = state.repeat(" ", max_width + 2)

    def number(i: int) -> str:
        label = str(start + i)
        return state.repeat(" ", max_width - len(label)) + label + ". "

    state.render_list(node, space, number)


def _list_item(state: SerializerState, node: Node, _parent: Node, _index: int) -> None:
    state.render_content(node)


def _paragraph(state: SerializerState, node: Node, _parent: Node, _index: int) -> None:
    state.render_inline(node)
    state.close_block(node)


def _escape_url(url: str) -> str:
    return re.sub(r"[()\"]", r"\\\g<0>", url)


def _image(state: SerializerState, node: Node, _parent: Node, _index: int) -> None:
    title = node.attrs.get("title")
    state.write(
        "!["
        + state.esc(node.attrs.get("alt") or "")
        + "]("
        + re.sub(r"[()]", r"\\\g<0>", node.attrs.get("src") or "")
        + (" " + state.quote(title) if title else "")
        + ")"
    )


def _hard_break(state: SerializerState, node: Node, parent: Node, index: int) -> None:
    for sibling in parent.children[index + 1 :]:
        if sibling.type != node.type:
            state.write("\\\n")
            return


def _text(state: SerializerState, node: Node, _parent: Node, _index: int) -> None:
    state.text(node.text or "", not state.in_autolink)


def is_plain_url(link: Mark, parent: Node, index: int) -> bool:
    """True if the link can be written as an autolink ``<href>``."""
    if link.attrs.get("title") or not _PLAIN_URL.match(link.attrs.get("href") or ""):
        return False
    if index >= parent.child_count:
        return False
    content = parent.child(index)
    if not content.is_text or content.text != link.attrs.get("href"):
        return False
    if not content.marks or content.marks[-1] != link:
        return False
    return index == parent.child_count - 1 or link not in parent.child(index + 1).marks


def link_open(state: SerializerState, mark: Mark, parent: Node, index: int) -> str:
    state.in_autolink = is_plain_url(mark, parent, index)
    return "<" if state.in_autolink else "["


def link_close(state: SerializerState, mark: Mark, _parent: Node, _index: int) -> str:
    in_autolink = state.in_autolink
    state.in_autolink = False
    if in_autolink:
        return ">"
    title = mark.attrs.get("title")
    return (
        "]("
        + _escape_url(mark.attrs.get("href") or "")
        + (" " + state.quote(title) if title else "")
        + ")"
    )


def backticks_for(node: Node, side: int) -> str:
    """Code span delimiter long enough for the backticks inside node."""
    longest = 0
    if node.is_text:
        longest = max((len(run) for run in _BACKTICKS.findall(node.text or "")), default=0)
    result = " `" if longest > 0 and side > 0 else "`"
    result += "`" * longest
    if longest > 0 and side < 0:
        result += " "
    return result


DEFAULT_NODE_RULES: dict[str, NodeRule] = {
    "blockquote": _blockquote,
    "code_block": _code_block,
    "heading": _heading,
    "horizontal_rule": _horizontal_rule,
    "bullet_list": _bullet_list,
    "ordered_list": _ordered_list,
    "list_item": _list_item,
    "paragraph": _paragraph,
    "image": _image,
    "hard_break": _hard_break,
    "text": _text,
}

DEFAULT_MARK_RULES: dict[str, MarkRule] = {
    "em": MarkRule("*", "*", mixable=True, expel_enclosing_whitespace=True),
    "strong": MarkRule("**", "**", mixable=True, expel_enclosing_whitespace=True),
    "link": MarkRule(link_open, link_close),
    "code": MarkRule(
        lambda _state, _mark, parent, index: backticks_for(parent.child(index), -1),
        lambda _state, _mark, parent, index: backticks_for(parent.child(index - 1), 1),
        escape=False,
    ),
}


@dataclass(frozen=True, slots=True)
class MarkdownSerializer:
    """Serialize document trees with rule tables and a pass chain.

    Attributes:
        nodes: Node type to NodeRule
        marks: Mark type to MarkRule
        passes: Text passes run over the rendered output, in order

    """

    nodes: Mapping[str, NodeRule]
    marks: Mapping[str, MarkRule]
    passes: tuple[TextPass, ...] = field(default=())

    def serialize(self, doc: Node) -> str:
        """Render doc to Markdown and run every pass over the result.

        Raises:
            SerializationError: If a node or mark has no rule
        """
        state = SerializerState(self.nodes, self.marks)
        state.render_content(doc)
        out = state.out
        for text_pass in self.passes:
            processed = text_pass(out)
            log_pass_result(logger, text_pass.name, out, processed)
            out = processed
        return out

    @property
    def pass_names(self) -> tuple[str, ...]:
        return tuple(text_pass.name for text_pass in self.passes)

    def has_pass(self, name: str) -> bool:
        return any(text_pass.name == name for text_pass in self.passes)

    def with_pass(self, name: str, fn: Callable[[str], str]) -> MarkdownSerializer:
        """Return a serializer that also runs fn, after the existing passes."""
        text_pass = fn if isinstance(fn, TextPass) and fn.name == name else TextPass(name, fn)
        return MarkdownSerializer(self.nodes, self.marks, (*self.passes, text_pass))

    def with_rules(
        self,
        nodes: Mapping[str, NodeRule] | None = None,
        marks: Mapping[str, MarkRule] | None = None,
    ) -> MarkdownSerializer:
        """Return a serializer with extra or replaced rules and the same passes."""
        return MarkdownSerializer(
            {**self.nodes, **(nodes or {})},
            {**self.marks, **(marks or {})},
            self.passes,
        )


def safe_serialize(serializer: MarkdownSerializer, doc: Node) -> str:
    """Serialize doc, falling back to its plain text content on failure.

    The failure is logged as a warning with the traceback attached.
    """
    try:
        return serializer.serialize(doc)
    except Exception:
        logger.warning("Markdown serialization failed, falling back to text content", exc_info=True)
        return doc.text_content


__all__ = [
    "DEFAULT_MARK_RULES",
    "DEFAULT_NODE_RULES",
    "MarkRule",
    "MarkdownSerializer",
    "SerializerState",
    "backticks_for",
    "is_plain_url",
    "link_close",
    "link_open",
    "safe_serialize",
]
