"""Links with target and rel attributes.

A link opened in a new tab (``target="_blank"``) has no Markdown syntax,
so it is written as raw HTML:

    <a href="https://example.com" rel="noopener noreferrer" target="_blank">text</a>

``rel`` defaults to ``noopener noreferrer`` for such links. Every other
link is written as a regular Markdown link or autolink.

"""

from __future__ import annotations

import html

from escapade.extensions import Extension, register_extension
from escapade.nodes import Mark, Node
from escapade.schema import MarkSpec
from escapade.serializer import MarkRule, SerializerState, link_close, link_open

BLANK_TARGET = "_blank"
DEFAULT_BLANK_REL = "noopener noreferrer"


def _attr(value: str) -> str:
    return html.escape(value, quote=True)


def enhanced_link_open(state: SerializerState, mark: Mark, parent: Node, index: int) -> str:
    if mark.attrs.get("target") != BLANK_TARGET:
        return link_open(state, mark, parent, index)

    href = mark.attrs.get("href") or ""
    rel = mark.attrs.get("rel") or DEFAULT_BLANK_REL
    title = mark.attrs.get("title")
    title_attr = f' title="{_attr(title)}"' if title else ""
    return f'<a href="{_attr(href)}" rel="{_attr(rel)}" target="{BLANK_TARGET}"{title_attr}>'


def enhanced_link_close(state: SerializerState, mark: Mark, parent: Node, index: int) -> str:
    if mark.attrs.get("target") != BLANK_TARGET:
        return link_close(state, mark, parent, index)
    return "</a>"


ENHANCED_LINK = register_extension(
    Extension(
        name="enhanced_link",
        marks=(
            MarkSpec(
                "link",
                attrs={"href": "", "title": None, "target": None, "rel": None},
                inclusive=False,
            ),
        ),
        to_markdown_marks={
            "link": MarkRule(
                enhanced_link_open,
                enhanced_link_close,
                mixable=True,
                expel_enclosing_whitespace=True,
            )
        },
    )
)
