"""Strikethrough extension.

Markdown: ~~deleted~~
Tokens: markdown-it's built-in ``s_open``/``s_close``

"""

from __future__ import annotations

from markdown_it import MarkdownIt

from escapade.extensions import Extension, register_extension
from escapade.parser import TokenSpec
from escapade.schema import MarkSpec
from escapade.serializer import MarkRule


def _enable_strikethrough(md: MarkdownIt) -> None:
    md.enable("strikethrough")


STRIKETHROUGH = register_extension(
    Extension(
        name="strikethrough",
        marks=(MarkSpec("strikethrough"),),
        configure_markdown_it=_enable_strikethrough,
        tokens={"s": TokenSpec(mark="strikethrough")},
        to_markdown_marks={
            "strikethrough": MarkRule("~~", "~~", mixable=True, expel_enclosing_whitespace=True)
        },
    )
)
