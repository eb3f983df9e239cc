"""Table row splitting.

With tables disabled, markdown-it reads consecutive pipe rows as one
paragraph. This extension adds a core rule, run right after block parsing,
that splits such a paragraph into one paragraph per row, so each row is
its own textblock (and can be styled on its own).

Serializing puts blank lines between those paragraphs; the extension's
text pass joins the rows back together.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from markdown_it import MarkdownIt
from markdown_it.token import Token

from escapade.classifiers.table import is_table_row_text
from escapade.extensions import Extension, register_extension
from escapade.processing.pattern import create_table_row_joiner

if TYPE_CHECKING:
    from markdown_it.rules_core import StateCore

RULE_NAME = "table_row_splitting"


def _row_tokens(
    paragraph_open: Token, inline: Token, paragraph_close: Token, row: str
) -> tuple[Token, Token, Token]:
    opening = Token(
        "paragraph_open",
        "p",
        1,
        map=paragraph_open.map,
        level=paragraph_open.level,
        block=True,
        hidden=paragraph_open.hidden,
    )
    content = Token(
        "inline", "", 0, map=inline.map, level=inline.level, content=row, children=[]
    )
    closing = Token(
        "paragraph_close",
        "p",
        -1,
        level=paragraph_close.level,
        block=True,
        hidden=paragraph_close.hidden,
    )
    return opening, content, closing


def _all_rows(lines: list[str]) -> bool:
    return len(lines) > 1 and all(line.strip() and is_table_row_text(line) for line in lines)


def split_table_row_paragraphs(state: StateCore) -> None:
    """Core rule: split paragraphs made only of pipe rows into one per row."""
    tokens = state.tokens
    result: list[Token] = []
    index = 0
    while index < len(tokens):
        token = tokens[index]
        if (
            token.type == "paragraph_open"
            and index + 2 < len(tokens)
            and tokens[index + 1].type == "inline"
            and tokens[index + 2].type == "paragraph_close"
        ):
            inline = tokens[index + 1]
            lines = inline.content.split("\n")
            if _all_rows(lines):
                for line in lines:
                    result.extend(_row_tokens(token, inline, tokens[index + 2], line.strip()))
                index += 3
                continue
        result.append(token)
        index += 1
    state.tokens = result


def _install_rule(md: MarkdownIt) -> None:
    md.core.ruler.after("block", RULE_NAME, split_table_row_paragraphs)


TABLE_ROW_SPLITTING = register_extension(
    Extension(
        name="table_row_splitting",
        configure_markdown_it=_install_rule,
        text_processing=(create_table_row_joiner(),),
    )
)
