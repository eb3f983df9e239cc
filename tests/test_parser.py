"""Tests for the markdown-it token stream to document tree mapping."""

import pytest
from markdown_it import MarkdownIt

from escapade.errors import ParseError
from escapade.nodes import Node
from escapade.parser import DEFAULT_TOKENS, MarkdownParser, TokenSpec
from escapade.schema import DEFAULT_SCHEMA


@pytest.fixture
def parser() -> MarkdownParser:
    return MarkdownParser()


def first_block(parser: MarkdownParser, source: str) -> Node:
    return parser.parse(source).child(0)


class TestBlocks:
    def test_paragraph(self, parser: MarkdownParser) -> None:
        tree = parser.parse("Hello world")
        assert tree.type == "doc"
        assert tree.child(0).type == "paragraph"
        assert tree.child(0).text_content == "Hello world"

    @pytest.mark.parametrize("source,level", [("# One", 1), ("## Two", 2), ("###### Six", 6)])
    def test_heading_level(self, parser: MarkdownParser, source: str, level: int) -> None:
        heading = first_block(parser, source)
        assert heading.type == "heading"
        assert heading.attrs["level"] == level

    def test_fenced_code(self, parser: MarkdownParser) -> None:
        code = first_block(parser, "```py\nprint(1)\n```")
        assert code.type == "code_block"
        assert code.attrs["params"] == "py"
        assert code.text_content == "print(1)"

    def test_indented_code(self, parser: MarkdownParser) -> None:
        code = first_block(parser, "    x = 1")
        assert code.type == "code_block"
        assert code.attrs["params"] == ""
        assert code.text_content == "x = 1"

    def test_blockquote(self, parser: MarkdownParser) -> None:
        quote = first_block(parser, "> quoted")
        assert quote.type == "blockquote"
        assert quote.child(0).type == "paragraph"

    def test_horizontal_rule(self, parser: MarkdownParser) -> None:
        assert first_block(parser, "---").type == "horizontal_rule"


class TestLists:
    def test_tight_bullet_list(self, parser: MarkdownParser) -> None:
        items = first_block(parser, "- a\n- b")
        assert items.type == "bullet_list"
        assert items.attrs["tight"] is True
        assert items.attrs["bullet"] == "-"
        assert items.child_count == 2
        assert items.child(0).type == "list_item"

    def test_loose_bullet_list(self, parser: MarkdownParser) -> None:
        assert first_block(parser, "- a\n\n- b").attrs["tight"] is False

    def test_ordered_list_start(self, parser: MarkdownParser) -> None:
        items = first_block(parser, "3. x\n4. y")
        assert items.type == "ordered_list"
        assert items.attrs["order"] == 3


class TestInline:
    def test_emphasis_marks(self, parser: MarkdownParser) -> None:
        paragraph = first_block(parser, "Hello *world*")
        assert paragraph.child(0).text == "Hello "
        assert paragraph.child(1).marks[0].type == "em"

    def test_nested_marks_follow_schema_order(self, parser: MarkdownParser) -> None:
        paragraph = first_block(parser, "***both***")
        assert [mark.type for mark in paragraph.child(0).marks] == ["em", "strong"]

    def test_link_attributes(self, parser: MarkdownParser) -> None:
        paragraph = first_block(parser, '[site](http://x.com "Title")')
        link = paragraph.child(0).marks[0]
        assert link.type == "link"
        assert link.attrs == {"href": "http://x.com", "title": "Title"}

    def test_image(self, parser: MarkdownParser) -> None:
        image = first_block(parser, "![alt text](pic.png)").child(0)
        assert image.type == "image"
        assert image.attrs["src"] == "pic.png"
        assert image.attrs["alt"] == "alt text"
        assert image.attrs["title"] is None

    def test_code_span(self, parser: MarkdownParser) -> None:
        code = first_block(parser, "`a*b`").child(0)
        assert code.text == "a*b"
        assert code.has_mark("code")

    def test_hard_break(self, parser: MarkdownParser) -> None:
        paragraph = first_block(parser, "a\\\nb")
        assert [child.type for child in paragraph.children] == ["text", "hard_break", "text"]

    def test_soft_break_keeps_line_shape(self, parser: MarkdownParser) -> None:
        paragraph = first_block(parser, "line one\nline two")
        assert paragraph.child_count == 1
        assert paragraph.child(0).text == "line one\nline two"

    def test_backslash_escapes_become_plain_text(self, parser: MarkdownParser) -> None:
        paragraph = first_block(parser, "a \\* b \\| c")
        assert paragraph.child_count == 1
        assert paragraph.child(0).text == "a * b | c"


class TestInputNormalisation:
    @pytest.mark.parametrize("source", ["a\r\nb", "a\rb", "a\nb"])
    def test_line_endings(self, parser: MarkdownParser, source: str) -> None:
        assert first_block(parser, source).text_content == "a\nb"

    def test_empty_document(self, parser: MarkdownParser) -> None:
        tree = parser.parse("")
        assert tree.type == "doc"
        assert tree.child_count == 0


class TestHtml:
    def test_html_disabled_reads_as_text(self, parser: MarkdownParser) -> None:
        assert first_block(parser, "<div>x</div>").text_content == "<div>x</div>"

    def test_html_block_becomes_literal_paragraph(self) -> None:
        parser = MarkdownParser(md=MarkdownIt("commonmark", {"html": True}))
        block = first_block(parser, "<div>\nx\n</div>")
        assert block.type == "paragraph"
        assert block.text_content == "<div>\nx\n</div>"

    def test_inline_html_is_text(self) -> None:
        parser = MarkdownParser(md=MarkdownIt("commonmark", {"html": True}))
        assert first_block(parser, "a <em>b</em>").text_content == "a <em>b</em>"


class TestTokenTable:
    def test_unknown_token_raises_parse_error(self) -> None:
        parser = MarkdownParser(md=MarkdownIt("commonmark").enable("table"))
        with pytest.raises(ParseError) as exc_info:
            parser.parse("| a |\n| - |")
        assert exc_info.value.token_type == "table_open"
        assert exc_info.value.lineno == 1
        assert str(exc_info.value).startswith("1: ")

    def test_ignored_tokens(self) -> None:
        tokens = {**DEFAULT_TOKENS, "blockquote": TokenSpec(ignore=True)}
        parser = MarkdownParser(DEFAULT_SCHEMA, tokens=tokens)
        tree = parser.parse("> quoted")
        assert tree.child(0).type == "paragraph"

    def test_custom_attrs_getter(self) -> None:
        tokens = {
            **DEFAULT_TOKENS,
            "heading": TokenSpec(
                block="heading",
                attrs=lambda token, _tokens, _index: {"level": int(token.tag[1:]), "id": "x"},
            ),
        }
        heading = MarkdownParser(tokens=tokens).parse("# T").child(0)
        assert heading.attrs == {"level": 1, "id": "x"}
