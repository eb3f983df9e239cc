"""Tests for the portable block splitter."""

import pytest

from escapade.classifiers.html import HtmlBlockType
from escapade.scanners.blocks import BlockType, block_types, blocks_of_type, split_blocks


class TestBasicBlocks:
    def test_empty(self) -> None:
        assert split_blocks("") == []

    def test_heading_and_paragraph(self) -> None:
        spans = split_blocks("# Title\n\nSome text")
        assert [span.type for span in spans] == [BlockType.HEADING, BlockType.PARAGRAPH]
        assert spans[0].meta == {"level": 1}
        assert spans[1].start_line == 2

    @pytest.mark.parametrize("line,level", [("# a", 1), ("### c", 3), ("###### f", 6)])
    def test_heading_levels(self, line: str, level: int) -> None:
        (span,) = split_blocks(line)
        assert span.meta["level"] == level

    def test_hash_without_space_is_prose(self) -> None:
        assert block_types("#hashtag") == ["paragraph"]

    @pytest.mark.parametrize("line", ["---", "***", "* * *", "___"])
    def test_horizontal_rules(self, line: str) -> None:
        assert block_types(line) == ["horizontal_rule"]

    def test_blank_lines_produce_no_spans(self) -> None:
        assert block_types("\n\n\na\n\n\n") == ["paragraph"]


class TestCodeBlocks:
    def test_fenced_with_language(self) -> None:
        spans = split_blocks("```python\nprint(1)\n```\nafter")
        assert spans[0].type == BlockType.CODE_BLOCK
        assert (spans[0].start_line, spans[0].end_line) == (0, 2)
        assert spans[0].meta == {"language": "python", "fenced": True}
        assert spans[1].content == "after"

    def test_fence_hides_other_syntax(self) -> None:
        spans = split_blocks("~~~\n# not a heading\n| a | b |\n~~~")
        assert block_types("~~~\n# not a heading\n| a | b |\n~~~") == ["code_block"]
        assert spans[0].line_count == 4

    def test_unclosed_fence_runs_to_end(self) -> None:
        (span,) = split_blocks("```\ncode\nmore")
        assert span.end_line == 2

    def test_indented_code_drops_trailing_blank_lines(self) -> None:
        spans = split_blocks("para\n\n    code\n    more\n\nafter")
        assert block_types("para\n\n    code\n    more\n\nafter") == [
            "paragraph",
            "code_block",
            "paragraph",
        ]
        code = spans[1]
        assert (code.start_line, code.end_line) == (2, 3)
        assert code.meta == {"fenced": False}

    def test_indented_line_after_paragraph_is_continuation(self) -> None:
        (span,) = split_blocks("text\n    indented continuation")
        assert span.type == BlockType.PARAGRAPH
        assert span.line_count == 2


class TestTables:
    def test_valid_table(self) -> None:
        spans = split_blocks("| a | b |\n| - | - |\n| 1 | 2 |\n\ntext")
        table = spans[0]
        assert table.type == BlockType.TABLE
        assert table.meta == {"valid": True, "row_count": 3, "column_count": 2}
        assert spans[1].start_line == 4

    def test_invalid_table_is_still_a_table_block(self) -> None:
        (table,) = split_blocks("| a | b |\n| x | y |")
        assert table.type == BlockType.TABLE
        assert table.meta["valid"] is False


class TestHtmlBlocks:
    def test_block_level_html(self) -> None:
        spans = split_blocks("<div>\ninside\n\nafter")
        assert spans[0].type == BlockType.HTML_BLOCK
        assert spans[0].content == "<div>\ninside"
        assert spans[0].meta == {"html_type": int(HtmlBlockType.BLOCK_LEVEL)}
        assert spans[1].type == BlockType.PARAGRAPH

    def test_comment_spans_blank_lines(self) -> None:
        spans = split_blocks("<!--\n\nx\n-->\npara")
        assert (spans[0].start_line, spans[0].end_line) == (0, 3)
        assert spans[1].content == "para"


class TestContainers:
    def test_loose_list_stays_one_block(self) -> None:
        spans = split_blocks("- a\n- b\n\n- c\n\npara")
        assert spans[0].type == BlockType.UNORDERED_LIST
        assert spans[0].content == "- a\n- b\n\n- c"
        assert spans[1].content == "para"

    def test_ordered_list(self) -> None:
        assert block_types("1. one\n2. two") == ["ordered_list"]

    def test_list_item_continuation(self) -> None:
        (span,) = split_blocks("- item\n  continued")
        assert span.line_count == 2

    def test_blockquote_with_lazy_line(self) -> None:
        spans = split_blocks("> quote\nlazy\n\ntext")
        assert spans[0].type == BlockType.BLOCKQUOTE
        assert spans[0].end_line == 1
        assert spans[1].type == BlockType.PARAGRAPH


class TestQueries:
    MARKDOWN = "# T\n\n| a | b |\n| - | - |\n\ntext\n\n| c | d |"

    def test_block_types_are_plain_strings(self) -> None:
        assert block_types(self.MARKDOWN) == ["heading", "table", "paragraph", "table"]

    def test_blocks_of_single_type(self) -> None:
        tables = blocks_of_type(self.MARKDOWN, "table")
        assert [span.start_line for span in tables] == [2, 7]

    def test_blocks_of_several_types(self) -> None:
        spans = blocks_of_type(self.MARKDOWN, ["heading", "paragraph"])
        assert [span.type for span in spans] == [BlockType.HEADING, BlockType.PARAGRAPH]
