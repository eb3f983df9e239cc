"""Tests for table-context-aware unescaping."""

from hypothesis import given, settings
from hypothesis import strategies as st

from escapade.patterns import EscapeCache
from escapade.processing.table_context import (
    TABLE_CONTEXT_PASS,
    create_table_context_escaper,
    unescape_table_context,
    unescape_table_line,
)


class TestEscapeContainment:
    def test_prose_keeps_escape_table_cell_loses_it(self) -> None:
        markdown = "Regular text with \\* asterisk.\n\n| Table \\* cell |\n| --- |"
        assert unescape_table_context(markdown) == (
            "Regular text with \\* asterisk.\n\n| Table * cell |\n| --- |"
        )

    def test_rows_after_header_are_in_table(self) -> None:
        markdown = "| a | b |\n| - | - |\n| \\_x\\_ | \\~y\\~ |"
        assert unescape_table_context(markdown) == "| a | b |\n| - | - |\n| _x_ | ~y~ |"

    def test_rows_without_delimiter_keep_escapes(self) -> None:
        markdown = "| a \\* | b |\n| c | d |"
        assert unescape_table_context(markdown) == markdown

    def test_prose_with_escaped_pipe(self) -> None:
        markdown = "a \\| b\n| - |"
        assert unescape_table_context(markdown) == markdown

    def test_only_configured_characters(self) -> None:
        markdown = "| a \\* \\_ | b |\n| - | - |"
        assert unescape_table_context(markdown, ("*",)) == "| a * \\_ | b |\n| - | - |"


class TestDoubleEscapes:
    def test_escaped_backslash_before_pipe_stays_escaped(self) -> None:
        markdown = "| a \\\\| b |\n| - |"
        assert unescape_table_context(markdown) == "| a \\| b |\n| - |"

    def test_single_escape_resolves_fully(self) -> None:
        markdown = "| a \\| b |\n| - |"
        assert unescape_table_context(markdown) == "| a | b |\n| - |"

    def test_double_and_single_are_not_conflated(self) -> None:
        assert unescape_table_line("\\\\| \\|", ("|",)) == "\\| |"


class TestCodeIsLeftAlone:
    def test_code_span_in_row_keeps_escapes(self) -> None:
        markdown = "| `a\\*b` | c \\* |\n| - | - |"
        assert unescape_table_context(markdown) == "| `a\\*b` | c * |\n| - | - |"

    def test_double_backtick_span(self) -> None:
        assert unescape_table_line("| ``x \\| y`` | \\| |", ("|",)) == "| ``x \\| y`` | | |"

    def test_table_inside_fence_is_not_a_table(self) -> None:
        markdown = "```\n| a | b |\n| - | - |\n| \\* | x |\n```"
        assert unescape_table_context(markdown) == markdown

    def test_table_after_fence_is_still_unescaped(self) -> None:
        markdown = "```\ncode \\*\n```\n\n| a \\* | b |\n| - | - |"
        assert unescape_table_context(markdown) == "```\ncode \\*\n```\n\n| a * | b |\n| - | - |"


class TestIdempotence:
    @given(markdown=st.text(alphabet="|-: ab*_~\n", max_size=60))
    @settings(max_examples=200)
    def test_text_without_escapes_is_unchanged(self, markdown: str) -> None:
        assert unescape_table_context(markdown) == markdown

    def test_single_escapes_settle_after_one_pass(self) -> None:
        markdown = "| \\* a | \\_b\\_ |\n| --- | --- |\n\nprose \\*"
        once = unescape_table_context(markdown)
        assert unescape_table_context(once) == once


class TestEscaperPlugin:
    def test_plugin_name(self) -> None:
        assert create_table_context_escaper().name == TABLE_CONTEXT_PASS

    def test_injected_cache_is_used_when_processing(self) -> None:
        cache = EscapeCache()
        plugin = create_table_context_escaper(("|",), cache=cache)
        assert plugin.text_pass("| a \\| b |\n| - |") == "| a | b |\n| - |"
        assert "|" in cache

    def test_text_without_pipes_is_returned_as_is(self) -> None:
        text = "plain \\* prose"
        assert unescape_table_context(text) is text
