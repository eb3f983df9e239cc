"""Tests for the pattern-conditional unescaping plugin and table row helpers."""

import re

import pytest

from escapade.errors import ConfigurationError
from escapade.patterns import EscapeCache
from escapade.processing.base import CombinedPlugin, PassPlugin
from escapade.processing.pattern import (
    TABLE_ROW_JOIN_PASS,
    create_pattern_processor,
    create_table_row_joiner,
    create_table_row_processor,
    join_split_table_rows,
)
from escapade.serializer import DEFAULT_MARK_RULES, DEFAULT_NODE_RULES, MarkdownSerializer


@pytest.fixture
def serializer() -> MarkdownSerializer:
    return MarkdownSerializer(DEFAULT_NODE_RULES, DEFAULT_MARK_RULES)


class TestCreatePatternProcessor:
    @pytest.mark.parametrize("pattern", [None, ""])
    def test_pattern_is_required(self, pattern) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            create_pattern_processor(pattern)
        assert exc_info.value.option == "pattern"

    def test_only_matching_lines_change(self) -> None:
        plugin = create_pattern_processor(r"^\|", unescape_chars=("|", "*"))
        assert plugin.text_pass("| a \\* b |\nprose \\*") == "| a * b |\nprose \\*"

    @pytest.mark.parametrize(
        ("line", "expected"),
        [
            ("| a \\* b |", "| a * b |"),
            ("| a \\\\* b |", "| a \\* b |"),
            ("| a \\\\\\* b |", "| a \\* b |"),
        ],
    )
    def test_single_then_double_forms(self, line: str, expected: str) -> None:
        plugin = create_pattern_processor(r"^\|", unescape_chars=("*",))
        assert plugin.text_pass(line) == expected

    def test_global_chars_apply_to_every_line(self) -> None:
        plugin = create_pattern_processor(
            r"^\|", unescape_chars=("|",), global_unescape_chars=("~",)
        )
        assert plugin.text_pass("prose \\~ x\n| a \\~ \\| |") == "prose ~ x\n| a ~ | |"

    def test_replacements_run_after_unescaping(self) -> None:
        plugin = create_pattern_processor(
            r"^\|", unescape_chars=("*",), custom_replacements=((r"\*", "STAR"),)
        )
        assert plugin.text_pass("| a \\* |") == "| a STAR |"

    def test_callable_replacement(self) -> None:
        plugin = create_pattern_processor(
            r"^\|",
            custom_replacements=((re.compile(r"(\d+)"), lambda m: str(int(m.group(1)) * 2)),),
        )
        assert plugin.text_pass("| 21 |\n21") == "| 42 |\n21"

    def test_predicate_pattern(self) -> None:
        plugin = create_pattern_processor(lambda line: line.endswith("!"), unescape_chars=("*",))
        assert plugin.text_pass("\\*yes!\n\\*no") == "*yes!\n\\*no"

    def test_injected_cache(self) -> None:
        cache = EscapeCache()
        create_pattern_processor(r"^\|", unescape_chars=("_",), cache=cache)
        assert "_" in cache


class TestPluginBehaviour:
    def test_enhancing_appends_named_pass(self, serializer: MarkdownSerializer) -> None:
        plugin = create_pattern_processor(r"^\|", name="rows")
        enhanced = plugin.enhance_serializer(serializer)
        assert enhanced.pass_names == ("rows",)
        assert serializer.pass_names == ()

    def test_second_application_is_a_no_op(self, serializer: MarkdownSerializer) -> None:
        plugin = create_pattern_processor(r"^\|")
        once = plugin.enhance_serializer(serializer)
        assert plugin.enhance_serializer(once) is once

    def test_disabled_returns_serializer_unchanged(self, serializer: MarkdownSerializer) -> None:
        plugin = create_pattern_processor(r"^\|", enabled=False)
        assert plugin.enhance_serializer(serializer) is serializer


class TestJoinSplitTableRows:
    def test_blank_lines_between_rows_collapse(self) -> None:
        assert join_split_table_rows("| a |\n\n| b |\n\n| c |") == "| a |\n| b |\n| c |"

    @pytest.mark.parametrize("text", ["text\n\n| a |", "| a |\n\ntext", "a\n\nb"])
    def test_prose_boundaries_are_kept(self, text: str) -> None:
        assert join_split_table_rows(text) == text

    def test_joiner_plugin_name(self) -> None:
        assert create_table_row_joiner().name == TABLE_ROW_JOIN_PASS


class TestTableRowProcessor:
    def test_with_joins(self, serializer: MarkdownSerializer) -> None:
        plugin = create_table_row_processor()
        assert isinstance(plugin, CombinedPlugin)
        enhanced = plugin.enhance_serializer(serializer)
        assert enhanced.pass_names == ("table_row_text_processing", TABLE_ROW_JOIN_PASS)

    def test_without_joins(self) -> None:
        plugin = create_table_row_processor(join_rows=False)
        assert isinstance(plugin, PassPlugin)
        assert plugin.text_pass("| a \\_ b \\| c |\nx \\~ y") == "| a _ b | c |\nx ~ y"

    def test_prose_keeps_its_escapes(self) -> None:
        plugin = create_table_row_processor(join_rows=False)
        assert plugin.text_pass("not a row \\* \\|") == "not a row \\* \\|"
