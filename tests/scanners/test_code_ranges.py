"""Tests for fenced code and code span detection."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from escapade.scanners.code import (
    code_ranges,
    code_span_ranges,
    fenced_code_mask,
    map_outside_code,
    map_outside_code_spans,
)


class TestFencedCodeMask:
    def test_fence_lines_and_body(self) -> None:
        lines = ["before", "```py", "| a | b |", "```", "after"]
        assert fenced_code_mask(lines) == [False, True, True, True, False]

    def test_tilde_fence_needs_tilde_close(self) -> None:
        lines = ["~~~", "```", "~~~", "x"]
        assert fenced_code_mask(lines) == [True, True, True, False]

    def test_closing_fence_may_be_longer(self) -> None:
        assert fenced_code_mask(["```", "x", "`````", "y"]) == [True, True, True, False]

    def test_shorter_run_does_not_close(self) -> None:
        assert fenced_code_mask(["````", "```", "x"]) == [True, True, True]

    def test_unterminated_fence_runs_to_end(self) -> None:
        assert fenced_code_mask(["a", "```", "b", "c"]) == [False, True, True, True]

    def test_fence_inside_quote_and_list(self) -> None:
        assert fenced_code_mask(["> ```", "> x", "> ```"]) == [True, True, True]
        assert fenced_code_mask(["- ```", "  x", "  ```", "- y"]) == [True, True, True, False]
        assert fenced_code_mask(["1. ```", "   x", "   ```"]) == [True, True, True]

    def test_backtick_info_string_with_backtick_is_not_a_fence(self) -> None:
        assert fenced_code_mask(["``` a`b", "x"]) == [False, False]


class TestCodeSpanRanges:
    @pytest.mark.parametrize(
        ("line", "expected"),
        [
            ("a `b` c", [(2, 5)]),
            ("`a` and `b`", [(0, 3), (8, 11)]),
            ("``a ` b``", [(0, 9)]),
            ("no spans", []),
            ("`unclosed", []),
            ("\\`not code\\`", []),
            ("\\``code`", [(2, 8)]),
            ("\\\\`code`", [(2, 8)]),
        ],
    )
    def test_ranges(self, line: str, expected: list[tuple[int, int]]) -> None:
        assert code_span_ranges(line) == expected

    def test_run_lengths_must_match(self) -> None:
        line = "``a`b``"
        assert code_span_ranges(line) == [(0, 7)]


class TestMapOutsideCode:
    @staticmethod
    def shout(text: str) -> str:
        return text.upper()

    def test_code_spans_are_kept(self) -> None:
        assert map_outside_code("a `b` c", self.shout) == "A `b` C"

    def test_fenced_block_is_kept(self) -> None:
        markdown = "a\n```\nb\nc\n```\nd"
        assert map_outside_code(markdown, self.shout) == "A\n```\nb\nc\n```\nD"

    def test_consecutive_fence_lines_form_one_range(self) -> None:
        assert code_ranges("```\nx\n```") == [(0, 9)]

    def test_no_code(self) -> None:
        assert map_outside_code("plain", self.shout) == "PLAIN"

    def test_line_helper_ignores_fences(self) -> None:
        assert map_outside_code_spans("```x", self.shout) == "```X"

    @given(text=st.text(alphabet="ab`~\n\\ ", max_size=40))
    @settings(max_examples=200)
    def test_identity_preserves_text(self, text: str) -> None:
        assert map_outside_code(text, lambda piece: piece) == text
