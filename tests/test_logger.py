"""Tests for logger namespacing and pass tracing."""

import logging

import pytest

from escapade.nodes import block, doc, text
from escapade.serializer import DEFAULT_MARK_RULES, DEFAULT_NODE_RULES, MarkdownSerializer
from escapade.utils.logger import count_changed_lines, get_logger, log_pass_result


class TestGetLogger:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("mymodule", "escapade.mymodule"),
            ("escapade", "escapade"),
            ("escapade.parser", "escapade.parser"),
            ("escapades", "escapade.escapades"),
        ],
    )
    def test_namespacing(self, name: str, expected: str) -> None:
        assert get_logger(name).name == expected


class TestCountChangedLines:
    def test_identical(self) -> None:
        assert count_changed_lines("a\nb", "a\nb") == 0

    def test_one_line_changed(self) -> None:
        assert count_changed_lines("a\n\\|b", "a\n|b") == 1

    def test_lines_joined(self) -> None:
        assert count_changed_lines("| a |\n\n| b |", "| a |\n| b |") == 2


class TestPassTracing:
    def test_unchanged_text_is_not_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = get_logger("tracing")
        with caplog.at_level(logging.DEBUG, logger="escapade"):
            log_pass_result(logger, "noop", "same", "same")
        assert caplog.records == []

    def test_changed_text_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = get_logger("tracing")
        with caplog.at_level(logging.DEBUG, logger="escapade"):
            log_pass_result(logger, "upper", "a\nb", "A\nb")
        assert "Pass 'upper' changed 1 line(s)" in caplog.text

    def test_serializer_traces_its_passes(self, caplog: pytest.LogCaptureFixture) -> None:
        serializer = MarkdownSerializer(DEFAULT_NODE_RULES, DEFAULT_MARK_RULES)
        serializer = serializer.with_pass("shout", str.upper).with_pass("noop", lambda t: t)
        with caplog.at_level(logging.DEBUG, logger="escapade"):
            assert serializer.serialize(doc(block("paragraph", text("hi")))) == "HI"
        assert "Pass 'shout' changed 1 line(s)" in caplog.text
        assert "'noop'" not in caplog.text
