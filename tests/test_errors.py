"""Tests for the exception hierarchy and error formatting."""

import pytest

from escapade.errors import (
    ConfigurationError,
    EscapadeError,
    ExtensionError,
    ParseError,
    SerializationError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "error",
        [
            ConfigurationError("bad"),
            ParseError("bad"),
            SerializationError("bad"),
            ExtensionError("x", "bad"),
        ],
    )
    def test_all_derive_from_base(self, error: EscapadeError) -> None:
        assert isinstance(error, EscapadeError)


class TestFormatting:
    def test_parse_error_with_line(self) -> None:
        error = ParseError("Token type 'table_open' not supported", lineno=3, token_type="table_open")
        assert str(error) == "3: Token type 'table_open' not supported"
        assert error.message == "Token type 'table_open' not supported"

    def test_parse_error_without_line(self) -> None:
        assert str(ParseError("oops")) == "oops"

    def test_extension_error(self) -> None:
        error = ExtensionError("footnotes", "unknown extension")
        assert str(error) == "Extension 'footnotes': unknown extension"
        assert error.extension_name == "footnotes"

    def test_configuration_error_option(self) -> None:
        error = ConfigurationError("'pattern' option is required", option="pattern")
        assert error.option == "pattern"
        assert ConfigurationError("x").option is None

    def test_serialization_error_node_type(self) -> None:
        assert SerializationError("x", node_type="widget").node_type == "widget"
