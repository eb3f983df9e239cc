"""Exception classes for Escapade.

Provides standardized exceptions for error handling throughout Escapade.

Classifiers and scanners never raise on malformed Markdown; the exceptions
below cover setup mistakes (bad options, bad extensions) and failures of the
parser/serializer pair.
"""

from __future__ import annotations


class EscapadeError(Exception):
    """Base exception for all Escapade errors.

    Subclass this for specific error categories.
    """

    pass


class ConfigurationError(EscapadeError):
    """Invalid options passed to a plugin, styler or system factory.

    Raised at construction time, never while serializing.
    """

    def __init__(self, message: str, option: str | None = None) -> None:
        """Initialize configuration error.

        Args:
            message: Error description
            option: Name of the offending option (optional)
        """
        self.option = option
        super().__init__(message)


class ParseError(EscapadeError):
    """Error while building a document tree from markdown-it tokens.

    Raised when the token stream contains a token type with no handler.
    """

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        token_type: str | None = None,
    ) -> None:
        """Initialize parse error with optional location.

        Args:
            message: Error description
            lineno: Line number where the token starts (1-indexed)
            token_type: markdown-it token type that failed (optional)
        """
        self.message = message
        self.lineno = lineno
        self.token_type = token_type

        location = f"{lineno}: " if lineno is not None else ""
        super().__init__(f"{location}{message}")


class SerializationError(EscapadeError):
    """Error while turning a document tree back into Markdown.

    Raised when a node or mark type has no serializer rule.
    """

    def __init__(self, message: str, node_type: str | None = None) -> None:
        """Initialize serialization error.

        Args:
            message: Error description
            node_type: Node or mark type name that could not be serialized
        """
        self.node_type = node_type
        super().__init__(message)


class ExtensionError(EscapadeError):
    """Error in extension resolution or registration."""

    def __init__(self, extension_name: str, message: str) -> None:
        """Initialize extension error.

        Args:
            extension_name: Name of the failing extension
            message: Description of the error
        """
        self.extension_name = extension_name
        super().__init__(f"Extension '{extension_name}': {message}")
