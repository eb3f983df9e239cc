"""Text passes and the plugin protocol they are delivered through.

A TextPass is a named ``str -> str`` function run over the serializer's
output. Passes compose with ``|`` the same way sanitization policies do:
``(a | b)(text)`` runs ``a`` then ``b``.

A text processing plugin turns a serializer into one that also runs its
pass. Serializers are immutable, so enhancing returns a new serializer and
never touches the one passed in. Each serializer remembers which pass names
it carries; enhancing a serializer that already carries the plugin's pass
returns it unchanged.

Example:
    >>> upper = TextPass("upper", str.upper)
    >>> strip = TextPass("strip", str.strip)
    >>> (strip | upper)("  hi  ")
    'HI'
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from escapade.utils.logger import get_logger

if TYPE_CHECKING:
    from escapade.serializer import MarkdownSerializer

logger = get_logger(__name__)


class TextPass:
    """Named text transform, composable via |."""

    __slots__ = ("name", "_fn")

    def __init__(self, name: str, fn: Callable[[str], str]) -> None:
        self.name = name
        self._fn = fn

    def __call__(self, text: str) -> str:
        return self._fn(text)

    def __or__(self, other: TextPass) -> TextPass:
        """Chain passes: (self | other)(text) applies self then other."""

        def chained(text: str) -> str:
            return other._fn(self._fn(text))

        return TextPass(f"{self.name}|{other.name}", chained)

    def __repr__(self) -> str:
        return f"TextPass({self.name!r})"


@runtime_checkable
class TextProcessingPlugin(Protocol):
    """Protocol for post-serialization text processing.

    Implementations must not mutate the serializer they receive.

    """

    @property
    def name(self) -> str:
        """Plugin identifier, also used as the duplicate-pass guard key."""
        ...

    def enhance_serializer(self, serializer: MarkdownSerializer) -> MarkdownSerializer:
        """Return a serializer that also runs this plugin's processing."""
        ...


@dataclass(frozen=True, slots=True)
class PassPlugin:
    """Plugin that appends a single TextPass to a serializer.

    Attributes:
        name: Guard key; a serializer already carrying a pass of this name
            is returned unchanged
        text_pass: The transform to append
        enabled: When False, enhance_serializer is the identity

    """

    name: str
    text_pass: TextPass
    enabled: bool = True

    def enhance_serializer(self, serializer: MarkdownSerializer) -> MarkdownSerializer:
        if not self.enabled:
            return serializer
        if serializer.has_pass(self.name):
            logger.debug("Pass %r already applied, skipping", self.name)
            return serializer
        return serializer.with_pass(self.name, self.text_pass)


@dataclass(frozen=True, slots=True)
class CombinedPlugin:
    """Plugin applying several plugins in sequence."""

    name: str
    plugins: tuple[TextProcessingPlugin, ...]

    def enhance_serializer(self, serializer: MarkdownSerializer) -> MarkdownSerializer:
        for plugin in self.plugins:
            serializer = plugin.enhance_serializer(serializer)
        return serializer


def compose_plugins(
    *plugins: TextProcessingPlugin, name: str = "combined_text_processing"
) -> CombinedPlugin:
    """Combine plugins into one that applies each in the given order.

    Args:
        *plugins: Plugins to apply, first to last
        name: Name of the combined plugin

    Returns:
        CombinedPlugin
    """
    return CombinedPlugin(name, tuple(plugins))


__all__ = [
    "CombinedPlugin",
    "PassPlugin",
    "TextPass",
    "TextProcessingPlugin",
    "compose_plugins",
]
