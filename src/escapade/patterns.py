"""Escape patterns and line-pattern helpers shared by the text passes.

Every text pass that removes backslash escapes goes through an EscapeCache:
a map from a character to the two compiled patterns that find it escaped
once (``\\X``) and escaped twice (``\\\\X``). Patterns are compiled lazily
and never evicted; the key space is the handful of Markdown punctuation
characters.

Example:
    >>> cache = EscapeCache()
    >>> cache.get("|").single.sub("|", "a \\\\| b")
    'a | b'

Thread Safety:
    Entries are immutable once created. Dict insertion is atomic under the
    GIL, so concurrent readers at worst compile the same pattern twice.
    Inject a private cache where isolation matters.

"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeAlias

LinePredicate: TypeAlias = Callable[[str], bool]
PatternLike: TypeAlias = str | re.Pattern[str] | LinePredicate

# Text whose first line starts with a pipe (trailing pipe optional per GFM)
TABLE_ROW_PATTERN = re.compile(r"^\|.*$", re.MULTILINE)


@dataclass(frozen=True, slots=True)
class EscapePattern:
    """Compiled single- and double-escape patterns for one character.

    Attributes:
        char: The escaped character
        single: Matches ``\\`` followed by char
        double: Matches ``\\\\`` followed by char

    """

    char: str
    single: re.Pattern[str]
    double: re.Pattern[str]

    def unescape_single(self, text: str) -> str:
        """Replace every ``\\X`` with ``X``."""
        return self.single.sub(lambda _m: self.char, text)

    def unescape_double(self, text: str) -> str:
        """Replace every ``\\\\X`` with ``\\X``."""
        return self.double.sub(lambda _m: "\\" + self.char, text)

    def unescape_both(self, text: str) -> str:
        """Resolve double escapes first, then single escapes in between.

        The single pass only runs on the text between double matches, so a
        ``\\X`` produced by the double step is never unescaped again.
        """
        pieces = self.double.split(text)
        if len(pieces) == 1:
            return self.unescape_single(text)
        joiner = "\\" + self.char
        return joiner.join(self.unescape_single(piece) for piece in pieces)


class EscapeCache:
    """Lazily compiled EscapePattern per character.

    A process-wide instance lives in DEFAULT_ESCAPE_CACHE; processors take a
    ``cache=`` argument so callers can inject their own.
    """

    __slots__ = ("_patterns",)

    def __init__(self) -> None:
        self._patterns: dict[str, EscapePattern] = {}

    def get(self, char: str) -> EscapePattern:
        """Return the EscapePattern for char, compiling it on first use."""
        pattern = self._patterns.get(char)
        if pattern is None:
            pattern = EscapePattern(
                char=char,
                single=re.compile(re.escape("\\" + char)),
                double=re.compile(re.escape("\\\\" + char)),
            )
            self._patterns[char] = pattern
        return pattern

    def get_all(self, chars: tuple[str, ...] | list[str]) -> tuple[EscapePattern, ...]:
        """Return EscapePatterns for several characters, in order."""
        return tuple(self.get(char) for char in chars)

    def __contains__(self, char: str) -> bool:
        return char in self._patterns

    def __len__(self) -> int:
        return len(self._patterns)


DEFAULT_ESCAPE_CACHE = EscapeCache()


def safe_pattern_tester(pattern: PatternLike) -> LinePredicate:
    """Build a line predicate from a pattern source, compiled pattern or callable.

    Compiled patterns are re-created from their source and flags so the
    predicate never shares state with the caller's pattern object. Plain
    callables are used as they are.

    Args:
        pattern: Regex source, compiled regex, or predicate over a line

    Returns:
        Callable returning True when the line matches
    """
    if callable(pattern) and not isinstance(pattern, re.Pattern):
        return pattern
    if isinstance(pattern, re.Pattern):
        compiled = re.compile(pattern.pattern, pattern.flags)
    else:
        compiled = re.compile(pattern)

    def test(text: str) -> bool:
        return compiled.search(text) is not None

    return test


def unescape_chars(
    text: str,
    chars: tuple[str, ...] | list[str],
    cache: EscapeCache | None = None,
) -> str:
    """Remove single backslash escapes for each char in order."""
    if cache is None:
        cache = DEFAULT_ESCAPE_CACHE
    for char in chars:
        text = cache.get(char).unescape_single(text)
    return text


__all__ = [
    "DEFAULT_ESCAPE_CACHE",
    "EscapeCache",
    "EscapePattern",
    "LinePredicate",
    "PatternLike",
    "TABLE_ROW_PATTERN",
    "safe_pattern_tester",
    "unescape_chars",
]
