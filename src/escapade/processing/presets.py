"""Whole-text unescaping presets.

Unlike the pattern processor these passes apply to every line. They are
the simple knobs: unescape a few characters everywhere, optionally with
regex replacements.

Presets:
    tildes: unescape ``~`` (the default)
    relaxed: unescape ``~``, ``_`` and ``*``; note these are meaningful
    arrows: tildes plus ``-->`` to an arrow and friends
    disabled: leaves serializers unchanged
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence

from escapade.errors import ConfigurationError
from escapade.patterns import DEFAULT_ESCAPE_CACHE, EscapeCache
from escapade.processing.base import PassPlugin, TextPass
from escapade.processing.pattern import Replacement, compile_replacements

TEXT_PROCESSING_PASS = "text_processing"


def create_text_processor(
    unescape_chars: Sequence[str] = ("~",),
    custom_replacements: Sequence[Replacement] = (),
    *,
    enabled: bool = True,
    name: str = TEXT_PROCESSING_PASS,
    cache: EscapeCache | None = None,
) -> PassPlugin:
    """Create a plugin that unescapes chars and applies replacements everywhere."""
    if cache is None:
        cache = DEFAULT_ESCAPE_CACHE
    escapes = cache.get_all(tuple(unescape_chars))
    replacements = compile_replacements(custom_replacements)

    def process(text: str) -> str:
        for escape in escapes:
            text = escape.unescape_single(text)
        for source, target in replacements:
            text = source.sub(target, text)
        return text

    return PassPlugin(name, TextPass(name, process), enabled)


def tildes() -> PassPlugin:
    return create_text_processor(("~",))


def relaxed() -> PassPlugin:
    return create_text_processor(("~", "_", "*"))


def arrows() -> PassPlugin:
    return create_text_processor(
        ("~",),
        (
            (re.escape("<==>"), "↔"),
            (re.escape("-->"), "→"),
            (re.escape("<--"), "←"),
        ),
    )


def disabled() -> PassPlugin:
    return create_text_processor(enabled=False)


PRESETS: dict[str, Callable[[], PassPlugin]] = {
    "tildes": tildes,
    "relaxed": relaxed,
    "arrows": arrows,
    "disabled": disabled,
}


def get_preset(name: str) -> PassPlugin:
    """Build a preset plugin by name.

    Raises:
        ConfigurationError: If name is not a known preset
    """
    if name not in PRESETS:
        available = ", ".join(sorted(PRESETS))
        raise ConfigurationError(f"Unknown preset: {name!r}. Available: {available}", option="preset")
    return PRESETS[name]()


__all__ = [
    "PRESETS",
    "TEXT_PROCESSING_PASS",
    "arrows",
    "create_text_processor",
    "disabled",
    "get_preset",
    "relaxed",
    "tildes",
]
