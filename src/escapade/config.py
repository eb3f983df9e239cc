"""ContextVar-based configuration for Escapade.

Holds the options that shape a markdown system: whether raw HTML is parsed,
which characters the table-context pass unescapes, and which default text
passes run after serialization.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so no locks are needed and race conditions are impossible.

Usage:
    # Explicit config
    system = create_markdown_system(config=MarkdownConfig(tagfilter_enabled=False))

    # Or scope a config for everything built inside a block
    with markdown_config_context(MarkdownConfig(unescape_strikethrough=True)):
        system = create_markdown_system()

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass

DEFAULT_TABLE_UNESCAPE_CHARS: tuple[str, ...] = ("|", "*", "_", "~")


@dataclass(frozen=True, slots=True)
class MarkdownConfig:
    """Immutable markdown system configuration.

    Attributes:
        html_enabled: Let markdown-it produce html_block/html_inline tokens
        table_unescape_chars: Characters unescaped inside detected tables
        tagfilter_enabled: Run the GFM disallowed-tag filter after serializing
        unescape_strikethrough: Turn escaped ``\\~\\~`` pairs back into ``~~``
        default_passes: Build the default pass chain when no text processing
            plugin is given

    """

    html_enabled: bool = False
    table_unescape_chars: tuple[str, ...] = DEFAULT_TABLE_UNESCAPE_CHARS
    tagfilter_enabled: bool = True
    unescape_strikethrough: bool = False
    default_passes: bool = True

    @classmethod
    def from_dict(cls, config_dict: dict) -> "MarkdownConfig":
        """Create MarkdownConfig from dictionary.

        Only includes keys that are valid MarkdownConfig fields; unknown keys
        are silently ignored. Lists are converted to tuples so the result
        stays hashable.

        Args:
            config_dict: Dictionary with config values. Keys should match
                MarkdownConfig attribute names.

        Returns:
            New MarkdownConfig instance with values from dict.

        Example:
            >>> config = MarkdownConfig.from_dict({
            ...     "tagfilter_enabled": False,
            ...     "table_unescape_chars": ["|"],
            ...     "unknown_key": "ignored",
            ... })
            >>> config.table_unescape_chars
            ('|',)

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {}
        for key, value in config_dict.items():
            if key not in valid_fields:
                continue
            if isinstance(value, list):
                value = tuple(value)
            filtered[key] = value
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: MarkdownConfig = MarkdownConfig()

_markdown_config: ContextVar[MarkdownConfig] = ContextVar(
    "markdown_config",
    default=_DEFAULT_CONFIG,
)


def get_markdown_config() -> MarkdownConfig:
    """Get current markdown configuration (thread-local)."""
    return _markdown_config.get()


def set_markdown_config(config: MarkdownConfig) -> None:
    """Set markdown configuration for current context.

    Args:
        config: MarkdownConfig instance to use for this context.

    """
    _markdown_config.set(config)


def reset_markdown_config() -> None:
    """Reset to default configuration."""
    _markdown_config.set(_DEFAULT_CONFIG)


@contextmanager
def markdown_config_context(config: MarkdownConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Args:
        config: MarkdownConfig to use within the context.

    Yields:
        None

    Example:
        >>> with markdown_config_context(MarkdownConfig(tagfilter_enabled=False)):
        ...     system = create_markdown_system()
        >>> # Automatically reset to previous config

    """
    previous = _markdown_config.get()
    _markdown_config.set(config)
    try:
        yield
    finally:
        _markdown_config.set(previous)


__all__ = [
    "DEFAULT_TABLE_UNESCAPE_CHARS",
    "MarkdownConfig",
    "get_markdown_config",
    "set_markdown_config",
    "reset_markdown_config",
    "markdown_config_context",
]
