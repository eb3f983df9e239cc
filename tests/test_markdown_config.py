"""Tests for MarkdownConfig and the ContextVar config helpers.

from_dict() lets frameworks build a config from plain settings; the
context helpers scope a config to the code building markdown systems.
"""

from escapade.config import (
    DEFAULT_TABLE_UNESCAPE_CHARS,
    MarkdownConfig,
    get_markdown_config,
    markdown_config_context,
    reset_markdown_config,
    set_markdown_config,
)


class TestMarkdownConfigFromDict:
    """Test MarkdownConfig.from_dict() factory method."""

    def test_from_dict_basic(self):
        """from_dict should create config with specified values."""
        config = MarkdownConfig.from_dict({"tagfilter_enabled": False, "html_enabled": True})

        assert config.tagfilter_enabled is False
        assert config.html_enabled is True
        # Defaults should still apply
        assert config.unescape_strikethrough is False

    def test_from_dict_ignores_unknown_keys(self):
        """from_dict should silently ignore unknown keys."""
        config = MarkdownConfig.from_dict({"default_passes": False, "unknown_key": "ignored"})

        assert config.default_passes is False

    def test_from_dict_empty(self):
        """from_dict with empty dict should equal the default config."""
        assert MarkdownConfig.from_dict({}) == MarkdownConfig()

    def test_from_dict_lists_become_tuples(self):
        """Lists (as they come from JSON or TOML) are stored as tuples."""
        config = MarkdownConfig.from_dict({"table_unescape_chars": ["|", "*"]})

        assert config.table_unescape_chars == ("|", "*")
        hash(config)


class TestDefaults:
    def test_defaults(self) -> None:
        config = MarkdownConfig()
        assert config.html_enabled is False
        assert config.tagfilter_enabled is True
        assert config.default_passes is True
        assert config.table_unescape_chars == DEFAULT_TABLE_UNESCAPE_CHARS == ("|", "*", "_", "~")


class TestConfigContext:
    def test_context_restores_previous(self) -> None:
        before = get_markdown_config()
        custom = MarkdownConfig(tagfilter_enabled=False)
        with markdown_config_context(custom):
            assert get_markdown_config() is custom
        assert get_markdown_config() is before

    def test_context_restores_after_error(self) -> None:
        before = get_markdown_config()
        try:
            with markdown_config_context(MarkdownConfig(html_enabled=True)):
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert get_markdown_config() is before

    def test_set_and_reset(self) -> None:
        custom = MarkdownConfig(unescape_strikethrough=True)
        set_markdown_config(custom)
        try:
            assert get_markdown_config() is custom
        finally:
            reset_markdown_config()
        assert get_markdown_config() == MarkdownConfig()
