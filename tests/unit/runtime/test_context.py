"""Tests for the application context and temporary configuration overrides."""

import pytest

from src.bookstore.runtime.config.config_data import ConfigData
from src.bookstore.runtime.context import get_config, set_config, with_context


class TestWithContext:
    def test_override_only_replaces_set_fields(self):
        original = get_config()
        override = ConfigData()
        override.logging.level = "DEBUG"

        with with_context(override):
            config = get_config()
            assert config.logging.level == "DEBUG"
            assert config.database.url == original.database.url
            assert config.app.environment == original.app.environment

        assert get_config() is original

    def test_nested_overrides(self):
        outer = ConfigData()
        outer.database.url = "sqlite:///./outer.db"
        inner = ConfigData()
        inner.app.port = 9001
        original_port = get_config().app.port

        with with_context(outer):
            with with_context(inner):
                config = get_config()
                assert config.database.url == "sqlite:///./outer.db"
                assert config.app.port == 9001
            assert get_config().app.port == original_port
            assert get_config().database.url == "sqlite:///./outer.db"

    def test_none_is_a_noop(self):
        original = get_config()
        with with_context(None):
            assert get_config() is original

    def test_rejects_other_types(self):
        with pytest.raises(ValueError, match="must be ConfigData"):
            with with_context({"logging": {"level": "DEBUG"}}):
                pass

    def test_context_is_restored_after_error(self):
        original = get_config()
        override = ConfigData()
        override.logging.level = "ERROR"

        with pytest.raises(RuntimeError):
            with with_context(override):
                raise RuntimeError("fail inside override")

        assert get_config() is original


def test_set_config_replaces_configuration():
    original = get_config()
    replacement = ConfigData()
    replacement.app.name = "Replacement"
    try:
        set_config(replacement)
        assert get_config() is replacement
    finally:
        set_config(original)
