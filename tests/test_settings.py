"""Unit tests for perplexity_mcp.settings — env parsing and defaults."""

from __future__ import annotations

import dataclasses

import pytest

from perplexity_mcp import settings
from perplexity_mcp.errors import ConfigError


class TestLoadSettings:
    """load_settings() from an explicit mapping or the process environment."""


    def test_requires_api_key(self):
        """Missing PERPLEXITY_API_KEY → ConfigError naming the variable."""
        with pytest.raises(ConfigError, match="PERPLEXITY_API_KEY"):
            settings.load_settings({})

    def test_blank_api_key_rejected(self):
        """Whitespace-only key counts as missing."""
        with pytest.raises(ConfigError):
            settings.load_settings({"PERPLEXITY_API_KEY": "   "})

    def test_defaults(self):
        s = settings.load_settings({"PERPLEXITY_API_KEY": "k"})
        assert s.api_key == "k"
        assert s.default_domain_filter == ()
        assert s.api_url == settings.API_URL
        assert s.timeout is None

    def test_domain_filter_trimmed(self):
        """Default filter entries are split on commas and trimmed."""
        s = settings.load_settings({
            "PERPLEXITY_API_KEY": "k",
            "PERPLEXITY_SEARCH_DOMAIN_FILTER": "x.com, y.com",
        })
        assert s.default_domain_filter == ("x.com", "y.com")

    def test_api_url_override(self):
        s = settings.load_settings({
            "PERPLEXITY_API_KEY": "k",
            "PERPLEXITY_API_URL": "http://localhost:9999/chat",
        })
        assert s.api_url == "http://localhost:9999/chat"

    def test_timeout_parsed(self):
        s = settings.load_settings({"PERPLEXITY_API_KEY": "k", "PERPLEXITY_TIMEOUT": "30"})
        assert s.timeout == 30.0

    @pytest.mark.parametrize("raw", ["soon", "0", "-5"])
    def test_bad_timeout(self, raw):
        """Non-numeric or non-positive timeout → ConfigError."""
        with pytest.raises(ConfigError, match="PERPLEXITY_TIMEOUT"):
            settings.load_settings({"PERPLEXITY_API_KEY": "k", "PERPLEXITY_TIMEOUT": raw})

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("PERPLEXITY_API_KEY", "from-env")
        monkeypatch.delenv("PERPLEXITY_SEARCH_DOMAIN_FILTER", raising=False)
        assert settings.load_settings().api_key == "from-env"


class TestParseDomainFilter:
    """Comma-separated filter parsing."""


    def test_empty(self):
        assert settings.parse_domain_filter(None) == ()
        assert settings.parse_domain_filter("") == ()

    def test_drops_blank_entries(self):
        """Empty entries and trailing commas are dropped."""
        assert settings.parse_domain_filter("a.com,, ,-b.com,") == ("a.com", "-b.com")


class TestSettingsValue:
    """The Settings value object and module constants."""


    def test_frozen(self):
        s = settings.Settings(api_key="k")
        with pytest.raises(dataclasses.FrozenInstanceError):
            s.api_key = "other"

    def test_repr_hides_key(self):
        """The API key never appears in repr()."""
        assert "secret-key" not in repr(settings.Settings(api_key="secret-key"))

    def test_model_tables(self):
        assert settings.DEFAULT_ASK_MODEL in settings.ASK_MODELS
        assert settings.DEFAULT_REASON_MODEL in settings.REASON_MODELS
        assert settings.MAX_DOMAIN_FILTER == 10
