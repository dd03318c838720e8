"""Tests for configuration loading."""

from __future__ import annotations

import pytest

from sessionprobe._internal.config import (
    SessionProbeConfig,
    load_config,
    parse_cookie_name,
    parse_credentials,
)
from sessionprobe._internal.errors import ConfigError

_ENV_VARS = (
    "SESSIONPROBE_BASE_URL",
    "SESSIONPROBE_COOKIE_NAME",
    "SESSIONPROBE_TIMEOUT",
    "SESSIONPROBE_USER",
    "SESSIONPROBE_ADMIN",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestSessionProbeConfig:
    """Tests for the SessionProbeConfig dataclass."""

    def test_defaults(self):
        config = SessionProbeConfig()
        assert config.base_url == ""
        assert config.cookie_name == "JSESSIONID"
        assert config.default_headers == {}
        assert config.request_timeout == 30.0
        assert config.user == ("user", "user")
        assert config.admin == ("admin", "admin")

    def test_frozen(self):
        config = SessionProbeConfig()
        with pytest.raises(AttributeError):
            config.base_url = "http://changed"  # type: ignore[misc]


class TestParseCredentials:
    def test_simple(self):
        assert parse_credentials("alice:secret") == ("alice", "secret")

    def test_password_may_contain_colons(self):
        assert parse_credentials("alice:a:b:c") == ("alice", "a:b:c")

    def test_empty_password_allowed(self):
        assert parse_credentials("alice:") == ("alice", "")

    @pytest.mark.parametrize("value", ["alice", ":secret", ""])
    def test_invalid(self, value: str):
        with pytest.raises(ConfigError, match="username:password"):
            parse_credentials(value)


class TestLoadConfig:
    """Tests for the load_config function."""

    def test_defaults_from_env(self):
        config = load_config()
        assert config == SessionProbeConfig()

    def test_values_from_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SESSIONPROBE_BASE_URL", "http://app.example.com")
        monkeypatch.setenv("SESSIONPROBE_COOKIE_NAME", "SESSION")
        monkeypatch.setenv("SESSIONPROBE_TIMEOUT", "2.5")
        monkeypatch.setenv("SESSIONPROBE_USER", "bob:pw1")
        monkeypatch.setenv("SESSIONPROBE_ADMIN", "root:pw2")

        config = load_config()
        assert config.base_url == "http://app.example.com"
        assert config.cookie_name == "SESSION"
        assert config.request_timeout == 2.5
        assert config.user == ("bob", "pw1")
        assert config.admin == ("root", "pw2")

    def test_invalid_timeout_raises_error(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SESSIONPROBE_TIMEOUT", "abc")
        with pytest.raises(ConfigError, match="must be a number"):
            load_config()

    @pytest.mark.parametrize("value", ["0", "-5.0"])
    def test_non_positive_timeout_raises_error(self, monkeypatch: pytest.MonkeyPatch, value: str):
        monkeypatch.setenv("SESSIONPROBE_TIMEOUT", value)
        with pytest.raises(ConfigError, match="must be positive"):
            load_config()

    def test_blank_cookie_name_raises_error(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SESSIONPROBE_COOKIE_NAME", "  ")
        with pytest.raises(ConfigError, match="must not be empty"):
            load_config()

    def test_empty_cookie_name_raises_error(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SESSIONPROBE_COOKIE_NAME", "")
        with pytest.raises(ConfigError, match="must not be empty"):
            load_config()

    def test_malformed_admin_raises_error(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SESSIONPROBE_ADMIN", "admin")
        with pytest.raises(ConfigError, match="SESSIONPROBE_ADMIN"):
            load_config()


class TestParseCookieName:
    def test_strips_whitespace(self):
        assert parse_cookie_name("  SESSION ") == "SESSION"

    @pytest.mark.parametrize("value", ["", "  "])
    def test_blank_rejected_with_source(self, value: str):
        with pytest.raises(ConfigError, match="--cookie-name must not be empty"):
            parse_cookie_name(value, source="--cookie-name")
