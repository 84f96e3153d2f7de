"""Tests for the sharing logging configuration."""

import pytest
import structlog
from sharing.utils.logging import bind_request_context, clear_request_context, get_log_level


class TestLogLevel:
    @pytest.mark.parametrize(
        "env, level",
        [("production", "INFO"), ("staging", "INFO"), ("development", "DEBUG"), ("test", "WARNING")],
    )
    def test_level_follows_environment(self, monkeypatch, env, level):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        monkeypatch.setenv("PROTEAN_ENV", env)
        assert get_log_level() == level

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("PROTEAN_ENV", "production")
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        assert get_log_level() == "ERROR"


class TestRequestContext:
    def test_bind_and_clear(self):
        clear_request_context()
        bind_request_context(user_id="u-1", path="/claims")
        assert structlog.contextvars.get_contextvars() == {"user_id": "u-1", "path": "/claims"}

        clear_request_context()
        assert structlog.contextvars.get_contextvars() == {}
