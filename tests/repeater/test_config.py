"""Tests for environment configuration and debug logging."""

import logging
from typing import Callable
from unittest.mock import MagicMock

import pytest

from repeater import Repeater, repeat
from repeater.config import REPEATER_CONFIG, load_repeater_config


class TestLoadConfig:
    """Test reading settings from the environment."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Nothing set means no debug logging and no default delay."""
        monkeypatch.delenv("REPEATER_DEBUG", raising=False)
        monkeypatch.delenv("REPEATER_DEFAULT_DELAY", raising=False)

        config = load_repeater_config()

        assert config["debug"] is False
        assert config["default_delay"] is None

    def test_debug_flag(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """REPEATER_DEBUG=true enables debug logging."""
        monkeypatch.setenv("REPEATER_DEBUG", "TRUE")

        assert load_repeater_config()["debug"] is True

    def test_bare_number_delay_is_milliseconds(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A digit-only default delay is read as milliseconds."""
        monkeypatch.setenv("REPEATER_DEFAULT_DELAY", "250")

        assert load_repeater_config()["default_delay"] == 250

    def test_suffixed_delay_kept_as_string(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A suffixed default delay is left for every() to parse."""
        monkeypatch.setenv("REPEATER_DEFAULT_DELAY", "2s")

        assert load_repeater_config()["default_delay"] == "2s"

    def test_empty_delay_is_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """An empty value means no default delay."""
        monkeypatch.setenv("REPEATER_DEFAULT_DELAY", "")

        assert load_repeater_config()["default_delay"] is None


class TestConfigApplied:
    """Test that new repeaters pick up the configuration."""

    def test_default_delay_string(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A configured duration string becomes the initial delay."""
        monkeypatch.setitem(REPEATER_CONFIG, "default_delay", "250ms")

        assert repeat(MagicMock()).delay == 250

    def test_default_delay_number(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A numeric default delay is used without warnings."""
        monkeypatch.setitem(REPEATER_CONFIG, "default_delay", 250.0)

        assert repeat(MagicMock()).delay == 250
        assert "Ignoring invalid delay" not in caplog.text

    def test_every_overrides_default_delay(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """every() replaces the configured default."""
        monkeypatch.setitem(REPEATER_CONFIG, "default_delay", "250ms")

        assert repeat(MagicMock()).every("2s").delay == 2000

    async def test_default_delay_used_by_driver(
        self, monkeypatch: pytest.MonkeyPatch, make_repeater: Callable[..., Repeater], fake_sleep
    ) -> None:
        """The default delay precedes each call like an explicit one."""
        monkeypatch.setitem(REPEATER_CONFIG, "default_delay", "250ms")

        await make_repeater(MagicMock()).repeat(2)

        assert fake_sleep.calls == [0.25, 0.25]

    def test_debug_default_from_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The debug flag falls back to the configuration."""
        monkeypatch.setitem(REPEATER_CONFIG, "debug", True)

        assert repeat(MagicMock()).debug is True
        assert repeat(MagicMock(), debug=False).debug is False


class TestDebugLogging:
    """Test per-call debug logs."""

    async def test_debug_logs_each_call(
        self, make_repeater: Callable[..., Repeater], caplog: pytest.LogCaptureFixture
    ) -> None:
        """debug=True logs every invocation at DEBUG."""
        caplog.set_level(logging.DEBUG, logger="repeater.core")

        def ping(rt: int) -> None:
            pass

        await make_repeater(ping, debug=True).repeat(2)

        messages = [
            record.getMessage() for record in caplog.records if record.levelno == logging.DEBUG
        ]
        assert any("Calling" in m and "ping" in m and "(call 1)" in m for m in messages)
        assert any("(call 2)" in m for m in messages)

    async def test_no_call_logs_without_debug(
        self, make_repeater: Callable[..., Repeater], caplog: pytest.LogCaptureFixture
    ) -> None:
        """debug=False keeps per-call logs out."""
        caplog.set_level(logging.DEBUG, logger="repeater.core")

        await make_repeater(MagicMock(), debug=False).repeat(2)

        assert "(call 1)" not in caplog.text
