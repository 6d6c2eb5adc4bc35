"""Tests for environment-driven settings (config.py)."""

from __future__ import annotations

from pathlib import Path

import pytest

from metalcloud_cli.config import Settings, load_settings
from metalcloud_cli.exceptions import ConfigurationError


class TestSettings:
    def test_defaults(self) -> None:
        settings = load_settings()
        assert settings.api_key is None
        assert settings.endpoint is None
        assert settings.logging_enabled is False
        assert settings.timeout_seconds == 30.0

    def test_reads_prefixed_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("METALCLOUD_API_KEY", "42:secret")
        monkeypatch.setenv("METALCLOUD_ENDPOINT", "https://api.example.com")
        monkeypatch.setenv("METALCLOUD_USER_EMAIL", "ops@example.com")
        monkeypatch.setenv("METALCLOUD_LOGGING_ENABLED", "true")
        settings = load_settings()
        assert settings.require_credentials() == ("https://api.example.com", "42:secret")
        assert settings.user_email == "ops@example.com"
        assert settings.logging_enabled is True

    def test_reads_dotenv_file(self, tmp_path: Path) -> None:
        (tmp_path / ".env").write_text(
            "METALCLOUD_ENDPOINT=https://env-file.example.com\n", encoding="utf-8",
        )
        assert Settings().endpoint == "https://env-file.example.com"

    def test_missing_credentials(self) -> None:
        with pytest.raises(ConfigurationError, match="METALCLOUD_API_KEY") as exc_info:
            load_settings().require_credentials()
        assert exc_info.value.hint is not None

    def test_invalid_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("METALCLOUD_TIMEOUT_SECONDS", "-1")
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_settings()
