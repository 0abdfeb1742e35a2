"""Tests for BotSettings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from opsbot.core.settings import BotSettings


class TestBotSettings:
    def test_defaults(self, monkeypatch):
        for key in ("OPSBOT_OPERATIONS_PATH", "OPSBOT_GITHUB_TOKEN", "OPSBOT_PORT"):
            monkeypatch.delenv(key, raising=False)

        settings = BotSettings(_env_file=None)

        assert settings.operations_path == Path("configs/operations")
        assert settings.github_token is None
        assert settings.port == 3000
        assert settings.concurrent_operations is False

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("OPSBOT_OPERATIONS_PATH", "/etc/opsbot/ops")
        monkeypatch.setenv("OPSBOT_GITHUB_TOKEN", "ghp_secret")
        monkeypatch.setenv("OPSBOT_CONCURRENT_OPERATIONS", "true")

        settings = BotSettings(_env_file=None)

        assert settings.operations_path == Path("/etc/opsbot/ops")
        assert settings.github_token.get_secret_value() == "ghp_secret"
        assert "ghp_secret" not in repr(settings)
        assert settings.concurrent_operations is True

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            BotSettings(_env_file=None, log_level="LOUD")

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            BotSettings(_env_file=None, github_timeout=0)
