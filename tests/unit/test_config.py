"""Tests for settings defaults and production guards."""

import pytest

from cse_whiteboard.common.config import WhiteboardSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("WHITEBOARD_SECRET_KEY", "WHITEBOARD_ENVIRONMENT", "WHITEBOARD_SUMMARY_API_KEY"):
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    def test_defaults(self):
        s = WhiteboardSettings(secret_key="k")
        assert s.summary_max_concurrency == 4
        assert s.default_audit_limit == 50
        assert s.db_url.startswith("sqlite+aiosqlite")

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("WHITEBOARD_SUMMARY_MODEL", "local-model")
        assert WhiteboardSettings().summary_model == "local-model"

    def test_summaries_need_api_key(self):
        assert not WhiteboardSettings(summary_api_key="").summaries_configured
        assert WhiteboardSettings(summary_api_key="sk").summaries_configured
        assert not WhiteboardSettings(summary_api_key="sk", summary_enabled=False).summaries_configured


class TestValidateForProduction:
    def test_insecure_default_rejected_in_production(self):
        s = WhiteboardSettings(environment="production")
        with pytest.raises(RuntimeError, match="WHITEBOARD_SECRET_KEY"):
            s.validate_for_production()

    def test_insecure_default_warns_in_development(self):
        s = WhiteboardSettings(environment="development")
        with pytest.warns(UserWarning):
            s.validate_for_production()

    def test_secure_production(self):
        WhiteboardSettings(environment="production", secret_key="s3cure").validate_for_production()
