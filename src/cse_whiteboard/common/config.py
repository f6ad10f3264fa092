"""CSE Whiteboard configuration via pydantic-settings."""

import warnings
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

_INSECURE_DEFAULTS = {
    "secret_key": "insecure-dev-key-change-me",
}


class WhiteboardSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="WHITEBOARD_")

    environment: str = "development"
    secret_key: str = "insecure-dev-key-change-me"

    # Database
    db_url: str = "sqlite+aiosqlite:///./data/whiteboard.db"

    # API
    api_title: str = "CSE Whiteboard"
    api_version: str = "0.1.0"
    host: str = "0.0.0.0"
    port: int = 8080
    api_prefix: str = ""
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:8000"]
    log_level: str = "INFO"

    # Identity tokens issued to the browser session
    session_max_age: int = 8 * 3600  # seconds

    # Executive summaries (OpenAI-compatible chat completions)
    summary_enabled: bool = True
    summary_api_key: str = ""
    summary_base_url: str = "https://api.openai.com/v1"
    summary_model: str = "gpt-4o-mini"
    summary_max_concurrency: int = 4
    summary_timeout: float = 30.0  # seconds, per customer
    summary_max_tokens: int = 400

    # Audit log listing
    default_audit_limit: int = 50
    max_audit_limit: int = 200

    @property
    def summaries_configured(self) -> bool:
        """True when executive summaries should be requested."""
        return self.summary_enabled and bool(self.summary_api_key)

    def validate_for_production(self) -> None:
        """Raise if insecure defaults are used in non-development environments."""
        insecure_fields = [
            field
            for field, default in _INSECURE_DEFAULTS.items()
            if getattr(self, field) == default
        ]

        if self.environment != "development" and insecure_fields:
            env_vars = ", ".join(f"WHITEBOARD_{f.upper()}" for f in insecure_fields)
            raise RuntimeError(
                f"Insecure default values detected in '{self.environment}' environment. "
                f"Set these environment variables to secure values: {env_vars}. "
                "Generate secrets with: python -c \"import secrets; print(secrets.token_urlsafe(48))\""
            )

        if insecure_fields:
            warnings.warn(
                "Using insecure default secret key; set WHITEBOARD_SECRET_KEY for production",
                UserWarning,
                stacklevel=2,
            )


@lru_cache
def get_settings() -> WhiteboardSettings:
    settings = WhiteboardSettings()
    settings.validate_for_production()
    return settings
