from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Anthropic
    anthropic_api_key: str | None = None
    anthropic_default_model: str = "claude-3-opus-20240229"
    anthropic_max_tokens: int = 4096

    # Error sanitization
    app_env: str = "development"
    error_max_message_length: int = 500
    redaction_text: str = "[REDACTED]"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"


def get_settings() -> Settings:
    """Read settings fresh from the environment (and `.env`)."""
    return Settings()
