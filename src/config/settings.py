"""Application-wide configuration loading and validation."""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOGGER = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(default="INFO")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    public_base_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("public_base_url", "render_external_url"),
        description="Externally reachable base URL used in Twilio callbacks (e.g. https://<app>.onrender.com).",
    )

    # ElevenLabs Conversational AI
    elevenlabs_agent_id: str = Field(description="Agent identifier of the conversational AI.")
    elevenlabs_convai_url: str = Field(
        default="wss://api.elevenlabs.io/v1/convai/conversation",
        description="WebSocket endpoint of the conversational AI service.",
    )

    # Twilio (Voice)
    twilio_account_sid: str
    twilio_auth_token: str
    twilio_phone_number: str = Field(description="E.164 caller id for outbound calls, e.g. +1555...")

    @field_validator("elevenlabs_agent_id", "twilio_account_sid", "twilio_auth_token", "twilio_phone_number")
    @classmethod
    def ensure_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @property
    def base_url(self) -> str:
        if self.public_base_url:
            return self.public_base_url.rstrip("/")
        return f"http://localhost:{self.port}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return Settings()


def load_settings_or_exit() -> Settings:
    """Return the settings, halting the process when required variables are missing."""

    try:
        return get_settings()
    except ValidationError as exc:
        invalid = sorted({str(error["loc"][0]).upper() for error in exc.errors() if error["loc"]})
        LOGGER.critical("Missing required environment variables: %s", ", ".join(invalid))
        raise SystemExit(1) from exc
