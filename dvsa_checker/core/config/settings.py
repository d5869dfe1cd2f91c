"""Environment-driven secrets and overrides."""

from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvSettings(BaseSettings):
    """Values read from the environment (or .env) with the DVSA_ prefix.

    These override the matching entries of config.yaml and settings.yaml so
    secrets never have to be written to those files.
    """

    model_config = SettingsConfigDict(
        env_prefix="DVSA_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    env: str = Field(default="production", description="production, development or testing")
    log_level: Optional[str] = Field(default=None)
    captcha_api_key: Optional[SecretStr] = Field(default=None)
    cookie_encryption_key: Optional[SecretStr] = Field(default=None)
    telegram_bot_token: Optional[SecretStr] = Field(default=None)
    telegram_chat_id: Optional[str] = Field(default=None)
    remote_config_url: Optional[str] = Field(default=None)

    @property
    def is_development(self) -> bool:
        return self.env.lower() in {"development", "dev", "local", "testing", "test"}


_settings: Optional[EnvSettings] = None


def get_env_settings() -> EnvSettings:
    """Return the process-wide EnvSettings, creating it on first use."""
    global _settings
    if _settings is None:
        _settings = EnvSettings()
    return _settings


def reset_env_settings() -> None:
    """Forget cached settings (tests)."""
    global _settings
    _settings = None
