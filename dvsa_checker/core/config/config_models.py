"""Pydantic configuration models - single source of truth for config structures.

Two groups live here: ``MonitorSettings`` (the user's monitoring request,
owned and persisted by whatever front-end drives the checker) and
``AppConfig`` (process-level configuration loaded from config.yaml).
"""

from datetime import date
from typing import Any, List, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    field_validator,
)

from ...constants import Intervals, Timeouts
from ..enums import BookingMode
from ..exceptions import SettingsValidationError

# Monitor settings


class Centre(BaseModel):
    """A driving test centre as known to the booking site."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1, description="Value of the centre's radio button on the site")
    name: str = Field(min_length=1, description="Name typed into the centre search field")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        """Centre ids are numeric on the site but always handled as strings."""
        if isinstance(v, int):
            return str(v)
        return v


class MonitorSettings(BaseModel):
    """Monitoring request for a single user.

    Missing credentials and an empty centre list are representable here;
    ``validate_for_start`` is what rejects them.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    licence_number: str = Field(
        default="", validation_alias=AliasChoices("licence_number", "licenceNumber")
    )
    booking_reference: str = Field(
        default="", validation_alias=AliasChoices("booking_reference", "bookingReference")
    )
    captcha_api_key: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("captcha_api_key", "captchaApiKey")
    )
    selected_centres: List[Centre] = Field(
        default_factory=list, validation_alias=AliasChoices("selected_centres", "selectedCentres")
    )
    check_interval: int = Field(
        default=Intervals.CHECK_DEFAULT_MINUTES,
        ge=Intervals.CHECK_MIN_MINUTES,
        le=Intervals.CHECK_MAX_MINUTES,
        validation_alias=AliasChoices("check_interval", "checkInterval"),
        description="Minutes between scheduled checks",
    )
    alert_before_date: date = Field(
        default_factory=date.today,
        validation_alias=AliasChoices("alert_before_date", "alertBeforeDate"),
        description="Only dates strictly earlier than this qualify",
    )
    booking_mode: BookingMode = Field(
        default=BookingMode.PASSIVE, validation_alias=AliasChoices("booking_mode", "bookingMode")
    )

    @field_validator("licence_number", "booking_reference", mode="before")
    @classmethod
    def strip_identifiers(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("alert_before_date", mode="before")
    @classmethod
    def parse_cutoff(cls, v: Any) -> Any:
        """Accept ISO timestamps as well as plain dates."""
        if isinstance(v, str) and "T" in v:
            return v.split("T", 1)[0]
        return v

    @field_validator("booking_mode", mode="before")
    @classmethod
    def parse_booking_mode(cls, v: Any) -> BookingMode:
        return BookingMode.parse(v)

    def validate_for_start(self) -> None:
        """
        Check the settings are sufficient to start monitoring.

        Raises:
            SettingsValidationError: With a user-facing reason per failure kind
        """
        if not self.licence_number or not self.booking_reference:
            raise SettingsValidationError(
                "Licence Number and Booking Reference are required.", field="credentials"
            )
        if not self.selected_centres:
            raise SettingsValidationError(
                "Please select at least one test centre to monitor.", field="selected_centres"
            )

    def __repr__(self) -> str:
        """Return repr without the licence number or solver key."""
        return (
            f"MonitorSettings(centres={[c.name for c in self.selected_centres]}, "
            f"check_interval={self.check_interval}, "
            f"alert_before_date={self.alert_before_date.isoformat()}, "
            f"booking_mode={self.booking_mode.value})"
        )


# Application configuration


class BrowserConfig(BaseModel):
    """Playwright browser launch options."""

    headless: bool = Field(default=True)
    channel: Optional[str] = Field(default=None, description="e.g. 'chrome' or 'msedge'")
    executable_path: Optional[str] = Field(default=None)
    slow_mo_ms: int = Field(default=0, ge=0, le=5000)
    user_agent: Optional[str] = Field(default=None)
    navigation_timeout_ms: int = Field(default=Timeouts.NAVIGATION, ge=1000)


class SessionConfig(BaseModel):
    """Where and how session cookies are persisted."""

    cookie_file: str = Field(default="data/session_cookies.json")
    encryption_key: SecretStr = Field(default=SecretStr(""))


class SiteSettings(BaseModel):
    """Selector map sources."""

    local_file: Optional[str] = Field(
        default="config/selectors.yaml", description="Bundled fallback override"
    )
    cache_file: str = Field(default="data/site_config_cache.yaml")
    remote_url: Optional[str] = Field(default=None)
    remote_timeout_seconds: int = Field(default=Timeouts.REMOTE_CONFIG_SECONDS, ge=1, le=120)

    @field_validator("remote_url")
    @classmethod
    def validate_https(cls, v: Optional[str]) -> Optional[str]:
        if v and not v.startswith("https://"):
            raise ValueError("remote_url must use HTTPS")
        return v or None


class CaptchaConfig(BaseModel):
    """Challenge solver configuration."""

    provider: str = Field(default="2captcha")
    timeout_seconds: int = Field(default=Timeouts.CAPTCHA_SOLVE_SECONDS, ge=10, le=600)

    @field_validator("provider")
    @classmethod
    def validate_provider(cls, v: str) -> str:
        valid_providers = ["2captcha"]
        if v not in valid_providers:
            raise ValueError(f'provider must be: {", ".join(valid_providers)}')
        return v


class TelegramConfig(BaseModel):
    """Telegram notification configuration."""

    enabled: bool = Field(default=False)
    bot_token: SecretStr = Field(default=SecretStr(""))
    chat_id: str = Field(default="")


class NotificationConfig(BaseModel):
    """Notification channels configuration."""

    console: bool = Field(default=True)
    telegram: TelegramConfig = Field(default_factory=TelegramConfig)


class LoggingConfig(BaseModel):
    """Logging sinks configuration."""

    level: str = Field(default="INFO")
    json_format: bool = Field(default=False)
    logs_dir: Optional[str] = Field(default="logs")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class AppConfig(BaseModel):
    """Top-level config.yaml structure."""

    config_version: str = Field(default="1.0")
    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    site: SiteSettings = Field(default_factory=SiteSettings)
    captcha: CaptchaConfig = Field(default_factory=CaptchaConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
