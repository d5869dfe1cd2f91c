"""Configuration loader with YAML and environment variable support."""

import os
import re
from pathlib import Path
from typing import Any, Dict, Final, List, Optional, Union

import yaml
from dotenv import load_dotenv
from loguru import logger
from pydantic import SecretStr, ValidationError

from ..exceptions import ConfigurationError
from .config_models import AppConfig, Centre, MonitorSettings
from .settings import EnvSettings, get_env_settings

CURRENT_CONFIG_VERSION: Final[str] = "1.0"
SUPPORTED_CONFIG_VERSIONS: Final[frozenset] = frozenset({"1.0"})

_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")


def load_env_variables(env_path: Union[str, Path, None] = None) -> None:
    """Load environment variables from a .env file (project root by default)."""
    path = Path(env_path) if env_path else Path(__file__).parents[3] / ".env"
    if path.exists():
        load_dotenv(path)
        logger.debug(f"Loaded environment variables from {path}")


def substitute_env_vars(value: Any) -> Any:
    """
    Recursively substitute ${VAR_NAME} references with environment values.

    Unset variables become empty strings.
    """
    if isinstance(value, str):
        for match in _ENV_PATTERN.findall(value):
            env_value = os.getenv(match)
            if env_value is None:
                logger.debug(f"Environment variable '{match}' not set, using empty string")
                env_value = ""
            value = value.replace(f"${{{match}}}", env_value)
        return value
    if isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [substitute_env_vars(item) for item in value]
    return value


def check_config_version(config: Dict[str, Any]) -> None:
    """
    Validate the config.yaml schema version.

    Raises:
        ConfigurationError: If the version is present but unsupported
    """
    version = config.get("config_version")
    if version is None:
        logger.warning(
            f"config_version missing, assuming {CURRENT_CONFIG_VERSION}. "
            f"Add 'config_version: \"{CURRENT_CONFIG_VERSION}\"' to your config.yaml."
        )
        return
    if str(version) not in SUPPORTED_CONFIG_VERSIONS:
        raise ConfigurationError(
            f"Unsupported configuration version: {version}. "
            f"Supported versions: {', '.join(sorted(SUPPORTED_CONFIG_VERSIONS))}.",
            details={"config_version": version},
        )


def _read_yaml(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data: Any = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping at the top level")
    return data


def apply_env_overrides(config: AppConfig, env: EnvSettings) -> AppConfig:
    """Return a copy of the config with DVSA_* environment values applied."""
    updates: Dict[str, Any] = {}
    if env.log_level:
        updates["logging"] = config.logging.model_copy(update={"level": env.log_level.upper()})
    if env.cookie_encryption_key:
        updates["session"] = config.session.model_copy(
            update={"encryption_key": env.cookie_encryption_key}
        )
    if env.remote_config_url:
        updates["site"] = config.site.model_copy(update={"remote_url": env.remote_config_url})
    if env.telegram_bot_token or env.telegram_chat_id:
        telegram = config.notifications.telegram.model_copy(
            update={
                "enabled": True,
                "bot_token": env.telegram_bot_token or config.notifications.telegram.bot_token,
                "chat_id": env.telegram_chat_id or config.notifications.telegram.chat_id,
            }
        )
        updates["notifications"] = config.notifications.model_copy(update={"telegram": telegram})
    return config.model_copy(update=updates) if updates else config


def load_config(
    config_path: Union[str, Path] = "config/config.yaml", env: Optional[EnvSettings] = None
) -> AppConfig:
    """
    Load application configuration from YAML with environment substitution.

    A missing file yields the defaults (with a warning); the checker is usable
    without any config.yaml.

    Args:
        config_path: Path to YAML configuration file
        env: Environment settings, defaults to the process-wide instance

    Returns:
        Validated AppConfig

    Raises:
        ConfigurationError: If the file is malformed or fails validation
    """
    load_env_variables()
    env = env or get_env_settings()

    path = Path(config_path)
    if path.exists():
        logger.info(f"Loading config from {path}")
        try:
            raw = substitute_env_vars(_read_yaml(path))
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    else:
        logger.warning(f"Config file not found: {path}. Using defaults.")
        raw = {}

    check_config_version(raw)

    try:
        config = AppConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {path}: {e}") from e

    return apply_env_overrides(config, env)


def _resolve_centres(entries: List[Any]) -> List[Centre]:
    """
    Turn settings entries into Centre objects.

    An entry may be a bare centre id (looked up in the bundled list) or a
    mapping with ``id`` and ``name``.
    """
    from ...data.test_centres import find_centre

    centres: List[Centre] = []
    for entry in entries:
        if isinstance(entry, (str, int)):
            centre = find_centre(str(entry))
            if centre is None:
                raise ConfigurationError(
                    f"Unknown test centre id: {entry}. Give it as {{id: ..., name: ...}} instead."
                )
            centres.append(centre)
        else:
            centres.append(Centre.model_validate(entry))
    return centres


def load_settings(
    settings_path: Union[str, Path] = "config/settings.yaml", env: Optional[EnvSettings] = None
) -> MonitorSettings:
    """
    Load the monitoring request from YAML.

    Settings are read only; the checker never writes them back.

    Raises:
        ConfigurationError: If the file is missing, malformed or invalid
    """
    path = Path(settings_path)
    if not path.exists():
        raise ConfigurationError(f"Settings file not found: {path}")

    env = env or get_env_settings()
    try:
        raw = substitute_env_vars(_read_yaml(path))
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    for key in ("selected_centres", "selectedCentres"):
        if key in raw:
            raw[key] = _resolve_centres(raw[key] or [])

    if env.captcha_api_key and not (raw.get("captcha_api_key") or raw.get("captchaApiKey")):
        raw["captcha_api_key"] = env.captcha_api_key.get_secret_value()

    try:
        settings = MonitorSettings.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings in {path}: {e}") from e

    logger.info(f"Settings loaded: {settings!r}")
    return settings


def mask_secret(value: Optional[SecretStr]) -> str:
    """Render a secret for logs: whether it is set, never its content."""
    return "set" if value is not None and value.get_secret_value() else "not set"
