"""Configuration models and loaders."""

from .config_loader import load_config, load_settings
from .config_models import AppConfig, Centre, MonitorSettings
from .settings import EnvSettings, get_env_settings, reset_env_settings

__all__ = [
    "AppConfig",
    "Centre",
    "EnvSettings",
    "MonitorSettings",
    "get_env_settings",
    "load_config",
    "load_settings",
    "reset_env_settings",
]
