"""DVSA Checker - automated monitoring for earlier driving test slots."""

import importlib as _importlib
from typing import TYPE_CHECKING, Any

# Application version (SemVer). The selector map carries its own integer
# version, resolved independently in dvsa_checker/selector/resolution.py.
__version__ = "1.4.0"
__license__ = "MIT"

if TYPE_CHECKING:
    from .core.config.config_loader import load_config as load_config
    from .core.config.config_loader import load_settings as load_settings
    from .core.logger import setup_logging as setup_logging
    from .core.monitor_controller import MonitorController as MonitorController
    from .selector import SelectorMap as SelectorMap
    from .selector import SiteConfigProvider as SiteConfigProvider
    from .services.browser.playwright_surface import PlaywrightSurface as PlaywrightSurface
    from .services.captcha_solver import CaptchaSolver as CaptchaSolver
    from .services.notification import NotificationService as NotificationService

# Explicit lazy-loading map: name -> (module_path, attribute_name)
_LAZY_MODULE_MAP = {
    "load_config": ("dvsa_checker.core.config.config_loader", "load_config"),
    "load_settings": ("dvsa_checker.core.config.config_loader", "load_settings"),
    "setup_logging": ("dvsa_checker.core.logger", "setup_logging"),
    "MonitorController": ("dvsa_checker.core.monitor_controller", "MonitorController"),
    "SelectorMap": ("dvsa_checker.selector", "SelectorMap"),
    "SiteConfigProvider": ("dvsa_checker.selector", "SiteConfigProvider"),
    "PlaywrightSurface": (
        "dvsa_checker.services.browser.playwright_surface",
        "PlaywrightSurface",
    ),
    "CaptchaSolver": ("dvsa_checker.services.captcha_solver", "CaptchaSolver"),
    "NotificationService": ("dvsa_checker.services.notification", "NotificationService"),
}

__all__ = list(_LAZY_MODULE_MAP.keys())


def __getattr__(name: str) -> Any:
    """Lazy import with explicit mapping - importlib based."""
    if name in _LAZY_MODULE_MAP:
        module_path, attr_name = _LAZY_MODULE_MAP[name]
        module = _importlib.import_module(module_path)
        attr = getattr(module, attr_name)
        globals()[name] = attr
        return attr
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
