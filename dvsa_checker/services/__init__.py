"""Services used by the checker core: browser, session, bot flows, notifications."""

import importlib as _importlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .browser.playwright_surface import PlaywrightSurface as PlaywrightSurface
    from .captcha_solver import CaptchaSolver as CaptchaSolver
    from .notification.notification_service import NotificationService as NotificationService

_LAZY_MODULE_MAP = {
    "PlaywrightSurface": ("dvsa_checker.services.browser.playwright_surface", "PlaywrightSurface"),
    "CaptchaSolver": ("dvsa_checker.services.captcha_solver", "CaptchaSolver"),
    "NotificationService": (
        "dvsa_checker.services.notification.notification_service",
        "NotificationService",
    ),
}

__all__ = list(_LAZY_MODULE_MAP.keys())


def __getattr__(name: str):
    """Lazy import with explicit mapping - importlib based."""
    if name in _LAZY_MODULE_MAP:
        module_path, attr_name = _LAZY_MODULE_MAP[name]
        module = _importlib.import_module(module_path)
        attr = getattr(module, attr_name)
        globals()[name] = attr
        return attr
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
