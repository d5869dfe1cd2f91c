"""Automation surface abstraction and its Playwright implementation."""

from .surface import AutomationPage, AutomationSurface, ElementRef, open_page

__all__ = ["AutomationPage", "AutomationSurface", "ElementRef", "open_page"]
