"""Selector management: typed selector map, site config and its resolution."""

from dvsa_checker.selector.defaults import FALLBACK_SITE_CONFIG, fallback_site_config
from dvsa_checker.selector.provider import SiteConfigProvider
from dvsa_checker.selector.resolution import resolve_site_config
from dvsa_checker.selector.selector_map import SelectorMap, SelectorStep
from dvsa_checker.selector.site_config import SiteConfig, SiteUrls

__all__ = [
    "FALLBACK_SITE_CONFIG",
    "SelectorMap",
    "SelectorStep",
    "SiteConfig",
    "SiteConfigProvider",
    "SiteUrls",
    "fallback_site_config",
    "resolve_site_config",
]
