"""Choosing between the bundled, cached and remote site configs."""

from typing import Optional

from .site_config import SiteConfig


def resolve_site_config(
    cached: Optional[SiteConfig], remote: Optional[SiteConfig], fallback: SiteConfig
) -> SiteConfig:
    """
    Pick the site config to use.

    The local config is the cached one when present, otherwise the bundled
    fallback. A remote config (``None`` when unavailable) replaces it only if
    its version is strictly greater; otherwise the local config is returned
    unchanged.

    Args:
        cached: Last remote config persisted locally, if any
        remote: Freshly fetched and validated remote config, if any
        fallback: Bundled config

    Returns:
        The chosen SiteConfig
    """
    local = cached if cached is not None else fallback
    if remote is not None and remote.version > local.version:
        return remote
    return local
