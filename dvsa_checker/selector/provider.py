"""Site config provider: bundled fallback, local cache and remote updates."""

import asyncio
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Optional

import aiohttp
import yaml
from loguru import logger

from ..core.config.config_models import SiteSettings
from ..core.exceptions import ConfigurationError
from ..core.retry import get_remote_config_retry
from .defaults import fallback_site_config
from .resolution import resolve_site_config
from .site_config import SiteConfig


def _load_yaml_config(path: Path) -> Optional[SiteConfig]:
    """Read a site config file; invalid files are logged and ignored."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
        return SiteConfig.from_dict(data)
    except (OSError, yaml.YAMLError, ConfigurationError) as e:
        logger.warning(f"Ignoring site config {path}: {e}")
        return None


class SiteConfigProvider:
    """Owns the current SiteConfig snapshot and keeps it up to date."""

    def __init__(
        self,
        settings: Optional[SiteSettings] = None,
        fallback: Optional[SiteConfig] = None,
        session_factory: Callable[..., aiohttp.ClientSession] = aiohttp.ClientSession,
    ):
        """
        Initialize provider and resolve the local config.

        Args:
            settings: Selector map sources (defaults: bundled map only)
            fallback: Override for the bundled fallback (tests)
            session_factory: aiohttp session factory (tests)
        """
        self.settings = settings or SiteSettings(local_file=None)
        self._session_factory = session_factory
        self._fallback = fallback or self._load_fallback()
        self._cached = self._load_cache()
        self._current = resolve_site_config(self._cached, None, self._fallback)
        logger.info(f"Site config version {self._current.version} in use")

    @property
    def current(self) -> SiteConfig:
        """The snapshot to hand to the next check."""
        return self._current

    def _load_fallback(self) -> SiteConfig:
        if self.settings.local_file:
            path = Path(self.settings.local_file)
            if path.exists():
                local = _load_yaml_config(path)
                if local is not None:
                    logger.info(
                        f"Fallback site config loaded from {path} (version {local.version})"
                    )
                    return local
        return fallback_site_config()

    def _load_cache(self) -> Optional[SiteConfig]:
        path = Path(self.settings.cache_file)
        if not path.exists():
            return None
        return _load_yaml_config(path)

    def _save_cache(self, config: SiteConfig) -> None:
        path = Path(self.settings.cache_file)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=".site_config_", text=True)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    yaml.safe_dump(config.to_dict(), f, sort_keys=False)
                os.replace(temp_path, path)
            except Exception:
                if os.path.exists(temp_path):
                    os.unlink(temp_path)
                raise
            logger.debug(f"Site config cached to {path}")
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Could not cache site config: {e}")

    @get_remote_config_retry()
    async def _download(self, url: str) -> Any:
        timeout = aiohttp.ClientTimeout(total=self.settings.remote_timeout_seconds)
        async with self._session_factory(timeout=timeout) as session:
            async with session.get(url) as response:
                response.raise_for_status()
                text = await response.text()
        # YAML is a superset of JSON, so both formats parse here
        return yaml.safe_load(text)

    async def fetch_remote(self) -> Optional[SiteConfig]:
        """
        Fetch and validate the remote config.

        Returns:
            The remote SiteConfig, or None if unavailable or invalid
        """
        url = self.settings.remote_url
        if not url:
            return None
        try:
            data = await self._download(url)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"Remote site config unavailable: {e}")
            return None
        except yaml.YAMLError as e:
            logger.warning(f"Remote site config is not valid YAML/JSON: {e}")
            return None

        try:
            return SiteConfig.from_dict(data)
        except ConfigurationError as e:
            logger.warning(f"Remote site config rejected: {e.message}")
            return None

    async def refresh(self) -> SiteConfig:
        """
        Check the remote source and rotate the current snapshot if it is newer.

        Returns:
            The snapshot now in use
        """
        remote = await self.fetch_remote()
        chosen = resolve_site_config(self._cached, remote, self._fallback)
        if remote is not None and chosen is remote:
            logger.info(
                f"Site config updated from version {self._current.version} to {remote.version}"
            )
            self._cached = remote
            self._save_cache(remote)
        elif remote is not None:
            logger.debug(
                f"Remote site config version {remote.version} is not newer than "
                f"{chosen.version}, keeping local"
            )
        self._current = chosen
        return chosen
