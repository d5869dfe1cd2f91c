"""Versioned site configuration: URLs plus the selector map."""

from dataclasses import dataclass
from typing import Any, Dict, Mapping

from ..core.exceptions import ConfigurationError
from .selector_map import SelectorMap


@dataclass(frozen=True)
class SiteUrls:
    """Entry points on the booking site."""

    login_url: str
    logged_in_url: str
    public_url: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SiteUrls":
        normalized = {str(k).lower(): v for k, v in data.items()}
        # Older remote configs name the login page BASE_URL
        login_url = normalized.get("login_url") or normalized.get("base_url")
        if not login_url:
            raise ConfigurationError("Site config is missing url 'login_url'")
        try:
            return cls(
                login_url=str(login_url),
                logged_in_url=str(normalized["logged_in_url"]),
                public_url=str(normalized.get("public_url") or login_url),
            )
        except KeyError as e:
            raise ConfigurationError(f"Site config is missing url {e.args[0]!r}") from e

    def to_dict(self) -> Dict[str, str]:
        return {
            "login_url": self.login_url,
            "logged_in_url": self.logged_in_url,
            "public_url": self.public_url,
        }


@dataclass(frozen=True)
class SiteConfig:
    """
    Immutable snapshot handed to each check.

    A newer snapshot may replace the provider's current one at any time; a
    running check keeps the snapshot it started with.
    """

    version: int
    urls: SiteUrls
    selectors: SelectorMap

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SiteConfig":
        """
        Parse a site config document.

        Raises:
            ConfigurationError: If the version, urls or selectors are missing or invalid
        """
        if not isinstance(data, Mapping):
            raise ConfigurationError("Site config must be a mapping")
        try:
            version = int(data.get("version", 0))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Site config version must be an integer: {e}") from e

        urls = data.get("urls")
        selectors = data.get("selectors")
        if not isinstance(urls, Mapping) or not isinstance(selectors, Mapping):
            raise ConfigurationError("Site config needs 'urls' and 'selectors' mappings")

        return cls(
            version=version,
            urls=SiteUrls.from_dict(urls),
            selectors=SelectorMap.from_dict(selectors),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "urls": self.urls.to_dict(),
            "selectors": self.selectors.to_dict(),
        }
