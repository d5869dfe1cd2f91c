"""Persistent storage for browser session cookies."""

import json
import os
import stat
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from cryptography.fernet import Fernet, InvalidToken
from loguru import logger

Cookies = List[Dict[str, Any]]


class CookieStore(ABC):
    """Abstract cookie persistence."""

    @abstractmethod
    def load(self) -> Optional[Cookies]:
        """Return saved cookies, or None if there are none."""

    @abstractmethod
    def save(self, cookies: Cookies) -> bool:
        """Persist cookies, replacing any saved ones."""

    @abstractmethod
    def clear(self) -> None:
        """Delete the saved cookies."""


class FileCookieStore(CookieStore):
    """
    Cookies kept in a single JSON file.

    Writes are atomic and the file is created with 0600 permissions. With an
    encryption key the file content is a Fernet token; without one it is
    plain JSON. A file that cannot be read back is deleted.
    """

    def __init__(
        self, path: Union[str, Path] = "data/session_cookies.json", encryption_key: str = ""
    ):
        """
        Initialize cookie store.

        Args:
            path: Cookie file location
            encryption_key: URL-safe base64 Fernet key, empty for plain JSON

        Raises:
            ValueError: If the encryption key is not a valid Fernet key
        """
        self.path = Path(path)
        self._fernet: Optional[Fernet] = Fernet(encryption_key.encode()) if encryption_key else None

    @property
    def encrypted(self) -> bool:
        return self._fernet is not None

    def _decode(self, file_data: str) -> Any:
        if self._fernet is not None:
            try:
                return json.loads(self._fernet.decrypt(file_data.encode()).decode())
            except InvalidToken:
                logger.warning("Failed to decrypt cookie file, trying unencrypted format")
        return json.loads(file_data)

    def load(self) -> Optional[Cookies]:
        if not self.path.exists():
            logger.debug("No saved session cookies")
            return None

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = self._decode(f.read())
        except (OSError, ValueError) as e:
            logger.error(f"Cookie file corrupted: {e}")
            logger.info("Removing corrupted cookie file")
            self.path.unlink(missing_ok=True)
            return None

        if not isinstance(data, list) or not all(isinstance(c, dict) for c in data):
            logger.error("Cookie file has unexpected structure, removing it")
            self.path.unlink(missing_ok=True)
            return None

        return data or None

    def save(self, cookies: Cookies) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            payload = json.dumps(cookies)
            if self._fernet is not None:
                payload = self._fernet.encrypt(payload.encode()).decode()

            # Atomic write with secure permissions from start
            fd, temp_path = tempfile.mkstemp(dir=self.path.parent, text=True, prefix=".cookies_")
            try:
                os.fchmod(fd, stat.S_IRUSR | stat.S_IWUSR)
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(temp_path, self.path)
            except OSError:
                if os.path.exists(temp_path):
                    os.unlink(temp_path)
                raise
        except OSError as e:
            logger.error(f"Failed to save session cookies: {e}")
            return False

        logger.debug(f"Saved {len(cookies)} session cookies")
        return True

    def clear(self) -> None:
        try:
            if self.path.exists():
                self.path.unlink()
                logger.info("Session cookie file deleted")
        except OSError as e:
            logger.error(f"Error deleting session cookie file: {e}")
