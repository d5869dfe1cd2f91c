"""Session persistence."""

from .cookie_store import CookieStore, FileCookieStore
from .session_manager import SessionManager

__all__ = ["CookieStore", "FileCookieStore", "SessionManager"]
