"""Cookie session view and manager."""

from .config import MiddlewareConfig, SessionConfig, build_cookie_name
from .cookie_session import CookieSession
from .manager import CookieSessionManager

__all__ = [
    "CookieSession",
    "CookieSessionManager",
    "MiddlewareConfig",
    "SessionConfig",
    "build_cookie_name",
]
