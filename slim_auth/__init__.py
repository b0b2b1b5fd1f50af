"""SlimAuth: typed accessors over signed cookie sessions."""

from slim_auth.core.exceptions import (
    AccessTokenError,
    SessionConfigError,
    SlimAuthError,
    UserValidationError,
)
from slim_auth.core.schemas.session import AnonymousUser, SessionUser
from slim_auth.session import CookieSession, CookieSessionManager

__version__ = "1.0.0"

__all__ = [
    "AccessTokenError",
    "AnonymousUser",
    "CookieSession",
    "CookieSessionManager",
    "SessionConfigError",
    "SessionUser",
    "SlimAuthError",
    "UserValidationError",
]
