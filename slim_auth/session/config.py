"""
Session manager configuration.

`SessionConfig` is the validated, immutable set of options a manager is
built with. `MiddlewareConfig` is the contract handed to the cookie
signing middleware.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from slim_auth.core.config import (
    DEFAULT_ACTIVE_DURATION,
    DEFAULT_COOKIE_NAME,
    DEFAULT_DURATION,
)


def build_cookie_name(cookie_name: Optional[str], suffix: Optional[str] = None) -> str:
    """
    Compose the effective cookie name.

    Args:
        cookie_name: Base cookie name, falls back to "session" when empty
        suffix: Optional suffix appended as ``__<suffix>``

    Returns:
        The cookie name the middleware reads and writes
    """
    name = cookie_name or DEFAULT_COOKIE_NAME
    if suffix:
        return f"{name}__{suffix}"
    return name


class SessionConfig(BaseModel):
    """Immutable session manager options"""

    model_config = ConfigDict(frozen=True)

    secret: str = Field(..., min_length=1)
    cookie_name: str = DEFAULT_COOKIE_NAME
    cookie_name_suffix: Optional[str] = None
    # Seconds
    duration: int = Field(DEFAULT_DURATION, gt=0)
    active_duration: int = Field(DEFAULT_ACTIVE_DURATION, gt=0)
    is_dev: bool = False
    cookie_domain: Optional[str] = None

    @property
    def full_cookie_name(self) -> str:
        return build_cookie_name(self.cookie_name, self.cookie_name_suffix)


class CookieOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    domain: str


class MiddlewareConfig(BaseModel):
    """Options consumed by the cookie signing middleware."""

    model_config = ConfigDict(frozen=True)

    cookie_name: str
    secret: str
    duration: int
    # Sliding window: activity within this period keeps the cookie alive
    active_duration: int
    # When true, the cookie expires when the browser closes
    ephemeral: bool = False
    # When true, the cookie is not accessible from javascript
    http_only: bool = True
    # When true, the cookie is only sent over TLS
    secure: bool = False
    cookie: Optional[CookieOptions] = None

    def to_starlette_kwargs(self) -> Dict[str, Any]:
        """Map the contract onto `starlette.middleware.sessions.SessionMiddleware` arguments.

        Starlette always sets HttpOnly and re-signs the cookie on every
        response, so each request renews the full ``max_age``.
        """
        return {
            "secret_key": self.secret,
            "session_cookie": self.cookie_name,
            "max_age": None if self.ephemeral else self.duration,
            "path": "/",
            "same_site": "lax",
            "https_only": self.secure,
            "domain": self.cookie.domain if self.cookie else None,
        }
