"""
Cookie session manager.

Holds the static cookie configuration, builds the Starlette session
middleware from it, and wraps each request's session payload in a
`CookieSession`.
"""

import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Union

from pydantic import ValidationError
from starlette.middleware import Middleware
from starlette.middleware.sessions import SessionMiddleware
from starlette.requests import HTTPConnection

from slim_auth.core.config import Settings
from slim_auth.core.encryption import SessionCipher
from slim_auth.core.exceptions import AccessTokenError, SessionConfigError
from slim_auth.core.logging_config import log_security_event
from slim_auth.core.schemas.session import SessionUser
from slim_auth.core.security import TokenGenerator
from slim_auth.session.config import CookieOptions, MiddlewareConfig, SessionConfig
from slim_auth.session.cookie_session import CookieSession

logger = logging.getLogger(__name__)

AccessTokenValidator = Callable[[str], Union[bool, Awaitable[bool]]]


class CookieSessionManager:
    """Factory and configuration holder for cookie sessions."""

    def __init__(
        self,
        secret: Optional[str] = None,
        cookie_name: Optional[str] = None,
        cookie_name_suffix: Optional[str] = None,
        duration: Optional[int] = None,
        active_duration: Optional[int] = None,
        is_dev: bool = False,
        cookie_domain: Optional[str] = None,
        access_token_validator: Optional[AccessTokenValidator] = None,
        token_generator: Optional[TokenGenerator] = None,
    ):
        if not secret:
            raise SessionConfigError("A cookie secret is required.")

        options = {
            "secret": secret,
            "cookie_name": cookie_name,
            "cookie_name_suffix": cookie_name_suffix,
            # Zero or missing durations fall back to the defaults
            "duration": duration or None,
            "active_duration": active_duration or None,
            "is_dev": is_dev,
            "cookie_domain": cookie_domain,
        }
        try:
            self._config = SessionConfig(**{k: v for k, v in options.items() if v is not None})
        except ValidationError as e:
            raise SessionConfigError(f"Invalid session configuration: {e}") from e

        self._cipher = SessionCipher(self._config.secret)
        self._cookie_name = self._config.full_cookie_name
        self._validate_access_token = access_token_validator
        self._token_generator = token_generator

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: Any) -> "CookieSessionManager":
        """
        Build a manager from environment-backed settings.

        Args:
            settings: Loaded application settings
            **overrides: Constructor arguments that take precedence over settings

        Returns:
            Configured manager
        """
        options = {
            "secret": settings.secret,
            "cookie_name": settings.cookie_name,
            "cookie_name_suffix": settings.cookie_name_suffix,
            "duration": settings.duration,
            "active_duration": settings.active_duration,
            "is_dev": settings.is_dev,
            "cookie_domain": settings.cookie_domain,
        }
        options.update(overrides)
        return cls(**options)

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def cookie_name(self) -> str:
        return self._cookie_name

    def set_access_token_validator(self, validate_func: AccessTokenValidator) -> None:
        self._validate_access_token = validate_func

    def get_config(self) -> MiddlewareConfig:
        """
        Build the middleware configuration.

        ``active_duration`` lets users lengthen their session by interacting
        with the site, so they are not logged out while still using it.

        Outside development the cookie is scoped to ``cookie_domain`` so it
        is shared across subdomains. Local routing breaks with a parent
        domain, so development cookies stay host-only.
        """
        cookie = None
        if not self._config.is_dev:
            if self._config.cookie_domain:
                cookie = CookieOptions(domain=self._config.cookie_domain)
            else:
                logger.warning(
                    "No cookie domain configured outside development; "
                    "session cookie %s will be host-only",
                    self._cookie_name,
                )

        return MiddlewareConfig(
            cookie_name=self._cookie_name,
            secret=self._config.secret,
            duration=self._config.duration,
            active_duration=self._config.active_duration,
            ephemeral=False,
            http_only=True,
            secure=False,
            cookie=cookie,
        )

    def get_middleware(self) -> Middleware:
        """Get the session middleware entry for a Starlette/FastAPI app."""
        return Middleware(SessionMiddleware, **self.get_config().to_starlette_kwargs())

    def install(self, app: Any) -> None:
        """Add the session middleware to ``app``."""
        app.add_middleware(SessionMiddleware, **self.get_config().to_starlette_kwargs())
        logger.info("Session middleware installed with cookie %s", self._cookie_name)

    def get_session(self, request: HTTPConnection) -> Optional[CookieSession]:
        """
        Get the current cookie session.

        Returns None when the middleware has not attached a session to the
        request, e.g. when it is not installed or an error occurred first.
        """
        session = request.scope.get("session")
        if session is None:
            return None

        return CookieSession(
            request, session, self._cipher, token_generator=self._token_generator
        )

    def reset_session(self, request: HTTPConnection) -> Optional[CookieSession]:
        session = self.get_session(request)
        if session is None:
            return None
        return session.reset()

    def get_session_id(self, request: HTTPConnection) -> Optional[str]:
        """Returns the legacy database session record's id"""
        session = self.get_session(request)
        return session.get_session_id() if session else None

    def get_host(self, request: HTTPConnection) -> Optional[str]:
        session = self.get_session(request)
        return session.get_host() if session else None

    def get_user(self, request: HTTPConnection) -> Optional[SessionUser]:
        session = self.get_session(request)
        return session.get_user() if session else None

    def get_user_id(self, request: HTTPConnection) -> Optional[str]:
        user = self.get_user(request)
        return user.id if user else None

    def get_user_access_token(self, request: HTTPConnection) -> Optional[str]:
        user = self.get_user(request)
        return user.access_token if user else None

    def has_user_access_token(self, request: HTTPConnection) -> bool:
        return bool(self.get_user_access_token(request))

    async def has_valid_access_token(self, request: HTTPConnection) -> bool:
        """
        Check the session's access token with the injected validator.

        Raises:
            AccessTokenError: If no token is present or the validator rejects it
            SessionConfigError: If no validator has been configured

        Any exception raised by the validator propagates unchanged.
        """
        return await self._run_access_token_validation(
            self.get_user_access_token(request),
            user_id=self.get_user_id(request),
        )

    async def _run_access_token_validation(
        self, access_token: Optional[str], user_id: Optional[str] = None
    ) -> bool:
        if not access_token:
            log_security_event(
                "access_token_missing",
                "Access token check failed: no token in session",
                level=logging.WARNING,
            )
            raise AccessTokenError("No access token present.")

        if self._validate_access_token is None:
            raise SessionConfigError("No access token validator configured.")

        is_valid = self._validate_access_token(access_token)
        if inspect.isawaitable(is_valid):
            is_valid = await is_valid

        if not is_valid:
            log_security_event(
                "access_token_invalid",
                "Access token check failed: validator rejected token",
                user_id=user_id,
                level=logging.WARNING,
            )
            raise AccessTokenError("That access token is not valid.")

        return True
