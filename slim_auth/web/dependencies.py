"""
FastAPI dependency-injection helpers.
"""

import logging
from typing import Awaitable, Callable

from fastapi import HTTPException, Request, status

from slim_auth.core.exceptions import AccessTokenError
from slim_auth.core.schemas.session import SessionUser
from slim_auth.session.cookie_session import CookieSession
from slim_auth.session.manager import CookieSessionManager

logger = logging.getLogger(__name__)


def cookie_session_dependency(manager: CookieSessionManager) -> Callable[[Request], CookieSession]:
    """Build a dependency that returns the request's cookie session.

    Args:
        manager: Manager whose middleware is installed on the app

    Returns:
        Dependency callable for use with ``Depends``
    """

    def get_cookie_session(request: Request) -> CookieSession:
        session = manager.get_session(request)
        if session is None:
            logger.error("Cookie session requested but session middleware is not installed")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Session unavailable",
            )
        return session

    return get_cookie_session


def valid_access_token_dependency(
    manager: CookieSessionManager,
) -> Callable[[Request], Awaitable[SessionUser]]:
    """Build a dependency that requires a validated access token.

    Raises HTTP 401 when the session has no token or the validator
    rejects it. Returns the authenticated user otherwise.
    """

    async def require_valid_access_token(request: Request) -> SessionUser:
        try:
            await manager.has_valid_access_token(request)
        except AccessTokenError as e:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=str(e),
            ) from None
        return manager.get_user(request)

    return require_valid_access_token
