"""
Typed view over one request's cookie session payload.

The payload is the mutable dict Starlette's SessionMiddleware attaches to
``request.scope["session"]``. Keys owned by this module carry the ``_sa``
prefix so they do not collide with application custom fields. The access
token is encrypted before it is written, since the middleware only signs
the cookie.
"""

import logging
import time
from collections.abc import Mapping
from typing import Any, Dict, Optional

from starlette.requests import HTTPConnection

from slim_auth.core.encryption import SessionCipher
from slim_auth.core.exceptions import UserValidationError
from slim_auth.core.logging_config import log_security_event
from slim_auth.core.schemas.session import AnonymousUser, SessionUser
from slim_auth.core.security import SecureTokenGenerator, TokenGenerator

logger = logging.getLogger(__name__)

RESERVED_PREFIX = "_sa"

KEY_USER_ID = "_saUserId"
KEY_USER_ACCESS_TOKEN = "_saUserAccessToken"
KEY_USER_SET_AT = "_saUserSetAt"
KEY_USER_ANON = "_saUserAnon"
KEY_HOST = "_saHost"
KEY_OAUTH = "_saOauth"
KEY_FLAGS = "_saFlags"
# Legacy keys, cleared on every request
KEY_DB_SESSION_ID = "_saDbSessionId"
KEY_USER_LEGACY = "_saUser"

ANON_ID_PREFIX = "lo_"


def _now_ms() -> int:
    return int(time.time() * 1000)


class CookieSession:
    """Accessors for identity, host and custom fields on a cookie session."""

    def __init__(
        self,
        request: HTTPConnection,
        session: Dict[str, Any],
        cipher: SessionCipher,
        token_generator: Optional[TokenGenerator] = None,
    ):
        self._request = request
        self._session = session
        self._cipher = cipher
        self._token_generator = token_generator or SecureTokenGenerator()

        self._init()

    @property
    def session(self) -> Dict[str, Any]:
        """The underlying payload dict, mutated in place."""
        return self._session

    def set_user(
        self, user_id: Optional[str] = None, access_token: Optional[str] = None
    ) -> SessionUser:
        """
        Store the authenticated user together with the current timestamp.

        Args:
            user_id: Authenticated user id
            access_token: Access token issued for the user

        Returns:
            The stored identity

        Raises:
            UserValidationError: If either value is missing
        """
        if not user_id:
            raise UserValidationError("User must have id")

        if not access_token:
            raise UserValidationError("User must have accessToken")

        self._session[KEY_USER_ID] = user_id
        self._session[KEY_USER_ACCESS_TOKEN] = self._cipher.encrypt(access_token)
        self._session[KEY_USER_SET_AT] = _now_ms()

        log_security_event("user_set", "Authenticated user stored in session", user_id=user_id)

        return self.get_user()

    def get_user(self) -> SessionUser:
        return SessionUser(
            id=self._session.get(KEY_USER_ID),
            access_token=self._cipher.decrypt(self._session.get(KEY_USER_ACCESS_TOKEN)),
            set_at=self._session.get(KEY_USER_SET_AT),
        )

    def get_user_anon(self) -> Optional[AnonymousUser]:
        anon = self._session.get(KEY_USER_ANON)
        if anon is None:
            return None
        return AnonymousUser(**anon)

    def get_host(self) -> Optional[str]:
        return self._session.get(KEY_HOST)

    def get_session_id(self) -> Optional[str]:
        # Cleared by _init, so always None once a view exists
        return self._session.get(KEY_DB_SESSION_ID)

    def get_custom_field(self, key: str, default: Any = None) -> Any:
        """Return the stored value, or ``default`` when it is missing or falsy."""
        return self._session.get(key) or default

    def set_custom_field(self, key: str, value: Any) -> None:
        self._session[key] = value

    def ensure_custom_field_object(self, key: str) -> None:
        """Replace the value under ``key`` with an empty dict unless it already is a mapping or list."""
        if isinstance(self._session.get(key), (Mapping, list)):
            return
        self.set_custom_field(key, {})

    def reset(self) -> "CookieSession":
        """
        Drop everything stored in the session and re-populate the defaults.

        The visitor receives a fresh anonymous identity. The middleware
        writes the new payload on the outgoing response.
        """
        user_id = self._session.get(KEY_USER_ID)
        self._session.clear()
        self._init()

        log_security_event("session_reset", "Cookie session reset", user_id=user_id)
        return self

    def _init(self) -> None:
        session = self._session

        if KEY_DB_SESSION_ID in session:
            session[KEY_DB_SESSION_ID] = None

        if KEY_USER_LEGACY in session:
            session[KEY_USER_LEGACY] = None

        if not session.get(KEY_OAUTH):
            session[KEY_OAUTH] = {}

        if not session.get(KEY_HOST):
            session[KEY_HOST] = self._request.headers.get("host")

        if not session.get(KEY_USER_ANON) and not session.get(KEY_USER_ID):
            session[KEY_USER_ANON] = {"id": f"{ANON_ID_PREFIX}{self._token_generator.generate()}"}
            logger.debug("Assigned anonymous identity to new session")

        if not session.get(KEY_FLAGS):
            # Key-value flags map
            session[KEY_FLAGS] = {}
