"""
Test data factories for consistent test data generation

These factories build Starlette requests carrying a session payload and
deterministic token generators for anonymous identities.
"""

from typing import Any, Dict, List, Optional, Tuple

from starlette.requests import Request

from slim_auth.core.encryption import SessionCipher

TEST_SECRET = "test-secret-key-for-testing-only"


class SequentialTokenGenerator:
    """Deterministic token generator: tok0001, tok0002, ..."""

    def __init__(self, prefix: str = "tok"):
        self.prefix = prefix
        self.calls = 0

    def generate(self) -> str:
        self.calls += 1
        return f"{self.prefix}{self.calls:04d}"


class RequestFactory:
    """Factory for creating Starlette requests with an attached session"""

    @staticmethod
    def create_request(
        host: Optional[str] = "example.com",
        session: Optional[Dict[str, Any]] = None,
        with_session: bool = True,
    ) -> Request:
        """Create a request as the session middleware would hand it to a route"""
        headers: List[Tuple[bytes, bytes]] = []
        if host is not None:
            headers.append((b"host", host.encode("latin-1")))

        scope: Dict[str, Any] = {
            "type": "http",
            "method": "GET",
            "path": "/",
            "headers": headers,
            "query_string": b"",
        }
        if with_session:
            scope["session"] = {} if session is None else session
        return Request(scope)

    @staticmethod
    def create_authenticated_session(
        user_id: str = "user-123",
        access_token: str = "access-token-abc",
        secret: str = TEST_SECRET,
    ) -> Dict[str, Any]:
        """Create a payload as left behind by a previous set_user call"""
        return {
            "_saUserId": user_id,
            "_saUserAccessToken": SessionCipher(secret).encrypt(access_token),
            "_saUserSetAt": 1700000000000,
            "_saHost": "example.com",
            "_saOauth": {},
            "_saFlags": {},
        }
