"""
Global test configuration and fixtures for SlimAuth

Provides request factories, deterministic token generation, configured
session managers and a FastAPI app wired with the session middleware.
"""

from typing import Optional

import pytest
from fastapi import Depends, FastAPI, Request
from fastapi.testclient import TestClient

from slim_auth.session.cookie_session import CookieSession
from slim_auth.session.manager import CookieSessionManager
from slim_auth.web.dependencies import (
    cookie_session_dependency,
    valid_access_token_dependency,
)
from tests.utils.factories import TEST_SECRET, RequestFactory, SequentialTokenGenerator

VALID_TOKEN = "good-token"


# ============================================================================
# Session Fixtures
# ============================================================================

@pytest.fixture(scope="function")
def token_generator():
    """Deterministic anonymous id source"""
    return SequentialTokenGenerator()


@pytest.fixture(scope="function")
def make_request():
    """Build a request carrying a session payload"""
    return RequestFactory.create_request


@pytest.fixture(scope="function")
def manager(token_generator):
    """Session manager in development mode with a validator accepting VALID_TOKEN"""

    async def validator(access_token: str) -> bool:
        return access_token == VALID_TOKEN

    return CookieSessionManager(
        secret=TEST_SECRET,
        is_dev=True,
        access_token_validator=validator,
        token_generator=token_generator,
    )


# ============================================================================
# Application Client Fixtures
# ============================================================================

@pytest.fixture(scope="function")
def app(manager):
    """FastAPI app with the session middleware installed"""
    app = FastAPI()
    manager.install(app)

    get_cookie_session = cookie_session_dependency(manager)
    require_valid_access_token = valid_access_token_dependency(manager)

    @app.get("/session")
    def read_session(session: CookieSession = Depends(get_cookie_session)):
        anon = session.get_user_anon()
        user = session.get_user()
        return {
            "anon_id": anon.id if anon else None,
            "host": session.get_host(),
            "user_id": user.id,
            "visits": session.get_custom_field("visits", 0),
        }

    @app.post("/login")
    def login(
        user_id: Optional[str] = None,
        access_token: Optional[str] = None,
        session: CookieSession = Depends(get_cookie_session),
    ):
        user = session.set_user(user_id, access_token)
        return {"user_id": user.id}

    @app.post("/visit")
    def visit(session: CookieSession = Depends(get_cookie_session)):
        visits = session.get_custom_field("visits", 0) + 1
        session.set_custom_field("visits", visits)
        return {"visits": visits}

    @app.post("/reset")
    def reset(request: Request):
        session = manager.reset_session(request)
        return {"anon_id": session.get_user_anon().id}

    @app.get("/protected")
    def protected(user=Depends(require_valid_access_token)):
        return {"user_id": user.id}

    return app


@pytest.fixture(scope="function")
def client(app):
    """Create FastAPI test client"""
    with TestClient(app) as test_client:
        yield test_client
