from slim_auth.core.schemas.session import AnonymousUser, SessionUser

__all__ = ["AnonymousUser", "SessionUser"]
