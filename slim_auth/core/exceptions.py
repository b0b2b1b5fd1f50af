"""Exceptions raised by the session layer."""


class SlimAuthError(Exception):
    """Base class for all session layer errors"""
    pass


class SessionConfigError(SlimAuthError, ValueError):
    """Raised when the session manager is misconfigured"""
    pass


class UserValidationError(SlimAuthError, ValueError):
    """Raised when an authenticated user is missing its id or access token"""
    pass


class AccessTokenError(SlimAuthError):
    """Raised when the session has no access token or the token is rejected"""
    pass
