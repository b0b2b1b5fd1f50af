"""
Security utilities for SlimAuth

Random identifier generation for anonymous visitors. The generator is an
injectable interface so tests can substitute a deterministic one.
"""

import secrets
from typing import Protocol, runtime_checkable

# 16 bytes of entropy, rendered as 32 hex characters
DEFAULT_TOKEN_BYTES = 16


@runtime_checkable
class TokenGenerator(Protocol):
    """Anything that can produce a fresh random token string."""

    def generate(self) -> str:
        ...


class SecureTokenGenerator:
    """Token generator backed by the `secrets` module."""

    def __init__(self, nbytes: int = DEFAULT_TOKEN_BYTES):
        if nbytes < 1:
            raise ValueError("Token length must be at least one byte")
        self.nbytes = nbytes

    def generate(self) -> str:
        """
        Generate a cryptographically secure hex token.

        Returns:
            A random hex string of ``2 * nbytes`` characters
        """
        return secrets.token_hex(self.nbytes)


def generate_secure_token(nbytes: int = DEFAULT_TOKEN_BYTES) -> str:
    """Shortcut for a one-off secure token."""
    return SecureTokenGenerator(nbytes).generate()
