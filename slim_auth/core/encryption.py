"""
Encryption utilities for securing sensitive data in cookie sessions.

The cookie middleware only signs the payload, so anything secret must be
encrypted before it is written to the session.
"""

import base64
import hashlib
import logging
from functools import lru_cache
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

logger = logging.getLogger(__name__)

DEFAULT_KDF_ITERATIONS = 300_000
MIN_KDF_ITERATIONS = 100_000


@lru_cache(maxsize=16)
def _derive_key(secret: str, iterations: int) -> bytes:
    # Cookies must decrypt on every instance sharing the secret, so the salt
    # is derived from the secret rather than stored per deployment
    salt = hashlib.sha256(secret.encode('utf-8')).digest()[:16]

    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        iterations=iterations,
    )
    return base64.urlsafe_b64encode(kdf.derive(secret.encode('utf-8')))


class SessionCipher:
    """Encrypts and decrypts individual session values with a key derived from the cookie secret."""

    def __init__(self, secret: str, iterations: int = DEFAULT_KDF_ITERATIONS):
        if not secret:
            raise ValueError("An encryption secret is required")

        if iterations < MIN_KDF_ITERATIONS:
            logger.warning(
                "KDF iterations %s below recommended minimum, using %s",
                iterations, DEFAULT_KDF_ITERATIONS,
            )
            iterations = DEFAULT_KDF_ITERATIONS

        self.cipher = Fernet(_derive_key(secret, iterations))

    def encrypt(self, value: str) -> str:
        """
        Encrypt a string for session storage.

        Args:
            value: Plain text value

        Returns:
            URL-safe base64 Fernet token
        """
        return self.cipher.encrypt(value.encode('utf-8')).decode('utf-8')

    def decrypt(self, encrypted_value: Optional[str]) -> Optional[str]:
        """
        Decrypt a value from session storage.

        Args:
            encrypted_value: Fernet token previously produced by `encrypt`

        Returns:
            The plain text value, or None if it is missing or cannot be decrypted
        """
        if not encrypted_value:
            return None

        try:
            return self.cipher.decrypt(encrypted_value.encode('utf-8')).decode('utf-8')
        except (InvalidToken, AttributeError, UnicodeError) as e:
            logger.error(
                "Failed to decrypt session value",
                extra={"error_type": type(e).__name__},
            )
            return None
