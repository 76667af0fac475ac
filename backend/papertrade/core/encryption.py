"""Symmetric encryption for trading-venue API secrets stored in the DB.

Uses Fernet (AES-128-CBC + HMAC) from the `cryptography` package with a key
derived from the app secret.
"""

import base64
import hashlib
import logging

from cryptography.fernet import Fernet, InvalidToken

from papertrade.core.config import settings

logger = logging.getLogger(__name__)

# Derive a 32-byte URL-safe key from the app secret
_FERNET = Fernet(base64.urlsafe_b64encode(hashlib.sha256(settings.SECRET_KEY.encode()).digest()))


def encrypt_value(plain: str) -> str:
    """Encrypt a string value for DB storage."""
    if not plain:
        return ""
    return _FERNET.encrypt(plain.encode()).decode()


def decrypt_value(encrypted: str) -> str:
    """Decrypt a stored value back to plain text.

    Values written under a different SECRET_KEY cannot be recovered and
    decrypt to an empty string.
    """
    if not encrypted:
        return ""
    try:
        return _FERNET.decrypt(encrypted.encode()).decode()
    except InvalidToken:
        logger.warning("Stored value could not be decrypted (SECRET_KEY changed?)")
        return ""
