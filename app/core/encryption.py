"""Field-level encryption, hashing and masking for sensitive values."""

import hashlib
from functools import lru_cache
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken

from app.core.config import get_settings


class DecryptionError(Exception):
    """Raised when a ciphertext cannot be decrypted with the configured key."""


@lru_cache
def _get_fernet() -> Fernet:
    return Fernet(get_settings().encryption_key.encode())


def encrypt(value: str) -> str:
    """Encrypt a string value for storage."""
    return _get_fernet().encrypt(value.encode("utf-8")).decode("utf-8")


def decrypt(token: str) -> str:
    """Decrypt a value produced by encrypt()."""
    try:
        return _get_fernet().decrypt(token.encode("utf-8")).decode("utf-8")
    except InvalidToken as e:
        raise DecryptionError("Unable to decrypt value") from e


def hash_value(value: str) -> str:
    """SHA-256 hex digest, for lookups on values that must not be stored in clear."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def mask_ssn(ssn: Optional[str]) -> Optional[str]:
    """Mask an SSN (full or last four digits) as ***-**-1234."""
    if not ssn:
        return None
    digits = "".join(ch for ch in ssn if ch.isdigit())
    return f"***-**-{digits[-4:]}"


def mask_account_number(account_number: Optional[str]) -> Optional[str]:
    """Mask an account or card number as ****1234."""
    if not account_number:
        return None
    return f"****{account_number[-4:]}"
