"""Fernet encryption for provider API keys stored on the user row."""

import logging

from cryptography.fernet import Fernet, InvalidToken

from app.core.config import settings

logger = logging.getLogger(__name__)

_fernet: Fernet | None = None


def _get_fernet() -> Fernet:
    global _fernet
    if _fernet is None:
        if not settings.fernet_key:
            raise ValueError("FERNET_KEY is not configured, provider keys cannot be stored")
        _fernet = Fernet(settings.fernet_key.encode())
    return _fernet


def reset_fernet() -> None:
    """Forget the cached cipher (after FERNET_KEY changes, e.g. in tests)."""
    global _fernet
    _fernet = None


def encrypt_value(plaintext: str) -> bytes:
    return _get_fernet().encrypt(plaintext.encode("utf-8"))


def decrypt_value(ciphertext: bytes | None) -> str:
    """Plaintext of *ciphertext*; empty string when missing or unreadable."""
    if not ciphertext:
        return ""
    try:
        return _get_fernet().decrypt(ciphertext).decode("utf-8")
    except InvalidToken:
        logger.error("Stored provider key cannot be decrypted with the current FERNET_KEY")
        return ""
