"""User-supplied LLM provider keys.

Keys are validated by shape, stored Fernet-encrypted on the user row and
never returned. At analysis time a user's own key wins; otherwise the
server's environment key is used.
"""

from __future__ import annotations

import logging

from app.core.config import settings
from app.core.encryption import decrypt_value, encrypt_value
from app.models.user import User

logger = logging.getLogger(__name__)

# provider name → (required prefix, User column, Settings attribute)
PROVIDERS: dict[str, tuple[str, str, str]] = {
    "openai": ("sk-", "openai_api_key", "openai_api_key"),
    "anthropic": ("sk-ant-", "anthropic_api_key", "anthropic_api_key"),
    "google": ("", "google_api_key", "google_api_key"),
    "perplexity": ("pplx-", "perplexity_api_key", "perplexity_api_key"),
}

MIN_KEY_LENGTH = 20


def normalize_provider(provider: str) -> str | None:
    name = (provider or "").strip().lower()
    return name if name in PROVIDERS else None


def validate_api_key(provider: str, api_key: str) -> bool:
    """Shape check only; no call is made to the vendor."""
    name = normalize_provider(provider)
    if name is None or not api_key:
        return False
    prefix = PROVIDERS[name][0]
    return api_key.startswith(prefix) and len(api_key) > MIN_KEY_LENGTH


def set_user_key(user: User, provider: str, api_key: str) -> None:
    name = normalize_provider(provider)
    if name is None:
        raise ValueError(f"Unknown provider: {provider}")
    setattr(user, PROVIDERS[name][1], encrypt_value(api_key))
    logger.info("Stored %s key for user %s", name, user.id)


def clear_user_key(user: User, provider: str) -> bool:
    """Remove the user's key; False when there was none."""
    name = normalize_provider(provider)
    if name is None:
        raise ValueError(f"Unknown provider: {provider}")
    column = PROVIDERS[name][1]
    had_key = getattr(user, column) is not None
    setattr(user, column, None)
    if had_key:
        logger.info("Removed %s key for user %s", name, user.id)
    return had_key


def stored_providers(user: User) -> list[str]:
    """Providers for which the user saved a key."""
    return [name for name, (_, column, _) in PROVIDERS.items() if getattr(user, column)]


def resolve_keys(user: User | None) -> dict[str, str]:
    """``{provider: key}`` for every provider with a usable key."""
    keys: dict[str, str] = {}
    for name, (_, column, setting) in PROVIDERS.items():
        key = decrypt_value(getattr(user, column)) if user is not None else ""
        if not key:
            key = getattr(settings, setting, "")
        if key:
            keys[name] = key
    return keys


def configured_providers(user: User | None) -> list[str]:
    return list(resolve_keys(user))
