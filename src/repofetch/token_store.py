"""Token storage in the OS keychain (macOS Keychain / Windows Credential Manager / Secret Service)."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

_SERVICE_NAME = "repofetch"
GITHUB_TOKEN_KEY = "github_token"
_AVAILABLE = False

try:
    import keyring
    from keyring.backends import fail

    # The "fail" backend is what keyring picks when nothing usable exists.
    _AVAILABLE = not isinstance(keyring.get_keyring(), fail.Keyring)
except Exception:
    logger.warning("keyring not available; token persistence disabled")


def is_available() -> bool:
    """Return True if the OS keychain is usable."""
    return _AVAILABLE


def load(key: str = GITHUB_TOKEN_KEY) -> str | None:
    """Load a token from the OS keychain. Returns None on failure."""
    if not _AVAILABLE:
        return None
    try:
        return keyring.get_password(_SERVICE_NAME, key)
    except Exception:
        return None


def save(key: str, value: str) -> bool:
    """Save a token to the OS keychain. Returns True on success."""
    if not _AVAILABLE or not value:
        return False
    try:
        keyring.set_password(_SERVICE_NAME, key, value)
        return True
    except Exception:
        logger.warning("Failed to save %s to keyring", key)
        return False


def delete(key: str = GITHUB_TOKEN_KEY) -> bool:
    """Delete a token from the OS keychain. Returns True on success."""
    if not _AVAILABLE:
        return False
    try:
        keyring.delete_password(_SERVICE_NAME, key)
        return True
    except Exception:
        return False
