"""Fernet helpers for secrets stored at rest (per-user API keys)."""

from __future__ import annotations

import base64
import hashlib

from cryptography.fernet import Fernet, InvalidToken
from flask import current_app


def _fernet() -> Fernet:
    key = current_app.config.get("API_KEY_ENCRYPTION_KEY")
    if not key:
        # Derive a stable 32-byte key from SECRET_KEY so dev setups work unconfigured.
        digest = hashlib.sha256(current_app.config["SECRET_KEY"].encode()).digest()
        key = base64.urlsafe_b64encode(digest)
    try:
        return Fernet(key)
    except ValueError as exc:
        raise ValueError(
            "API_KEY_ENCRYPTION_KEY is invalid. Make sure it is a valid 32-byte base64 string."
        ) from exc


def encrypt(text: str) -> str:
    return _fernet().encrypt(text.encode()).decode()


def decrypt(token: str) -> str:
    """Decrypt a stored secret; raises ``InvalidToken`` when the key has rotated."""
    return _fernet().decrypt(token.encode()).decode()


def mask_secret(secret: str) -> str:
    """Show the first and last four characters only."""
    if len(secret) <= 8:
        return "*" * len(secret)
    return f"{secret[:4]}...{secret[-4:]}"


__all__ = ["encrypt", "decrypt", "mask_secret", "InvalidToken"]
