"""Password hashing helpers backed by Werkzeug."""

from __future__ import annotations

from flask import current_app, has_app_context
from werkzeug.security import check_password_hash, generate_password_hash

DEFAULT_HASH_METHOD = "scrypt"


def _configured_method() -> str:
    if has_app_context():
        return str(current_app.config.get("PASSWORD_HASH_METHOD") or DEFAULT_HASH_METHOD)
    return DEFAULT_HASH_METHOD


def hash_password(plaintext: str, method: str | None = None) -> str:
    """
    Return a salted one-way hash of ``plaintext``.

    :param plaintext: Raw password.
    :param method: Werkzeug method string including its cost factor
        (``"scrypt:32768:8:1"``, ``"pbkdf2:sha256:600000"``). Defaults to the
        ``PASSWORD_HASH_METHOD`` setting of the active app.
    :raises ValueError: If ``plaintext`` is empty.
    """
    if not isinstance(plaintext, str) or not plaintext:
        raise ValueError("Password must be a non-empty string.")
    return generate_password_hash(plaintext, method=method or _configured_method())


def verify_password(plaintext: str | None, password_hash: str | None) -> bool:
    """
    Check ``plaintext`` against ``password_hash`` in constant time.

    Never raises: an empty or malformed hash simply does not match.
    """
    if not plaintext or not password_hash:
        return False
    try:
        return bool(check_password_hash(password_hash, plaintext))
    except ValueError:
        return False
