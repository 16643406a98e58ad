"""Unit tests for password hashing helpers."""

from __future__ import annotations

import pytest

from vidtube.core.security import hash_password, verify_password


def test_hash_uses_configured_method(app) -> None:
    hashed = hash_password("s3cret-pass")
    assert hashed.startswith("pbkdf2:sha256:1000$")
    assert verify_password("s3cret-pass", hashed) is True


def test_explicit_method_wins(app) -> None:
    hashed = hash_password("s3cret-pass", method="pbkdf2:sha256:2000")
    assert hashed.startswith("pbkdf2:sha256:2000$")


def test_hashes_are_salted(app) -> None:
    assert hash_password("same") != hash_password("same")


def test_empty_password_rejected(app) -> None:
    with pytest.raises(ValueError):
        hash_password("")


@pytest.mark.parametrize(
    ("plain", "hashed"),
    [("x", ""), ("", "pbkdf2:sha256:1000$salt$abc"), ("x", None), ("x", "not-a-hash")],
)
def test_verify_never_raises(plain, hashed) -> None:
    assert verify_password(plain, hashed) is False
