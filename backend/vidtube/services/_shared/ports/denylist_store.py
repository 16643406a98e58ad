from __future__ import annotations

from datetime import UTC, datetime
from typing import Protocol


class TokenDenylistStore(Protocol):
    """
    Abstraction for a denylist store for **access tokens**.

    Entries only need to live until the token's own expiry; after that the
    signature check rejects the token anyway. Methods are idempotent.
    """

    def is_revoked(self, jti: str) -> bool: ...
    def revoke_jti(self, *, jti: str, expires_at: datetime) -> None: ...


class InMemoryDenylistStore(TokenDenylistStore):
    """Process-local denylist used when no Redis URL is configured.

    Only valid for a single process; production requires Redis.
    """

    def __init__(self) -> None:
        self._revoked: dict[str, datetime] = {}

    def is_revoked(self, jti: str) -> bool:
        expires_at = self._revoked.get(jti)
        if expires_at is None:
            return False
        if expires_at <= datetime.now(UTC):
            self._revoked.pop(jti, None)
            return False
        return True

    def revoke_jti(self, *, jti: str, expires_at: datetime) -> None:
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)
        now = datetime.now(UTC)
        for stale in [k for k, exp in self._revoked.items() if exp <= now]:
            del self._revoked[stale]
        self._revoked[jti] = expires_at
