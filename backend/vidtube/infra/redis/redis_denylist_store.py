from datetime import UTC, datetime
from typing import cast

import redis  # type: ignore[import-untyped]


class RedisTokenDenylistStore:
    """
    Denylist for **access tokens** by jti, shared across workers.

    Each revoked jti is a marker key expiring together with the token, so
    the set never outgrows the number of live access tokens.
    """

    KEY_PREFIX = "vidtube:deny:at:"

    def __init__(self, r: redis.Redis):
        self.r = r

    @classmethod
    def _k(cls, jti: str) -> str:
        return f"{cls.KEY_PREFIX}{jti}"

    def is_revoked(self, jti: str) -> bool:
        return cast(int, self.r.exists(self._k(jti))) == 1

    def revoke_jti(self, *, jti: str, expires_at: datetime) -> None:
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)
        ttl = int(expires_at.timestamp() - datetime.now(UTC).timestamp())
        if ttl <= 0:
            # Already expired; signature checks reject it without our help
            return
        self.r.set(self._k(jti), "1", ex=ttl)
