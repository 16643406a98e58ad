from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """
    Verified content of a JWT.

    :ivar user_id: Subject, parsed as an integer user id.
    :ivar jti: Unique token identifier.
    :ivar token_type: ``"access"`` or ``"refresh"``.
    :ivar issued_at: ``iat`` as an aware UTC datetime.
    :ivar expires_at: ``exp`` as an aware UTC datetime.
    """

    user_id: int
    jti: str
    token_type: str
    issued_at: datetime
    expires_at: datetime


class TokenProvider(Protocol):
    """
    Port for issuing and verifying the two token kinds.

    Access and refresh tokens are signed with distinct secrets and lifetimes;
    verifying a token with the wrong method fails even if its signature would
    otherwise match.
    """

    def create_access_token(
        self,
        user_id: int,
        additional_claims: dict[str, Any] | None = None,
    ) -> str: ...

    def create_refresh_token(self, user_id: int) -> str: ...

    def verify_access_token(self, token: str) -> TokenClaims:
        """:raises TokenExpiredError | TokenInvalidError | ConfigError:"""
        ...

    def verify_refresh_token(self, token: str) -> TokenClaims:
        """:raises TokenExpiredError | TokenInvalidError | ConfigError:"""
        ...
