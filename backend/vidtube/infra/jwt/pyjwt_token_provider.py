# vidtube/infra/jwt/pyjwt_token_provider.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import jwt

from vidtube.services._shared.errors import (
    ConfigError,
    TokenExpiredError,
    TokenInvalidError,
)
from vidtube.services._shared.ports.token_provider import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    TokenClaims,
    TokenProvider,
)


def decode_token(
    token: str,
    secret: str | None,
    *,
    algorithm: str = "HS256",
    expected_type: str | None = None,
) -> TokenClaims:
    """
    Verify ``token`` against ``secret`` and return its claims.

    Only the signature, ``exp`` and the ``type`` claim are checked; there is
    no store lookup here.

    :raises ConfigError: When ``secret`` is empty.
    :raises TokenExpiredError: When ``exp`` has passed.
    :raises TokenInvalidError: For any other defect (signature, structure,
        wrong type, missing or non-numeric subject).
    """
    if not secret:
        raise ConfigError("Token secret is not configured")
    if not token:
        raise TokenInvalidError()

    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"require": ["exp", "iat", "sub"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenExpiredError() from exc
    except jwt.PyJWTError as exc:
        raise TokenInvalidError() from exc

    token_type = payload.get("type")
    if expected_type is not None and token_type != expected_type:
        raise TokenInvalidError(f"Expected a {expected_type} token")

    subject = str(payload.get("sub", ""))
    if not subject.isdigit():
        raise TokenInvalidError("Invalid token subject")

    return TokenClaims(
        user_id=int(subject),
        jti=str(payload.get("jti") or ""),
        token_type=str(token_type or ""),
        issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=UTC),
        expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=UTC),
    )


@dataclass(slots=True)
class PyJWTTokenProvider(TokenProvider):
    """
    Sign access and refresh tokens with two independent HMAC secrets.

    Access tokens remain verifiable by Flask-JWT-Extended on protected routes
    as long as ``JWT_SECRET_KEY`` equals ``access_secret``; they carry the
    same ``sub``/``jti``/``type`` claims it expects.
    """

    access_secret: str | None
    refresh_secret: str | None
    access_expires: timedelta = timedelta(days=1)
    refresh_expires: timedelta = timedelta(days=10)
    algorithm: str = "HS256"

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> PyJWTTokenProvider:
        """Build the provider from a Flask config mapping."""
        return cls(
            access_secret=config.get("ACCESS_TOKEN_SECRET"),
            refresh_secret=config.get("REFRESH_TOKEN_SECRET"),
            access_expires=timedelta(seconds=int(config.get("ACCESS_TOKEN_EXPIRY", 86400))),
            refresh_expires=timedelta(seconds=int(config.get("REFRESH_TOKEN_EXPIRY", 864000))),
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
        )

    def _encode(
        self,
        *,
        user_id: int,
        token_type: str,
        secret: str | None,
        expires_delta: timedelta,
        claims: dict[str, Any] | None = None,
    ) -> str:
        if not secret:
            raise ConfigError(f"{token_type.capitalize()} token secret is not configured")
        now = datetime.now(UTC)
        payload: dict[str, Any] = dict(claims or {})
        # Reserved claims always win over caller supplied ones
        payload.update(
            {
                "sub": str(user_id),
                "iat": int(now.timestamp()),
                "exp": int((now + expires_delta).timestamp()),
                "jti": uuid4().hex,
                "type": token_type,
            }
        )
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def create_access_token(
        self,
        user_id: int,
        additional_claims: dict[str, Any] | None = None,
    ) -> str:
        return self._encode(
            user_id=user_id,
            token_type=ACCESS_TOKEN_TYPE,
            secret=self.access_secret,
            expires_delta=self.access_expires,
            claims=additional_claims,
        )

    def create_refresh_token(self, user_id: int) -> str:
        return self._encode(
            user_id=user_id,
            token_type=REFRESH_TOKEN_TYPE,
            secret=self.refresh_secret,
            expires_delta=self.refresh_expires,
        )

    def verify_access_token(self, token: str) -> TokenClaims:
        return decode_token(
            token,
            self.access_secret,
            algorithm=self.algorithm,
            expected_type=ACCESS_TOKEN_TYPE,
        )

    def verify_refresh_token(self, token: str) -> TokenClaims:
        return decode_token(
            token,
            self.refresh_secret,
            algorithm=self.algorithm,
            expected_type=REFRESH_TOKEN_TYPE,
        )
