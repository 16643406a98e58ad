# vidtube/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from vidtube.services.identity.dto import UserPublicOut

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login. At least one of ``username``/``email`` is required.

    :param password: Raw password (to be verified).
    :type password: str
    :param username: Username (normalized).
    :type username: str | None
    :param email: User email (normalized).
    :type email: str | None
    """

    password: str
    username: str | None = None
    email: str | None = None


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Encoded refresh JWT, from cookie or body.
    :type refresh_token: str | None
    """

    refresh_token: str | None


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """
    Input DTO for logout.

    :param user_id: Authenticated user.
    :type user_id: int
    :param access_jti: ``jti`` of the access token used for the request.
    :type access_jti: str | None
    :param access_expires_at: Expiry of that access token.
    :type access_expires_at: datetime | None
    """

    user_id: int
    access_jti: str | None = None
    access_expires_at: datetime | None = None


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class LoginOut:
    """
    Output DTO for a successful login.

    :param user: Public projection of the authenticated user.
    :type user: UserPublicOut
    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    user: UserPublicOut
    access_token: str
    refresh_token: str
