# vidtube/services/auth/service.py
from __future__ import annotations

import logging

from vidtube.models.user import User
from vidtube.repositories.user import UserRepository
from vidtube.services._shared.base import BaseService
from vidtube.services._shared.errors import (
    BadRequestError,
    InternalError,
    NotFoundError,
    TokenInvalidError,
    UnauthorizedError,
)
from vidtube.services._shared.ports.denylist_store import TokenDenylistStore
from vidtube.services._shared.ports.token_provider import TokenProvider
from vidtube.services.auth.dto import (
    LoginIn,
    LoginOut,
    LogoutIn,
    RefreshIn,
    TokenPairOut,
)
from vidtube.services.identity.service import to_public

log = logging.getLogger(__name__)

STALE_REFRESH_MESSAGE = "Refresh token is expired or used"


class AuthService(BaseService):
    """
    Authentication lifecycle service (login / refresh / logout).

    Each user has at most one valid refresh token: the one stored on the user
    row. Login overwrites it, refresh swaps it with a compare-and-set, logout
    clears it. Access tokens are stateless; logout additionally pushes the
    caller's access ``jti`` into the denylist so it stops working at once.
    """

    def __init__(
        self,
        *,
        token_provider: TokenProvider,
        denylist_store: TokenDenylistStore,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param token_provider: Adapter for issuing/verifying JWTs.
        :param denylist_store: Denylist for access tokens (JTI-based).
        """
        self.tokens = token_provider
        self.denylist = denylist_store

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> LoginOut:
        """
        Authenticate credentials and issue a fresh token pair.

        :param dto: Login input.
        :returns: Public user plus access/refresh tokens.
        :raises BadRequestError: If neither username nor email is given.
        :raises NotFoundError: If no user matches the identifier.
        :raises UnauthorizedError: If the password does not match.
        """
        if not (dto.username or "").strip() and not (dto.email or "").strip():
            raise BadRequestError("username or email is required")

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get_by_username_or_email(username=dto.username, email=dto.email)
            if user is None:
                raise NotFoundError("User does not exist")
            if not user.verify_password(dto.password):
                log.warning(
                    "auth.login_failed",
                    extra={"event": "auth.login_failed", "user_id": user.id},
                )
                raise UnauthorizedError("Invalid user credentials")

            pair = self._issue_pair(user)
            repo.set_refresh_token(user.id, pair.refresh_token)
            out = LoginOut(
                user=to_public(user),
                access_token=pair.access_token,
                refresh_token=pair.refresh_token,
            )

        log.info("auth.login", extra={"event": "auth.login", "user_id": out.user.id})
        return out

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, dto: LogoutIn) -> None:
        """
        Clear the stored refresh token and revoke the current access token.

        Idempotent: logging out twice, or for a user without a stored token,
        is not an error.
        """
        with self.rw_uow() as uow:
            uow.users.clear_refresh_token(dto.user_id)

        if dto.access_jti and dto.access_expires_at is not None:
            self.denylist.revoke_jti(jti=dto.access_jti, expires_at=dto.access_expires_at)

        log.info("auth.logout", extra={"event": "auth.logout", "user_id": dto.user_id})

    # ------------------------------------------------------------------ #
    # Refresh with rotation
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Rotate a refresh token and emit a new token pair.

        :raises UnauthorizedError: Missing, invalid, expired, superseded or
            concurrently rotated refresh token.
        """
        presented = dto.refresh_token
        if not presented:
            raise UnauthorizedError("Unauthorized request")

        try:
            claims = self.tokens.verify_refresh_token(presented)
        except TokenInvalidError as exc:
            self._reject(None, type(exc).__name__)
            raise UnauthorizedError("Invalid refresh token") from exc

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(claims.user_id)
            if user is None:
                self._reject(claims.user_id, "unknown_user")
                raise UnauthorizedError("Invalid refresh token")
            if user.refresh_token != presented:
                self._reject(user.id, "not_current")
                raise UnauthorizedError(STALE_REFRESH_MESSAGE)

            pair = self._issue_pair(user)
            if not repo.compare_and_set_refresh_token(
                user.id, expected=presented, new=pair.refresh_token
            ):
                # Another request rotated this token between our read and write
                self._reject(user.id, "lost_race")
                raise UnauthorizedError(STALE_REFRESH_MESSAGE)

        log.info("auth.refresh", extra={"event": "auth.refresh", "user_id": claims.user_id})
        return pair

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _issue_pair(self, user: User) -> TokenPairOut:
        """Mint an access/refresh pair; any failure becomes an InternalError."""
        try:
            access = self.tokens.create_access_token(
                user.id,
                additional_claims={
                    "email": user.email,
                    "username": user.username,
                    "full_name": user.full_name,
                },
            )
            refresh = self.tokens.create_refresh_token(user.id)
        except Exception as exc:
            log.exception("auth.token_generation_failed", extra={"user_id": user.id})
            raise InternalError("Something went wrong while generating tokens") from exc
        return TokenPairOut(access_token=access, refresh_token=refresh)

    @staticmethod
    def _reject(user_id: int | None, reason: str) -> None:
        log.warning(
            "auth.refresh_rejected reason=%s",
            reason,
            extra={"event": "auth.refresh_rejected", "user_id": user_id},
        )
