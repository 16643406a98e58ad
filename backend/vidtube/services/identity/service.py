"""
IdentityService
===============

Aggregate service responsible for managing the `User` aggregate outside of
the token lifecycle:
- Registration (including avatar / cover image upload)
- Account details and profile images
- Password lifecycle
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from vidtube.models.user import User
from vidtube.repositories.user import UserRepository
from vidtube.services._shared.base import BaseService
from vidtube.services._shared.errors import (
    BadRequestError,
    ConflictError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
    violates,
)
from vidtube.services._shared.ports.media_uploader import MediaUploader
from vidtube.services.identity.dto import (
    AccountUpdateIn,
    UserPasswordChangeIn,
    UserPublicOut,
    UserRegisterIn,
)

log = logging.getLogger(__name__)

DUPLICATE_USER_MESSAGE = "User with email or username already exists"


def to_public(user: User) -> UserPublicOut:
    """Project a :class:`User` onto its public-safe DTO."""
    return UserPublicOut(
        id=user.id,
        username=user.username,
        email=user.email,
        full_name=user.full_name,
        avatar_url=user.avatar_url,
        cover_image_url=user.cover_image_url,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


class IdentityService(BaseService):
    """
    Application service for the `User` aggregate.

    Responsibilities
    ----------------
    - Register users ensuring username/email uniqueness.
    - Retrieve and update account details and profile images.
    - Manage password lifecycle.
    """

    def __init__(self, *, media_uploader: MediaUploader) -> None:
        self.media = media_uploader

    # --------------------------------------------------------------------- #
    # Registration
    # --------------------------------------------------------------------- #

    def register_user(self, dto: UserRegisterIn) -> UserPublicOut:
        """
        Register a new user.

        :param dto: User registration input DTO.
        :type dto: UserRegisterIn
        :returns: Public-safe user DTO. No tokens are issued.
        :rtype: UserPublicOut
        :raises BadRequestError: Blank field or missing avatar.
        :raises ConflictError: Username or email already taken.
        :raises InternalError: Avatar upload failed.
        """
        fields = (dto.full_name, dto.email, dto.username, dto.password)
        if any(not (value or "").strip() for value in fields):
            raise BadRequestError("All fields are required")

        with self.ro_uow() as uow:
            if uow.users.exists_by_username_or_email(username=dto.username, email=dto.email):
                raise ConflictError(DUPLICATE_USER_MESSAGE)

        if not dto.avatar_path:
            raise BadRequestError("Avatar file is required")

        avatar = self.media.upload(dto.avatar_path)
        if avatar is None:
            raise InternalError("Error while uploading avatar")
        # Cover image is optional; a failed upload leaves the field empty
        cover = self.media.upload(dto.cover_image_path)

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            try:
                user = repo.add(
                    repo.model(
                        full_name=dto.full_name,
                        email=dto.email,
                        username=dto.username,
                        password=dto.password,  # model hashes via setter
                        avatar_url=avatar.url,
                        cover_image_url=cover.url if cover else None,
                    )
                )
            except IntegrityError as exc:
                if violates(exc, "uq_users_email") or violates(exc, "users.email"):
                    raise ConflictError(DUPLICATE_USER_MESSAGE) from exc
                if violates(exc, "uq_users_username") or violates(exc, "users.username"):
                    raise ConflictError(DUPLICATE_USER_MESSAGE) from exc
                raise  # unknown integrity error -> bubble up
            except ValueError as exc:
                raise BadRequestError(str(exc)) from exc

            log.info("user.registered", extra={"event": "user.registered", "user_id": user.id})
            return to_public(user)

    # --------------------------------------------------------------------- #
    # Retrieval
    # --------------------------------------------------------------------- #

    def get_current_user(self, user_id: int) -> UserPublicOut:
        """
        Retrieve the authenticated user.

        :raises NotFoundError: If user does not exist.
        """
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User does not exist")
            return to_public(user)

    # --------------------------------------------------------------------- #
    # Account details
    # --------------------------------------------------------------------- #

    def update_account_details(self, user_id: int, dto: AccountUpdateIn) -> UserPublicOut:
        """
        Replace full name and email.

        :raises BadRequestError: When either field is blank.
        :raises ConflictError: When the email belongs to another user.
        :raises NotFoundError: When user not found.
        """
        if not (dto.full_name or "").strip() or not (dto.email or "").strip():
            raise BadRequestError("All fields are required")

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(user_id)
            if user is None:
                raise NotFoundError("User does not exist")
            if repo.exists_by_email(dto.email, exclude_id=user_id):
                raise ConflictError("Email is already in use")
            try:
                repo.update(user, full_name=dto.full_name, email=dto.email)
            except IntegrityError as exc:
                if violates(exc, "uq_users_email") or violates(exc, "users.email"):
                    raise ConflictError("Email is already in use") from exc
                raise
            except ValueError as exc:
                raise BadRequestError(str(exc)) from exc
            return to_public(user)

    def update_avatar(self, user_id: int, local_path: str | None) -> UserPublicOut:
        """
        Upload a new avatar and point the user at it.

        :raises BadRequestError: When no file was provided.
        :raises InternalError: When the upload fails.
        """
        if not local_path:
            raise BadRequestError("Avatar file is missing")
        return self._replace_image(user_id, local_path, field="avatar_url", label="avatar")

    def update_cover_image(self, user_id: int, local_path: str | None) -> UserPublicOut:
        """
        Upload a new cover image and point the user at it.

        :raises BadRequestError: When no file was provided.
        :raises InternalError: When the upload fails.
        """
        if not local_path:
            raise BadRequestError("Cover image file is missing")
        return self._replace_image(
            user_id, local_path, field="cover_image_url", label="cover image"
        )

    def _replace_image(self, user_id: int, local_path: str, *, field: str, label: str) -> UserPublicOut:
        with self.ro_uow() as uow:
            if uow.users.get(user_id) is None:
                raise NotFoundError("User does not exist")

        uploaded = self.media.upload(local_path)
        if uploaded is None:
            raise InternalError(f"Error while uploading {label}")

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(user_id)
            if user is None:
                raise NotFoundError("User does not exist")
            repo.update(user, **{field: uploaded.url})
            return to_public(user)

    # --------------------------------------------------------------------- #
    # Password lifecycle
    # --------------------------------------------------------------------- #

    def change_password(self, dto: UserPasswordChangeIn) -> None:
        """
        Change a user's password after verifying the current one.

        :raises BadRequestError: Confirmation mismatch or empty new password.
        :raises NotFoundError: When user not found.
        :raises UnauthorizedError: When the old password does not verify.
        """
        if dto.new_password != dto.confirm_password:
            raise BadRequestError("New password and confirm password do not match")
        if not dto.new_password:
            raise BadRequestError("New password is required")

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(dto.user_id)
            if user is None:
                raise NotFoundError("User does not exist")
            if not user.verify_password(dto.old_password):
                raise UnauthorizedError("Invalid old password")
            repo.update_password(dto.user_id, dto.new_password)

        log.info(
            "user.password_changed",
            extra={"event": "user.password_changed", "user_id": dto.user_id},
        )
