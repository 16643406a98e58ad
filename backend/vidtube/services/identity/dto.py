"""
DTOs for IdentityService.

Data Transfer Objects (DTOs) isolate the service layer from ORM models,
ensuring clear input/output contracts and type safety. No output DTO carries
the password hash or the refresh token.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserRegisterIn:
    """
    Input DTO for user registration.

    :param full_name: Display name.
    :type full_name: str
    :param email: Login email (normalized to lowercase).
    :type email: str
    :param username: Public handle (normalized to lowercase).
    :type username: str
    :param password: Raw password to be hashed by the model.
    :type password: str
    :param avatar_path: Staged local file for the avatar (required).
    :type avatar_path: str | None
    :param cover_image_path: Staged local file for the cover image.
    :type cover_image_path: str | None
    """

    full_name: str
    email: str
    username: str
    password: str
    avatar_path: str | None = None
    cover_image_path: str | None = None


@dataclass(frozen=True, slots=True)
class AccountUpdateIn:
    """
    Input DTO for updating account details.

    :param full_name: New display name.
    :type full_name: str
    :param email: New email.
    :type email: str
    """

    full_name: str
    email: str


@dataclass(frozen=True, slots=True)
class UserPasswordChangeIn:
    """
    Input DTO for changing a user's password.

    :param user_id: User identifier.
    :type user_id: int
    :param old_password: Current password.
    :type old_password: str
    :param new_password: New password (raw).
    :type new_password: str
    :param confirm_password: Repetition of ``new_password``.
    :type confirm_password: str
    """

    user_id: int
    old_password: str
    new_password: str
    confirm_password: str


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Output DTO representing public-safe user data.

    :param id: User identifier.
    :param username: Username.
    :param email: Email address.
    :param full_name: Display name.
    :param avatar_url: Avatar URL.
    :param cover_image_url: Cover image URL, if any.
    :param created_at: Creation timestamp.
    :param updated_at: Last update timestamp.
    """

    id: int
    username: str
    email: str
    full_name: str
    avatar_url: str
    cover_image_url: str | None
    created_at: datetime | None = None
    updated_at: datetime | None = None
