"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, ValidationError, fields, validate, validates_schema

from .user import UserSchema


class LoginSchema(Schema):
    """Input payload for authenticating a user by username or email."""

    username = fields.String(load_default=None, validate=validate.Length(max=50))
    email = fields.Email(load_default=None, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))

    @validates_schema
    def _require_identifier(self, data: dict[str, Any], **kwargs: Any) -> None:
        if not data.get("username") and not data.get("email"):
            raise ValidationError("username or email is required", field_name="username")


class RefreshTokenSchema(Schema):
    """Optional body carrying the refresh token when no cookie is sent."""

    refresh_token = fields.String(data_key="refreshToken", load_default=None)


class ChangePasswordSchema(Schema):
    """Input payload for changing the current user's password."""

    old_password = fields.String(required=True, data_key="oldPassword")
    new_password = fields.String(
        required=True, data_key="newPassword", validate=validate.Length(min=8, max=128)
    )
    confirm_password = fields.String(required=True, data_key="confirmPassword")


class TokenPairSchema(Schema):
    """Response payload containing both tokens."""

    access_token = fields.String(required=True, data_key="accessToken")
    refresh_token = fields.String(required=True, data_key="refreshToken")


class LoginResponseSchema(TokenPairSchema):
    """Response payload for a successful login."""

    user = fields.Nested(UserSchema, required=True)
