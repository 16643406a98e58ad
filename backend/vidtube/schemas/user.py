"""User resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class RegisterSchema(Schema):
    """Multipart fields accompanying the ``avatar``/``coverImage`` files."""

    full_name = fields.String(
        required=True, data_key="fullName", validate=validate.Length(min=1, max=100)
    )
    email = fields.Email(required=True, validate=validate.Length(max=254))
    username = fields.String(required=True, validate=validate.Length(min=3, max=50))
    password = fields.String(required=True, validate=validate.Length(min=8, max=128))


class AccountUpdateSchema(Schema):
    """Payload for replacing the account's display name and email."""

    full_name = fields.String(
        required=True, data_key="fullName", validate=validate.Length(min=1, max=100)
    )
    email = fields.Email(required=True, validate=validate.Length(max=254))


class UserSchema(Schema):
    """Public representation of a user; never includes credentials."""

    id = fields.Integer(required=True)
    username = fields.String(required=True)
    email = fields.Email(required=True)
    full_name = fields.String(data_key="fullName")
    avatar_url = fields.String(data_key="avatar")
    cover_image_url = fields.String(data_key="coverImage", allow_none=True)
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)
    updated_at = fields.DateTime(data_key="updatedAt", allow_none=True)
