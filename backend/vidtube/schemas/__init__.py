"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    ChangePasswordSchema,
    LoginResponseSchema,
    LoginSchema,
    RefreshTokenSchema,
    TokenPairSchema,
)
from .channel import ChannelProfileSchema, VideoOwnerSchema, WatchHistoryItemSchema
from .user import AccountUpdateSchema, RegisterSchema, UserSchema

__all__ = [
    "LoginSchema",
    "LoginResponseSchema",
    "RefreshTokenSchema",
    "ChangePasswordSchema",
    "TokenPairSchema",
    "RegisterSchema",
    "AccountUpdateSchema",
    "UserSchema",
    "ChannelProfileSchema",
    "VideoOwnerSchema",
    "WatchHistoryItemSchema",
]
