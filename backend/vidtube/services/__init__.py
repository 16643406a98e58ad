"""Service layer public API.

This package exposes the essential building blocks for the service layer so that
callers can import from :mod:`vidtube.services` without knowing internal structure.

Re-exports
----------
- Base primitive (from ``vidtube.services._shared.base``)
    * :class:`BaseService`

- Auth service (from ``vidtube.services.auth``)
    * :class:`AuthService`
    * DTOs: :class:`LoginIn`, :class:`LoginOut`, :class:`LogoutIn`,
      :class:`RefreshIn`, :class:`TokenPairOut`

- Identity service (from ``vidtube.services.identity``)
    * :class:`IdentityService`
    * DTOs: :class:`UserRegisterIn`, :class:`AccountUpdateIn`,
      :class:`UserPasswordChangeIn`, :class:`UserPublicOut`

- Channel service (from ``vidtube.services.channels``)
    * :class:`ChannelService`
    * DTOs: :class:`ChannelProfileOut`, :class:`WatchHistoryItemOut`,
      :class:`VideoOwnerOut`
"""

from __future__ import annotations

from ._shared.base import BaseService
from .auth.dto import LoginIn, LoginOut, LogoutIn, RefreshIn, TokenPairOut
from .auth.service import AuthService
from .channels.dto import ChannelProfileOut, VideoOwnerOut, WatchHistoryItemOut
from .channels.service import ChannelService
from .identity.dto import (
    AccountUpdateIn,
    UserPasswordChangeIn,
    UserPublicOut,
    UserRegisterIn,
)
from .identity.service import IdentityService

__all__ = [
    "BaseService",
    # Auth
    "AuthService",
    "LoginIn",
    "LoginOut",
    "LogoutIn",
    "RefreshIn",
    "TokenPairOut",
    # Identity
    "IdentityService",
    "UserRegisterIn",
    "AccountUpdateIn",
    "UserPasswordChangeIn",
    "UserPublicOut",
    # Channels
    "ChannelService",
    "ChannelProfileOut",
    "VideoOwnerOut",
    "WatchHistoryItemOut",
]
