"""
vidtube.services._shared.ports
==============================

Collection of *ports* (hexagonal interfaces) the service layer depends on.

Modules
-------
- :mod:`token_provider`:
    Defines :class:`~.TokenProvider` and :class:`~.TokenClaims`, the
    abstraction for issuing and verifying access/refresh JWTs.

- :mod:`denylist_store`:
    Defines :class:`~.TokenDenylistStore` for early revocation of access
    tokens, plus the in-memory fallback.

- :mod:`media_uploader`:
    Defines :class:`~.MediaUploader` and :class:`~.UploadedMedia` for pushing
    avatar and cover images to the media host.

Design Notes
------------
Concrete adapters (PyJWT, Redis, HTTP) live under ``vidtube.infra``.
"""

from __future__ import annotations

from .denylist_store import InMemoryDenylistStore, TokenDenylistStore
from .media_uploader import MediaUploader, UploadedMedia
from .token_provider import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    TokenClaims,
    TokenProvider,
)

__all__ = [
    "ACCESS_TOKEN_TYPE",
    "REFRESH_TOKEN_TYPE",
    "TokenClaims",
    "TokenProvider",
    "TokenDenylistStore",
    "InMemoryDenylistStore",
    "MediaUploader",
    "UploadedMedia",
]
