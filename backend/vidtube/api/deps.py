"""Shared API helpers for responses, auth, uploads and service wiring."""

from __future__ import annotations

import functools
import os
import time
from collections.abc import Callable
from contextlib import suppress
from datetime import UTC, datetime
from typing import Any, TypeVar, cast
from uuid import uuid4

from flask import Response, current_app, jsonify, request
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request
from werkzeug.utils import secure_filename

from vidtube.infra.jwt.pyjwt_token_provider import PyJWTTokenProvider
from vidtube.infra.media.http_media_uploader import HttpMediaUploader
from vidtube.infra.redis.redis_denylist_store import RedisTokenDenylistStore
from vidtube.services._shared.ports.denylist_store import (
    InMemoryDenylistStore,
    TokenDenylistStore,
)
from vidtube.services._shared.ports.media_uploader import MediaUploader
from vidtube.services.auth.service import AuthService
from vidtube.services.channels.service import ChannelService
from vidtube.services.identity.service import IdentityService

F = TypeVar("F", bound=Callable[..., Any])

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


# --------------------------------------------------------------------------- #
# Responses
# --------------------------------------------------------------------------- #


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def api_response(data: Any = None, message: str = "Success", *, status: int = 200) -> Response:
    """Wrap ``data`` in the success envelope shared by every endpoint."""

    return json_response(
        {"statusCode": status, "data": data, "message": message, "success": status < 400},
        status=status,
    )


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.info(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]


# --------------------------------------------------------------------------- #
# Authentication
# --------------------------------------------------------------------------- #


def require_auth(func: F) -> F:
    """Ensure the request carries a valid, non-revoked access token."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        verify_jwt_in_request(optional=False)
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_user_id() -> int:
    """Return the ``sub`` of the verified access token as an integer."""

    return int(get_jwt_identity())


def current_access_token() -> tuple[str | None, datetime | None]:
    """Return ``(jti, expires_at)`` of the verified access token."""

    claims = get_jwt() or {}
    exp = claims.get("exp")
    expires_at = datetime.fromtimestamp(int(exp), tz=UTC) if exp is not None else None
    return claims.get("jti"), expires_at


def set_token_cookies(response: Response, *, access_token: str, refresh_token: str) -> Response:
    """Attach both tokens as ``httpOnly`` cookies."""

    cfg = current_app.config
    options = {
        "httponly": True,
        "secure": bool(cfg.get("COOKIE_SECURE", True)),
        "samesite": cfg.get("COOKIE_SAMESITE", "Lax"),
    }
    response.set_cookie(
        ACCESS_COOKIE, access_token, max_age=int(cfg["ACCESS_TOKEN_EXPIRY"]), **options
    )
    response.set_cookie(
        REFRESH_COOKIE, refresh_token, max_age=int(cfg["REFRESH_TOKEN_EXPIRY"]), **options
    )
    return response


def clear_token_cookies(response: Response) -> Response:
    """Expire both token cookies on the client."""

    cfg = current_app.config
    options = {
        "httponly": True,
        "secure": bool(cfg.get("COOKIE_SECURE", True)),
        "samesite": cfg.get("COOKIE_SAMESITE", "Lax"),
    }
    response.delete_cookie(ACCESS_COOKIE, **options)
    response.delete_cookie(REFRESH_COOKIE, **options)
    return response


def is_token_revoked(jwt_header: dict[str, Any], jwt_payload: dict[str, Any]) -> bool:
    """Blocklist callback for Flask-JWT-Extended."""

    jti = jwt_payload.get("jti")
    return bool(jti) and get_denylist().is_revoked(jti)


# --------------------------------------------------------------------------- #
# Uploads
# --------------------------------------------------------------------------- #


def stage_upload(field: str) -> str | None:
    """Save the multipart file ``field`` under ``UPLOAD_TMP_DIR``.

    :returns: Local path, or ``None`` when the field is absent or empty.
    """

    storage = request.files.get(field)
    if storage is None or not storage.filename:
        return None
    filename = f"{uuid4().hex}_{secure_filename(storage.filename) or 'upload'}"
    path = os.path.join(current_app.config["UPLOAD_TMP_DIR"], filename)
    storage.save(path)
    return path


def discard_uploads(*paths: str | None) -> None:
    """Remove staged files that were not consumed by an upload."""

    for path in paths:
        if path:
            with suppress(FileNotFoundError):
                os.remove(path)


# --------------------------------------------------------------------------- #
# Service wiring
# --------------------------------------------------------------------------- #


def get_denylist() -> TokenDenylistStore:
    """Return the access-token denylist bound to the current app.

    Redis is used when ``REDIS_URL`` is configured; otherwise a process-local
    store is kept in ``app.extensions``.
    """

    store = current_app.extensions.get("token_denylist")
    if store is None:
        client = current_app.extensions.get("redis_client")
        store = RedisTokenDenylistStore(client) if client is not None else InMemoryDenylistStore()
        current_app.extensions["token_denylist"] = store
    return cast(TokenDenylistStore, store)


def get_media_uploader() -> MediaUploader:
    """Return the media uploader bound to the current app."""

    uploader = current_app.extensions.get("media_uploader")
    if uploader is None:
        uploader = HttpMediaUploader.from_config(current_app.config)
        current_app.extensions["media_uploader"] = uploader
    return cast(MediaUploader, uploader)


def get_auth_service() -> AuthService:
    return AuthService(
        token_provider=PyJWTTokenProvider.from_config(current_app.config),
        denylist_store=get_denylist(),
    )


def get_identity_service() -> IdentityService:
    return IdentityService(media_uploader=get_media_uploader())


def get_channel_service() -> ChannelService:
    return ChannelService()
