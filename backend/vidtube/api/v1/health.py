"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app
from sqlalchemy import text
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy.exc import SQLAlchemyError

from vidtube.api.deps import api_response, timing
from vidtube.core.extensions import db

bp = Blueprint("health", __name__)


@bp.get("/health")
@timing
def healthcheck():
    """Return application and database health information."""

    db_status = "ok"
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:  # pragma: no cover - depends on DB backend
        current_app.logger.exception("healthcheck.db_error")
        db_status = "fail"
    redis_status = "disabled"
    client = current_app.extensions.get("redis_client")
    if client is not None:
        try:
            redis_status = "ok" if client.ping() else "fail"
        except RedisError:
            current_app.logger.exception("healthcheck.redis_error")
            redis_status = "fail"
    version = current_app.config.get("APP_VERSION", "dev")
    payload = {"status": "ok", "db": db_status, "redis": redis_status, "version": version}
    return api_response(payload, "OK")
