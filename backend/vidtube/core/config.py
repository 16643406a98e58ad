"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Mapping
from typing import Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'


# Load .env in development (no-op when absent)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val)


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret used for session signing.
    ACCESS_TOKEN_SECRET: str
        HMAC key for access tokens. Also handed to ``flask-jwt-extended`` so
        protected routes can verify access tokens.
    ACCESS_TOKEN_EXPIRY: int
        Access token lifetime in seconds (default one day).
    REFRESH_TOKEN_SECRET: str
        HMAC key for refresh tokens. Must differ from the access secret.
    REFRESH_TOKEN_EXPIRY: int
        Refresh token lifetime in seconds (default ten days).
    JWT_ALGORITHM: str
        Signing algorithm shared by both token kinds.
    PASSWORD_HASH_METHOD: str
        Werkzeug hashing method string; carries the cost factor
        (e.g. ``"scrypt:32768:8:1"`` or ``"pbkdf2:sha256:600000"``).
    REDIS_URL: str | None
        Optional Redis connection for the access-token denylist.
    REQUIRE_REDIS: bool
        Refuse to start without ``REDIS_URL``. The process-local denylist is
        not shared between workers.
    MEDIA_UPLOAD_URL: str
        Endpoint of the media hosting service receiving avatar/cover uploads.
    UPLOAD_TMP_DIR: str
        Local directory where multipart files are staged before upload.
    COOKIE_SECURE: bool
        ``Secure`` attribute of the token cookies.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"
    APP_ENV = os.getenv(ENV_VAR, "development")

    # Secrets / security
    # No fallbacks: a missing secret surfaces as ConfigError when tokens are issued
    SECRET_KEY = os.getenv("SECRET_KEY") or None
    ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET") or None
    ACCESS_TOKEN_EXPIRY = env_int("ACCESS_TOKEN_EXPIRY", 60 * 60 * 24)
    REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET") or None
    REFRESH_TOKEN_EXPIRY = env_int("REFRESH_TOKEN_EXPIRY", 60 * 60 * 24 * 10)
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "scrypt")

    # flask-jwt-extended verifies access tokens on protected routes
    JWT_SECRET_KEY = ACCESS_TOKEN_SECRET
    JWT_TOKEN_LOCATION = ["headers", "cookies"]
    JWT_ACCESS_COOKIE_NAME = "accessToken"
    JWT_COOKIE_CSRF_PROTECT = False

    # Cookies
    COOKIE_SECURE = env_bool("COOKIE_SECURE", True)
    COOKIE_SAMESITE = os.getenv("COOKIE_SAMESITE", "Lax")

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Redis (optional access-token denylist)
    REDIS_URL = os.getenv("REDIS_URL") or None
    REQUIRE_REDIS = False

    # Media hosting
    MEDIA_UPLOAD_URL = os.getenv("MEDIA_UPLOAD_URL", "http://localhost:9000/upload")
    MEDIA_UPLOAD_API_KEY = os.getenv("MEDIA_UPLOAD_API_KEY") or None
    MEDIA_UPLOAD_TIMEOUT = env_int("MEDIA_UPLOAD_TIMEOUT", 30)
    UPLOAD_TMP_DIR = os.getenv("UPLOAD_TMP_DIR", os.path.join(tempfile.gettempdir(), "vidtube"))
    MAX_CONTENT_LENGTH = env_int("MAX_CONTENT_LENGTH", 16 * 1024 * 1024)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default and relaxes the ``Secure`` cookie flag so
    tokens travel over plain HTTP on localhost.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET", "dev-access-secret")
    REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET", "dev-refresh-secret")
    JWT_SECRET_KEY = ACCESS_TOKEN_SECRET
    COOKIE_SECURE = env_bool("COOKIE_SECURE", False)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Uses a cheap password hash so the suite stays fast.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    SECRET_KEY = "test-secret"
    ACCESS_TOKEN_SECRET = "test-access-secret"
    REFRESH_TOKEN_SECRET = "test-refresh-secret"
    JWT_SECRET_KEY = ACCESS_TOKEN_SECRET
    REDIS_URL = None
    COOKIE_SECURE = False
    USE_PROXYFIX = False
    PROPAGATE_EXCEPTIONS = False


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug and SQL echoing disabled. Redis is mandatory because the
    access-token denylist must be shared by every worker, and token secrets
    have no fallback values.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    COOKIE_SECURE = True
    REQUIRE_REDIS = True


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
