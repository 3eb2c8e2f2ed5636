"""
TIMEBOX API - Security Validation

Startup checks for auth and CORS configuration.
"""

import warnings
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from timebox.config import settings


DEFAULT_JWT_SECRET = "dev-secret-key-change-in-production"


def validate_security_config() -> None:
    """
    Validate security configuration on startup.

    Issues warnings for insecure configurations but does not crash the application
    (to allow tests and development to run).
    """
    # JWT secret validation
    if settings.AUTH_JWT_SECRET == DEFAULT_JWT_SECRET and settings.is_production:
        warnings.warn(
            "SECURITY WARNING: Using default AUTH_JWT_SECRET in production. "
            "Set AUTH_JWT_SECRET to the auth provider's JWT secret.",
            UserWarning,
        )

    # CORS validation
    if "*" in settings.CORS_ORIGINS:
        warnings.warn(
            "SECURITY WARNING: CORS wildcard (*) detected. "
            "Set specific origins via CORS_ORIGINS.",
            UserWarning,
        )

    if len(settings.AUTH_JWT_SECRET) < 32 and settings.is_production:
        warnings.warn(
            "SECURITY WARNING: AUTH_JWT_SECRET is too short for production. "
            "Use at least 32 characters.",
            UserWarning,
        )


def validate_display_timezone() -> None:
    """Fail fast when DISPLAY_TIMEZONE is not a known IANA zone."""
    try:
        ZoneInfo(settings.DISPLAY_TIMEZONE)
    except ZoneInfoNotFoundError as e:
        raise RuntimeError(
            f"Unknown DISPLAY_TIMEZONE {settings.DISPLAY_TIMEZONE!r}"
        ) from e
