"""
TIMEBOX API - Configuration Module

This module handles application configuration via environment variables.
"""

import os
from zoneinfo import ZoneInfo


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "TIMEBOX API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))

    # MongoDB
    MONGODB_URI: str = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    MONGODB_DATABASE: str = os.getenv("MONGODB_DATABASE", "timebox")

    # CORS - Allowed origins for client requests
    # Multiple origins can be comma-separated
    CORS_ORIGINS: list[str] = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
        if origin.strip()
    ]

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Calendar-day comparisons (today/tomorrow/yesterday) use this IANA zone
    DISPLAY_TIMEZONE: str = os.getenv("DISPLAY_TIMEZONE", "UTC")

    # Hosted auth provider. Access tokens are HS256 JWTs signed with the
    # project's JWT secret; the "sub" claim is the owner id.
    AUTH_PROVIDER_URL: str = os.getenv("AUTH_PROVIDER_URL", "http://localhost:54321")
    AUTH_JWT_SECRET: str = os.getenv("AUTH_JWT_SECRET", "dev-secret-key-change-in-production")
    AUTH_JWT_ALGORITHM: str = os.getenv("AUTH_JWT_ALGORITHM", "HS256")
    AUTH_JWT_AUDIENCE: str = os.getenv("AUTH_JWT_AUDIENCE", "authenticated")
    AUTH_OAUTH_PROVIDERS: list[str] = [
        provider.strip().lower()
        for provider in os.getenv("AUTH_OAUTH_PROVIDERS", "google").split(",")
        if provider.strip()
    ]
    AUTH_REDIRECT_URL: str = os.getenv("AUTH_REDIRECT_URL", "http://localhost:3000/auth/callback")

    # Board client
    API_BASE_URL: str = os.getenv("API_BASE_URL", "http://localhost:8000")
    BOARD_POLL_INTERVAL_SECONDS: float = float(os.getenv("BOARD_POLL_INTERVAL_SECONDS", "60"))
    API_TIMEOUT: float = float(os.getenv("API_TIMEOUT", "10.0"))

    @property
    def display_tz(self) -> ZoneInfo:
        return ZoneInfo(self.DISPLAY_TIMEZONE)

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


settings = Settings()
