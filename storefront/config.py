"""
Environment-aware configuration.

Flask config classes are selected by name or APP_ENV. Token secrets and
lifetimes are then frozen into an AuthSettings object once, in create_app(),
and handed to the services that need them.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Mapping

from dotenv import load_dotenv

load_dotenv()  # Read .env if present

PRODUCTION_ENVS = ("prod", "production")


class ConfigurationError(RuntimeError):
    pass


def _seconds(name: str, default: str) -> timedelta:
    return timedelta(seconds=int(os.getenv(name, default)))


def _origins(raw: str):
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    if not origins or origins == ["*"]:
        return "*"
    return origins


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")  # Set a strong key in production
    DEBUG = False
    TESTING = False
    APP_ENV = os.getenv("APP_ENV", "development")
    # comma-separated list in env; cookies need credentials so '*' is reflected per request
    CORS_ORIGINS = _origins(os.getenv("CORS_ORIGINS", "*"))
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///storefront.db")
    SQL_ECHO = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET", "dev-access-secret-change-me-please-0001")
    ACCESS_TOKEN_EXPIRES = _seconds("ACCESS_TOKEN_EXPIRES_SECONDS", "86400")
    REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET", "dev-refresh-secret-change-me-please-0002")
    REFRESH_TOKEN_EXPIRES = _seconds("REFRESH_TOKEN_EXPIRES_SECONDS", str(365 * 86400))


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    APP_ENV = "development"
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG").upper()


class ProductionConfig(BaseConfig):
    DEBUG = False
    APP_ENV = "production"


class TestingConfig(BaseConfig):
    TESTING = True
    APP_ENV = "test"
    DATABASE_URL = "sqlite://"
    LOG_LEVEL = "WARNING"
    ACCESS_TOKEN_SECRET = "test-access-secret-0123456789abcdef0123456789"
    REFRESH_TOKEN_SECRET = "test-refresh-secret-0123456789abcdef012345678"
    ACCESS_TOKEN_EXPIRES = timedelta(minutes=15)
    REFRESH_TOKEN_EXPIRES = timedelta(days=7)


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/test/prod).
    """
    env = (name or os.getenv("APP_ENV", "development")).lower()
    if env in PRODUCTION_ENVS:
        return ProductionConfig
    if env in ("test", "testing"):
        return TestingConfig
    return DevelopmentConfig


@dataclass(frozen=True)
class AuthSettings:
    access_secret: str
    access_ttl: timedelta
    refresh_secret: str
    refresh_ttl: timedelta
    algorithm: str = "HS256"
    environment: str = "development"

    def __post_init__(self):
        if not self.access_secret or not self.refresh_secret:
            raise ConfigurationError("Access and refresh token secrets must be set")
        if self.access_secret == self.refresh_secret:
            raise ConfigurationError("Access and refresh tokens must use different secrets")
        if self.access_ttl <= timedelta(0) or self.refresh_ttl <= timedelta(0):
            raise ConfigurationError("Token lifetimes must be positive")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in PRODUCTION_ENVS

    @classmethod
    def from_config(cls, config: Mapping) -> "AuthSettings":
        return cls(
            access_secret=config["ACCESS_TOKEN_SECRET"],
            access_ttl=config["ACCESS_TOKEN_EXPIRES"],
            refresh_secret=config["REFRESH_TOKEN_SECRET"],
            refresh_ttl=config["REFRESH_TOKEN_EXPIRES"],
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
            environment=config.get("APP_ENV", "development"),
        )
