# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_DEV_JWT_SECRET = "dev-jwt-secret-change-me-0123456789abcdef"
_INSECURE_SECRETS = ("dev", "development", "test", "", _DEV_JWT_SECRET)


def _settings_config() -> SettingsConfigDict:
    return SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_by_name=True,
    )


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///blogger.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")

    model_config = _settings_config()


class SecurityConfig(BaseSettings):
    # Cookie security
    cookie_name: str = Field("token", alias="COOKIE_NAME")
    cookie_secure: bool = Field(False, alias="COOKIE_SECURE")
    cookie_samesite: str = Field("Lax", alias="COOKIE_SAMESITE")

    # CORS
    allowed_origins: Annotated[list[str], NoDecode] = Field(
        ["http://localhost:3000"], alias="ALLOWED_ORIGINS"
    )

    # CSRF protection
    enable_csrf: bool = Field(False, alias="ENABLE_CSRF")

    # Rate limiting
    enable_rate_limit: bool = Field(True, alias="ENABLE_RATE_LIMIT")
    rate_limit_requests: int = Field(10, alias="RL_LIMIT")
    rate_limit_window: float = Field(60.0, alias="RL_WINDOW")

    model_config = _settings_config()

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("cookie_secure", "enable_csrf", "enable_rate_limit", mode="before")
    @classmethod
    def _parse_bool(cls, value: str | bool) -> bool:
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)


class AssetStoreConfig(BaseSettings):
    backend: Literal["cloudinary", "local"] = Field("local", alias="ASSET_BACKEND")

    # Remote object store
    cloud_name: str | None = Field(None, alias="CLOUD_NAME")
    api_key: str | None = Field(None, alias="API_KEY")
    api_secret: str | None = Field(None, alias="API_SECRET")
    folder: str = Field("blogger", alias="CLOUDINARY_FOLDER")

    # Local filesystem
    uploads_dir: Path = Field(Path("uploads"), alias="UPLOADS_DIR")
    public_base_url: str = Field("", alias="PUBLIC_BASE_URL")

    model_config = _settings_config()

    @field_validator("public_base_url", mode="after")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @model_validator(mode="after")
    def _require_credentials(self) -> "AssetStoreConfig":
        if self.backend == "cloudinary":
            missing = [
                name
                for name, value in (
                    ("CLOUD_NAME", self.cloud_name),
                    ("API_KEY", self.api_key),
                    ("API_SECRET", self.api_secret),
                )
                if not value
            ]
            if missing:
                raise ValueError(f"cloudinary backend requires {', '.join(missing)}")
        return self


class PostsConfig(BaseSettings):
    page_size: int = Field(20, ge=1, le=100, alias="POSTS_PAGE_SIZE")
    cover_required: bool = Field(False, alias="POST_COVER_REQUIRED")
    max_upload_bytes: int = Field(10 * 1024 * 1024, ge=1024, alias="MAX_UPLOAD_BYTES")

    model_config = _settings_config()


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


def _asset_store_config_factory() -> AssetStoreConfig:
    return AssetStoreConfig()  # type: ignore[call-arg]


def _posts_config_factory() -> PostsConfig:
    return PostsConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    secret_key: str = Field("dev", alias="SECRET_KEY")
    jwt_secret: str = Field(_DEV_JWT_SECRET, alias="JWT_SECRET")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)
    assets: AssetStoreConfig = Field(default_factory=_asset_store_config_factory)
    posts: PostsConfig = Field(default_factory=_posts_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_by_name=True,
        validate_assignment=True,
        arbitrary_types_allowed=True,
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        insecure = [
            name
            for name, value in (("SECRET_KEY", self.secret_key), ("JWT_SECRET", self.jwt_secret))
            if value in _INSECURE_SECRETS
        ]
        if insecure:
            print(
                f"\n❌ CRITICAL SECURITY ERROR: Insecure {', '.join(insecure)} detected in production!\n"
                "   Secrets must be strong random values in production.\n"
                "   Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(32))\"\n",
                file=sys.stderr,
            )
            sys.exit(1)

        warnings = []
        if not self.security.cookie_secure:
            warnings.append("⚠️  Cookie Secure flag is DISABLED (use HTTPS!)")
        if "*" in self.security.allowed_origins:
            warnings.append("⚠️  CORS allows wildcard (*) origins")
        if self.assets.backend == "local":
            warnings.append("⚠️  Covers are stored on the local filesystem")

        if warnings:
            print("\n⚠️  PRODUCTION SECURITY WARNINGS:", file=sys.stderr)
            for warning in warnings:
                print(f"   {warning}", file=sys.stderr)

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()  # type: ignore[call-arg]


__all__ = [
    "AppConfig",
    "AssetStoreConfig",
    "DatabaseConfig",
    "PostsConfig",
    "SecurityConfig",
    "load_config",
]
