"""Application configuration."""

import warnings
from typing import Annotated, Any, Literal, Self

from pydantic import (
    AnyUrl,
    BeforeValidator,
    HttpUrl,
    computed_field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",")]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "newsbrief"
    SERVER_PORT: int = 8000
    ROOTPATH: str = ""
    API_V1_STR: str = "/api"
    FRONTEND_HOST: str = "http://localhost:3000"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_RETENTION_DAYS: int = 30

    BACKEND_CORS_ORIGINS: Annotated[
        list[AnyUrl] | str, BeforeValidator(parse_cors)
    ] = []
    CORS_ALLOW_METHODS: list[str] = ["GET", "POST", "OPTIONS"]
    CORS_ALLOW_HEADERS: list[str] = ["Authorization", "Content-Type"]

    @computed_field
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS] + [
            self.FRONTEND_HOST
        ]

    # Sentry
    SENTRY_DSN: HttpUrl | None = None

    # Data service (托管的认证 + 行级权限数据库)
    DATA_SERVICE_URL: str = "http://localhost:54321"
    DATA_SERVICE_ANON_KEY: str = "changethis"
    DATA_SERVICE_SERVICE_KEY: str = "changethis"
    DATA_SERVICE_TIMEOUT_SEC: float = 10.0
    OFFICIAL_USER_ID: str | None = None  # 官方账号：演示简报 + 官方源分区

    @field_validator("DATA_SERVICE_URL")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    # Session cache (client side)
    SESSION_CACHE_TTL_SEC: float = 120.0  # 缓存 2 分钟后重新校验
    SESSION_EXPIRY_MARGIN_SEC: float = 300.0  # token 剩余不足 5 分钟视为不可用
    SESSION_FETCH_TIMEOUT_SEC: float = 30.0
    SESSION_BOOTSTRAP_ATTEMPTS: int = 3  # 首次 + 2 次重试（1s, 2s）

    # Listing limits
    BRIEFS_RECENT_LIMIT: int = 15
    NEWLY_SOURCES_LIMIT: int = 9

    def _check_default_secret(self, var_name: str, value: str | None) -> None:
        if value == "changethis":
            message = (
                f'The value of {var_name} is "changethis", '
                "for security, please change it, at least for deployments."
            )
            if self.ENVIRONMENT == "local":
                warnings.warn(message, stacklevel=1)
            else:
                raise ValueError(message)

    @model_validator(mode="after")
    def _enforce_non_default_secrets(self) -> Self:
        self._check_default_secret("DATA_SERVICE_ANON_KEY", self.DATA_SERVICE_ANON_KEY)
        self._check_default_secret(
            "DATA_SERVICE_SERVICE_KEY", self.DATA_SERVICE_SERVICE_KEY
        )
        return self


settings = Settings()
