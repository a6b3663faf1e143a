"""
Shared configuration management for the rate-limit isolation harness.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class HarnessConfig(BaseSettings):
    """Harness configuration loaded from environment variables or a .env file.

    Environment names match the ones the gateway deployment scripts export,
    so the harness can run in the same CI job as the gateway stack.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Endpoints
    api_base_url: str = Field(default="http://localhost:8085", validation_alias="API_GW_BASE_URL")
    auth_base_url: str = Field(default="http://localhost:8084", validation_alias="AUTH_GW_BASE_URL")
    users_path: str = Field(default="/api/v1/users", validation_alias="USERS_PATH")
    orders_path: str = Field(default="/api/v1/orders", validation_alias="ORDERS_PATH")

    # Identities
    username: str = Field(default="user_all", validation_alias="AUTH_USERNAME")
    password: str = Field(default="123", validation_alias="AUTH_PASSWORD")
    username_b: Optional[str] = Field(default=None, validation_alias="AUTH_USERNAME_B")
    password_b: Optional[str] = Field(default=None, validation_alias="AUTH_PASSWORD_B")

    # Burst and window
    burst_requests: int = Field(default=8, validation_alias="BURST_REQUESTS")
    window_ms: int = Field(default=1000, validation_alias="RATE_WINDOW_MS")
    align_margin_ms: int = Field(default=30, validation_alias="ALIGN_MARGIN_MS")

    # Transport
    request_timeout: float = Field(default=10.0, validation_alias="REQUEST_TIMEOUT_SECONDS")

    # Observability
    log_level: str = Field(default="info", validation_alias="LOG_LEVEL")

    @field_validator("api_base_url", "auth_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("users_path", "orders_path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Paths are appended to the base URL verbatim."""
        if not v.startswith("/"):
            raise ValueError("paths must start with '/'")
        return v

    @field_validator("burst_requests")
    @classmethod
    def validate_burst_requests(cls, v: int) -> int:
        """A burst needs room for at least one allowed and one throttled request."""
        if v < 2:
            raise ValueError("burst_requests must be at least 2")
        return v

    @field_validator("window_ms")
    @classmethod
    def validate_window(cls, v: int) -> int:
        if v < 1:
            raise ValueError("window_ms must be positive")
        return v

    @field_validator("align_margin_ms")
    @classmethod
    def validate_margin(cls, v: int) -> int:
        if v < 0:
            raise ValueError("align_margin_ms must not be negative")
        return v

    @field_validator("request_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("request_timeout must be positive")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        if v.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {v}")
        return v.lower()

    @property
    def identity_b_username(self) -> str:
        return self.username_b or self.username

    @property
    def identity_b_password(self) -> str:
        return self.password_b if self.password_b is not None else self.password


def get_config(**overrides) -> HarnessConfig:
    """Load configuration, applying explicit overrides on top of the environment."""
    return HarnessConfig(**{k: v for k, v in overrides.items() if v is not None})
