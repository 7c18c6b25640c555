"""Configuration management for PokeLeague."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MIN_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """Application settings loaded from ``POKELEAGUE_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="POKELEAGUE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # JWT
    jwt_secret_key: str = Field(
        default="pokeleague-development-secret-key-change-me",
        min_length=MIN_SECRET_LENGTH,
        description="Symmetric HMAC-SHA256 signing key",
    )
    jwt_issuer: str = Field(default="PokeLeagueAPI")
    jwt_audience: str = Field(default="PokeLeagueClients")
    jwt_expiry_minutes: int = Field(default=60, ge=1)

    # Password hashing cost (bcrypt log2 rounds)
    bcrypt_rounds: int = Field(default=12, ge=4, le=16)

    # Login throttling (milliseconds)
    login_delay_min_ms: int = Field(default=100, ge=0)
    login_delay_max_ms: int = Field(default=300, ge=0)

    # Sample data created at startup
    seed_sample_data: bool = Field(default=True)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_format: Literal["console", "json"] = Field(default="console")

    # Server
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000, ge=1, le=65535)

    @model_validator(mode="after")
    def _check_login_delay(self) -> "Settings":
        if self.login_delay_min_ms > self.login_delay_max_ms:
            raise ValueError("login_delay_min_ms must not exceed login_delay_max_ms")
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
