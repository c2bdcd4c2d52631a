from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class ShortenerOptions(BaseModel):
    """
    Tuning knobs for the shortener service.

    hash_length and max_attempts drive the adaptive growth: after
    max_attempts candidates at one length the next candidate is one
    character longer. max_hash_length and max_total_attempts bound the
    otherwise open-ended loop (None disables a guard).
    """

    hash_length: int = Field(5, ge=1)
    max_attempts: int = Field(3, ge=1)
    max_hash_length: Optional[int] = Field(32, ge=1)
    max_total_attempts: Optional[int] = Field(None, ge=1)
    cache_ttl: int = Field(3600, ge=0)

    @model_validator(mode="after")
    def check_length_within_ceiling(self) -> "ShortenerOptions":
        if self.max_hash_length is not None and self.hash_length > self.max_hash_length:
            raise ValueError(
                f"hash_length {self.hash_length} exceeds max_hash_length {self.max_hash_length}"
            )
        return self


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """

    # Environment
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Application
    app_name: str = "Short Link Service"
    app_version: str = "1.0.0"

    # Database
    database_url: str = "sqlite:///./short_links.db"

    # Hash generation
    base_url: str = "http://127.0.0.1:8000"
    hash_length: int = 5
    max_attempts: int = 3
    max_hash_length: Optional[int] = 32
    max_total_attempts: Optional[int] = None
    hash_strategy: str = "random"  # Options: "random", "secure"

    # Cache settings
    cache_backend: str = "memory"  # Options: "redis", "memory", "null"
    redis_url: str = "redis://localhost:6379/0"
    cache_ttl: int = 3600  # Upper bound in seconds, links expiring sooner are cached for less

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def shortener_options(self) -> ShortenerOptions:
        """Build the service options from the loaded settings"""
        return ShortenerOptions(
            hash_length=self.hash_length,
            max_attempts=self.max_attempts,
            max_hash_length=self.max_hash_length,
            max_total_attempts=self.max_total_attempts,
            cache_ttl=self.cache_ttl,
        )


settings = Settings()
