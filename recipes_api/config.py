"""Configuration management for the application."""

from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PLACEHOLDER_SECRET = "change-me-in-production"  # noqa: S105

HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = Field(default="sqlite:///./recipes.db")

    # JWT
    jwt_secret: str = Field(default=PLACEHOLDER_SECRET)
    jwt_algorithm: str = Field(default="HS256")
    jwt_expiration_minutes: int = Field(default=30)

    # Passwords
    password_salt: str = Field(default="")
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # Recipe images
    image_dir: str = Field(default="./recipe-images")
    max_image_bytes: int = Field(default=10 * 1024 * 1024)  # 10 MiB

    # API
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080"],
    )

    @field_validator("jwt_algorithm")
    @classmethod
    def validate_jwt_algorithm(cls, value: str) -> str:
        """Only symmetric HMAC signing is supported."""
        if value not in HMAC_ALGORITHMS:
            raise ValueError(f"JWT_ALGORITHM must be one of {', '.join(HMAC_ALGORITHMS)}")
        return value

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Validate that production has secure settings."""
        if self.environment == "production":
            if self.jwt_secret == PLACEHOLDER_SECRET:
                raise ValueError("JWT_SECRET must be changed in production")
            if not self.password_salt:
                raise ValueError("PASSWORD_SALT must be set in production")
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
