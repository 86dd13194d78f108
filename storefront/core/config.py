"""Storefront Configuration"""

import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables
load_dotenv(os.getenv("STOREFRONT_ENV_FILE", ".env"))


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Perfume Storefront"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8001
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    # Pricing
    currency: str = "USD"

    # Tokens are issued by the auth service; carts only read the owner claim
    jwt_secret: str = "storefront-dev-secret-change-me-0123456789"
    jwt_algorithm: str = "HS256"

    # Guest carts
    guest_session_header: str = "X-Guest-Session"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
