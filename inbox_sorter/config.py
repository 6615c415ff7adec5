"""
Application configuration using pydantic-settings.
"""
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    debug: bool = True
    app_host: str = "0.0.0.0"
    app_port: int = 3001

    # CORS
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    # Google OAuth client + user tokens for the labelled mailbox
    google_client_id: str = ""
    google_client_secret: str = ""
    google_access_token: str = ""
    google_refresh_token: str = ""
    google_token_uri: str = "https://oauth2.googleapis.com/token"

    # Listing / fetching
    gmail_listing_query: str = "label:inbox category:updates"
    batch_size: int = 10
    fetch_concurrency: int = 5

    # Retries for 429 / 5xx responses (exponential backoff in googleapiclient)
    gmail_num_retries: int = 3

    # Monitoring
    sentry_dsn: str = ""

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def gmail_authenticated(self) -> bool:
        """Whether user tokens for Gmail are configured."""
        return bool(self.google_access_token or self.google_refresh_token)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
