"""Application configuration using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Upstream source
    source_name: str = "RottenTomatoes"
    movies_url: str = "https://editorial.rottentomatoes.com/guide/popular-movies/"
    shows_url: str = "https://editorial.rottentomatoes.com/guide/popular-tv-shows/"

    # Response cache
    cache_ttl: int = 3600
    cache_max_entries: int = 256

    # Redis (optional, in-memory cache is used when empty)
    redis_url: str = ""

    # Scraping settings
    scrape_timeout: int = 30
    user_agent: str = "tomatofeed/0.1"

    # Logging
    log_level: str = "INFO"

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000


# Global settings instance
settings = Settings()
