"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False
    platform_name: str = "Storefront"

    # Database
    database_url: str = "postgresql+asyncpg://searchfeed:searchfeed_dev_password@db:5432/searchfeed"
    auto_create_schema: bool = True

    # Storefront channel used when a shopkey binding has no channel assigned
    default_sales_channel_id: str = "98432def39fc4624b33213a56b8c944d"

    # External search service
    search_service_url: str = "https://service.search.example.com/ps"
    service_config_url: str = "https://cdn.search.example.com/static"
    search_timeout: float = 3.0

    # Logging
    log_level: str = "INFO"

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
