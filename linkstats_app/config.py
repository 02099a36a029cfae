from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


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
    app_name: str = "Link Stats"
    app_version: str = "1.0.0"

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Public prefix for short links; empty means responses carry the bare code
    base_url: str = ""

    # Short code allocation
    short_code_length: int = 6
    short_code_max_attempts: int = 5
    short_code_collision_policy: str = "proceed"  # Options: "proceed", "fail"

    # Storage settings
    storage_backend: str = "sqlalchemy"  # Options: "sqlalchemy", "memory", "dynamodb"
    database_url: str = "sqlite:///./linkstats.db"
    dynamodb_url_table: str = "urls"
    dynamodb_events_table: str = "url-analytics"
    dynamodb_region: str = "us-east-1"
    dynamodb_endpoint_url: Optional[str] = None  # e.g. http://localhost:4566 for LocalStack

    # Cache settings
    cache_backend: str = "redis"  # Options: "redis", "memory", "null"
    redis_url: str = "redis://localhost:6379/0"
    cache_ttl: int = 3600  # Cache TTL in seconds (1 hour)

    # Edge-injected geo headers
    geo_country_header: str = "CloudFront-Viewer-Country"
    geo_region_header: str = "CloudFront-Viewer-Country-Region"
    geo_city_header: str = "CloudFront-Viewer-City"

    # Analytics
    analytics_default_days: int = 7
    analytics_default_limit: int = 10
    analytics_top_n: int = 10
    analytics_query_concurrency: int = 10

    # Listing
    url_list_limit: int = 100

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Create settings instance
settings = Settings()
