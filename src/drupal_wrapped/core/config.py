"""Configuration management for drupal-wrapped."""

from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings."""

    # drupal.org endpoints
    api_base: str = Field("https://www.drupal.org/jsonapi", description="JSON:API base URL")
    contributions_url: str = Field(
        "https://new.drupal.org/contribution-records-by-user",
        description="Per-topic contribution records endpoint"
    )
    site_origin: str = Field("https://www.drupal.org", description="Origin for root-relative asset paths")
    asset_base: str = Field("https://www.drupal.org/assets/", description="Public base for public:// files")

    # Relay routing
    restricted_domains: List[str] = Field(["drupal.org"], description="Domains that always go through relays")
    relays_file: str = Field("config/relays.yaml", description="YAML file with ordered relay templates")
    request_timeout: float = Field(15.0, description="Per-attempt HTTP timeout in seconds")

    # Aggregation
    feed_window_months: int = Field(12, description="Trailing window for contribution feeds")
    review_year: int = Field(2025, description="Year the review covers")
    max_workers: int = Field(4, description="Thread pool size for the feed fan-out")

    # Enrichment collaborator
    enrichment_url: str = Field("", description="Deep-scrape enrichment endpoint (disabled when empty)")
    max_retries: int = Field(3, description="Maximum retry attempts")
    retry_delay: float = Field(1.0, description="Base retry delay in seconds")
    retry_backoff: float = Field(2.0, description="Retry backoff multiplier")

    # Cache
    cache_dir: str = Field(".cache/reviews", description="Directory for cached reviews")
    cache_ttl_hours: int = Field(6, description="Cached review lifetime in hours")

    # Logging
    log_level: str = Field("INFO", description="Logging level")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()
