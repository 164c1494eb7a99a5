from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration with environment variable support"""
    model_config = SettingsConfigDict(
        env_prefix='NEWSGRID_', env_file='.env', extra='ignore', populate_by_name=True
    )

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # Headline API credential; unset or the placeholder value disables that source
    newsapi_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices('NEWSAPI_KEY', 'NEWSGRID_NEWSAPI_KEY')
    )
    country: str = "us"

    # Outbound calls
    request_timeout: int = 10  # seconds, per HTTP call

    # Response shaping
    default_page_size: int = Field(default=20, ge=1, le=100)
    revalidate_seconds: int = 300  # Cache-Control max-age for news routes

    # Source and feed configuration file (YAML or JSON)
    config_file: str = "config/sources.yaml"
