"""Scraper configuration via pydantic-settings."""

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

DEFAULT_LOCATIONS_FILE = str(Path(__file__).resolve().parent / "data" / "locations.json")


class Settings(BaseSettings):
    """Scraper configuration loaded from environment variables."""

    # Location templates, accepts HEMICYCLE_LOCATIONS_FILE or LOCATIONS_FILE
    locations_file: str = Field(
        DEFAULT_LOCATIONS_FILE,
        validation_alias=AliasChoices("HEMICYCLE_LOCATIONS_FILE", "LOCATIONS_FILE"),
    )

    # HTTP
    http_timeout: float = Field(
        30.0,
        validation_alias=AliasChoices("HEMICYCLE_HTTP_TIMEOUT", "HTTP_TIMEOUT"),
    )
    user_agent: str = Field(
        "hemicycle/1.0 (parliament open data scraper)",
        validation_alias=AliasChoices("HEMICYCLE_USER_AGENT", "USER_AGENT"),
    )
    follow_redirects: bool = True

    # Both chambers still publish their pages in Latin-1
    default_charset: str = Field(
        "ISO-8859-1",
        validation_alias=AliasChoices("HEMICYCLE_DEFAULT_CHARSET", "DEFAULT_CHARSET"),
    )

    # Legislature used by the Chamber member pages when none is requested
    default_legislature: int = Field(
        54,
        validation_alias=AliasChoices("HEMICYCLE_DEFAULT_LEGISLATURE", "DEFAULT_LEGISLATURE"),
    )

    log_level: str = Field(
        "INFO",
        validation_alias=AliasChoices("HEMICYCLE_LOG_LEVEL", "LOG_LEVEL"),
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }


settings = Settings()
