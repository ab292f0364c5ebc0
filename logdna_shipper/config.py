import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .payload import DEFAULT_INGEST_URL

logger = logging.getLogger(__name__)


class ShipperSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    api_key: str = Field(alias="LOGDNA_APIKEY")
    tags: str = Field(default="", alias="LOGDNA_TAGS")
    app: str = Field(default="app", alias="LOGDNA_APP")

    ingest_url: str = Field(
        default=DEFAULT_INGEST_URL,
        alias="LOGDNA_INGEST_URL",
    )
    timeout: float = Field(
        default=5.0,
        alias="LOGDNA_TIMEOUT",
    )


def get_settings() -> ShipperSettings:
    settings = ShipperSettings()
    # Don't log the API key
    safe = settings.model_dump(exclude={"api_key"})
    logger.debug("Shipper settings loaded: %s", safe)
    return settings
