from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FlixbusConfig(BaseSettings):
    """Configuration for the FlixBus (meinfernbus) mobile API.

    Automatically loads from environment variables and .env file.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    api_key: str | None = Field(default=None, alias="FLIXBUS_API_KEY")
    api_base: str = Field(default="http://api.meinfernbus.de/mobile/v1/", alias="FLIXBUS_API_BASE")
    request_timeout_seconds: float = Field(default=30.0, alias="FLIXBUS_TIMEOUT")

    # Search dates are encoded in the operator's civil calendar
    operator_timezone: str = Field(default="Europe/Berlin", alias="FLIXBUS_TIMEZONE")

    # Fixed passenger/currency defaults sent with every search
    currency: str = Field(default="EUR", alias="FLIXBUS_CURRENCY")
    adults: int = 1
    children: int = 0
    bikes: int = 0

    # The meinfernbus API has no forward cursor
    forward_paging: bool = Field(default=False, alias="FLIXBUS_FORWARD_PAGING")

    # network.json (station list) changes rarely
    network_cache_ttl_seconds: int = Field(default=3600, alias="FLIXBUS_NETWORK_CACHE_TTL")

    @property
    def search_url(self) -> str:
        return f"{self.api_base}trip/search.json"

    @property
    def network_url(self) -> str:
        return f"{self.api_base}network.json"


@lru_cache
def get_flixbus_config() -> FlixbusConfig:
    """Get FlixBus API configuration (cached singleton).

    Returns:
        FlixbusConfig with values from .env file or environment variables.
    """
    return FlixbusConfig()
