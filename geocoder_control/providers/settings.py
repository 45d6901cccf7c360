"""
Configuration settings for the geocoding providers using Pydantic Settings.

This module centralizes all configuration for the geocoder control and its
providers, using Pydantic Settings for validation and type safety.
"""

from pydantic import Field
from pydantic_settings import BaseSettings
from typing import Optional


class GeocoderSettings(BaseSettings):
    """
    Settings for the geocoder control and its providers.

    Uses Pydantic Settings to load and validate configuration from
    environment variables with proper type checking and defaults.
    """

    # Control configuration
    geocoder_provider: str = Field(
        default="nominatim",
        alias="GEOCODER_PROVIDER",
        description="Default geocoding provider (nominatim, bing, ravegeo)"
    )
    geocoder_request_timeout: float = Field(
        default=30.0,
        gt=0,
        alias="GEOCODER_REQUEST_TIMEOUT",
        description="Seconds to wait for a provider callback before failing"
    )
    geocoder_user_agent: str = Field(
        default="geocoder-control/1.0",
        alias="GEOCODER_USER_AGENT",
        description="User agent for provider requests"
    )
    geocoder_error_message: str = Field(
        default="Nothing found.",
        alias="GEOCODER_ERROR_MESSAGE",
        description="Message shown when a query yields no results"
    )
    geocoder_cancel_superseded: bool = Field(
        default=False,
        alias="GEOCODER_CANCEL_SUPERSEDED",
        description="Cancel an outstanding query when a new one is submitted"
    )

    # Nominatim settings
    nominatim_service_url: str = Field(
        default="https://nominatim.openstreetmap.org/search/",
        alias="NOMINATIM_SERVICE_URL",
        description="Nominatim search endpoint"
    )
    nominatim_result_limit: int = Field(
        default=5,
        ge=1,
        alias="NOMINATIM_RESULT_LIMIT",
        description="Maximum number of Nominatim results per query"
    )

    # Bing Maps settings
    bing_service_url: str = Field(
        default="https://dev.virtualearth.net/REST/v1/Locations",
        alias="BING_SERVICE_URL",
        description="Bing Maps Locations endpoint"
    )
    bing_api_key: Optional[str] = Field(
        default=None,
        alias="BING_API_KEY",
        description="Bing Maps key (required when using the Bing provider)"
    )

    # RaveGeo settings
    ravegeo_service_url: Optional[str] = Field(
        default=None,
        alias="RAVEGEO_SERVICE_URL",
        description="RaveGeo geocoding endpoint (required when using RaveGeo)"
    )
    ravegeo_scheme: Optional[str] = Field(
        default=None,
        alias="RAVEGEO_SCHEME",
        description="RaveGeo scheme identifier (required when using RaveGeo)"
    )
    ravegeo_query_suffix: str = Field(
        default="",
        alias="RAVEGEO_QUERY_SUFFIX",
        description="Text appended to every RaveGeo query"
    )
    ravegeo_deep_search: bool = Field(
        default=True,
        alias="RAVEGEO_DEEP_SEARCH",
        description="RaveGeo deepSearch option"
    )
    ravegeo_word_based: bool = Field(
        default=False,
        alias="RAVEGEO_WORD_BASED",
        description="RaveGeo wordBased option"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "env_prefix": "",
        "extra": "ignore",
    }


# Global settings instance
_settings: Optional[GeocoderSettings] = None


def get_settings() -> GeocoderSettings:
    """
    Get global settings instance (singleton pattern).

    Returns:
        Validated GeocoderSettings instance
    """
    global _settings
    if _settings is None:
        _settings = GeocoderSettings()
    return _settings


def reset_settings() -> None:
    """Reset global settings (useful for testing)."""
    global _settings
    _settings = None
