"""
Bing Maps provider implementation.

This module implements the GeocodingProvider interface for the Bing Maps
Locations API. Results are nested under ``resourceSets[0].resources``; each
resource carries a ``bbox`` as ``[south, west, north, east]`` and a
``point.coordinates`` pair as ``[lat, lon]``.
"""

import logging
from typing import Any, Dict, List, Optional

from ..base import GeocodingProvider, ProviderType
from ..models import BoundingBox, GeocodeResult, LatLng
from ..transport import JsonpTransport

logger = logging.getLogger(__name__)


class BingProvider(GeocodingProvider):
    """
    Bing Maps Locations provider.

    Requires BING_API_KEY to be set, or a key passed explicitly.
    """

    callback_param = "jsonp"

    def __init__(
        self,
        transport: Optional[JsonpTransport] = None,
        api_key: Optional[str] = None,
        service_url: Optional[str] = None,
    ):
        """
        Initialize Bing provider.

        Args:
            transport: Optional transport instance
            api_key: Bing Maps key, defaults to BING_API_KEY
            service_url: Locations endpoint, defaults to BING_SERVICE_URL

        Raises:
            ValueError: If no API key is configured
        """
        from ..settings import get_settings

        settings = get_settings()
        self._api_key = api_key or settings.bing_api_key

        if not self._api_key:
            raise ValueError(
                "BING_API_KEY is required for Bing provider. Please set it in environment or .env file"
            )

        super().__init__(transport)
        self._service_url = service_url or settings.bing_service_url

        logger.info("Bing provider initialized successfully")

    @property
    def service_url(self) -> str:
        return self._service_url

    @property
    def provider_type(self) -> ProviderType:
        return ProviderType.BING

    def build_params(self, query: str) -> Dict[str, Any]:
        return {
            "query": query,
            "key": self._api_key,
        }

    def extract_entries(self, data: Any) -> List[Any]:
        try:
            resources = data["resourceSets"][0]["resources"]
        except (KeyError, IndexError, TypeError):
            logger.debug("Bing payload has no resourceSets[0].resources")
            return []
        if not isinstance(resources, list):
            return []
        return resources

    def parse_entry(self, entry: Dict[str, Any]) -> GeocodeResult:
        south, west, north, east = (float(value) for value in entry["bbox"])
        lat, lng = (float(value) for value in entry["point"]["coordinates"])
        return GeocodeResult(
            name=entry["name"],
            bbox=BoundingBox(south=south, west=west, north=north, east=east),
            center=LatLng(lat=lat, lng=lng),
        )
