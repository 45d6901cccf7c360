"""
Nominatim provider implementation.

Queries the OpenStreetMap Nominatim search API. Nominatim reports the extent
of every match as ``[south, north, west, east]`` strings; the marker is placed
at the middle of that box.
"""

import logging
from typing import Any, Dict, List, Optional

from ..base import GeocodingProvider, ProviderType
from ..models import BoundingBox, GeocodeResult
from ..transport import JsonpTransport

logger = logging.getLogger(__name__)


class NominatimProvider(GeocodingProvider):
    """
    OpenStreetMap Nominatim provider.

    Needs no API key. The service URL and result limit come from settings
    unless given explicitly.
    """

    callback_param = "json_callback"

    def __init__(
        self,
        transport: Optional[JsonpTransport] = None,
        service_url: Optional[str] = None,
        limit: Optional[int] = None,
    ):
        from ..settings import get_settings

        super().__init__(transport)
        settings = get_settings()
        self._service_url = service_url or settings.nominatim_service_url
        self.limit = limit if limit is not None else settings.nominatim_result_limit

        logger.info(f"Nominatim provider initialized ({self._service_url})")

    @property
    def service_url(self) -> str:
        return self._service_url

    @property
    def provider_type(self) -> ProviderType:
        return ProviderType.NOMINATIM

    def build_params(self, query: str) -> Dict[str, Any]:
        return {
            "q": query,
            "limit": self.limit,
            "format": "json",
        }

    def extract_entries(self, data: Any) -> List[Any]:
        if not isinstance(data, list):
            logger.warning(f"Unexpected Nominatim payload type: {type(data).__name__}")
            return []
        return data

    def parse_entry(self, entry: Dict[str, Any]) -> GeocodeResult:
        south, north, west, east = (float(value) for value in entry["boundingbox"])
        bbox = BoundingBox(south=south, west=west, north=north, east=east)
        return GeocodeResult(
            name=entry["display_name"],
            bbox=bbox,
            center=bbox.center,
        )
