"""
RaveGeo provider implementation.

RaveGeo is a point geocoder: each match is an ``{address, x, y}`` record with
no extent, so the bounding box is the zero-area box around the point.
"""

import logging
from typing import Any, Dict, List, Optional

from ..base import GeocodingProvider, ProviderType
from ..models import BoundingBox, GeocodeResult, LatLng
from ..transport import JsonpTransport

logger = logging.getLogger(__name__)


def _flag(value: bool) -> str:
    return "true" if value else "false"


class RaveGeoProvider(GeocodingProvider):
    """
    RaveGeo provider.

    The service wraps its JSON body with the ``prepend`` and ``append``
    parameters, which carry the callback invocation.
    """

    wrap_callback = True

    def __init__(
        self,
        transport: Optional[JsonpTransport] = None,
        service_url: Optional[str] = None,
        scheme: Optional[str] = None,
        query_suffix: Optional[str] = None,
        deep_search: Optional[bool] = None,
        word_based: Optional[bool] = None,
    ):
        """
        Initialize RaveGeo provider.

        Args:
            transport: Optional transport instance
            service_url: RaveGeo endpoint, defaults to RAVEGEO_SERVICE_URL
            scheme: Scheme identifier, defaults to RAVEGEO_SCHEME
            query_suffix: Text appended to each query (e.g. ", Sweden")
            deep_search: deepSearch option
            word_based: wordBased option

        Raises:
            ValueError: If the service URL or scheme is missing
        """
        from ..settings import get_settings

        settings = get_settings()
        self._service_url = service_url or settings.ravegeo_service_url
        self._scheme = scheme or settings.ravegeo_scheme

        if not self._service_url or not self._scheme:
            raise ValueError(
                "RAVEGEO_SERVICE_URL and RAVEGEO_SCHEME are required for RaveGeo provider"
            )

        super().__init__(transport)
        self.query_suffix = (
            query_suffix if query_suffix is not None else settings.ravegeo_query_suffix
        )
        self.deep_search = (
            deep_search if deep_search is not None else settings.ravegeo_deep_search
        )
        self.word_based = (
            word_based if word_based is not None else settings.ravegeo_word_based
        )

        logger.info(f"RaveGeo provider initialized ({self._service_url}, scheme={self._scheme})")

    @property
    def service_url(self) -> str:
        return self._service_url

    @property
    def scheme(self) -> str:
        return self._scheme

    @property
    def provider_type(self) -> ProviderType:
        return ProviderType.RAVEGEO

    def build_params(self, query: str) -> Dict[str, Any]:
        return {
            "address": query + self.query_suffix,
            "scheme": self._scheme,
            "outputFormat": "jsonp",
            "deepSearch": _flag(self.deep_search),
            "wordBased": _flag(self.word_based),
        }

    def extract_entries(self, data: Any) -> List[Any]:
        if not isinstance(data, list):
            logger.warning(f"Unexpected RaveGeo payload type: {type(data).__name__}")
            return []
        return data

    def parse_entry(self, entry: Dict[str, Any]) -> GeocodeResult:
        center = LatLng(lat=float(entry["y"]), lng=float(entry["x"]))
        return GeocodeResult(
            name=entry["address"],
            bbox=BoundingBox.from_point(center),
            center=center,
        )
