"""
Base interfaces and abstract classes for geocoding providers.

This module defines the core contract that all geocoding providers must implement,
ensuring a consistent API across different provider implementations.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .models import GeocodeResult
from .transport import JsonpTransport

logger = logging.getLogger(__name__)


class ProviderType(Enum):
    """Supported geocoding providers."""
    NOMINATIM = "nominatim"
    BING = "bing"
    RAVEGEO = "ravegeo"


class GeocodingProvider(ABC):
    """
    Abstract base class for geocoding providers.

    A provider turns a free-text query into a provider-specific request,
    sends it through the transport and normalizes the raw payload into
    ``GeocodeResult`` objects, preserving the provider's relevance order.
    Providers hold configuration only; nothing is kept between queries.
    """

    #: Query parameter that carries the callback name
    callback_param: str = "callback"
    #: Ask the service to wrap the body with prepend/append parameters
    wrap_callback: bool = False

    def __init__(self, transport: Optional[JsonpTransport] = None):
        self._transport = transport or JsonpTransport()

    @property
    def transport(self) -> JsonpTransport:
        return self._transport

    async def geocode(self, query: str) -> List[GeocodeResult]:
        """
        Geocode a free-text query.

        Args:
            query: Place description (e.g., "Paris, France")

        Returns:
            Normalized results in provider relevance order, possibly empty

        Raises:
            TransportError: The provider could not be reached or answered garbage
        """
        if not query or not query.strip():
            logger.debug("Skipping geocode request for blank query")
            return []

        data = await self._transport.request(
            self.service_url,
            self.build_params(query),
            callback_param=self.callback_param,
            wrap=self.wrap_callback,
        )
        results = self.parse_response(data)
        logger.debug(f"{self.provider_type.value}: {len(results)} result(s) for '{query}'")
        return results

    def parse_response(self, data: Any) -> List[GeocodeResult]:
        """
        Normalize a raw payload, dropping entries that cannot be parsed.
        """
        results = []
        for position, entry in enumerate(self.extract_entries(data)):
            try:
                results.append(self.parse_entry(entry))
            except (KeyError, IndexError, TypeError, ValueError, ValidationError) as e:
                logger.warning(
                    f"{self.provider_type.value}: dropping malformed result #{position}: {e}"
                )
        return results

    @property
    @abstractmethod
    def service_url(self) -> str:
        """Endpoint the provider queries."""
        pass

    @abstractmethod
    def build_params(self, query: str) -> Dict[str, Any]:
        """
        Build the provider-specific query string parameters.

        Args:
            query: Non-blank query text

        Returns:
            Parameters, excluding the callback parameter
        """
        pass

    @abstractmethod
    def extract_entries(self, data: Any) -> List[Any]:
        """
        Locate the list of raw result entries in a payload.

        Returns an empty list when the payload has no results.
        """
        pass

    @abstractmethod
    def parse_entry(self, entry: Any) -> GeocodeResult:
        """
        Convert one raw entry into a GeocodeResult.

        Raises KeyError, TypeError, ValueError or ValidationError for malformed
        entries; the caller drops them.
        """
        pass

    @property
    @abstractmethod
    def provider_type(self) -> ProviderType:
        """Return the provider type identifier."""
        pass
