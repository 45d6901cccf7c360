"""
Multi-provider geocoding abstraction layer.

This module provides a unified interface for working with different geocoding
services such as Nominatim, Bing Maps and RaveGeo.

The architecture follows the Strategy pattern, allowing the control to switch
between providers at any time while every provider returns the same
normalized result model.
"""

from .base import GeocodingProvider, ProviderType
from .models import BoundingBox, GeocodeResult, LatLng, ResultBatch
from .transport import GeocoderError, JsonpTransport, TransportError, TransportTimeout
from .manager import GeocoderProviderManager, create_provider

__all__ = [
    'GeocodingProvider',
    'ProviderType',
    'BoundingBox',
    'GeocodeResult',
    'LatLng',
    'ResultBatch',
    'GeocoderError',
    'JsonpTransport',
    'TransportError',
    'TransportTimeout',
    'GeocoderProviderManager',
    'create_provider'
]
