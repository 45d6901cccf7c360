"""
Geocoder control for web maps.

Type a place name, query a geocoding service (Nominatim, Bing Maps, RaveGeo)
and show the best match on a map.
"""

from .control import GeocoderControl, GeocoderState
from .providers import (
    BoundingBox,
    GeocodeResult,
    GeocodingProvider,
    LatLng,
    ProviderType,
    ResultBatch,
    TransportError,
    TransportTimeout,
    create_provider,
)
from .views import ConsoleMapView, ControlView, MapView, NullControlView

__version__ = "1.0.0"

__all__ = [
    'GeocoderControl',
    'GeocoderState',
    'BoundingBox',
    'GeocodeResult',
    'GeocodingProvider',
    'LatLng',
    'ProviderType',
    'ResultBatch',
    'TransportError',
    'TransportTimeout',
    'create_provider',
    'ConsoleMapView',
    'ControlView',
    'MapView',
    'NullControlView',
]
