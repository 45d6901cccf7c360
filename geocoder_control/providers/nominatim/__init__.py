"""
Nominatim (OpenStreetMap) provider implementation.

This module provides geocoding through the Nominatim search API.
"""

from .provider import NominatimProvider

__all__ = ['NominatimProvider']
