"""
RaveGeo provider implementation.

This module provides point geocoding through a RaveGeo service.
"""

from .provider import RaveGeoProvider

__all__ = ['RaveGeoProvider']
