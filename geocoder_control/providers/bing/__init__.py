"""
Bing Maps provider implementation.

This module provides geocoding through the Bing Maps Locations API.
"""

from .provider import BingProvider

__all__ = ['BingProvider']
