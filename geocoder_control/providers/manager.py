"""
Provider management and factory functions.

This module provides the main interface for creating and managing geocoding
providers. It handles provider selection based on configuration and
provides a factory function for easy provider instantiation.
"""

import logging
from typing import Any, Dict, Optional, Type

from .base import GeocodingProvider, ProviderType
from .transport import JsonpTransport

logger = logging.getLogger(__name__)


class GeocoderProviderManager:
    """
    Manages geocoding provider instances and configuration.

    This class handles the lifecycle of provider instances, the shared
    transport, and provider selection based on environment configuration.
    """

    def __init__(self, transport: Optional[JsonpTransport] = None):
        """
        Initialize the provider manager.

        Args:
            transport: Optional transport shared by all providers. If not provided,
                creates a new one.
        """
        self._transport = transport or JsonpTransport()
        self._providers: Dict[ProviderType, GeocodingProvider] = {}
        self._provider_classes: Dict[ProviderType, Type[GeocodingProvider]] = {}

    def register_provider(self, provider_type: ProviderType, provider_class: Type[GeocodingProvider]):
        """
        Register a provider class for a given provider type.

        Args:
            provider_type: The provider type identifier
            provider_class: The provider class to register
        """
        self._provider_classes[provider_type] = provider_class
        # Drop any instance built from a previously registered class
        self._providers.pop(provider_type, None)
        logger.info(f"Registered provider class for {provider_type.value}")

    def get_provider(self, provider_type: Optional[ProviderType] = None) -> GeocodingProvider:
        """
        Get a provider instance for the specified type.

        Args:
            provider_type: Provider type to get. If None, uses configured default.

        Returns:
            Configured provider instance

        Raises:
            ValueError: If provider type is not supported or not configured
        """
        if provider_type is None:
            provider_type = self._get_default_provider_type()

        if provider_type in self._providers:
            return self._providers[provider_type]

        if provider_type not in self._provider_classes:
            raise ValueError(f"Provider type {provider_type.value} is not registered")

        provider_class = self._provider_classes[provider_type]
        provider_instance = provider_class(transport=self._transport)

        self._providers[provider_type] = provider_instance

        logger.info(f"Created new provider instance: {provider_type.value}")
        return provider_instance

    def _get_default_provider_type(self) -> ProviderType:
        """
        Get the default provider type from settings configuration.

        Returns:
            Default provider type

        Raises:
            ValueError: If no valid provider is configured
        """
        from .settings import get_settings
        settings = get_settings()
        provider_name = settings.geocoder_provider.lower()

        try:
            return ProviderType(provider_name)
        except ValueError:
            available = [p.value for p in ProviderType]
            raise ValueError(
                f"Invalid provider '{provider_name}'. "
                f"Available providers: {', '.join(available)}"
            )

    @property
    def transport(self) -> JsonpTransport:
        """Get the shared transport instance."""
        return self._transport

    def get_stats(self) -> Dict[str, Any]:
        """
        Get a summary of registered and instantiated providers.

        Returns:
            Dictionary with provider and transport information
        """
        return {
            "active_providers": [p.value for p in self._providers],
            "registered_providers": [p.value for p in self._provider_classes],
            "pending_requests": len(self._transport.pending),
        }

    async def aclose(self) -> None:
        """Close the shared transport."""
        await self._transport.aclose()


# Global provider manager instance
_global_manager: Optional[GeocoderProviderManager] = None


def get_manager() -> GeocoderProviderManager:
    """
    Get the global provider manager instance.

    Returns:
        Global GeocoderProviderManager instance
    """
    global _global_manager
    if _global_manager is None:
        _global_manager = GeocoderProviderManager()
        _register_built_in_providers(_global_manager)
    return _global_manager


def reset_manager() -> None:
    """Reset the global manager (useful for testing)."""
    global _global_manager
    _global_manager = None


def create_provider(provider_type: Optional[ProviderType] = None) -> GeocodingProvider:
    """
    Factory function to create a geocoding provider.

    This is the main entry point for getting a provider instance.
    It uses the global manager and automatically selects the provider
    based on environment configuration.

    Args:
        provider_type: Specific provider type to create. If None, uses default.

    Returns:
        Configured provider instance ready for use

    Example:
        ```python
        # Use default provider (from GEOCODER_PROVIDER env var)
        provider = create_provider()

        # Use specific provider
        provider = create_provider(ProviderType.BING)

        results = await provider.geocode("Paris, France")
        ```
    """
    manager = get_manager()
    return manager.get_provider(provider_type)


def _register_built_in_providers(manager: GeocoderProviderManager):
    """
    Register all built-in provider classes.

    Args:
        manager: Manager instance to register providers with
    """
    # Import providers here to avoid circular imports
    from .nominatim.provider import NominatimProvider
    from .bing.provider import BingProvider
    from .ravegeo.provider import RaveGeoProvider

    manager.register_provider(ProviderType.NOMINATIM, NominatimProvider)
    manager.register_provider(ProviderType.BING, BingProvider)
    manager.register_provider(ProviderType.RAVEGEO, RaveGeoProvider)

    logger.info("Finished registering built-in providers")
