"""
Tests for GeocoderSettings.
"""

import os
import pytest
from unittest.mock import patch

from pydantic import ValidationError

from geocoder_control.providers.settings import GeocoderSettings, get_settings, reset_settings


class TestGeocoderSettingsDefaults:
    """Test default values for geocoder settings."""

    def test_defaults(self):
        settings = GeocoderSettings()

        assert settings.geocoder_provider == "nominatim"
        assert settings.geocoder_request_timeout == 30.0
        assert settings.geocoder_error_message == "Nothing found."
        assert settings.geocoder_cancel_superseded is False
        assert settings.nominatim_result_limit == 5
        assert settings.bing_api_key is None
        assert settings.ravegeo_service_url is None
        assert settings.ravegeo_deep_search is True
        assert settings.ravegeo_word_based is False


class TestGeocoderSettingsEnvironmentVariables:
    """Test environment variable overrides."""

    def test_provider_from_env(self):
        with patch.dict(os.environ, {"GEOCODER_PROVIDER": "bing"}):
            assert GeocoderSettings().geocoder_provider == "bing"

    def test_env_names_are_case_insensitive(self):
        with patch.dict(os.environ, {"geocoder_request_timeout": "2.5"}):
            assert GeocoderSettings().geocoder_request_timeout == 2.5

    def test_cancel_superseded_from_env(self):
        with patch.dict(os.environ, {"GEOCODER_CANCEL_SUPERSEDED": "true"}):
            assert GeocoderSettings().geocoder_cancel_superseded is True

    def test_invalid_timeout_rejected(self):
        with patch.dict(os.environ, {"GEOCODER_REQUEST_TIMEOUT": "0"}):
            with pytest.raises(ValidationError):
                GeocoderSettings()


class TestSettingsSingleton:
    """Test the global settings accessor."""

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_reset_settings(self):
        first = get_settings()
        reset_settings()
        assert get_settings() is not first
