"""
Pytest configuration and shared fixtures.

This module provides common fixtures for all tests in the geocoder control
project: sample provider payloads, an httpx mock transport that answers like a
JSONP endpoint, and recording collaborators for the control.
"""

import json
import sys
import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from geocoder_control.providers.base import GeocodingProvider, ProviderType
from geocoder_control.providers.manager import reset_manager
from geocoder_control.providers.models import BoundingBox, GeocodeResult, LatLng
from geocoder_control.providers.settings import reset_settings
from geocoder_control.providers.transport import JsonpTransport


GEOCODER_ENV_VARS = [
    "GEOCODER_PROVIDER",
    "GEOCODER_REQUEST_TIMEOUT",
    "GEOCODER_USER_AGENT",
    "GEOCODER_ERROR_MESSAGE",
    "GEOCODER_CANCEL_SUPERSEDED",
    "NOMINATIM_SERVICE_URL",
    "NOMINATIM_RESULT_LIMIT",
    "BING_SERVICE_URL",
    "BING_API_KEY",
    "RAVEGEO_SERVICE_URL",
    "RAVEGEO_SCHEME",
    "RAVEGEO_QUERY_SUFFIX",
    "RAVEGEO_DEEP_SEARCH",
    "RAVEGEO_WORD_BASED",
]


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Run every test with default settings and a fresh global manager."""
    for name in GEOCODER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    reset_manager()
    yield
    reset_settings()
    reset_manager()


def jsonp_body(request: httpx.Request, payload: Any) -> str:
    """Wrap ``payload`` the way the service would for ``request``."""
    params = request.url.params
    data = json.dumps(payload)
    if "prepend" in params:
        return f"{params['prepend']}{data}{params.get('append', '')}"
    for name in ("json_callback", "jsonp", "callback"):
        if name in params:
            return f"{params[name]}({data});"
    return data


@pytest.fixture
def make_transport():
    """
    Build a JsonpTransport backed by an httpx MockTransport.

    The handler receives the request and returns either a payload (wrapped
    automatically) or a ready httpx.Response.
    """
    def factory(handler: Callable[[httpx.Request], Any], timeout: float = 5.0) -> JsonpTransport:
        def respond(request: httpx.Request) -> httpx.Response:
            answer = handler(request)
            if isinstance(answer, httpx.Response):
                return answer
            return httpx.Response(200, text=jsonp_body(request, answer))

        client = httpx.AsyncClient(transport=httpx.MockTransport(respond))
        return JsonpTransport(client=client, timeout=timeout)

    return factory


@pytest.fixture
def payload_transport(make_transport):
    """Transport that answers every request with a fixed payload and records requests."""

    def factory(payload: Any):
        requests: List[httpx.Request] = []

        def handler(request: httpx.Request):
            requests.append(request)
            return payload

        transport = make_transport(handler)
        transport.requests = requests
        return transport

    return factory


@pytest.fixture
def nominatim_payload():
    """Nominatim search response with three matches in relevance order."""
    return [
        {
            "display_name": "Paris, Île-de-France, France",
            "boundingbox": ["48.8155755", "48.9021560", "2.2241220", "2.4697602"],
            "lat": "48.8588897",
            "lon": "2.3200410",
        },
        {
            "display_name": "Paris, Lamar County, Texas, United States",
            "boundingbox": ["33.6118", "33.7383", "-95.6279", "-95.4651"],
        },
        {
            "display_name": "Paris, Henry County, Tennessee, United States",
            "boundingbox": ["36.2646", "36.3380", "-88.3520", "-88.2705"],
        },
    ]


@pytest.fixture
def bing_payload():
    """Bing Locations response with two resources."""
    return {
        "authenticationResultCode": "ValidCredentials",
        "resourceSets": [
            {
                "estimatedTotal": 2,
                "resources": [
                    {
                        "name": "Stockholm, Sweden",
                        "bbox": [59.1, 17.7, 59.5, 18.3],
                        "point": {"type": "Point", "coordinates": [59.33, 18.06]},
                    },
                    {
                        "name": "Stockholm, WI",
                        "bbox": [44.47, -92.28, 44.50, -92.24],
                        "point": {"type": "Point", "coordinates": [44.48, -92.26]},
                    },
                ],
            }
        ],
        "statusCode": 200,
    }


@pytest.fixture
def ravegeo_payload():
    """RaveGeo response: address records with x/y coordinates."""
    return [
        {"address": "Drottninggatan 1, Stockholm", "x": 18.0649, "y": 59.3326},
        {"address": "Drottninggatan 1, Göteborg", "x": 11.9668, "y": 57.7058},
    ]


def make_result(name: str, lat: float, lng: float, span: float = 0.1) -> GeocodeResult:
    return GeocodeResult(
        name=name,
        bbox=BoundingBox(south=lat - span, west=lng - span, north=lat + span, east=lng + span),
        center=LatLng(lat=lat, lng=lng),
    )


@pytest.fixture
def sample_results():
    """Provide normalized results for testing."""
    return [
        make_result("Paris, France", 48.85, 2.35),
        make_result("Paris, Texas", 33.66, -95.55),
        make_result("Paris, Tennessee", 36.30, -88.32),
    ]


class ScriptedProvider(GeocodingProvider):
    """
    Provider whose answers are scripted per query.

    A query maps to a list of results, an exception to raise, or an
    asyncio.Event-gated answer for ordering tests.
    """

    def __init__(
        self,
        answers: Optional[Dict[str, Any]] = None,
        provider_type=ProviderType.NOMINATIM,
        transport: Optional[JsonpTransport] = None,
    ):
        super().__init__(transport=transport or JsonpTransport(timeout=1.0))
        self.answers = answers or {}
        self.gates: Dict[str, asyncio.Event] = {}
        self.calls: List[str] = []
        self._type = provider_type

    def gate(self, query: str) -> asyncio.Event:
        self.gates[query] = asyncio.Event()
        return self.gates[query]

    async def geocode(self, query: str) -> List[GeocodeResult]:
        self.calls.append(query)
        if query in self.gates:
            await self.gates[query].wait()
        answer = self.answers.get(query, [])
        if isinstance(answer, Exception):
            raise answer
        return list(answer)

    @property
    def service_url(self) -> str:
        return "https://geocoder.invalid/search"

    def build_params(self, query: str) -> Dict[str, Any]:
        return {"q": query}

    def extract_entries(self, data: Any) -> List[Any]:
        return []

    def parse_entry(self, entry: Any) -> GeocodeResult:
        raise ValueError("not used")

    @property
    def provider_type(self) -> ProviderType:
        return self._type


class RecordingMapView:
    """Map view that records every call and tracks live markers."""

    def __init__(self):
        self.calls: List[tuple] = []
        self.markers: Dict[int, tuple] = {}
        self._next_handle = 0

    def fit_viewport(self, bbox: BoundingBox) -> None:
        self.calls.append(("fit_viewport", bbox))

    def place_marker(self, center: LatLng, label: str) -> int:
        self._next_handle += 1
        self.markers[self._next_handle] = (center, label)
        self.calls.append(("place_marker", center, label))
        return self._next_handle

    def remove_marker(self, handle: int) -> None:
        del self.markers[handle]
        self.calls.append(("remove_marker", handle))


class RecordingControlView:
    """Control view that records updates."""

    def __init__(self):
        self.busy_changes: List[bool] = []
        self.alternatives = None
        self.shown_batches: List[Any] = []
        self.error: Optional[str] = None

    def set_busy(self, busy: bool) -> None:
        self.busy_changes.append(busy)

    def show_alternatives(self, batch) -> None:
        self.alternatives = batch
        self.shown_batches.append(batch)

    def clear_alternatives(self) -> None:
        self.alternatives = None

    def show_error(self, message: str) -> None:
        self.error = message

    def clear_error(self) -> None:
        self.error = None


@pytest.fixture
def scripted_provider():
    return ScriptedProvider()


@pytest.fixture
def map_view():
    return RecordingMapView()


@pytest.fixture
def control_view():
    return RecordingControlView()
