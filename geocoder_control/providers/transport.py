"""
JSONP-style transport for cross-origin geocoding endpoints.

Geocoding services reached from an embedded map deliver their payload as a
script that invokes a caller-named callback: ``<callback id>(<json>)``. This
module keeps the callback-identifier pattern but owns the registry: every
request registers a one-shot callback under a fresh identifier, the response
body is dispatched only to the callback of the request that fetched it, and the
registration is released on every completion path (success, failure, timeout
or cancellation).
"""

import asyncio
import itertools
import json
import logging
import re
from typing import Any, Dict, Mapping, Optional, Tuple

import httpx

logger = logging.getLogger(__name__)

CALLBACK_PREFIX = "_l_geocoder_"

# callbackName( ... ) with an optional trailing semicolon
_SCRIPT_PATTERN = re.compile(
    r"^\s*(?:/\*\*/\s*)?(?P<name>[A-Za-z_$][\w$]*)\s*\((?P<payload>.*)\)\s*;?\s*$",
    re.DOTALL,
)


class GeocoderError(Exception):
    """Base class for geocoder failures."""


class TransportError(GeocoderError):
    """A request could not deliver a usable payload."""

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class TransportTimeout(TransportError):
    """The callback was not invoked before the timeout expired."""


class JsonpTransport:
    """
    Issues callback-delivered GET requests and resolves them exactly once.

    The callback registry maps identifiers to pending futures. Identifiers
    come from a process-wide counter, so two transports never hand out the
    same name.
    """

    _callback_ids = itertools.count()

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
    ):
        """
        Initialize the transport.

        Args:
            client: Optional pre-configured httpx client. When omitted the
                transport creates (and later closes) its own.
            timeout: Seconds to wait for the callback. Defaults to
                GEOCODER_REQUEST_TIMEOUT.
            user_agent: User-Agent header for the owned client.
        """
        from .settings import get_settings

        settings = get_settings()
        self.timeout = timeout if timeout is not None else settings.geocoder_request_timeout
        self._user_agent = user_agent or settings.geocoder_user_agent
        self._client = client
        self._owns_client = client is None
        self._pending: Dict[str, asyncio.Future] = {}

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers={"User-Agent": self._user_agent},
            )
            self._owns_client = True
        return self._client

    @classmethod
    def next_callback_id(cls) -> str:
        return f"{CALLBACK_PREFIX}{next(cls._callback_ids)}"

    @property
    def pending(self) -> Tuple[str, ...]:
        """Identifiers of callbacks that are still registered."""
        return tuple(self._pending)

    async def request(
        self,
        url: str,
        params: Mapping[str, Any],
        callback_param: str = "callback",
        wrap: bool = False,
    ) -> Any:
        """
        Send a callback-delivered request and wait for its payload.

        Args:
            url: Provider endpoint
            params: Query string parameters
            callback_param: Parameter that carries the callback name
            wrap: Ask the service to wrap the body using ``prepend``/``append``
                parameters instead of a callback parameter

        Returns:
            The deserialized payload passed to the callback

        Raises:
            TransportError: HTTP failure or a body that cannot be parsed
            TransportTimeout: No delivery within ``timeout`` seconds
            asyncio.CancelledError: The request was cancelled
        """
        callback_id = self.next_callback_id()
        future = asyncio.get_running_loop().create_future()
        self._pending[callback_id] = future

        query = dict(params)
        if wrap:
            query["prepend"] = f"{callback_id}("
            query["append"] = ")"
        else:
            query[callback_param] = callback_id

        logger.debug(f"Registered callback {callback_id} for {url}")
        delivery = asyncio.ensure_future(self._deliver(url, query, callback_id))
        try:
            return await asyncio.wait_for(future, timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"No response from {url} after {self.timeout}s ({callback_id})")
            raise TransportTimeout(
                f"Request timed out after {self.timeout} seconds", url=url
            ) from None
        finally:
            self._pending.pop(callback_id, None)
            if not delivery.done():
                delivery.cancel()
            logger.debug(f"Released callback {callback_id}")

    def cancel(self, callback_id: str) -> bool:
        """
        Cancel an in-flight request.

        Returns:
            True if a pending request was cancelled, False otherwise
        """
        future = self._pending.get(callback_id)
        if future is None or future.done():
            return False
        logger.info(f"Cancelling request {callback_id}")
        return future.cancel()

    def dispatch(self, body: str, callback_id: str) -> bool:
        """
        Deliver a response body to the callback of the request that fetched it.

        A bare JSON body (no wrapper) is delivered to ``callback_id``. A body
        that invokes any other callback is refused, so one response can never
        resolve a different request.

        Returns:
            True if the callback was resolved

        Raises:
            TransportError: The body is not valid JSON or JSONP
        """
        match = _SCRIPT_PATTERN.match(body)
        if match:
            named = match.group("name")
            raw_payload = match.group("payload")
        else:
            named = callback_id
            raw_payload = body

        try:
            payload = json.loads(raw_payload)
        except ValueError as e:
            raise TransportError(f"Malformed response payload: {e}") from e

        if named != callback_id:
            logger.warning(f"Response for {callback_id} invoked {named}, refusing delivery")
            return False
        return self._resolve(callback_id, payload)

    def _resolve(self, callback_id: str, payload: Any) -> bool:
        future = self._pending.get(callback_id)
        if future is None or future.done():
            # Unknown or already fired callbacks are ignored
            logger.debug(f"Ignoring delivery for inactive callback {callback_id}")
            return False
        future.set_result(payload)
        return True

    def _fail(self, callback_id: str, error: Exception) -> None:
        future = self._pending.get(callback_id)
        if future is not None and not future.done():
            future.set_exception(error)

    async def _deliver(self, url: str, query: Dict[str, Any], callback_id: str) -> None:
        try:
            body = await self._fetch(url, query)
            self.dispatch(body, callback_id)
        except TransportError as e:
            if e.url is None:
                e.url = url
            self._fail(callback_id, e)
            return

        if callback_id in self._pending and not self._pending[callback_id].done():
            self._fail(
                callback_id,
                TransportError(f"Response did not invoke callback {callback_id}", url=url),
            )

    async def _fetch(self, url: str, params: Dict[str, Any]) -> str:
        client = self._get_client()
        try:
            response = await client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Geocoding service error {e.response.status_code} from {url}")
            raise TransportError(
                f"HTTP {e.response.status_code} from geocoding service",
                url=url,
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Geocoding request to {url} failed: {e}")
            raise TransportError(str(e) or type(e).__name__, url=url) from e
        return response.text

    async def aclose(self) -> None:
        """Close the owned HTTP client."""
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "JsonpTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
