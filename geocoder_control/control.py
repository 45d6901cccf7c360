"""
Geocoder control: submits queries to the active provider and applies results.

The control owns the active provider and the latest set of alternatives. For
every completed query it applies the result-count policy:

- no results: show the error indicator, leave the map alone
- one result: fit the viewport and place the marker right away
- several results: show the alternatives, wait for ``select``

Overlapping queries are resolved last-writer-wins unless
``cancel_superseded`` is enabled, in which case a new query cancels the one
still in flight.
"""

import asyncio
import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Set

from .providers.base import GeocodingProvider
from .providers.manager import create_provider
from .providers.models import GeocodeResult, ResultBatch
from .providers.settings import get_settings
from .providers.transport import TransportError
from .views import ControlView, MapView, NullControlView

logger = logging.getLogger(__name__)


@dataclass
class GeocoderState:
    """Mutable state owned by a GeocoderControl."""

    provider: GeocodingProvider
    alternatives: Optional[ResultBatch] = None
    last_batch: Optional[ResultBatch] = None
    outstanding: int = 0
    error_visible: bool = False
    marker: Any = None
    cancelled_batches: Set[int] = field(default_factory=set)

    @property
    def in_flight(self) -> bool:
        return self.outstanding > 0


class GeocoderControl:
    """
    Facade between the input UI, a geocoding provider and a map view.
    """

    def __init__(
        self,
        map_view: MapView,
        provider: Optional[GeocodingProvider] = None,
        view: Optional[ControlView] = None,
        error_message: Optional[str] = None,
        cancel_superseded: Optional[bool] = None,
    ):
        """
        Initialize the control.

        Args:
            map_view: Map collaborator updated when a result is applied
            provider: Active provider. Defaults to GEOCODER_PROVIDER (Nominatim)
            view: Control view for busy state, alternatives and errors
            error_message: Text shown when nothing was found
            cancel_superseded: Cancel an outstanding query on a new submit
        """
        settings = get_settings()

        self.map_view = map_view
        self.view = view if view is not None else NullControlView()
        self.error_message = (
            error_message if error_message is not None else settings.geocoder_error_message
        )
        self.cancel_superseded = (
            cancel_superseded
            if cancel_superseded is not None
            else settings.geocoder_cancel_superseded
        )
        self.state = GeocoderState(provider=provider or create_provider())

        self._batch_ids = itertools.count(1)
        self._current_task: Optional[asyncio.Future] = None
        self._current_batch_id: Optional[int] = None

    @property
    def provider(self) -> GeocodingProvider:
        return self.state.provider

    @property
    def in_flight(self) -> bool:
        return self.state.in_flight

    def set_provider(self, provider: GeocodingProvider) -> None:
        """Replace the active provider. Queries already in flight keep running."""
        self.state.provider = provider
        logger.info(f"Active geocoding provider set to {provider.provider_type.value}")

    async def submit(self, query: str) -> ResultBatch:
        """
        Geocode ``query`` with the active provider and apply the result policy.

        Args:
            query: Text typed by the user

        Returns:
            The batch produced by this query. Transport failures come back as a
            batch with ``error`` set; a query superseded by a newer one (with
            ``cancel_superseded``) comes back with ``cancelled`` set.
        """
        batch_id = next(self._batch_ids)
        provider = self.state.provider
        provider_name = provider.provider_type.value

        self.clear_results()

        if (
            self.cancel_superseded
            and self._current_task is not None
            and not self._current_task.done()
        ):
            logger.debug(f"Cancelling superseded query #{self._current_batch_id}")
            self.state.cancelled_batches.add(self._current_batch_id)
            self._current_task.cancel()

        task = asyncio.ensure_future(provider.geocode(query))
        self._current_task = task
        self._current_batch_id = batch_id
        self._change_outstanding(1)

        try:
            results = await task
        except asyncio.CancelledError:
            if batch_id not in self.state.cancelled_batches:
                raise
            self.state.cancelled_batches.discard(batch_id)
            logger.info(f"Query #{batch_id} '{query}' was superseded")
            return ResultBatch(
                batch_id=batch_id, query=query, provider=provider_name, cancelled=True
            )
        except TransportError as e:
            logger.warning(f"Geocoding '{query}' with {provider_name} failed: {e}")
            batch = ResultBatch(
                batch_id=batch_id, query=query, provider=provider_name, error=str(e)
            )
            self.state.last_batch = batch
            self.clear_results()
            self._show_error()
            return batch
        finally:
            self._change_outstanding(-1)
            if self._current_task is task:
                self._current_task = None
                self._current_batch_id = None

        batch = ResultBatch(
            batch_id=batch_id, query=query, provider=provider_name, results=tuple(results)
        )
        self.state.last_batch = batch
        self._apply_policy(batch)
        return batch

    def select(self, index: int, batch: Optional[ResultBatch] = None) -> Optional[GeocodeResult]:
        """
        Apply one of the alternatives shown for the latest multi-result query.

        Args:
            index: Position of the alternative in the batch
            batch: Batch the index refers to. Ignored if it is no longer the
                one being shown.

        Returns:
            The applied result, or None when nothing was selected
        """
        current = self.state.alternatives
        if current is None:
            logger.debug(f"Ignoring selection {index}: no alternatives shown")
            return None
        if batch is not None and batch.batch_id != current.batch_id:
            logger.debug(f"Ignoring selection {index} from stale batch #{batch.batch_id}")
            return None

        result = current.get(index)
        if result is None:
            logger.debug(f"Ignoring invalid selection {index} for batch #{current.batch_id}")
            return None

        self.state.alternatives = None
        self.view.clear_alternatives()
        self.mark_geocode(result)
        return result

    def mark_geocode(self, result: GeocodeResult) -> None:
        """Fit the map to ``result`` and move this control's marker to it."""
        self.map_view.fit_viewport(result.bbox)

        if self.state.marker is not None:
            self.map_view.remove_marker(self.state.marker)
            self.state.marker = None

        self.state.marker = self.map_view.place_marker(result.center, result.name)
        logger.debug(f"Marked '{result.name}' at {result.center.as_tuple()}")

    def clear_results(self) -> None:
        """Hide the alternatives list and the error indicator."""
        self.state.alternatives = None
        self.state.error_visible = False
        self.view.clear_alternatives()
        self.view.clear_error()

    async def on_query_submitted(self, text: str) -> ResultBatch:
        return await self.submit(text)

    def on_query_edited(self) -> None:
        self.clear_results()

    def _apply_policy(self, batch: ResultBatch) -> None:
        # Whatever an overlapping query displayed is replaced by this outcome
        self.clear_results()
        if batch.is_empty:
            logger.info(f"No results for '{batch.query}'")
            self._show_error()
        elif len(batch) == 1:
            self.mark_geocode(batch[0])
        else:
            self.state.alternatives = batch
            self.view.show_alternatives(batch)

    def _show_error(self) -> None:
        self.state.error_visible = True
        self.view.show_error(self.error_message)

    def _change_outstanding(self, delta: int) -> None:
        was_busy = self.state.in_flight
        self.state.outstanding += delta
        if self.state.in_flight != was_busy:
            self.view.set_busy(self.state.in_flight)
