"""
Collaborators driven by the geocoder control.

The control does not render anything itself. It talks to a map view
(viewport and marker) and to a control view (busy state, alternatives list,
error indicator). ``ConsoleMapView`` implements both on top of a
``rich`` console, which is handy for terminals and for tests.
"""

import itertools
import logging
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .providers.models import BoundingBox, LatLng, ResultBatch

logger = logging.getLogger(__name__)


@runtime_checkable
class MapView(Protocol):
    """Map surface the control updates when a result is applied."""

    def fit_viewport(self, bbox: BoundingBox) -> None:
        ...

    def place_marker(self, center: LatLng, label: str) -> Any:
        """Add a marker with its label opened and return a handle for it."""
        ...

    def remove_marker(self, handle: Any) -> None:
        ...


@runtime_checkable
class ControlView(Protocol):
    """Input side of the control: busy state, alternatives and error indicator."""

    def set_busy(self, busy: bool) -> None:
        ...

    def show_alternatives(self, batch: ResultBatch) -> None:
        ...

    def clear_alternatives(self) -> None:
        ...

    def show_error(self, message: str) -> None:
        ...

    def clear_error(self) -> None:
        ...


class NullControlView:
    """Control view that ignores every update."""

    def set_busy(self, busy: bool) -> None:
        pass

    def show_alternatives(self, batch: ResultBatch) -> None:
        pass

    def clear_alternatives(self) -> None:
        pass

    def show_error(self, message: str) -> None:
        pass

    def clear_error(self) -> None:
        pass


class ConsoleMapView:
    """
    Text rendering of the map and the control.

    Keeps the current viewport and the live markers so callers can inspect
    what a graphical map would show.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self.viewport: Optional[BoundingBox] = None
        self.markers: Dict[int, Dict[str, Any]] = {}
        self.busy = False
        self.error: Optional[str] = None
        self.alternatives: Optional[ResultBatch] = None
        self._marker_ids = itertools.count(1)

    def fit_viewport(self, bbox: BoundingBox) -> None:
        self.viewport = bbox
        self.console.print(
            f"[cyan]Viewport[/] ({bbox.south:.5f}, {bbox.west:.5f}) - "
            f"({bbox.north:.5f}, {bbox.east:.5f})"
        )

    def place_marker(self, center: LatLng, label: str) -> int:
        handle = next(self._marker_ids)
        self.markers[handle] = {"center": center, "label": label, "open": True}
        self.console.print(
            f"[green]Marker #{handle}[/] at ({center.lat:.5f}, {center.lng:.5f}): [bold]{escape(label)}[/]"
        )
        return handle

    def remove_marker(self, handle: int) -> None:
        if self.markers.pop(handle, None) is None:
            logger.debug(f"Marker {handle} already removed")
            return
        self.console.print(f"[dim]Removed marker #{handle}[/]")

    def set_busy(self, busy: bool) -> None:
        self.busy = busy
        if busy:
            self.console.print("[dim]Searching...[/]")

    def show_alternatives(self, batch: ResultBatch) -> None:
        self.alternatives = batch
        table = Table(title=f"Results for '{escape(batch.query)}'")
        table.add_column("#", justify="right")
        table.add_column("Name")
        table.add_column("Center")
        for index, result in enumerate(batch):
            table.add_row(
                str(index),
                escape(result.name),
                f"{result.center.lat:.5f}, {result.center.lng:.5f}",
            )
        self.console.print(table)

    def clear_alternatives(self) -> None:
        self.alternatives = None

    def show_error(self, message: str) -> None:
        self.error = message
        self.console.print(f"[bold red]{escape(message)}[/]")

    def clear_error(self) -> None:
        self.error = None
