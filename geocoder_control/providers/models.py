"""
Unified data models for geocoding results across all providers.

These models provide a consistent interface for geocoding data regardless of the
underlying provider (Nominatim, Bing, RaveGeo, etc.). All provider-specific data
is normalized to these unified models.
"""

from typing import Iterator, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, model_validator


class LatLng(BaseModel):
    """A single latitude/longitude point."""
    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90, description="Latitude coordinate")
    lng: float = Field(..., ge=-180, le=180, description="Longitude coordinate")

    def as_tuple(self) -> Tuple[float, float]:
        return (self.lat, self.lng)


class BoundingBox(BaseModel):
    """
    Axis-aligned geographic bounding box.

    Stored as south/west/north/east edges. A box built from a single point
    has zero area (south == north and west == east).
    """
    model_config = ConfigDict(frozen=True)

    south: float = Field(..., ge=-90, le=90, description="Southern latitude")
    west: float = Field(..., ge=-180, le=180, description="Western longitude")
    north: float = Field(..., ge=-90, le=90, description="Northern latitude")
    east: float = Field(..., ge=-180, le=180, description="Eastern longitude")

    @model_validator(mode="after")
    def _check_latitude_order(self) -> "BoundingBox":
        if self.south > self.north:
            raise ValueError(
                f"south ({self.south}) must not be greater than north ({self.north})"
            )
        return self

    @classmethod
    def from_corners(cls, south_west: LatLng, north_east: LatLng) -> "BoundingBox":
        return cls(
            south=south_west.lat,
            west=south_west.lng,
            north=north_east.lat,
            east=north_east.lng,
        )

    @classmethod
    def from_point(cls, point: LatLng) -> "BoundingBox":
        """Build the degenerate box containing only ``point``."""
        return cls(south=point.lat, west=point.lng, north=point.lat, east=point.lng)

    @property
    def south_west(self) -> LatLng:
        return LatLng(lat=self.south, lng=self.west)

    @property
    def north_east(self) -> LatLng:
        return LatLng(lat=self.north, lng=self.east)

    @property
    def center(self) -> LatLng:
        """Midpoint of the box."""
        return LatLng(
            lat=(self.south + self.north) / 2,
            lng=(self.west + self.east) / 2,
        )

    @property
    def is_point(self) -> bool:
        return self.south == self.north and self.west == self.east

    def contains(self, point: LatLng) -> bool:
        """Inclusive containment test."""
        return (
            self.south <= point.lat <= self.north
            and self.west <= point.lng <= self.east
        )


class GeocodeResult(BaseModel):
    """
    Normalized geocoding match.

    Every provider adapter maps its raw response entries to this model.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Human readable label supplied by the provider")
    bbox: BoundingBox = Field(..., description="Extent of the matched feature")
    center: LatLng = Field(..., description="Point used for marker placement")


class ResultBatch(BaseModel):
    """
    Immutable set of results produced by one submitted query.

    Results keep the provider's relevance order, so the index of an
    alternative is stable for the lifetime of the batch.
    """
    model_config = ConfigDict(frozen=True)

    batch_id: int = Field(..., ge=0, description="Per-control sequence number")
    query: str = Field(..., description="Query text as submitted")
    provider: Optional[str] = Field(None, description="Provider that answered the query")
    results: Tuple[GeocodeResult, ...] = Field(default_factory=tuple)
    error: Optional[str] = Field(None, description="Transport failure message, if any")
    cancelled: bool = Field(default=False, description="Superseded before completion")

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self) -> Iterator[GeocodeResult]:  # type: ignore[override]
        return iter(self.results)

    def __getitem__(self, index: int) -> GeocodeResult:
        return self.results[index]

    def get(self, index: int) -> Optional[GeocodeResult]:
        """Return the result at ``index`` or None when the index is out of range."""
        if not isinstance(index, int) or isinstance(index, bool):
            return None
        if 0 <= index < len(self.results):
            return self.results[index]
        return None

    @property
    def is_empty(self) -> bool:
        return not self.results

    @property
    def failed(self) -> bool:
        return self.error is not None
