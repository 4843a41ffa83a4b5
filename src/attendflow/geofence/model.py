from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import (
    DEFAULT_GEOFENCE_LAT,
    DEFAULT_GEOFENCE_LNG,
    DEFAULT_GEOFENCE_NAME,
    DEFAULT_GEOFENCE_RADIUS_M,
)
from ..core.enums import FallbackReason


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float

    def to_dict(self) -> dict:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class GeofenceConfig:
    """Circular campus region; static for the process lifetime."""

    latitude: float = DEFAULT_GEOFENCE_LAT
    longitude: float = DEFAULT_GEOFENCE_LNG
    radius_meters: float = DEFAULT_GEOFENCE_RADIUS_M
    name: str = DEFAULT_GEOFENCE_NAME

    @property
    def center(self) -> GeoPoint:
        return GeoPoint(lat=self.latitude, lng=self.longitude)


@dataclass(frozen=True)
class ProximityCheck:
    within_bounds: bool
    distance_meters: float


@dataclass(frozen=True)
class PositionEvaluation:
    """Outcome of evaluating a reading against the geofence.

    `simulated` is True whenever `position` is the geofence center standing in
    for a missing or out-of-range reading. Callers must disclose it.
    """

    within_bounds: bool
    distance_meters: Optional[float]
    position: GeoPoint
    simulated: bool = False
    fallback_reason: Optional[FallbackReason] = None
    measured_distance_meters: Optional[float] = None


@dataclass(frozen=True)
class InvalidReading:
    """Typed outcome for malformed coordinates; nothing may be persisted."""

    message: str
