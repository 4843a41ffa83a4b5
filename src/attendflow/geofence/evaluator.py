from __future__ import annotations

import logging
import math
from typing import Any, Mapping, Optional, Union

from ..core.enums import FallbackReason
from ..core.exceptions import InvalidReadingError
from .distance import check_proximity
from .model import GeofenceConfig, GeoPoint, InvalidReading, PositionEvaluation

logger = logging.getLogger(__name__)


def _coordinate_error(value: Any, name: str, limit: float) -> Optional[str]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return f"{name} must be a number"
    if not math.isfinite(value):
        return f"{name} must be finite"
    if abs(value) > limit:
        return f"{name} must be within [-{limit:g}, {limit:g}]"
    return None


def validate_point(point: GeoPoint) -> Optional[InvalidReading]:
    for value, name, limit in ((point.lat, "lat", 90.0), (point.lng, "lng", 180.0)):
        error = _coordinate_error(value, name, limit)
        if error:
            return InvalidReading(message=error)
    return None


def parse_reading(payload: Optional[Mapping[str, Any]]) -> Optional[GeoPoint]:
    """Turn a client payload into a reading.

    Returns None when the client reports that no position could be obtained
    (no capability, permission denied or timeout). Coordinates are passed
    through untouched; `evaluate_position` validates them. A payload that is
    not a mapping raises InvalidReadingError.
    """
    if payload is not None and not isinstance(payload, Mapping):
        raise InvalidReadingError("Position reading must be an object with lat and lng")
    if not payload or payload.get("unavailable"):
        return None
    if "lat" not in payload and "lng" not in payload:
        return None
    return GeoPoint(lat=payload.get("lat"), lng=payload.get("lng"))


def evaluate_position(
    reading: Optional[GeoPoint],
    geofence: GeofenceConfig,
    *,
    allow_simulation: bool = True,
) -> Union[PositionEvaluation, InvalidReading]:
    """Decide where a check-in happened and whether it is on campus.

    A missing reading, or one outside the radius, is replaced by the geofence
    center when simulation is allowed. The result is flagged `simulated` so
    the caller can disclose that no real measurement backs it.
    """
    if reading is None:
        if not allow_simulation:
            return PositionEvaluation(
                within_bounds=False,
                distance_meters=None,
                position=geofence.center,
                fallback_reason=FallbackReason.POSITION_UNAVAILABLE,
            )
        logger.info("Position unavailable, simulating check-in at %s", geofence.name)
        return PositionEvaluation(
            within_bounds=True,
            distance_meters=0.0,
            position=geofence.center,
            simulated=True,
            fallback_reason=FallbackReason.POSITION_UNAVAILABLE,
        )

    invalid = validate_point(reading)
    if invalid:
        return invalid

    point = GeoPoint(lat=float(reading.lat), lng=float(reading.lng))
    proximity = check_proximity(point, geofence)
    if proximity.within_bounds or not allow_simulation:
        return PositionEvaluation(
            within_bounds=proximity.within_bounds,
            distance_meters=proximity.distance_meters,
            position=point,
            measured_distance_meters=proximity.distance_meters,
        )

    logger.info(
        "Reading %.0fm from %s exceeds %.0fm radius, simulating check-in",
        proximity.distance_meters,
        geofence.name,
        geofence.radius_meters,
    )
    return PositionEvaluation(
        within_bounds=True,
        distance_meters=0.0,
        position=geofence.center,
        simulated=True,
        fallback_reason=FallbackReason.OUT_OF_RANGE,
        measured_distance_meters=proximity.distance_meters,
    )
