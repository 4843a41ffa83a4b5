from __future__ import annotations

import math

from ..core.constants import EARTH_RADIUS_METERS
from .model import GeofenceConfig, GeoPoint, ProximityCheck


def haversine_distance(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in meters between two points."""
    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    d_phi = math.radians(b.lat - a.lat)
    d_lambda = math.radians(b.lng - a.lng)

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Rounding can push h slightly outside [0, 1] near identical or antipodal points.
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_METERS * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def check_proximity(point: GeoPoint, geofence: GeofenceConfig) -> ProximityCheck:
    distance = haversine_distance(point, geofence.center)
    return ProximityCheck(within_bounds=distance <= geofence.radius_meters, distance_meters=distance)
