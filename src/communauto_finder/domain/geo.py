"""Geometry helpers for availability searches.

Bounding boxes use a planar degree approximation (one degree of latitude is
about 111 km); distances use the haversine formula. Neither raises: odd input
only produces odd but defined numbers.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Protocol

from communauto_finder.domain.models.coordinate import BoundingBox

if TYPE_CHECKING:
    from communauto_finder.domain.models.coordinate import Coordinate

EARTH_RADIUS_KM = 6371.0
KM_PER_DEGREE = 111.0


class LatLon(Protocol):
    """Anything exposing latitude and longitude in degrees."""

    @property
    def latitude(self) -> float: ...

    @property
    def longitude(self) -> float: ...


def expand_coordinate(coordinate: Coordinate, margin_km: float) -> BoundingBox:
    """Return the box reaching margin_km north, south, east and west of coordinate."""
    margin_km = abs(margin_km)
    delta_lat = margin_km / KM_PER_DEGREE

    cos_lat = math.cos(math.radians(coordinate.latitude))
    if abs(cos_lat) < 1e-12:
        # Longitude is meaningless at the poles
        delta_lon = 180.0
    else:
        delta_lon = margin_km / (KM_PER_DEGREE * abs(cos_lat))

    return BoundingBox(
        min_latitude=coordinate.latitude - delta_lat,
        max_latitude=coordinate.latitude + delta_lat,
        min_longitude=coordinate.longitude - delta_lon,
        max_longitude=coordinate.longitude + delta_lon,
    )


def haversine_distance_km(a: LatLon, b: LatLon) -> float:
    """Great-circle distance between two points in kilometers."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(b.longitude - a.longitude)

    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(h), math.sqrt(1 - h))
