"""Domain layer - models, geometry and selection."""

from communauto_finder.domain.exceptions import (
    DecodeError,
    FetchError,
    StatusError,
    TransportError,
)
from communauto_finder.domain.geo import expand_coordinate, haversine_distance_km
from communauto_finder.domain.models import (
    Coordinate,
    SearchMode,
    SearchRequest,
    SearchResult,
    SearchStatus,
    VehicleType,
)
from communauto_finder.domain.ports import AvailabilityFetcher
from communauto_finder.domain.selector import closest_vehicle

__all__ = [
    "AvailabilityFetcher",
    "Coordinate",
    "DecodeError",
    "FetchError",
    "SearchMode",
    "SearchRequest",
    "SearchResult",
    "SearchStatus",
    "StatusError",
    "TransportError",
    "VehicleType",
    "closest_vehicle",
    "expand_coordinate",
    "haversine_distance_km",
]
