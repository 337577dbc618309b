"""Domain models for Communauto availability searches."""

from communauto_finder.domain.models.availability import (
    FlexAvailability,
    Location,
    Station,
    StationAvailability,
    Vehicle,
)
from communauto_finder.domain.models.coordinate import BoundingBox, Coordinate
from communauto_finder.domain.models.search_request import (
    CityId,
    SearchMode,
    SearchRequest,
    VehicleType,
)
from communauto_finder.domain.models.search_result import (
    NO_RESULT,
    SearchResult,
    SearchStatus,
)

__all__ = [
    "NO_RESULT",
    "BoundingBox",
    "CityId",
    "Coordinate",
    "FlexAvailability",
    "Location",
    "SearchMode",
    "SearchRequest",
    "SearchResult",
    "SearchStatus",
    "Station",
    "StationAvailability",
    "Vehicle",
    "VehicleType",
]
