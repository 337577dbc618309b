"""Find available Communauto cars near a point by polling the Reservauto API."""

from communauto_finder.domain.models import (
    NO_RESULT,
    Coordinate,
    SearchResult,
    SearchStatus,
    VehicleType,
)
from communauto_finder.finder import (
    find_flex_car,
    find_station_car,
    search_flex_car,
    search_flex_car_task,
    search_station_car,
    search_station_car_task,
)

__all__ = [
    "NO_RESULT",
    "Coordinate",
    "SearchResult",
    "SearchStatus",
    "VehicleType",
    "find_flex_car",
    "find_station_car",
    "search_flex_car",
    "search_flex_car_task",
    "search_station_car",
    "search_station_car_task",
]
