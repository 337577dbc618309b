"""Search request domain model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum, StrEnum

from communauto_finder.domain.models.coordinate import Coordinate

CityId = int


class SearchMode(StrEnum):
    """Kind of availability being searched for."""

    STATION = "station"
    FLEX = "flex"


class VehicleType(IntEnum):
    """Vehicle type filter sent as the VehicleTypes query parameter.

    ALL_TYPES is a sentinel: no filter is sent.
    """

    ALL_TYPES = 0
    FAMILY_CAR = 2
    UTILITY_VEHICLE = 5
    MINIVAN = 6


@dataclass(frozen=True)
class SearchRequest:
    """Everything needed to build the availability URL for one search."""

    city_id: CityId
    coordinate: Coordinate
    margin_km: float
    mode: SearchMode
    start_date: datetime | None = None
    end_date: datetime | None = None
    vehicle_type: VehicleType = VehicleType.ALL_TYPES

    def __post_init__(self) -> None:
        if self.mode is SearchMode.STATION:
            if self.start_date is None or self.end_date is None:
                raise ValueError("station searches require start_date and end_date")
            if self.end_date <= self.start_date:
                raise ValueError("end_date must be after start_date")

    @classmethod
    def flex(cls, city_id: CityId, coordinate: Coordinate, margin_km: float) -> SearchRequest:
        """Build a free-floating search request."""
        return cls(city_id=city_id, coordinate=coordinate, margin_km=margin_km, mode=SearchMode.FLEX)

    @classmethod
    def station(
        cls,
        city_id: CityId,
        coordinate: Coordinate,
        margin_km: float,
        start_date: datetime,
        end_date: datetime,
        vehicle_type: VehicleType = VehicleType.ALL_TYPES,
    ) -> SearchRequest:
        """Build a station search request for a reservation window."""
        return cls(
            city_id=city_id,
            coordinate=coordinate,
            margin_km=margin_km,
            mode=SearchMode.STATION,
            start_date=start_date,
            end_date=end_date,
            vehicle_type=vehicle_type,
        )
