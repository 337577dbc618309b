"""Availability documents returned by the Reservauto API.

Decoding is lenient about absent values: a missing id reads as 0 and a null
list reads as empty, so such a document means "nothing available yet" rather
than a malformed response.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _none_as_empty(v: Any) -> Any:
    return [] if v is None else v


class Location(BaseModel):
    """Bare latitude/longitude pair reported for a vehicle."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    latitude: float = 0.0
    longitude: float = 0.0


class Vehicle(BaseModel):
    """A free-floating car available right now."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    vehicle_id: int = Field(default=0, alias="vehicleId")
    location: Location = Field(default_factory=Location, alias="vehicleLocation")

    @field_validator("location", mode="before")
    @classmethod
    def default_missing_location(cls, v: Any) -> Any:
        """Read a null vehicleLocation as the zero location."""
        return Location() if v is None else v


class Station(BaseModel):
    """A reservation-based station slot."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    satisfies_filters: bool = Field(default=False, alias="satisfiesFilters")
    recommended_vehicle_id: int | None = Field(default=None, alias="recommendedVehicleId")

    @property
    def is_bookable(self) -> bool:
        """Whether the station matches the filters and offers a vehicle."""
        return self.satisfies_filters and self.recommended_vehicle_id is not None


class FlexAvailability(BaseModel):
    """Free-floating availability response."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    total_nb_vehicles: int = Field(default=0, alias="totalNbVehicles")
    vehicles: list[Vehicle] = Field(default_factory=list, alias="vehicles")

    @field_validator("total_nb_vehicles", mode="before")
    @classmethod
    def null_total_as_zero(cls, v: Any) -> Any:
        return 0 if v is None else v

    @field_validator("vehicles", mode="before")
    @classmethod
    def null_vehicles_as_empty(cls, v: Any) -> Any:
        return _none_as_empty(v)


class StationAvailability(BaseModel):
    """Station availability response."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    stations: list[Station] = Field(default_factory=list, alias="stations")

    @field_validator("stations", mode="before")
    @classmethod
    def null_stations_as_empty(cls, v: Any) -> Any:
        return _none_as_empty(v)

    def bookable_count(self) -> int:
        """Count stations that satisfy the filters and recommend a vehicle."""
        return sum(1 for station in self.stations if station.is_bookable)
