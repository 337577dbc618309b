"""Tests for domain models."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from communauto_finder.domain.models import (
    NO_RESULT,
    Coordinate,
    FlexAvailability,
    Location,
    SearchMode,
    SearchRequest,
    SearchResult,
    SearchStatus,
    Station,
    StationAvailability,
    VehicleType,
)

MONTREAL = Coordinate(latitude=45.50, longitude=-73.57)
START = datetime(2026, 10, 19, 18, 0)
END = datetime(2026, 10, 19, 22, 0)


class TestCoordinate:
    """Tests for Coordinate."""

    def test_coordinate_is_immutable(self) -> None:
        """Given a coordinate, when assigning a field, then an error is raised."""
        with pytest.raises(AttributeError):
            MONTREAL.latitude = 0.0  # type: ignore[misc]


class TestSearchRequest:
    """Tests for SearchRequest construction rules."""

    def test_flex_request_needs_no_dates(self) -> None:
        """Given a flex search, when created without dates, then it is valid."""
        request = SearchRequest.flex(42, MONTREAL, 1.0)

        assert request.mode is SearchMode.FLEX
        assert request.start_date is None
        assert request.vehicle_type is VehicleType.ALL_TYPES

    def test_station_request_keeps_window_and_filter(self) -> None:
        """Given a station search, when created, then dates and filter are kept."""
        request = SearchRequest.station(42, MONTREAL, 1.0, START, END, VehicleType.FAMILY_CAR)

        assert request.mode is SearchMode.STATION
        assert request.start_date == START
        assert request.end_date == END
        assert request.vehicle_type is VehicleType.FAMILY_CAR

    def test_station_request_without_dates_is_rejected(self) -> None:
        """Given a station search without dates, when created, then ValueError is raised."""
        with pytest.raises(ValueError, match="require start_date and end_date"):
            SearchRequest(city_id=42, coordinate=MONTREAL, margin_km=1.0, mode=SearchMode.STATION)

    def test_station_request_with_reversed_window_is_rejected(self) -> None:
        """Given an end before the start, when created, then ValueError is raised."""
        with pytest.raises(ValueError, match="end_date must be after start_date"):
            SearchRequest.station(42, MONTREAL, 1.0, END, START)


class TestAvailabilityDecoding:
    """Tests for decoding API documents."""

    def test_flex_document_decodes_camel_case_fields(self) -> None:
        """Given a flex JSON body, when decoding, then vehicles and locations are populated."""
        body = """
        {
          "totalNbVehicles": 1,
          "vehicles": [
            {"vehicleId": 7, "vehicleLocation": {"latitude": 45.501, "longitude": -73.571}}
          ]
        }
        """
        document = FlexAvailability.model_validate_json(body)

        assert document.total_nb_vehicles == 1
        assert document.vehicles[0].vehicle_id == 7
        assert document.vehicles[0].location.latitude == 45.501
        assert document.vehicles[0].location.longitude == -73.571

    def test_flex_document_ignores_unknown_fields(self) -> None:
        """Given extra fields in the body, when decoding, then they are ignored."""
        body = '{"totalNbVehicles": 0, "vehicles": [], "cityId": 59}'

        document = FlexAvailability.model_validate_json(body)

        assert document.vehicles == []

    def test_vehicle_without_id_reads_as_zero(self) -> None:
        """Given a vehicle without vehicleId or location, when decoding, then zero values are used."""
        document = FlexAvailability.model_validate_json(
            '{"vehicles": [{"vehicleLocation": null}, {}]}'
        )

        assert [v.vehicle_id for v in document.vehicles] == [0, 0]
        assert document.vehicles[0].location == Location()

    def test_null_lists_read_as_empty(self) -> None:
        """Given null vehicles and stations, when decoding, then empty documents are returned."""
        flex_document = FlexAvailability.model_validate_json(
            '{"totalNbVehicles": null, "vehicles": null}'
        )
        station_document = StationAvailability.model_validate_json('{"stations": null}')

        assert flex_document.total_nb_vehicles == 0
        assert flex_document.vehicles == []
        assert station_document.bookable_count() == 0

    def test_vehicle_with_non_numeric_id_is_rejected(self) -> None:
        """Given a vehicleId that is not a number, when decoding, then validation fails."""
        with pytest.raises(ValidationError):
            FlexAvailability.model_validate_json('{"vehicles": [{"vehicleId": "seven"}]}')

    def test_station_document_counts_bookable_stations(self) -> None:
        """Given mixed stations, when counting, then only filtered ones with a car count."""
        body = """
        {"stations": [
          {"satisfiesFilters": true, "recommendedVehicleId": 11},
          {"satisfiesFilters": true, "recommendedVehicleId": null},
          {"satisfiesFilters": false, "recommendedVehicleId": 12},
          {"satisfiesFilters": true, "recommendedVehicleId": 13},
          {}
        ]}
        """
        document = StationAvailability.model_validate_json(body)

        assert len(document.stations) == 5
        assert document.bookable_count() == 2

    def test_station_is_bookable_only_with_filters_and_vehicle(self) -> None:
        """Given station flags, then is_bookable requires both conditions."""
        assert Station(satisfies_filters=True, recommended_vehicle_id=1).is_bookable
        assert not Station(satisfies_filters=True).is_bookable
        assert not Station(satisfies_filters=False, recommended_vehicle_id=1).is_bookable


class TestSearchResult:
    """Tests for SearchResult."""

    def test_found_result_carries_value(self) -> None:
        """Given a found result, then status is FOUND and value is kept."""
        result = SearchResult.found(7)

        assert result.status is SearchStatus.FOUND
        assert result.value == 7
        assert result.is_found

    def test_cancelled_and_failed_share_sentinel(self) -> None:
        """Given cancelled and failed results, then both report -1 but differ in status."""
        cancelled = SearchResult.cancelled()
        failed = SearchResult.failed("Error 500 in API call")

        assert cancelled.value == failed.value == NO_RESULT == -1
        assert cancelled.status is SearchStatus.CANCELLED
        assert failed.status is SearchStatus.FAILED
        assert failed.reason == "Error 500 in API call"
        assert not cancelled.is_found
        assert not failed.is_found
