"""Availability URL construction.

Reservauto front-office REST API, no authentication required.
"""

from urllib.parse import quote

from communauto_finder.domain.geo import expand_coordinate
from communauto_finder.domain.models.search_request import SearchMode, SearchRequest, VehicleType

RESERVAUTO_BASE_URL = "https://restapifrontoffice.reservauto.net"
FLEX_AVAILABILITY_PATH = "/api/v2/Vehicle/FreeFloatingAvailability"
STATION_AVAILABILITY_PATH = "/api/v2/StationAvailability"

# Local time, no offset: the API rejects timezone suffixes
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def _bounding_box_query(request: SearchRequest) -> str:
    """Build the CityId and bounding box part of the query string."""
    box = expand_coordinate(request.coordinate, request.margin_km)
    return (
        f"CityId={request.city_id}"
        f"&MaxLatitude={box.max_latitude:f}&MinLatitude={box.min_latitude:f}"
        f"&MaxLongitude={box.max_longitude:f}&MinLongitude={box.min_longitude:f}"
    )


def build_search_url(request: SearchRequest, base_url: str = RESERVAUTO_BASE_URL) -> str:
    """Build the availability URL for a search request.

    Args:
        request: The search to run.
        base_url: Scheme and host of the API, without trailing slash.

    Returns:
        Absolute URL for the flex or station availability endpoint.
    """
    base_url = base_url.rstrip("/")
    query = _bounding_box_query(request)

    if request.mode is SearchMode.FLEX:
        return f"{base_url}{FLEX_AVAILABILITY_PATH}?{query}"

    if request.start_date is None or request.end_date is None:
        raise ValueError("station searches require start_date and end_date")
    start = quote(request.start_date.strftime(DATE_FORMAT), safe="")
    end = quote(request.end_date.strftime(DATE_FORMAT), safe="")
    url = f"{base_url}{STATION_AVAILABILITY_PATH}?{query}&StartDate={start}&EndDate={end}"

    if request.vehicle_type is not VehicleType.ALL_TYPES:
        url += f"&VehicleTypes={int(request.vehicle_type)}"

    return url
