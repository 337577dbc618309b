"""Availability fetcher port."""

from typing import Protocol, TypeVar

from communauto_finder.domain.models.availability import FlexAvailability, StationAvailability

AvailabilityT = TypeVar("AvailabilityT", FlexAvailability, StationAvailability)


class AvailabilityFetcher(Protocol):
    """Port for fetching one availability document.

    Implementations raise a FetchError subclass when the request fails,
    the status is not 200, or the body does not decode into ``shape``.
    """

    async def fetch(self, url: str, shape: type[AvailabilityT]) -> AvailabilityT:
        """Fetch url and decode the body as shape."""
        ...
