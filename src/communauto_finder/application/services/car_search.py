"""Polling search loop for available cars."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from communauto_finder.application.services.search_url import (
    RESERVAUTO_BASE_URL,
    build_search_url,
)
from communauto_finder.domain.exceptions import FetchError
from communauto_finder.domain.models.availability import (
    FlexAvailability,
    Location,
    StationAvailability,
)
from communauto_finder.domain.models.search_request import SearchMode, SearchRequest
from communauto_finder.domain.models.search_result import SearchResult
from communauto_finder.domain.selector import closest_vehicle

if TYPE_CHECKING:
    from communauto_finder.domain.ports import AvailabilityFetcher
    from communauto_finder.domain.ports.availability_fetcher import AvailabilityT

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 1.5

ResultChannel = asyncio.Queue[SearchResult]


@dataclass(frozen=True)
class CarSearchSettings:
    """Tunables for the search loop."""

    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    base_url: str = RESERVAUTO_BASE_URL
    max_iterations: int | None = None  # None polls until found, failed or cancelled


def new_result_channel() -> ResultChannel:
    """Create a single-slot channel for one search result."""
    return asyncio.Queue(maxsize=1)


def deliver_result(channel: ResultChannel, result: SearchResult) -> bool:
    """Put result on channel unless it already holds one.

    Returns:
        True if the result was delivered.
    """
    if channel.full():
        logger.warning(f"Result channel already holds a value, dropping {result.status} result")
        return False
    channel.put_nowait(result)
    return True


class CarSearch:
    """Polls the availability API until a car is found or the search ends.

    One instance may run several searches, sequentially or concurrently; each
    run only touches its own request, cancellation event and result channel.
    """

    def __init__(
        self,
        fetcher: AvailabilityFetcher,
        settings: CarSearchSettings | None = None,
    ) -> None:
        """Initialize the search loop.

        Args:
            fetcher: Port used to fetch availability documents.
            settings: Poll interval, API base URL and optional iteration cap.
        """
        self.fetcher = fetcher
        self.settings = settings or CarSearchSettings()

    async def run(
        self,
        request: SearchRequest,
        cancel_event: asyncio.Event,
        result_channel: ResultChannel,
    ) -> SearchResult:
        """Run one search to completion.

        The terminal result is delivered once on result_channel and returned.
        Fetch failures set cancel_event so other holders of the event see the
        search as over.
        """
        url = build_search_url(request, self.settings.base_url)
        logger.info(f"Starting {request.mode} search in city {request.city_id}: {url}")

        try:
            result = await self._poll(request, url, cancel_event)
        except asyncio.CancelledError:
            deliver_result(result_channel, SearchResult.cancelled("search task cancelled"))
            logger.info(f"{request.mode} search task cancelled")
            raise

        deliver_result(result_channel, result)
        return result

    async def _poll(
        self, request: SearchRequest, url: str, cancel_event: asyncio.Event
    ) -> SearchResult:
        """Main polling loop."""
        iteration = 0
        while True:
            if cancel_event.is_set():
                logger.info(f"{request.mode} search cancelled after {iteration} poll(s)")
                return SearchResult.cancelled()

            iteration += 1
            try:
                value = await self._poll_once(request, url, cancel_event)
            except FetchError as e:
                cancel_event.set()
                logger.error(f"{request.mode} search failed on poll {iteration}: {e.reason}")
                return SearchResult.failed(e.reason)

            if value is None:
                logger.info(f"{request.mode} search cancelled during poll {iteration}")
                return SearchResult.cancelled()

            if value > 0:
                logger.info(f"{request.mode} search found a match on poll {iteration}: {value}")
                return SearchResult.found(value)

            logger.debug(f"No {request.mode} availability yet (poll {iteration})")

            max_iterations = self.settings.max_iterations
            if max_iterations is not None and iteration >= max_iterations:
                logger.info(f"{request.mode} search gave up after {iteration} poll(s)")
                return SearchResult.cancelled("max iterations reached")

            await self._wait(cancel_event)

    async def _poll_once(
        self, request: SearchRequest, url: str, cancel_event: asyncio.Event
    ) -> int | None:
        """Fetch once and evaluate the document.

        Returns:
            The vehicle id or station count (0 if nothing matched), or None if
            the search was cancelled while the fetch was in flight.
        """
        if request.mode is SearchMode.FLEX:
            flex = await self._fetch_unless_cancelled(url, FlexAvailability, cancel_event)
            if flex is None:
                return None
            target = Location(
                latitude=request.coordinate.latitude,
                longitude=request.coordinate.longitude,
            )
            return self._evaluate_flex(flex, target)

        stations = await self._fetch_unless_cancelled(url, StationAvailability, cancel_event)
        if stations is None:
            return None
        return stations.bookable_count()

    @staticmethod
    def _evaluate_flex(availability: FlexAvailability, target: Location) -> int:
        """Return the id of the closest vehicle, or 0 when there is none."""
        if not availability.vehicles:
            return 0

        closest = closest_vehicle(availability.vehicles, target)
        if closest is None:
            logger.warning("Failed to find closest vehicle, falling back to the first one")
            closest = availability.vehicles[0]
        return closest.vehicle_id

    async def _fetch_unless_cancelled(
        self, url: str, shape: type[AvailabilityT], cancel_event: asyncio.Event
    ) -> AvailabilityT | None:
        """Fetch url, giving up as soon as cancel_event is set."""
        fetch_task = asyncio.create_task(self.fetcher.fetch(url, shape))
        cancel_task = asyncio.create_task(cancel_event.wait())
        try:
            done, _ = await asyncio.wait(
                {fetch_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            pending = [task for task in (fetch_task, cancel_task) if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        if fetch_task in done:
            return fetch_task.result()
        return None

    async def _wait(self, cancel_event: asyncio.Event) -> None:
        """Sleep for the poll interval, waking early on cancellation."""
        with contextlib.suppress(TimeoutError):
            await asyncio.wait_for(
                cancel_event.wait(), timeout=self.settings.poll_interval_seconds
            )
