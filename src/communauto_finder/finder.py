"""Public entry points for Communauto car searches.

Three flavours are offered for both search modes:

- ``search_flex_car`` / ``search_station_car`` block until the search ends and
  return the legacy integer (vehicle id, station count, or -1).
- ``find_flex_car`` / ``find_station_car`` are the awaitable equivalents and
  return the full ``SearchResult``.
- ``search_flex_car_task`` / ``search_station_car_task`` take a result channel
  and a cancellation event owned by the caller and start the search as an
  ``asyncio.Task``. They always put exactly one result on the channel, even
  when the task is cancelled before it runs or something unexpected goes
  wrong.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import datetime

from communauto_finder.adapters.config import AppConfig
from communauto_finder.adapters.reservauto_api import ReservautoHttpClient
from communauto_finder.application.services import (
    CarSearch,
    CarSearchSettings,
    ResultChannel,
    deliver_result,
    new_result_channel,
)
from communauto_finder.domain.models import (
    CityId,
    Coordinate,
    SearchRequest,
    SearchResult,
    VehicleType,
)
from communauto_finder.domain.ports import AvailabilityFetcher

logger = logging.getLogger(__name__)


def search_settings(config: AppConfig) -> CarSearchSettings:
    """Build search loop settings from the application configuration."""
    return CarSearchSettings(
        poll_interval_seconds=config.poll_interval_seconds,
        base_url=config.api_base_url,
        max_iterations=config.max_polls,
    )


@asynccontextmanager
async def _open_fetcher(
    fetcher: AvailabilityFetcher | None, config: AppConfig
) -> AsyncIterator[AvailabilityFetcher]:
    """Yield the given fetcher, or an HTTP client owning its own session."""
    if fetcher is not None:
        yield fetcher
        return

    async with ReservautoHttpClient(timeout_seconds=config.api_timeout_seconds) as client:
        yield client


async def run_search(
    request: SearchRequest,
    result_channel: ResultChannel,
    cancel_event: asyncio.Event,
    *,
    fetcher: AvailabilityFetcher | None = None,
    config: AppConfig | None = None,
) -> SearchResult:
    """Run one search with the given channel and cancellation event."""
    config = config or AppConfig()
    async with _open_fetcher(fetcher, config) as active_fetcher:
        search = CarSearch(active_fetcher, search_settings(config))
        return await search.run(request, cancel_event, result_channel)


async def _run_with_own_cancellation(
    request: SearchRequest,
    fetcher: AvailabilityFetcher | None,
    config: AppConfig | None,
) -> SearchResult:
    cancel_event = asyncio.Event()
    try:
        return await run_search(
            request, new_result_channel(), cancel_event, fetcher=fetcher, config=config
        )
    finally:
        cancel_event.set()


async def _run_supervised(
    build_request: Callable[[], SearchRequest],
    result_channel: ResultChannel,
    cancel_event: asyncio.Event,
    fetcher: AvailabilityFetcher | None,
    config: AppConfig | None,
    started: asyncio.Event,
) -> SearchResult:
    """Run a search so that exactly one result always ends up on the channel.

    Once the search loop has delivered its result, a later failure (for
    example the HTTP session failing to close) does not change it.
    """
    started.set()
    result: SearchResult | None = None
    try:
        request = build_request()
        config = config or AppConfig()
        async with _open_fetcher(fetcher, config) as active_fetcher:
            search = CarSearch(active_fetcher, search_settings(config))
            result = await search.run(request, cancel_event, result_channel)
        return result
    except asyncio.CancelledError:
        # CarSearch.run delivers before re-raising; cover cancellation around it
        if result is None and result_channel.empty():
            deliver_result(result_channel, SearchResult.cancelled("search task cancelled"))
        raise
    except Exception as e:
        logger.exception(f"Unexpected error in background search: {e}")
        if result is None:
            result = SearchResult.failed(f"Unexpected error: {e!r}")
            deliver_result(result_channel, result)
        return result


def _start_supervised(
    build_request: Callable[[], SearchRequest],
    result_channel: ResultChannel,
    cancel_event: asyncio.Event,
    fetcher: AvailabilityFetcher | None,
    config: AppConfig | None,
) -> asyncio.Task[SearchResult]:
    """Start a supervised search task on the running loop.

    A task cancelled before its first step never runs its body, so the done
    callback delivers the cancelled result in that case.
    """
    started = asyncio.Event()
    task = asyncio.create_task(
        _run_supervised(build_request, result_channel, cancel_event, fetcher, config, started)
    )

    def _deliver_if_never_started(finished: asyncio.Task[SearchResult]) -> None:
        if finished.cancelled() and not started.is_set():
            logger.info("Search task cancelled before it started")
            deliver_result(result_channel, SearchResult.cancelled("search task cancelled"))

    task.add_done_callback(_deliver_if_never_started)
    return task


async def find_flex_car(
    city_id: CityId,
    coordinate: Coordinate,
    margin_km: float,
    *,
    fetcher: AvailabilityFetcher | None = None,
    config: AppConfig | None = None,
) -> SearchResult:
    """Poll until a free-floating car is available around coordinate."""
    request = SearchRequest.flex(city_id, coordinate, margin_km)
    return await _run_with_own_cancellation(request, fetcher, config)


async def find_station_car(
    city_id: CityId,
    coordinate: Coordinate,
    margin_km: float,
    start_date: datetime,
    end_date: datetime,
    vehicle_type: VehicleType = VehicleType.ALL_TYPES,
    *,
    fetcher: AvailabilityFetcher | None = None,
    config: AppConfig | None = None,
) -> SearchResult:
    """Poll until a station around coordinate can be booked for the window."""
    request = SearchRequest.station(
        city_id, coordinate, margin_km, start_date, end_date, vehicle_type
    )
    return await _run_with_own_cancellation(request, fetcher, config)


def search_flex_car(
    city_id: CityId,
    coordinate: Coordinate,
    margin_km: float,
    *,
    fetcher: AvailabilityFetcher | None = None,
    config: AppConfig | None = None,
) -> int:
    """Block until a free-floating car is found.

    Returns:
        The id of the closest vehicle, or -1 if the search failed.
    """
    result = asyncio.run(
        find_flex_car(city_id, coordinate, margin_km, fetcher=fetcher, config=config)
    )
    return result.value


def search_station_car(
    city_id: CityId,
    coordinate: Coordinate,
    margin_km: float,
    start_date: datetime,
    end_date: datetime,
    vehicle_type: VehicleType = VehicleType.ALL_TYPES,
    *,
    fetcher: AvailabilityFetcher | None = None,
    config: AppConfig | None = None,
) -> int:
    """Block until at least one station can be booked.

    Returns:
        The number of bookable stations, or -1 if the search failed.
    """
    result = asyncio.run(
        find_station_car(
            city_id,
            coordinate,
            margin_km,
            start_date,
            end_date,
            vehicle_type,
            fetcher=fetcher,
            config=config,
        )
    )
    return result.value


def search_flex_car_task(
    city_id: CityId,
    coordinate: Coordinate,
    margin_km: float,
    result_channel: ResultChannel,
    cancel_event: asyncio.Event,
    *,
    fetcher: AvailabilityFetcher | None = None,
    config: AppConfig | None = None,
) -> asyncio.Task[SearchResult]:
    """Start a cancellable free-floating search on the running event loop.

    Exactly one result is put on result_channel, whether the search finds a
    car, is stopped through cancel_event, is cancelled as a task or fails.

    Returns:
        The running task; awaiting it yields the delivered result.
    """
    return _start_supervised(
        lambda: SearchRequest.flex(city_id, coordinate, margin_km),
        result_channel,
        cancel_event,
        fetcher,
        config,
    )


def search_station_car_task(
    city_id: CityId,
    coordinate: Coordinate,
    margin_km: float,
    start_date: datetime,
    end_date: datetime,
    result_channel: ResultChannel,
    cancel_event: asyncio.Event,
    vehicle_type: VehicleType = VehicleType.ALL_TYPES,
    *,
    fetcher: AvailabilityFetcher | None = None,
    config: AppConfig | None = None,
) -> asyncio.Task[SearchResult]:
    """Start a cancellable station search on the running event loop."""
    return _start_supervised(
        lambda: SearchRequest.station(
            city_id, coordinate, margin_km, start_date, end_date, vehicle_type
        ),
        result_channel,
        cancel_event,
        fetcher,
        config,
    )
