"""HTTP client for Reservauto availability requests."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import aiohttp
from pydantic import ValidationError

from communauto_finder.adapters.api_request_logger import log_api_request, log_api_response
from communauto_finder.adapters.reservauto_api.constants import (
    DEFAULT_HEADERS,
    DEFAULT_TIMEOUT_SECONDS,
    ERROR_BODY_EXCERPT,
)
from communauto_finder.domain.exceptions import DecodeError, StatusError, TransportError

if TYPE_CHECKING:
    from types import TracebackType

    from communauto_finder.domain.ports.availability_fetcher import AvailabilityT

logger = logging.getLogger(__name__)


class ReservautoHttpClient:
    """Fetches availability documents from the Reservauto API using aiohttp.

    Either pass an existing ``aiohttp.ClientSession`` or use the client as an
    async context manager, in which case it opens and closes its own session.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize with optional aiohttp session.

        Args:
            session: Optional aiohttp ClientSession for HTTP requests.
            timeout_seconds: Total timeout for one request.
        """
        self._session = session
        self._owns_session = False
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    async def __aenter__(self) -> ReservautoHttpClient:
        if self._session is None:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self

    async def __aexit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc_val: BaseException | None,
        _exc_tb: TracebackType | None,
    ) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None
            self._owns_session = False

    async def fetch(self, url: str, shape: type[AvailabilityT]) -> AvailabilityT:
        """GET url and decode the JSON body as shape.

        Raises:
            TransportError: The API could not be reached or timed out.
            StatusError: The API answered with a status other than 200.
            DecodeError: The body is not a valid document of the given shape.
        """
        if self._session is None:
            raise RuntimeError(
                "ReservautoHttpClient has no session; pass one or use it with 'async with'"
            )

        log_api_request("GET", url, DEFAULT_HEADERS)

        try:
            async with self._session.get(
                url, headers=DEFAULT_HEADERS, timeout=self._timeout
            ) as response:
                status = response.status
                body = await response.read()
                if status != 200:
                    self._log_error_response(response, url, body)
        except (aiohttp.ClientError, TimeoutError) as e:
            logger.error(f"Could not reach Reservauto API at {url}: {e!r}")
            raise TransportError(f"Connection error: {e!r}") from e

        if status != 200:
            raise StatusError(status)

        log_api_response(url, status, len(body))
        return self._decode(body, url, shape)

    @staticmethod
    def _decode(body: bytes, url: str, shape: type[AvailabilityT]) -> AvailabilityT:
        """Validate the raw JSON body against the expected document model."""
        try:
            return shape.model_validate_json(body)
        except ValidationError as e:
            logger.error(
                f"Reservauto API returned an unexpected {shape.__name__} body for {url}: "
                f"{e.error_count()} validation error(s)"
            )
            raise DecodeError(f"Cannot decode {shape.__name__}: {e}") from e

    @staticmethod
    def _log_error_response(response: aiohttp.ClientResponse, url: str, body: bytes) -> None:
        """Log error response details."""
        excerpt = body[:ERROR_BODY_EXCERPT].decode("utf-8", errors="replace")
        excerpt = excerpt or "(empty response body)"
        content_type = response.headers.get("Content-Type", "unknown")
        server = response.headers.get("Server", "unknown")
        logger.error(
            f"Reservauto API returned status {response.status} for {url}: "
            f"{excerpt} (Content-Type: {content_type}, Server: {server})"
        )
