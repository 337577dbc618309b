"""Search result domain model."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

NO_RESULT = -1


class SearchStatus(StrEnum):
    """Terminal state of a search."""

    FOUND = "found"
    CANCELLED = "cancelled"
    FAILED = "failed"


class SearchResult(BaseModel):
    """Outcome of one search.

    ``value`` keeps the integer callers historically received: the closest
    vehicle id for flex searches, the number of bookable stations for station
    searches, and -1 when the search ended without a match.
    """

    model_config = ConfigDict(frozen=True)

    status: SearchStatus
    value: int = NO_RESULT
    reason: str | None = None

    @classmethod
    def found(cls, value: int) -> SearchResult:
        return cls(status=SearchStatus.FOUND, value=value)

    @classmethod
    def cancelled(cls, reason: str | None = None) -> SearchResult:
        return cls(status=SearchStatus.CANCELLED, reason=reason)

    @classmethod
    def failed(cls, reason: str) -> SearchResult:
        return cls(status=SearchStatus.FAILED, reason=reason)

    @property
    def is_found(self) -> bool:
        return self.status is SearchStatus.FOUND
