"""Application services."""

from communauto_finder.application.services.car_search import (
    CarSearch,
    CarSearchSettings,
    ResultChannel,
    deliver_result,
    new_result_channel,
)
from communauto_finder.application.services.search_url import build_search_url

__all__ = [
    "CarSearch",
    "CarSearchSettings",
    "ResultChannel",
    "build_search_url",
    "deliver_result",
    "new_result_channel",
]
