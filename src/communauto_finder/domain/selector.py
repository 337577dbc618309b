"""Nearest-vehicle selection."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from communauto_finder.domain.geo import LatLon, haversine_distance_km

if TYPE_CHECKING:
    from communauto_finder.domain.models.availability import Vehicle


def closest_vehicle(vehicles: Sequence[Vehicle], target: LatLon) -> Vehicle | None:
    """Return the vehicle closest to target, or None when there are none.

    Ties keep the vehicle that appears first.
    """
    if not vehicles:
        return None
    if len(vehicles) == 1:
        return vehicles[0]

    best_index = 0
    best_distance = haversine_distance_km(vehicles[0].location, target)
    for index in range(1, len(vehicles)):
        distance = haversine_distance_km(vehicles[index].location, target)
        if distance < best_distance:
            best_index = index
            best_distance = distance

    return vehicles[best_index]
