"""Build a steepness-classified height profile from routing engine height data."""

from __future__ import annotations

import logging
from typing import Sequence

from .models import (
    LineStringGeometry,
    ProfileCollection,
    ProfileFeature,
    ProfileFeatureProperties,
    ProfileSummary,
)

logger = logging.getLogger(__name__)

STEEPNESS_COLORS: dict[int, dict[str, str]] = {
    -5: {"text": "16%+", "color": "#028306"},
    -4: {"text": "10-15%", "color": "#2AA12E"},
    -3: {"text": "7-9%", "color": "#53BF56"},
    -2: {"text": "4-6%", "color": "#7BDD7E"},
    -1: {"text": "1-3%", "color": "#A4FBA6"},
    0: {"text": "0%", "color": "#FFCC99"},
    1: {"text": "1-3%", "color": "#F29898"},
    2: {"text": "4-6%", "color": "#E07575"},
    3: {"text": "7-9%", "color": "#CF5352"},
    4: {"text": "10-15%", "color": "#BE312F"},
    5: {"text": "16%+", "color": "#AD0F0C"},
}


def steepness_class(slope_percent: float) -> int:
    """Map a slope in percent to a steepness class in -5..5."""
    if slope_percent != slope_percent:  # NaN
        return 0
    if slope_percent <= -15:
        return -5
    if slope_percent <= -10:
        return -4
    if slope_percent <= -7:
        return -3
    if slope_percent <= -4:
        return -2
    if slope_percent <= -1:
        return -1
    if slope_percent < 1:
        return 0
    if slope_percent < 4:
        return 1
    if slope_percent < 7:
        return 2
    if slope_percent < 10:
        return 3
    if slope_percent < 15:
        return 4
    return 5


def build_heightgraph_data(
    coordinates: Sequence[tuple[float, float]],
    range_height: Sequence[tuple[float, float]],
) -> list[ProfileCollection]:
    """Group a route's height samples into runs of equal steepness.

    Args:
        coordinates: ``(lng, lat)`` per route point.
        range_height: ``(cumulative_distance, elevation)`` per route point, as
            returned by the routing engine's height service.

    Each emitted feature carries the points of one run as
    ``[lng, lat, elevation, distance]`` and is tagged with that run's class.
    A feature is emitted when the class changes; the final run stays open and
    is not emitted.
    """
    features: list[ProfileFeature] = []
    incline_total = 0.0
    decline_total = 0.0
    run: list[list[float]] = []
    prev_class: int | None = None

    for i, (coord, (dist, height)) in enumerate(zip(coordinates, range_height)):
        point = [coord[0], coord[1], height, dist]
        run.append(point)
        if i == 0:
            continue

        prev_dist, prev_height = range_height[i - 1]
        delta_height = height - prev_height
        delta_dist = dist - prev_dist
        if delta_height > 0:
            incline_total += delta_height
        else:
            decline_total -= delta_height

        current = steepness_class(delta_height / delta_dist * 100) if delta_dist else 0
        if current != prev_class:
            features.append(
                ProfileFeature(
                    geometry=LineStringGeometry(coordinates=run),
                    properties=ProfileFeatureProperties(attributeType=prev_class or 0),
                )
            )
            run = [point]
        prev_class = current

    logger.debug(
        "Height profile: %d features, +%.1f m / -%.1f m", len(features), incline_total, decline_total
    )
    return [
        ProfileCollection(
            features=features,
            properties=ProfileSummary(
                summary="steepness",
                inclineTotal=incline_total,
                declineTotal=decline_total,
            ),
        )
    ]
