"""Distance marker placement along a route polyline."""

from __future__ import annotations

import logging
import math
from typing import Sequence

from pyproj import Geod

from . import geodesy
from .models import Coordinate, DistanceMarker

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_M = 1000.0

PolylineInput = Sequence[Coordinate | tuple[float, float]]


def _to_lnglat(polyline: PolylineInput) -> list[geodesy.LngLat]:
    points = []
    for item in polyline:
        if isinstance(item, Coordinate):
            points.append(item.lnglat)
        else:
            lat, lng = item
            points.append((lng, lat))
    return points


def cumulative_distances(polyline: PolylineInput, geod: Geod | None = None) -> list[float]:
    """Distance from the route start to each vertex, in meters."""
    points = _to_lnglat(polyline)
    if not points:
        return []
    totals = [0.0]
    for a, b in zip(points, points[1:]):
        totals.append(totals[-1] + geodesy.distance(a, b, geod))
    return totals


def route_length(polyline: PolylineInput, geod: Geod | None = None) -> float:
    """Total geodesic length of the polyline in meters."""
    totals = cumulative_distances(polyline, geod)
    return totals[-1] if totals else 0.0


def place_markers(
    polyline: PolylineInput,
    interval: float = DEFAULT_INTERVAL_M,
    geod: Geod | None = None,
) -> list[DistanceMarker]:
    """Place a marker every ``interval`` meters along ``polyline``.

    ``polyline`` is an ordered sequence of ``(lat, lng)`` pairs or
    :class:`Coordinate` objects. Markers are returned in order of increasing
    cumulative distance; a route ``L`` meters long yields ``floor(L / interval)``
    markers. The route end is never itself a marker, so a route exactly one
    interval long yields none.

    Raises:
        ValueError: if ``interval`` is not a positive finite number.
    """
    if not math.isfinite(interval) or interval <= 0:
        raise ValueError(f"Marker interval must be a positive number, got {interval!r}")

    points = _to_lnglat(polyline)
    if len(points) < 2:
        return []

    # (segment index, cumulative distance, offset into segment)
    pending: list[tuple[int, float, float]] = []
    total_distance = 0.0
    next_marker_distance = interval

    for idx in range(len(points) - 1):
        segment_distance = geodesy.distance(points[idx], points[idx + 1], geod)
        while total_distance + segment_distance > next_marker_distance:
            pending.append((idx, next_marker_distance, next_marker_distance - total_distance))
            next_marker_distance += interval
        total_distance += segment_distance

    markers: list[DistanceMarker] = []
    for idx, cumulative, offset in pending:
        start, end = points[idx], points[idx + 1]
        heading = geodesy.bearing(start, end, geod)
        lng, lat = geodesy.destination(start, offset, heading, geod)
        markers.append(
            DistanceMarker(
                position=Coordinate(lat=lat, lng=lng),
                cumulative_distance=cumulative,
                segment_index=idx,
            )
        )

    logger.debug("Placed %d markers over %.1f m (interval %.1f m)", len(markers), total_distance, interval)
    return markers
