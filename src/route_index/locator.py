"""Nearest-sample lookup by cumulative distance along a height profile."""

from __future__ import annotations

from typing import Iterable

from .models import (
    Coordinate,
    DistanceSample,
    LineStringGeometry,
    ProfileCollection,
    ProfileGeometry,
)

# Profile coordinates are [lng, lat, elevation, distance]
_ELEVATION = 2
_DISTANCE = 3


def samples_from_geometry(geometry: ProfileGeometry) -> list[DistanceSample]:
    """Extract distance samples from a profile geometry.

    Only line strings carry samples; every other geometry kind yields an empty
    list. Coordinates lacking a distance component are skipped.
    """
    if not isinstance(geometry, LineStringGeometry):
        return []

    samples = []
    for coord in geometry.coordinates:
        if len(coord) <= _DISTANCE or coord[_DISTANCE] is None:
            continue
        lng, lat = coord[0], coord[1]
        if lng is None or lat is None:
            continue
        samples.append(
            DistanceSample(
                position=Coordinate(lat=lat, lng=lng),
                cumulative_distance=coord[_DISTANCE],
                elevation=coord[_ELEVATION],
            )
        )
    return samples


def find_nearest_by_distance(
    target_distance: float | None,
    sample_groups: Iterable[Iterable[DistanceSample]],
) -> Coordinate | None:
    """Return the position of the sample whose distance is closest to ``target_distance``.

    All groups are scanned as one flat search space: distances need not be
    monotonic across groups. On ties the first sample in scan order wins.
    Returns ``None`` when ``target_distance`` is ``None`` or there are no samples.
    """
    if target_distance is None:
        return None

    best: Coordinate | None = None
    best_diff = 0.0
    for group in sample_groups:
        for sample in group:
            diff = abs(sample.cumulative_distance - target_distance)
            if best is None or diff < best_diff:
                best_diff = diff
                best = sample.position
    return best


def find_nearest_in_profile(
    target_distance: float | None,
    collection: ProfileCollection,
) -> Coordinate | None:
    """Nearest-sample lookup over every feature of a height profile."""
    if target_distance is None:
        return None
    groups = (samples_from_geometry(feature.geometry) for feature in collection.features)
    return find_nearest_by_distance(target_distance, groups)
