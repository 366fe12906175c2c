"""Normalization of geocoder responses into :class:`GeocodeResult`.

Two providers are supported. Which one is active is decided once, from
settings, by :func:`select_geocoder`; callers hold on to the returned object.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from .config import Settings
from .models import GeocodeResult

logger = logging.getLogger(__name__)

UNABLE_TO_GEOCODE = "unable to geocode"

LngLat = tuple[float, float]


class Geocoder(Protocol):
    name: str
    url: str | None

    def parse_response(self, payload: Any, lnglat: LngLat | None) -> list[GeocodeResult]: ...


def _is_failure(entry: dict[str, Any]) -> bool:
    error = entry.get("error")
    return isinstance(error, str) and error.lower() == UNABLE_TO_GEOCODE


def _failure_result(index: int, lnglat: LngLat | None) -> GeocodeResult:
    return GeocodeResult(
        title=_format_lnglat(lnglat),
        description="",
        selected=True,
        address_coordinate=None,
        source_coordinate=lnglat,
        display_coordinate=lnglat,
        key=index,
        address_index=index,
    )


def _hit_result(
    index: int,
    title: str,
    osm_type: Any,
    osm_id: Any,
    address: LngLat,
    lnglat: LngLat | None,
) -> GeocodeResult:
    return GeocodeResult(
        title=title if title else _format_lnglat(lnglat),
        description=f"https://www.openstreetmap.org/{osm_type}/{osm_id}",
        selected=False,
        address_coordinate=address,
        source_coordinate=lnglat if lnglat is not None else address,
        display_coordinate=lnglat if lnglat is not None else address,
        key=index,
        address_index=index,
    )


def _format_lnglat(lnglat: LngLat | None) -> str:
    if lnglat is None:
        return ""
    return f"{lnglat[0]},{lnglat[1]}"


class NominatimGeocoder:
    name = "nominatim"

    def __init__(self, url: str | None = None):
        self.url = url

    def parse_response(self, payload: Any, lnglat: LngLat | None) -> list[GeocodeResult]:
        entries = payload if isinstance(payload, list) else [payload]
        results = []
        for index, entry in enumerate(entries):
            if _is_failure(entry):
                results.append(_failure_result(index, lnglat))
                continue
            address = (float(entry["lon"]), float(entry["lat"]))
            results.append(
                _hit_result(
                    index,
                    entry.get("display_name") or "",
                    entry.get("osm_type"),
                    entry.get("osm_id"),
                    address,
                    lnglat,
                )
            )
        return results


class PhotonGeocoder:
    name = "photon"

    def __init__(self, url: str | None = None):
        self.url = url

    def parse_response(self, payload: Any, lnglat: LngLat | None) -> list[GeocodeResult]:
        results = []
        for index, feature in enumerate(payload.get("features", [])):
            if _is_failure(feature):
                results.append(_failure_result(index, lnglat))
                continue
            props = feature.get("properties", {})
            lon, lat = feature["geometry"]["coordinates"][:2]
            results.append(
                _hit_result(
                    index,
                    props.get("name") or "",
                    props.get("osm_type"),
                    props.get("osm_id"),
                    (float(lon), float(lat)),
                    lnglat,
                )
            )
        return results


def select_geocoder(settings: Settings) -> Geocoder:
    """Pick the geocoder for these settings: Photon if configured, else Nominatim."""
    geocoder: Geocoder = (
        PhotonGeocoder(settings.photon_url) if settings.photon_enabled else NominatimGeocoder(settings.nominatim_url)
    )
    logger.info("Using %s geocoder at %s", geocoder.name, geocoder.url or "default endpoint")
    return geocoder
