"""FastAPI server exposing route distance indexing."""

from __future__ import annotations

import csv
import io
import logging
import tempfile
import zipfile
from contextlib import asynccontextmanager
from functools import lru_cache
from pathlib import Path
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Query, UploadFile
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field
from pyproj import Geod

from .config import Settings, configure_logging, load_settings
from .geocoding import Geocoder, select_geocoder
from .geodesy import make_geod
from .heightgraph import build_heightgraph_data
from .kml_reader import read_route_kmz
from .locator import find_nearest_in_profile
from .markers import place_markers
from .models import Coordinate, DistanceMarker, GeocodeResult, ProfileCollection
from .reader import read_route_shapefile
from .shape import SHAPE_PRECISION, decode_shape, parse_directions_geometry

logger = logging.getLogger(__name__)


@lru_cache
def get_settings() -> Settings:
    return load_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(get_settings().log_level)
    yield


app = FastAPI(title="Route Distance Index", version="0.1.0", lifespan=lifespan)


@lru_cache
def _geod_for(ellps: str | None) -> Geod:
    return make_geod(ellps)


def get_geod(settings: Settings = Depends(get_settings)) -> Geod:
    return _geod_for(settings.ellps)


@lru_cache
def get_geocoder() -> Geocoder:
    return select_geocoder(get_settings())


class MarkersRequest(BaseModel):
    polyline: list[tuple[float, float]]
    interval: float | None = None


class NearestRequest(BaseModel):
    distance: float | None = None
    profile: ProfileCollection


class NearestResponse(BaseModel):
    coordinate: Coordinate | None


class HeightgraphRequest(BaseModel):
    coordinates: list[tuple[float, float]]
    range_height: list[tuple[float, float]]


class ShapeRequest(BaseModel):
    shape: str
    precision: int = SHAPE_PRECISION


class CoordinatesResponse(BaseModel):
    coordinates: list[Coordinate]


class GeocodeParseRequest(BaseModel):
    results: Any
    lnglat: tuple[float, float] | None = None


class GeocodeParseResponse(BaseModel):
    provider: str
    results: list[GeocodeResult] = Field(default_factory=list)


def _markers_or_422(route, interval: float, geod: Geod) -> list[DistanceMarker]:
    try:
        return place_markers(route, interval, geod)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def _respond_markers(markers: list[DistanceMarker], format: str):
    if format == "json":
        return markers
    return _markers_to_csv_response(markers)


@app.post("/markers")
async def markers(
    body: MarkersRequest,
    settings: Settings = Depends(get_settings),
    geod: Geod = Depends(get_geod),
    format: str = Query("json", pattern="^(csv|json)$"),
):
    """Place distance markers along a ``[[lat, lng], ...]`` polyline."""
    interval = body.interval if body.interval is not None else settings.marker_interval
    return _respond_markers(_markers_or_422(body.polyline, interval, geod), format)


@app.post("/markers/upload")
async def markers_from_upload(
    file: UploadFile,
    settings: Settings = Depends(get_settings),
    geod: Geod = Depends(get_geod),
    interval: float | None = Query(None),
    format: str = Query("json", pattern="^(csv|json)$"),
):
    """Place distance markers along an uploaded route.

    Accepts a single ``.kml``/``.kmz`` file or a ``.zip`` holding a line shapefile.
    """
    filename = (file.filename or "").lower()
    content = await file.read()

    try:
        if filename.endswith((".kmz", ".kml")):
            route = read_route_kmz(content)
        elif filename.endswith(".zip"):
            route = _route_from_zip(content)
        else:
            raise HTTPException(status_code=400, detail="Upload a .kml, .kmz or zipped shapefile")
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    if interval is None:
        interval = settings.marker_interval
    logger.info("Placing markers on uploaded route %s (%d vertices)", file.filename, len(route))
    return _respond_markers(_markers_or_422(route, interval, geod), format)


def _route_from_zip(content: bytes) -> list[Coordinate]:
    """Extract a zipped shapefile to a temporary directory and read its route."""
    with tempfile.TemporaryDirectory() as extract_dir:
        try:
            with zipfile.ZipFile(io.BytesIO(content)) as zf:
                zf.extractall(extract_dir)
        except zipfile.BadZipFile as exc:
            raise ValueError("Uploaded file is not a valid zip archive") from exc

        shp_files = sorted(Path(extract_dir).rglob("*.shp"))
        if not shp_files:
            raise ValueError("No .shp file found in zip archive")
        return read_route_shapefile(shp_files[0])


@app.post("/nearest", response_model=NearestResponse)
async def nearest(body: NearestRequest):
    """Map position of the profile sample closest to ``distance``."""
    return NearestResponse(coordinate=find_nearest_in_profile(body.distance, body.profile))


@app.post("/heightgraph", response_model=list[ProfileCollection])
async def heightgraph(body: HeightgraphRequest):
    """Steepness profile from ``(lng, lat)`` coordinates and ``(distance, height)`` pairs."""
    return build_heightgraph_data(body.coordinates, body.range_height)


@app.post("/shape/decode", response_model=CoordinatesResponse)
async def shape_decode(body: ShapeRequest):
    return CoordinatesResponse(coordinates=decode_shape(body.shape, body.precision))


@app.post("/directions/geometry", response_model=CoordinatesResponse)
async def directions_geometry(body: dict[str, Any]):
    """Full route geometry of a directions response, legs concatenated."""
    try:
        coordinates = parse_directions_geometry(body)
    except (KeyError, TypeError) as exc:
        raise HTTPException(status_code=422, detail="Expected a response with trip.legs[].shape") from exc
    return CoordinatesResponse(coordinates=coordinates)


@app.post("/geocode/parse", response_model=GeocodeParseResponse)
async def geocode_parse(body: GeocodeParseRequest, geocoder: Geocoder = Depends(get_geocoder)):
    """Normalize a raw geocoder payload with the configured provider."""
    try:
        results = geocoder.parse_response(body.results, body.lnglat)
    except (KeyError, TypeError, AttributeError, ValueError) as exc:
        raise HTTPException(status_code=422, detail=f"Malformed {geocoder.name} response") from exc
    return GeocodeParseResponse(provider=geocoder.name, results=results)


def _markers_to_csv_response(markers: list[DistanceMarker]) -> StreamingResponse:
    """Stream markers as CSV rows."""
    fieldnames = ["cumulative_distance", "lat", "lng", "segment_index"]

    def generate():
        buf = io.StringIO()
        writer = csv.DictWriter(buf, fieldnames=fieldnames)
        writer.writeheader()
        yield buf.getvalue()
        buf.seek(0)
        buf.truncate(0)

        for marker in markers:
            writer.writerow(
                {
                    "cumulative_distance": marker.cumulative_distance,
                    "lat": marker.position.lat,
                    "lng": marker.position.lng,
                    "segment_index": marker.segment_index,
                }
            )
            yield buf.getvalue()
            buf.seek(0)
            buf.truncate(0)

    return StreamingResponse(
        generate(),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=route_markers.csv"},
    )
