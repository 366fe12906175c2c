"""Tests for the FastAPI server endpoints."""

import io
import logging
import zipfile

import polyline
import pytest
from httpx import ASGITransport, AsyncClient

from route_index import NominatimGeocoder, PhotonGeocoder, Settings, place_markers
from route_index.server import app, get_geocoder, get_settings, lifespan


@pytest.fixture
def client():
    app.dependency_overrides[get_settings] = lambda: Settings(marker_interval=1000.0)
    app.dependency_overrides[get_geocoder] = lambda: NominatimGeocoder()
    transport = ASGITransport(app=app)
    yield AsyncClient(transport=transport, base_url="http://test")
    app.dependency_overrides.clear()


@pytest.mark.asyncio
class TestMarkers:
    async def test_json(self, client):
        resp = await client.post("/markers", json={"polyline": [[0, 0], [0.05, 0]]})
        assert resp.status_code == 200
        data = resp.json()
        assert len(data) == 5
        assert data[0]["cumulative_distance"] == 1000
        assert data[0]["position"]["lng"] == pytest.approx(0.0, abs=1e-9)

    async def test_custom_interval(self, client):
        resp = await client.post("/markers", json={"polyline": [[0, 0], [0.05, 0]], "interval": 2500})
        assert len(resp.json()) == 2

    async def test_csv(self, client):
        resp = await client.post("/markers?format=csv", json={"polyline": [[0, 0], [0.05, 0]]})
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "text/csv; charset=utf-8"
        lines = resp.text.strip().splitlines()
        assert lines[0] == "cumulative_distance,lat,lng,segment_index"
        assert len(lines) == 6

    async def test_short_route(self, client):
        resp = await client.post("/markers", json={"polyline": [[0, 0]]})
        assert resp.status_code == 200
        assert resp.json() == []

    async def test_bad_interval(self, client):
        resp = await client.post("/markers", json={"polyline": [[0, 0], [0.05, 0]], "interval": 0})
        assert resp.status_code == 422

    async def test_ellipsoid_setting_moves_markers(self, client):
        route = {"polyline": [[0, 0], [0.01, 0]]}
        sphere = (await client.post("/markers", json=route)).json()[0]["position"]["lat"]

        app.dependency_overrides[get_settings] = lambda: Settings(ellps="WGS84")
        wgs84 = (await client.post("/markers", json=route)).json()[0]["position"]["lat"]

        assert sphere == pytest.approx(0.0089932, abs=1e-6)
        assert wgs84 == pytest.approx(0.0090437, abs=1e-6)

    async def test_ellipsoid_setting_leaves_library_default_alone(self, client):
        app.dependency_overrides[get_settings] = lambda: Settings(ellps="WGS84")
        await client.post("/markers", json={"polyline": [[0, 0], [0.01, 0]]})
        marker = place_markers([(0, 0), (0.01, 0)])[0]
        assert marker.position.lat == pytest.approx(0.0089932, abs=1e-6)


@pytest.mark.asyncio
class TestMarkersUpload:
    async def test_kml(self, client, route_kml):
        files = {"file": ("route.kml", route_kml.encode(), "application/vnd.google-earth.kml+xml")}
        resp = await client.post("/markers/upload", files=files)
        assert resp.status_code == 200
        assert len(resp.json()) == 2

    async def test_kmz_with_interval(self, client, route_kmz_bytes):
        files = {"file": ("route.kmz", route_kmz_bytes, "application/vnd.google-earth.kmz")}
        resp = await client.post("/markers/upload?interval=500", files=files)
        assert len(resp.json()) == 4

    async def test_zipped_shapefile(self, client, line_shapefile):
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w") as zf:
            for ext in (".shp", ".shx", ".dbf"):
                p = line_shapefile.with_suffix(ext)
                zf.writestr(p.name, p.read_bytes())
        files = {"file": ("route.zip", buf.getvalue(), "application/zip")}
        resp = await client.post("/markers/upload?format=csv", files=files)
        assert resp.status_code == 200
        assert len(resp.text.strip().splitlines()) == 3

    async def test_zip_without_shapefile(self, client):
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w") as zf:
            zf.writestr("notes.txt", "no route")
        files = {"file": ("route.zip", buf.getvalue(), "application/zip")}
        resp = await client.post("/markers/upload", files=files)
        assert resp.status_code == 400

    async def test_unsupported_extension(self, client):
        files = {"file": ("route.gpx", b"<gpx/>", "application/gpx+xml")}
        resp = await client.post("/markers/upload", files=files)
        assert resp.status_code == 400


@pytest.mark.asyncio
class TestProfile:
    async def test_heightgraph_then_nearest(self, client):
        resp = await client.post(
            "/heightgraph",
            json={
                "coordinates": [[10.0, 50.0], [10.1, 50.0], [10.2, 50.0], [10.3, 50.0]],
                "range_height": [[0, 100], [100, 110], [200, 120], [300, 120]],
            },
        )
        assert resp.status_code == 200
        collections = resp.json()
        assert collections[0]["properties"]["inclineTotal"] == 20

        resp = await client.post("/nearest", json={"distance": 190, "profile": collections[0]})
        assert resp.status_code == 200
        assert resp.json() == {"coordinate": {"lat": 50.0, "lng": 10.2}}

    async def test_nearest_without_distance(self, client, profile):
        resp = await client.post("/nearest", json={"distance": None, "profile": profile.model_dump()})
        assert resp.json() == {"coordinate": None}


@pytest.mark.asyncio
class TestShape:
    async def test_decode(self, client):
        encoded = polyline.encode([(1.5, 2.5), (1.6, 2.6)], 6)
        resp = await client.post("/shape/decode", json={"shape": encoded})
        assert resp.status_code == 200
        coords = resp.json()["coordinates"]
        assert coords[0]["lat"] == pytest.approx(1.5)
        assert coords[1]["lng"] == pytest.approx(2.6)

    async def test_directions_geometry(self, client):
        body = {"trip": {"legs": [{"shape": polyline.encode([(1.0, 2.0)], 6)}, {"shape": polyline.encode([(3.0, 4.0)], 6)}]}}
        resp = await client.post("/directions/geometry", json=body)
        assert resp.status_code == 200
        assert len(resp.json()["coordinates"]) == 2

    async def test_directions_geometry_malformed(self, client):
        resp = await client.post("/directions/geometry", json={"routes": []})
        assert resp.status_code == 422


@pytest.mark.asyncio
class TestGeocodeParse:
    async def test_configured_provider(self, client):
        hit = {"display_name": "Somewhere", "osm_type": "node", "osm_id": 1, "lon": "2.0", "lat": "1.0"}
        resp = await client.post("/geocode/parse", json={"results": [hit]})
        assert resp.status_code == 200
        data = resp.json()
        assert data["provider"] == "nominatim"
        assert data["results"][0]["address_coordinate"] == [2.0, 1.0]

    async def test_photon_override(self, client):
        app.dependency_overrides[get_geocoder] = lambda: PhotonGeocoder()
        payload = {"features": [{"geometry": {"coordinates": [2.0, 1.0]}, "properties": {"name": "X"}}]}
        resp = await client.post("/geocode/parse", json={"results": payload, "lnglat": [5.0, 6.0]})
        data = resp.json()
        assert data["provider"] == "photon"
        assert data["results"][0]["display_coordinate"] == [5.0, 6.0]

    async def test_malformed_payload(self, client):
        resp = await client.post("/geocode/parse", json={"results": [{"display_name": "no coords"}]})
        assert resp.status_code == 422


@pytest.mark.asyncio
class TestLifespan:
    async def test_configures_package_logger(self, monkeypatch):
        monkeypatch.setenv("ROUTE_INDEX_LOG_LEVEL", "debug")
        get_settings.cache_clear()
        try:
            async with lifespan(app):
                assert logging.getLogger("route_index").level == logging.DEBUG
        finally:
            get_settings.cache_clear()
            logging.getLogger("route_index").setLevel(logging.NOTSET)
