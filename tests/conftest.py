import io
import zipfile

import pytest
import shapefile

from route_index.models import LineStringGeometry, PointGeometry, ProfileCollection, ProfileFeature

ROUTE_KML = """\
<?xml version="1.0" encoding="UTF-8"?>
<kml xmlns="http://www.opengis.net/kml/2.2">
  <Document>
    <Placemark>
      <LineString>
        <coordinates>0,0,100 0,0.01,110 0,0.02,105</coordinates>
      </LineString>
    </Placemark>
  </Document>
</kml>"""


@pytest.fixture
def route_kml():
    return ROUTE_KML


@pytest.fixture
def route_kmz_bytes():
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        zf.writestr("doc.kml", ROUTE_KML)
    return buf.getvalue()


@pytest.fixture
def line_shapefile(tmp_path):
    """A geographic (unprojected) two-part polyline shapefile without a .prj."""
    base = tmp_path / "route"
    with shapefile.Writer(str(base), shapeType=shapefile.POLYLINE) as w:
        w.field("name", "C")
        w.line([[[0.0, 0.0], [0.0, 0.01]], [[0.0, 0.01], [0.0, 0.02]]])
        w.record("route")
    return base.with_suffix(".shp")


@pytest.fixture
def profile():
    """Two disjoint line features whose distances both start at zero, plus a point."""
    return ProfileCollection(
        features=[
            ProfileFeature(
                geometry=LineStringGeometry(
                    coordinates=[
                        [10.0, 50.0, 100.0, 0.0],
                        [10.1, 50.0, 101.0, 500.0],
                        [10.2, 50.0, 102.0, 1000.0],
                    ]
                )
            ),
            ProfileFeature(
                geometry=LineStringGeometry(
                    coordinates=[
                        [20.0, 60.0, 200.0, 0.0],
                        [20.1, 60.0, 201.0, 700.0],
                    ]
                )
            ),
            ProfileFeature(geometry=PointGeometry(coordinates=[30.0, 70.0, 0.0, 650.0])),
        ]
    )
