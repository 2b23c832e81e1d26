from aio_geojson.error import InvalidWkt
from aio_geojson.geometry import (
    GeometryCollection,
    LineString,
    MultiPolygon,
    Point,
    Polygon,
)
from aio_geojson.wkt import from_shape, from_wkt, to_shape, to_wkt

import pytest
import shapely
from shapely.geometry import LinearRing


@pytest.mark.xdist_group(name="fast")
def test_to_wkt():
    assert to_wkt(Point(coordinates=[30.0, 10.0])) == "POINT (30 10)"
    ring = [[30.0, 10.0], [40.0, 40.0], [20.0, 40.0], [10.0, 20.0], [30.0, 10.0]]
    assert to_wkt(Polygon(coordinates=[ring])) == "POLYGON ((30 10, 40 40, 20 40, 10 20, 30 10))"
    assert to_wkt(Point(coordinates=[30.123, 10.0]), rounding_precision=1) == "POINT (30.1 10)"


@pytest.mark.xdist_group(name="fast")
def test_from_wkt():
    assert from_wkt("LINESTRING (30 10, 10 30, 40 40)") == LineString(
        coordinates=[[30.0, 10.0], [10.0, 30.0], [40.0, 40.0]]
    )
    assert from_wkt("POINT Z (1 2 3)") == Point(coordinates=[1.0, 2.0, 3.0])

    collection = from_wkt("GEOMETRYCOLLECTION (POINT (40 10), LINESTRING (10 10, 20 20, 10 40))")
    assert collection == GeometryCollection(
        geometries=[
            Point(coordinates=[40.0, 10.0]),
            LineString(coordinates=[[10.0, 10.0], [20.0, 20.0], [10.0, 40.0]]),
        ]
    )


@pytest.mark.xdist_group(name="fast")
@pytest.mark.parametrize("text", ["POINT (1", "CIRCLE (1 2, 3)", "LINESTRING (1 2, 3)"])
def test_from_invalid_wkt(text: str):
    with pytest.raises(InvalidWkt) as exc_info:
        from_wkt(text)

    assert exc_info.value.text == text
    assert str(exc_info.value).startswith("invalid WKT: ")


@pytest.mark.xdist_group(name="fast")
def test_wkt_round_trip():
    multi_polygon = MultiPolygon(
        coordinates=[
            [[[30.0, 20.0], [45.0, 40.0], [10.0, 40.0], [30.0, 20.0]]],
            [[[15.0, 5.0], [40.0, 10.0], [10.0, 20.0], [5.0, 10.0], [15.0, 5.0]]],
        ]
    )
    assert from_wkt(to_wkt(multi_polygon)) == multi_polygon


@pytest.mark.xdist_group(name="fast")
def test_shapes():
    line = LineString(coordinates=[[0.0, 0.0], [1.0, 1.0]])
    shape = to_shape(line)

    assert isinstance(shape, shapely.LineString)
    assert shape.length == pytest.approx(2**0.5)
    assert from_shape(shape) == line

    ring = from_shape(LinearRing([(0, 0), (1, 0), (1, 1)]))
    assert ring == LineString(coordinates=[[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 0.0]])
