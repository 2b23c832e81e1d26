import json
from pathlib import Path

from aio_geojson import (
    Feature,
    FeatureCollection,
    from_dict,
    parse,
    parse_file,
    write,
    write_file,
)
from aio_geojson.error import MalformedCoordinates, UnknownGeometryType
from aio_geojson.geometry import GeometryCollection, MultiPolygon, Point

import geojson
import pytest


test_dir = Path(__file__).resolve().parent
data_dir = test_dir / "geojson_data"

DATA_FILES = sorted(path.name for path in data_dir.glob("*.geojson"))


@pytest.mark.xdist_group(name="fast")
@pytest.mark.parametrize("filename", DATA_FILES)
def test_parse_file_round_trip(filename: str, tmp_path: Path):
    path = data_dir / filename
    obj = parse_file(path)

    assert json.loads(write(obj)) == json.loads(path.read_text(encoding="utf-8"))
    assert parse(write(obj)) == obj
    assert geojson.loads(write(obj)).is_valid

    out_path = tmp_path / filename
    write_file(obj, out_path)
    assert parse_file(out_path) == obj


@pytest.mark.xdist_group(name="fast")
def test_parse_types():
    assert isinstance(parse_file(data_dir / "point.geojson"), Point)
    assert isinstance(parse_file(data_dir / "multipolygon2.geojson"), MultiPolygon)
    assert isinstance(parse_file(data_dir / "geometrycollection.geojson"), GeometryCollection)
    assert isinstance(parse_file(data_dir / "feature.geojson"), Feature)
    assert isinstance(parse_file(data_dir / "featureCollection.geojson"), FeatureCollection)


@pytest.mark.xdist_group(name="fast")
def test_write_feature():
    feature = parse_file(data_dir / "feature.geojson")

    assert write(feature) == (
        b'{"type":"Feature",'
        b'"geometry":{"type":"LineString","coordinates":[[102.0,0.0],[103.0,1.0],[104.0,0.0],[105.0,1.0]]},'
        b'"properties":{"prop0":"value0","prop1":0},'
        b'"id":98765}'
    )


@pytest.mark.xdist_group(name="fast")
def test_write_mapping():
    assert write({"type": "Point", "coordinates": [1, 2]}) == b'{"type":"Point","coordinates":[1,2]}'
    assert write(FeatureCollection()) == b'{"type":"FeatureCollection","features":[]}'


@pytest.mark.xdist_group(name="fast")
def test_parse_str_and_bytes():
    text = '{"type": "Point", "coordinates": [1, 2]}'
    assert parse(text) == Point(coordinates=[1.0, 2.0])
    assert parse(text.encode("utf-8")) == Point(coordinates=[1.0, 2.0])


@pytest.mark.xdist_group(name="fast")
def test_parse_errors():
    with pytest.raises(json.JSONDecodeError):
        parse("{not json")

    with pytest.raises(UnknownGeometryType):
        parse('{"coordinates": [1, 2]}')

    with pytest.raises(UnknownGeometryType):
        parse("[1, 2]")

    with pytest.raises(MalformedCoordinates):
        parse('{"type": "LineString", "coordinates": [1, 2]}')

    with pytest.raises(MalformedCoordinates):
        parse('{"type": "Point", "coordinates": [NaN, 1]}')

    with pytest.raises(MalformedCoordinates):
        parse('{"type": "LineString", "coordinates": [[0, 0], [Infinity, 1]]}')

    with pytest.raises(MalformedCoordinates):
        parse('{"type": "Point", "coordinates": [1]}')

    with pytest.raises(UnknownGeometryType):
        parse('{"type": "FeatureCollection", "features": [{"type": "Feature", "geometry": {}}]}')


@pytest.mark.xdist_group(name="fast")
def test_from_dict_typed():
    point = Point(coordinates=[1.0, 2.0])
    feature = Feature(geometry=point)
    fc = FeatureCollection(features=[feature])

    assert from_dict(point) is point
    assert from_dict(feature) is feature
    assert from_dict(fc) is fc
    assert from_dict(fc.geojson) == fc


@pytest.mark.xdist_group(name="fast")
def test_parse_file_missing(tmp_path: Path):
    with pytest.raises(OSError):
        parse_file(tmp_path / "missing.geojson")
