import json
import math
from pathlib import Path

from aio_geojson.bbox import BoundingBox
from aio_geojson.error import UnknownGeometryType
from aio_geojson.feature import (
    Feature,
    FeatureCollection,
    resolve_feature,
    resolve_feature_collection,
    to_geometry_array,
    to_multi_point,
)
from aio_geojson.geometry import GeometryCollection, LineString, MultiPoint, Point

import pytest


test_dir = Path(__file__).resolve().parent
data_dir = test_dir / "geojson_data"


def load(filename: str):
    with (data_dir / filename).open(encoding="utf-8") as file:
        return json.load(file)


@pytest.mark.xdist_group(name="fast")
def test_resolve_feature():
    feature = resolve_feature(load("feature.geojson"))

    assert feature.id == 98765
    assert feature.id_str() == "98765"
    assert feature.geometry == LineString(
        coordinates=[[102.0, 0.0], [103.0, 1.0], [104.0, 0.0], [105.0, 1.0]]
    )
    assert feature.properties == {"prop0": "value0", "prop1": 0}
    assert feature.bbox == BoundingBox()
    assert feature.force_bbox() == (102.0, 0.0, 105.0, 1.0)
    assert resolve_feature(feature) is feature


@pytest.mark.xdist_group(name="fast")
def test_resolve_feature_minimal():
    feature = resolve_feature({"type": "Feature"})
    assert feature == Feature()
    assert feature.geometry is None
    assert feature.id is None
    assert feature.id_str() == ""
    assert feature.force_bbox() == BoundingBox()

    feature = resolve_feature({"type": "Feature", "geometry": None, "properties": None})
    assert feature.properties == {}


@pytest.mark.xdist_group(name="fast")
def test_resolve_feature_keeps_properties():
    properties = {"name": "a"}
    feature = resolve_feature({"type": "Feature", "geometry": None, "properties": properties})
    assert feature.properties is properties
    assert feature.geojson["properties"] is properties


@pytest.mark.xdist_group(name="fast")
def test_resolve_feature_errors():
    with pytest.raises(UnknownGeometryType) as exc_info:
        resolve_feature({"type": "Point", "coordinates": [1, 2]})

    assert exc_info.value.type_name == "Point"

    with pytest.raises(UnknownGeometryType) as exc_info:
        resolve_feature({"type": "Feature", "geometry": {"type": "Circle"}})

    assert exc_info.value.type_name == "Circle"


@pytest.mark.xdist_group(name="fast")
def test_feature_geojson():
    assert Feature().geojson == {"type": "Feature", "geometry": None, "properties": {}}

    feature = Feature(
        geometry=Point(coordinates=[1.0, 2.0]),
        properties={"a": 1},
        id="x",
        bbox=BoundingBox((1.0, 2.0, 1.0, 2.0)),
    )
    assert feature.geojson == {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [1.0, 2.0]},
        "properties": {"a": 1},
        "id": "x",
        "bbox": [1.0, 2.0, 1.0, 2.0],
    }
    assert resolve_feature(feature.geojson) == feature


@pytest.mark.xdist_group(name="fast")
def test_properties():
    feature = Feature(
        properties={
            "string": "foo",
            "int": 5,
            "float": 5.5,
            "whole": 3.0,
            "numeric": "42",
            "decimal": "4.2",
            "bool": True,
            "null": None,
            "list": ["a", 1, 2.0, None],
            "object": {"a": 1},
        }
    )

    assert feature.property_string("string") == "foo"
    assert feature.property_string("int") == "5"
    assert feature.property_string("float") == "5.5"
    assert feature.property_string("whole") == "3"
    assert feature.property_string("bool") == "true"
    assert feature.property_string("null") == ""
    assert feature.property_string("missing") == ""

    assert feature.property_int("int") == 5
    assert feature.property_int("float") == 5
    assert feature.property_int("numeric") == 42
    assert feature.property_int("decimal") == 4
    assert feature.property_int("string") == 0
    assert feature.property_int("bool") == 1
    assert feature.property_int("missing") == 0
    assert feature.property_int("object") == 0

    assert feature.property_float("int") == 5.0
    assert feature.property_float("float") == 5.5
    assert feature.property_float("decimal") == 4.2
    assert math.isnan(feature.property_float("string"))
    assert math.isnan(feature.property_float("missing"))

    assert feature.property_string_list("list") == ["a", "1", "2", ""]
    assert feature.property_string_list("string") == ["foo"]
    assert feature.property_string_list("int") == []
    assert feature.property_string_list("missing") == []


@pytest.mark.xdist_group(name="fast")
def test_id_str():
    assert Feature(id="abc").id_str() == "abc"
    assert Feature(id=7).id_str() == "7"
    assert Feature(id=7.0).id_str() == "7"
    assert Feature(id=7.5).id_str() == "7.5"


@pytest.mark.xdist_group(name="fast")
def test_resolve_feature_collection():
    fc = resolve_feature_collection(load("featureCollection.geojson"))

    assert len(fc.features) == 4
    assert [f.geometry.type if f.geometry else None for f in fc] == [
        "Point",
        "LineString",
        "Polygon",
        None,
    ]
    assert fc.features[3].id == "f4"
    assert resolve_feature_collection(fc) is fc
    assert resolve_feature_collection(fc.geojson) == fc
    assert repr(fc) == "FeatureCollection(4 features)"


@pytest.mark.xdist_group(name="fast")
def test_resolve_feature_collection_errors():
    with pytest.raises(UnknownGeometryType) as exc_info:
        resolve_feature_collection(load("feature.geojson"))

    assert exc_info.value.type_name == "Feature"

    with pytest.raises(UnknownGeometryType):
        resolve_feature_collection(
            {"type": "FeatureCollection", "features": [{"type": "Point", "coordinates": [1, 2]}]}
        )


@pytest.mark.xdist_group(name="fast")
def test_empty_feature_collection():
    fc = resolve_feature_collection({"type": "FeatureCollection", "features": None})
    assert fc == FeatureCollection()
    assert fc.features == []
    assert fc.force_bbox() == BoundingBox()
    assert fc.geojson == {"type": "FeatureCollection", "features": []}


@pytest.mark.xdist_group(name="fast")
def test_feature_collection_force_bbox():
    fc = resolve_feature_collection(load("featureCollection.geojson"))

    expected = BoundingBox()
    for feature in fc.features:
        expected = expected.merge(feature.force_bbox())

    assert fc.force_bbox() == expected
    assert fc.force_bbox() == (100.0, 0.0, 105.0, 1.0)

    fc = resolve_feature_collection(load("featureCollectionWithGeometryCollection.geojson"))
    assert fc.force_bbox() == (-10.0, -10.0, 50.0, 50.0)
    assert fc.features[0].force_bbox() == (10.0, 10.0, 40.0, 40.0)


@pytest.mark.xdist_group(name="fast")
def test_fill_properties():
    fc = resolve_feature_collection(load("featureCollection.geojson"))
    fc.fill_properties()

    for feature in fc.features:
        assert set(feature.properties) == {"prop0", "prop1", "prop2"}

    assert fc.features[0].properties == {"prop0": "value0", "prop1": None, "prop2": None}
    assert fc.features[2].properties["prop1"] == {"this": "that"}
    assert fc.features[3].properties == {"prop0": None, "prop1": None, "prop2": "unlocated"}


@pytest.mark.xdist_group(name="fast")
def test_geo_interfaces():
    fc = resolve_feature_collection(load("featureCollection.geojson"))
    interfaces = list(fc.geo_interfaces)

    assert len(interfaces) == 4
    assert interfaces[0].__geo_interface__ == fc.features[0].geojson


@pytest.mark.xdist_group(name="fast")
def test_to_geometry_array():
    fc = resolve_feature_collection(load("featureCollection.geojson"))
    geometries = to_geometry_array(fc)

    assert [g.type for g in geometries] == ["Point", "LineString", "Polygon"]
    assert to_geometry_array(fc.features[0]) == [fc.features[0].geometry]
    assert to_geometry_array(fc.features[3]) == []

    point = Point(coordinates=[1.0, 2.0])
    assert to_geometry_array(point) == [point]

    with pytest.raises(TypeError):
        to_geometry_array({"type": "Point"})  # type: ignore[arg-type]


@pytest.mark.xdist_group(name="fast")
def test_to_multi_point():
    fc = resolve_feature_collection(load("sample.geojson"))
    multi_point = to_multi_point(fc)

    assert isinstance(multi_point, MultiPoint)
    assert len(multi_point.coordinates) == 10
    assert multi_point.coordinates[0] == [102.0, 0.5]
    assert multi_point.coordinates[-1] == [100.0, 0.0]

    collection = GeometryCollection(
        geometries=[
            Point(coordinates=[1.0, 2.0]),
            GeometryCollection(geometries=[LineString(coordinates=[[3.0, 4.0], [5.0, 6.0]])]),
        ]
    )
    assert to_multi_point(collection) == MultiPoint(
        coordinates=[[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]]
    )
    assert to_multi_point(Feature()) == MultiPoint()
