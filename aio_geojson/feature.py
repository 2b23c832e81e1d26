"""Features, feature collections and their properties."""

import logging
import math
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar, TypeAlias

from aio_geojson.bbox import BoundingBox
from aio_geojson.coords import iter_positions
from aio_geojson.error import UnknownGeometryType
from aio_geojson.geometry import (
    Geometry,
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    bbox_member,
    resolve_geometry,
)
from aio_geojson.spatial import GeoJsonDict, Spatial


__docformat__ = "google"
__all__ = (
    "FeatureId",
    "Feature",
    "FeatureCollection",
    "resolve_feature",
    "resolve_feature_collection",
    "to_geometry_array",
    "to_multi_point",
)


FeatureId: TypeAlias = str | int | float
"""Features may be identified by either a string or a number."""

_logger = logging.getLogger(__name__)


@dataclass(kw_only=True, slots=True, repr=False)
class Feature(Spatial):
    """
    A spatially bounded thing.

    Attributes:
        geometry: the location of this feature, or ``None`` if it is unlocated
        properties: any JSON-compatible data; this dictionary is not copied when mapping
                    this feature to GeoJSON, which means changes are visible to every holder
        id: an optional identifier
        bbox: a precomputed bounding box, or the empty box

    References:
        - https://tools.ietf.org/html/rfc7946#section-3.2
    """

    type: ClassVar[str] = "Feature"

    geometry: Geometry | None = None
    properties: dict[str, Any] = field(default_factory=dict)
    id: FeatureId | None = None
    bbox: BoundingBox = field(default_factory=BoundingBox)

    def force_bbox(self) -> BoundingBox:
        if self.bbox:
            return self.bbox
        if self.geometry is not None:
            return self.geometry.force_bbox()
        return BoundingBox()

    @property
    def geojson(self) -> GeoJsonDict:
        geojson: GeoJsonDict = {
            "type": self.type,
            "geometry": self.geometry.geojson if self.geometry is not None else None,
            "properties": self.properties,
        }
        if self.id is not None:
            geojson["id"] = self.id
        if self.bbox:
            geojson["bbox"] = list(self.bbox)
        return geojson

    def id_str(self) -> str:
        """The ``id`` of this feature as a string, or an empty string if there is none."""
        return _stringify(self.id)

    def property_string(self, key: str) -> str:
        """
        A property converted to a string.

        Numbers without a fractional part are formatted as integers, so that ``0.0`` becomes
        ``"0"``. Returns an empty string for missing properties.
        """
        return _stringify(self.properties.get(key))

    def property_int(self, key: str) -> int:
        """
        A property converted to an integer.

        Floats are truncated, and strings are parsed. Returns ``0`` for missing properties,
        and for values that are not numeric.
        """
        return _intify(self.properties.get(key))

    def property_float(self, key: str) -> float:
        """
        A property converted to a float.

        Strings are parsed. Returns ``nan`` for missing properties, and for values
        that are not numeric.
        """
        return _floatify(self.properties.get(key))

    def property_string_list(self, key: str) -> list[str]:
        """
        A property converted to a list of strings.

        Each element of a list is converted like ``property_string()``, and a single
        string becomes a list with one element. Returns an empty list for missing properties,
        and for other values.
        """
        value = self.properties.get(key)
        match value:
            case str():
                return [value]
            case list() | tuple():
                return [_stringify(element) for element in value]
            case _:
                return []

    def __repr__(self) -> str:
        geometry = self.geometry.type if self.geometry is not None else None
        return f"{type(self).__name__}(id={self.id!r}, geometry={geometry})"


@dataclass(kw_only=True, slots=True, repr=False)
class FeatureCollection(Spatial):
    """
    An ordered list of features.

    Attributes:
        features: the features of this collection
        bbox: a precomputed bounding box, or the empty box

    References:
        - https://tools.ietf.org/html/rfc7946#section-3.3
    """

    type: ClassVar[str] = "FeatureCollection"

    features: list[Feature] = field(default_factory=list)
    bbox: BoundingBox = field(default_factory=BoundingBox)

    def force_bbox(self) -> BoundingBox:
        """
        The bounding box of this collection, computing it by brute force if needed.

        Without a precomputed ``bbox``, this is the merge of each feature's bounding box,
        in order.
        """
        if self.bbox:
            return self.bbox
        return BoundingBox.from_boxes(feature.force_bbox() for feature in self.features)

    @property
    def geojson(self) -> GeoJsonDict:
        geojson: GeoJsonDict = {
            "type": self.type,
            "features": [feature.geojson for feature in self.features],
        }
        if self.bbox:
            geojson["bbox"] = list(self.bbox)
        return geojson

    def fill_properties(self) -> None:
        """
        Make sure every feature has the same property keys.

        Keys missing on a feature, but present on any other, are added with the value ``None``.
        The properties of the features are changed in place.
        """
        keys = dict.fromkeys(key for feature in self.features for key in feature.properties)
        for feature in self.features:
            for key in keys:
                feature.properties.setdefault(key, None)

    def __iter__(self) -> Iterator[Feature]:
        return iter(self.features)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self.features)} features)"


def resolve_feature(node: Any) -> Feature:
    """
    Build a typed feature from a decoded GeoJSON feature object.

    The ``"geometry"`` member is resolved with ``resolve_geometry()``. Missing
    ``"properties"``, ``"id"`` and ``"bbox"`` members are not an error.
    Features that are already typed are returned as they are.

    Raises:
        UnknownGeometryType: if the object is not a feature, or its geometry has an unknown type
        MalformedCoordinates: if the coordinates of the geometry do not match its type
        BoundingBoxError: if ``"bbox"`` is invalid
    """
    if isinstance(node, Feature):
        return node

    if not isinstance(node, Mapping) or node.get("type") != Feature.type:
        raise UnknownGeometryType(type_name=_type_name(node))

    raw_geometry = node.get("geometry")
    geometry = None if raw_geometry is None else resolve_geometry(raw_geometry)
    properties = node.get("properties")

    return Feature(
        geometry=geometry,
        properties=properties if properties is not None else {},
        id=node.get("id"),
        bbox=bbox_member(node),
    )


def resolve_feature_collection(node: Any) -> FeatureCollection:
    """
    Build a typed feature collection from a decoded GeoJSON feature collection.

    Each of its ``"features"`` is resolved with ``resolve_feature()``.
    Collections that are already typed are returned as they are.

    Raises:
        UnknownGeometryType: if the object is not a feature collection, or any feature
                             has a geometry with an unknown type
        MalformedCoordinates: if the coordinates of any geometry do not match its type
        BoundingBoxError: if any ``"bbox"`` is invalid
    """
    if isinstance(node, FeatureCollection):
        return node

    if not isinstance(node, Mapping) or node.get("type") != FeatureCollection.type:
        raise UnknownGeometryType(type_name=_type_name(node))

    features = [resolve_feature(feature) for feature in node.get("features") or ()]
    _logger.debug(f"resolved {FeatureCollection.type} with {len(features)} features")

    return FeatureCollection(features=features, bbox=bbox_member(node))


def to_geometry_array(obj: Spatial) -> list[Geometry]:
    """
    The geometries that make up a GeoJSON object.

    Returns:
        - the geometry of each located feature of a feature collection
        - the geometry of a located feature
        - any other geometry itself
    """
    match obj:
        case FeatureCollection():
            return [f.geometry for f in obj.features if f.geometry is not None]
        case Feature():
            return [obj.geometry] if obj.geometry is not None else []
        case Geometry():
            return [obj]
        case _:
            msg = f"expected a GeoJSON object, got {type(obj).__name__}"
            raise TypeError(msg)


def to_multi_point(obj: Spatial) -> MultiPoint:
    """A ``MultiPoint`` with every position of a GeoJSON object, in order."""
    return MultiPoint(
        coordinates=[list(position) for position in _positions(to_geometry_array(obj))]
    )


def _positions(geometries: Iterable[Geometry]) -> Iterable[list[float]]:
    for geometry in geometries:
        match geometry:
            case GeometryCollection():
                yield from _positions(geometry.geometries)
            case (
                Point()
                | LineString()
                | Polygon()
                | MultiPoint()
                | MultiLineString()
                | MultiPolygon()
            ):
                yield from iter_positions(geometry.coordinates)


def _type_name(node: Any) -> Any:
    return node.get("type") if isinstance(node, Mapping) else None


def _stringify(value: Any) -> str:
    match value:
        case None:
            return ""
        case bool():
            return str(value).lower()
        case float() if value.is_integer():
            return str(int(value))
        case _:
            return str(value)


def _intify(value: Any) -> int:
    match value:
        case bool():
            return int(value)
        case int():
            return value
        case float() if math.isfinite(value):
            return int(value)
        case str():
            try:
                return int(float(value))
            except (ValueError, OverflowError):
                return 0
        case _:
            return 0


def _floatify(value: Any) -> float:
    match value:
        case bool():
            return float(value)
        case int() | float():
            return float(value)
        case str():
            try:
                return float(value)
            except ValueError:
                return math.nan
        case _:
            return math.nan
