"""Typed GeoJSON geometries."""

import copy
import logging
from abc import abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Final

from aio_geojson.bbox import BoundingBox
from aio_geojson.coords import (
    GEOMETRY_DEPTHS,
    Coordinates,
    Coordinates1,
    Coordinates2,
    Coordinates3,
    Coordinates4,
    resolve_coordinates,
    trim_coordinates,
)
from aio_geojson.error import UnknownGeometryType
from aio_geojson.spatial import GeoJsonDict, Spatial


__docformat__ = "google"
__all__ = (
    "Geometry",
    "Point",
    "LineString",
    "Polygon",
    "MultiPoint",
    "MultiLineString",
    "MultiPolygon",
    "GeometryCollection",
    "GEOMETRY_TYPES",
    "resolve_geometry",
    "bbox_member",
)


_logger = logging.getLogger(__name__)


@dataclass(kw_only=True, slots=True)
class Geometry(Spatial):
    """
    Base class of the seven GeoJSON geometry types.

    Geometries are treated as immutable values: neither their coordinates,
    nor a precomputed ``bbox`` are changed by this library once they are built.

    Attributes:
        type: the GeoJSON type name, f.e. ``"Point"``
        bbox: a precomputed bounding box, or the empty box

    References:
        - https://tools.ietf.org/html/rfc7946#section-3.1
    """

    type: ClassVar[str]

    bbox: BoundingBox = field(default_factory=BoundingBox)

    @abstractmethod
    def trim(self, precision: int) -> "Geometry":
        """
        A copy of this geometry with all coordinates truncated to ``precision`` fractional digits.

        The precomputed ``bbox`` is kept as it is.
        """
        raise NotImplementedError

    def _geojson_with_bbox(self, geojson: GeoJsonDict) -> GeoJsonDict:
        if self.bbox:
            geojson["bbox"] = list(self.bbox)
        return geojson


class _CoordinateGeometry(Geometry):
    """Geometries that have a ``coordinates`` member."""

    __slots__ = ()

    coordinates: Coordinates

    def force_bbox(self) -> BoundingBox:
        if self.bbox:
            return self.bbox
        return BoundingBox.from_coordinates(self.coordinates)

    @property
    def geojson(self) -> GeoJsonDict:
        return self._geojson_with_bbox(
            {
                "type": self.type,
                "coordinates": copy.deepcopy(self.coordinates),
            }
        )

    def trim(self, precision: int) -> "Geometry":
        return replace(self, coordinates=trim_coordinates(self.coordinates, precision))


@dataclass(kw_only=True, slots=True)
class Point(_CoordinateGeometry):
    """
    A single position.

    Attributes:
        coordinates: ``[x, y]``, ``[x, y, z]``, or empty
    """

    type: ClassVar[str] = "Point"

    coordinates: Coordinates1 = field(default_factory=list)


@dataclass(kw_only=True, slots=True)
class LineString(_CoordinateGeometry):
    """
    A line through two or more positions.

    Attributes:
        coordinates: the positions in order
    """

    type: ClassVar[str] = "LineString"

    coordinates: Coordinates2 = field(default_factory=list)


@dataclass(kw_only=True, slots=True)
class Polygon(_CoordinateGeometry):
    """
    An area bounded by linear rings.

    The first ring is the exterior ring, any others are holes. Ring closure
    and winding order are not checked.

    Attributes:
        coordinates: the rings of this polygon
    """

    type: ClassVar[str] = "Polygon"

    coordinates: Coordinates3 = field(default_factory=list)


@dataclass(kw_only=True, slots=True)
class MultiPoint(_CoordinateGeometry):
    """
    Any number of positions.

    Attributes:
        coordinates: the positions
    """

    type: ClassVar[str] = "MultiPoint"

    coordinates: Coordinates2 = field(default_factory=list)


@dataclass(kw_only=True, slots=True)
class MultiLineString(_CoordinateGeometry):
    """
    Any number of lines.

    Attributes:
        coordinates: the positions of each line
    """

    type: ClassVar[str] = "MultiLineString"

    coordinates: Coordinates3 = field(default_factory=list)


@dataclass(kw_only=True, slots=True)
class MultiPolygon(_CoordinateGeometry):
    """
    Any number of polygons.

    Attributes:
        coordinates: the rings of each polygon
    """

    type: ClassVar[str] = "MultiPolygon"

    coordinates: Coordinates4 = field(default_factory=list)


@dataclass(kw_only=True, slots=True)
class GeometryCollection(Geometry):
    """
    Any number of geometries, which may be collections themselves.

    Attributes:
        geometries: the members of this collection
    """

    type: ClassVar[str] = "GeometryCollection"

    geometries: list[Geometry] = field(default_factory=list)

    def force_bbox(self) -> BoundingBox:
        if self.bbox:
            return self.bbox
        return BoundingBox.from_boxes(geometry.force_bbox() for geometry in self.geometries)

    @property
    def geojson(self) -> GeoJsonDict:
        return self._geojson_with_bbox(
            {
                "type": self.type,
                "geometries": [geometry.geojson for geometry in self.geometries],
            }
        )

    def trim(self, precision: int) -> "Geometry":
        return replace(self, geometries=[geometry.trim(precision) for geometry in self.geometries])


GEOMETRY_TYPES: Final[dict[str, type[Geometry]]] = {
    cls.type: cls
    for cls in (
        Point,
        LineString,
        Polygon,
        MultiPoint,
        MultiLineString,
        MultiPolygon,
        GeometryCollection,
    )
}
"""Geometry classes by their GeoJSON type name."""


def resolve_geometry(node: Any) -> Geometry:
    """
    Build a typed geometry from a decoded GeoJSON geometry object.

    The ``"type"`` member decides which geometry is built. Its ``"coordinates"``
    are rebuilt with the nesting depth that geometry type requires; if they are absent,
    the geometry has no coordinates. The members of a ``"GeometryCollection"`` are resolved
    recursively. An optional ``"bbox"`` member becomes the precomputed bounding box.

    Geometries that are already typed are returned as they are, which means that resolving
    a partially resolved tree is fine.

    Args:
        node: a dictionary with at least a ``"type"`` key, or a ``Geometry``

    Returns:
        the typed geometry

    Raises:
        UnknownGeometryType: if the ``"type"`` is missing, or not a geometry type
        MalformedCoordinates: if the ``"coordinates"`` do not match the type
        BoundingBoxError: if ``"bbox"`` is invalid
    """
    if isinstance(node, Geometry):
        return node

    if not isinstance(node, Mapping):
        raise UnknownGeometryType(type_name=None)

    type_name = node.get("type")
    cls = GEOMETRY_TYPES.get(type_name) if isinstance(type_name, str) else None
    if cls is None:
        raise UnknownGeometryType(type_name=type_name)

    bbox = bbox_member(node)

    if cls is GeometryCollection:
        geometries = [resolve_geometry(child) for child in node.get("geometries") or ()]
        _logger.debug(f"resolved {type_name} with {len(geometries)} geometries")
        return GeometryCollection(geometries=geometries, bbox=bbox)

    raw_coords = node.get("coordinates")
    coords = [] if raw_coords is None else resolve_coordinates(raw_coords, GEOMETRY_DEPTHS[type_name])
    return cls(coordinates=coords, bbox=bbox)  # type: ignore[call-arg]


def bbox_member(node: Mapping[str, Any]) -> BoundingBox:
    """
    The ``"bbox"`` member of any GeoJSON object, or the empty box if there is none.

    Raises:
        BoundingBoxError: if the member is not a valid bounding box
    """
    value = node.get("bbox")
    if value is None or isinstance(value, BoundingBox):
        return value or BoundingBox()
    return BoundingBox(value)
