"""Reading and writing GeoJSON text, files and dictionaries."""

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, TypeAlias

from aio_geojson.error import UnknownGeometryType
from aio_geojson.feature import (
    Feature,
    FeatureCollection,
    resolve_feature,
    resolve_feature_collection,
)
from aio_geojson.geometry import Geometry, resolve_geometry
from aio_geojson.spatial import GeoJsonDict


__docformat__ = "google"
__all__ = (
    "GeoJson",
    "from_dict",
    "parse",
    "parse_file",
    "write",
    "write_file",
)


GeoJson: TypeAlias = Geometry | Feature | FeatureCollection
"""Any typed GeoJSON object."""


def from_dict(node: Any) -> GeoJson:
    """
    Build a typed object from any decoded GeoJSON object.

    This is the inverse of the ``geojson`` property: ``from_dict(obj.geojson) == obj``
    for any typed object. Objects that are already typed are returned as they are.

    Args:
        node: a decoded GeoJSON object, f.e. a result of ``json.load()``

    Raises:
        UnknownGeometryType: if the ``"type"`` of this object, or any nested object is unknown
        MalformedCoordinates: if any coordinates do not match their geometry type
        BoundingBoxError: if any ``"bbox"`` is invalid
    """
    if isinstance(node, Geometry | Feature | FeatureCollection):
        return node

    if not isinstance(node, Mapping):
        raise UnknownGeometryType(type_name=None)

    match node.get("type"):
        case "Feature":
            return resolve_feature(node)
        case "FeatureCollection":
            return resolve_feature_collection(node)
        case _:
            return resolve_geometry(node)


def parse(data: str | bytes) -> GeoJson:
    """
    Build a typed object from GeoJSON text.

    Raises:
        json.JSONDecodeError: if the input is not JSON
        GeoJsonError: see ``from_dict()``
    """
    return from_dict(json.loads(data))


def parse_file(path: str | Path) -> GeoJson:
    """
    Build a typed object from a GeoJSON file.

    Raises:
        OSError: if the file cannot be read
        json.JSONDecodeError: if the file does not contain JSON
        GeoJsonError: see ``from_dict()``
    """
    with Path(path).open(encoding="utf-8") as file:
        return from_dict(json.load(file))


def write(obj: GeoJson | GeoJsonDict) -> bytes:
    """Compact GeoJSON text of a typed object, or of an already mapped one."""
    geojson = obj if isinstance(obj, Mapping) else obj.geojson
    return json.dumps(geojson, separators=(",", ":")).encode("utf-8")


def write_file(obj: GeoJson | GeoJsonDict, path: str | Path) -> None:
    """
    Write a typed object to a GeoJSON file, replacing it if it exists.

    Raises:
        OSError: if the file cannot be written
    """
    Path(path).write_bytes(write(obj))
