"""Conversion between typed geometries and Well-Known Text."""

from aio_geojson.error import InvalidWkt
from aio_geojson.geometry import Geometry, resolve_geometry

import shapely
import shapely.geometry
from shapely.errors import GEOSException
from shapely.geometry.base import BaseGeometry


__docformat__ = "google"
__all__ = (
    "to_shape",
    "from_shape",
    "to_wkt",
    "from_wkt",
)


def to_shape(geometry: Geometry) -> BaseGeometry:
    """A Shapely geometry with the same coordinates."""
    return shapely.geometry.shape(geometry)


def from_shape(shape: BaseGeometry) -> Geometry:
    """A typed geometry with the same coordinates as a Shapely geometry."""
    mapping = shapely.geometry.mapping(shape)

    # This geometry does not exist in GeoJSON.
    if mapping["type"] == "LinearRing":
        mapping["type"] = "LineString"

    return resolve_geometry(mapping)


def to_wkt(geometry: Geometry, rounding_precision: int = -1) -> str:
    """
    The Well-Known Text representation of a geometry.

    Args:
        geometry: any typed geometry
        rounding_precision: the number of fractional digits, or ``-1`` to keep
                            the full precision

    References:
        - https://www.ogc.org/standard/sfa/
    """
    return shapely.to_wkt(
        to_shape(geometry),
        rounding_precision=rounding_precision,
        trim=True,
    )


def from_wkt(text: str) -> Geometry:
    """
    A typed geometry from its Well-Known Text representation.

    Raises:
        InvalidWkt: if the text cannot be read
    """
    try:
        shape = shapely.from_wkt(text)
    except GEOSException as err:
        raise InvalidWkt(text=text, cause=err) from err
    return from_shape(shape)
