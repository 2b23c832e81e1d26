"""Coordinate trees of fixed nesting depth."""

import math
from collections.abc import Iterator, Sequence
from typing import Any, Final, TypeAlias

from aio_geojson.error import MalformedCoordinates


__docformat__ = "google"
__all__ = (
    "Position",
    "Coordinates1",
    "Coordinates2",
    "Coordinates3",
    "Coordinates4",
    "Coordinates",
    "GEOMETRY_DEPTHS",
    "resolve_coordinates",
    "trim_coordinates",
    "iter_positions",
)


Position: TypeAlias = list[float]
"""
A single position ``[x, y]``, ``[x, y, z]`` or ``[x, y, z, m]``.

``x`` is the longitude, and ``y`` is the latitude.
"""

Coordinates1: TypeAlias = Position
"""Coordinates of a ``Point``."""

Coordinates2: TypeAlias = list[Position]
"""Coordinates of a ``LineString`` or ``MultiPoint``."""

Coordinates3: TypeAlias = list[list[Position]]
"""Coordinates of a ``Polygon`` or ``MultiLineString``."""

Coordinates4: TypeAlias = list[list[list[Position]]]
"""Coordinates of a ``MultiPolygon``."""

Coordinates: TypeAlias = Coordinates1 | Coordinates2 | Coordinates3 | Coordinates4
"""Coordinates of any depth."""

GEOMETRY_DEPTHS: Final[dict[str, int]] = {
    "Point": 1,
    "LineString": 2,
    "MultiPoint": 2,
    "Polygon": 3,
    "MultiLineString": 3,
    "MultiPolygon": 4,
}
"""The nesting depth of ``"coordinates"`` for each geometry type that has them."""

_POSITION_LENGTHS: Final[frozenset[int]] = frozenset((0, 2, 3, 4))


def resolve_coordinates(node: Any, depth: int) -> Coordinates:
    """
    Rebuild an untyped, nested sequence of numbers as a coordinate tree.

    The tree is reconstructed depth-first: at ``depth == 1`` the node has to be
    a sequence of numbers, at any other depth it has to be a sequence of nodes
    with one less depth. Integers are converted to floats. A position has two to four
    finite values, or none at all for an empty geometry.

    There is no geometric validation (ring closure, number of positions, etc.).

    Args:
        node: a nested sequence, f.e. the ``"coordinates"`` member of decoded JSON
        depth: the expected depth, between 1 (``Point``) and 4 (``MultiPolygon``)

    Returns:
        a fresh tree of nested lists with float leaves

    Raises:
        ValueError: if ``depth`` is not between 1 and 4
        MalformedCoordinates: if the input does not have the expected depth,
                              if any of its leaves is not a finite number,
                              or if a position has the wrong number of values
    """
    if depth not in range(1, 5):
        msg = "'depth' must be between 1 and 4"
        raise ValueError(msg)
    return _resolve(node, depth)


def _resolve(node: Any, depth: int) -> Coordinates:
    if not _is_sequence(node):
        raise MalformedCoordinates(
            coordinates=node, depth=depth, reason=f"expected a list, got {_type_name(node)}"
        )

    if depth == 1:
        position = []
        for value in node:
            if not _is_number(value):
                raise MalformedCoordinates(
                    coordinates=node,
                    depth=depth,
                    reason=f"expected a number, got {_type_name(value)}",
                )
            try:
                number = float(value)
            except OverflowError:  # integers beyond the range of floats
                number = math.inf
            if not math.isfinite(number):
                raise MalformedCoordinates(
                    coordinates=node,
                    depth=depth,
                    reason=f"expected a finite number, got {value}",
                )
            position.append(number)
        if len(position) not in _POSITION_LENGTHS:
            raise MalformedCoordinates(
                coordinates=node,
                depth=depth,
                reason=f"expected 2 to 4 values, got {len(position)}",
            )
        return position

    return [_resolve(child, depth - 1) for child in node]


def trim_coordinates(coords: Coordinates, precision: int) -> Coordinates:
    """
    Truncate every number of a coordinate tree to a number of fractional digits.

    Values are truncated toward zero, not rounded.

    Args:
        coords: a coordinate tree of any depth
        precision: the number of fractional digits to keep

    Returns:
        a new tree with the same shape

    Raises:
        ValueError: if ``precision`` is negative
    """
    if precision < 0:
        msg = "'precision' must be >= 0"
        raise ValueError(msg)
    scale = 10.0**precision
    return _trim(coords, scale)


def _trim(node: Any, scale: float) -> Any:
    if _is_number(node):
        return math.trunc(node * scale) / scale
    return [_trim(child, scale) for child in node]


def iter_positions(coords: Coordinates) -> Iterator[Position]:
    """Yields every position of a coordinate tree, in order."""
    if not coords:
        return
    if _is_number(coords[0]):
        yield coords  # type: ignore[misc]
        return
    for child in coords:
        yield from iter_positions(child)  # type: ignore[arg-type]


def _is_sequence(node: Any) -> bool:
    return isinstance(node, Sequence) and not isinstance(node, str | bytes)


def _is_number(value: Any) -> bool:
    # JSON booleans decode to bool, which is a subclass of int
    return isinstance(value, int | float) and not isinstance(value, bool)


def _type_name(value: Any) -> str:
    return "null" if value is None else type(value).__name__
