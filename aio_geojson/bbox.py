"""Bounding boxes that may cross the antimeridian."""

import logging
import math
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any, Final

from aio_geojson.error import (
    InvalidBoundingBoxLength,
    InvalidBoundingBoxOrder,
    InvalidBoundingBoxText,
    MalformedCoordinates,
)


if TYPE_CHECKING:
    from aio_geojson.geometry import Point, Polygon


__docformat__ = "google"
__all__ = (
    "BoundingBox",
    "DEFAULT_BBOX_PRECISION",
)


DEFAULT_BBOX_PRECISION: Final[int] = 3
"""Default number of fractional digits in the text form of bounding boxes."""

_LENGTHS: Final[frozenset[int]] = frozenset((0, 4, 6))

_logger = logging.getLogger(__name__)


class BoundingBox(tuple[float, ...]):
    """
    An axis-aligned bounding box in longitude, latitude, and optionally elevation.

    Bounding boxes are tuples of either
     - zero values: the empty box, which is the identity element of ``merge()``,
     - four values: ``(min_x, min_y, max_x, max_y)``,
     - or six values: ``(min_x, min_y, min_z, max_x, max_y, max_z)``.

    On the Y and Z axes, the minimum must not exceed the maximum. On the X axis,
    ``min_x > max_x`` is allowed: it describes a box that crosses the antimeridian,
    spanning from ``min_x`` eastward over ±180° to ``max_x``.

    Args:
        values: zero, four or six numbers

    Raises:
        InvalidBoundingBoxLength: if there are not zero, four or six values
        InvalidBoundingBoxText: if any of the values is not a finite number
        InvalidBoundingBoxOrder: if ``min_y > max_y`` or ``min_z > max_z``

    References:
        - https://tools.ietf.org/html/rfc7946#section-5
        - https://tools.ietf.org/html/rfc7946#section-5.2
    """

    __slots__ = ()

    def __new__(cls, values: Iterable[float] = ()) -> "BoundingBox":
        values = tuple(values)
        for value in values:
            if not _is_finite_number(value):
                raise InvalidBoundingBoxText(text=repr(list(values)), token=repr(value))
        box = cls._of(float(value) for value in values)
        box.validate()
        return box

    @classmethod
    def _of(cls, values: Iterable[float]) -> "BoundingBox":
        """Construct a box without validating it."""
        box = tuple.__new__(cls, values)
        if len(box) not in _LENGTHS:
            raise InvalidBoundingBoxLength(bbox=tuple(box))
        return box

    @classmethod
    def new(cls, value: Any) -> "BoundingBox":
        """
        Construct a bounding box from any of the supported inputs.

        Args:
            value: one of
                - ``None``, for the empty box
                - a bounding box, which is returned as it is
                - a comma-separated list of numbers (see ``from_text()``)
                - a flat sequence of numbers
                - a sequence of bounding boxes (see ``from_boxes()``)
                - a coordinate tree of any depth (see ``from_coordinates()``)

        Raises:
            BoundingBoxError: if the result is not a valid box
            MalformedCoordinates: if a coordinate tree contains invalid positions
            TypeError: for other inputs
        """
        match value:
            case None:
                return cls()
            case BoundingBox():
                return value
            case str():
                return cls.from_text(value)
            case Sequence() if not value:
                return cls()
            case Sequence() if all(isinstance(v, BoundingBox) for v in value):
                return cls.from_boxes(value)
            case Sequence() if all(_is_number(v) for v in value):
                return cls(value)
            case Sequence():
                return cls.from_coordinates(value)
            case _:
                msg = f"cannot make a bounding box from {type(value).__name__}"
                raise TypeError(msg)

    @classmethod
    def from_text(cls, text: str) -> "BoundingBox":
        """
        Construct a bounding box from comma-separated numbers, f.e. ``"10,10,20,20"``.

        Blank text is the empty box.

        Raises:
            InvalidBoundingBoxText: if any token is not a finite number
            InvalidBoundingBoxLength: if there are not zero, four or six numbers
            InvalidBoundingBoxOrder: if ``min_y > max_y`` or ``min_z > max_z``
        """
        if not text.strip():
            return cls()

        values = []
        for token in text.split(","):
            try:
                value = float(token)
            except ValueError as err:
                raise InvalidBoundingBoxText(text=text, token=token.strip()) from err
            if not math.isfinite(value):
                raise InvalidBoundingBoxText(text=text, token=token.strip())
            values.append(value)

        return cls(values)

    @classmethod
    def from_boxes(cls, boxes: Iterable["BoundingBox"]) -> "BoundingBox":
        """The union of the given boxes, merged in order."""
        result = cls()
        for box in boxes:
            result = result.merge(box)
        return result

    @classmethod
    def from_coordinates(cls, coords: Sequence[Any]) -> "BoundingBox":
        """
        The bounding box of a coordinate tree of any depth.

        The box of each position ``[x, y]`` is ``(x, y, x, y)``, and the box of each position
        ``[x, y, z]`` is ``(x, y, z, x, y, z)``. Measures (a fourth value) are ignored.
        Sub-trees are folded into boxes bottom-up, which means polygons that touch
        the antimeridian from either side are merged into one box that crosses it.

        Raises:
            MalformedCoordinates: if a position has less than two values
        """
        if not coords:
            return cls()

        if _is_number(coords[0]):
            if len(coords) < 2:
                raise MalformedCoordinates(
                    coordinates=coords, depth=1, reason="a position needs at least two values"
                )
            position = coords[:3]
            return cls(tuple(position) + tuple(position))

        result = cls()
        for child in coords:
            result = result.merge(cls.from_coordinates(child))
        return result

    @property
    def dimensions(self) -> int:
        """``2`` or ``3`` for boxes with and without elevation, ``0`` for the empty box."""
        return len(self) // 2

    @property
    def min_x(self) -> float:
        """Western longitude."""
        return self[0]

    @property
    def min_y(self) -> float:
        """Southern latitude."""
        return self[1]

    @property
    def min_z(self) -> float | None:
        """Lowest elevation, if any."""
        return self[2] if len(self) == 6 else None

    @property
    def max_x(self) -> float:
        """Eastern longitude."""
        return self[self.dimensions]

    @property
    def max_y(self) -> float:
        """Northern latitude."""
        return self[self.dimensions + 1]

    @property
    def max_z(self) -> float | None:
        """Highest elevation, if any."""
        return self[5] if len(self) == 6 else None

    def merge(self, other: "BoundingBox") -> "BoundingBox":
        """
        The smallest box that contains this box and ``other``.

        Merging a box that touches -180° with a box that touches 180° absorbs the seam:
        ``(-180, 10, -170, 20)`` and ``(170, 10, 180, 20)`` become ``(170, 10, -170, 20)``,
        not the full range of longitudes. Boxes that already cross the antimeridian
        are extended in the direction that adds the least longitude.

        If the boxes have a different number of dimensions, ``other`` cannot be merged,
        and this box is returned unchanged.
        """
        if not self:
            return other
        if not other:
            return self

        if len(self) != len(other):
            _logger.warning(f"ignoring {other!r} when merging it into {self!r}: dimensions differ")
            return self

        n = self.dimensions
        min_x, max_x = _merge_x(self.min_x, self.max_x, other.min_x, other.max_x)
        mins = (min_x, *(min(a, b) for a, b in zip(self[1:n], other[1:n])))
        maxs = (max_x, *(max(a, b) for a, b in zip(self[n + 1 :], other[n + 1 :])))
        return BoundingBox._of(mins + maxs)

    def validate(self) -> None:
        """
        Check that no minimum exceeds its maximum, except on the X axis.

        Raises:
            InvalidBoundingBoxOrder: if ``min_y > max_y`` or ``min_z > max_z``
        """
        if not self:
            return
        if self.min_y > self.max_y:
            raise InvalidBoundingBoxOrder(bbox=tuple(self), axis="y")
        if len(self) == 6 and self[2] > self[5]:
            raise InvalidBoundingBoxOrder(bbox=tuple(self), axis="z")

    @property
    def is_valid(self) -> bool:
        """``True`` if ``validate()`` does not raise."""
        try:
            self.validate()
        except InvalidBoundingBoxOrder:
            return False
        return True

    @property
    def antimeridian(self) -> bool:
        """``True`` if this is a valid box that crosses the antimeridian."""
        return bool(self) and self.is_valid and self.min_x > self.max_x

    def overlaps(self, other: "BoundingBox") -> bool:
        """
        ``True`` if the interiors of both boxes intersect.

        Boxes that merely touch do not overlap. Empty boxes, and boxes with a different number
        of dimensions never overlap.
        """
        if not self or not other or len(self) != len(other):
            return False

        n = self.dimensions
        for axis in range(1, n):
            if not (self[axis] < other[axis + n] and self[axis + n] > other[axis]):
                return False

        return _overlaps_x(self, other)

    def centroid(self) -> "Point | None":
        """
        The center of this box, or ``None`` if the box is empty.

        This is the midpoint between minimum and maximum on each axis. For a box that crosses
        the antimeridian, that point is outside of the box.
        """
        from aio_geojson.geometry import Point

        if not self:
            return None

        n = self.dimensions
        return Point(coordinates=[(self[i] + self[i + n]) / 2.0 for i in range(n)])

    def polygon(self) -> "Polygon | None":
        """The two-dimensional footprint of this box, or ``None`` if the box is empty."""
        from aio_geojson.geometry import Polygon

        if not self:
            return None

        min_x, min_y, max_x, max_y = self.min_x, self.min_y, self.max_x, self.max_y
        ring = [[min_x, min_y], [max_x, min_y], [max_x, max_y], [min_x, max_y], [min_x, min_y]]
        return Polygon(coordinates=[ring])

    def to_text(self, precision: int = DEFAULT_BBOX_PRECISION) -> str:
        """
        Comma-separated values with a fixed number of fractional digits.

        The empty box is mapped to an empty string.

        Raises:
            ValueError: if ``precision`` is negative
        """
        if precision < 0:
            msg = "'precision' must be >= 0"
            raise ValueError(msg)
        return ",".join(f"{value:.{precision}f}" for value in self)

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self)})"


def _merge_x(a_min: float, a_max: float, b_min: float, b_max: float) -> tuple[float, float]:
    """Merge two longitude ranges, either of which may be wrapped."""
    if a_min > a_max:
        return _merge_wrapped_x(a_min, a_max, b_min, b_max)
    if b_min > b_max:
        return _merge_wrapped_x(b_min, b_max, a_min, a_max)

    # absorb the seam if both halves do not touch anyway
    if a_min == -180.0 and b_max == 180.0 and b_min > a_max:
        return b_min, a_max
    if b_min == -180.0 and a_max == 180.0 and a_min > b_max:
        return a_min, b_max

    return min(a_min, b_min), max(a_max, b_max)


def _merge_wrapped_x(
    w_min: float,
    w_max: float,
    b_min: float,
    b_max: float,
) -> tuple[float, float]:
    """Merge a wrapped longitude range ``w`` with any other range ``b``."""
    if b_min > b_max:
        lo, hi = min(w_min, b_min), max(w_max, b_max)
        return (-180.0, 180.0) if lo <= hi else (lo, hi)

    # 'b' is within the eastern part [w_min, 180] or the western part [-180, w_max]
    if b_min >= w_min or b_max <= w_max:
        return w_min, w_max

    touches_west = b_min <= w_max
    touches_east = b_max >= w_min

    if touches_west and touches_east:
        return -180.0, 180.0
    if touches_west:
        return w_min, b_max
    if touches_east:
        return b_min, w_max

    # 'b' is in the gap: close the smaller distance
    if w_min - b_min <= b_max - w_max:
        return b_min, w_max
    return w_min, b_max


def _overlaps_x(a: BoundingBox, b: BoundingBox) -> bool:
    a_wraps = a.min_x > a.max_x
    b_wraps = b.min_x > b.max_x

    if a_wraps and b_wraps:
        return True  # both contain the antimeridian

    if a_wraps:
        return _overlaps_wrapped_x(a, b)

    if b_wraps:
        return _overlaps_wrapped_x(b, a)

    return a.min_x < b.max_x and a.max_x > b.min_x


def _overlaps_wrapped_x(wrapped: BoundingBox, other: BoundingBox) -> bool:
    east = other.min_x < 180.0 and other.max_x > wrapped.min_x
    west = other.min_x < wrapped.max_x and other.max_x > -180.0
    return east or west


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _is_finite_number(value: Any) -> bool:
    return _is_number(value) and math.isfinite(value)
