"""
Error types.

```
                                (GeoJsonError)
                                      ╷
       ┌──────────────────┬───────────┼──────────────┬─────────────────┐
       ╵                  ╵           ╵              ╵                 ╵
MalformedCoordinates  UnknownGeometryType  (BoundingBoxError)   InvalidWkt   (WfsError)
                                             ╷                                 ╷
              ┌──────────────────────────────┼───────────────┐          ┌──────┴──────┐
              ╵                              ╵               ╵          ╵             ╵
   InvalidBoundingBoxText    InvalidBoundingBoxOrder  InvalidBoundingBoxLength  CallError  ResponseError
                                                                         ╷
                                                                  CallTimeoutError
```
"""

import asyncio
from dataclasses import dataclass
from json import JSONDecodeError
from typing import Any, NoReturn, TypeAlias, TypeGuard

import aiohttp


__docformat__ = "google"
__all__ = (
    "GeoJsonError",
    "MalformedCoordinates",
    "UnknownGeometryType",
    "BoundingBoxError",
    "InvalidBoundingBoxText",
    "InvalidBoundingBoxOrder",
    "InvalidBoundingBoxLength",
    "InvalidWkt",
    "WfsError",
    "CallError",
    "CallTimeoutError",
    "ResponseError",
    "ResponseErrorCause",
    "is_call_err",
    "is_call_timeout",
    "is_server_error",
)


class GeoJsonError(Exception):
    """Base exception for GeoJSON objects that cannot be decoded, built, or retrieved."""

    @property
    def should_retry(self) -> bool:
        """Returns ``True`` if it's worth retrying when encountering this error."""
        return False


@dataclass(kw_only=True)
class MalformedCoordinates(GeoJsonError):
    """
    A coordinate tree does not have the nesting depth its geometry type requires.

    This is also raised if a leaf of the tree is not a number, or if a node that
    should be a list is not a list. Values are never coerced or truncated.

    Attributes:
        coordinates: the offending (sub-)tree
        depth: the nesting depth expected at that node
        reason: what exactly is wrong with the node
    """

    coordinates: Any
    depth: int
    reason: str

    def __str__(self) -> str:
        return f"malformed coordinates (expected depth {self.depth}): {self.reason}"


@dataclass(kw_only=True)
class UnknownGeometryType(GeoJsonError):
    """
    The ``"type"`` member of a GeoJSON object is missing or not recognized.

    Attributes:
        type_name: the type tag that was found, or ``None`` if there is none
    """

    type_name: Any

    def __str__(self) -> str:
        if self.type_name is None:
            return "missing GeoJSON type"
        return f"unknown GeoJSON type {self.type_name!r}"


class BoundingBoxError(GeoJsonError):
    """Base exception for bounding boxes that cannot be constructed."""


@dataclass(kw_only=True)
class InvalidBoundingBoxText(BoundingBoxError):
    """
    A bounding box text contains a token that is not a finite number.

    Attributes:
        text: the complete input text
        token: the first token that could not be read
    """

    text: str
    token: str

    def __str__(self) -> str:
        return f"invalid bounding box {self.text!r}: {self.token!r} is not a finite number"


@dataclass(kw_only=True)
class InvalidBoundingBoxOrder(BoundingBoxError):
    """
    A bounding box has a minimum that exceeds its maximum on the Y or Z axis.

    Inverted X ranges are not an error, since they denote boxes that cross
    the antimeridian.

    Attributes:
        bbox: the offending values
        axis: the first axis with inverted bounds, ``"y"`` or ``"z"``
    """

    bbox: tuple[float, ...]
    axis: str

    def __str__(self) -> str:
        values = ",".join(str(v) for v in self.bbox)
        return f"invalid bounding box [{values}]: min{self.axis} > max{self.axis}"


@dataclass(kw_only=True)
class InvalidBoundingBoxLength(BoundingBoxError):
    """
    A bounding box does not have 0, 4, or 6 values.

    Attributes:
        bbox: the offending values
    """

    bbox: tuple[float, ...]

    def __str__(self) -> str:
        return f"invalid bounding box: expected 0, 4 or 6 values, got {len(self.bbox)}"


@dataclass(kw_only=True)
class InvalidWkt(GeoJsonError):
    """
    Well-Known Text could not be read.

    Attributes:
        text: the input text
        cause: the exception raised by the WKT reader
    """

    text: str
    cause: Exception

    def __str__(self) -> str:
        return f"invalid WKT: {self.cause}"


class WfsError(GeoJsonError):
    """Base exception for failed Web Feature Service requests."""


@dataclass(kw_only=True)
class CallError(WfsError):
    """
    Failed to make a WFS request.

    This error is raised when the client failed to get any response,
    f.e. due to connection issues.

    Attributes:
        cause: the exception that caused this error
    """

    cause: aiohttp.ClientError

    @property
    def should_retry(self) -> bool:
        """Returns ``True`` if it's worth retrying when encountering this error."""
        return True

    def __str__(self) -> str:
        return str(self.cause)


@dataclass(kw_only=True)
class CallTimeoutError(CallError):
    """
    A WFS request timed out.

    Attributes:
        cause: the exception that caused this error
        after_secs: the configured timeout for the request
    """

    cause: asyncio.TimeoutError  # type: ignore[assignment]
    after_secs: float

    def __str__(self) -> str:
        return f"request timed out after {self.after_secs:.1f}s"


ResponseErrorCause: TypeAlias = aiohttp.ClientResponseError | JSONDecodeError | GeoJsonError
"""Causes for a ``ResponseError``."""


@dataclass(kw_only=True)
class ResponseError(WfsError):
    """
    Unexpected WFS response.

    This is raised for status codes outside of ``2xx``, and for response bodies
    that are not a GeoJSON ``FeatureCollection``. A status code ``>= 500`` signals
    an error on the server, which is when ``is_server_error`` is ``True``.

    Attributes:
        url: the requested URL
        status: the response status code
        body: the response body
        cause: an optional exception that may have caused this error
    """

    url: str
    status: int
    body: str
    cause: ResponseErrorCause | None

    @property
    def should_retry(self) -> bool:
        """Returns ``True`` if it's worth retrying when encountering this error."""
        return self.is_server_error

    @property
    def is_server_error(self) -> bool:
        """Returns ``True`` if this presumably a server-side error."""
        return self.status >= 500

    def __str__(self) -> str:
        if self.cause is None:
            return f"unexpected response ({self.status}) from {self.url}"
        return f"unexpected response ({self.status}) from {self.url}: {self.cause}"


async def _raise_for_response(
    response: aiohttp.ClientResponse,
    cause: ResponseErrorCause | None,
) -> NoReturn:
    """Raise a ``ResponseError`` with an optional cause."""
    err = ResponseError(
        url=str(response.url),
        status=response.status,
        body=await response.text(),
        cause=cause,
    )
    if cause:
        raise err from cause
    raise err


def is_call_err(err: GeoJsonError | None) -> TypeGuard[CallError]:
    """``True`` if this is a ``CallError``."""
    return isinstance(err, CallError)


def is_call_timeout(err: GeoJsonError | None) -> TypeGuard[CallTimeoutError]:
    """``True`` if this is a ``CallTimeoutError``."""
    return isinstance(err, CallTimeoutError)


def is_server_error(err: GeoJsonError | None) -> TypeGuard[ResponseError]:
    """``True`` if this is a ``ResponseError`` presumably cause by a server-side error."""
    return isinstance(err, ResponseError) and err.is_server_error
