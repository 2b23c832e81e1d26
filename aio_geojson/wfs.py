"""Retrieving feature collections from a Web Feature Service."""

import asyncio
import logging
import math
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from json import JSONDecodeError
from types import TracebackType

from aio_geojson import __version__
from aio_geojson.error import (
    CallError,
    CallTimeoutError,
    GeoJsonError,
    WfsError,
    _raise_for_response,
)
from aio_geojson.feature import FeatureCollection, resolve_feature_collection

import aiohttp
from aiohttp import ClientTimeout


__docformat__ = "google"
__all__ = (
    "WfsClient",
    "from_wfs",
    "DEFAULT_USER_AGENT",
    "DEFAULT_WFS_COUNT",
)


DEFAULT_USER_AGENT = f"aio-geojson/{__version__}"
"""User agent that identifies this library."""

DEFAULT_WFS_COUNT = 9999
"""Default maximum number of features requested at once."""

_NULL_LOGGER = logging.getLogger("aio_geojson.null")
_NULL_LOGGER.addHandler(logging.NullHandler())
_NULL_LOGGER.propagate = False


class WfsClient:
    """
    A client for an OGC Web Feature Service that supports GeoJSON output.

    This is a convenience for small layers: all features of a type are requested
    at once, without paging.

    Args:
        url: The URL of the service, without any query parameters.
        user_agent: A string used for the User-Agent header.
        timeout_secs: If set, requests will time out after this duration in seconds.
                      Defaults to no timeout.
        verify_ssl: Set to ``False`` to accept invalid certificates.
        logger: The logger to use for all logging output of this client.

    Raises:
        ValueError: if ``timeout_secs`` is not a finite number > 0

    References:
        - https://www.ogc.org/standard/wfs/
    """

    __slots__ = (
        "_logger",
        "_maybe_session",
        "_timeout_secs",
        "_url",
        "_user_agent",
        "_verify_ssl",
    )

    def __init__(
        self,
        url: str,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout_secs: float | None = None,
        verify_ssl: bool = True,
        logger: logging.Logger = _NULL_LOGGER,
    ) -> None:
        if timeout_secs is not None and (not math.isfinite(timeout_secs) or timeout_secs <= 0.0):
            msg = "'timeout_secs' must be finite > 0"
            raise ValueError(msg)

        self._url = url
        self._user_agent = user_agent
        self._timeout_secs = timeout_secs
        self._verify_ssl = verify_ssl
        self._logger = logger

        self._maybe_session: aiohttp.ClientSession | None = None

    def _session(self) -> aiohttp.ClientSession:
        """The session used for all requests of this client."""
        if not self._maybe_session or self._maybe_session.closed:
            headers = {"User-Agent": self._user_agent}
            connector = aiohttp.TCPConnector(ssl=self._verify_ssl)
            self._maybe_session = aiohttp.ClientSession(headers=headers, connector=connector)

        return self._maybe_session

    async def close(self) -> None:
        """Close the underlying session."""
        if self._maybe_session and not self._maybe_session.closed:
            await self._maybe_session.close()

    async def __aenter__(self) -> "WfsClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def get_features(
        self,
        feature_type: str,
        count: int = DEFAULT_WFS_COUNT,
    ) -> FeatureCollection:
        """
        Request all features of a type.

        Args:
            feature_type: the name of a layer of this service
            count: the maximum number of features to request

        Returns:
            the features in a collection

        Raises:
            ValueError: if ``count`` is not > 0
            CallError: if the request could not be made
            CallTimeoutError: if the request timed out
            ResponseError: if the response has an unexpected status, or does not contain
                           a GeoJSON feature collection
        """
        if count <= 0:
            msg = "'count' must be > 0"
            raise ValueError(msg)

        params = {
            "service": "wfs",
            "count": str(count),
            "outputFormat": "application/json",
            "version": "2.0.0",
            "request": "GetFeature",
            "typeName": feature_type,
        }
        timeout = ClientTimeout(total=self._timeout_secs)

        self._logger.info(f"request {feature_type!r} features from {self._url}")

        try:
            async with _map_request_error(timeout), self._session().get(
                url=self._url, params=params, timeout=timeout
            ) as response:
                fc = await _feature_collection_or_raise(response)
        except WfsError as err:
            self._logger.error(f"failed to get {feature_type!r} features: {err}")
            raise

        self._logger.info(f"received {len(fc.features)} {feature_type!r} features")
        return fc


async def from_wfs(
    url: str,
    feature_type: str,
    count: int = DEFAULT_WFS_COUNT,
    **kwargs,
) -> FeatureCollection:
    """
    Request all features of a type with a short-lived client.

    Args:
        url: the URL of the service, without any query parameters
        feature_type: the name of a layer of this service
        count: the maximum number of features to request
        **kwargs: passed on to ``WfsClient``

    Raises:
        WfsError: see ``WfsClient.get_features()``
    """
    async with WfsClient(url, **kwargs) as client:
        return await client.get_features(feature_type, count=count)


async def _feature_collection_or_raise(response: aiohttp.ClientResponse) -> FeatureCollection:
    """
    Try to extract a feature collection from a response.

    Raises:
        ResponseError: if the status is not ``2xx``, or the body is not a GeoJSON
                       feature collection
    """
    if not 200 <= response.status <= 299:
        await _raise_for_response(response, cause=None)

    try:
        json = await response.json(content_type=None)
    except JSONDecodeError as err:
        await _raise_for_response(response, cause=err)

    try:
        return resolve_feature_collection(json)
    except GeoJsonError as err:
        await _raise_for_response(response, cause=err)


@asynccontextmanager
async def _map_request_error(
    timeout: ClientTimeout | None = None,
) -> AsyncIterator[None]:
    """Context to make requests in; maps errors to our exception types."""
    try:
        yield
    except aiohttp.ClientError as err:
        raise CallError(cause=err) from err
    except asyncio.TimeoutError as err:
        assert timeout is not None and timeout.total
        raise CallTimeoutError(cause=err, after_secs=timeout.total) from err
