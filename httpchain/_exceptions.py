"""
Exception hierarchy for httpchain.

Every error raised or returned by :class:`~httpchain.RequestBuilder` is an
:class:`HTTPChainError`::

    HTTPChainError
    ├── ConfigurationError
    ├── TransportError
    └── BodyReadError
"""

from __future__ import annotations

import typing

if typing.TYPE_CHECKING:
    import httpx

__all__ = [
    "BodyReadError",
    "ConfigurationError",
    "HTTPChainError",
    "TransportError",
]


class HTTPChainError(Exception):
    """Base class for builder errors."""

    def __init__(
        self, message: str, *, request: httpx.Request | None = None
    ) -> None:
        super().__init__(message)
        self._request = request

    @property
    def request(self) -> httpx.Request:
        if self._request is None:
            raise RuntimeError("The .request property has not been set.")
        return self._request

    @request.setter
    def request(self, request: httpx.Request) -> None:
        self._request = request


class ConfigurationError(HTTPChainError):
    """
    The builder state cannot produce a request: no method, no url,
    or a malformed url/proxy. Detected before any network I/O.
    """


class TransportError(HTTPChainError):
    """
    Sending failed (DNS, connect, TLS, timeout, redirects...).
    The original httpx exception is available as ``__cause__``.
    """


class BodyReadError(HTTPChainError):
    """
    The response arrived but its body could not be read in full.
    """

    def __init__(
        self,
        message: str,
        *,
        request: httpx.Request | None = None,
        response: httpx.Response | None = None,
    ) -> None:
        super().__init__(message, request=request)
        self._response = response

    @property
    def response(self) -> httpx.Response:
        if self._response is None:
            raise RuntimeError("The .response property has not been set.")
        return self._response
