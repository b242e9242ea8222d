"""
RequestBuilder: a chainable builder for one HTTP request at a time.

Typical use::

    builder = httpchain.RequestBuilder()
    err = (
        builder.post("https://api.example.com/items")
        .set_header("Content-Type", "application/json")
        .payload(b'{"a": 1}')
        .end()
    )
    if err is None:
        print(builder.resp_status, builder.raw_resp_body)

Errors are returned from :meth:`RequestBuilder.end` and also kept as a
*sticky* error readable through :attr:`RequestBuilder.error`, so a chain can
ignore intermediate results and check once at the end. Starting a new
request (``get``, ``post``...) clears it.

A builder is mutable and not thread-safe: use one per task, or serialise
access externally.
"""

from __future__ import annotations

import logging
import typing
from http.cookiejar import CookieJar

import httpx

from ._cookies import new_cookie_jar
from ._exceptions import (
    BodyReadError,
    ConfigurationError,
    HTTPChainError,
    TransportError,
)
from ._models import BasicAuth, Cookie, DoResult, Method
from ._transports import (
    ProxyResolver,
    ProxyTransport,
    TransportFactory,
    fixed_proxy,
)
from ._utils import (
    basic_auth_header,
    content_length,
    format_cookie_pairs,
    merge_cookie_header,
    parse_proxy_url,
)

logger = logging.getLogger(__name__)

__all__ = ["DEFAULT_MAX_REDIRECTS", "DEFAULT_TIMEOUT", "RequestBuilder"]

DEFAULT_TIMEOUT = httpx.Timeout(30.0, connect=10.0)
DEFAULT_MAX_REDIRECTS = 10

CookieTypes = typing.Iterable[typing.Union[Cookie, typing.Tuple[str, str]]]


class RequestBuilder:
    """
    Accumulates method, url, headers, cookies, basic auth, body and proxy,
    executes one request and keeps the last request/response pair.

    Parameters
    ----------
    timeout:
        Timeout applied to every request.
    follow_redirects:
        Whether redirects are followed (default ``True``).
    max_redirects:
        Redirect cap when following.
    transport:
        Send every request through this transport, whatever the proxy.
        Mostly useful with :class:`httpx.MockTransport`.
    transport_factory:
        ``(proxy_url | None) -> httpx.BaseTransport``; builds the transport
        for each proxy route. Defaults to keep-alive-free
        :class:`httpx.HTTPTransport` instances.
    cookie_jar:
        Session jar. Defaults to a fresh jar with public-suffix rules.
    """

    def __init__(
        self,
        *,
        timeout: float | httpx.Timeout | None = DEFAULT_TIMEOUT,
        follow_redirects: bool = True,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
        transport: httpx.BaseTransport | None = None,
        transport_factory: TransportFactory | None = None,
        cookie_jar: CookieJar | None = None,
    ) -> None:
        if transport is not None and transport_factory is not None:
            raise TypeError("Pass either 'transport' or 'transport_factory', not both.")
        if transport is not None:
            transport_factory = lambda proxy_url: transport  # noqa: E731

        self._jar = cookie_jar if cookie_jar is not None else new_cookie_jar()
        self._transport = ProxyTransport(transport_factory)
        self._client = httpx.Client(
            transport=self._transport,
            cookies=self._jar,
            timeout=timeout,
            follow_redirects=follow_redirects,
            max_redirects=max_redirects,
            trust_env=False,
        )

        self._url = ""
        self._method: Method | None = None
        self._headers: list[tuple[str, str]] = []
        self._cookies: list[Cookie] = []
        self._basic_auth: BasicAuth | None = None
        self._body = b""
        self._proxy: ProxyResolver | None = None
        self._error: HTTPChainError | None = None

        self._last_request: httpx.Request | None = None
        self._last_response: httpx.Response | None = None
        self._resp_status = 0
        self._resp_headers = httpx.Headers()
        self._raw_resp_body = b""
        self._resp_length = 0

    def __repr__(self) -> str:
        method = self._method.value if self._method is not None else None
        return f"<RequestBuilder method={method!r} url={self._url!r}>"

    def __enter__(self) -> RequestBuilder:
        return self

    def __exit__(self, *args: typing.Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying client and every transport it opened."""
        self._client.close()

    # ------------------------------------------------------------------
    # Clearing
    # ------------------------------------------------------------------

    def clear_request_data(self) -> RequestBuilder:
        """
        Reset url, method, headers, basic auth and body.

        Cookies and proxy are kept; use :meth:`clear_cookies` and
        :meth:`clear_proxy` for those.
        """
        self._url = ""
        self._method = None
        self._headers = []
        self._basic_auth = None
        self._body = b""
        return self

    def clear_cookies(self) -> RequestBuilder:
        """Drop the per-request cookies. The session jar is left alone."""
        self._cookies = []
        return self

    def clear_proxy(self) -> RequestBuilder:
        self._proxy = None
        return self

    # ------------------------------------------------------------------
    # Method selection
    # ------------------------------------------------------------------

    def _start(self, method: Method, url: str) -> RequestBuilder:
        self.clear_request_data()
        self._method = method
        self._url = url
        self._error = None
        return self

    def method(self, name: str | Method, url: str) -> RequestBuilder:
        """Start a request with an arbitrary (but known) method name."""
        self.clear_request_data()
        self._error = None
        try:
            self._method = Method(str(name).upper())
        except ValueError:
            self._error = ConfigurationError(f"Unsupported HTTP method {name!r}.")
            return self
        self._url = url
        return self

    def get(self, url: str) -> RequestBuilder:
        return self._start(Method.GET, url)

    def post(self, url: str) -> RequestBuilder:
        return self._start(Method.POST, url)

    def put(self, url: str) -> RequestBuilder:
        return self._start(Method.PUT, url)

    def delete(self, url: str) -> RequestBuilder:
        return self._start(Method.DELETE, url)

    def head(self, url: str) -> RequestBuilder:
        return self._start(Method.HEAD, url)

    def patch(self, url: str) -> RequestBuilder:
        return self._start(Method.PATCH, url)

    def options(self, url: str) -> RequestBuilder:
        return self._start(Method.OPTIONS, url)

    # ------------------------------------------------------------------
    # Request configuration
    # ------------------------------------------------------------------

    def add_cookies(self, cookies: CookieTypes) -> RequestBuilder:
        """Add cookies to the next request(s). Duplicates are kept."""
        self._cookies.extend(Cookie.coerce(cookie) for cookie in cookies)
        return self

    def set_header(self, key: str, value: str) -> RequestBuilder:
        """Set ``key`` to a single value, replacing any existing values."""
        lowered = key.lower()
        headers: list[tuple[str, str]] = []
        replaced = False
        for existing_key, existing_value in self._headers:
            if existing_key.lower() != lowered:
                headers.append((existing_key, existing_value))
            elif not replaced:
                headers.append((key, value))
                replaced = True
        if not replaced:
            headers.append((key, value))
        self._headers = headers
        return self

    def append_header(self, key: str, value: str) -> RequestBuilder:
        """Add a value for ``key`` after any existing ones."""
        self._headers.append((key, value))
        return self

    def set_basic_auth(self, username: str, password: str) -> RequestBuilder:
        self._basic_auth = BasicAuth(username, password)
        return self

    def proxy(self, raw_url: str) -> RequestBuilder:
        """
        Route subsequent requests through ``raw_url``.

        A malformed URL leaves the proxy unchanged and becomes the sticky
        error, unless an earlier error is already pending. A valid URL is
        always stored, so it survives into the next request.
        """
        try:
            url = parse_proxy_url(raw_url)
        except ConfigurationError as exc:
            logger.debug("Rejected proxy URL: %s", exc)
            if self._error is None:
                self._error = exc
            return self
        self._proxy = fixed_proxy(url)
        return self

    def payload(self, data: bytes | bytearray | memoryview) -> RequestBuilder:
        """
        Use ``data`` as the request body, verbatim.

        No Content-Type is inferred; set one with :meth:`set_header`.
        """
        self._body = bytes(data)
        return self

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def _make_request(self) -> httpx.Request:
        if self._method is None:
            raise ConfigurationError("No method specified.")
        if not self._url:
            raise ConfigurationError("No url specified.")

        try:
            request = httpx.Request(
                self._method.value,
                self._url,
                headers=self._headers,
                content=self._body,
            )
        except (httpx.InvalidURL, TypeError, ValueError) as exc:
            raise ConfigurationError(
                f"Cannot build {self._method.value} request for {self._url!r}: {exc}"
            ) from exc

        if self._basic_auth is not None:
            request.headers["Authorization"] = basic_auth_header(*self._basic_auth)
        merge_cookie_header(request, format_cookie_pairs(self._cookies))
        return request

    def _attach_session_cookies(self, request: httpx.Request) -> None:
        jar_request = httpx.Request(request.method, request.url)
        self._client.cookies.set_cookie_header(jar_request)
        merge_cookie_header(request, jar_request.headers.get("cookie", ""))

    def _send(self, request: httpx.Request) -> httpx.Response:
        self._transport.proxy = self._proxy
        self._attach_session_cookies(request)
        logger.debug("Sending %s %s", request.method, request.url)
        try:
            return self._client.send(request, stream=True)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(str(exc) or type(exc).__name__, request=request) from exc

    def _read(self, request: httpx.Request, response: httpx.Response) -> bytes:
        try:
            return response.read()
        except (httpx.HTTPError, httpx.StreamError) as exc:
            raise BodyReadError(
                str(exc) or type(exc).__name__, request=request, response=response
            ) from exc
        finally:
            response.close()

    def end(self) -> HTTPChainError | None:
        """
        Execute the configured request.

        Returns ``None`` on success, otherwise the error, which is also kept
        as :attr:`error`. A pending error is returned without any I/O.
        """
        if self._error is not None:
            return self._error

        try:
            request = self._make_request()
        except ConfigurationError as exc:
            self._error = exc
            self._last_request = None
            return exc
        self._last_request = request

        try:
            response = self._send(request)
        except TransportError as exc:
            logger.debug("Transport failure for %s %s: %s", request.method, request.url, exc)
            self._error = exc
            return exc
        self._last_response = response

        try:
            body = self._read(request, response)
        except BodyReadError as exc:
            logger.debug("Body read failure for %s %s: %s", request.method, request.url, exc)
            self._error = exc
            return exc

        self._raw_resp_body = body
        self._resp_status = response.status_code
        self._resp_headers = response.headers
        self._resp_length = content_length(response)
        return None

    def do(self, request: httpx.Request) -> DoResult:
        """
        Send a ready-made request through the configured proxy.

        Nothing on the builder is recorded: :attr:`last_request`,
        :attr:`last_response`, the response snapshot and :attr:`error` are
        left as they were.
        """
        try:
            response = self._send(request)
        except TransportError as exc:
            return DoResult(None, None, exc)
        try:
            body = self._read(request, response)
        except BodyReadError as exc:
            return DoResult(response, None, exc)
        return DoResult(response, body, None)

    def raise_for_error(self) -> RequestBuilder:
        """Raise the sticky error, if any. Returns ``self`` otherwise."""
        if self._error is not None:
            raise self._error
        return self

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def error(self) -> HTTPChainError | None:
        """The first error since the last method-selection call."""
        return self._error

    @property
    def last_request(self) -> httpx.Request | None:
        """The last request attempted, even if it failed."""
        return self._last_request

    @property
    def last_response(self) -> httpx.Response | None:
        """The last response received, even if its body could not be read."""
        return self._last_response

    @property
    def resp_status(self) -> int:
        return self._resp_status

    @property
    def resp_headers(self) -> httpx.Headers:
        return self._resp_headers

    @property
    def resp_length(self) -> int:
        """Declared content length of the last response, ``-1`` if unknown."""
        return self._resp_length

    @property
    def raw_resp_body(self) -> bytes:
        return self._raw_resp_body

    @property
    def headers(self) -> httpx.Headers:
        """The headers configured for the pending request."""
        return httpx.Headers(self._headers)

    @property
    def cookies(self) -> list[Cookie]:
        """The per-request cookies."""
        return list(self._cookies)

    @property
    def cookie_jar(self) -> CookieJar:
        """The session jar shared by every request this builder sends."""
        return self._jar
