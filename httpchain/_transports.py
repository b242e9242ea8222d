from __future__ import annotations

import logging
import typing

import httpx

logger = logging.getLogger(__name__)

__all__ = [
    "NO_KEEPALIVE_LIMITS",
    "ProxyResolver",
    "ProxyTransport",
    "TransportFactory",
    "fixed_proxy",
]

ProxyResolver = typing.Callable[[httpx.Request], typing.Optional[httpx.URL]]
TransportFactory = typing.Callable[[typing.Optional[httpx.URL]], httpx.BaseTransport]

# Every request opens a fresh connection.
NO_KEEPALIVE_LIMITS = httpx.Limits(max_keepalive_connections=0)


def fixed_proxy(url: httpx.URL) -> ProxyResolver:
    """Return a resolver that routes every request through ``url``."""

    def resolve(request: httpx.Request) -> httpx.URL | None:
        return url

    return resolve


def _default_transport(proxy: httpx.URL | None) -> httpx.BaseTransport:
    return httpx.HTTPTransport(proxy=proxy, limits=NO_KEEPALIVE_LIMITS)


class ProxyTransport(httpx.BaseTransport):
    """
    Transport that picks its route per request.

    ``proxy`` is consulted on every :meth:`handle_request`; the returned URL
    (or ``None`` for a direct connection) selects an inner transport built by
    ``factory`` and cached for reuse.
    """

    def __init__(self, factory: TransportFactory | None = None) -> None:
        self.proxy: ProxyResolver | None = None
        self._factory = factory if factory is not None else _default_transport
        self._transports: dict[str | None, httpx.BaseTransport] = {}

    def _transport_for(
        self, proxy_url: httpx.URL | None, request: httpx.Request
    ) -> httpx.BaseTransport:
        key = str(proxy_url) if proxy_url is not None else None
        transport = self._transports.get(key)
        if transport is None:
            try:
                transport = self._factory(proxy_url)
            except (ImportError, ValueError, TypeError) as exc:
                # e.g. a socks5 proxy without the optional socksio package
                route = f"proxy {proxy_url}" if proxy_url is not None else "direct route"
                raise httpx.TransportError(
                    f"Cannot create transport for {route}: {exc}",
                    request=request,
                ) from exc
            self._transports[key] = transport
        return transport

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        proxy_url = self.proxy(request) if self.proxy is not None else None
        if proxy_url is not None:
            logger.debug("Routing %s %s via proxy %s", request.method, request.url, proxy_url)
        return self._transport_for(proxy_url, request).handle_request(request)

    def close(self) -> None:
        # One transport may serve several routes.
        transports = list({id(t): t for t in self._transports.values()}.values())
        self._transports.clear()
        for transport in transports:
            transport.close()
