from __future__ import annotations

import base64
import logging
import typing

import httpx

from ._exceptions import ConfigurationError

if typing.TYPE_CHECKING:
    from ._models import Cookie

logger = logging.getLogger(__name__)

PROXY_SCHEMES = ("http", "https", "socks5", "socks5h")


def parse_proxy_url(raw_url: str) -> httpx.URL:
    """
    Parse a proxy URL, accepting bare ``host:port`` forms as ``http://``.

    Raises :class:`ConfigurationError` for anything httpx cannot route
    through.
    """
    candidate = raw_url
    if candidate and "://" not in candidate:
        candidate = f"http://{candidate}"
    try:
        url = httpx.URL(candidate)
    except (httpx.InvalidURL, TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid proxy URL {raw_url!r}: {exc}") from exc

    if url.scheme not in PROXY_SCHEMES:
        raise ConfigurationError(
            f"Unsupported proxy scheme {url.scheme!r} in {raw_url!r}. "
            f"Expected one of: {', '.join(PROXY_SCHEMES)}."
        )
    if not url.host:
        raise ConfigurationError(f"Proxy URL {raw_url!r} has no host.")
    return url


def _valid_cookie_value_char(char: str) -> bool:
    return 0x20 <= ord(char) < 0x7F and char not in '";\\'


def sanitize_cookie_name(name: str) -> str:
    return name.replace("\n", "-").replace("\r", "-")


def sanitize_cookie_value(value: str) -> str:
    """
    Drop bytes not allowed in a cookie-value; quote values holding a space
    or comma.
    """
    cleaned = "".join(char for char in value if _valid_cookie_value_char(char))
    if cleaned != value:
        logger.debug("Dropped invalid characters from cookie value %r", value)
    if " " in cleaned or "," in cleaned:
        return f'"{cleaned}"'
    return cleaned


def format_cookie_pairs(cookies: typing.Iterable[Cookie]) -> str:
    return "; ".join(
        f"{sanitize_cookie_name(cookie.name)}={sanitize_cookie_value(cookie.value)}"
        for cookie in cookies
    )


def merge_cookie_header(request: httpx.Request, pairs: str) -> None:
    """Append ``pairs`` to the request's ``Cookie`` header, folding repeats into one."""
    if not pairs:
        return
    existing = "; ".join(request.headers.get_list("cookie"))
    request.headers["Cookie"] = f"{existing}; {pairs}" if existing else pairs


def content_length(response: httpx.Response) -> int:
    """Return the declared ``Content-Length``, or ``-1`` when unknown."""
    value = response.headers.get("content-length")
    if value is None:
        return -1
    try:
        length = int(value)
    except ValueError:
        return -1
    return length if length >= 0 else -1


def basic_auth_header(username: str, password: str) -> str:
    userpass = f"{username}:{password}".encode("utf-8")
    return f"Basic {base64.b64encode(userpass).decode('ascii')}"
