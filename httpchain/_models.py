from __future__ import annotations

import enum
import typing

if typing.TYPE_CHECKING:
    import httpx

    from ._exceptions import HTTPChainError

__all__ = ["BasicAuth", "Cookie", "DoResult", "Method"]


class Method(str, enum.Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"

    def __str__(self) -> str:
        return self.value


class Cookie(typing.NamedTuple):
    """A name/value pair sent with a single request."""

    name: str
    value: str

    @classmethod
    def coerce(cls, cookie: Cookie | tuple[str, str]) -> Cookie:
        if isinstance(cookie, cls):
            return cookie
        name, value = cookie
        return cls(name, value)


class BasicAuth(typing.NamedTuple):
    username: str
    password: str


class DoResult(typing.NamedTuple):
    """
    Outcome of :meth:`RequestBuilder.do`.

    ``response`` is ``None`` when sending failed; ``content`` is ``None``
    whenever ``error`` is set.
    """

    response: httpx.Response | None
    content: bytes | None
    error: HTTPChainError | None
