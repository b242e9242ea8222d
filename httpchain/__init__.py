# ruff: noqa: I001
from ._builder import DEFAULT_MAX_REDIRECTS, DEFAULT_TIMEOUT, RequestBuilder
from ._cookies import PublicSuffixCookiePolicy, new_cookie_jar
from ._exceptions import (
    BodyReadError,
    ConfigurationError,
    HTTPChainError,
    TransportError,
)
from ._models import BasicAuth, Cookie, DoResult, Method
from ._transports import ProxyResolver, ProxyTransport, TransportFactory, fixed_proxy

__title__ = "httpchain"
__description__ = "A chainable builder for single HTTP requests."
__version__ = "0.1.0"

try:
    from .cli import main
except ImportError:

    def main() -> None:  # type: ignore[misc]
        import sys

        print(
            'The "httpchain" command requires the CLI extra. '
            'Install it with: pip install "httpchain[cli]"',
            file=sys.stderr,
        )
        sys.exit(1)


def new() -> RequestBuilder:
    """Return a :class:`RequestBuilder` with default settings."""
    return RequestBuilder()


_EXCLUDED_FROM_ALL = {"cli", "main"}

__all__ = sorted(  # pyright: ignore[reportUnsupportedDunderAll]
    (
        member
        for member in list(vars().keys())
        if (
            not member.startswith("_")
            or member in ["__description__", "__title__", "__version__"]
        )
        and member not in _EXCLUDED_FROM_ALL
    ),
    key=str.casefold,
)
