from __future__ import annotations

import logging
import typing
from http.cookiejar import Cookie, CookieJar, DefaultCookiePolicy, request_host

from publicsuffixlist import PublicSuffixList

logger = logging.getLogger(__name__)

__all__ = ["PublicSuffixCookiePolicy", "new_cookie_jar"]

_default_suffix_list: PublicSuffixList | None = None


def _suffix_list() -> PublicSuffixList:
    # One parsed list per process.
    global _default_suffix_list
    if _default_suffix_list is None:
        _default_suffix_list = PublicSuffixList()
    return _default_suffix_list


class PublicSuffixCookiePolicy(DefaultCookiePolicy):
    """
    Cookie policy that refuses ``Domain=`` attributes naming a public suffix.

    A response from ``www.example.co.uk`` may set a cookie for
    ``example.co.uk`` but not for ``co.uk``. A host that is itself a public
    suffix (``co.uk`` answering for ``co.uk``) keeps a host-only cookie.
    """

    def __init__(
        self, suffix_list: PublicSuffixList | None = None, **kwargs: typing.Any
    ) -> None:
        super().__init__(**kwargs)
        self._suffix_list = suffix_list if suffix_list is not None else _suffix_list()

    def set_ok_domain(self, cookie: Cookie, request: typing.Any) -> bool:
        if not super().set_ok_domain(cookie, request):
            return False
        if not cookie.domain_specified:
            return True

        domain = cookie.domain.lstrip(".").lower()
        if not self._suffix_list.is_public(domain):
            return True
        if domain == request_host(request).lower():
            return True
        logger.debug(
            "Rejected cookie %r: domain %r is a public suffix", cookie.name, domain
        )
        return False


def new_cookie_jar(suffix_list: PublicSuffixList | None = None) -> CookieJar:
    """Return an empty session jar governed by :class:`PublicSuffixCookiePolicy`."""
    return CookieJar(policy=PublicSuffixCookiePolicy(suffix_list))
