r"""CSRF token lookup in the ambient cookie store.

The cookie store is injected as a zero-argument callable returning a
``Cookie``-header style string (``"a=1; csrfToken=abc"``), so tests can
use a plain lambda and the client can render its ``httpx`` cookie jar.
"""

from __future__ import annotations

__all__ = ["CookieSource", "CsrfTokenResolver", "jar_cookie_source", "parse_cookie_string"]

from collections.abc import Callable
from typing import TYPE_CHECKING
from urllib.parse import unquote

import httpx

if TYPE_CHECKING:
    from http.cookiejar import Cookie

    from securefetch.core.config import CsrfConfig

CookieSource = Callable[[], str]


def parse_cookie_string(cookie_string: str) -> dict[str, str]:
    """Parse a ``name=value; name=value`` string into a mapping.

    Whitespace around pairs and names is ignored, values are URL-decoded,
    pairs without ``=`` are skipped and the first occurrence of a name
    wins.

    Args:
        cookie_string: The raw cookie string.

    Returns:
        The cookies by name.

    Example:
        ```pycon
        >>> from securefetch.csrf import parse_cookie_string
        >>> parse_cookie_string("  a=1 ;csrfToken=abc%20123;a=2")
        {'a': '1', 'csrfToken': 'abc 123'}

        ```
    """
    cookies: dict[str, str] = {}
    for pair in cookie_string.split(";"):
        name, sep, value = pair.strip().partition("=")
        if not sep:
            continue
        cookies.setdefault(name.strip(), unquote(value.strip()))
    return cookies


def _domain_matches(host: str, cookie: Cookie) -> bool:
    domain = cookie.domain.lstrip(".").lower()
    return not domain or host == domain or host.endswith(f".{domain}")


def jar_cookie_source(cookies: httpx.Cookies, url: str | None = None) -> CookieSource:
    """Return a cookie source reading from an ``httpx`` cookie jar.

    The jar is read on every call, so cookies set by earlier responses
    are visible to later requests.

    Args:
        cookies: The cookie jar.
        url: Optional URL whose host scopes the cookies. Cookies set for
            other domains are skipped, and cookies of more specific
            domains come first so they win a name clash.

    Example:
        ```pycon
        >>> import httpx
        >>> from securefetch.csrf import jar_cookie_source
        >>> cookies = httpx.Cookies()
        >>> cookies.set("csrfToken", "other", domain="other.example.org")
        >>> cookies.set("csrfToken", "mine", domain="api.example.com")
        >>> jar_cookie_source(cookies, "https://api.example.com")()
        'csrfToken=mine'

        ```
    """
    host = httpx.URL(url).host.lower() if url else ""

    def read() -> str:
        jar = list(cookies.jar)
        if host:
            jar = [cookie for cookie in jar if _domain_matches(host, cookie)]
            jar.sort(key=lambda cookie: len(cookie.domain.lstrip(".")), reverse=True)
        return "; ".join(f"{cookie.name}={cookie.value}" for cookie in jar)

    return read


class CsrfTokenResolver:
    """Reads the CSRF token from the cookie store.

    Args:
        config: The CSRF configuration.
        cookie_source: Callable returning the current cookie string.

    Example:
        ```pycon
        >>> from securefetch.core.config import CsrfConfig
        >>> from securefetch.csrf import CsrfTokenResolver
        >>> resolver = CsrfTokenResolver(CsrfConfig(), lambda: "csrfToken=abc123")
        >>> resolver.resolve()
        'abc123'

        ```
    """

    def __init__(self, config: CsrfConfig, cookie_source: CookieSource) -> None:
        self.config = config
        self._cookie_source = cookie_source

    def resolve(self) -> str | None:
        """Return the token, or ``None`` if CSRF is disabled or the
        cookie is absent."""
        if not self.config.enabled:
            return None
        return parse_cookie_string(self._cookie_source()).get(self.config.cookie_name)
