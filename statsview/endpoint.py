"""Channel endpoint resolution.

The stats channel lives on the same host as the page origin. Transport
security mirrors the origin: an https origin must use wss, otherwise mixed
content policies silently block the channel.
"""
from __future__ import annotations

from urllib import parse as _parse

from .errors import UnsupportedEnvironmentError

__all__ = ["DEFAULT_PATH", "endpoint_url"]

DEFAULT_PATH = "/stats"

_SCHEME_MAP = {
    "https": "wss",
    "wss": "wss",
    "http": "ws",
    "ws": "ws",
}


def endpoint_url(page_url: str, path: str = DEFAULT_PATH) -> str:
    """Return the push channel URL for `page_url`.

    >>> endpoint_url("https://search.example.org/dashboard")
    'wss://search.example.org/stats'
    """
    parsed = _parse.urlsplit(page_url or "")
    scheme = _SCHEME_MAP.get(parsed.scheme.lower())
    if scheme is None:
        raise UnsupportedEnvironmentError(
            f"no push channel for origin scheme {parsed.scheme or '<none>'!r}"
        )
    if not parsed.netloc:
        raise UnsupportedEnvironmentError(f"origin {page_url!r} has no host")
    if not path.startswith("/"):
        path = "/" + path
    return _parse.urlunsplit((scheme, parsed.netloc, path, "", ""))
