"""URL and header helpers shared by the HTTP clients."""

from __future__ import annotations

from collections.abc import Mapping
from urllib.parse import urlsplit, urlunsplit


class RedirectLimitExceeded(Exception):
    """Raised when a response chain exceeds the allowed number of redirects."""

    def __init__(self, message: str = "max redirect number exceeded") -> None:
        super().__init__(message)


def get_target_url(url: str) -> str:
    """Return the URL reduced to scheme, credentials, host and port."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, "", "", ""))


def merge_headers(headers: Mapping[str, str] | None, add_header: str) -> dict[str, str]:
    """Return the configured headers plus one given as "Name: value".

    A header string without a colon is ignored.
    """
    merged = dict(headers or {})
    name, sep, value = add_header.partition(":")
    if sep:
        merged[name.strip()] = value.strip()
    return merged


def follow_redirect(max_redirects: int, via_count: int) -> bool:
    """Decide whether to follow a redirect after via_count requests were made.

    Returns False when redirects are disabled (the last response is used),
    True when the redirect may be followed, and raises RedirectLimitExceeded
    when the limit has been passed.
    """
    if max_redirects == 0:
        return False
    if via_count > max_redirects:
        raise RedirectLimitExceeded()
    return True