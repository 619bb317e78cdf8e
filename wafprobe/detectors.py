"""Fingerprinting of known WAF products by the response they return."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Callable, Union

HeaderInput = Union[Mapping[str, Union[str, Iterable[str]]], Iterable[tuple[str, str]]]


def _normalise_headers(headers: HeaderInput) -> list[tuple[str, str]]:
    if isinstance(headers, Mapping):
        pairs: list[tuple[str, str]] = []
        for name, value in headers.items():
            if isinstance(value, str):
                pairs.append((name, value))
            else:
                pairs.extend((name, item) for item in value)
        return pairs
    return [(name, value) for name, value in headers]


@dataclass
class Response:
    """The parts of an HTTP response that detectors look at."""

    status_code: int = 200
    headers: HeaderInput = ()
    body: bytes = b""

    def __post_init__(self) -> None:
        self.headers = _normalise_headers(self.headers)
        if isinstance(self.body, str):
            self.body = self.body.encode()

    def header_values(self, name: str) -> list[str]:
        """Return every value of the header, matching its name case-insensitively."""
        wanted = name.lower()
        return [value for key, value in self.headers if key.lower() == wanted]


Check = Callable[[Response], bool]


def check_status_code(status: int) -> Check:
    """A check that matches a response with the given status code."""

    def check(response: Response) -> bool:
        return response.status_code == status

    return check


def check_header(header: str, regex: str) -> Check:
    """A check that matches when any value of the header matches the regex."""
    pattern = re.compile(regex)

    def check(response: Response) -> bool:
        return any(pattern.search(value) for value in response.header_values(header))

    return check


def check_cookie(regex: str) -> Check:
    """A check that matches a Set-Cookie header value against the regex."""
    return check_header("Set-Cookie", regex)


def check_content(regex: str) -> Check:
    """A check that matches the response body against the regex."""
    pattern = re.compile(regex.encode())

    def check(response: Response) -> bool:
        return pattern.search(response.body) is not None

    return check


@dataclass
class Detector:
    """A WAF product and the checks that recognise it."""

    waf_name: str
    vendor: str
    checks: list[Check] = field(default_factory=list)

    def is_waf(self, response: Response) -> bool:
        """True if any of the checks matches the response."""
        return any(check(response) for check in self.checks)


def kona_site_defender() -> Detector:
    return Detector(
        waf_name="Kona SiteDefender",
        vendor="Akamai",
        checks=[check_header("Server", "AkamaiGHost")],
    )


def secure_sphere() -> Detector:
    return Detector(
        waf_name="SecureSphere",
        vendor="Imperva Inc.",
        checks=[
            check_content("<(title|h2)>Error"),
            check_content("The incident ID is"),
            check_content("This page can't be displayed"),
            check_content("Contact support for additional information"),
        ],
    )


def incapsula() -> Detector:
    return Detector(
        waf_name="Incapsula",
        vendor="Imperva Inc.",
        checks=[
            check_cookie("^incap_ses.*?="),
            check_cookie("^visid_incap.*?="),
            check_content("incapsula incident id"),
            check_content("powered by incapsula"),
            check_content("/_Incapsula_Resource"),
        ],
    )


def all_detectors() -> list[Detector]:
    """All known detectors, in the order they are tried."""
    return [
        kona_site_defender(),
        incapsula(),
        secure_sphere(),
    ]