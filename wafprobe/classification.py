"""Deciding whether a WAF blocked or passed a request from what came back."""

from __future__ import annotations

import enum
import re
from collections.abc import Sequence
from dataclasses import dataclass


class Outcome(enum.Enum):
    """How the WAF treated one request."""

    BLOCKED = "blocked"
    PASSED = "passed"
    UNRESOLVED = "unresolved"


def _search(pattern: str, text: str) -> bool:
    try:
        return re.search(pattern, text) is not None
    except re.error:
        return False


@dataclass(frozen=True)
class ResponseClassifier:
    """Classifies responses by status code or by regular expressions."""

    block_status_codes: Sequence[int] = ()
    pass_status_codes: Sequence[int] = ()
    block_regex: str = ""
    pass_regex: str = ""
    block_conn_reset: bool = False

    def check_blocking(self, response_msg_header: str, body: str, status_code: int) -> bool:
        """True if the response shows the request was blocked.

        When a blocking regex is set and there is any response text, the
        regex alone decides; an invalid regex never matches.
        """
        if self.block_regex:
            response = response_msg_header + body
            if response:
                return _search(self.block_regex, response)
        return status_code in self.block_status_codes

    def check_pass(self, response_msg_header: str, body: str, status_code: int) -> bool:
        """True if the response shows the request was let through."""
        if self.pass_regex:
            response = response_msg_header + body
            if response:
                # The pass regex only switches text matching on; the pattern
                # applied is the blocking one.
                return _search(self.block_regex, response)
        return status_code in self.pass_status_codes

    def classify(
        self,
        response_msg_header: str,
        body: str,
        status_code: int,
        connection_reset: bool = False,
    ) -> Outcome:
        """Combine the blocking and passing checks into one outcome.

        A reset connection counts as a block when block_conn_reset is set and
        as unresolved otherwise. A response that is both blocked and passed,
        or neither, is unresolved.
        """
        if connection_reset:
            return Outcome.BLOCKED if self.block_conn_reset else Outcome.UNRESOLVED

        blocked = self.check_blocking(response_msg_header, body, status_code)
        passed = self.check_pass(response_msg_header, body, status_code)

        if blocked == passed:
            return Outcome.UNRESOLVED
        return Outcome.BLOCKED if blocked else Outcome.PASSED