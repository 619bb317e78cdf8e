"""Enumeration of test work and bookkeeping of per-request results."""

from __future__ import annotations

import hashlib
import threading
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Union

from wafprobe.classification import Outcome
from wafprobe.statistics import FailedDetails, TestDetails


@dataclass
class TestCase:
    """A named group of payloads with the encoders and placeholders to try."""

    __test__ = False

    test_set: str
    name: str
    payloads: list[str] = field(default_factory=list)
    encoders: list[str] = field(default_factory=list)
    placeholders: list[str] = field(default_factory=list)
    type: str = ""
    is_true_positive: bool = False


def debug_header_value(
    set_name: str, case_name: str, placeholder: str, encoder: str, payload: str
) -> str:
    """Hex SHA-256 of the concatenated parts, used to tag a request."""
    digest = hashlib.sha256()
    for part in (set_name, case_name, placeholder, encoder, payload):
        digest.update(part.encode())
    return digest.hexdigest()


@dataclass(eq=False)
class TestWork:
    """One combination of payload, encoder and placeholder to send."""

    __test__ = False

    set_name: str
    case_name: str
    payload: str
    encoder: str
    placeholder: str
    test_type: str = ""
    is_true_positive: bool = False
    debug_header: str = ""

    def to_info(self, status_code: int) -> TestDetails:
        """Describe this work and the status code it got."""
        return TestDetails(
            payload=self.payload,
            test_case=self.case_name,
            test_set=self.set_name,
            encoder=self.encoder,
            placeholder=self.placeholder,
            response_status_code=status_code,
            type=self.test_type,
        )


def produce_tests(test_cases: Iterable[TestCase], enable_debug_header: bool = False) -> Iterator[TestWork]:
    """Yield every payload x encoder x placeholder combination of each case."""
    for case in test_cases:
        for payload in case.payloads:
            for encoder in case.encoders:
                for placeholder in case.placeholders:
                    header = (
                        debug_header_value(case.test_set, case.name, placeholder, encoder, payload)
                        if enable_debug_header
                        else ""
                    )
                    yield TestWork(
                        set_name=case.test_set,
                        case_name=case.name,
                        payload=payload,
                        encoder=encoder,
                        placeholder=placeholder,
                        test_type=case.type,
                        is_true_positive=case.is_true_positive,
                        debug_header=header,
                    )


class TestResults:
    """Thread-safe collection of results, one entry per work and outcome.

    Recording the same work with the same outcome again (for instance once per
    request template) only adds to that entry's additional information.
    """

    __test__ = False

    def __init__(self) -> None:
        self.passed: list[TestDetails] = []
        self.blocked: list[TestDetails] = []
        self.unresolved: list[TestDetails] = []
        self.failed: list[FailedDetails] = []
        self._entries: dict[tuple[TestWork, object], Union[TestDetails, FailedDetails]] = {}
        self._lock = threading.Lock()

    def _bucket(self, outcome: Outcome) -> list[TestDetails]:
        return {
            Outcome.PASSED: self.passed,
            Outcome.BLOCKED: self.blocked,
            Outcome.UNRESOLVED: self.unresolved,
        }[outcome]

    def record(
        self,
        work: TestWork,
        outcome: Union[Outcome, BaseException],
        status_code: int = 0,
        additional_info: str = "",
    ) -> Union[TestDetails, FailedDetails]:
        """Record how a request of work ended and return the stored entry.

        An exception as outcome records a failed request, keeping the error
        message as a reason.
        """
        with self._lock:
            if isinstance(outcome, BaseException):
                key = (work, "failed")
                failed = self._entries.get(key)
                if failed is None:
                    failed = FailedDetails(
                        payload=work.payload,
                        test_case=work.case_name,
                        test_set=work.set_name,
                        encoder=work.encoder,
                        placeholder=work.placeholder,
                        type=work.test_type,
                    )
                    self._entries[key] = failed
                    self.failed.append(failed)
                failed.reason.append(str(outcome))
                return failed

            key = (work, outcome)
            info = self._entries.get(key)
            if info is None:
                info = work.to_info(status_code)
                self._entries[key] = info
                self._bucket(outcome).append(info)
            if additional_info:
                info.additional_info.append(additional_info)
            return info