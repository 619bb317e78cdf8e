"""Result statistics collected during a scan and consumed by the reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class SummaryTableRow:
    """Aggregated numbers for one test case of one test set."""

    test_set: str
    test_case: str
    percentage: float = 0.0
    sent: int = 0
    blocked: int = 0
    bypassed: int = 0
    unresolved: int = 0
    failed: int = 0


@dataclass
class TestDetails:
    """A single sent payload together with the response status it got."""

    __test__ = False

    payload: str
    test_case: str
    test_set: str
    encoder: str
    placeholder: str
    response_status_code: int = 0
    additional_info: list[str] = field(default_factory=list)
    type: str = ""


@dataclass
class FailedDetails:
    """A payload that could not be delivered, with the reasons why."""

    payload: str
    test_case: str
    test_set: str
    encoder: str
    placeholder: str
    reason: list[str] = field(default_factory=list)
    type: str = ""


@dataclass
class NegativeTestsStats:
    """Statistics of malicious (true-negative) requests."""

    summary_table: list[SummaryTableRow] = field(default_factory=list)

    blocked: list[TestDetails] = field(default_factory=list)
    bypasses: list[TestDetails] = field(default_factory=list)
    unresolved: list[TestDetails] = field(default_factory=list)
    failed: list[FailedDetails] = field(default_factory=list)

    all_requests_number: int = 0
    blocked_requests_number: int = 0
    bypassed_requests_number: int = 0
    unresolved_requests_number: int = 0
    failed_requests_number: int = 0
    resolved_requests_number: int = 0

    unresolved_requests_percentage: float = 0.0
    resolved_blocked_requests_percentage: float = 0.0
    resolved_bypassed_requests_percentage: float = 0.0
    failed_requests_percentage: float = 0.0


@dataclass
class PositiveTestsStats:
    """Statistics of legitimate (true-positive) requests."""

    summary_table: list[SummaryTableRow] = field(default_factory=list)

    true_positive: list[TestDetails] = field(default_factory=list)
    false_positive: list[TestDetails] = field(default_factory=list)
    unresolved: list[TestDetails] = field(default_factory=list)
    failed: list[FailedDetails] = field(default_factory=list)

    all_requests_number: int = 0
    blocked_requests_number: int = 0
    bypassed_requests_number: int = 0
    unresolved_requests_number: int = 0
    failed_requests_number: int = 0
    resolved_requests_number: int = 0

    unresolved_requests_percentage: float = 0.0
    resolved_false_requests_percentage: float = 0.0
    resolved_true_requests_percentage: float = 0.0
    failed_requests_percentage: float = 0.0


@dataclass
class ScoreEntry:
    """Scores of one category; -1.0 marks a value that is not available."""

    true_negative: float = -1.0
    true_positive: float = -1.0
    average: float = -1.0


@dataclass
class Score:
    """API and application security scores plus their overall average."""

    api_sec: ScoreEntry = field(default_factory=ScoreEntry)
    app_sec: ScoreEntry = field(default_factory=ScoreEntry)
    average: float = -1.0


@dataclass
class Statistics:
    """Everything a report needs to know about a finished scan."""

    is_grpc_available: bool = False
    paths: list[Any] = field(default_factory=list)
    test_cases_fingerprint: str = ""

    negative_tests: NegativeTestsStats = field(default_factory=NegativeTestsStats)
    positive_tests: PositiveTestsStats = field(default_factory=PositiveTestsStats)

    score: Score = field(default_factory=Score)
    waf_score: float = 0.0