"""Data of a full report as it is fed to the HTML template and the report server."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from wafprobe.statistics import FailedDetails, SummaryTableRow

_SKIP = {"json": False}


def map_keys_to_string(m: Iterable[Any], sep: str) -> str:
    """Join the keys of a mapping with a separator."""
    return sep.join(str(key) for key in m)


def _jsonify(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: _jsonify(getattr(value, f.name))
            for f in dataclasses.fields(value)
            if f.metadata.get("json", True)
        }
    if isinstance(value, Mapping):
        return {k if isinstance(k, str) else str(k): _jsonify(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_jsonify(item) for item in value]
    return value


@dataclass
class Grade:
    """A percentage with its letter mark and CSS class suffix."""

    percentage: float = 0.0
    mark: str = "N/A"
    css_class_suffix: str = "na"


@dataclass
class ComparisonTableRow:
    """Reference grades of a known WAF setup."""

    name: str
    api_sec: Grade
    app_sec: Grade
    overall_score: Grade


@dataclass
class GroupedDetails:
    """A test case with every encoder and placeholder a payload was sent with."""

    test_case: str = ""
    encoders: dict[str, None] = field(default_factory=dict)
    placeholders: dict[str, None] = field(default_factory=dict)


@dataclass
class TestSetSummary:
    """Totals of one test set over its test cases."""

    __test__ = False

    test_cases: list[SummaryTableRow] = field(default_factory=list)
    percentage: float = 0.0
    sent: int = 0
    blocked: int = 0
    bypassed: int = 0
    unresolved: int = 0
    failed: int = 0
    resolved_test_cases_number: int = 0


@dataclass
class ChartData:
    """Radar chart labels and values, and the rendered chart script."""

    indicators: list[str] = field(default_factory=list)
    items: list[float] = field(default_factory=list)
    chart: Optional[str] = field(default=None, metadata=_SKIP)


@dataclass
class SecurityGrades:
    """True-negative, true-positive and combined grades of one category."""

    true_negative: Optional[Grade] = None
    true_positive: Optional[Grade] = None
    grade: Optional[Grade] = None


@dataclass
class NegativeSection:
    """Malicious request results: summary and payloads that got through."""

    summary_table: dict[str, TestSetSummary] = field(default_factory=dict)
    # paths -> payload -> status code -> details
    bypassed: dict[str, dict[str, dict[int, GroupedDetails]]] = field(default_factory=dict)
    # payload -> status code -> details
    unresolved: dict[str, dict[int, GroupedDetails]] = field(default_factory=dict)
    failed: list[FailedDetails] = field(default_factory=list)

    percentage: float = 0.0
    total_sent: int = 0
    blocked_requests_number: int = 0
    bypassed_requests_number: int = 0
    unresolved_requests_number: int = 0
    failed_requests_number: int = 0


@dataclass
class PositiveSection:
    """Legitimate request results: summary and per-payload details."""

    summary_table: dict[str, TestSetSummary] = field(default_factory=dict)
    # payload -> status code -> details
    blocked: dict[str, dict[int, GroupedDetails]] = field(default_factory=dict)
    bypassed: dict[str, dict[int, GroupedDetails]] = field(default_factory=dict)
    unresolved: dict[str, dict[int, GroupedDetails]] = field(default_factory=dict)
    failed: list[FailedDetails] = field(default_factory=list)

    percentage: float = 0.0
    total_sent: int = 0
    blocked_requests_number: int = 0
    bypassed_requests_number: int = 0
    unresolved_requests_number: int = 0
    failed_requests_number: int = 0


@dataclass
class HtmlReport:
    """Everything needed to render a full report in HTML or PDF."""

    ignore_unresolved: bool = False
    include_payloads: bool = False

    waf_name: str = ""
    url: str = ""
    waf_testing_date: str = ""
    gtw_version: str = ""
    test_cases_fp: str = ""
    open_api_file: str = ""
    args: list[str] = field(default_factory=list)

    api_sec_chart_data: ChartData = field(default_factory=ChartData)
    app_sec_chart_data: ChartData = field(default_factory=ChartData)

    overall: Optional[Grade] = None
    api_sec: SecurityGrades = field(default_factory=SecurityGrades)
    app_sec: SecurityGrades = field(default_factory=SecurityGrades)

    comparison_table: list[ComparisonTableRow] = field(default_factory=list)

    total_sent: int = 0
    blocked_requests_number: int = 0
    bypassed_requests_number: int = 0
    unresolved_requests_number: int = 0
    failed_requests_number: int = 0

    scanned_paths: Any = None

    negative_tests: NegativeSection = field(default_factory=NegativeSection)
    positive_tests: PositiveSection = field(default_factory=PositiveSection)

    def to_dict(self) -> dict[str, Any]:
        """A JSON-ready dict; chart scripts are left out and integer keys become strings."""
        return _jsonify(self)