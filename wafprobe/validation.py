"""Validation of report data before it is rendered or sent away."""

from __future__ import annotations

import re
from collections.abc import Collection, Iterable, Mapping
from datetime import datetime
from typing import Any, Optional
from urllib.parse import urlsplit

from wafprobe.report_model import (
    ChartData,
    GroupedDetails,
    Grade,
    HtmlReport,
    SecurityGrades,
    TestSetSummary,
)

_PRINT = r"[\x20-\x7e]"

_GTW_VERSION_RE = re.compile(r"^(v\d+\.\d+\.\d+(\-\d+\-g[a-f0-9]{7})?|unknown)$")
_FP_RE = re.compile(r"^[a-f0-9]{32}$")
_MARK_RE = re.compile(r"^(N/A|[A-F][\+\-]?)$")
_SUFFIX_RE = re.compile(r"^(na|[a-f])$")
_INDICATOR_RE = re.compile(
    r"^(-|" + _PRINT + r"{1,30} \((unavailable|[0-9]{1,3}\.[0-9]%)\))$"
)
_ARGS_RE = re.compile(
    r"^\-\-("
    r"(quiet|tlsVerify|followCookies|renewSession|skipWAFIdentification|nonBlockedAsPassed"
    r"|noEmailReport|ignoreUnresolved|blockConnReset|skipWAFBlockCheck|addDebugHeader"
    r"|includePayloads)"
    r"|(configPath|logFormat|url|wsURL|graphqlURL|proxy|blockRegex|passRegex|testCase|testSet"
    r"|reportPath|reportName|reportFormat|email|testCasesPath|wafName|addHeader|openapiFile)"
    r"\=" + _PRINT + r"+"
    r"|(grpcPort|maxIdleConns|maxRedirects|idleConnTimeout|workers|sendDelay|randomDelay)\=\d+"
    r"|(blockStatusCodes|passStatusCodes)\=[\d,]+"
    r")$"
)
_PRINTASCII_RE = re.compile(r"^[\x20-\x7e]*$")


class ValidationError(ValueError):
    """Report data holds invalid values; errors lists every failure."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("found invalid values in the report data: " + "; ".join(errors))
        self.errors = errors


def _full(pattern: re.Pattern[str], value: Any) -> bool:
    return isinstance(value, str) and pattern.fullmatch(value) is not None


def validate_gtw_version(value: str) -> bool:
    """A release tag such as v1.2.3, optionally with a git suffix, or "unknown"."""
    return _full(_GTW_VERSION_RE, value)


def validate_fp(value: str) -> bool:
    """A test cases fingerprint: 32 lower-case hex digits."""
    return _full(_FP_RE, value)


def validate_mark(value: str) -> bool:
    """A letter mark or N/A."""
    return _full(_MARK_RE, value)


def validate_css_suffix(value: str) -> bool:
    """A CSS class suffix: na or a single letter a to f."""
    return _full(_SUFFIX_RE, value)


def validate_indicator(value: str) -> bool:
    """A chart label: "-" or a name followed by a percentage or "(unavailable)"."""
    return _full(_INDICATOR_RE, value)


def validate_args(value: str) -> bool:
    """A command-line argument known to the scanner."""
    return _full(_ARGS_RE, value)


def validate_names(names: Iterable[Any], allowed: Collection[str]) -> bool:
    """True if names is non-empty and every name is a string in allowed."""
    names = list(names)
    if not names:
        return False
    return all(isinstance(name, str) and name in allowed for name in names)


class _Checker:
    def __init__(self, encoders: Collection[str], placeholders: Collection[str]) -> None:
        self.encoders = encoders
        self.placeholders = placeholders
        self.errors: list[str] = []

    def fail(self, path: str, rule: str) -> None:
        self.errors.append(f"{path}: failed on '{rule}'")

    def required(self, path: str, value: Any) -> bool:
        if value is None or value == "":
            self.fail(path, "required")
            return False
        return True

    def printascii(self, path: str, value: str, max_len: int) -> None:
        if not _full(_PRINTASCII_RE, value):
            self.fail(path, "printascii")
        if len(value) > max_len:
            self.fail(path, f"max={max_len}")

    def min_zero(self, path: str, value: float) -> None:
        if value < 0:
            self.fail(path, "min=0")

    def percent(self, path: str, value: float) -> None:
        if not 0 <= value <= 100:
            self.fail(path, "min=0,max=100")

    def grade(self, path: str, grade: Optional[Grade]) -> None:
        if grade is None:
            self.fail(path, "required")
            return
        self.percent(f"{path}.percentage", grade.percentage)
        if not validate_mark(grade.mark):
            self.fail(f"{path}.mark", "mark")
        if not validate_css_suffix(grade.css_class_suffix):
            self.fail(f"{path}.css_class_suffix", "css_suffix")

    def security(self, path: str, grades: SecurityGrades) -> None:
        self.grade(f"{path}.true_negative", grades.true_negative)
        self.grade(f"{path}.true_positive", grades.true_positive)
        self.grade(f"{path}.grade", grades.grade)

    def chart(self, path: str, chart: ChartData) -> None:
        if chart.indicators:
            if len(chart.indicators) > 100:
                self.fail(f"{path}.indicators", "max=100")
            for position, indicator in enumerate(chart.indicators):
                if not validate_indicator(indicator):
                    self.fail(f"{path}.indicators[{position}]", "indicator")
        if chart.items:
            if len(chart.items) > 100:
                self.fail(f"{path}.items", "max=100")
            for position, item in enumerate(chart.items):
                self.percent(f"{path}.items[{position}]", item)

    def summary_table(
        self, path: str, table: Mapping[str, Optional[TestSetSummary]], key_max: Optional[int]
    ) -> None:
        for name, summary in table.items():
            entry = f"{path}[{name!r}]"
            if not name:
                self.fail(entry, "required")
            elif key_max is not None and len(name) > key_max:
                self.fail(entry, f"max={key_max}")
            if summary is None:
                self.fail(entry, "required")
                continue
            if summary.test_cases is None:
                self.fail(f"{entry}.test_cases", "required")
            else:
                if len(summary.test_cases) > 1024:
                    self.fail(f"{entry}.test_cases", "max=1024")
                for position, row in enumerate(summary.test_cases):
                    if row is None:
                        self.fail(f"{entry}.test_cases[{position}]", "required")
            self.percent(f"{entry}.percentage", summary.percentage)
            for attr in ("sent", "blocked", "bypassed", "unresolved", "failed", "resolved_test_cases_number"):
                self.min_zero(f"{entry}.{attr}", getattr(summary, attr))

    def details(self, path: str, details: Optional[GroupedDetails]) -> None:
        if details is None:
            self.fail(path, "required")
            return
        if self.required(f"{path}.test_case", details.test_case):
            self.printascii(f"{path}.test_case", details.test_case, 256)
        if details.encoders is None or not validate_names(details.encoders, self.encoders):
            self.fail(f"{path}.encoders", "encoders")
        if details.placeholders is None or not validate_names(details.placeholders, self.placeholders):
            self.fail(f"{path}.placeholders", "placeholders")

    def by_payload(self, path: str, grouped: Mapping[str, Mapping[int, Optional[GroupedDetails]]]) -> None:
        for payload, by_status in grouped.items():
            entry = f"{path}[{payload[:32]!r}]"
            if not payload:
                self.fail(entry, "required")
            elif len(payload) > 256000:
                self.fail(entry, "max=256000")
            if by_status is None:
                self.fail(entry, "required")
                continue
            for status, details in by_status.items():
                if status < 0:
                    self.fail(f"{entry}[{status}]", "min=0")
                self.details(f"{entry}[{status}]", details)

    def failed(self, path: str, failed: Iterable[Any]) -> None:
        for position, item in enumerate(failed or ()):
            if item is None:
                self.fail(f"{path}[{position}]", "required")

    def counts(self, path: str, section: Any) -> None:
        self.percent(f"{path}.percentage", section.percentage)
        for attr in (
            "total_sent",
            "blocked_requests_number",
            "bypassed_requests_number",
            "unresolved_requests_number",
            "failed_requests_number",
        ):
            self.min_zero(f"{path}.{attr}", getattr(section, attr))


def validate_report_data(
    report_data: HtmlReport,
    encoders: Collection[str],
    placeholders: Collection[str],
) -> HtmlReport:
    """Check every field of the report data and return it unchanged.

    encoders and placeholders are the names allowed in payload details.
    Raises ValidationError listing every invalid value.
    """
    check = _Checker(encoders, placeholders)
    data = report_data

    if check.required("waf_name", data.waf_name):
        check.printascii("waf_name", data.waf_name, 256)

    if check.required("url", data.url):
        if not urlsplit(data.url).scheme:
            check.fail("url", "url")
        if len(data.url) > 256:
            check.fail("url", "max=256")

    if check.required("waf_testing_date", data.waf_testing_date):
        try:
            datetime.strptime(data.waf_testing_date, "%d %B %Y")
        except ValueError:
            check.fail("waf_testing_date", "datetime")

    if check.required("gtw_version", data.gtw_version) and not validate_gtw_version(data.gtw_version):
        check.fail("gtw_version", "gtw_version")

    if check.required("test_cases_fp", data.test_cases_fp) and not validate_fp(data.test_cases_fp):
        check.fail("test_cases_fp", "fp")

    if data.open_api_file:
        check.printascii("open_api_file", data.open_api_file, 512)

    if data.args is None:
        check.fail("args", "required")
    else:
        if len(data.args) > 50:
            check.fail("args", "max=50")
        for position, arg in enumerate(data.args):
            if not validate_args(arg):
                check.fail(f"args[{position}]", "args")
            if len(arg) > 200:
                check.fail(f"args[{position}]", "max=200")

    check.chart("api_sec_chart_data", data.api_sec_chart_data)
    check.chart("app_sec_chart_data", data.app_sec_chart_data)

    check.grade("overall", data.overall)
    check.security("api_sec", data.api_sec)
    check.security("app_sec", data.app_sec)

    if data.comparison_table is None:
        check.fail("comparison_table", "required")
    else:
        for position, row in enumerate(data.comparison_table):
            path = f"comparison_table[{position}]"
            if row is None:
                check.fail(path, "required")
                continue
            if check.required(f"{path}.name", row.name):
                check.printascii(f"{path}.name", row.name, 256)
            check.grade(f"{path}.api_sec", row.api_sec)
            check.grade(f"{path}.app_sec", row.app_sec)
            check.grade(f"{path}.overall_score", row.overall_score)

    for attr in (
        "total_sent",
        "blocked_requests_number",
        "bypassed_requests_number",
        "unresolved_requests_number",
        "failed_requests_number",
    ):
        check.min_zero(attr, getattr(data, attr))

    if data.scanned_paths:
        paths = data.scanned_paths
        values = list(paths.values()) if isinstance(paths, Mapping) else list(paths)
        if len(values) > 2048:
            check.fail("scanned_paths", "max=2048")
        for position, value in enumerate(values):
            if value is None:
                check.fail(f"scanned_paths[{position}]", "required")

    neg = data.negative_tests
    check.summary_table("negative_tests.summary_table", neg.summary_table or {}, 256)
    for paths, grouped in (neg.bypassed or {}).items():
        if grouped is None:
            check.fail(f"negative_tests.bypassed[{paths!r}]", "required")
            continue
        check.by_payload(f"negative_tests.bypassed[{paths!r}]", grouped)
    check.by_payload("negative_tests.unresolved", neg.unresolved or {})
    check.failed("negative_tests.failed", neg.failed)
    check.counts("negative_tests", neg)

    pos = data.positive_tests
    check.summary_table("positive_tests.summary_table", pos.summary_table or {}, None)
    check.by_payload("positive_tests.blocked", pos.blocked or {})
    check.by_payload("positive_tests.bypassed", pos.bypassed or {})
    check.by_payload("positive_tests.unresolved", pos.unresolved or {})
    check.failed("positive_tests.failed", pos.failed)
    check.counts("positive_tests", pos)

    if check.errors:
        raise ValidationError(check.errors)
    return report_data