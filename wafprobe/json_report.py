"""Full scan report in JSON format."""

from __future__ import annotations

import json
import os
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any, Optional

from wafprobe.statistics import FailedDetails, Statistics, SummaryTableRow, TestDetails

_ESCAPES = (
    ("&", "\\u0026"),
    ("<", "\\u003c"),
    (">", "\\u003e"),
    ("\u2028", "\\u2028"),
    ("\u2029", "\\u2029"),
)


def _ansic(moment: datetime) -> str:
    return f"{moment:%a %b} {moment.day:2d} {moment:%H:%M:%S %Y}"


def _normalise(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return int(value)
    if isinstance(value, dict):
        return {key: _normalise(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_normalise(item) for item in value]
    return value


def _dumps(data: Any) -> str:
    text = json.dumps(_normalise(data), indent=4, ensure_ascii=False)
    for char, escaped in _ESCAPES:
        text = text.replace(char, escaped)
    return text


def _test_sets(rows: Iterable[SummaryTableRow]) -> dict[str, dict[str, dict[str, Any]]]:
    sets: dict[str, dict[str, dict[str, Any]]] = {}
    for row in rows:
        sets.setdefault(row.test_set, {})[row.test_case] = {
            "percentage": row.percentage,
            "sent": row.sent,
            "blocked": row.blocked,
            "bypassed": row.bypassed,
            "unresolved": row.unresolved,
            "failed": row.failed,
        }
    return {name: dict(sorted(cases.items())) for name, cases in sorted(sets.items())}


def summarize_tests(stats: Statistics, positive: bool) -> Optional[dict[str, Any]]:
    """Summary of the negative or positive tests, or None if there were none."""
    if positive:
        section = stats.positive_tests
        score = stats.positive_tests.resolved_true_requests_percentage
    else:
        section = stats.negative_tests
        score = stats.negative_tests.resolved_blocked_requests_percentage

    if not section.summary_table:
        return None

    return {
        "score": score,
        "total_sent": section.all_requests_number,
        "resolved_tests": section.resolved_requests_number,
        "blocked_tests": section.blocked_requests_number,
        "bypassed_tests": section.bypassed_requests_number,
        "unresolved_tests": section.unresolved_requests_number,
        "failed_tests": section.failed_requests_number,
        "test_sets": _test_sets(section.summary_table),
    }


def _payload_details(details: TestDetails) -> dict[str, Any]:
    out: dict[str, Any] = {
        "payload": details.payload,
        "test_set": details.test_set,
        "test_case": details.test_case,
        "encoder": details.encoder,
        # The placeholder column carries the encoder name.
        "placeholder": details.encoder,
    }
    if details.response_status_code:
        out["status"] = details.response_status_code
    if details.additional_info:
        out["additional_info"] = list(details.additional_info)
    return out


def _failed_details(details: FailedDetails) -> dict[str, Any]:
    out: dict[str, Any] = {
        "payload": details.payload,
        "test_set": details.test_set,
        "test_case": details.test_case,
        "encoder": details.encoder,
        "placeholder": details.encoder,
    }
    if details.reason:
        out["reason"] = list(details.reason)
    return out


def _payloads(
    blocked: Sequence[TestDetails] = (),
    bypassed: Sequence[TestDetails] = (),
    unresolved: Sequence[TestDetails] = (),
    failed: Sequence[FailedDetails] = (),
) -> dict[str, list[dict[str, Any]]]:
    groups = {
        "blocked": [_payload_details(d) for d in blocked],
        "bypassed": [_payload_details(d) for d in bypassed],
        "unresolved": [_payload_details(d) for d in unresolved],
        "failed": [_failed_details(d) for d in failed],
    }
    return {name: entries for name, entries in groups.items() if entries}


def build_full_json_report(
    stats: Statistics,
    report_time: datetime,
    waf_name: str,
    url: str,
    args: Sequence[str],
    ignore_unresolved: bool,
) -> dict[str, Any]:
    """Build the full report as a JSON-ready dict."""
    report: dict[str, Any] = {
        "date": _ansic(report_time),
        "project_name": waf_name,
        "url": url,
    }
    if stats.score.average:
        report["score"] = stats.score.average
    report["fp"] = stats.test_cases_fingerprint
    report["args"] = " ".join(args)

    summary: dict[str, Any] = {}
    negative = summarize_tests(stats, positive=False)
    if negative is not None:
        summary["negative"] = negative
    positive = summarize_tests(stats, positive=True)
    if positive is not None:
        summary["positive"] = positive
    report["summary"] = summary

    neg = stats.negative_tests
    report["negative_payloads"] = _payloads(
        bypassed=neg.bypasses,
        unresolved=() if ignore_unresolved else neg.unresolved,
        failed=neg.failed,
    )

    pos = stats.positive_tests
    report["positive_payloads"] = _payloads(
        blocked=pos.false_positive,
        unresolved=() if ignore_unresolved else pos.unresolved,
        failed=pos.failed,
    )

    return report


def print_full_report_to_json(
    stats: Statistics,
    report_file: str | os.PathLike[str],
    report_time: datetime,
    waf_name: str,
    url: str,
    args: Sequence[str],
    ignore_unresolved: bool,
) -> None:
    """Write the full report in JSON format to report_file."""
    report = build_full_json_report(stats, report_time, waf_name, url, args, ignore_unresolved)
    text = _dumps(report)
    with open(report_file, "w", encoding="utf-8") as file:
        file.write(text)