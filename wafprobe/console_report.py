"""Scan summary printed to the console as tables or as JSON."""

from __future__ import annotations

import json
import re
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any

from wafprobe.json_report import summarize_tests
from wafprobe.statistics import Statistics, SummaryTableRow

TEXT_FORMAT = "text"
JSON_FORMAT = "json"

COL_MIN_WIDTH = 21
SUMMARY_COL_MIN_WIDTH = 27

_NUMERIC = re.compile(r"^-?\d+\.?\d*$")

_JSON_ESCAPES = (
    ("&", "\\u0026"),
    ("<", "\\u003c"),
    (">", "\\u003e"),
    ("\u2028", "\\u2028"),
    ("\u2029", "\\u2029"),
)


def _title(name: str) -> str:
    chars = list(name)
    for position, char in enumerate(chars):
        if char == "_":
            chars[position] = " "
        elif char == ".":
            before = position != 0 and not (chars[position - 1].isdigit() or chars[position - 1].isspace())
            after = position != len(chars) - 1 and not (
                chars[position + 1].isdigit() or chars[position + 1].isspace()
            )
            if before or after:
                chars[position] = " "
    titled = "".join(chars).strip()
    if not titled and name:
        titled = " "
    return titled.upper()


def _center(text: str, width: int) -> str:
    gap = width - len(text)
    left = gap // 2
    return " " * left + text + " " * (gap - left)


def _align(text: str, width: int) -> str:
    return text.rjust(width) if _NUMERIC.match(text) else text.ljust(width)


def _render_table(
    header: Sequence[str],
    rows: Iterable[Sequence[str]],
    footer: Sequence[str],
    min_width: int,
) -> str:
    header = [_title(cell) for cell in header]
    footer = [_title(cell) for cell in footer]
    rows = [list(row) for row in rows]

    widths = [min_width] * len(header)
    for line in [header, *rows, footer]:
        for column, cell in enumerate(line):
            for part in cell.split("\n"):
                widths[column] = max(widths[column], len(part))

    border = "+" + "+".join("-" * (width + 2) for width in widths) + "+"

    def lines_of(cells: Sequence[str], pad) -> list[str]:
        split = [cell.split("\n") for cell in cells]
        split += [[""]] * (len(widths) - len(split))
        height = max(len(parts) for parts in split)
        out = []
        for index in range(height):
            padded = [
                pad(parts[index] if index < len(parts) else "", width)
                for parts, width in zip(split, widths)
            ]
            out.append("| " + " | ".join(padded) + " |")
        return out

    output = [border, *lines_of(header, _center), border]
    for row in rows:
        output.extend(lines_of(row, _align))
    output.append(border)
    output.extend(lines_of(footer, _center))
    output.append(border)
    return "\n".join(output) + "\n"


def _base_header(ignore_unresolved: bool) -> list[str]:
    header = ["Test set", "Test case", "Percentage, %", "Blocked", "Bypassed"]
    if not ignore_unresolved:
        header.append("Unresolved")
    return header + ["Sent", "Failed"]


def _summary_rows(rows: Iterable[SummaryTableRow], ignore_unresolved: bool) -> list[list[str]]:
    table = []
    for row in rows:
        cells = [row.test_set, row.test_case, f"{row.percentage:.2f}", str(row.blocked), str(row.bypassed)]
        if not ignore_unresolved:
            cells.append(str(row.unresolved))
        cells += [str(row.sent), str(row.failed)]
        table.append(cells)
    return table


def _negative_footer(stats: Statistics, report_time: datetime, waf_name: str, ignore_unresolved: bool) -> list[str]:
    neg = stats.negative_tests
    footer = [
        f"Date:\n{report_time:%Y-%m-%d}",
        f"Project Name:\n{waf_name}",
        f"True Negative Score:\n{neg.resolved_blocked_requests_percentage:.2f}%",
        f"Blocked (Resolved):\n{neg.blocked_requests_number}/{neg.resolved_requests_number} "
        f"({neg.resolved_blocked_requests_percentage:.2f}%)",
        f"Bypassed (Resolved):\n{neg.bypassed_requests_number}/{neg.resolved_requests_number} "
        f"({neg.resolved_bypassed_requests_percentage:.2f}%)",
    ]
    if not ignore_unresolved:
        footer.append(
            f"Unresolved (Sent):\n{neg.unresolved_requests_number}/{neg.all_requests_number} "
            f"({neg.unresolved_requests_percentage:.2f}%)"
        )
    footer += [
        f"Total Sent:\n{neg.all_requests_number}",
        f"Failed (Total):\n{neg.failed_requests_number}/{neg.all_requests_number} "
        f"({neg.failed_requests_percentage:.2f}%)",
    ]
    return footer


def _positive_footer(stats: Statistics, report_time: datetime, waf_name: str, ignore_unresolved: bool) -> list[str]:
    pos = stats.positive_tests
    footer = [
        f"Date:\n{report_time:%Y-%m-%d}",
        f"Project Name:\n{waf_name}",
        f"False Positive Score:\n{pos.resolved_true_requests_percentage:.2f}%",
        f"Blocked (Resolved):\n{pos.blocked_requests_number}/{pos.resolved_requests_number} "
        f"({pos.resolved_false_requests_percentage:.2f}%)",
        f"Bypassed (Resolved):\n{pos.bypassed_requests_number}/{pos.resolved_requests_number} "
        f"({pos.resolved_true_requests_percentage:.2f}%)",
    ]
    if not ignore_unresolved:
        footer.append(
            f"Unresolved (Sent):\n{pos.unresolved_requests_number}/{pos.all_requests_number} "
            f"({pos.unresolved_requests_percentage:.2f}%)"
        )
    footer += [
        f"Total Sent:\n{pos.all_requests_number}",
        f"Failed (Total):\n{pos.failed_requests_number}/{pos.all_requests_number} "
        f"({pos.failed_requests_percentage:.2f}%)",
    ]
    return footer


def _score_cell(value: float) -> str:
    return "n/a" if value == -1.0 else f"{value:.2f}%"


def format_console_table(
    stats: Statistics, report_time: datetime, waf_name: str, ignore_unresolved: bool
) -> str:
    """The negative, positive and summary tables as one text block."""
    header = _base_header(ignore_unresolved)

    parts = ["Negative Tests:\n"]
    parts.append(
        _render_table(
            header,
            _summary_rows(stats.negative_tests.summary_table, ignore_unresolved),
            _negative_footer(stats, report_time, waf_name, ignore_unresolved),
            COL_MIN_WIDTH,
        )
    )

    parts.append("\nPositive Tests:\n")
    parts.append(
        _render_table(
            header,
            _summary_rows(stats.positive_tests.summary_table, ignore_unresolved),
            _positive_footer(stats, report_time, waf_name, ignore_unresolved),
            COL_MIN_WIDTH,
        )
    )

    parts.append("\nSummary:\n")
    score = stats.score
    rows = [
        [label, _score_cell(entry.true_negative), _score_cell(entry.true_positive), _score_cell(entry.average)]
        for label, entry in (("API Security", score.api_sec), ("Application Security", score.app_sec))
    ]
    parts.append(
        _render_table(
            ["Type", "True-negative tests blocked", "True-positive tests passed", "Average"],
            rows,
            ["", "", "Score", _score_cell(score.average)],
            SUMMARY_COL_MIN_WIDTH,
        )
    )
    return "".join(parts)


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


def format_console_json(
    stats: Statistics, report_time: datetime, waf_name: str, url: str, args: Sequence[str]
) -> str:
    """The console summary as indented JSON."""
    report: dict[str, Any] = {
        "date": _ansic(report_time),
        "project_name": waf_name,
        "url": url,
    }
    if stats.score.average:
        report["score"] = stats.score.average
    report["fp"] = stats.test_cases_fingerprint
    report["args"] = " ".join(args)

    negative = summarize_tests(stats, positive=False)
    if negative is not None:
        report["negative"] = negative
    positive = summarize_tests(stats, positive=True)
    if positive is not None:
        report["positive"] = positive

    text = json.dumps(_normalise(report), indent=4, ensure_ascii=False)
    for char, escaped in _JSON_ESCAPES:
        text = text.replace(char, escaped)
    return text


def render_console_report(
    stats: Statistics,
    report_time: datetime,
    waf_name: str,
    url: str,
    args: Sequence[str],
    ignore_unresolved: bool,
    format: str,
) -> None:
    """Print the console report in the "text" or "json" format."""
    if format == TEXT_FORMAT:
        print(format_console_table(stats, report_time, waf_name, ignore_unresolved))
    elif format == JSON_FORMAT:
        print(format_console_json(stats, report_time, waf_name, url, args))
    else:
        raise ValueError(f"unknown report format: {format}")