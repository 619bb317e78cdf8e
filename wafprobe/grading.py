"""Letter grades for scores, payload truncation and reference grades."""

from __future__ import annotations

from wafprobe.report_model import ComparisonTableRow, Grade

NA_MARK = "N/A"

MAX_UNTRUNCATED_PAYLOAD_LENGTH = 1100
TRUNCATED_PARTS_LENGTH = 150

# Lower bound of each mark, highest first, with its CSS class suffix.
_MARKS = (
    (97.0, "A+", "a"),
    (93.0, "A", "a"),
    (90.0, "A-", "a"),
    (87.0, "B+", "b"),
    (83.0, "B", "b"),
    (80.0, "B-", "b"),
    (77.0, "C+", "c"),
    (73.0, "C", "c"),
    (70.0, "C-", "c"),
    (67.0, "D+", "d"),
    (63.0, "D", "d"),
    (60.0, "D-", "d"),
)


def compute_grade(value: float, total: int) -> Grade:
    """Grade value / total.

    A ratio of at most 1 is taken as a fraction and scaled to percent; a
    larger one is taken as a percentage already. A total of zero gives N/A.
    """
    if total == 0:
        return Grade(percentage=0.0, mark=NA_MARK, css_class_suffix="na")

    percentage = value / total
    if percentage <= 1:
        percentage *= 100

    for bound, mark, suffix in _MARKS:
        if percentage >= bound:
            return Grade(percentage=percentage, mark=mark, css_class_suffix=suffix)
    return Grade(percentage=percentage, mark="F", css_class_suffix="f")


def truncate_payload(payload: str) -> str:
    """Replace the middle of an overly long payload with a short notice."""
    length = len(payload)
    if length <= MAX_UNTRUNCATED_PAYLOAD_LENGTH:
        return payload

    truncated = length - 2 * TRUNCATED_PARTS_LENGTH
    head = payload[:TRUNCATED_PARTS_LENGTH]
    tail = payload[length - TRUNCATED_PARTS_LENGTH:]
    return f"{head} … truncated {truncated} symbols … {tail}"


def comparison_table() -> list[ComparisonTableRow]:
    """Reference grades of ModSecurity at each paranoia level."""
    reference = (
        ("ModSecurity PARANOIA=1", 42.9, 30.5, 36.7),
        ("ModSecurity PARANOIA=2", 78.6, 34.8, 56.7),
        ("ModSecurity PARANOIA=3", 92.9, 38.3, 65.6),
        ("ModSecurity PARANOIA=4", 100, 40.8, 70.4),
    )
    return [
        ComparisonTableRow(
            name=name,
            api_sec=compute_grade(api, 1),
            app_sec=compute_grade(app, 1),
            overall_score=compute_grade(overall, 1),
        )
        for name, api, app, overall in reference
    ]