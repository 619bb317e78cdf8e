"""Radar chart data and chart scripts for the full report."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Optional

from wafprobe.statistics import Statistics, TestDetails

EMPTY_INDICATOR = "-"
MAX_VALUE = 100.0
EMPTY_ITEM = MAX_VALUE
TITLE_COLOR = "#000000"
LABEL_COLOR = "#333333"

Counters = dict[str, dict[str, tuple[int, int]]]

# Positions of the real values in the padded chart axes; None is an empty axis.
_LAYOUTS: dict[int, tuple[Optional[int], ...]] = {
    1: (0, None, None, None, None, None),
    2: (None, 0, None, None, 1, None),
    3: (0, None, 1, None, 2, None),
    4: (None, 0, None, 1, None, 2, None, 3),
}

_SCRIPT_ESCAPES = (("&", "\\u0026"), ("<", "\\u003c"), (">", "\\u003e"))


def is_api_test(set_name: str) -> bool:
    """True if the test set belongs to the API category."""
    return "api" in set_name


def _percentage(part: int, total: int) -> float:
    if total == 0:
        return 0.0
    return round(part / total * 100, 2)


def get_indicators_and_items(
    counters: Mapping[str, Mapping[str, tuple[int, int]]], category: str
) -> tuple[list[str], list[float]]:
    """Chart labels and values of one category.

    counters maps category -> test type -> (blocked, bypassed). Fewer than
    five types are padded with empty axes so the radar keeps its shape.
    """
    indicators: list[str] = []
    items: list[float] = []
    for test_type, (blocked, bypassed) in counters.get(category, {}).items():
        percentage = _percentage(blocked, blocked + bypassed)
        indicators.append(f"{test_type} ({percentage:.1f}%)")
        items.append(percentage)

    layout = _LAYOUTS.get(len(indicators))
    if layout is None:
        return indicators, items

    return (
        [EMPTY_INDICATOR if i is None else indicators[i] for i in layout],
        [0.0 if i is None else items[i] for i in layout],
    )


def _count(counters: Counters, tests: Iterable[TestDetails], blocked: bool) -> None:
    for test in tests:
        category = "api" if is_api_test(test.test_set) else "app"
        test_type = test.type.lower() if test.type else "unknown"
        by_type = counters.setdefault(category, {})
        was_blocked, was_bypassed = by_type.get(test_type, (0, 0))
        if blocked:
            by_type[test_type] = (was_blocked + 1, was_bypassed)
        else:
            by_type[test_type] = (was_blocked, was_bypassed + 1)


def generate_chart_data(
    stats: Statistics,
) -> tuple[list[str], list[float], list[str], list[float]]:
    """Indicators and values of the API and application charts."""
    counters: Counters = {}
    _count(counters, stats.negative_tests.blocked, blocked=True)
    _count(counters, stats.negative_tests.bypasses, blocked=False)

    mark_grpc = not stats.is_grpc_available and "api" in counters
    if mark_grpc:
        counters["api"]["grpc"] = (0, 0)

    api_indicators, api_items = get_indicators_and_items(counters, "api")
    app_indicators, app_items = get_indicators_and_items(counters, "app")

    if mark_grpc:
        for position, indicator in enumerate(api_indicators):
            if indicator.startswith("grpc"):
                api_indicators[position] = "grpc (unavailable)"
                api_items[position] = 0.0

    return api_indicators, api_items, app_indicators, app_items


def _script_json(value: Any) -> str:
    text = json.dumps(value)
    for char, escaped in _SCRIPT_ESCAPES:
        text = text.replace(char, escaped)
    return text


def _render_radar(title: str, chart_id: str, indicators: Sequence[str], items: Sequence[float]) -> str:
    values = [EMPTY_ITEM if name == EMPTY_INDICATOR else value for name, value in zip(indicators, items)]
    option = {
        "title": {"text": title, "right": "center", "textStyle": {"color": TITLE_COLOR}},
        "radar": {
            "indicator": [{"name": name, "max": MAX_VALUE, "color": LABEL_COLOR} for name in indicators],
            "splitArea": {"show": True},
            "splitLine": {"show": True},
        },
        "series": [{"name": "", "type": "radar", "data": [{"value": values}]}],
    }
    return (
        '<script type="text/javascript">\n'
        '    "use strict";\n'
        f"    let chart_{chart_id} = echarts.init(document.getElementById('{chart_id}'), "
        '"white", {renderer: "svg"});\n'
        f"    let option_{chart_id} = {_script_json(option)};\n"
        f"    chart_{chart_id}.setOption(option_{chart_id});\n"
        "</script>"
    )


def generate_charts(
    api_indicators: Sequence[str],
    api_items: Sequence[float],
    app_indicators: Sequence[str],
    app_items: Sequence[float],
) -> tuple[Optional[str], Optional[str]]:
    """Scripts that draw the API and application radar charts as SVG.

    A chart without indicators is None. Empty axes are drawn at full value.
    """
    if len(api_indicators) != len(api_items) or len(app_indicators) != len(app_items):
        raise ValueError("the number of indicators does not match the number of values")

    api_chart = (
        _render_radar("API Security", "api_chart", api_indicators, api_items)
        if api_indicators
        else None
    )
    app_chart = (
        _render_radar("Application Security", "app_chart", app_indicators, app_items)
        if app_indicators
        else None
    )
    return api_chart, app_chart