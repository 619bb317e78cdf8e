import pytest

from wafprobe.grading import comparison_table, compute_grade
from wafprobe.report_model import (
    ChartData,
    GroupedDetails,
    HtmlReport,
    SecurityGrades,
)
from wafprobe.validation import (
    ValidationError,
    validate_args,
    validate_css_suffix,
    validate_fp,
    validate_gtw_version,
    validate_indicator,
    validate_mark,
    validate_names,
    validate_report_data,
)

ENCODERS = {"Plain", "URL", "Base64"}
PLACEHOLDERS = {"URLParam", "Header"}


def _grades():
    return SecurityGrades(
        true_negative=compute_grade(1, 2),
        true_positive=compute_grade(2, 2),
        grade=compute_grade(150, 2),
    )


def _report(**overrides):
    report = HtmlReport(
        waf_name="test-waf",
        url="http://localhost:8080",
        waf_testing_date="17 May 2023",
        gtw_version="unknown",
        test_cases_fp="0123456789abcdef0123456789abcdef",
        args=["--workers=4", "--noEmailReport"],
        overall=compute_grade(150, 2),
        api_sec=_grades(),
        app_sec=_grades(),
        comparison_table=comparison_table(),
        api_sec_chart_data=ChartData(indicators=["sqli (50.0%)", "-"], items=[50.0, 0.0]),
    )
    report.negative_tests.unresolved = {
        "payload": {403: GroupedDetails(test_case="case1", encoders={"Plain": None}, placeholders={"URLParam": None})}
    }
    for name, value in overrides.items():
        setattr(report, name, value)
    return report


@pytest.mark.parametrize(
    "value, expected",
    [("v0.4.0", True), ("v1.2.3-10-gabcdef0", True), ("unknown", True), ("1.2.3", False), ("v1.2", False)],
)
def test_gtw_version(value, expected):
    assert validate_gtw_version(value) is expected


def test_fp():
    assert validate_fp("a" * 32) is True
    assert validate_fp("A" * 32) is False
    assert validate_fp("a" * 31) is False


@pytest.mark.parametrize("value, expected", [("N/A", True), ("B+", True), ("F", True), ("G", False), ("A++", False)])
def test_mark(value, expected):
    assert validate_mark(value) is expected


def test_css_suffix():
    assert validate_css_suffix("na") is True
    assert validate_css_suffix("f") is True
    assert validate_css_suffix("g") is False


@pytest.mark.parametrize(
    "value, expected",
    [("-", True), ("sqli (50.0%)", True), ("grpc (unavailable)", True), ("sqli (50%)", False), ("x" * 31 + " (1.0%)", False)],
)
def test_indicator(value, expected):
    assert validate_indicator(value) is expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("--quiet", True),
        ("--workers=100", True),
        ("--workers=abc", False),
        ("--url=http://localhost:8080/", True),
        ("--blockStatusCodes=403,406", True),
        ("--unknownFlag", False),
        ("-quiet", False),
    ],
)
def test_args(value, expected):
    assert validate_args(value) is expected


def test_validate_names():
    assert validate_names({"Plain": None}, ENCODERS) is True
    assert validate_names({}, ENCODERS) is False
    assert validate_names({"Plain": None, "Rot13": None}, ENCODERS) is False


def test_valid_report_is_returned():
    report = _report()
    assert validate_report_data(report, ENCODERS, PLACEHOLDERS) is report


def test_missing_overall_grade():
    with pytest.raises(ValidationError) as info:
        validate_report_data(_report(overall=None), ENCODERS, PLACEHOLDERS)
    assert any(error.startswith("overall") for error in info.value.errors)


def test_bad_version_and_date_are_both_reported():
    with pytest.raises(ValidationError) as info:
        validate_report_data(
            _report(gtw_version="dev", waf_testing_date="2023-05-17"), ENCODERS, PLACEHOLDERS
        )
    paths = [error.split(":")[0] for error in info.value.errors]
    assert "gtw_version" in paths
    assert "waf_testing_date" in paths


def test_unknown_encoder_in_details():
    report = _report()
    report.negative_tests.unresolved["payload"][403].encoders = {"Rot13": None}
    with pytest.raises(ValidationError) as info:
        validate_report_data(report, ENCODERS, PLACEHOLDERS)
    assert any("encoders" in error for error in info.value.errors)


def test_bad_indicator_and_negative_count():
    report = _report(total_sent=-1, api_sec_chart_data=ChartData(indicators=["bad"], items=[10.0]))
    with pytest.raises(ValidationError) as info:
        validate_report_data(report, ENCODERS, PLACEHOLDERS)
    paths = [error.split(":")[0] for error in info.value.errors]
    assert "total_sent" in paths
    assert "api_sec_chart_data.indicators[0]" in paths