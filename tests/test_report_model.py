import json

from wafprobe.report_model import (
    ChartData,
    ComparisonTableRow,
    Grade,
    GroupedDetails,
    HtmlReport,
    TestSetSummary as SetSummary,
    map_keys_to_string,
)
from wafprobe.statistics import FailedDetails, SummaryTableRow


def test_map_keys_to_string_joins_keys():
    assert map_keys_to_string({"URL": None, "Plain": None}, ", ") == "URL, Plain"


def test_map_keys_to_string_empty():
    assert map_keys_to_string({}, ",") == ""


def test_default_grade_is_not_available():
    grade = Grade()
    assert (grade.percentage, grade.mark, grade.css_class_suffix) == (0.0, "N/A", "na")


def test_to_dict_leaves_out_chart_script():
    report = HtmlReport(api_sec_chart_data=ChartData(indicators=["-"], items=[0.0], chart="<script/>"))
    data = report.to_dict()
    assert data["api_sec_chart_data"] == {"indicators": ["-"], "items": [0.0]}


def test_to_dict_stringifies_status_code_keys():
    report = HtmlReport()
    details = GroupedDetails(test_case="xss", encoders={"URL": None}, placeholders={"Header": None})
    report.positive_tests.blocked = {"payload": {403: details}}
    data = report.to_dict()
    assert data["positive_tests"]["blocked"] == {
        "payload": {
            "403": {"test_case": "xss", "encoders": {"URL": None}, "placeholders": {"Header": None}}
        }
    }


def test_to_dict_uses_report_field_names():
    report = HtmlReport(waf_name="waf", url="http://localhost/", overall=Grade(50.0, "F", "f"))
    data = report.to_dict()
    assert data["waf_name"] == "waf"
    assert data["url"] == "http://localhost/"
    assert data["overall"] == {"percentage": 50.0, "mark": "F", "css_class_suffix": "f"}
    assert data["api_sec"] == {"true_negative": None, "true_positive": None, "grade": None}


def test_to_dict_survives_json_round_trip():
    row = SummaryTableRow(test_set="community", test_case="xss", percentage=50.0, sent=2, blocked=1, bypassed=1)
    report = HtmlReport(
        args=["--url=http://localhost/"],
        comparison_table=[ComparisonTableRow("w", Grade(), Grade(), Grade())],
    )
    report.negative_tests.summary_table = {
        "community": SetSummary(test_cases=[row], percentage=50.0, sent=2, blocked=1, bypassed=1)
    }
    report.negative_tests.bypassed = {
        "GET /": {"p": {200: GroupedDetails("xss", {"URL": None}, {"Header": None})}}
    }
    report.negative_tests.failed = [FailedDetails("p", "xss", "community", "URL", "Header", reason=["boom"])]
    data = report.to_dict()
    assert json.loads(json.dumps(data)) == data
    summary = data["negative_tests"]["summary_table"]["community"]
    assert summary["test_cases"][0]["test_case"] == "xss"
    assert summary["sent"] == 2
    assert data["negative_tests"]["failed"][0]["reason"] == ["boom"]
    assert data["comparison_table"][0]["name"] == "w"


def test_to_dict_is_a_copy():
    report = HtmlReport(args=["--quiet"])
    data = report.to_dict()
    data["args"].append("--url=x")
    assert report.args == ["--quiet"]