# wafprobe

`wafprobe` is a library of building blocks for testing how well a web
application firewall (WAF) protects an application. It can recognise known
WAF products from a response and decide whether a request was blocked,
passed or left unresolved. It also expands test cases into individual
requests, records the results and turns scan statistics into graded
console and JSON reports. It needs nothing beyond the standard library.

## Modules

- `wafprobe.detectors`: a `Response` holder and fingerprint checks built
  with `check_status_code`, `check_header`, `check_cookie` and
  `check_content`. Each `Detector` recognises one product. `all_detectors()`
  returns Akamai Kona SiteDefender, Imperva Incapsula and Imperva
  SecureSphere, in that order.
- `wafprobe.urls`: `get_target_url` reduces a URL to its scheme and host.
  `merge_headers` adds a `"Name: value"` header to the configured ones.
  `follow_redirect` applies a redirect limit and raises
  `RedirectLimitExceeded` once the limit is passed.
- `wafprobe.classification`: `ResponseClassifier` checks status codes or
  regular expressions and returns an `Outcome` (`BLOCKED`, `PASSED`,
  `UNRESOLVED`). A connection reset can be made to count as a block.
- `wafprobe.scanning`: `TestCase` describes a test case.
  `produce_tests` yields a `TestWork` for every combination of payload,
  encoder and placeholder, optionally tagged with a SHA-256 debug header
  value. `TestResults` collects the outcomes in a thread-safe way.
- `wafprobe.statistics`: dataclasses for the statistics of a finished scan
  (`Statistics`, `NegativeTestsStats`, `PositiveTestsStats`, `Score`, …).
- `wafprobe.grading`: `compute_grade` gives letter grades from `A+` to `F`,
  or `N/A` when nothing was measured. `truncate_payload` shortens
  overlong payloads. `comparison_table` holds reference grades.
- `wafprobe.charts`: radar chart data per test type (`generate_chart_data`)
  and echarts scripts that draw it as SVG (`generate_charts`).
- `wafprobe.report_model`: `HtmlReport` and related dataclasses holding
  the data of a full report. `HtmlReport.to_dict()` turns it into a
  JSON-ready dict.
- `wafprobe.validation`: `validate_report_data` checks an `HtmlReport` and
  raises `ValidationError` listing every invalid value.
- `wafprobe.json_report`: `build_full_json_report` builds the full JSON
  report and `print_full_report_to_json` writes it to a file.
- `wafprobe.console_report`: `format_console_table` and
  `format_console_json` format a summary. `render_console_report` prints
  it in the `"text"` or `"json"` format and raises `ValueError` for any
  other format.

## Examples

Strip a target down to scheme and host:

```python
from wafprobe.urls import get_target_url

get_target_url("https://app.example.com/login?next=/")
# 'https://app.example.com'
```

Recognise a WAF from a response:

```python
from wafprobe.detectors import Response, all_detectors

response = Response(status_code=403, headers={"Server": "AkamaiGHost"})
for detector in all_detectors():
    if detector.is_waf(response):
        print(detector.waf_name, detector.vendor)  # Kona SiteDefender Akamai
        break
```

Classify a response by its status code:

```python
from wafprobe.classification import Outcome, ResponseClassifier

classifier = ResponseClassifier(block_status_codes=[403], pass_status_codes=[200, 404])
classifier.classify("", "", 403) is Outcome.BLOCKED  # True
```

Grade a result:

```python
from wafprobe.grading import compute_grade

grade = compute_grade(42.9, 1)
grade.mark, grade.css_class_suffix
# ('F', 'f')
```

## What it does not do

`wafprobe` does not send any network traffic itself. It has no HTTP,
WebSocket or gRPC client, and it does not run scans or probe a target to
identify its WAF. The caller sends the requests and passes the responses
in. It does not render HTML or PDF reports and does not send reports by
e-mail; full reports are available as JSON or as `HtmlReport` data. The
package has no command-line program.

## Requirements

- Python 3.10 or later