import pytest

from wafprobe.classification import Outcome
from wafprobe.scanning import (
    TestCase as Case,
    TestResults as Results,
    TestWork as Work,
    debug_header_value,
    produce_tests,
)

SHA256_EMPTY = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
SHA256_ABC = "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


def generate_test_cases(encoders, placeholders):
    test_sets = ["test-set1", "test-set2", "test-set3"]
    payloads = ["bypassed", "blocked", "unresolved"]
    cases = []
    expected = {}
    for test_set in test_sets:
        for placeholder in placeholders:
            for encoder in encoders:
                name = f"{placeholder}-{encoder}"
                cases.append(
                    Case(
                        test_set=test_set,
                        name=name,
                        payloads=payloads,
                        encoders=[encoder],
                        placeholders=[placeholder],
                        is_true_positive=True,
                    )
                )
                for payload in payloads:
                    key = debug_header_value(test_set, name, placeholder, encoder, payload)
                    expected[key] = (
                        f"set={test_set},name={name},placeholder={placeholder},encoder={encoder}"
                    )
    return cases, expected


def test_debug_header_of_empty_parts():
    assert debug_header_value("", "", "", "", "") == SHA256_EMPTY


def test_debug_header_hashes_concatenation():
    assert debug_header_value("a", "b", "c", "", "") == SHA256_ABC
    assert debug_header_value("", "", "", "ab", "c") == SHA256_ABC


def test_all_generated_cases_are_produced_once():
    encoders = ["Base64", "Base64Flat", "JSUnicode", "URL", "Plain", "XMLEntity"]
    placeholders = ["Header", "URLParam", "URLPath", "JSONBody", "SOAPBody"]
    cases, remaining = generate_test_cases(encoders, placeholders)

    count = 0
    for work in produce_tests(cases, enable_debug_header=True):
        description = remaining.pop(work.debug_header)
        assert description == (
            f"set={work.set_name},name={work.case_name},"
            f"placeholder={work.placeholder},encoder={work.encoder}"
        )
        count += 1

    assert remaining == {}
    assert count == 3 * len(encoders) * len(placeholders) * 3


def test_produce_tests_order_and_fields():
    case = Case(
        test_set="s",
        name="n",
        payloads=["p1", "p2"],
        encoders=["e1", "e2"],
        placeholders=["h1", "h2"],
        type="XSS",
        is_true_positive=True,
    )
    works = list(produce_tests([case]))
    combos = [(w.payload, w.encoder, w.placeholder) for w in works]
    assert combos == [
        ("p1", "e1", "h1"),
        ("p1", "e1", "h2"),
        ("p1", "e2", "h1"),
        ("p1", "e2", "h2"),
        ("p2", "e1", "h1"),
        ("p2", "e1", "h2"),
        ("p2", "e2", "h1"),
        ("p2", "e2", "h2"),
    ]
    assert all(w.test_type == "XSS" and w.is_true_positive for w in works)
    assert all(w.debug_header == "" for w in works)


def test_produce_tests_with_debug_header():
    case = Case(test_set="a", name="b", payloads=[""], encoders=[""], placeholders=["c"])
    (work,) = produce_tests([case], enable_debug_header=True)
    assert work.debug_header == SHA256_ABC


def test_to_info():
    work = Work(
        set_name="community",
        case_name="xss",
        payload="<script>",
        encoder="URL",
        placeholder="URLParam",
        test_type="XSS",
    )
    info = work.to_info(403)
    assert info.test_set == "community"
    assert info.test_case == "xss"
    assert info.payload == "<script>"
    assert info.encoder == "URL"
    assert info.placeholder == "URLParam"
    assert info.response_status_code == 403
    assert info.type == "XSS"
    assert info.additional_info == []


@pytest.fixture
def work():
    return Work(set_name="s", case_name="c", payload="p", encoder="Plain", placeholder="Header")


def test_record_sorts_by_outcome(work):
    results = Results()
    other = Work(set_name="s", case_name="c", payload="q", encoder="Plain", placeholder="Header")
    third = Work(set_name="s", case_name="c", payload="r", encoder="Plain", placeholder="Header")
    results.record(work, Outcome.BLOCKED, 403)
    results.record(other, Outcome.PASSED, 200)
    results.record(third, Outcome.UNRESOLVED, 500)
    assert [d.payload for d in results.blocked] == ["p"]
    assert [d.payload for d in results.passed] == ["q"]
    assert [d.payload for d in results.unresolved] == ["r"]
    assert results.blocked[0].response_status_code == 403


def test_record_same_work_accumulates_additional_info(work):
    results = Results()
    first = results.record(work, Outcome.BLOCKED, 403, "GET /a")
    second = results.record(work, Outcome.BLOCKED, 403, "POST /b")
    assert first is second
    assert len(results.blocked) == 1
    assert results.blocked[0].additional_info == ["GET /a", "POST /b"]


def test_record_equal_but_distinct_works_are_separate(work):
    results = Results()
    twin = Work(set_name="s", case_name="c", payload="p", encoder="Plain", placeholder="Header")
    results.record(work, Outcome.PASSED, 200)
    results.record(twin, Outcome.PASSED, 200)
    assert len(results.passed) == 2


def test_record_failure(work):
    results = Results()
    failed = results.record(work, ConnectionError("refused"), 0, "GET /a")
    results.record(work, ConnectionError("timeout"), 0, "GET /b")
    assert results.failed == [failed]
    assert failed.reason == ["refused", "timeout"]
    assert failed.payload == "p"
    assert results.blocked == results.passed == results.unresolved == []