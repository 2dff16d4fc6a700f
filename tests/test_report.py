"""Tests for findings, the report aggregator, and its renderings."""

import pytest

from gosplint.report import (
    Category,
    Finding,
    Position,
    Report,
    format_finding,
    format_summary,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_finding(category=Category.TOO_MANY_STATEMENTS, **kwargs):
    """Create a Finding with sensible defaults."""
    defaults = {
        "file": "main.go",
        "function": "run",
        "category": category,
        "count": 42,
        "position": Position("main.go", 10, 1, 120),
    }
    defaults.update(kwargs)
    return Finding(**defaults)


_ADDERS = {
    Category.TOO_MANY_STATEMENTS: "add_statement",
    Category.TOO_MANY_PARAMS: "add_param",
    Category.TOO_MANY_RESULTS: "add_result",
    Category.BOOLEAN_PARAM: "add_bool_param",
    Category.EMPTY_IF_BODY: "add_empty_if_body",
    Category.LONG_IF_BODY: "add_long_if_body",
    Category.LONG_IF_CHAIN: "add_if_chain",
}


# ---------------------------------------------------------------------------
# format_finding
# ---------------------------------------------------------------------------


def test_format_finding_with_count():
    assert format_finding(_make_finding()) == "main.go:10:1: function run too long: 42"


def test_format_finding_without_count():
    finding = _make_finding(Category.BOOLEAN_PARAM, count=0)
    assert format_finding(finding) == "main.go:10:1: function run bool function param"


def test_format_empty_if_has_no_count():
    finding = _make_finding(Category.EMPTY_IF_BODY, count=0)
    assert format_finding(finding).endswith("if with empty body")


def test_format_long_if_chain():
    finding = _make_finding(Category.LONG_IF_CHAIN, count=3)
    assert format_finding(finding).endswith("long if/else chain: 3")


# ---------------------------------------------------------------------------
# Report mutation and tallies
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("category", list(Category))
def test_each_adder_records_its_category(category):
    report = Report()
    getattr(report, _ADDERS[category])(_make_finding(category))
    assert report.count(category) == 1
    assert sum(report.counts().values()) == 1


def test_adder_rejects_wrong_category():
    report = Report()
    with pytest.raises(ValueError):
        report.add_param(_make_finding(Category.TOO_MANY_STATEMENTS))


def test_findings_keep_insertion_order():
    report = Report()
    first = _make_finding(function="a")
    second = _make_finding(function="b")
    report.add_statement(first)
    report.add_statement(second)
    assert report.findings(Category.TOO_MANY_STATEMENTS) == [first, second]


def test_findings_returns_a_copy():
    report = Report()
    report.add_statement(_make_finding())
    report.findings(Category.TOO_MANY_STATEMENTS).clear()
    assert report.count(Category.TOO_MANY_STATEMENTS) == 1


def test_on_finding_called_at_each_addition():
    seen = []
    report = Report(on_finding=seen.append)
    finding = _make_finding(Category.TOO_MANY_PARAMS, count=6)
    report.add_param(finding)
    assert seen == [finding]


# ---------------------------------------------------------------------------
# is_clean
# ---------------------------------------------------------------------------


def test_new_report_is_clean():
    assert Report().is_clean()


def test_any_finding_makes_report_dirty():
    report = Report()
    report.add_empty_if_body(_make_finding(Category.EMPTY_IF_BODY, count=0))
    assert not report.is_clean()


def test_bool_params_make_report_dirty_when_checked():
    report = Report(check_bool_params=True)
    report.add_bool_param(_make_finding(Category.BOOLEAN_PARAM, count=0))
    assert not report.is_clean()


def test_bool_params_ignored_when_check_disabled():
    report = Report(check_bool_params=False)
    report.add_bool_param(_make_finding(Category.BOOLEAN_PARAM, count=0))
    assert report.is_clean()


def test_other_findings_still_count_when_bool_check_disabled():
    report = Report(check_bool_params=False)
    report.add_if_chain(_make_finding(Category.LONG_IF_CHAIN, count=3))
    assert not report.is_clean()


# ---------------------------------------------------------------------------
# to_dict
# ---------------------------------------------------------------------------


def test_empty_report_document_uses_null_lists_and_zero_tallies():
    doc = Report().to_dict()
    assert list(doc) == [
        "Statement",
        "Param",
        "Result",
        "EmptyIfs",
        "IfChains",
        "BoolParams",
        "LongIfs",
        "NumAboveStatementThreshold",
        "NumAboveParamThreshold",
        "NumAboveResultThreshold",
        "NumIfChains",
        "NumEmptyIfs",
        "NumWithBoolParams",
        "NumLongIfs",
    ]
    assert doc["Statement"] is None
    assert doc["NumLongIfs"] == 0


def test_document_tallies_match_lists():
    report = Report()
    report.add_param(_make_finding(Category.TOO_MANY_PARAMS, count=7))
    report.add_param(_make_finding(Category.TOO_MANY_PARAMS, count=8))
    doc = report.to_dict()
    assert len(doc["Param"]) == doc["NumAboveParamThreshold"] == 2


def test_document_finding_shape():
    report = Report()
    report.add_statement(_make_finding())
    entry = report.to_dict()["Statement"][0]
    assert entry == {
        "Filename": "main.go",
        "Function": "run",
        "Count": 42,
        "Position": {"Filename": "main.go", "Offset": 120, "Line": 10, "Column": 1},
    }


# ---------------------------------------------------------------------------
# format_summary
# ---------------------------------------------------------------------------


def test_summary_lists_every_tally():
    report = Report()
    report.add_if_chain(_make_finding(Category.LONG_IF_CHAIN, count=4))
    lines = format_summary(report)
    assert len(lines) == 7
    assert "Number of long if/else chains: 1" in lines
    assert "Number of functions with bool params: 0" in lines


def test_summary_omits_bool_params_when_check_disabled():
    lines = format_summary(Report(check_bool_params=False))
    assert len(lines) == 6
    assert not any("bool params" in line for line in lines)
