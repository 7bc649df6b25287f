import datetime as dt

import pytest

from nunit2html import models
from nunit2html.errors import InvalidDateError, InvalidNumericError, MalformedXmlError
from nunit2html.parser import parse_file


def _case(name, result="Success", executed="True", extra="", body=""):
    return (f'<test-case name="{name}" executed="{executed}" result="{result}" '
            f'time="0.001" {extra}>{body}</test-case>')


def _failure(message, stack="at Demo.Tests.Method()"):
    return (f"<failure><message><![CDATA[{message}]]></message>"
            f"<stack-trace><![CDATA[{stack}]]></stack-trace></failure>")


def test_run_stats_come_from_root_attributes(write_xml, results_xml):
    path = write_xml(results_xml(total=7, errors=1, failures=2, not_run=3, ignored=1))
    stats = parse_file(path).stats
    assert stats.name == "Demo.dll"
    assert (stats.tests, stats.errors, stats.failures, stats.not_run, stats.ignored) == (7, 1, 2, 3, 1)
    assert stats.platforms == ("Win32NT",)
    assert stats.timestamp == dt.datetime(2014, 6, 26, 10, 22, 31)


def test_run_total_is_trusted_over_test_cases(write_xml, results_xml, fixture_xml):
    body = fixture_xml("F", _case("F.A"))
    stats = parse_file(write_xml(results_xml(body, total=40))).stats
    assert stats.tests == 40


def test_empty_counter_reads_as_zero(write_xml, results_xml):
    stats = parse_file(write_xml(results_xml(total=3, inconclusive=""))).stats
    assert stats.inconclusive == 0


def test_missing_counter_attribute_fails(write_xml, results_xml):
    with pytest.raises(MalformedXmlError) as excinfo:
        parse_file(write_xml(results_xml(skipped=None)))
    assert "skipped" in str(excinfo.value)
    assert "TestResult.xml" in str(excinfo.value)


def test_non_numeric_counter_fails(write_xml, results_xml):
    with pytest.raises(InvalidNumericError):
        parse_file(write_xml(results_xml(total="many")))


def test_invalid_date_fails(write_xml, results_xml):
    with pytest.raises(InvalidDateError):
        parse_file(write_xml(results_xml(date="2014-13-45")))


def test_us_style_date_is_accepted(write_xml, results_xml):
    stats = parse_file(write_xml(results_xml(date="06/26/2014", time="10:22:31"))).stats
    assert stats.timestamp == dt.datetime(2014, 6, 26, 10, 22, 31)


def test_missing_environment_fails(write_xml, results_xml):
    with pytest.raises(MalformedXmlError, match="environment"):
        parse_file(write_xml(results_xml(environment=False)))


def test_platform_list_is_split(write_xml, results_xml):
    stats = parse_file(write_xml(results_xml(platform="Win, Linux"))).stats
    assert stats.platforms == ("Win", "Linux")


def test_malformed_xml_fails(write_xml):
    with pytest.raises(MalformedXmlError):
        parse_file(write_xml("<test-results name='x'><environment"))


def test_other_root_element_fails(write_xml):
    with pytest.raises(MalformedXmlError, match="test-results"):
        parse_file(write_xml('<testsuites><testsuite name="junit" /></testsuites>'))


def test_fixture_statistics_are_recounted(write_xml, results_xml, fixture_xml):
    cases = (_case("F.A", "Success", "true")
             + _case("F.B", "Failure", "true")
             + _case("F.C", "NotRun", "false"))
    fixture = parse_file(write_xml(results_xml(fixture_xml("F", cases), total=99))).fixtures[0]
    assert fixture.stats.tests == 2
    assert fixture.stats.not_run == 1
    assert fixture.stats.failures == 1
    assert fixture.stats.errors == 0
    assert fixture.stats.timestamp is None


def test_not_runnable_counts_as_invalid(write_xml, results_xml, fixture_xml):
    cases = _case("F.A", "NotRunnable", "False") + _case("F.B", "Ignored", "False")
    stats = parse_file(write_xml(results_xml(fixture_xml("F", cases)))).fixtures[0].stats
    assert stats.invalid == 1
    assert stats.ignored == 1
    assert stats.not_run == 2
    assert stats.tests == 0


def test_namespace_is_joined_from_outermost(write_xml, results_xml, fixture_xml, namespace_xml):
    body = namespace_xml("Demo", namespace_xml("Tests", fixture_xml("F", _case("F.A")),
                                               suite_type="namespace"))
    fixture = parse_file(write_xml(results_xml(body))).fixtures[0]
    assert fixture.namespace == "Demo.Tests"


def test_fixture_without_namespace(write_xml, results_xml, fixture_xml):
    fixture = parse_file(write_xml(results_xml(fixture_xml("F", _case("F.A"))))).fixtures[0]
    assert fixture.namespace == ""


def test_non_namespace_suites_are_not_part_of_namespace(write_xml, results_xml, fixture_xml,
                                                       namespace_xml):
    body = namespace_xml("Demo", namespace_xml("Rows", fixture_xml("F", _case("F.A")),
                                               suite_type="ParameterizedTest"))
    assert parse_file(write_xml(results_xml(body))).fixtures[0].namespace == "Demo"


def test_fixtures_are_found_at_any_depth_in_document_order(write_xml, results_xml, fixture_xml,
                                                           namespace_xml):
    inner = fixture_xml("Inner", _case("Inner.A"))
    outer = fixture_xml("Outer", _case("Outer.A") + inner)
    body = namespace_xml("Demo", outer) + fixture_xml("Last", _case("Last.A"))
    parsed = parse_file(write_xml(results_xml(body)))
    assert [f.name for f in parsed.fixtures] == ["Outer", "Inner", "Last"]
    outer_node = parsed.fixtures[0]
    assert outer_node.stats.tests == 2
    assert [c.name for c in outer_node.test_cases] == ["A", "A"]


def test_fixture_details(write_xml, results_xml, fixture_xml):
    body = fixture_xml("F", _case("F.A"), result="Ignored", time="1.5", reason="Not ready")
    fixture = parse_file(write_xml(results_xml(body))).fixtures[0]
    assert fixture.result is models.TestResult.IGNORED
    assert fixture.result_text == "Ignored"
    assert fixture.elapsed == "1.5"
    assert fixture.reason == "Not ready"


def test_test_case_details(write_xml, results_xml, fixture_xml):
    cases = (_case("Demo.F.Passes", extra='asserts="3"')
             + _case("Demo.F.Fails", "Failure", extra='asserts="1"', body=_failure("Expected 1")))
    passes, fails = parse_file(write_xml(results_xml(fixture_xml("F", cases)))).fixtures[0].test_cases
    assert passes.name == "Passes"
    assert passes.full_name == "Demo.F.Passes"
    assert passes.assert_count == 3
    assert passes.failure is None
    assert fails.assert_count is None
    assert fails.failure == models.FailureDetail("Expected 1", "at Demo.Tests.Method()")


def test_multiple_failure_children_are_ignored(write_xml, results_xml, fixture_xml):
    case = _case("F.A", "Failure", body=_failure("one") + _failure("two"))
    parsed = parse_file(write_xml(results_xml(fixture_xml("F", case))))
    assert parsed.fixtures[0].test_cases[0].failure is None


def test_reason_is_read_only_when_single(write_xml, results_xml, fixture_xml):
    reason = "<reason><message><![CDATA[Skipped on CI]]></message></reason>"
    cases = (_case("F.A", "Ignored", "False", body=reason)
             + _case("F.B", "Ignored", "False", body=reason + reason))
    a, b = parse_file(write_xml(results_xml(fixture_xml("F", cases)))).fixtures[0].test_cases
    assert a.reason == "Skipped on CI"
    assert b.reason is None


def test_test_case_without_result_fails(write_xml, results_xml, fixture_xml):
    case = '<test-case name="F.A" executed="True" />'
    with pytest.raises(MalformedXmlError, match="result"):
        parse_file(write_xml(results_xml(fixture_xml("F", case))))


def test_non_numeric_asserts_fails(write_xml, results_xml, fixture_xml):
    case = _case("F.A", extra='asserts="x"')
    with pytest.raises(InvalidNumericError):
        parse_file(write_xml(results_xml(fixture_xml("F", case))))


def test_hyphenated_not_run_attribute_is_read(write_xml, results_xml):
    stats = parse_file(write_xml(results_xml(total=5, not_run=4))).stats
    assert stats.not_run == 4


def test_missing_not_run_attribute_fails(write_xml, results_xml):
    with pytest.raises(MalformedXmlError) as excinfo:
        parse_file(write_xml(results_xml(not_run=None)))
    assert "'not-run'" in str(excinfo.value)


def test_suite_type_attribute_selects_fixtures(write_xml, results_xml, fixture_xml, namespace_xml):
    body = namespace_xml("Demo", fixture_xml("Calc", _case("Demo.Calc.Adds")))
    fixtures = parse_file(write_xml(results_xml(body, total=1))).fixtures
    assert [(f.name, f.namespace) for f in fixtures] == [("Calc", "Demo")]
    assert fixtures[0].test_cases[0].name == "Adds"
