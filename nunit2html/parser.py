"""Read NUnit (v2 ``test-results``) XML documents into the statistics model.

The XML is accessed through ``junitparser`` element classes; every required
attribute goes through one of the ``_required``/``_count`` helpers so that a
missing or bad value surfaces as one of the errors in :mod:`nunit2html.errors`
naming the offending file.
"""
import datetime as dt
import logging
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

try:
    from junitparser import Attr, Element  # type: ignore
except ImportError as e:
    MSG = "nunit2html requires 'junitparser'. Install it with: pip install junitparser"
    raise SystemExit(MSG) from e

from .errors import InvalidDateError, InvalidNumericError, MalformedXmlError
from .models import (
    FailureDetail,
    FixtureNode,
    ParsedResults,
    TestCaseNode,
    TestResult,
    TestRunStats,
    strip_namespace,
)

logger = logging.getLogger(__name__)

FIXTURE_TYPE = "TestFixture"
NAMESPACE_TYPE = "namespace"

# executed/result attribute value counted into each fixture counter
RESULT_COUNTERS = (
    ("errors", "error"),
    ("failures", "failure"),
    ("inconclusive", "inconclusive"),
    ("ignored", "ignored"),
    ("skipped", "skipped"),
    ("invalid", "notrunnable"),
)

DATE_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%d/%m/%Y %H:%M:%S",
    "%m/%d/%Y %I:%M:%S %p",
    "%d/%m/%Y %I:%M:%S %p",
)


class Failure(Element):
    _tag = "failure"

    @property
    def message(self) -> str:
        return self._elem.findtext("message", default="") or ""

    @property
    def stack_trace(self) -> str:
        return self._elem.findtext("stack-trace", default="") or ""


class Reason(Element):
    _tag = "reason"

    @property
    def message(self) -> str:
        return self._elem.findtext("message", default="") or ""


class Environment(Element):
    _tag = "environment"
    platform = Attr()


class CaseElement(Element):
    _tag = "test-case"
    name = Attr()
    executed = Attr()
    result = Attr()
    asserts = Attr()


class SuiteElement(Element):
    _tag = "test-suite"
    name = Attr()
    type = Attr()
    result = Attr()
    time = Attr()

    def iter_cases(self) -> Iterator[CaseElement]:
        """Every test-case below this suite, nested suites included."""
        for elem in self._elem.iterfind(".//" + CaseElement._tag):
            yield CaseElement.fromelem(elem)


class ResultsDocument(Element):
    _tag = "test-results"
    name = Attr()
    total = Attr()
    errors = Attr()
    failures = Attr()
    inconclusive = Attr()
    ignored = Attr()
    skipped = Attr()
    invalid = Attr()
    date = Attr()
    time = Attr()

    @property
    def not_run(self) -> Optional[str]:
        # hyphenated name, read directly
        return self._elem.get("not-run")

    @property
    def tag(self) -> str:
        return self._elem.tag

    def environment(self) -> Optional[Environment]:
        return self.child(Environment)

    def __iter__(self):
        return iter(self._elem)


def _required(value: Optional[str], attr: str, element: str, source: str) -> str:
    """Return a required attribute value or fail naming the element."""
    if value is None:
        raise MalformedXmlError(source, f"<{element}> is missing the '{attr}' attribute")
    return value


def _count(value: Optional[str], attr: str, element: str, source: str) -> int:
    """Read a non-negative integer attribute; an empty value counts as 0."""
    value = _required(value, attr, element, source)
    if value == "":
        return 0
    try:
        count = int(value)
    except ValueError:
        raise InvalidNumericError(
            source, f"'{attr}' of <{element}> is not an integer: {value!r}") from None
    if count < 0:
        raise InvalidNumericError(source, f"'{attr}' of <{element}> is negative: {value!r}")
    return count


def _timestamp(date: str, time: str, source: str) -> dt.datetime:
    stamp = f"{date} {time}".strip()
    try:
        return dt.datetime.fromisoformat(stamp)
    except ValueError:
        pass
    for fmt in DATE_FORMATS:
        try:
            return dt.datetime.strptime(stamp, fmt)
        except ValueError:
            continue
    raise InvalidDateError(source, f"'{stamp}' is not a valid date/time")


def load_document(path: Union[str, Path]) -> ResultsDocument:
    """Load a whole result file; the root must be <test-results>."""
    source = str(path)
    # bytes, so an encoding declaration is honoured by both etree backends
    data = Path(path).read_bytes()
    try:
        doc = ResultsDocument.fromstring(data)
    except SyntaxError as e:
        raise MalformedXmlError(source, f"not well-formed XML ({e})") from e
    if doc.tag != ResultsDocument._tag:
        raise MalformedXmlError(
            source, f"root element is <{doc.tag}>, expected <{ResultsDocument._tag}>")
    return doc


def parse_run_stats(doc: ResultsDocument, source: str) -> TestRunStats:
    """Whole-run statistics, trusting the document's declared counters."""
    root = ResultsDocument._tag
    env = doc.environment()
    if env is None:
        raise MalformedXmlError(source, "<environment> element is missing")
    platform = _required(env.platform, "platform", Environment._tag, source)
    timestamp = _timestamp(
        _required(doc.date, "date", root, source),
        _required(doc.time, "time", root, source),
        source,
    )
    return TestRunStats(
        name=_required(doc.name, "name", root, source),
        tests=_count(doc.total, "total", root, source),
        errors=_count(doc.errors, "errors", root, source),
        failures=_count(doc.failures, "failures", root, source),
        not_run=_count(doc.not_run, "not-run", root, source),
        inconclusive=_count(doc.inconclusive, "inconclusive", root, source),
        ignored=_count(doc.ignored, "ignored", root, source),
        skipped=_count(doc.skipped, "skipped", root, source),
        invalid=_count(doc.invalid, "invalid", root, source),
        platforms=tuple(p.strip() for p in platform.split(",") if p.strip()),
        timestamp=timestamp,
    )


def fixture_stats(fixture: SuiteElement, source: str = "") -> TestRunStats:
    """Recount a fixture's statistics from the test cases below it.

    The fixture's own ``total`` style attributes are ignored: ``tests`` is the
    number of executed cases and ``invalid`` counts ``NotRunnable`` results.
    """
    executed: List[str] = []
    results: List[str] = []
    for case in fixture.iter_cases():
        executed.append(_required(case.executed, "executed", CaseElement._tag, source).lower())
        results.append(_required(case.result, "result", CaseElement._tag, source).lower())
    counts = {counter: results.count(value) for counter, value in RESULT_COUNTERS}
    return TestRunStats(
        name=_required(fixture.name, "name", SuiteElement._tag, source),
        tests=executed.count("true"),
        not_run=executed.count("false"),
        **counts,
    )


def _single(element: Element, Child) -> Optional[Element]:
    """The only *Child* of *element*, or None when there are zero or several."""
    children = list(element.iterchildren(Child))
    if len(children) == 1:
        return children[0]
    return None


def parse_case(case: CaseElement, source: str = "") -> TestCaseNode:
    full_name = _required(case.name, "name", CaseElement._tag, source)
    result_text = _required(case.result, "result", CaseElement._tag, source)
    executed = _required(case.executed, "executed", CaseElement._tag, source)
    result = TestResult.from_attr(result_text)

    assert_count = None
    if result is TestResult.SUCCESS and case.asserts is not None:
        assert_count = _count(case.asserts, "asserts", CaseElement._tag, source)

    failure = _single(case, Failure)
    reason = _single(case, Reason)
    return TestCaseNode(
        name=strip_namespace(full_name),
        full_name=full_name,
        result=result,
        result_text=result_text,
        executed=executed.lower() == "true",
        assert_count=assert_count,
        failure=FailureDetail(failure.message, failure.stack_trace) if failure is not None else None,
        reason=reason.message if reason is not None else None,
    )


def parse_fixture(fixture: SuiteElement, namespace: str, source: str = "") -> FixtureNode:
    result_text = _required(fixture.result, "result", SuiteElement._tag, source)
    reason = fixture.child(Reason)
    return FixtureNode(
        name=_required(fixture.name, "name", SuiteElement._tag, source),
        namespace=namespace,
        elapsed=fixture.time or "",
        result=TestResult.from_attr(result_text),
        result_text=result_text,
        stats=fixture_stats(fixture, source),
        reason=(reason.message or None) if reason is not None else None,
        test_cases=tuple(parse_case(case, source) for case in fixture.iter_cases()),
    )


def iter_fixtures(elem, source: str = "",
                  namespaces: Tuple[str, ...] = ()) -> Iterator[Tuple[SuiteElement, str]]:
    """Yield ``(fixture, namespace)`` for every TestFixture below *elem*.

    Fixtures are found at any depth and in document order; the namespace is
    the dot-joined names of the enclosing Namespace suites.
    """
    for child in elem:
        if child.tag != SuiteElement._tag:
            yield from iter_fixtures(child, source, namespaces)
            continue
        suite = SuiteElement.fromelem(child)
        suite_type = _required(suite.type, "type", SuiteElement._tag, source)
        if suite_type == FIXTURE_TYPE:
            yield suite, ".".join(namespaces)
        inner = namespaces
        if suite_type.lower() == NAMESPACE_TYPE:
            inner = namespaces + (_required(suite.name, "name", SuiteElement._tag, source),)
        yield from iter_fixtures(child, source, inner)


def parse_document(doc: ResultsDocument, source: str = "") -> ParsedResults:
    stats = parse_run_stats(doc, source)
    fixtures = tuple(
        parse_fixture(suite, namespace, source)
        for suite, namespace in iter_fixtures(doc, source)
    )
    return ParsedResults(source=source, stats=stats, fixtures=fixtures)


def parse_file(path: Union[str, Path]) -> ParsedResults:
    """Load and parse one NUnit result file."""
    logger.debug("Parsing %s", path)
    parsed = parse_document(load_document(path), str(path))
    logger.debug("%s: %d tests, %d fixtures", path, parsed.stats.tests, len(parsed.fixtures))
    return parsed
