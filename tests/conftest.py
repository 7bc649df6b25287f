import pytest

COUNTER_ATTRS = ("total", "errors", "failures", "not-run", "inconclusive",
                 "ignored", "skipped", "invalid")


def _results_xml(body="", name="Demo.dll", date="2014-06-26", time="10:22:31",
                 platform="Win32NT", environment=True, **counters):
    attrs = {attr: "0" for attr in COUNTER_ATTRS}
    attrs.update({k.replace("_", "-"): str(v) for k, v in counters.items()})
    attrs = {k: v for k, v in attrs.items() if v != "None"}
    rendered = " ".join(f'{k}="{v}"' for k, v in attrs.items())
    env = f'<environment nunit-version="2.6.3" platform="{platform}" />' if environment else ""
    return (
        '<?xml version="1.0" encoding="utf-8" standalone="no"?>\n'
        f'<test-results name="{name}" {rendered} date="{date}" time="{time}">\n'
        f'  {env}\n'
        '  <test-suite type="Assembly" name="Demo.dll" executed="True" result="Success" time="0.05">\n'
        f'    <results>{body}</results>\n'
        '  </test-suite>\n'
        '</test-results>\n'
    )


def _fixture_xml(name, cases, result="Success", time="0.012", reason=None):
    reason_xml = f"<reason><message><![CDATA[{reason}]]></message></reason>" if reason else ""
    return (f'<test-suite type="TestFixture" name="{name}" executed="True" '
            f'result="{result}" time="{time}">{reason_xml}<results>{cases}</results></test-suite>')


def _namespace_xml(name, body, suite_type="Namespace"):
    return (f'<test-suite type="{suite_type}" name="{name}" executed="True" result="Success">'
            f'<results>{body}</results></test-suite>')


@pytest.fixture
def results_xml():
    return _results_xml


@pytest.fixture
def fixture_xml():
    return _fixture_xml


@pytest.fixture
def namespace_xml():
    return _namespace_xml


@pytest.fixture
def write_xml(tmp_path):
    def write(text, filename="TestResult.xml"):
        path = tmp_path / filename
        path.write_text(text, encoding="utf-8")
        return path
    return write


@pytest.fixture
def success_file(write_xml):
    case = ('<test-case name="Demo.Tests.CalculatorTests.Adds" executed="True" '
            'result="Success" success="True" time="0.001" asserts="3" />')
    body = _namespace_xml("Demo", _namespace_xml("Tests", _fixture_xml("CalculatorTests", case)))
    return write_xml(_results_xml(body, total=1), "Success.xml")
