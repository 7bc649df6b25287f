"""HTML fragments for the report.

Every function here is pure: it takes model objects and returns a string.
The markup uses the Bootstrap 3 class vocabulary (panels, accordions, modals)
provided by the page assets.
"""
import html
import re
import urllib.parse
from decimal import Decimal
from typing import Iterable, List, Tuple

from .models import (
    FixtureNode,
    ParsedResults,
    RunTotals,
    TestCaseNode,
    TestResult,
    TestRunStats,
)

# characters allowed in a generated element id
_ID_UNSAFE = re.compile(r"[^a-zA-Z0-9 -]")

_STYLE_OF = {
    TestResult.SUCCESS: "success",
    TestResult.IGNORED: "info",
    TestResult.FAILURE: "danger",
    TestResult.ERROR: "danger",
}

# (text class, icon, label) of the link that opens a fixture's dialog
_LINK_OF = {
    TestResult.SUCCESS: ("text-success", "glyphicon-ok-sign", "Success"),
    TestResult.IGNORED: ("text-info", "glyphicon-info-sign", "Ignored"),
    TestResult.NOT_RUNNABLE: ("text-default", "glyphicon-remove-sign", "Not Runnable"),
    TestResult.FAILURE: ("text-danger", "glyphicon-exclamation-sign", "Failed"),
    TestResult.ERROR: ("text-danger", "glyphicon-exclamation-sign", "Failed"),
}


def _escape_html(x) -> str:
    """Escape HTML characters."""
    return html.escape(str(x), quote=True)


def style_of(result: TestResult) -> str:
    """Bootstrap contextual suffix for a result (success/info/danger/default)."""
    return _STYLE_OF.get(result, "default")


def link_style_of(result: TestResult, result_text: str = "") -> Tuple[str, str, str]:
    return _LINK_OF.get(result, ("text-default", "glyphicon-question-sign", result_text))


def format_percent(value: Decimal) -> str:
    """'60%' for integral values, '66.7%' otherwise."""
    if value == value.to_integral_value():
        return f"{int(value)}%"
    return f"{value}%"


def modal_id(fixture_name: str, index: int) -> str:
    """Element id of a fixture's detail dialog."""
    slug = _ID_UNSAFE.sub("", urllib.parse.quote_plus(fixture_name))
    return f"modal-{slug}-{index}"


def stat_cell(label: str, value, stat_class: str, val_class: str) -> str:
    return (f'<div class="col-md-2 col-sm-4 col-xs-6 text-center">'
            f'<div class="{stat_class}">{label}</div>'
            f'<div class="{val_class}">{_escape_html(value)}</div></div>\n')


def counter_cell(label: str, value: int, stat_class: str, val_class: str,
                 flag: bool = True) -> str:
    """A counter cell, flagged with text-danger when *flag* and value > 0."""
    if flag and value > 0:
        val_class = f"text-danger {val_class}".strip()
    return stat_cell(label, value, stat_class, val_class)


def render_statistics(stats: TestRunStats, stat_class: str = "stat",
                      val_class: str = "val") -> str:
    """The block of labelled statistic cells."""
    cells = [
        counter_cell("Tests", stats.tests, stat_class, f"{val_class} ignore-val".strip(),
                     flag=False),
        counter_cell("Failures", stats.failures, stat_class, val_class),
        counter_cell("Errors", stats.errors, stat_class, val_class),
        counter_cell("Not&nbsp;Run", stats.not_run, stat_class, val_class),
        counter_cell("Inconclusive", stats.inconclusive, stat_class, val_class),
        counter_cell("Ignored", stats.ignored, stat_class, val_class),
        counter_cell("Skipped", stats.skipped, stat_class, val_class),
        counter_cell("Invalid", stats.invalid, stat_class, val_class),
    ]
    if stats.timestamp is not None:
        ts = stats.timestamp
        cells.append(stat_cell("Date", f"{ts.day} {ts:%b}", stat_class, val_class))
        cells.append(stat_cell("Time", f"{ts:%H:%M}", stat_class, val_class))
    if stats.platforms:
        cells.append(stat_cell("Platform", stats.platform_label, stat_class, val_class))
    cells.append(stat_cell("Success", format_percent(stats.success_rate), stat_class, val_class))
    return "".join(cells)


def _danger_if(value: int) -> str:
    return "text-danger" if value > 0 else ""


def _warning(message: str) -> str:
    return (f'<div class="alert alert-warning"><strong>Warning:</strong> '
            f'{_escape_html(message)}</div>\n')


def _case_details(case: TestCaseNode, detailed: bool) -> List[str]:
    """Body lines shared by the printable view and the dialog."""
    lines = [f'<div><strong>Result:</strong> {_escape_html(case.result_text)}</div>\n']
    if detailed and case.result is TestResult.SUCCESS and case.assert_count is not None:
        lines.append(f'<div><strong>Asserts:</strong> {case.assert_count}</div>\n')
    # shown for any result that carries a single failure child, not only Failure/Error
    if case.failure is not None:
        lines.append(f'<div><strong>Message:</strong> {_escape_html(case.failure.message)}</div>\n')
        lines.append(f'<div><strong>Stack Trace:</strong> '
                     f'<pre>{_escape_html(case.failure.stack_trace)}</pre></div>\n')
    if detailed and case.reason is not None:
        lines.append(f'<div><strong>Reason:</strong> {_escape_html(case.reason)}</div>\n')
    return lines


def render_printable_view(fixture: FixtureNode) -> str:
    """Every test case of *fixture*, hidden on screen and shown when printed."""
    parts = ['<div class="visible-print printed-test-result">\n']
    if fixture.reason:
        parts.append(_warning(fixture.reason))
    for case in fixture.test_cases:
        parts.append(f'<div class="panel panel-{style_of(case.result)}">\n')
        parts.append('<div class="panel-heading">\n'
                     f'<h4 class="panel-title">{_escape_html(case.name)}</h4>\n'
                     '</div>\n')
        parts.append('<div class="panel-body">\n')
        parts.extend(_case_details(case, detailed=False))
        parts.append('</div>\n</div>\n')
    parts.append('</div>\n')
    return "".join(parts)


def render_fixture_modal(fixture: FixtureNode, dialog_id: str) -> str:
    """The dialog listing each test case of *fixture* as a collapsible panel."""
    parts = [
        f'<div class="modal fade" id="{dialog_id}" tabindex="-1" role="dialog" '
        f'aria-labelledby="{dialog_id}-label" aria-hidden="true">\n',
        '<div class="modal-dialog">\n<div class="modal-content">\n',
        '<div class="modal-header">\n'
        '<button type="button" class="close" data-dismiss="modal" aria-hidden="true">&times;</button>\n'
        f'<h4 class="modal-title" id="{dialog_id}-label">{_escape_html(fixture.name)}</h4>\n'
        '</div>\n',
        '<div class="modal-body">\n',
        f'<div class="panel-group no-bottom-margin" id="{dialog_id}-accordion">\n',
    ]
    if fixture.reason:
        parts.append(_warning(fixture.reason))
    for i, case in enumerate(fixture.test_cases):
        panel_id = f"{dialog_id}-accordion-{i}"
        parts.append(f'<div class="panel panel-{style_of(case.result)}">\n')
        parts.append('<div class="panel-heading">\n<h4 class="panel-title">\n'
                     f'<a data-toggle="collapse" data-parent="#{dialog_id}-accordion" '
                     f'href="#{panel_id}">{_escape_html(case.name)}</a>\n'
                     '</h4>\n</div>\n')
        parts.append(f'<div id="{panel_id}" class="panel-collapse collapse">\n'
                     '<div class="panel-body">\n')
        parts.extend(_case_details(case, detailed=True))
        parts.append('</div>\n</div>\n</div>\n')
    parts.append('</div>\n</div>\n')
    parts.append('<div class="modal-footer">\n'
                 '<button type="button" class="btn btn-primary" data-dismiss="modal">Close</button>\n'
                 '</div>\n')
    parts.append('</div>\n</div>\n</div>\n')
    return "".join(parts)


def render_fixture(fixture: FixtureNode, index: int) -> str:
    """One panel of the fixture grid, with its printable view and dialog."""
    dialog_id = modal_id(fixture.name, index)
    parts = [
        '<div class="col-md-3">\n',
        f'<div class="panel panel-{style_of(fixture.result)}">\n',
        '<div class="panel-heading">\n',
        f'{_escape_html(fixture.name)} - <br><small>{_escape_html(fixture.namespace)}</small>'
        f'<small class="pull-right">{_escape_html(fixture.elapsed)}s</small>\n',
    ]
    if fixture.reason:
        parts.append('<span class="glyphicon glyphicon-info-sign pull-right info hidden-print" '
                     f'data-toggle="tooltip" title="{_escape_html(fixture.reason)}"></span>\n')
    parts.append('</div>\n<div class="panel-body">\n')
    parts.append('<div class="row">\n')
    parts.append(render_statistics(fixture.stats, "smallstat", ""))
    parts.append('</div>\n<div class="row">\n')

    text_class, icon, label = link_style_of(fixture.result, fixture.result_text)
    parts.append('<div class="text-center" style="font-size: 1.5em;">\n'
                 f'<a href="#{dialog_id}" role="button" data-toggle="modal" '
                 f'class="{text_class} no-underline">\n'
                 f'<span class="glyphicon {icon}"></span>\n'
                 f'<span class="test-result">{_escape_html(label)}</span>\n'
                 '</a>\n</div>\n')

    parts.append(render_printable_view(fixture))
    parts.append(render_fixture_modal(fixture, dialog_id))
    parts.append('</div>\n</div>\n</div>\n</div>\n')
    return "".join(parts)


def render_fixture_grid(fixtures: Iterable[FixtureNode]) -> str:
    return "".join(render_fixture(fixture, index) for index, fixture in enumerate(fixtures))


def render_file_summary(parsed: ParsedResults, file_no: int) -> str:
    """The collapsible section for one input file."""
    stats = parsed.stats
    name = _escape_html(stats.name)
    return (
        f'<div class="accordion" id="accordion{file_no}">\n'
        '<div class="accordion-heading">\n'
        f'<a class="accordion-toggle" data-toggle="collapse" data-parent="#accordion{file_no}" '
        f'href="#collapse{file_no}">\n'
        f'<div class="panel-heading">{name} - Tests: {stats.tests}'
        f' - Failures: <span class="{_danger_if(stats.failures)}">{stats.failures}</span>'
        f' - Errors: <span class="{_danger_if(stats.errors)}">{stats.errors}</span>'
        f' - Ignored: <span class="{_danger_if(stats.ignored)}">{stats.ignored}</span>'
        f' - Skipped: <span class="{_danger_if(stats.skipped)}">{stats.skipped}</span></div>\n'
        '</a></div>\n'
        f'<div id="collapse{file_no}" class="accordion-body collapse">\n'
        '<div class="accordion-inner">\n'
        '<div class="row">\n<div class="col-md-12">\n<div class="panel panel-default">\n'
        f'<div class="panel-heading">Summary - <small>{name}</small></div>\n'
        '<div class="panel-body">\n'
        f'{render_statistics(stats)}'
        '</div>\n</div>\n</div>\n'
        f'{render_fixture_grid(parsed.fixtures)}'
        '</div>\n</div>\n</div>\n</div>\n'
    )


def render_total_summary(totals: RunTotals, sections: str = "") -> str:
    """The always-open summary over all files, wrapping the file *sections*."""
    return (
        '<div class="accordion" id="accordion0">\n'
        '<div class="accordion-heading">\n'
        '<a class="accordion-toggle" data-toggle="collapse" data-parent="#accordion0" '
        'href="#collapse0">\n'
        '<div class="row">\n<div class="col-md-12">\n<div class="panel panel-default">\n'
        '<div class="panel-heading">Total Summary</div>\n'
        '<div class="panel-body">\n'
        f'{stat_cell("Test Suites", totals.file_count, "stat", "val")}'
        f'{render_statistics(totals.stats)}'
        '</div>\n</div>\n</div>\n</div>\n'
        '</a></div>\n'
        '<div id="collapse0" class="accordion-body collapse in">\n'
        '<div class="accordion-inner">\n'
        f'{sections}'
        '</div>\n</div>\n</div>\n'
    )
