"""Assemble the complete HTML report from rendered fragments."""
import html
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .assets import Assets, load_assets
from .models import RunTotals
from .parser import parse_file
from .render import render_file_summary, render_total_summary

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Results"

PAGE_STYLE = """
    .page { margin: 15px 0; }
    .no-bottom-margin { margin-bottom: 0; }
    .printed-test-result { margin-top: 15px; }
    .reason-text { margin-top: 15px; }
    .scroller { overflow: scroll; }
    @media print { .panel-collapse { display: block !important; } }
    .val { font-size: 38px; font-weight: bold; margin-top: -10px; }
    .smallstat { font-size: 7px; }
    .stat { font-weight: 800; text-transform: uppercase; font-size: 0.85em; color: #6F6F6F; }
    .test-result { display: block; }
    .no-underline:hover { text-decoration: none; }
    .text-default { color: #555; }
    .text-default:hover { color: #000; }
    .info { color: #888; }
"""

# works with the bundled script and with real jQuery + Bootstrap assets
READY_HANDLER = """
    document.addEventListener('DOMContentLoaded', function() {
        if (window.jQuery && jQuery.fn.tooltip) {
            jQuery('[data-toggle="tooltip"]').tooltip({'placement': 'bottom'});
        } else if (window.NUnitReport) {
            NUnitReport.enableTooltips({'placement': 'bottom'});
        }
    });
"""


def render_header(title: str, assets: Assets) -> str:
    """Document head plus the opening of the page container."""
    scripts = "".join(f"    <script>\n{script}\n    </script>\n" for script in assets.scripts)
    styles = "".join(f"{style}\n" for style in assets.styles)
    return f'''<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1, maximum-scale=1" />
    <title>{html.escape(title)}</title>
{scripts}    <script type="text/javascript">{READY_HANDLER}    </script>
    <style>
{styles}{PAGE_STYLE}    </style>
  </head>
  <body>
<div class="container-fluid page">
'''


def render_footer() -> str:
    return '''</div>
  </body>
</html>
'''


def assemble_document(totals: RunTotals, sections: Iterable[str],
                      title: str = DEFAULT_TITLE, assets: Optional[Assets] = None) -> str:
    """Header, total summary wrapping the file *sections* in order, footer."""
    if assets is None:
        assets = load_assets()
    return "".join((
        render_header(title, assets),
        render_total_summary(totals, "".join(sections)),
        render_footer(),
    ))


def generate_report(paths: Sequence[Union[str, Path]], title: str = DEFAULT_TITLE,
                    assets: Optional[Assets] = None) -> Tuple[str, RunTotals]:
    """Parse every file in order and build the report.

    Returns the document and the totals it summarises. The first file that
    fails to parse aborts the whole run.
    """
    totals = RunTotals()
    sections: List[str] = []
    for path in paths:
        logger.debug("Processing %s", path)
        parsed = parse_file(path)
        totals = totals.add(parsed.stats)
        sections.append(render_file_summary(parsed, totals.file_count))
    return assemble_document(totals, sections, title=title, assets=assets), totals
