"""Command line entry point: ``nunit2html -o report.html TestResult*.xml``."""
import argparse
import logging
import os
import sys
from typing import List, Optional, Sequence, Tuple

from .assets import load_assets
from .document import DEFAULT_TITLE, generate_report
from .errors import InputNotFoundError, OutputExistsError, ReportError

DEFAULT_OUTPUT = "NUnitOutput.html"

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(levelname)s: %(message)s'
    )


def resolve_output(inputs: Sequence[str], output: Optional[str]) -> Tuple[List[str], str]:
    """Apply the default output naming rules.

    One input writes next to it with an ``.html`` extension, two inputs treat
    the second as the output path, more than two write ``NUnitOutput.html``.
    """
    inputs = list(inputs)
    if output is not None:
        return inputs, output
    if len(inputs) == 1:
        return inputs, os.path.splitext(inputs[0])[0] + ".html"
    if len(inputs) == 2:
        return inputs[:1], inputs[1]
    return inputs, DEFAULT_OUTPUT


def check_inputs_and_output(inputs: Sequence[str], output: str,
                            overwrite: bool = False) -> List[ReportError]:
    """Every input must exist and the output must not (unless *overwrite*).

    All problems are returned together rather than stopping at the first.
    """
    problems: List[ReportError] = []
    for path in inputs:
        if not os.path.isfile(path):
            problems.append(InputNotFoundError(path))
    if os.path.exists(output) and not overwrite:
        problems.append(OutputExistsError(output))
    return problems


def write_report(path: str, text: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="nunit2html",
        description="Convert NUnit XML result files to a single HTML report")
    ap.add_argument("inputs", nargs="+", help="NUnit XML result files (e.g., TestResult.xml)")
    ap.add_argument("-o", "--output", default=None,
                    help=("Output HTML path (default: the input with an .html extension; "
                          f"with two inputs the second one; otherwise {DEFAULT_OUTPUT})"))
    ap.add_argument("-f", "--force", action="store_true", help="Overwrite existing output file")
    ap.add_argument("-v", "--verbose", action="store_true", help="Output status messages")
    ap.add_argument("--title", default=DEFAULT_TITLE, help="Report title")
    ap.add_argument("--assets-dir", default=None,
                    help="Directory of .js/.css files to embed instead of the bundled ones")
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the script."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    inputs, output = resolve_output(args.inputs, args.output)
    problems = check_inputs_and_output(inputs, output, args.force)
    for problem in problems:
        print(f"Error: {problem}", file=sys.stderr)
    if problems:
        return 1

    try:
        assets = load_assets(args.assets_dir)
        html_str, totals = generate_report(inputs, title=args.title, assets=assets)
    except ReportError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.debug("Writing output to %s", output)
    try:
        write_report(output, html_str)
    except OSError as e:
        print(f"Error: {output}: {e.strerror or e}", file=sys.stderr)
        return 1

    print(f"[V] Wrote {output}")
    stats = totals.stats
    print(f"Files: {totals.file_count}, Tests: {stats.tests}, "
          f"Failures: {stats.failures}, Errors: {stats.errors}, "
          f"Ignored: {stats.ignored}, Skipped: {stats.skipped}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
