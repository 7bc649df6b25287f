"""Convert NUnit XML result files into a single, self-contained HTML report."""
from .document import generate_report
from .errors import (
    InputNotFoundError,
    InvalidDateError,
    InvalidNumericError,
    MalformedXmlError,
    OutputExistsError,
    ReportError,
    ResultParseError,
)
from .models import RunTotals, TestResult, TestRunStats
from .parser import parse_file

__version__ = "1.0.0"
