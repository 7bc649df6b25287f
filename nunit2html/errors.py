"""Errors raised while turning NUnit result files into a report."""
from typing import Optional


class ReportError(Exception):
    """Base class for every failure that aborts report generation."""

    default_message = "report generation failed"

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = str(path)
        self.reason = message or self.default_message
        super().__init__(f"{self.path}: {self.reason}")


class InputNotFoundError(ReportError):
    default_message = "file does not exist"

    def __str__(self) -> str:
        if self.reason != self.default_message:
            return f"'{self.path}': {self.reason}"
        return f"File '{self.path}' does not exist"


class OutputExistsError(ReportError):
    default_message = "output file already exists"

    def __str__(self) -> str:
        return f"Output file '{self.path}' already exists (use --force to overwrite)"


class ResultParseError(ReportError):
    """A result document could not be read into the statistics model."""

    default_message = "could not parse result document"


class MalformedXmlError(ResultParseError):
    default_message = "malformed NUnit result document"


class InvalidNumericError(ResultParseError):
    default_message = "attribute is not a valid count"


class InvalidDateError(ResultParseError):
    default_message = "date/time attributes are not a valid timestamp"
