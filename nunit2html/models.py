"""Statistics model and read-only views of a parsed NUnit result document."""
import datetime as dt
import enum
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_EVEN
from typing import Optional, Tuple

COUNTERS = (
    "tests", "errors", "failures", "not_run",
    "inconclusive", "ignored", "skipped", "invalid",
)


class TestResult(enum.Enum):
    """Outcome of a fixture or test case, read from its ``result`` attribute."""

    SUCCESS = "success"
    IGNORED = "ignored"
    FAILURE = "failure"
    ERROR = "error"
    NOT_RUNNABLE = "notrunnable"
    UNKNOWN = "unknown"

    @classmethod
    def from_attr(cls, value: str) -> "TestResult":
        """Map a raw ``result`` attribute (any case) onto the enum."""
        try:
            return cls(value.lower())
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_failing(self) -> bool:
        return self in (TestResult.FAILURE, TestResult.ERROR)


def strip_namespace(name: str) -> str:
    """Return everything after the last '.' of *name* (or *name* itself)."""
    return name[name.rfind(".") + 1:]


@dataclass
class TestRunStats:
    """Counters for a whole run or for a single fixture.

    ``tests`` of a run comes straight from the document's ``total`` attribute,
    while fixture stats are recounted from their test cases (see
    :func:`nunit2html.parser.fixture_stats`).
    """

    name: str = ""
    tests: int = 0
    errors: int = 0
    failures: int = 0
    not_run: int = 0
    inconclusive: int = 0
    ignored: int = 0
    skipped: int = 0
    invalid: int = 0
    platforms: Tuple[str, ...] = ()
    timestamp: Optional[dt.datetime] = None

    def __post_init__(self):
        for counter in COUNTERS:
            if getattr(self, counter) < 0:
                raise ValueError(f"{counter} must not be negative")
        self.platforms = tuple(self.platforms)

    @property
    def failure_rate(self) -> Decimal:
        """Errors and failures as a percentage of tests, one decimal place."""
        if self.tests > 0:
            rate = Decimal(self.errors + self.failures) / Decimal(self.tests) * 100
            return rate.quantize(Decimal("0.1"), rounding=ROUND_HALF_EVEN)
        return Decimal(0)

    @property
    def success_rate(self) -> Decimal:
        return 100 - self.failure_rate

    @property
    def platform_label(self) -> str:
        return ", ".join(self.platforms)

    def counters(self) -> Tuple[int, ...]:
        return tuple(getattr(self, c) for c in COUNTERS)

    def __add__(self, other: "TestRunStats") -> "TestRunStats":
        if not isinstance(other, TestRunStats):
            return NotImplemented
        platforms = list(self.platforms)
        for platform in other.platforms:
            if platform not in platforms:
                platforms.append(platform)
        summed = {c: getattr(self, c) + getattr(other, c) for c in COUNTERS}
        return TestRunStats(name=self.name, platforms=tuple(platforms), **summed)


@dataclass(frozen=True)
class FailureDetail:
    message: str
    stack_trace: str


@dataclass(frozen=True)
class TestCaseNode:
    name: str
    full_name: str
    result: TestResult
    result_text: str
    executed: bool
    assert_count: Optional[int] = None
    failure: Optional[FailureDetail] = None
    reason: Optional[str] = None


@dataclass(frozen=True)
class FixtureNode:
    name: str
    namespace: str
    elapsed: str
    result: TestResult
    result_text: str
    stats: TestRunStats
    reason: Optional[str] = None
    test_cases: Tuple[TestCaseNode, ...] = ()


@dataclass(frozen=True)
class ParsedResults:
    """Everything read from one input file."""

    source: str
    stats: TestRunStats
    fixtures: Tuple[FixtureNode, ...] = ()


@dataclass(frozen=True)
class RunTotals:
    """Running total across input files; ``add`` returns a new value."""

    file_count: int = 0
    stats: TestRunStats = field(default_factory=TestRunStats)

    def add(self, stats: TestRunStats) -> "RunTotals":
        return RunTotals(file_count=self.file_count + 1, stats=self.stats + stats)
