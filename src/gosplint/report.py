"""Findings and the run-wide report that aggregates them.

A Report holds one insertion-ordered list of findings per category. Each
category has its own add_* entry point; every addition is handed to the
report's on_finding callback right away so callers can stream output while
files are still being processed.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum


class Category(str, Enum):
    """Kinds of complexity smell, in report order."""

    TOO_MANY_STATEMENTS = "TooManyStatements"
    TOO_MANY_PARAMS = "TooManyParams"
    TOO_MANY_RESULTS = "TooManyResults"
    BOOLEAN_PARAM = "BooleanParam"
    EMPTY_IF_BODY = "EmptyIfBody"
    LONG_IF_BODY = "LongIfBody"
    LONG_IF_CHAIN = "LongIfChain"

    @property
    def message(self) -> str:
        return _MESSAGES[self]

    @property
    def has_count(self) -> bool:
        return self not in (Category.BOOLEAN_PARAM, Category.EMPTY_IF_BODY)


_MESSAGES = {
    Category.TOO_MANY_STATEMENTS: "too long",
    Category.TOO_MANY_PARAMS: "too many params",
    Category.TOO_MANY_RESULTS: "too many results",
    Category.BOOLEAN_PARAM: "bool function param",
    Category.EMPTY_IF_BODY: "if with empty body",
    Category.LONG_IF_BODY: "if with long body",
    Category.LONG_IF_CHAIN: "long if/else chain",
}

# Keys of the structured document: (findings key, tally key) per category.
_DOCUMENT_KEYS = {
    Category.TOO_MANY_STATEMENTS: ("Statement", "NumAboveStatementThreshold"),
    Category.TOO_MANY_PARAMS: ("Param", "NumAboveParamThreshold"),
    Category.TOO_MANY_RESULTS: ("Result", "NumAboveResultThreshold"),
    Category.EMPTY_IF_BODY: ("EmptyIfs", "NumEmptyIfs"),
    Category.LONG_IF_CHAIN: ("IfChains", "NumIfChains"),
    Category.BOOLEAN_PARAM: ("BoolParams", "NumWithBoolParams"),
    Category.LONG_IF_BODY: ("LongIfs", "NumLongIfs"),
}

# Order of the tally keys in the structured document.
_TALLY_ORDER = [
    Category.TOO_MANY_STATEMENTS,
    Category.TOO_MANY_PARAMS,
    Category.TOO_MANY_RESULTS,
    Category.LONG_IF_CHAIN,
    Category.EMPTY_IF_BODY,
    Category.BOOLEAN_PARAM,
    Category.LONG_IF_BODY,
]


@dataclass(frozen=True)
class Position:
    """A source location. Line and column are 1-based, offset is in bytes."""

    filename: str
    line: int
    column: int
    offset: int = 0

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"


@dataclass(frozen=True)
class Finding:
    """One flagged occurrence of a smell."""

    file: str
    function: str
    category: Category
    count: int
    position: Position

    def to_dict(self) -> dict:
        return {
            "Filename": self.file,
            "Function": self.function,
            "Count": self.count,
            "Position": {
                "Filename": self.position.filename,
                "Offset": self.position.offset,
                "Line": self.position.line,
                "Column": self.position.column,
            },
        }


def format_finding(finding: Finding) -> str:
    """Render the one-line warning for a finding.

    Pure function: '<position>: function <name> <message>' with ': <count>'
    appended for count-based categories.
    """
    line = f"{finding.position}: function {finding.function} {finding.category.message}"
    if finding.category.has_count:
        line += f": {finding.count}"
    return line


class Report:
    """Aggregate of every finding in a run, grouped by category."""

    def __init__(
        self,
        check_bool_params: bool = True,
        on_finding: Callable[[Finding], None] | None = None,
    ) -> None:
        self.check_bool_params = check_bool_params
        self.on_finding = on_finding
        self._findings: dict[Category, list[Finding]] = {c: [] for c in Category}

    def _add(self, category: Category, finding: Finding) -> None:
        if finding.category is not category:
            raise ValueError(
                f"{finding.category.value} finding added as {category.value}"
            )
        self._findings[category].append(finding)
        if self.on_finding is not None:
            self.on_finding(finding)

    def add_statement(self, finding: Finding) -> None:
        self._add(Category.TOO_MANY_STATEMENTS, finding)

    def add_param(self, finding: Finding) -> None:
        self._add(Category.TOO_MANY_PARAMS, finding)

    def add_bool_param(self, finding: Finding) -> None:
        self._add(Category.BOOLEAN_PARAM, finding)

    def add_result(self, finding: Finding) -> None:
        self._add(Category.TOO_MANY_RESULTS, finding)

    def add_empty_if_body(self, finding: Finding) -> None:
        self._add(Category.EMPTY_IF_BODY, finding)

    def add_long_if_body(self, finding: Finding) -> None:
        self._add(Category.LONG_IF_BODY, finding)

    def add_if_chain(self, finding: Finding) -> None:
        self._add(Category.LONG_IF_CHAIN, finding)

    def findings(self, category: Category) -> list[Finding]:
        """Return a copy of the findings recorded for one category."""
        return list(self._findings[category])

    def count(self, category: Category) -> int:
        return len(self._findings[category])

    def counts(self) -> dict[Category, int]:
        return {c: len(found) for c, found in self._findings.items()}

    def is_clean(self) -> bool:
        """True when nothing was flagged.

        Boolean-parameter findings are disregarded when that check is off.
        """
        for category, found in self._findings.items():
            if category is Category.BOOLEAN_PARAM and not self.check_bool_params:
                continue
            if found:
                return False
        return True

    def to_dict(self) -> dict:
        """Build the structured report document.

        Finding lists come first, then the tallies. An empty list is
        emitted as None so consumers of the existing document format see
        null rather than [].
        """
        doc: dict = {}
        for category, (list_key, _) in _DOCUMENT_KEYS.items():
            found = self._findings[category]
            doc[list_key] = [f.to_dict() for f in found] if found else None
        for category in _TALLY_ORDER:
            doc[_DOCUMENT_KEYS[category][1]] = len(self._findings[category])
        return doc


# ---------------------------------------------------------------------------
# Summary rendering
# ---------------------------------------------------------------------------

SUMMARY_LABELS = [
    (Category.TOO_MANY_STATEMENTS, "Number of functions above statement threshold"),
    (Category.TOO_MANY_PARAMS, "Number of functions above param threshold"),
    (Category.TOO_MANY_RESULTS, "Number of functions above result threshold"),
    (Category.LONG_IF_CHAIN, "Number of long if/else chains"),
    (Category.EMPTY_IF_BODY, "Number of empty if bodies"),
    (Category.LONG_IF_BODY, "Number of long if bodies"),
    (Category.BOOLEAN_PARAM, "Number of functions with bool params"),
]


def format_summary(report: Report) -> list[str]:
    """Return the labeled tally lines for a report.

    The bool-param line is left out when that check is disabled.
    """
    counts = report.counts()
    lines = []
    for category, label in SUMMARY_LABELS:
        if category is Category.BOOLEAN_PARAM and not report.check_bool_params:
            continue
        lines.append(f"{label}: {counts[category]}")
    return lines
