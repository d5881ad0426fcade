"""Shared models for commitguard."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class CommitType(str, Enum):
    FEAT = "feat"
    FIX = "fix"
    DOCS = "docs"
    STYLE = "style"
    REFACTOR = "refactor"
    PERF = "perf"
    TEST = "test"
    BUILD = "build"
    CI = "ci"
    CHORE = "chore"
    REVERT = "revert"


DEFAULT_TYPES = tuple(t.value for t in CommitType)

BREAKING_CHANGE = "BREAKING CHANGE"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Rule(str, Enum):
    """Tags naming every check a message can fail."""

    # Parse errors
    EMPTY_MESSAGE = "EmptyMessage"
    MALFORMED_HEADER = "MalformedHeader"
    UNKNOWN_TYPE = "UnknownType"

    # Validation errors and warnings
    EMPTY_SUBJECT = "EmptySubject"
    SUBJECT_TOO_LONG = "SubjectTooLong"
    SUBJECT_LENGTH_ADVISORY = "SubjectLengthAdvisory"
    SUBJECT_ENDS_WITH_PERIOD = "SubjectEndsWithPeriod"
    SCOPE_NOT_KEBAB_CASE = "ScopeNotKebabCase"
    SCOPE_REQUIRED = "ScopeRequired"
    SCOPE_NOT_ALLOWED = "ScopeNotAllowed"
    MISSING_BLANK_LINE = "MissingBlankLine"
    BODY_LINE_TOO_LONG = "BodyLineTooLong"
    MISSING_BREAKING_DETAIL = "MissingBreakingDetail"
    UNKNOWN_FOOTER_KEY = "UnknownFooterKey"
    INVALID_CO_AUTHOR = "InvalidCoAuthor"


@dataclass(frozen=True)
class Footer:
    key: str
    value: str
    line: int = field(default=0, compare=False, repr=False)


@dataclass(frozen=True)
class SourceMap:
    """Where the parts of a parsed message sat in the raw input.

    Line numbers are 1-based. ``paragraph_lines`` holds the first line of
    each body paragraph.
    """

    header: str
    header_line: int = 1
    paragraph_lines: Tuple[int, ...] = ()
    blank_after_header: bool = True


@dataclass(frozen=True)
class CommitMessage:
    type: str
    subject: str
    scope: Optional[str] = None
    breaking: bool = False
    body: Tuple[str, ...] = ()
    footers: Tuple[Footer, ...] = ()
    source: Optional[SourceMap] = field(default=None, compare=False, repr=False)

    @property
    def header(self) -> str:
        scope = f"({self.scope})" if self.scope else ""
        bang = "!" if self.breaking else ""
        return f"{self.type}{scope}{bang}: {self.subject}"

    def footer_values(self, key: str) -> Tuple[str, ...]:
        """All values for ``key``, compared case-insensitively."""
        wanted = key.lower()
        return tuple(f.value for f in self.footers if f.key.lower() == wanted)

    @property
    def breaking_detail(self) -> Optional[str]:
        for value in self.footer_values(BREAKING_CHANGE):
            if value.strip():
                return value
        return None


@dataclass(frozen=True)
class Violation:
    rule: Rule
    severity: Severity
    message: str
    line: int = 1
    column: int = 1
    text: str = ""


@dataclass(frozen=True)
class ValidationResult:
    message: Optional[CommitMessage] = None
    violations: Tuple[Violation, ...] = ()
    warnings: Tuple[Violation, ...] = ()
    skipped: bool = False

    @property
    def ok(self) -> bool:
        return not self.violations

    def all_findings(self) -> Tuple[Violation, ...]:
        """Errors and warnings ordered by position."""
        return tuple(sorted(self.violations + self.warnings, key=lambda v: (v.line, v.column)))
