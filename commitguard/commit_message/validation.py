"""Commit message rules.

Every rule is a plain function taking the parsed message and the active
configuration and returning the violations it finds. ``RULES`` is the
table the validator runs; all rules always run so a single pass reports
everything that is wrong with a message.
"""
import re
from typing import Callable, Iterable, List, Tuple

from ..config import Config
from ..models import BREAKING_CHANGE, CommitMessage, Rule, Severity, Violation
from .parser import HEADER_RE

KEBAB_CASE_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
CO_AUTHOR_RE = re.compile(r"^[^<>\n]*[^<>\s][^<>\n]* <[^<>@\s]+@[^<>@\s]+>$")
CO_AUTHOR_KEY = "co-authored-by"

RuleCheck = Callable[[CommitMessage, Config], Iterable[Violation]]


class _Layout:
    """Line and column positions of a message, raw or canonical."""

    def __init__(self, message: CommitMessage):
        source = message.source
        self.header = source.header if source else message.header
        self.header_line = source.header_line if source else 1
        match = HEADER_RE.match(self.header)
        self.subject_column = (
            match.start("subject") + 1 if match and match.group("subject") is not None
            else len(self.header) + 1
        )
        self.scope_column = (
            match.start("scope") + 1 if match and match.group("scope") is not None else 1
        )

        if source and len(source.paragraph_lines) == len(message.body):
            self.paragraph_lines = source.paragraph_lines
        else:
            starts = []
            line = 3
            for paragraph in message.body:
                starts.append(line)
                line += paragraph.count("\n") + 2
            self.paragraph_lines = tuple(starts)

        footer_line = 3 + sum(p.count("\n") + 2 for p in message.body)
        footer_lines = []
        for footer in message.footers:
            footer_lines.append(footer.line or footer_line)
            footer_line += footer.value.count("\n") + 1
        self.footer_lines = tuple(footer_lines)


def _error(rule: Rule, message: str, line: int = 1, column: int = 1, text: str = "") -> Violation:
    return Violation(rule, Severity.ERROR, message, line, column, text)


def _warning(rule: Rule, message: str, line: int = 1, column: int = 1, text: str = "") -> Violation:
    return Violation(rule, Severity.WARNING, message, line, column, text)


def check_subject_empty(message: CommitMessage, config: Config) -> List[Violation]:
    if message.subject:
        return []
    layout = _Layout(message)
    return [_error(Rule.EMPTY_SUBJECT, "Subject must not be empty",
                   line=layout.header_line, column=layout.subject_column, text=layout.header)]


def check_subject_length(message: CommitMessage, config: Config) -> List[Violation]:
    length = len(message.subject)
    if length <= config.max_subject_length:
        return []
    layout = _Layout(message)
    return [_error(
        Rule.SUBJECT_TOO_LONG,
        f"Subject is too long ({length} > {config.max_subject_length})",
        line=layout.header_line,
        column=layout.subject_column + config.max_subject_length,
        text=message.subject[config.max_subject_length:],
    )]


def check_subject_advisory_length(message: CommitMessage, config: Config) -> List[Violation]:
    """Warn when the subject passes the recommended length.

    Subjects past the hard limit get no warning: ``SubjectTooLong`` already
    reports them, and every other rule still runs.
    """
    length = len(message.subject)
    limit = config.recommended_subject_length
    if length <= limit or length > config.max_subject_length:
        return []
    layout = _Layout(message)
    return [_warning(
        Rule.SUBJECT_LENGTH_ADVISORY,
        f"Subject is longer than the recommended {limit} characters ({length})",
        line=layout.header_line,
        column=layout.subject_column + limit,
        text=message.subject[limit:],
    )]


def check_subject_period(message: CommitMessage, config: Config) -> List[Violation]:
    if not message.subject.endswith("."):
        return []
    layout = _Layout(message)
    return [_error(
        Rule.SUBJECT_ENDS_WITH_PERIOD,
        "Subject should not end with a period",
        line=layout.header_line,
        column=layout.subject_column + len(message.subject) - 1,
        text=".",
    )]


def check_scope_case(message: CommitMessage, config: Config) -> List[Violation]:
    if message.scope is None or KEBAB_CASE_RE.match(message.scope):
        return []
    layout = _Layout(message)
    return [_error(
        Rule.SCOPE_NOT_KEBAB_CASE,
        "Scope must be lowercase kebab-case",
        line=layout.header_line,
        column=layout.scope_column,
        text=message.scope,
    )]


def check_scope_required(message: CommitMessage, config: Config) -> List[Violation]:
    if not config.require_scope or message.scope:
        return []
    layout = _Layout(message)
    return [_error(Rule.SCOPE_REQUIRED, "Scope is required", line=layout.header_line,
                   column=len(message.type) + 1, text=message.type)]


def check_scope_allowed(message: CommitMessage, config: Config) -> List[Violation]:
    if not config.allowed_scopes or message.scope is None:
        return []
    if message.scope in config.allowed_scopes:
        return []
    layout = _Layout(message)
    return [_error(
        Rule.SCOPE_NOT_ALLOWED,
        f"Scope '{message.scope}' is not allowed (allowed: {', '.join(config.allowed_scopes)})",
        line=layout.header_line,
        column=layout.scope_column,
        text=message.scope,
    )]


def check_blank_line(message: CommitMessage, config: Config) -> List[Violation]:
    if message.source is None or message.source.blank_after_header:
        return []
    return [_error(Rule.MISSING_BLANK_LINE, "Leave one blank line after the header",
                   line=message.source.header_line + 1)]


def check_body_line_length(message: CommitMessage, config: Config) -> List[Violation]:
    limit = config.max_body_line_length
    if not limit:
        return []
    layout = _Layout(message)

    blocks: List[Tuple[int, str]] = list(zip(layout.paragraph_lines, message.body))
    for footer, line in zip(message.footers, layout.footer_lines):
        # Footer values continue on following lines; the key shares the first.
        first, *rest = footer.value.split("\n")
        blocks.append((line, "\n".join([f"{footer.key}: {first}", *rest])))

    violations = []
    for start, text in blocks:
        for offset, line in enumerate(text.split("\n")):
            if len(line) > limit:
                violations.append(_warning(
                    Rule.BODY_LINE_TOO_LONG,
                    f"Body line is too long ({len(line)} > {limit})",
                    line=start + offset,
                    column=limit + 1,
                    text=line[limit:],
                ))
    return violations


def check_breaking_detail(message: CommitMessage, config: Config) -> List[Violation]:
    if not message.breaking or message.breaking_detail:
        return []
    layout = _Layout(message)
    return [_error(
        Rule.MISSING_BREAKING_DETAIL,
        f"Breaking change needs a '{BREAKING_CHANGE}:' footer describing it",
        line=layout.header_line,
        text=layout.header,
    )]


def check_footer_keys(message: CommitMessage, config: Config) -> List[Violation]:
    allowed = {key.lower() for key in config.footer_allow_list}
    layout = _Layout(message)
    return [
        _warning(Rule.UNKNOWN_FOOTER_KEY, f"Unknown footer key '{footer.key}'",
                 line=line, text=footer.key)
        for footer, line in zip(message.footers, layout.footer_lines)
        if footer.key.lower() not in allowed
    ]


def check_co_authors(message: CommitMessage, config: Config) -> List[Violation]:
    layout = _Layout(message)
    return [
        _error(
            Rule.INVALID_CO_AUTHOR,
            "Co-authored-by must look like 'Name <email>'",
            line=line,
            column=len(footer.key) + 3,
            text=footer.value,
        )
        for footer, line in zip(message.footers, layout.footer_lines)
        if footer.key.lower() == CO_AUTHOR_KEY and not CO_AUTHOR_RE.match(footer.value.strip())
    ]


RULES: Tuple[RuleCheck, ...] = (
    check_subject_empty,
    check_subject_length,
    check_subject_advisory_length,
    check_subject_period,
    check_scope_case,
    check_scope_required,
    check_scope_allowed,
    check_blank_line,
    check_body_line_length,
    check_breaking_detail,
    check_footer_keys,
    check_co_authors,
)
