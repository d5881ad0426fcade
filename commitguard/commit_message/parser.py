"""Conventional commit message parsing."""
import re
from typing import List, Optional, Tuple

from ..config import Config
from ..models import BREAKING_CHANGE, CommitMessage, Footer, Rule, SourceMap

HEADER_RE = re.compile(
    r"^(?P<type>[A-Za-z][\w-]*)"
    r"(?P<bang_before>!)?"
    r"(?:\((?P<scope>[^()\r\n]+)\))?"
    r"(?P<bang_after>!)?"
    r":(?:\s+(?P<subject>.*))?$"
)

FOOTER_RE = re.compile(
    r"^(?P<key>BREAKING[ -]CHANGE|[A-Za-z][\w-]*)"
    r"(?:: (?P<value>.*)|:$| (?P<ref>#.*))$"
)

SCISSORS = "------------------------ >8 ------------------------"


class ParseError(Exception):
    """Raised when a message does not have a usable conventional header."""

    def __init__(self, rule: Rule, message: str, line: str = "", line_number: int = 1):
        super().__init__(message)
        self.rule = rule
        self.message = message
        self.line = line
        self.line_number = line_number


def clean_message(raw: str, comment_char: str = "#") -> str:
    """Strip what git itself strips from a message file.

    Comment lines and everything below the scissors line are removed,
    trailing whitespace is dropped and leading/trailing blank lines are
    trimmed.
    """
    lines = []
    for line in raw.replace("\r\n", "\n").split("\n"):
        if line.startswith(f"{comment_char} {SCISSORS}"):
            break
        if line.startswith(comment_char):
            continue
        lines.append(line.rstrip())

    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()
    return "\n".join(lines)


def _split_paragraphs(lines: List[str], first_line: int) -> List[Tuple[int, List[str]]]:
    """Group lines into blank-line separated paragraphs with start line numbers."""
    paragraphs = []
    current: List[str] = []
    start = first_line
    for offset, line in enumerate(lines):
        if line.strip():
            if not current:
                start = first_line + offset
            current.append(line)
        elif current:
            paragraphs.append((start, current))
            current = []
    if current:
        paragraphs.append((start, current))
    return paragraphs


def _parse_footers(paragraphs: List[Tuple[int, List[str]]]) -> List[Footer]:
    footers: List[Footer] = []
    for start, lines in paragraphs:
        key = value = None
        line_no = start
        for offset, line in enumerate(lines):
            match = FOOTER_RE.match(line)
            if match:
                if key is not None:
                    footers.append(Footer(key, value, line_no))
                key = match.group("key")
                if key.upper().replace("-", " ") == BREAKING_CHANGE:
                    key = BREAKING_CHANGE
                value = match.group("value") or match.group("ref") or ""
                line_no = start + offset
            else:
                value = f"{value}\n{line}" if value else line
        if key is not None:
            footers.append(Footer(key, value, line_no))
    return footers


def parse(raw: str, config: Optional[Config] = None) -> CommitMessage:
    """Parse a raw commit message into a :class:`CommitMessage`.

    Raises:
        ParseError: If the header is missing, malformed or uses an
            unknown type.
    """
    config = config or Config()
    lines = raw.replace("\r\n", "\n").split("\n")

    leading = 0
    while lines and not lines[0].strip():
        lines.pop(0)
        leading += 1
    if not lines:
        raise ParseError(Rule.EMPTY_MESSAGE, "Empty commit message")

    header = lines[0].rstrip()
    match = HEADER_RE.match(header)
    if not match:
        raise ParseError(
            Rule.MALFORMED_HEADER,
            "Header must follow format: type(scope): subject",
            header,
            leading + 1,
        )

    commit_type = match.group("type")
    if commit_type not in config.allowed_types:
        raise ParseError(
            Rule.UNKNOWN_TYPE,
            f"Unknown commit type '{commit_type}' (allowed: {', '.join(config.allowed_types)})",
            header,
            leading + 1,
        )

    paragraphs = _split_paragraphs(lines[1:], leading + 2)

    # The trailing run of paragraphs opening with a footer token is the footer block.
    split = len(paragraphs)
    while split > 0 and FOOTER_RE.match(paragraphs[split - 1][1][0]):
        split -= 1
    body_paragraphs = paragraphs[:split]
    footers = _parse_footers(paragraphs[split:])

    breaking = bool(match.group("bang_before") or match.group("bang_after"))
    breaking = breaking or any(f.key == BREAKING_CHANGE for f in footers)

    source = SourceMap(
        header=header,
        header_line=leading + 1,
        paragraph_lines=tuple(start for start, _ in body_paragraphs),
        blank_after_header=len(lines) < 2 or not lines[1].strip(),
    )

    return CommitMessage(
        type=commit_type,
        scope=match.group("scope"),
        breaking=breaking,
        subject=(match.group("subject") or "").strip(),
        body=tuple("\n".join(p) for _, p in body_paragraphs),
        footers=tuple(footers),
        source=source,
    )
