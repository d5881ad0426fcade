"""Commit message validation."""
import re
from typing import Optional, Sequence

from ..config import Config
from ..models import CommitMessage, Severity, ValidationResult, Violation
from .parser import ParseError, clean_message, parse
from .validation import RULES, RuleCheck


class CommitMessageValidator:
    """Validates commit messages against conventional commit standards."""

    def __init__(self, config: Optional[Config] = None, rules: Sequence[RuleCheck] = RULES):
        self.config = config or Config()
        self.rules = tuple(rules)
        self._ignore = [re.compile(p) for p in self.config.ignore_patterns]

    def is_ignored(self, raw: str) -> bool:
        header = raw.lstrip("\r\n").split("\n", 1)[0]
        return any(pattern.search(header) for pattern in self._ignore)

    def validate(self, message: CommitMessage) -> ValidationResult:
        """Run every rule against a parsed message."""
        findings = [v for rule in self.rules for v in rule(message, self.config)]
        return ValidationResult(
            message=message,
            violations=tuple(v for v in findings if v.severity == Severity.ERROR),
            warnings=tuple(v for v in findings if v.severity == Severity.WARNING),
        )

    def lint(self, raw: str, clean: bool = False) -> ValidationResult:
        """Parse and validate raw text; never raises for bad messages."""
        if clean:
            raw = clean_message(raw, self.config.comment_char)
        if self.is_ignored(raw):
            return ValidationResult(skipped=True)
        try:
            message = parse(raw, self.config)
        except ParseError as e:
            violation = Violation(
                rule=e.rule,
                severity=Severity.ERROR,
                message=e.message,
                line=e.line_number,
                text=e.line,
            )
            return ValidationResult(violations=(violation,))
        return self.validate(message)


def validate(message: CommitMessage, config: Optional[Config] = None) -> ValidationResult:
    return CommitMessageValidator(config).validate(message)


def lint(raw: str, config: Optional[Config] = None, clean: bool = False) -> ValidationResult:
    return CommitMessageValidator(config).lint(raw, clean=clean)
