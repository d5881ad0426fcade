"""Diagnostic line rendering."""
from typing import List

from .models import ValidationResult, Violation


def format_violation(violation: Violation, source: str = "<stdin>") -> str:
    """Render one violation as ``source:line:column: severity [Rule] message: "span"``."""
    line = (
        f"{source}:{violation.line}:{violation.column}: "
        f"{violation.severity.value} [{violation.rule.value}] {violation.message}"
    )
    if violation.text:
        line += f': "{violation.text}"'
    return line


def format_result(result: ValidationResult, source: str = "<stdin>") -> List[str]:
    return [format_violation(v, source) for v in result.all_findings()]
