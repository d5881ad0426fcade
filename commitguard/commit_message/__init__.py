"""Commit message parsing, formatting and validation package."""

from .formatter import format_message
from .parser import ParseError, clean_message, parse
from .validation import RULES
from .validator import CommitMessageValidator, lint, validate

__all__ = [
    'CommitMessageValidator',
    'ParseError',
    'RULES',
    'clean_message',
    'format_message',
    'lint',
    'parse',
    'validate',
]
