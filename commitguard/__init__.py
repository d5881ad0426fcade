"""commitguard: Conventional Commit message validator."""

__version__ = "0.1.0"

from .commit_message import (  # noqa: E402
    CommitMessageValidator,
    ParseError,
    format_message,
    lint,
    parse,
    validate,
)
from .config import Config, ConfigError  # noqa: E402
from .models import CommitMessage, Footer, Rule, Severity, ValidationResult, Violation  # noqa: E402

__all__ = [
    "CommitMessage",
    "CommitMessageValidator",
    "Config",
    "ConfigError",
    "Footer",
    "ParseError",
    "Rule",
    "Severity",
    "ValidationResult",
    "Violation",
    "format_message",
    "lint",
    "parse",
    "validate",
]
