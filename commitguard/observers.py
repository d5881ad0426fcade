"""Observer pattern for validation runs."""

from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

from .models import Severity, ValidationResult
from .report import format_result


class ValidationObserver(ABC):
    """Abstract base class for validation observers."""

    @abstractmethod
    def on_message_checked(self, source: str, result: ValidationResult) -> None:
        """Called after a single message has been checked."""
        pass

    @abstractmethod
    def on_run_completed(self, checked: int, failed: int) -> None:
        """Called once every message of a run has been checked."""
        pass


class ConsoleReportObserver(ValidationObserver):
    """Observer that reports diagnostics to the console."""

    def __init__(self, console: Optional[Console] = None, quiet: bool = False):
        self.console = console or Console(soft_wrap=True)
        self.quiet = quiet

    def on_message_checked(self, source: str, result: ValidationResult) -> None:
        if result.skipped:
            if not self.quiet:
                self.console.print(f"[dim]{escape(source)}: skipped (ignored pattern)[/dim]")
            return

        for finding, line in zip(result.all_findings(), format_result(result, source)):
            if self.quiet and finding.severity == Severity.WARNING:
                continue
            style = "red" if finding.severity == Severity.ERROR else "yellow"
            self.console.print(line, style=style, markup=False, highlight=False)

    def on_run_completed(self, checked: int, failed: int) -> None:
        if failed:
            self.console.print(f"[red]{failed} of {checked} commit message(s) failed validation[/red]")
        elif not self.quiet:
            self.console.print(f"[green]{checked} commit message(s) passed validation[/green]")


class FileLogObserver(ValidationObserver):
    """Observer that logs validation results to a file."""

    def __init__(self, log_file: str):
        self.log_file = Path(log_file)
        # Ensure the parent directory exists
        self.log_file.parent.mkdir(parents=True, exist_ok=True)

    def _log(self, message: str) -> None:
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        with self.log_file.open("a", encoding="utf-8") as f:
            f.write(f"{timestamp} - {message}\n")

    def on_message_checked(self, source: str, result: ValidationResult) -> None:
        if result.skipped:
            self._log(f"Skipped {source}")
            return
        status = "Passed" if result.ok else "Failed"
        self._log(f"{status} {source}")
        for line in format_result(result, source):
            self._log(line)

    def on_run_completed(self, checked: int, failed: int) -> None:
        self._log(f"Checked {checked} message(s), {failed} failed")
