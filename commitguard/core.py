"""Core functionality for commitguard."""
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from .commit_message import CommitMessageValidator
from .config import Config
from .models import ValidationResult
from .observers import ValidationObserver


class CheckError(Exception):
    """Raised when the input to check cannot be obtained."""


class MessageChecker:
    """Checks commit messages and notifies observers of the results."""

    def __init__(self, config: Optional[Config] = None,
                 observers: Optional[Iterable[ValidationObserver]] = None):
        self.config = config or Config()
        self.validator = CommitMessageValidator(self.config)
        self.observers: List[ValidationObserver] = list(observers or [])

    def add_observer(self, observer: ValidationObserver) -> None:
        self.observers.append(observer)

    def remove_observer(self, observer: ValidationObserver) -> None:
        self.observers.remove(observer)

    def _notify(self, source: str, result: ValidationResult) -> None:
        for observer in self.observers:
            observer.on_message_checked(source, result)

    def finish(self, results: List[ValidationResult]) -> None:
        """Tell observers the run is over."""
        failed = sum(1 for r in results if not r.ok)
        for observer in self.observers:
            observer.on_run_completed(len(results), failed)

    def check_text(self, raw: str, source: str = "<stdin>", clean: bool = True) -> ValidationResult:
        """Check one raw message, as found in a commit message file."""
        result = self.validator.lint(raw, clean=clean)
        self._notify(source, result)
        return result

    def check_file(self, path: Path) -> ValidationResult:
        """Check the message stored in a file such as ``.git/COMMIT_EDITMSG``."""
        path = Path(path)
        try:
            raw = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise CheckError(f"Cannot read commit message file {path}: {e}") from e
        return self.check_text(raw, source=str(path))

    def iter_commit_messages(self, repo_path: Path, rev_range: str) -> Iterator[Tuple[str, str]]:
        """Yield ``(short sha, message)`` for every commit in a revision range."""
        try:
            repo = Repo(str(repo_path), search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise CheckError(f"Not a git repository: {repo_path}") from e

        try:
            commits = list(repo.iter_commits(rev_range))
        except (GitCommandError, ValueError) as e:
            raise CheckError(f"Invalid revision range '{rev_range}': {e}") from e

        for commit in commits:
            message = commit.message
            if isinstance(message, bytes):
                message = message.decode("utf-8", errors="replace")
            yield commit.hexsha[:7], message

    def check_range(self, repo_path: Path, rev_range: str) -> List[ValidationResult]:
        """Check every commit message in a git revision range, newest first."""
        # Commit objects hold the message exactly as stored; no comment stripping.
        return [
            self.check_text(message, source=sha, clean=False)
            for sha, message in self.iter_commit_messages(repo_path, rev_range)
        ]

    @staticmethod
    def exit_code(results: Iterable[ValidationResult], strict: bool = False) -> int:
        """0 when every message passed, 1 otherwise."""
        for result in results:
            if not result.ok or (strict and result.warnings):
                return 1
        return 0
