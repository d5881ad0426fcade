import os
import pytest
import tempfile
from pathlib import Path
from git import Repo


def _commit(repo: Repo, tmp_dir: str, name: str, message: str) -> None:
    path = Path(tmp_dir) / name
    path.write_text(message)
    repo.index.add([name])
    repo.index.commit(message)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep COMMITGUARD_* variables from the host out of the tests."""
    for name in list(os.environ):
        if name.startswith("COMMITGUARD_"):
            monkeypatch.delenv(name)
    yield


@pytest.fixture
def temp_git_repo():
    """Create a temporary git repository whose history is all valid."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        repo = Repo.init(tmp_dir)
        _commit(repo, tmp_dir, "a.txt", "chore: initial import")
        _commit(repo, tmp_dir, "b.txt", "feat(auth): add passwordless sign-in")
        _commit(repo, tmp_dir, "c.txt", "fix: handle empty tokens\n\nCloses #12\n")
        yield tmp_dir


@pytest.fixture
def temp_git_repo_with_bad_commit():
    """Create a temporary git repository with one invalid commit on top."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        repo = Repo.init(tmp_dir)
        _commit(repo, tmp_dir, "a.txt", "chore: initial import")
        _commit(repo, tmp_dir, "b.txt", "Merge branch 'feature'")
        _commit(repo, tmp_dir, "c.txt", "update stuff")
        yield tmp_dir


@pytest.fixture
def message_file(tmp_path):
    """Write a commit message file the way git prepares COMMIT_EDITMSG."""
    def _write(message: str) -> Path:
        path = tmp_path / "COMMIT_EDITMSG"
        path.write_text(message, encoding="utf-8")
        return path
    return _write
