"""Tests for GitRepository against a real git work tree."""

import shutil
import subprocess
from unittest.mock import Mock

import pytest

from jetgit.conflict.resolver import ConflictResolver
from jetgit.git.errors import GitError, GitErrorCodes
from jetgit.git.integration import get_file_conflicts, get_file_diff, resolve_file
from jetgit.git.repository import GitRepository, Repository

pytestmark = pytest.mark.skipif(
    shutil.which("git") is None, reason="git not installed"
)


def git(cwd, *args):
    subprocess.run(
        ["git", "-c", "user.name=Test", "-c", "user.email=test@example.com",
         *args],
        cwd=cwd,
        check=False,
        capture_output=True,
    )


@pytest.fixture
def merge_conflict(tmp_path):
    """Repository mid-merge with one conflicted file."""
    git(tmp_path, "init", "-q", "-b", "main")
    (tmp_path / "app.py").write_text("value = 0\n")
    (tmp_path / "other.txt").write_text("unchanged\n")
    git(tmp_path, "add", ".")
    git(tmp_path, "commit", "-q", "-m", "base")

    git(tmp_path, "checkout", "-q", "-b", "feature")
    (tmp_path / "app.py").write_text("value = 2\n")
    git(tmp_path, "commit", "-q", "-am", "feature")

    git(tmp_path, "checkout", "-q", "main")
    (tmp_path / "app.py").write_text("value = 1\n")
    git(tmp_path, "commit", "-q", "-am", "main")

    git(tmp_path, "merge", "feature")
    return tmp_path


def test_not_a_repository(tmp_path):
    with pytest.raises(GitError) as exc_info:
        GitRepository(tmp_path)

    assert exc_info.value.code == GitErrorCodes.REPOSITORY_NOT_FOUND
    assert exc_info.value.recoverable is False


def test_conflicted_files(merge_conflict):
    repo = GitRepository(merge_conflict)

    assert isinstance(repo, Repository)
    assert repo.conflicted_files() == ["app.py"]


def test_read_and_show(merge_conflict):
    repo = GitRepository(merge_conflict)

    assert "<<<<<<< HEAD" in repo.read_file("app.py")
    assert repo.show("HEAD", "app.py") == "value = 1\n"
    assert repo.show(":3", "app.py") == "value = 2\n"


def test_missing_paths(merge_conflict):
    repo = GitRepository(merge_conflict)

    with pytest.raises(GitError) as read_error:
        repo.read_file("nope.py")
    with pytest.raises(GitError) as show_error:
        repo.show("HEAD", "nope.py")

    assert read_error.value.code == GitErrorCodes.FILE_NOT_FOUND
    assert show_error.value.code == GitErrorCodes.FILE_NOT_FOUND


def test_write_and_stage_clears_conflict(merge_conflict):
    repo = GitRepository(merge_conflict)

    repo.write_file("app.py", "value = 2\r\n")
    repo.stage(["app.py"])

    assert (merge_conflict / "app.py").read_bytes() == b"value = 2\r\n"
    assert repo.conflicted_files() == []


def test_command_failure_raises():
    runner = Mock()
    runner.execute.side_effect = [
        Mock(exited=0, stdout="/repo\n", stderr=""),
        Mock(exited=128, stdout="", stderr="fatal: broken\n"),
    ]
    repo = GitRepository("/repo", runner=runner)

    with pytest.raises(GitError) as exc_info:
        repo.conflicted_files()

    assert exc_info.value.code == GitErrorCodes.COMMAND_FAILED
    assert "fatal: broken" in exc_info.value.git_output


def test_crlf_endings_survive_resolution(merge_conflict):
    """Lines outside resolved regions keep their CRLF endings."""
    path = merge_conflict / "crlf.txt"
    path.write_bytes(
        b"keep\r\n<<<<<<< HEAD\r\n=======\r\nnew\r\n>>>>>>> b\r\ntail\r\n"
    )
    repo = GitRepository(merge_conflict)
    resolver = ConflictResolver()

    regions = get_file_conflicts(repo, resolver, "crlf.txt")
    resolve_file(repo, resolver, "crlf.txt", regions, stage=False)

    assert path.read_bytes() == b"keep\r\nnew\r\ntail\r\n"


def test_read_file_keeps_crlf(merge_conflict):
    (merge_conflict / "win.txt").write_bytes(b"a\r\nb\r\n")

    assert GitRepository(merge_conflict).read_file("win.txt") == "a\r\nb\r\n"


def test_show_unknown_ref_is_not_missing_file(merge_conflict):
    repo = GitRepository(merge_conflict)

    with pytest.raises(GitError) as exc_info:
        repo.show("no-such-ref", "app.py")

    assert exc_info.value.code == GitErrorCodes.COMMAND_FAILED


def test_diff_against_unknown_ref_fails(merge_conflict):
    repo = GitRepository(merge_conflict)

    with pytest.raises(GitError) as exc_info:
        get_file_diff(repo, "app.py", from_ref="no-such-ref")

    assert exc_info.value.code == GitErrorCodes.GET_FILE_DIFF_FAILED


def test_diff_new_file_from_head(merge_conflict):
    (merge_conflict / "added.txt").write_text("x\n")
    repo = GitRepository(merge_conflict)

    result = get_file_diff(repo, "added.txt")

    assert result.old_content == ""
    assert result.new_content == "x\n"
