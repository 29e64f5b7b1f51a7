"""Tests for the CLI subcommands."""

import asyncio

import pytest

from jetgit.command.conflicts import ConflictsCommand
from jetgit.command.diff import DiffCommand
from jetgit.command.resolve import ResolveCommand
from jetgit.core.config import State
from tests.fakes import FakeRepository

RESOLVABLE = "<<<<<<< HEAD\n=======\nnew()\n>>>>>>> feature\n"
MANUAL = "<<<<<<< HEAD\nx = 1\n=======\nx = 2\n>>>>>>> feature\n"


@pytest.fixture
def state(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return State()


def test_diff_prints_hunks(tmp_path, state, capsys):
    old = tmp_path / "old.txt"
    new = tmp_path / "new.txt"
    old.write_text("a\nb\nc")
    new.write_text("a\nB\nc")

    code = asyncio.run(
        DiffCommand(old_file=old, new_file=new).run_workflow(state)
    )

    out = capsys.readouterr().out
    assert code == 0
    assert "@@ -2,1 +2,1 @@" in out
    assert "-b\n+B\n c" in out


def test_diff_identical_prints_nothing(tmp_path, state, capsys):
    same = tmp_path / "same.txt"
    same.write_text("x")

    code = asyncio.run(
        DiffCommand(old_file=same, new_file=same).run_workflow(state)
    )

    assert code == 0
    assert capsys.readouterr().out == ""


def test_diff_missing_file(tmp_path, state):
    command = DiffCommand(old_file=tmp_path / "no", new_file=tmp_path / "no")

    assert asyncio.run(command.run_workflow(state)) == 1


def test_conflicts_all_auto_resolvable(tmp_path, state, capsys):
    path = tmp_path / "a.py"
    path.write_text(RESOLVABLE)

    code = asyncio.run(ConflictsCommand(file=path).run_workflow(state))

    out = capsys.readouterr().out
    assert code == 0
    assert "lines 1-4 (HEAD vs feature): incoming: Pure addition" in out
    assert "Automatically resolved 1 conflict" in out
    assert "Ready to complete merge" in out
    assert path.read_text() == RESOLVABLE


def test_conflicts_manual_work_remains(tmp_path, state, capsys):
    path = tmp_path / "b.py"
    path.write_text(MANUAL)

    command = ConflictsCommand(file=path, **{"show-hunks": True})
    code = asyncio.run(command.run_workflow(state))

    out = capsys.readouterr().out
    assert code == 1
    assert "manual resolution required" in out
    assert "!<<<<<<< HEAD" in out


def test_conflicts_clean_file(tmp_path, state, capsys):
    path = tmp_path / "c.py"
    path.write_text("clean\n")

    assert asyncio.run(ConflictsCommand(file=path).run_workflow(state)) == 0
    assert "no conflicts" in capsys.readouterr().out


def test_resolve_exit_codes(state, capsys):
    repo = FakeRepository(
        files={"a.py": RESOLVABLE, "b.py": MANUAL},
        conflicted=["a.py", "b.py"],
    )
    state.runtime.resolve.repository = repo

    code = asyncio.run(ResolveCommand().run_workflow(state))

    out = capsys.readouterr().out
    assert code == 1
    assert "resolved  a.py" in out
    assert "pending   b.py" in out


def test_resolve_overrides_config(state):
    state.runtime.resolve.repository = FakeRepository(
        files={"a.py": RESOLVABLE}, conflicted=["a.py"]
    )
    command = ResolveCommand(stage=False, **{"write-partial": True})

    code = asyncio.run(command.run_workflow(state))

    assert code == 0
    assert state.config.git.stage_resolved is False
    assert state.config.git.write_partial is True
    assert state.runtime.resolve.repository.staged == []
