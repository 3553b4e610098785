from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from socle.config import TemplateSource
from socle.errors import FetchError
from socle.fetch import fetch_template, strip_vcs_metadata
from socle.process import CommandResult
from tests.fixtures.toolchain_fake import FakeToolchain


def test_fetch_produces_plain_file_tree(tmp_path: Path, toolchain: FakeToolchain):
    destination = tmp_path / "demo"
    result = fetch_template(TemplateSource(url="https://example.com/starter.git"), destination, runner=toolchain)

    assert result == destination
    assert (destination / "main.go").is_file()
    assert not (destination / ".git").exists()


def test_fetch_runs_shallow_clone(tmp_path: Path, toolchain: FakeToolchain):
    destination = tmp_path / "demo"
    source = TemplateSource(url="https://example.com/starter.git", depth=3)
    fetch_template(source, destination, runner=toolchain, git="/usr/bin/git", timeout=30)

    argv, cwd, timeout = toolchain.calls[0]
    assert argv == (
        "/usr/bin/git",
        "clone",
        "--depth",
        "3",
        "--quiet",
        "https://example.com/starter.git",
        str(destination),
    )
    assert cwd == tmp_path
    assert timeout == 30


def test_fetch_reports_git_failure(tmp_path: Path, toolchain: FakeToolchain):
    toolchain.fail("git clone", returncode=128, stderr="fatal: repository not found")
    with pytest.raises(FetchError) as excinfo:
        fetch_template(TemplateSource(url="https://example.com/missing.git"), tmp_path / "demo", runner=toolchain)

    assert "128" in str(excinfo.value)
    assert excinfo.value.stderr == "fatal: repository not found"


@pytest.mark.parametrize(
    "exc",
    [
        FileNotFoundError(2, "No such file or directory", "git"),
        subprocess.TimeoutExpired(cmd="git clone", timeout=5),
    ],
)
def test_fetch_wraps_runner_exceptions(tmp_path: Path, toolchain: FakeToolchain, exc: BaseException):
    toolchain.raise_on("git clone", exc)
    with pytest.raises(FetchError) as excinfo:
        fetch_template(TemplateSource(), tmp_path / "demo", runner=toolchain)
    assert excinfo.value.cause is exc


def test_fetch_requires_created_directory(tmp_path: Path):
    def quiet_runner(argv, *, cwd=None, timeout=None):
        return CommandResult(argv=tuple(argv), returncode=0)

    with pytest.raises(FetchError):
        fetch_template(TemplateSource(), tmp_path / "demo", runner=quiet_runner)


def test_strip_vcs_metadata_handles_gitfile(tmp_path: Path):
    (tmp_path / ".git").write_text("gitdir: ../.git/worktrees/demo\n", encoding="utf-8")
    (tmp_path / "main.go").write_text("package main\n", encoding="utf-8")

    removed = strip_vcs_metadata(tmp_path)

    assert removed == [tmp_path / ".git"]
    assert (tmp_path / "main.go").exists()
    assert strip_vcs_metadata(tmp_path) == []
