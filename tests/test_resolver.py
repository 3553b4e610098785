from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from socle.errors import DependencyResolutionError
from socle.resolver import resolution_commands, resolve_dependencies
from tests.fixtures.toolchain_fake import FakeToolchain


def test_resolution_commands():
    assert resolution_commands("example.com/fw", go="go1.22") == [
        ["go1.22", "get", "example.com/fw"],
        ["go1.22", "mod", "tidy"],
    ]


def test_resolve_runs_get_then_tidy(tmp_path: Path, toolchain: FakeToolchain):
    results = resolve_dependencies(tmp_path, framework_module="example.com/fw", runner=toolchain, timeout=9)

    assert toolchain.commands == ["go get", "go mod tidy"]
    assert all(cwd == tmp_path and timeout == 9 for _argv, cwd, timeout in toolchain.calls)
    assert [result.ok for result in results] == [True, True]


def test_resolve_stops_at_first_failure(tmp_path: Path, toolchain: FakeToolchain):
    toolchain.fail("go get", returncode=1, stderr="module not found")

    with pytest.raises(DependencyResolutionError) as excinfo:
        resolve_dependencies(tmp_path, runner=toolchain)

    assert toolchain.commands == ["go get"]
    assert excinfo.value.result is not None
    assert excinfo.value.result.returncode == 1
    assert "module not found" in str(excinfo.value)


@pytest.mark.parametrize(
    "exc",
    [FileNotFoundError(2, "No such file or directory", "go"), subprocess.TimeoutExpired(cmd="go mod tidy", timeout=1)],
)
def test_resolve_wraps_runner_exceptions(tmp_path: Path, toolchain: FakeToolchain, exc: BaseException):
    toolchain.raise_on("go mod tidy", exc)
    with pytest.raises(DependencyResolutionError) as excinfo:
        resolve_dependencies(tmp_path, runner=toolchain)
    assert excinfo.value.cause is exc
