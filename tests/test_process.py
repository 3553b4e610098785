from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

from socle.process import run_command


def test_run_command_captures_output(tmp_path: Path):
    result = run_command([sys.executable, "-c", "import os; print(os.getcwd())"], cwd=tmp_path)

    assert result.ok
    assert Path(result.stdout.strip()).resolve() == tmp_path.resolve()
    assert result.command_line.endswith("print(os.getcwd())")


def test_run_command_reports_exit_status():
    result = run_command([sys.executable, "-c", "import sys; sys.stderr.write('nope'); sys.exit(3)"])

    assert not result.ok
    assert result.returncode == 3
    assert result.stderr == "nope"


def test_run_command_propagates_missing_executable(tmp_path: Path):
    with pytest.raises(OSError):
        run_command([str(tmp_path / "no-such-tool")])


def test_run_command_propagates_timeout():
    with pytest.raises(subprocess.TimeoutExpired):
        run_command([sys.executable, "-c", "import time; time.sleep(5)"], timeout=0.2)
