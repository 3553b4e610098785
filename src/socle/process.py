"""Synchronous execution of external toolchain commands."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Sequence

__all__ = ["CommandResult", "CommandRunner", "run_command"]


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Exit status and captured streams of a finished command."""

    argv: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def command_line(self) -> str:
        return " ".join(self.argv)


class CommandRunner(Protocol):
    """Callable used by the pipeline to invoke ``git`` and ``go``."""

    def __call__(
        self,
        argv: Sequence[str],
        *,
        cwd: Path | None = None,
        timeout: float | None = None,
    ) -> CommandResult: ...


def run_command(
    argv: Sequence[str],
    *,
    cwd: Path | None = None,
    timeout: float | None = None,
) -> CommandResult:
    """Run ``argv`` to completion and capture its output.

    A non-zero exit status is reported through :attr:`CommandResult.returncode`
    rather than raised. ``OSError`` (for example a missing executable) and
    :class:`subprocess.TimeoutExpired` propagate to the caller.
    """

    LOGGER.debug("run cwd=%s argv=%s", cwd, " ".join(argv))
    completed = subprocess.run(
        list(argv),
        cwd=str(cwd) if cwd is not None else None,
        capture_output=True,
        check=False,
        text=True,
        timeout=timeout,
    )
    result = CommandResult(
        argv=tuple(argv),
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )
    LOGGER.debug("exit=%s argv=%s", result.returncode, result.command_line)
    return result
