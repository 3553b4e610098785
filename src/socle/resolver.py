"""Run the Go toolchain against a freshly rewritten manifest."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from .config import DEFAULT_FRAMEWORK_MODULE
from .errors import DependencyResolutionError
from .process import CommandResult, CommandRunner, run_command

__all__ = ["resolution_commands", "resolve_dependencies"]


LOGGER = logging.getLogger(__name__)


def resolution_commands(framework_module: str, *, go: str = "go") -> list[list[str]]:
    """Return the commands that fetch the framework and tidy the manifest."""

    return [
        [go, "get", framework_module],
        [go, "mod", "tidy"],
    ]


def resolve_dependencies(
    directory: str | Path,
    *,
    framework_module: str = DEFAULT_FRAMEWORK_MODULE,
    runner: CommandRunner = run_command,
    go: str = "go",
    timeout: float | None = None,
) -> list[CommandResult]:
    """Fetch ``framework_module`` and reconcile ``go.mod`` inside ``directory``.

    Commands run one after the other and each must exit with status zero;
    the first failure raises :class:`DependencyResolutionError`.
    """

    directory = Path(directory)
    results: list[CommandResult] = []
    for argv in resolution_commands(framework_module, go=go):
        command_line = " ".join(argv)
        LOGGER.info("running %s in %s", command_line, directory)
        try:
            result = runner(argv, cwd=directory, timeout=timeout)
        except subprocess.TimeoutExpired as exc:
            raise DependencyResolutionError(f"'{command_line}' timed out after {exc.timeout}s", cause=exc) from exc
        except OSError as exc:
            raise DependencyResolutionError(f"cannot run '{command_line}': {exc}", cause=exc) from exc

        results.append(result)
        if not result.ok:
            stderr = result.stderr.strip()
            detail = f": {stderr}" if stderr else ""
            raise DependencyResolutionError(
                f"'{command_line}' exited with status {result.returncode}{detail}",
                result=result,
            )
    return results
