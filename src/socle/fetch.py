"""Retrieve template snapshots from a remote repository."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

from .config import TemplateSource
from .errors import FetchError
from .process import CommandRunner, run_command

__all__ = ["VCS_METADATA", "fetch_template", "strip_vcs_metadata"]


LOGGER = logging.getLogger(__name__)

VCS_METADATA = (".git",)


def strip_vcs_metadata(directory: Path) -> list[Path]:
    """Delete version control bookkeeping from the top of ``directory``.

    ``.git`` may be a directory or, for worktrees and submodules, a plain file.
    Returns the removed paths.
    """

    removed: list[Path] = []
    for name in VCS_METADATA:
        candidate = directory / name
        if candidate.is_dir() and not candidate.is_symlink():
            shutil.rmtree(candidate)
        elif candidate.exists() or candidate.is_symlink():
            candidate.unlink()
        else:
            continue
        removed.append(candidate)
    return removed


def fetch_template(
    source: TemplateSource,
    destination: str | Path,
    *,
    runner: CommandRunner = run_command,
    git: str = "git",
    timeout: float | None = None,
) -> Path:
    """Shallow clone ``source`` into ``destination`` as a plain file tree.

    The caller is responsible for ensuring ``destination`` is free. Nothing is
    cleaned up when the clone fails part way.
    """

    destination_path = Path(destination)
    argv = [git, "clone", "--depth", str(source.depth), "--quiet", source.url, str(destination_path)]
    LOGGER.info("fetching template url=%s depth=%s into %s", source.url, source.depth, destination_path)

    try:
        result = runner(argv, cwd=destination_path.parent, timeout=timeout)
    except subprocess.TimeoutExpired as exc:
        raise FetchError(f"cloning {source.url} timed out after {exc.timeout}s", cause=exc) from exc
    except OSError as exc:
        raise FetchError(f"cannot run '{git}': {exc}", cause=exc) from exc

    if not result.ok:
        stderr = result.stderr.strip()
        detail = f": {stderr}" if stderr else ""
        raise FetchError(
            f"git clone of {source.url} failed with exit code {result.returncode}{detail}",
            stderr=stderr,
        )
    if not destination_path.is_dir():
        raise FetchError(f"git clone reported success but {destination_path} was not created")

    try:
        removed = strip_vcs_metadata(destination_path)
    except OSError as exc:
        raise FetchError(f"cannot remove version control metadata from {destination_path}", cause=exc) from exc

    LOGGER.debug("removed vcs metadata: %s", [str(path) for path in removed])
    return destination_path
