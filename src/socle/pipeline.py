"""Sequential pipeline materializing a project from a template repository.

Stages run in a fixed order, each working on the directory left by the one
before it::

    normalizing -> fetching -> substituting -> resolving_artifact
        -> rewriting_manifest -> updating_sources -> triggering_resolution

The first :class:`~socle.errors.PipelineError` stops the run and is returned as
a :class:`Failure`. Nothing is rolled back: files written by earlier stages
stay on disk and :func:`cleanup_directory` is the explicit way to remove them.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Union

from .artifacts import PlatformVariant, detect_host_platform, resolve_build_artifact
from .config import PipelineSettings, ProjectRequest
from .errors import PipelineError
from .fetch import fetch_template
from .manifest import rewrite_manifest, update_source_imports
from .naming import normalize_project_name
from .process import CommandRunner, run_command
from .resolver import resolve_dependencies
from .template import PlaceholderRenderer, build_placeholder_map, generate_secret

__all__ = [
    "ENV_ASSET",
    "ENV_FILENAME",
    "Failure",
    "MaterializationPipeline",
    "Outcome",
    "Stage",
    "Success",
    "cleanup_directory",
    "materialize",
]


LOGGER = logging.getLogger(__name__)

ENV_ASSET = "env.txt"
ENV_FILENAME = ".env"


class Stage(str, Enum):
    """Non-terminal states of a materialization run, in execution order."""

    NORMALIZING = "normalizing"
    FETCHING = "fetching"
    SUBSTITUTING = "substituting"
    RESOLVING_ARTIFACT = "resolving_artifact"
    REWRITING_MANIFEST = "rewriting_manifest"
    UPDATING_SOURCES = "updating_sources"
    TRIGGERING_RESOLUTION = "triggering_resolution"


@dataclass(frozen=True, slots=True)
class Success:
    """Terminal outcome of a run that reached ``done``."""

    directory_name: str
    path: Path
    completed: tuple[Stage, ...] = ()

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Failure:
    """Terminal outcome of a run aborted at ``stage``.

    ``path`` is the project directory when the run got far enough to choose
    one; it may hold a partially materialized tree.
    """

    stage: Stage
    cause: PipelineError
    path: Path | None = None
    completed: tuple[Stage, ...] = ()

    @property
    def ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return f"{self.stage.value}: {self.cause}"


Outcome = Union[Success, Failure]


@dataclass(slots=True)
class MaterializationPipeline:
    """Turn a :class:`ProjectRequest` into a project directory.

    The collaborators are injectable so the pipeline can run without network
    access or a Go toolchain: ``runner`` executes ``git`` and ``go``, ``host``
    selects the build helper and ``secret_factory`` produces the ``${KEY}``
    value.
    """

    settings: PipelineSettings = field(default_factory=PipelineSettings)
    runner: CommandRunner = run_command
    host: PlatformVariant = field(default_factory=detect_host_platform)
    renderer: PlaceholderRenderer = field(default_factory=PlaceholderRenderer)
    secret_factory: Callable[[], str] = generate_secret

    def run(self, request: ProjectRequest, workdir: str | Path = ".") -> Outcome:
        """Materialize ``request`` inside ``workdir``.

        The caller must make sure the project directory does not exist yet (or
        remove it when overwriting); the pipeline does not check.
        """

        completed: list[Stage] = []
        path: Path | None = None
        stage = Stage.NORMALIZING
        LOGGER.info("materializing %r", request.raw_name)

        try:
            identity = normalize_project_name(request.raw_name)
            LOGGER.info("directory=%s module=%s", identity.directory_name, identity.module_identity)

            stage = self._advance(completed, stage, Stage.FETCHING)
            path = Path(workdir).expanduser().resolve() / identity.directory_name
            fetch_template(
                self.settings.template_source(request),
                path,
                runner=self.runner,
                git=self.settings.git_executable,
                timeout=self.settings.fetch_timeout,
            )

            stage = self._advance(completed, stage, Stage.SUBSTITUTING)
            placeholders = build_placeholder_map(identity, secret=self.secret_factory())
            self.renderer.render_to_file(ENV_ASSET, placeholders, path / ENV_FILENAME)

            stage = self._advance(completed, stage, Stage.RESOLVING_ARTIFACT)
            resolve_build_artifact(path, self.host)

            stage = self._advance(completed, stage, Stage.REWRITING_MANIFEST)
            template_module = rewrite_manifest(path, identity, renderer=self.renderer)

            stage = self._advance(completed, stage, Stage.UPDATING_SOURCES)
            if template_module:
                update_source_imports(path, template_module, identity.module_identity)
            else:
                LOGGER.info("template declared no module; leaving sources untouched")

            stage = self._advance(completed, stage, Stage.TRIGGERING_RESOLUTION)
            if self.settings.resolve_dependencies:
                resolve_dependencies(
                    path,
                    framework_module=self.settings.framework_module,
                    runner=self.runner,
                    go=self.settings.go_executable,
                    timeout=self.settings.resolve_timeout,
                )
            else:
                LOGGER.info("dependency resolution disabled")
            completed.append(stage)
        except PipelineError as exc:
            LOGGER.error("stage %s failed: %s", stage.value, exc)
            return Failure(stage=stage, cause=exc, path=path, completed=tuple(completed))

        LOGGER.info("done building %s", identity.module_identity)
        return Success(directory_name=identity.directory_name, path=path, completed=tuple(completed))

    @staticmethod
    def _advance(completed: list[Stage], current: Stage, following: Stage) -> Stage:
        completed.append(current)
        LOGGER.debug("stage %s -> %s", current.value, following.value)
        return following


def materialize(
    request: ProjectRequest,
    workdir: str | Path = ".",
    *,
    settings: PipelineSettings | None = None,
) -> Outcome:
    """Run :class:`MaterializationPipeline` with default collaborators."""

    pipeline = MaterializationPipeline(settings=settings or PipelineSettings())
    return pipeline.run(request, workdir)


def cleanup_directory(path: str | Path) -> Path:
    """Remove a (possibly partially) materialized project directory."""

    target = Path(path)
    if not target.exists():
        raise FileNotFoundError(target)
    if not target.is_dir() or target.is_symlink():
        raise NotADirectoryError(target)
    shutil.rmtree(target)
    LOGGER.info("removed %s", target)
    return target
