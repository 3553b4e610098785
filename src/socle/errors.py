"""Exception types raised by the project materialization pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .process import CommandResult


class PipelineError(RuntimeError):
    """Base class for failures that abort a materialization run.

    ``cause`` holds the underlying exception, when there is one, so callers can
    report it without walking ``__cause__``.
    """

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class InvalidRequest(PipelineError):
    """Raised when the requested project name cannot be normalized."""


class FetchError(PipelineError):
    """Raised when the template snapshot cannot be retrieved."""

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException | None = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message, cause=cause)
        self.stderr = stderr


class SubstitutionIOError(PipelineError):
    """Raised when a template asset cannot be read or its rendering written."""


class ArtifactError(PipelineError):
    """Raised when the platform build artifact cannot be promoted."""


class MissingVariantError(ArtifactError):
    """Raised when the template lacks the build helper for the host platform."""


class ManifestError(PipelineError):
    """Raised when the module manifest cannot be replaced."""


class SourceRewriteError(PipelineError):
    """Raised when import paths in the fetched sources cannot be updated."""


class DependencyResolutionError(PipelineError):
    """Raised when the external toolchain fails to resolve dependencies."""

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException | None = None,
        result: CommandResult | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.result = result


__all__ = [
    "ArtifactError",
    "DependencyResolutionError",
    "FetchError",
    "InvalidRequest",
    "ManifestError",
    "MissingVariantError",
    "PipelineError",
    "SourceRewriteError",
    "SubstitutionIOError",
]
