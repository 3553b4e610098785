"""Promote the host's build helper to the canonical ``Makefile``."""

from __future__ import annotations

import logging
import os
import shutil
from enum import Enum
from pathlib import Path

from .errors import ArtifactError, MissingVariantError

__all__ = [
    "CANONICAL_ARTIFACT",
    "PlatformVariant",
    "detect_host_platform",
    "resolve_build_artifact",
]


LOGGER = logging.getLogger(__name__)

CANONICAL_ARTIFACT = "Makefile"


class PlatformVariant(str, Enum):
    """Host platforms that ship their own build helper in a template."""

    UNIX = "unix"
    WINDOWS = "windows"

    @property
    def filename(self) -> str:
        return _VARIANT_FILES[self]


_VARIANT_FILES = {
    PlatformVariant.UNIX: "Makefile.mac",
    PlatformVariant.WINDOWS: "Makefile.windows",
}


def detect_host_platform() -> PlatformVariant:
    """Return the variant matching the running interpreter's host."""

    return PlatformVariant.WINDOWS if os.name == "nt" else PlatformVariant.UNIX


def resolve_build_artifact(directory: str | Path, host: PlatformVariant) -> Path:
    """Copy ``host``'s build helper to ``Makefile`` and delete every variant file.

    Raises :class:`MissingVariantError` before modifying anything when the
    host's variant is absent.
    """

    directory = Path(directory)
    source = directory / host.filename
    if not source.is_file():
        raise MissingVariantError(f"template has no {host.filename} build helper for {host.value}")

    target = directory / CANONICAL_ARTIFACT
    try:
        shutil.copyfile(source, target)
        for variant in PlatformVariant:
            (directory / variant.filename).unlink(missing_ok=True)
    except OSError as exc:
        raise ArtifactError(f"cannot install {target}", cause=exc) from exc

    LOGGER.info("installed %s from %s", target, host.filename)
    return target
