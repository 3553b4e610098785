"""Materialize new Socle projects from a template repository.

The package normalizes project names into directory and module identifiers,
fetches a shallow template snapshot, renders the bundled environment and
manifest templates, and drives the Go toolchain to resolve dependencies. The
same pipeline is used programmatically and by the ``socle`` command.
"""

from __future__ import annotations

from .config import PipelineSettings, ProjectRequest, TemplateSource
from .errors import PipelineError
from .naming import ProjectIdentity, normalize_project_name
from .pipeline import Failure, MaterializationPipeline, Outcome, Stage, Success, materialize
from .template import build_placeholder_map, generate_secret, render

__all__ = [
    "Failure",
    "MaterializationPipeline",
    "Outcome",
    "PipelineError",
    "PipelineSettings",
    "ProjectIdentity",
    "ProjectRequest",
    "Stage",
    "Success",
    "TemplateSource",
    "build_placeholder_map",
    "generate_secret",
    "materialize",
    "normalize_project_name",
    "render",
]

__version__ = "0.1.0"
