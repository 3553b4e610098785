"""Project name normalisation."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import InvalidRequest

__all__ = ["ProjectIdentity", "normalize_project_name"]


@dataclass(frozen=True, slots=True)
class ProjectIdentity:
    """Names derived from the identifier the user asked for.

    Attributes
    ----------
    directory_name:
        Lower-case name of the directory created for the project. It never
        contains a path separator.
    module_identity:
        The full lower-cased identifier, e.g. ``github.com/acme/shop``. It names
        the project inside the generated ``go.mod``.
    """

    directory_name: str
    module_identity: str


def normalize_project_name(raw_name: str) -> ProjectIdentity:
    """Derive a :class:`ProjectIdentity` from ``raw_name``.

    ``"Org/MyApp"`` becomes ``ProjectIdentity("myapp", "org/myapp")`` while a
    name without separators maps to itself in both fields. Backslashes count as
    separators and are written as ``/`` in the module identity. Whitespace around
    each segment is dropped.
    """

    segments = [segment.strip() for segment in raw_name.lower().replace("\\", "/").split("/")]
    module_identity = "/".join(segments)
    if not module_identity:
        raise InvalidRequest("project name must not be empty")

    directory_name = segments[-1]
    if not directory_name:
        raise InvalidRequest(f"project name '{raw_name}' does not end with a directory name")
    if directory_name in {".", ".."}:
        raise InvalidRequest(f"project name '{raw_name}' is not a valid directory name")
    if "" in segments:
        raise InvalidRequest(f"project name '{raw_name}' has an empty path segment")

    return ProjectIdentity(directory_name=directory_name, module_identity=module_identity)
