"""Placeholder substitution for the text assets bundled with socle."""

from __future__ import annotations

import re
import secrets
import string
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Mapping

from .errors import SubstitutionIOError
from .naming import ProjectIdentity

__all__ = [
    "APP_NAME_TOKEN",
    "KEY_TOKEN",
    "PlaceholderRenderer",
    "TemplateRenderingError",
    "build_placeholder_map",
    "generate_secret",
    "render",
]


APP_NAME_TOKEN = "${APP_NAME}"
KEY_TOKEN = "${KEY}"

SECRET_LENGTH = 32
SECRET_ALPHABET = string.ascii_letters + string.digits

_TOKEN_PATTERN = re.compile(r"\$\{[A-Za-z_][A-Za-z0-9_]*\}")
_MISSING_POLICIES = {"keep", "empty", "error"}


class TemplateRenderingError(ValueError):
    """Raised when a placeholder has no value and ``missing="error"``."""


def generate_secret(length: int = SECRET_LENGTH) -> str:
    """Return ``length`` random alphanumeric characters from :mod:`secrets`."""

    if length < 1:
        raise ValueError("length must be positive")
    return "".join(secrets.choice(SECRET_ALPHABET) for _ in range(length))


def build_placeholder_map(identity: ProjectIdentity, secret: str | None = None) -> dict[str, str]:
    """Return the values substituted into the environment file."""

    return {
        APP_NAME_TOKEN: identity.directory_name,
        KEY_TOKEN: secret if secret is not None else generate_secret(),
    }


def render(template: str, mapping: Mapping[str, str], *, missing: str = "keep") -> str:
    """Replace every ``${NAME}`` token of ``template`` found in ``mapping``.

    Parameters
    ----------
    template:
        Text containing placeholder tokens.
    mapping:
        Replacement values keyed by full token, e.g. ``{"${KEY}": "..."}``.
    missing:
        What to do with tokens absent from ``mapping``: ``"keep"`` leaves them
        untouched, ``"empty"`` removes them and ``"error"`` raises
        :class:`TemplateRenderingError`.

    Substitution is a single pass, so replacement values are never rescanned.
    """

    if missing not in _MISSING_POLICIES:
        raise ValueError("missing must be 'keep', 'empty', or 'error'")
    for key in mapping:
        if not _TOKEN_PATTERN.fullmatch(key):
            raise ValueError(f"'{key}' is not a placeholder token")

    def substitute(match: re.Match[str]) -> str:
        found = match.group(0)
        if found in mapping:
            return str(mapping[found])
        if missing == "keep":
            return found
        if missing == "empty":
            return ""
        raise TemplateRenderingError(f"missing value for '{found}'")

    return _TOKEN_PATTERN.sub(substitute, template)


@dataclass(slots=True)
class PlaceholderRenderer:
    """Render bundled assets into files of a materialized project."""

    package: str = "socle.assets"
    encoding: str = "utf-8"

    def read_asset(self, name: str) -> str:
        """Return the text of the bundled asset ``name``."""

        try:
            return resources.files(self.package).joinpath(name).read_text(encoding=self.encoding)
        except (OSError, ModuleNotFoundError) as exc:
            raise SubstitutionIOError(f"cannot read template asset '{name}'", cause=exc) from exc

    def render_asset(self, name: str, mapping: Mapping[str, str]) -> str:
        return render(self.read_asset(name), mapping)

    def render_to_file(self, name: str, mapping: Mapping[str, str], target: str | Path) -> Path:
        """Render asset ``name`` and write it to ``target``, replacing any existing file."""

        rendered = self.render_asset(name, mapping)
        target_path = Path(target)
        try:
            target_path.write_text(rendered, encoding=self.encoding)
        except OSError as exc:
            raise SubstitutionIOError(f"cannot write {target_path}", cause=exc) from exc
        return target_path
