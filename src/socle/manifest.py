"""Rewrite the Go module manifest and import paths of a fetched template."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator

from .errors import ManifestError, SourceRewriteError, SubstitutionIOError
from .naming import ProjectIdentity
from .template import APP_NAME_TOKEN, PlaceholderRenderer

__all__ = [
    "MANIFEST_ASSET",
    "MANIFEST_FILENAME",
    "read_module_identity",
    "rewrite_manifest",
    "update_source_imports",
]


LOGGER = logging.getLogger(__name__)

MANIFEST_FILENAME = "go.mod"
MANIFEST_ASSET = "go.mod.txt"

_MODULE_DIRECTIVE = re.compile(r"^\s*module\s+(?P<path>\"[^\"]+\"|`[^`]+`|\S+)", re.MULTILINE)
_SKIPPED_DIRECTORIES = {"vendor", "node_modules"}


def read_module_identity(manifest: str | Path) -> str | None:
    """Return the module path declared by ``manifest`` or ``None`` if there is none."""

    text = Path(manifest).read_text(encoding="utf-8")
    match = _MODULE_DIRECTIVE.search(text)
    if match is None:
        return None
    return match.group("path").strip("\"`")


def rewrite_manifest(
    directory: str | Path,
    identity: ProjectIdentity,
    *,
    renderer: PlaceholderRenderer | None = None,
) -> str | None:
    """Replace ``go.mod`` in ``directory`` with one naming ``identity``.

    Returns the module path of the manifest inherited from the template, if
    one was present and declared a module.
    """

    renderer = renderer or PlaceholderRenderer()
    manifest_path = Path(directory) / MANIFEST_FILENAME
    try:
        content = renderer.render_asset(MANIFEST_ASSET, {APP_NAME_TOKEN: identity.module_identity})
    except SubstitutionIOError as exc:
        raise ManifestError(f"cannot read manifest template '{MANIFEST_ASSET}'", cause=exc.cause) from exc

    previous: str | None = None
    try:
        if manifest_path.is_file():
            previous = read_module_identity(manifest_path)
        manifest_path.unlink(missing_ok=True)
        manifest_path.write_text(content, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestError(f"cannot rewrite {manifest_path}", cause=exc) from exc

    LOGGER.info("wrote %s for module %s (template module: %s)", manifest_path, identity.module_identity, previous)
    return previous


def _go_sources(directory: Path) -> Iterator[Path]:
    for path in sorted(directory.rglob("*.go")):
        relative = path.relative_to(directory)
        if any(part in _SKIPPED_DIRECTORIES or part.startswith(".") for part in relative.parts[:-1]):
            continue
        if path.is_file():
            yield path


def update_source_imports(directory: str | Path, old_module: str, new_module: str) -> list[Path]:
    """Point imports of ``old_module`` inside ``*.go`` files at ``new_module``.

    Both ``"old"`` and ``"old/sub/pkg"`` import paths are rewritten; files under
    ``vendor/`` and hidden directories, and files that are not UTF-8, are left
    alone. Every file is read before any is written. Returns the files that
    changed.
    """

    if not old_module or old_module == new_module:
        return []

    pattern = re.compile(r"\"" + re.escape(old_module) + r"(?=[\"/])")
    replacement = '"' + new_module
    root = Path(directory)
    pending: list[tuple[Path, str]] = []
    try:
        for path in _go_sources(root):
            try:
                text = path.read_text(encoding="utf-8")
            except UnicodeDecodeError:
                LOGGER.debug("skipping %s: not utf-8", path)
                continue
            updated = pattern.sub(lambda _match: replacement, text)
            if updated != text:
                pending.append((path, updated))

        for path, updated in pending:
            path.write_text(updated, encoding="utf-8")
    except OSError as exc:
        raise SourceRewriteError(f"cannot update imports under {root}", cause=exc) from exc

    changed = [path for path, _updated in pending]

    LOGGER.info("rewrote imports %s -> %s in %d file(s)", old_module, new_module, len(changed))
    return changed
