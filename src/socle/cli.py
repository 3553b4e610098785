"""Command line interface for the socle project installer."""

from __future__ import annotations

import argparse
import logging
import shlex
import shutil
import sys
from dataclasses import replace
from enum import Enum
from pathlib import Path
from typing import Iterable, Sequence

from pydantic import ValidationError

from . import __version__
from .config import (
    Architecture,
    Database,
    HttpFramework,
    PipelineSettings,
    ProjectRequest,
    RenderEngine,
    TemplateSource,
)
from .errors import InvalidRequest
from .naming import normalize_project_name
from .pipeline import Failure, MaterializationPipeline, cleanup_directory


def _split_modules(values: Iterable[str]) -> list[str]:
    return [part for value in values for part in value.split(",") if part.strip()]


def _choices(enum_type: type[Enum]) -> list[str]:
    return [member.value for member in enum_type]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="socle",
        description="Socle is a Go meta framework installer for building applications.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log pipeline progress")
    subparsers = parser.add_subparsers(dest="command", required=True)

    new_parser = subparsers.add_parser("new", help="create a new Socle project")
    new_parser.add_argument("name", help="Project name or module path, e.g. myapp or github.com/acme/myapp")
    new_parser.add_argument(
        "-a", "--arch", default=Architecture.DDD.value, choices=_choices(Architecture), help="Architecture"
    )
    new_parser.add_argument("--db", default=Database.SQLITE.value, choices=_choices(Database), help="Database engine")
    new_parser.add_argument(
        "--http", default=HttpFramework.CHI.value, choices=_choices(HttpFramework), help="HTTP framework"
    )
    new_parser.add_argument(
        "--render", default=RenderEngine.TEMPL.value, choices=_choices(RenderEngine), help="Template engine"
    )
    new_parser.add_argument(
        "--with",
        dest="modules",
        metavar="MODULES",
        action="append",
        default=[],
        help="Modules to include (comma-separated, repeatable)",
    )
    new_parser.add_argument("--template", help="Custom Git template URL")
    new_parser.add_argument("--depth", type=int, default=1, help="Clone depth for the template")
    new_parser.add_argument("-f", "--force", action="store_true", help="Force overwrite existing folder")
    new_parser.add_argument(
        "--skip-deps", action="store_true", help="Do not run 'go get' and 'go mod tidy' afterwards"
    )
    new_parser.add_argument(
        "-C",
        "--directory",
        type=Path,
        default=Path.cwd(),
        help="Directory in which the project folder is created",
    )

    clean_parser = subparsers.add_parser("clean", help="remove a (partially) created project folder")
    clean_parser.add_argument("name", help="Project name used with 'new'")
    clean_parser.add_argument("-C", "--directory", type=Path, default=Path.cwd())

    subparsers.add_parser("version", help="print the installer version")

    return parser


def _build_request(args: argparse.Namespace) -> ProjectRequest:
    template_source = None
    if args.template:
        template_source = TemplateSource(url=args.template, depth=args.depth)
    elif args.depth != 1:
        template_source = TemplateSource(depth=args.depth)
    return ProjectRequest(
        raw_name=args.name,
        architecture=args.arch,
        database=args.db,
        http_framework=args.http,
        render_engine=args.render,
        modules=_split_modules(args.modules),
        force_overwrite=args.force,
        template_source=template_source,
    )


def _handle_new(args: argparse.Namespace) -> int:
    try:
        request = _build_request(args)
        identity = normalize_project_name(request.raw_name)
    except (ValidationError, InvalidRequest) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Creating project: {request.raw_name}")
    for label, value in request.summary().items():
        print(f"{label}: {value}")

    try:
        settings = PipelineSettings.from_env()
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    if args.skip_deps:
        settings = replace(settings, resolve_dependencies=False)

    target = args.directory / identity.directory_name
    if target.exists() or target.is_symlink():
        if not request.force_overwrite:
            print(f"Error: folder {target} already exists. Use --force to overwrite.", file=sys.stderr)
            return 1
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        else:
            target.unlink()

    outcome = MaterializationPipeline(settings=settings).run(request, args.directory)
    if isinstance(outcome, Failure):
        print(f"Error: {outcome.message}", file=sys.stderr)
        if outcome.path is not None and outcome.path.exists():
            print(
                f"A partial project was left in {outcome.path}; "
                f"remove it with: socle clean {shlex.quote(request.raw_name)}",
                file=sys.stderr,
            )
        return 1

    print(f"Done building {identity.module_identity} in {outcome.path}")
    return 0


def _handle_clean(args: argparse.Namespace) -> int:
    try:
        identity = normalize_project_name(args.name)
        removed = cleanup_directory(args.directory / identity.directory_name)
    except (InvalidRequest, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(f"Removed {removed}")
    return 0


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    if args.command == "new":
        return _handle_new(args)
    if args.command == "clean":
        return _handle_clean(args)
    if args.command == "version":
        print(f"socle {__version__}")
        return 0
    parser.error("no command provided")
    return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
