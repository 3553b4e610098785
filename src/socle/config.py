"""Request and settings models shared by the pipeline and the CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Iterable, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "Architecture",
    "Database",
    "DEFAULT_FRAMEWORK_MODULE",
    "DEFAULT_TEMPLATE_URL",
    "HttpFramework",
    "PipelineSettings",
    "ProjectRequest",
    "RenderEngine",
    "TemplateSource",
]


DEFAULT_TEMPLATE_URL = "https://gitlab.com/socle-framework/starter.git"
DEFAULT_FRAMEWORK_MODULE = "gitlab.com/socle-framework/socle"


class Architecture(str, Enum):
    """Architecture styles offered for a new project."""

    DDD = "ddd"
    LAYERED = "layered"
    MICROSERVICE = "microservice"
    MINIMAL = "minimal"


class Database(str, Enum):
    SQLITE = "sqlite"
    POSTGRES = "postgres"
    MYSQL = "mysql"
    MARIADB = "mariadb"


class HttpFramework(str, Enum):
    CHI = "chi"
    GIN = "gin"
    ECHO = "echo"
    FIBER = "fiber"


class RenderEngine(str, Enum):
    TEMPL = "templ"
    GOTEMPLATE = "gotemplate"
    JET = "jet"


class TemplateSource(BaseModel):
    """Location of the template repository and how much history to fetch."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    url: str = Field(DEFAULT_TEMPLATE_URL, min_length=1, description="Clone URL or local path of the template.")
    depth: int = Field(1, ge=1, description="Shallow clone depth.")


class ProjectRequest(BaseModel):
    """Validated description of the project a user asked for."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    raw_name: str = Field(..., min_length=1, description="Project identifier as typed by the user.")
    architecture: Architecture = Field(Architecture.DDD, description="Architecture style.")
    database: Database = Field(Database.SQLITE, description="Database engine.")
    http_framework: HttpFramework = Field(HttpFramework.CHI, description="HTTP framework.")
    render_engine: RenderEngine = Field(RenderEngine.TEMPL, description="Template engine.")
    modules: FrozenSet[str] = Field(default_factory=frozenset, description="Optional modules to include.")
    force_overwrite: bool = Field(False, description="Replace an existing project directory.")
    template_source: Optional[TemplateSource] = Field(None, description="Custom template repository.")

    @field_validator("raw_name", mode="before")
    @classmethod
    def _strip_name(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("modules", mode="before")
    @classmethod
    def _normalize_modules(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, Iterable):
            return frozenset(str(item).strip().lower() for item in value if str(item).strip())
        return value

    def summary(self) -> Mapping[str, str]:
        """Return the chosen options as display strings."""

        return {
            "Architecture": self.architecture.value,
            "Database": self.database.value,
            "HTTP Framework": self.http_framework.value,
            "Template Engine": self.render_engine.value,
            "Modules": ", ".join(sorted(self.modules)),
            "Force overwrite": str(self.force_overwrite).lower(),
        }


_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class PipelineSettings:
    """Tool settings that are not part of a project request.

    Attributes
    ----------
    template_url:
        Repository cloned when the request does not name a template.
    framework_module:
        Go module fetched with ``go get`` once the manifest is rewritten.
    git_executable / go_executable:
        Commands used to reach the external toolchain.
    fetch_timeout / resolve_timeout:
        Upper bounds, in seconds, for the clone and for each ``go`` command.
    resolve_dependencies:
        When ``False`` the dependency resolution stage is skipped.
    """

    template_url: str = DEFAULT_TEMPLATE_URL
    framework_module: str = DEFAULT_FRAMEWORK_MODULE
    git_executable: str = "git"
    go_executable: str = "go"
    fetch_timeout: float = 300.0
    resolve_timeout: float = 600.0
    resolve_dependencies: bool = True

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "PipelineSettings":
        """Build settings from ``SOCLE_*`` environment variables.

        Recognised variables (all optional): ``SOCLE_TEMPLATE_URL``,
        ``SOCLE_FRAMEWORK_MODULE``, ``SOCLE_GIT``, ``SOCLE_GO``,
        ``SOCLE_FETCH_TIMEOUT``, ``SOCLE_RESOLVE_TIMEOUT`` and
        ``SOCLE_SKIP_DEPS``.
        """

        env = os.environ if environ is None else environ
        defaults = cls()

        def _timeout(key: str, default: float) -> float:
            raw = env.get(key, "").strip()
            if not raw:
                return default
            try:
                value = float(raw)
            except ValueError as exc:
                raise ValueError(f"{key} must be a number of seconds, got '{raw}'") from exc
            if value <= 0:
                raise ValueError(f"{key} must be positive")
            return value

        return cls(
            template_url=env.get("SOCLE_TEMPLATE_URL") or defaults.template_url,
            framework_module=env.get("SOCLE_FRAMEWORK_MODULE") or defaults.framework_module,
            git_executable=env.get("SOCLE_GIT") or defaults.git_executable,
            go_executable=env.get("SOCLE_GO") or defaults.go_executable,
            fetch_timeout=_timeout("SOCLE_FETCH_TIMEOUT", defaults.fetch_timeout),
            resolve_timeout=_timeout("SOCLE_RESOLVE_TIMEOUT", defaults.resolve_timeout),
            resolve_dependencies=env.get("SOCLE_SKIP_DEPS", "").strip().lower() not in _TRUTHY,
        )

    def template_source(self, request: ProjectRequest) -> TemplateSource:
        """Return the template a ``request`` should be materialized from."""

        if request.template_source is not None:
            return request.template_source
        return TemplateSource(url=self.template_url)
