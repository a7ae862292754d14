"""sqlscaffold configuration.

Typed configuration for the generator and for a single generation request.
All settings use Pydantic v2 models so they are validated at construction
time and can be serialised to/from JSON or environment variables without
boiler-plate.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from sqlscaffold.errors import ConfigurationError
from sqlscaffold.utils import to_kebab_case

_DEFAULT_SKELETON_DIR = Path(__file__).parent / "skeleton"


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class DatabaseDriver(str, Enum):
    """Supported database drivers."""
    MYSQL = "mysql"
    POSTGRESQL = "postgresql"
    TIDB = "tidb"
    SQLITE = "sqlite"
    MONGO = "mongo"

    @classmethod
    def parse(cls, value: str) -> "DatabaseDriver":
        """Resolve a user-supplied driver name, accepting ``mongodb`` for mongo.

        Raises:
            ConfigurationError: If the name is not a supported driver.
        """
        name = (value or "").strip().lower()
        if name == "mongodb":
            name = cls.MONGO.value
        try:
            return cls(name)
        except ValueError:
            supported = ", ".join(d.value for d in cls)
            raise ConfigurationError(
                f"unsupported db driver: '{value}' (supported: {supported})"
            ) from None


# ---------------------------------------------------------------------------
# Generator configuration
# ---------------------------------------------------------------------------

class GeneratorConfig(BaseModel):
    """Settings for the template instantiation engine itself.

    ``self_namespace`` is the import namespace the skeleton is written
    against; ``shared_pkg_subpath`` names the part of that namespace that is
    a shared library and therefore never rewritten to the caller's module.
    """

    skeleton_dir: Path = Field(default=_DEFAULT_SKELETON_DIR)
    skeleton_source_path: str = Field(default="skeleton")
    self_namespace: str = Field(default="github.com/sqlscaffold/sqlscaffold")
    shared_pkg_subpath: str = Field(default="pkg")
    shared_pkg_version: str = Field(default="v1.0.0")
    output_time_format: str = Field(default="%y%m%d%H%M")

    @property
    def shared_namespace(self) -> str:
        """Import path of the shared library, e.g. ``<self>/pkg``."""
        return f"{self.self_namespace}/{self.shared_pkg_subpath}"

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        """Build a ``GeneratorConfig`` from environment variables.

        Recognised variables (all optional):
            SQLSCAFFOLD_SKELETON_DIR, SQLSCAFFOLD_SELF_NAMESPACE,
            SQLSCAFFOLD_PKG_VERSION.
        """
        kwargs: dict[str, object] = {}
        if os.environ.get("SQLSCAFFOLD_SKELETON_DIR"):
            kwargs["skeleton_dir"] = Path(os.environ["SQLSCAFFOLD_SKELETON_DIR"])
        if os.environ.get("SQLSCAFFOLD_SELF_NAMESPACE"):
            kwargs["self_namespace"] = os.environ["SQLSCAFFOLD_SELF_NAMESPACE"]
        if os.environ.get("SQLSCAFFOLD_PKG_VERSION"):
            kwargs["shared_pkg_version"] = os.environ["SQLSCAFFOLD_PKG_VERSION"]
        return cls(**kwargs)


# ---------------------------------------------------------------------------
# Generation request
# ---------------------------------------------------------------------------

class GenerationRequest(BaseModel):
    """One invocation of the generator.

    The first entry of ``table_names`` is the primary table and drives the
    full service scaffold; every later entry only adds a handler.
    """

    module_namespace: str = Field(..., description="Module path of the generated project")
    service_name: str = Field(..., description="Service name, used for binaries and configs")
    project_name: str = Field(..., description="Project name, used for deployment names")
    repo_address: str = Field(default="", description="Docker image repository address")
    database_driver: DatabaseDriver = Field(default=DatabaseDriver.MYSQL)
    database_dsn: str = Field(..., description="Database connection string")
    table_names: list[str] = Field(..., description="Primary table first, then secondary tables")
    output_path: Path | None = Field(default=None)
    embed: bool = Field(default=True, description="Embed the shared base model struct")
    json_name_type: int = Field(default=1, ge=0, le=1, description="0: snake_case, 1: camelCase")

    @field_validator("module_namespace", "service_name", "project_name", "database_dsn")
    @classmethod
    def _required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("database_driver", mode="before")
    @classmethod
    def _driver(cls, value: object) -> object:
        if isinstance(value, str):
            return DatabaseDriver.parse(value)
        return value

    @field_validator("table_names")
    @classmethod
    def _tables(cls, value: list[str]) -> list[str]:
        tables = [t.strip() for t in value]
        if not tables or not tables[0]:
            raise ValueError("at least one table name is required")
        return tables

    @model_validator(mode="after")
    def _normalise(self) -> "GenerationRequest":
        self.project_name = to_kebab_case(self.project_name)
        self.service_name = self.service_name.replace("-", "_")
        if self.database_driver is DatabaseDriver.MONGO:
            self.embed = False
        return self

    @property
    def primary_table(self) -> str:
        return self.table_names[0]

    @property
    def secondary_tables(self) -> list[str]:
        """Remaining tables in order, blank entries dropped."""
        return [t for t in self.table_names[1:] if t]

    @classmethod
    def create(cls, **kwargs: object) -> "GenerationRequest":
        """Validate a request, converting validation failures to ``ConfigurationError``."""
        try:
            return cls(**kwargs)
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'request'}: {err['msg']}"
                for err in exc.errors()
            )
            raise ConfigurationError(f"invalid generation request: {problems}") from exc


class GenerationInfo(BaseModel):
    """Metadata record written to ``docs/gen.info`` in the generated project."""

    module_namespace: str
    service_name: str
    output_path: str
    database_driver: str = ""
    tables: list[str] = Field(default_factory=list)
