"""Shared pytest fixtures for the sqlscaffold test suite.

Provides reusable fixtures for:
- Generation requests for the relational and document variants
- A small hand-written skeleton for engine tests
- A stub translator returning fixed fragments
- A schema catalog describing ``order`` and ``item`` tables
"""

from __future__ import annotations

import logging
import os
import textwrap
from pathlib import Path
from typing import Any

import pytest

from sqlscaffold.config import GenerationRequest, GeneratorConfig
from sqlscaffold.translator import ArtifactKind, SchemaCatalog, SourceFragmentSet, TranslatorSettings
from sqlscaffold.utils import to_pascal_case


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

@pytest.fixture
def make_request(tmp_path: Path):
    """Factory building a valid ``GenerationRequest`` with overridable fields.

    Usage::

        def test_something(make_request):
            request = make_request(database_driver="mongodb", table_names=["order", "item"])
    """

    def factory(**overrides: Any) -> GenerationRequest:
        fields: dict[str, Any] = {
            "module_namespace": "github.com/acme/shop",
            "service_name": "order_svc",
            "project_name": "shop",
            "repo_address": "",
            "database_driver": "mysql",
            "database_dsn": "root:pw@(127.0.0.1:3306)/shop",
            "table_names": ["order"],
            "output_path": tmp_path / "out",
        }
        fields.update(overrides)
        return GenerationRequest.create(**fields)

    return factory


@pytest.fixture
def mysql_request(make_request) -> GenerationRequest:
    return make_request()


@pytest.fixture
def mongo_request(make_request) -> GenerationRequest:
    return make_request(
        database_driver="mongodb",
        database_dsn="root:pw@127.0.0.1:27017/shop",
        table_names=["order", "item"],
    )


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@pytest.fixture
def generator_config() -> GeneratorConfig:
    """Configuration pointing at the bundled skeleton."""
    return GeneratorConfig()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove every ``SQLSCAFFOLD_*`` variable from the environment."""
    for key in list(os.environ):
        if key.startswith("SQLSCAFFOLD_"):
            monkeypatch.delenv(key, raising=False)


# ---------------------------------------------------------------------------
# Translator doubles
# ---------------------------------------------------------------------------

class StubTranslator:
    """Returns fixed fragments; records every call."""

    def __init__(self, overrides: dict[ArtifactKind, str | None] | None = None) -> None:
        self.overrides = overrides or {}
        self.calls: list[str] = []

    def translate(self, table: str, settings: TranslatorSettings) -> SourceFragmentSet:
        self.calls.append(table)
        type_name = to_pascal_case(table)
        fragments: dict[ArtifactKind, str | None] = {
            ArtifactKind.MODEL: f"package model\n\n// {type_name} stub\ntype {type_name} struct{{}}\n",
            ArtifactKind.PERSISTENCE: f'update["stub"] = "{table}"',
            ArtifactKind.HANDLER: f'type Create{type_name}Request struct {{\n\tID uint64 `json:"id"`\n}}',
            ArtifactKind.TABLE_NAME: type_name,
        }
        fragments.update(self.overrides)
        return SourceFragmentSet(table=table, fragments=fragments)


@pytest.fixture
def stub_translator() -> StubTranslator:
    return StubTranslator()


@pytest.fixture
def stub_translator_cls() -> type[StubTranslator]:
    """The stub class itself, for tests that need custom fragments."""
    return StubTranslator


@pytest.fixture
def sample_fragments() -> SourceFragmentSet:
    return StubTranslator().translate("order", TranslatorSettings())


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

@pytest.fixture
def schema_dict() -> dict[str, Any]:
    return {
        "tables": {
            "order": {
                "comment": "customer orders",
                "columns": [
                    {"name": "id", "type": "bigint", "primary_key": True, "unsigned": True},
                    {"name": "order_no", "type": "varchar(64)", "comment": "order number"},
                    {"name": "amount", "type": "decimal(10,2)"},
                    {"name": "paid", "type": "bool"},
                    {"name": "paid_at", "type": "datetime"},
                    {"name": "created_at", "type": "datetime"},
                    {"name": "updated_at", "type": "datetime"},
                    {"name": "deleted_at", "type": "datetime"},
                ],
            },
            "item": {
                "columns": [
                    {"name": "id", "type": "bigint", "primary_key": True},
                    {"name": "title", "type": "varchar(100)"},
                    {"name": "quantity", "type": "int"},
                ],
            },
        }
    }


@pytest.fixture
def schema_catalog(schema_dict: dict[str, Any]) -> SchemaCatalog:
    return SchemaCatalog.from_dict(schema_dict)


# ---------------------------------------------------------------------------
# Mini skeleton
# ---------------------------------------------------------------------------

@pytest.fixture
def mini_skeleton(tmp_path: Path) -> Path:
    """A small skeleton tree exercising scopes, marks and renames.

    Layout::

        app/userExample.go      marker pair + placeholder
        app/userExample.go.mgo  document variant
        app/run.sh              executable
        skip/ignored.txt        outside every scope
        README.md
    """
    root = tmp_path / "skeleton"
    (root / "app").mkdir(parents=True)
    (root / "skip").mkdir()

    (root / "app" / "userExample.go").write_text(
        textwrap.dedent("""\
            package app

            // delete the templates code start
            type UserExample struct{}
            // delete the templates code end
            // todo generate model code to here
            """),
        encoding="utf-8",
    )
    (root / "app" / "userExample.go.mgo").write_text(
        "package app\n\n// document UserExample\n", encoding="utf-8"
    )
    run = root / "app" / "run.sh"
    run.write_text("#!/bin/bash\necho serverNameExample\n", encoding="utf-8")
    run.chmod(0o755)
    (root / "skip" / "ignored.txt").write_text("ignored\n", encoding="utf-8")
    (root / "README.md").write_text("# skeleton\n", encoding="utf-8")
    return root


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo ``setup_logging`` so later tests can capture records with caplog."""
    yield
    log = logging.getLogger("sqlscaffold")
    log.handlers.clear()
    log.setLevel(logging.NOTSET)
    log.propagate = True
