"""Translator that renders Go source fragments from table descriptions.

For each table it produces:

* ``model``       -- the complete model file (package, imports, struct).
* ``persistence`` -- the field-by-field update code spliced into the DAO.
* ``handler``     -- request and response structs for the HTTP handler.
* ``table_name``  -- the Go type name derived from the table name.
"""

from __future__ import annotations

import logging
from typing import Any

from jinja2 import TemplateError

from sqlscaffold.config import DatabaseDriver
from sqlscaffold.errors import TranslationError
from sqlscaffold.utils import to_camel_case, to_pascal_case

from .base import ArtifactKind, SourceFragmentSet, TranslatorSettings
from .renderer import TemplateRenderer
from .schema import EMBEDDED_COLUMNS, TIMESTAMP_COLUMNS, ColumnSchema, SchemaCatalog, TableSchema

logger = logging.getLogger(__name__)


class TemplateTranslator:
    """Renders fragments with Jinja2.

    Tables found in *catalog* are translated with their columns. Without a
    catalog every table is translated with only its primary key and
    timestamps; with a catalog an unknown table is a ``TranslationError``.
    """

    def __init__(
        self,
        catalog: SchemaCatalog | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.catalog = catalog
        self.renderer = renderer or TemplateRenderer()

    def translate(self, table: str, settings: TranslatorSettings) -> SourceFragmentSet:
        schema = self._lookup(table, settings.driver)
        context = build_context(schema, settings)
        try:
            fragments = {
                ArtifactKind.MODEL: self.renderer.render("model.go.j2", context).rstrip() + "\n",
                ArtifactKind.PERSISTENCE: self.renderer.render("dao_update.go.j2", context).strip(),
                ArtifactKind.HANDLER: self.renderer.render("handler_types.go.j2", context).strip(),
                ArtifactKind.TABLE_NAME: context["type_name"],
            }
        except TemplateError as exc:
            raise TranslationError(table, f"template rendering failed: {exc}") from exc
        logger.debug("translated table %s as %s", table, context["type_name"])
        return SourceFragmentSet(table=table, fragments=fragments)

    def _lookup(self, table: str, driver: DatabaseDriver) -> TableSchema:
        if self.catalog is None:
            return TableSchema.minimal(table, driver)
        schema = self.catalog.get(table)
        if schema is None:
            raise TranslationError(table, "table not found in schema file")
        if not schema.columns:
            raise TranslationError(table, "table has no columns")
        return schema


# ---------------------------------------------------------------------------
# Context building
# ---------------------------------------------------------------------------

_NUMERIC_TYPES = frozenset({"int", "int64", "uint", "uint64", "float32", "float64"})


def build_context(schema: TableSchema, settings: TranslatorSettings) -> dict[str, Any]:
    """Compute everything the fragment templates need for *schema*."""
    driver = settings.driver
    document = driver is DatabaseDriver.MONGO
    embed = settings.embed and not document

    pk = schema.primary_key
    if pk is None:
        pk = TableSchema.minimal(schema.name, driver).primary_key
        columns = [pk, *schema.columns]
    else:
        columns = list(schema.columns)

    struct_columns = [
        c for c in columns if not (embed and c.name.lower() in EMBEDDED_COLUMNS)
    ]
    business_columns = [
        c for c in columns
        if not c.primary_key and c.name.lower() not in TIMESTAMP_COLUMNS
    ]

    fields = [_field(c, settings) for c in struct_columns]
    imports: set[str] = set()
    if embed:
        imports.add(f"{settings.shared_namespace}/ggorm")
    for f in fields:
        if "time." in f["go_type"]:
            imports.add("time")
        if "primitive." in f["go_type"]:
            imports.add("go.mongodb.org/mongo-driver/bson/primitive")

    type_name = to_pascal_case(schema.name)
    return {
        "table": schema.name,
        "comment": schema.comment or f"table {schema.name}",
        "type_name": type_name,
        "json_name": _json_name(schema.name, settings.json_name_type),
        "document": document,
        "embed": embed,
        "imports": sorted(imports, key=lambda imp: ("." in imp.split("/")[0], imp)),
        "fields": fields,
        "update_fields": [_update_field(c, settings) for c in business_columns],
        "request_fields": [_field(c, settings) for c in business_columns],
        "id_type": pk.go_type(driver),
    }


def _json_name(name: str, json_name_type: int) -> str:
    return to_camel_case(name) if json_name_type == 1 else name


def _field(column: ColumnSchema, settings: TranslatorSettings) -> dict[str, Any]:
    driver = settings.driver
    json_name = "id" if column.primary_key else _json_name(column.name, settings.json_name_type)
    if driver is DatabaseDriver.MONGO:
        bson_name = "_id" if column.primary_key else column.name
        tag = f'bson:"{bson_name}" json:"{json_name}"'
    else:
        gorm = f"column:{column.name};type:{column.type}"
        if column.primary_key:
            gorm += ";primary_key"
        tag = f'gorm:"{gorm}" json:"{json_name}"'
    return {
        "name": column.name,
        "field": to_pascal_case(column.name),
        "go_type": column.go_type(driver),
        "json": json_name,
        "tag": tag,
        "comment": column.comment,
        "primary_key": column.primary_key,
    }


def _update_field(column: ColumnSchema, settings: TranslatorSettings) -> dict[str, Any]:
    go_type = column.go_type(settings.driver)
    field = to_pascal_case(column.name)
    if go_type == "string":
        check = f'table.{field} != ""'
    elif go_type in _NUMERIC_TYPES:
        check = f"table.{field} != 0"
    elif go_type.startswith("*"):
        check = f"table.{field} != nil"
    elif go_type == "time.Time":
        check = f"!table.{field}.IsZero()"
    else:
        check = ""
    return {"name": column.name, "field": field, "check": check}
