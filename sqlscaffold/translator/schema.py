"""Table descriptions consumed by the template translator.

Column types are abstract type names (``bigint``, ``varchar``, ``datetime``,
``objectid``, ...) mapped to Go types through a lookup table; no SQL is
parsed. Descriptions are loaded from a YAML or JSON document::

    tables:
      order:
        comment: customer orders
        columns:
          - {name: id, type: bigint, primary_key: true}
          - {name: order_no, type: varchar(64)}
          - {name: amount, type: decimal}
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from sqlscaffold.config import DatabaseDriver
from sqlscaffold.errors import ConfigurationError

GO_TYPE_MAP: dict[str, str] = {
    "tinyint": "int",
    "smallint": "int",
    "mediumint": "int",
    "int": "int",
    "integer": "int",
    "bigint": "int64",
    "serial": "int64",
    "bigserial": "int64",
    "float": "float32",
    "double": "float64",
    "real": "float64",
    "decimal": "float64",
    "numeric": "float64",
    "char": "string",
    "varchar": "string",
    "string": "string",
    "text": "string",
    "mediumtext": "string",
    "longtext": "string",
    "json": "string",
    "uuid": "string",
    "enum": "string",
    "bool": "bool",
    "boolean": "bool",
    "date": "*time.Time",
    "time": "*time.Time",
    "datetime": "*time.Time",
    "timestamp": "*time.Time",
    "objectid": "primitive.ObjectID",
}

# Columns provided by the embedded base model struct.
EMBEDDED_COLUMNS = frozenset({"id", "created_at", "updated_at", "deleted_at"})
TIMESTAMP_COLUMNS = frozenset({"created_at", "updated_at", "deleted_at"})


class ColumnSchema(BaseModel):
    """One table column."""
    name: str = Field(..., min_length=1)
    type: str = Field(default="varchar")
    primary_key: bool = Field(default=False)
    unsigned: bool = Field(default=False)
    comment: str = Field(default="")

    @property
    def base_type(self) -> str:
        """Type name without size or modifiers: ``varchar(64)`` -> ``varchar``."""
        return self.type.split("(")[0].strip().lower()

    def go_type(self, driver: DatabaseDriver) -> str:
        if driver is DatabaseDriver.MONGO and self.primary_key:
            return "primitive.ObjectID"
        go = GO_TYPE_MAP.get(self.base_type, "string")
        if driver is DatabaseDriver.MONGO and go == "*time.Time":
            return "time.Time"
        if self.unsigned and go in ("int", "int64"):
            return "u" + go
        return go


class TableSchema(BaseModel):
    """A table and its columns."""
    name: str
    comment: str = Field(default="")
    columns: list[ColumnSchema] = Field(default_factory=list)

    @property
    def primary_key(self) -> ColumnSchema | None:
        for column in self.columns:
            if column.primary_key:
                return column
        return None

    @classmethod
    def minimal(cls, name: str, driver: DatabaseDriver) -> "TableSchema":
        """A table with only the primary key and timestamp columns."""
        if driver is DatabaseDriver.MONGO:
            columns = [
                ColumnSchema(name="id", type="objectid", primary_key=True),
                ColumnSchema(name="created_at", type="datetime"),
                ColumnSchema(name="updated_at", type="datetime"),
            ]
        else:
            columns = [
                ColumnSchema(name="id", type="bigint", primary_key=True, unsigned=True),
                ColumnSchema(name="created_at", type="datetime"),
                ColumnSchema(name="updated_at", type="datetime"),
                ColumnSchema(name="deleted_at", type="datetime"),
            ]
        return cls(name=name, columns=columns)


class SchemaCatalog(BaseModel):
    """Table descriptions keyed by table name."""
    tables: dict[str, TableSchema] = Field(default_factory=dict)

    def get(self, name: str) -> TableSchema | None:
        return self.tables.get(name)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SchemaCatalog":
        """Build a catalog, filling each table's ``name`` from its key."""
        raw_tables = data.get("tables", {}) or {}
        tables = {
            name: {**(spec or {}), "name": name} for name, spec in raw_tables.items()
        }
        return cls.model_validate({"tables": tables})


def load_schema_file(path: str | Path) -> SchemaCatalog:
    """Load a schema catalog from a ``.json``, ``.yml`` or ``.yaml`` file.

    Raises:
        ConfigurationError: If the file is missing or malformed.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise ConfigurationError(f"schema file not found: {file_path}")
    raw = file_path.read_text(encoding="utf-8")
    try:
        if file_path.suffix.lower() == ".json":
            data = json.loads(raw)
        else:
            data = yaml.safe_load(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"cannot parse schema file {file_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"schema file {file_path} must contain a mapping")
    try:
        return SchemaCatalog.from_dict(data)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid schema file {file_path}: {exc}") from exc
