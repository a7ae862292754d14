"""Tests for table descriptions and schema file loading (sqlscaffold.translator.schema)."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from sqlscaffold.config import DatabaseDriver
from sqlscaffold.errors import ConfigurationError
from sqlscaffold.translator import ColumnSchema, SchemaCatalog, TableSchema, load_schema_file

pytestmark = pytest.mark.unit


class TestColumnSchema:
    @pytest.mark.parametrize(
        "column_type, go_type",
        [
            ("varchar(64)", "string"),
            ("BIGINT", "int64"),
            ("int", "int"),
            ("decimal(10,2)", "float64"),
            ("tinyint(1)", "int"),
            ("boolean", "bool"),
            ("datetime", "*time.Time"),
            ("geometry", "string"),
        ],
    )
    def test_relational_go_type(self, column_type, go_type):
        assert ColumnSchema(name="c", type=column_type).go_type(DatabaseDriver.MYSQL) == go_type

    def test_unsigned_integer(self):
        column = ColumnSchema(name="id", type="bigint", unsigned=True)
        assert column.go_type(DatabaseDriver.POSTGRESQL) == "uint64"

    def test_unsigned_ignored_for_non_integers(self):
        column = ColumnSchema(name="price", type="decimal", unsigned=True)
        assert column.go_type(DatabaseDriver.MYSQL) == "float64"

    def test_mongo_primary_key_is_object_id(self):
        column = ColumnSchema(name="id", type="bigint", primary_key=True)
        assert column.go_type(DatabaseDriver.MONGO) == "primitive.ObjectID"

    def test_mongo_times_are_values(self):
        column = ColumnSchema(name="paid_at", type="timestamp")
        assert column.go_type(DatabaseDriver.MONGO) == "time.Time"

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError):
            ColumnSchema(name="")


class TestTableSchema:
    def test_primary_key(self, schema_catalog):
        assert schema_catalog.get("order").primary_key.name == "id"

    def test_no_primary_key(self):
        assert TableSchema(name="log", columns=[ColumnSchema(name="msg")]).primary_key is None

    def test_minimal_relational(self):
        table = TableSchema.minimal("order", DatabaseDriver.MYSQL)
        assert [c.name for c in table.columns] == ["id", "created_at", "updated_at", "deleted_at"]
        assert table.primary_key.go_type(DatabaseDriver.MYSQL) == "uint64"

    def test_minimal_document(self):
        table = TableSchema.minimal("order", DatabaseDriver.MONGO)
        assert [c.name for c in table.columns] == ["id", "created_at", "updated_at"]
        assert table.primary_key.type == "objectid"


class TestSchemaCatalog:
    def test_names_filled_from_keys(self, schema_catalog):
        assert set(schema_catalog.tables) == {"order", "item"}
        assert schema_catalog.get("item").name == "item"
        assert schema_catalog.get("order").comment == "customer orders"

    def test_missing_table(self, schema_catalog):
        assert schema_catalog.get("nope") is None

    def test_empty_document(self):
        assert SchemaCatalog.from_dict({}).tables == {}
        assert SchemaCatalog.from_dict({"tables": None}).tables == {}

    def test_table_without_body(self):
        catalog = SchemaCatalog.from_dict({"tables": {"tag": None}})
        assert catalog.get("tag").columns == []


class TestLoadSchemaFile:
    def test_yaml(self, tmp_path: Path, schema_dict):
        path = tmp_path / "schema.yml"
        path.write_text(yaml.safe_dump(schema_dict), encoding="utf-8")
        catalog = load_schema_file(path)
        assert len(catalog.get("order").columns) == 8

    def test_json(self, tmp_path: Path, schema_dict):
        path = tmp_path / "schema.json"
        path.write_text(json.dumps(schema_dict), encoding="utf-8")
        assert load_schema_file(str(path)).get("item").columns[1].name == "title"

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigurationError, match="schema file not found"):
            load_schema_file(tmp_path / "missing.yml")

    def test_malformed_yaml(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("tables: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="cannot parse"):
            load_schema_file(path)

    def test_malformed_json(self, tmp_path: Path):
        path = tmp_path / "bad.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="cannot parse"):
            load_schema_file(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "list.yml"
        path.write_text("- order\n- item\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            load_schema_file(path)

    def test_invalid_column(self, tmp_path: Path):
        path = tmp_path / "schema.json"
        path.write_text(json.dumps({"tables": {"order": {"columns": [{"type": "int"}]}}}), encoding="utf-8")
        with pytest.raises(ConfigurationError, match="invalid schema file"):
            load_schema_file(path)
