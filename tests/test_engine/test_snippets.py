"""Tests for placeholder snippets and value adaptation (sqlscaffold.engine.snippets)."""

from __future__ import annotations

import pytest
import yaml

from sqlscaffold.config import DatabaseDriver
from sqlscaffold.engine import snippets

pytestmark = pytest.mark.unit


class TestDbConfigCode:
    @pytest.mark.parametrize(
        "driver, name, section",
        [
            (DatabaseDriver.MYSQL, "mysql", "mysql"),
            (DatabaseDriver.TIDB, "tidb", "mysql"),
            (DatabaseDriver.POSTGRESQL, "postgresql", "postgresql"),
            (DatabaseDriver.SQLITE, "sqlite", "sqlite"),
            (DatabaseDriver.MONGO, "mongodb", "mongodb"),
        ],
    )
    def test_valid_yaml_section(self, driver, name, section):
        data = yaml.safe_load(snippets.db_config_code(driver))
        assert data["database"]["driver"] == name
        assert section in data["database"]

    def test_mysql_and_tidb_share_section(self):
        tidb = yaml.safe_load(snippets.db_config_code(DatabaseDriver.TIDB))["database"]
        mysql = yaml.safe_load(snippets.db_config_code(DatabaseDriver.MYSQL))["database"]
        assert tidb["mysql"] == mysql["mysql"]
        assert set(tidb) == {"driver", "mysql"}

    def test_no_trailing_newline(self):
        for driver in DatabaseDriver:
            assert not snippets.db_config_code(driver).endswith("\n")

    def test_http_server_config_is_yaml(self):
        assert yaml.safe_load(snippets.HTTP_SERVER_CONFIG) == {"http": {"port": 8080, "timeout": 0}}


class TestInitDbCode:
    @pytest.mark.parametrize(
        "driver, func",
        [
            (DatabaseDriver.MYSQL, "func InitMysql()"),
            (DatabaseDriver.TIDB, "func InitMysql()"),
            (DatabaseDriver.POSTGRESQL, "func InitPostgresql()"),
            (DatabaseDriver.SQLITE, "func InitSqlite()"),
            (DatabaseDriver.MONGO, "func InitMongodb()"),
        ],
    )
    def test_init_function(self, driver, func):
        code = snippets.init_db_code(driver)
        assert code.startswith("// InitDB connect database\nfunc InitDB() {")
        assert func in code

    def test_no_trailing_newline(self):
        for driver in DatabaseDriver:
            assert not snippets.init_db_code(driver).endswith("\n")

    def test_tidb_shares_mysql_init(self):
        code = snippets.init_db_code(DatabaseDriver.TIDB)
        assert "case ggorm.DBDriverMysql, ggorm.DBDriverTidb:\n\t\tInitMysql()" in code
        assert code == snippets.init_db_code(DatabaseDriver.MYSQL)

    def test_postgresql_dsn_adapted(self):
        code = snippets.init_db_code(DatabaseDriver.POSTGRESQL)
        assert "ggorm.InitPostgresql(utils.AdaptivePostgresqlDsn(config.Get().Database.Postgresql.Dsn), opts...)" in code
        assert "config.Get().Database.Postgresql.EnableLog" in code

    def test_mongo_uses_document_store(self):
        code = snippets.init_db_code(DatabaseDriver.MONGO)
        assert "case mgo.DBDriverName:" in code
        assert "mgo.Init(config.Get().Database.Mongodb.Dsn, mgo.WithConnectTimeout(timeout))" in code
        assert "ggorm" not in code
        assert code.endswith("panic(\"InitMongodb error: \" + err.Error())\n\t}\n}")


class TestAdjustIdType:
    HANDLER = (
        "type CreateOrderRequest struct {\n"
        "\tOrderNo string `json:\"orderNo\"`\n"
        "}\n\n"
        "type UpdateOrderByIDRequest struct {\n"
        "\tID     uint64 `json:\"id\" binding:\"\"`\n"
        "\tAmount string `json:\"amount\"`\n"
        "}\n"
    )

    def test_mongo_uses_string(self):
        result = snippets.adjust_id_type(self.HANDLER, DatabaseDriver.MONGO)
        assert "\tID     string `json:\"id\" binding:\"\"`" in result
        assert "OrderNo string" in result

    def test_relational_uses_uint64(self):
        mongo = snippets.adjust_id_type(self.HANDLER, DatabaseDriver.MONGO)
        assert snippets.adjust_id_type(mongo, DatabaseDriver.POSTGRESQL) == self.HANDLER

    def test_other_fields_untouched(self):
        code = "\tUserID uint64 `json:\"userID\"`\n"
        assert snippets.adjust_id_type(code, DatabaseDriver.MONGO) == code


class TestParseImageRepoHost:
    @pytest.mark.parametrize(
        "address, host",
        [
            ("192.168.3.37:9443/user-name", "192.168.3.37:9443"),
            ("https://harbor.example.com/team", "harbor.example.com"),
            ("localhost:5000/dev", "localhost:5000"),
            ("zhufuyi", "https://index.docker.io/v1/"),
            ("docker.io/zhufuyi", "https://index.docker.io/v1/"),
            ("", "https://index.docker.io/v1/"),
            ("   ", "https://index.docker.io/v1/"),
        ],
    )
    def test_host(self, address, host):
        assert snippets.parse_image_repo_host(address) == host


class TestSqliteDsnAdaptation:
    def test_windows_path_normalised(self):
        assert snippets.sqlite_dsn_adaptation(DatabaseDriver.SQLITE, "C:\\data\\shop.db") == "C:/data/shop.db"

    def test_other_drivers_unchanged(self):
        dsn = "root:pw@(127.0.0.1:3306)/shop"
        assert snippets.sqlite_dsn_adaptation(DatabaseDriver.MYSQL, dsn) == dsn
