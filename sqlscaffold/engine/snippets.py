"""Driver- and transport-specific text spliced into skeleton placeholders.

Each constant or function here returns the block that replaces one
placeholder comment of the skeleton. Blocks carry no trailing newline: the
placeholder line keeps its own.
"""

from __future__ import annotations

import re
from pathlib import Path
from urllib.parse import urlparse

from sqlscaffold.config import DatabaseDriver
from sqlscaffold.translator.renderer import TemplateRenderer

_renderer = TemplateRenderer(Path(__file__).parent / "templates")

# Config section and ``Init*`` function named after the store, per driver.
_STORE = {
    DatabaseDriver.MYSQL: "mysql",
    DatabaseDriver.TIDB: "mysql",
    DatabaseDriver.POSTGRESQL: "postgresql",
    DatabaseDriver.SQLITE: "sqlite",
    DatabaseDriver.MONGO: "mongodb",
}

_DRIVER_CASES = {
    "mysql": ["ggorm.DBDriverMysql", "ggorm.DBDriverTidb"],
    "postgresql": ["ggorm.DBDriverPostgresql"],
    "sqlite": ["ggorm.DBDriverSqlite"],
    "mongodb": ["mgo.DBDriverName"],
}

_DSN_EXPR = {
    "mysql": "config.Get().Database.Mysql.Dsn",
    "postgresql": "utils.AdaptivePostgresqlDsn(config.Get().Database.Postgresql.Dsn)",
    "sqlite": "config.Get().Database.Sqlite.DBFile",
    "mongodb": "config.Get().Database.Mongodb.Dsn",
}


def _render_block(template_name: str, context: dict[str, object]) -> str:
    return _renderer.render(template_name, context).rstrip("\n")


# ---------------------------------------------------------------------------
# Runtime configuration (configs/serverNameExample.yml)
# ---------------------------------------------------------------------------

HTTP_SERVER_CONFIG = """\
# http server settings
http:
  port: 8080                # listen port
  timeout: 0                # request timeout, unit(second), if 0 means not set, if greater than 0 means set timeout"""


def db_config_code(driver: DatabaseDriver) -> str:
    """Database section of the runtime configuration for *driver*."""
    store = _STORE[driver]
    name = "mongodb" if store == "mongodb" else driver.value
    return _render_block("db_config.yml.j2", {"driver": name, "store": store})


# ---------------------------------------------------------------------------
# Database initialisation (internal/model/init.go)
# ---------------------------------------------------------------------------


def init_db_code(driver: DatabaseDriver) -> str:
    """Go code that opens the database connection for *driver*."""
    store = _STORE[driver]
    context = {
        "store": store,
        "driver_cases": _DRIVER_CASES[store],
        "dsn_expr": _DSN_EXPR[store],
    }
    return _render_block("init_db.go.j2", context)


# ---------------------------------------------------------------------------
# Build and deployment artifacts (HTTP transport)
# ---------------------------------------------------------------------------

DOCKERFILE_HTTP = """\
COPY configs/ /app/configs/
COPY serverNameExample /app/serverNameExample
RUN chmod +x /app/serverNameExample

# http port
EXPOSE 8080

WORKDIR /app

CMD ["./serverNameExample", "-c", "configs/serverNameExample.yml"]"""

DOCKER_COMPOSE_HTTP = """\
    ports:
      - "8080:8080"   # http port
    healthcheck:
      test: ["CMD", "curl", "-f", "http://localhost:8080/health"]
      interval: 10s
      timeout: 5s
      retries: 3"""

K8S_DEPLOYMENT_HTTP = """\
          ports:
            - name: http-port
              containerPort: 8080
          readinessProbe:
            httpGet:
              port: http-port
              path: /health
            initialDelaySeconds: 10
            timeoutSeconds: 2
            periodSeconds: 10
            successThreshold: 1
            failureThreshold: 3
          livenessProbe:
            httpGet:
              port: http-port
              path: /health
            initialDelaySeconds: 10
            timeoutSeconds: 2
            periodSeconds: 10
            successThreshold: 1
            failureThreshold: 3"""

K8S_SERVICE_HTTP = """\
    - name: server-name-example-svc-http-port
      port: 8080
      targetPort: 8080"""

IMAGE_BUILD_HTTP = """\
# compile the binary file
mkdir -p ${binaryPath}
CGO_ENABLED=0 GOOS=linux GOARCH=amd64 go build -ldflags "all=-s -w" -o ${binaryPath}/${serverName} cmd/${serverName}/main.go
cp -rf configs ${binaryPath}/"""


# ---------------------------------------------------------------------------
# Fragment and value adaptation
# ---------------------------------------------------------------------------

_ID_FIELD = re.compile(r"^(\s*ID\s+)([\w.\[\]*]+)(\s+`json:\"id\")", re.MULTILINE)


def adjust_id_type(handler_code: str, driver: DatabaseDriver) -> str:
    """Rewrite the ``ID`` fields of handler request/response structs.

    Relational drivers identify rows by ``uint64``; mongo identifies
    documents by their hex ``string`` form.
    """
    id_type = "string" if driver is DatabaseDriver.MONGO else "uint64"
    return _ID_FIELD.sub(lambda m: f"{m.group(1)}{id_type}{m.group(3)}", handler_code)


_DOCKER_HUB_INDEX = "https://index.docker.io/v1/"


def parse_image_repo_host(repo_address: str) -> str:
    """Extract the registry host from an image repository address.

    ``192.168.3.37:9443/user-name`` -> ``192.168.3.37:9443``. Addresses that
    point at Docker Hub, and empty or single-segment addresses, resolve to
    its v1 index URL.
    """
    addr = repo_address.strip()
    if not addr:
        return _DOCKER_HUB_INDEX
    if "://" not in addr:
        addr = "https://" + addr
    host = urlparse(addr).netloc
    if "." not in host and ":" not in host and host != "localhost":
        return _DOCKER_HUB_INDEX
    if host in ("docker.io", "index.docker.io", "registry-1.docker.io"):
        return _DOCKER_HUB_INDEX
    return host


def sqlite_dsn_adaptation(driver: DatabaseDriver, dsn: str) -> str:
    """Normalise a sqlite database file path so it is valid inside YAML."""
    if driver is DatabaseDriver.SQLITE:
        return dsn.replace("\\", "/")
    return dsn
