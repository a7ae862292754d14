"""Builds the instruction set for one generation pass.

Given a request, the table being generated, its source fragments and the
store variant, ``RuleSetBuilder`` decides which skeleton paths are processed,
which marker-delimited regions are deleted, and which literal substitutions
run, grouped by tier:

1. STRUCTURAL -- mark spans and whole-file replacements.
2. CONFIG     -- placeholder blocks replaced by driver/transport specific text.
3. ARTIFACT   -- placeholders replaced by the translator's fragments.
4. NAMESPACE  -- the skeleton namespace rewritten to the caller's module, then
   the shared library sub-path rewritten back.
5. COSMETIC   -- example names, variant suffixes and file renames, ending with
   the case-sensitive entity rename.
"""

from __future__ import annotations

import logging
import random
import zlib

from sqlscaffold.config import GenerationRequest, GeneratorConfig
from sqlscaffold.translator import ArtifactKind, SourceFragmentSet
from sqlscaffold.utils import to_kebab_case

from . import snippets
from .marks import END_MARK, START_MARK, WELL_END_MARK, WELL_START_MARK, resolve_mark_rules
from .materializer import Skeleton
from .models import (
    DeletionPolicy,
    GenerationPlan,
    InclusionSpec,
    MarkSpan,
    PassKind,
    RuleSet,
    RuleTier,
    StoreVariant,
    SubstitutionRule,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Skeleton contract: files and placeholders
# ---------------------------------------------------------------------------

APP_CONFIG_FILE = "configs/serverNameExample.yml"
README_FILE = "README.md"
MODEL_FILE = "internal/model/userExample.go"
MODEL_INIT_FILE = "internal/model/init.go"
MODEL_INIT_MGO_FILE = "internal/model/init.go.mgo"
DAO_FILE = "internal/dao/userExample.go"
DAO_MGO_FILE = "internal/dao/userExample.go.mgo"
DAO_TEST_FILE = "internal/dao/userExample_test.go"
HANDLER_FILE = "internal/handler/userExample.go"
HANDLER_MGO_FILE = "internal/handler/userExample.go.mgo"
HANDLER_TEST_FILE = "internal/handler/userExample_test.go"
HTTP_SERVER_FILE = "internal/server/http.go"
GITIGNORE_FILE = ".gitignore"
DOCKERFILE = "scripts/build/Dockerfile"
DOCKER_COMPOSE_FILE = "deployments/docker-compose/docker-compose.yml"
K8S_DEPLOYMENT_FILE = "deployments/kubernetes/server-name-example-deployment.yml"
K8S_SERVICE_FILE = "deployments/kubernetes/server-name-example-svc.yml"
IMAGE_BUILD_FILE = "scripts/image-build.sh"

APP_CONFIG_MARK = "# todo generate http or rpc server configuration here"
APP_CONFIG_DB_MARK = "# todo generate the database configuration here"
MODEL_MARK = "// todo generate model code to here"
MODEL_INIT_DB_MARK = "// todo generate initialisation database code here"
DAO_MARK = "// todo generate the update fields code to here"
HANDLER_MARK = "// todo generate the request and response struct to here"
DOCKERFILE_MARK = "# todo generate dockerfile code for http or grpc here"
DOCKER_COMPOSE_MARK = "# todo generate docker-compose.yml code for http or grpc here"
K8S_DEPLOYMENT_MARK = "# todo generate k8s-deployment.yml code for http or grpc here"
K8S_SERVICE_MARK = "# todo generate k8s-svc.yml code for http or grpc here"
IMAGE_BUILD_MARK = "# todo generate image-build code for http or grpc here"
SHARED_VERSION_MARK = "v0.0.0-skeleton"

EXAMPLE_ENTITY = "UserExample"
EXAMPLE_SEQUENCE = "userExampleNO       = 1"
EXAMPLE_DSNS = (
    "root:123456@(192.168.3.37:3306)/account",
    "root:123456@192.168.3.37:27017/account",
    "root:123456@192.168.3.37:5432/account",
)
EXAMPLE_SQLITE_FILE = "test/sql/sqlite/skeleton.db"

# ---------------------------------------------------------------------------
# Inclusion lists
# ---------------------------------------------------------------------------

SERVICE_DIRS = (
    "cmd/serverNameExample_httpExample",
    "configs",
    "deployments",
    "docs",
    "scripts",
    "internal",
)
SERVICE_FILES = (
    ".gitignore",
    "go.mod",
    "go.sum",
    "Makefile-for-http",
    "README.md",
)
SERVICE_IGNORE_DIRS = ("internal/service", "internal/rpcclient")

_RPC_ONLY_FILES = (
    "swagger.json", "swagger.yaml", "apis.go",  # docs
    "userExample_rpc.go", "systemCode_rpc.go",  # internal/ecode
    "routers_pbExample.go", "userExample_router.go",  # internal/routers
    "grpc.go",  # internal/server
    "scripts/protoc.sh",
    "init_test.go",  # internal/model
    "cacheNameExample.go",  # internal/cache
    "handler/userExample_logic.go",  # internal/handler
)

SERVICE_IGNORE_FILES: dict[StoreVariant, tuple[str, ...]] = {
    StoreVariant.RELATIONAL: _RPC_ONLY_FILES + (
        "init.go.mgo",
        "cache/userExample.go.mgo",
        "dao/userExample.go.mgo",
        "handler/userExample.go.mgo",
        "userExample_types.go.mgo",
    ),
    StoreVariant.DOCUMENT: _RPC_ONLY_FILES + (
        "init.go",
        "cache/userExample.go",
        "cache/userExample_test.go",
        "dao/userExample.go",
        "dao/userExample_test.go",
        "handler/userExample.go",
        "handler/userExample_test.go",
        "userExample_types.go",
    ),
}

HANDLER_DIRS = ("internal/handler",)

HANDLER_IGNORE_FILES: dict[StoreVariant, tuple[str, ...]] = {
    StoreVariant.RELATIONAL: (
        "handler/userExample.go.mgo",
        "handler/userExample_logic.go",
        "handler/userExample_test.go",
    ),
    StoreVariant.DOCUMENT: (
        "handler/userExample.go",
        "handler/userExample_logic.go",
        "handler/userExample_test.go",
    ),
}

# ---------------------------------------------------------------------------
# Mark-deletion lists
# ---------------------------------------------------------------------------

SERVICE_MARKS = (
    MarkSpan(MODEL_FILE, START_MARK, END_MARK),
    MarkSpan(MODEL_INIT_FILE, START_MARK, END_MARK),
    MarkSpan(DAO_FILE, START_MARK, END_MARK),
    MarkSpan(DAO_MGO_FILE, START_MARK, END_MARK),
    MarkSpan(DAO_TEST_FILE, START_MARK, END_MARK),
    MarkSpan(HANDLER_FILE, START_MARK, END_MARK),
    MarkSpan(HANDLER_MGO_FILE, START_MARK, END_MARK),
    MarkSpan(HANDLER_TEST_FILE, START_MARK, END_MARK),
    MarkSpan(HTTP_SERVER_FILE, START_MARK, END_MARK),
    MarkSpan(DOCKERFILE, WELL_START_MARK, WELL_END_MARK),
    MarkSpan(DOCKER_COMPOSE_FILE, WELL_START_MARK, WELL_END_MARK),
    MarkSpan(K8S_DEPLOYMENT_FILE, WELL_START_MARK, WELL_END_MARK),
    MarkSpan(K8S_SERVICE_FILE, WELL_START_MARK, WELL_END_MARK),
    MarkSpan(GITIGNORE_FILE, WELL_START_MARK, WELL_END_MARK),
    MarkSpan(IMAGE_BUILD_FILE, WELL_START_MARK, WELL_END_MARK, DeletionPolicy.ALL),
    MarkSpan(APP_CONFIG_FILE, WELL_START_MARK, WELL_END_MARK, DeletionPolicy.ALL),
)

HANDLER_MARKS = (
    MarkSpan(HANDLER_FILE, START_MARK, END_MARK),
    MarkSpan(HANDLER_MGO_FILE, START_MARK, END_MARK),
)

# Variant-suffixed file names and their canonical form.
VARIANT_RENAMES = (
    ("init.go.mgo", "init.go"),
    ("userExample_types.go.mgo", "userExample_types.go"),
    ("userExample.go.mgo", "userExample.go"),
)


def _rule(pattern: str, replacement: str, case_sensitive: bool = False) -> SubstitutionRule:
    return SubstitutionRule(pattern=pattern, replacement=replacement, case_sensitive=case_sensitive)


# ---------------------------------------------------------------------------
# RuleSetBuilder
# ---------------------------------------------------------------------------


class RuleSetBuilder:
    """Assembles the ``GenerationPlan`` for a pass.

    Mark spans are resolved against the pristine *skeleton*. The random
    example sequence constant is drawn from *rng*; without one, a generator
    seeded from the request is used so identical requests yield identical
    output.
    """

    def __init__(
        self,
        skeleton: Skeleton,
        config: GeneratorConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.skeleton = skeleton
        self.config = config or GeneratorConfig()
        self.rng = rng

    def build(
        self,
        request: GenerationRequest,
        table: str,
        fragments: SourceFragmentSet,
        variant: StoreVariant,
        pass_kind: PassKind = PassKind.SERVICE,
    ) -> GenerationPlan:
        """Return the inclusion spec, marks and tiered rules for one pass."""
        if pass_kind is PassKind.SERVICE:
            inclusion = InclusionSpec(
                included_dirs=set(SERVICE_DIRS),
                included_files=set(SERVICE_FILES),
                excluded_dirs=set(SERVICE_IGNORE_DIRS),
                excluded_files=set(SERVICE_IGNORE_FILES[variant]),
            )
            marks = list(SERVICE_MARKS)
        else:
            inclusion = InclusionSpec(
                included_dirs=set(HANDLER_DIRS),
                excluded_files=set(HANDLER_IGNORE_FILES[variant]),
            )
            marks = list(HANDLER_MARKS)

        rules = RuleSet()
        self._add_structural(rules, marks, request, pass_kind)
        if pass_kind is PassKind.SERVICE:
            self._add_config(rules, request)
            self._add_artifacts(rules, request, fragments, with_model=True)
        else:
            self._add_artifacts(rules, request, fragments, with_model=False)
        self._add_namespace(rules, request)
        if pass_kind is PassKind.SERVICE:
            self._add_cosmetic(rules, request, table)
        self._add_renames(rules, fragments)

        logger.debug(
            "built %s plan for table %s: %d marks, %d rules",
            pass_kind.value, table, len(marks), len(rules),
        )
        return GenerationPlan(
            pass_kind=pass_kind,
            variant=variant,
            inclusion=inclusion,
            marks=marks,
            rules=rules,
        )

    # -- Tier 1 ------------------------------------------------------------

    def _add_structural(
        self,
        rules: RuleSet,
        marks: list[MarkSpan],
        request: GenerationRequest,
        pass_kind: PassKind,
    ) -> None:
        for mark in marks:
            rules.add(RuleTier.STRUCTURAL, *resolve_mark_rules(mark, self.skeleton.read(mark.file)))
        if pass_kind is PassKind.SERVICE:
            readme = self.skeleton.read(README_FILE)
            if readme:
                rules.add(
                    RuleTier.STRUCTURAL,
                    _rule(readme, f"## {request.service_name}\n", case_sensitive=True),
                )

    # -- Tier 2 ------------------------------------------------------------

    def _add_config(self, rules: RuleSet, request: GenerationRequest) -> None:
        driver = request.database_driver
        rules.add(
            RuleTier.CONFIG,
            _rule(APP_CONFIG_MARK, snippets.HTTP_SERVER_CONFIG),
            _rule(APP_CONFIG_DB_MARK, snippets.db_config_code(driver)),
            _rule(MODEL_INIT_DB_MARK, snippets.init_db_code(driver)),
            _rule(DOCKERFILE_MARK, snippets.DOCKERFILE_HTTP),
            _rule(DOCKER_COMPOSE_MARK, snippets.DOCKER_COMPOSE_HTTP),
            _rule(K8S_DEPLOYMENT_MARK, snippets.K8S_DEPLOYMENT_HTTP),
            _rule(K8S_SERVICE_MARK, snippets.K8S_SERVICE_HTTP),
            _rule(IMAGE_BUILD_MARK, snippets.IMAGE_BUILD_HTTP),
            _rule(SHARED_VERSION_MARK, self.config.shared_pkg_version),
        )

    # -- Tier 3 ------------------------------------------------------------

    def _add_artifacts(
        self,
        rules: RuleSet,
        request: GenerationRequest,
        fragments: SourceFragmentSet,
        with_model: bool,
    ) -> None:
        if with_model:
            rules.add(
                RuleTier.ARTIFACT,
                _rule(MODEL_MARK, fragments.require(ArtifactKind.MODEL)),
                _rule(DAO_MARK, fragments.require(ArtifactKind.PERSISTENCE)),
            )
        handler = snippets.adjust_id_type(
            fragments.require(ArtifactKind.HANDLER), request.database_driver
        )
        rules.add(RuleTier.ARTIFACT, _rule(HANDLER_MARK, handler))

    # -- Tier 4 ------------------------------------------------------------

    def _add_namespace(self, rules: RuleSet, request: GenerationRequest) -> None:
        # The restore must follow the broad rewrite: the shared library is
        # never copied into the generated module.
        own = self.config.self_namespace
        module = request.module_namespace
        rules.add(
            RuleTier.NAMESPACE,
            _rule(f"{own}/{self.config.skeleton_source_path}", module),
            _rule(own, module),
            _rule(f"{module}/{self.config.shared_pkg_subpath}", self.config.shared_namespace),
        )

    # -- Tier 5 ------------------------------------------------------------

    def _add_cosmetic(self, rules: RuleSet, request: GenerationRequest, table: str) -> None:
        driver = request.database_driver
        rng = self.rng or random.Random(self._seed(request, table))
        rules.add(
            RuleTier.COSMETIC,
            _rule("skeleton api docs", f"{request.service_name} api docs"),
            _rule(EXAMPLE_SEQUENCE, f"userExampleNO = {rng.randrange(1, 100)}"),
            _rule("serverNameExample", request.service_name),
            _rule("server-name-example", to_kebab_case(request.service_name)),
            _rule("project-name-example", request.project_name),
            _rule("projectNameExample", request.project_name),
            _rule("repo-addr-example", request.repo_address),
            _rule("image-repo-host", snippets.parse_image_repo_host(request.repo_address)),
            _rule("_httpExample", ""),
            _rule("_mixExample", ""),
            _rule("_pbExample", ""),
            *(_rule(dsn, request.database_dsn) for dsn in EXAMPLE_DSNS),
            _rule(EXAMPLE_SQLITE_FILE, snippets.sqlite_dsn_adaptation(driver, request.database_dsn)),
            _rule("Makefile-for-http", "Makefile"),
        )

    def _add_renames(self, rules: RuleSet, fragments: SourceFragmentSet) -> None:
        rules.add(RuleTier.COSMETIC, *(_rule(old, new) for old, new in VARIANT_RENAMES))
        rules.add(
            RuleTier.COSMETIC,
            _rule(EXAMPLE_ENTITY, fragments.require(ArtifactKind.TABLE_NAME), case_sensitive=True),
        )

    @staticmethod
    def _seed(request: GenerationRequest, table: str) -> int:
        key = f"{request.module_namespace}:{request.service_name}:{table}"
        return zlib.crc32(key.encode("utf-8"))
