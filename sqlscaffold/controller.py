"""Generation orchestrator.

Runs one full-service pass for the primary table and one handler-only pass
for every secondary table, all against the same output directory::

    PRIMARY --> SECONDARY* --> DONE

The first failure stops the chain; files written by earlier passes stay on
disk.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from pathlib import Path

from sqlscaffold.config import GenerationInfo, GenerationRequest, GeneratorConfig
from sqlscaffold.deploy import generate_configmap, save_gen_info
from sqlscaffold.engine import (
    GenerationPlan,
    MaterializeMode,
    PassKind,
    RuleSetBuilder,
    Skeleton,
    StoreVariant,
    TreeMaterializer,
)
from sqlscaffold.errors import BestEffortError, ScaffoldError, TranslationError
from sqlscaffold.translator import (
    ArtifactKind,
    SchemaTranslator,
    SourceFragmentSet,
    TemplateTranslator,
    TranslatorSettings,
)

logger = logging.getLogger(__name__)

SERVICE_ARTIFACTS = (
    ArtifactKind.MODEL,
    ArtifactKind.PERSISTENCE,
    ArtifactKind.HANDLER,
    ArtifactKind.TABLE_NAME,
)
HANDLER_ARTIFACTS = (ArtifactKind.HANDLER, ArtifactKind.TABLE_NAME)


@dataclass
class GenerationResult:
    """Outcome of a successful generation run."""

    output_path: Path
    tables: list[str]
    files: list[Path] = field(default_factory=list)
    configmap: Path | None = None


class GenerationController:
    """Drives the translator, the rule builder and the materializer.

    Args:
        config: Engine settings; defaults to ``GeneratorConfig()``.
        translator: Any ``SchemaTranslator``; defaults to a catalog-less
            ``TemplateTranslator``.
        rng: Source of the example sequence constant. Leave unset for
            output that depends only on the request.
    """

    def __init__(
        self,
        config: GeneratorConfig | None = None,
        translator: SchemaTranslator | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or GeneratorConfig()
        self.translator = translator or TemplateTranslator()
        self.skeleton = Skeleton(self.config.skeleton_dir)
        self.builder = RuleSetBuilder(self.skeleton, self.config, rng)

    def run(self, request: GenerationRequest) -> GenerationResult:
        """Generate the project described by *request*.

        Raises:
            ConfigurationError: If the driver is unsupported.
            TranslationError: If a table cannot be translated.
            MaterializationError: If the output cannot be written.
        """
        variant = StoreVariant.for_driver(request.database_driver)
        settings = TranslatorSettings(
            driver=request.database_driver,
            embed=request.embed,
            json_name_type=request.json_name_type,
            shared_namespace=self.config.shared_namespace,
        )

        # PRIMARY
        table = request.primary_table
        fragments = self._translate(table, settings, SERVICE_ARTIFACTS)
        plan = self.builder.build(request, table, fragments, variant, PassKind.SERVICE)
        materializer = self._materializer(plan)
        root = materializer.set_output_root(
            request.output_path, f"{request.service_name}_{PassKind.SERVICE.value}"
        )
        logger.info("generating service for table %s into %s", table, root)
        written = materializer.materialize(MaterializeMode.CREATE)
        self._write_gen_info(request, root)

        # SECONDARY
        for table in request.secondary_tables:
            fragments = self._translate(table, settings, HANDLER_ARTIFACTS)
            plan = self.builder.build(request, table, fragments, variant, PassKind.HANDLER)
            materializer = self._materializer(plan)
            materializer.set_output_root(root, f"{request.service_name}_{PassKind.HANDLER.value}")
            logger.info("adding handler for table %s", table)
            written.extend(materializer.materialize(MaterializeMode.AUGMENT))

        # DONE
        configmap = None
        try:
            configmap = generate_configmap(request.service_name, root)
        except BestEffortError as exc:
            logger.warning("skipped kubernetes configmap: %s", exc)

        return GenerationResult(
            output_path=root,
            tables=[request.primary_table, *request.secondary_tables],
            files=written,
            configmap=configmap,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _translate(
        self,
        table: str,
        settings: TranslatorSettings,
        required: tuple[ArtifactKind, ...],
    ) -> SourceFragmentSet:
        try:
            fragments = self.translator.translate(table, settings)
        except ScaffoldError:
            raise
        except Exception as exc:
            raise TranslationError(table, str(exc)) from exc
        missing = fragments.missing(*required)
        if missing:
            kinds = ", ".join(kind.value for kind in missing)
            raise TranslationError(table, f"translator produced no {kinds} code")
        return fragments

    def _materializer(self, plan: GenerationPlan) -> TreeMaterializer:
        materializer = TreeMaterializer(self.skeleton, self.config.output_time_format)
        materializer.set_inclusion(plan.inclusion)
        materializer.set_substitutions(plan.rules.ordered())
        return materializer

    def _write_gen_info(self, request: GenerationRequest, root: Path) -> None:
        info = GenerationInfo(
            module_namespace=request.module_namespace,
            service_name=request.service_name,
            output_path=str(root),
            database_driver=request.database_driver.value,
            tables=[request.primary_table, *request.secondary_tables],
        )
        try:
            save_gen_info(info, root)
        except BestEffortError as exc:
            logger.warning("skipped generation info: %s", exc)
