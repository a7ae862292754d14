"""Template instantiation engine.

Turns a skeleton project into a concrete one in three steps:

* ``RuleSetBuilder`` decides the scope, the marker-delimited deletions and
  the tiered substitution rules for a pass.
* ``TreeMaterializer`` walks the ``Skeleton`` and writes every in-scope file
  with the rules applied to its content and path.
* ``marks`` resolves marker pairs into deletion rules.

Quick usage::

    from sqlscaffold.engine import RuleSetBuilder, Skeleton, TreeMaterializer

    skeleton = Skeleton(config.skeleton_dir)
    plan = RuleSetBuilder(skeleton, config).build(request, table, fragments, variant)
    materializer = TreeMaterializer(skeleton)
    materializer.set_inclusion(plan.inclusion)
    materializer.set_substitutions(plan.rules.ordered())
    materializer.set_output_root(request.output_path, "service_http")
    materializer.materialize()
"""

from sqlscaffold.engine.materializer import MaterializeMode, Skeleton, TreeMaterializer, apply_substitutions
from sqlscaffold.engine.models import (
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
from sqlscaffold.engine.rules import RuleSetBuilder

__all__ = [
    "DeletionPolicy",
    "GenerationPlan",
    "InclusionSpec",
    "MarkSpan",
    "MaterializeMode",
    "PassKind",
    "RuleSet",
    "RuleSetBuilder",
    "RuleTier",
    "Skeleton",
    "StoreVariant",
    "SubstitutionRule",
    "TreeMaterializer",
    "apply_substitutions",
]
