"""Data types shared by the rule builder and the tree materializer."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum, IntEnum

from sqlscaffold.config import DatabaseDriver
from sqlscaffold.errors import ConfigurationError
from sqlscaffold.utils import lower_first


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class StoreVariant(str, Enum):
    """Which family of mutually exclusive skeleton files survives a pass."""
    RELATIONAL = "relational"
    DOCUMENT = "document"

    @classmethod
    def for_driver(cls, driver: DatabaseDriver | str) -> "StoreVariant":
        """Select the variant for *driver*.

        Raises:
            ConfigurationError: If the driver is not supported.
        """
        if not isinstance(driver, DatabaseDriver):
            driver = DatabaseDriver.parse(str(driver))
        if driver is DatabaseDriver.MONGO:
            return cls.DOCUMENT
        if driver in _RELATIONAL_DRIVERS:
            return cls.RELATIONAL
        raise ConfigurationError(f"unsupported db driver: {driver.value}")


_RELATIONAL_DRIVERS = frozenset({
    DatabaseDriver.MYSQL,
    DatabaseDriver.POSTGRESQL,
    DatabaseDriver.TIDB,
    DatabaseDriver.SQLITE,
})


class PassKind(str, Enum):
    """Kind of generation pass; also the suffix of a default output directory."""
    SERVICE = "http"
    HANDLER = "handler"


class DeletionPolicy(str, Enum):
    """How many marker-delimited spans of a file are deleted."""
    FIRST = "first"
    ALL = "all"


class RuleTier(IntEnum):
    """Substitution tiers; each tier is fully applied before the next."""
    STRUCTURAL = 1
    CONFIG = 2
    ARTIFACT = 3
    NAMESPACE = 4
    COSMETIC = 5


# ---------------------------------------------------------------------------
# Rules and specs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SubstitutionRule:
    """A literal text substitution.

    Matching is case-insensitive unless ``case_sensitive`` is set. A
    case-sensitive rule rewrites the exact pattern and its lower-first form,
    each to the matching form of the replacement, so ``UserExample`` ->
    ``Order`` also turns ``userExample`` into ``order``.
    """

    pattern: str
    replacement: str
    case_sensitive: bool = False

    def __post_init__(self) -> None:
        if not self.pattern:
            raise ValueError("substitution pattern must not be empty")

    def apply(self, text: str) -> str:
        if self.case_sensitive:
            text = text.replace(self.pattern, self.replacement)
            lowered = lower_first(self.pattern)
            if lowered != self.pattern:
                text = text.replace(lowered, lower_first(self.replacement))
            return text
        regex = re.compile(re.escape(self.pattern), re.IGNORECASE)
        return regex.sub(lambda _: self.replacement, text)


@dataclass(frozen=True)
class MarkSpan:
    """A marker-delimited region of one skeleton file, deleted with its markers."""

    file: str
    start_marker: str
    end_marker: str
    policy: DeletionPolicy = DeletionPolicy.FIRST


@dataclass
class InclusionSpec:
    """Which skeleton paths a pass processes.

    Exclusions only suppress paths that an inclusion already covers.
    """

    included_dirs: set[str] = field(default_factory=set)
    included_files: set[str] = field(default_factory=set)
    excluded_dirs: set[str] = field(default_factory=set)
    excluded_files: set[str] = field(default_factory=set)

    def includes(self, rel_path: str) -> bool:
        """Return ``True`` if *rel_path* is in scope and not excluded."""
        in_scope = rel_path in self.included_files or any(
            rel_path.startswith(d.rstrip("/") + "/") for d in self.included_dirs
        )
        if not in_scope:
            return False
        if any(_under_dir(rel_path, d) for d in self.excluded_dirs):
            return False
        return not any(_matches_file(rel_path, f) for f in self.excluded_files)


def _under_dir(rel_path: str, directory: str) -> bool:
    directory = directory.strip("/")
    return rel_path.startswith(directory + "/") or f"/{directory}/" in rel_path


def _matches_file(rel_path: str, pattern: str) -> bool:
    pattern = pattern.strip("/")
    return rel_path == pattern or rel_path.endswith("/" + pattern)


class RuleSet:
    """Substitution rules grouped by tier.

    Rules are added to a named tier; ``ordered()`` flattens them in tier
    order, keeping insertion order inside a tier. Duplicate rules within a
    tier are dropped.
    """

    def __init__(self) -> None:
        self._tiers: dict[RuleTier, list[SubstitutionRule]] = {tier: [] for tier in RuleTier}

    def add(self, tier: RuleTier, *rules: SubstitutionRule) -> None:
        bucket = self._tiers[tier]
        for rule in rules:
            if rule not in bucket:
                bucket.append(rule)

    def tier(self, tier: RuleTier) -> list[SubstitutionRule]:
        return list(self._tiers[tier])

    def ordered(self) -> list[SubstitutionRule]:
        return [rule for tier in RuleTier for rule in self._tiers[tier]]

    def __len__(self) -> int:
        return sum(len(rules) for rules in self._tiers.values())


@dataclass
class GenerationPlan:
    """Everything the materializer needs for one pass."""

    pass_kind: PassKind
    variant: StoreVariant
    inclusion: InclusionSpec
    marks: list[MarkSpan]
    rules: RuleSet
