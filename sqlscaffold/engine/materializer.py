"""Skeleton tree walking and output writing.

``Skeleton`` gives read access to the pre-authored project tree.
``TreeMaterializer`` takes the scope, exclusions and ordered substitutions of
one pass and writes the instantiated files to an output root. Substitutions
are applied to file contents and to relative paths, which is how
variant-suffixed and example-named files get their final names.

All target paths are computed before the first write, so a collision is
reported without touching the destination.
"""

from __future__ import annotations

import logging
import shutil
from datetime import datetime
from enum import Enum
from pathlib import Path

from sqlscaffold.errors import MaterializationError

from .models import InclusionSpec, SubstitutionRule

logger = logging.getLogger(__name__)

_SKIP_NAMES = frozenset({"__pycache__", ".DS_Store"})


class MaterializeMode(str, Enum):
    """``CREATE`` needs a fresh root; ``AUGMENT`` adds files to an existing one."""
    CREATE = "create"
    AUGMENT = "augment"


def apply_substitutions(text: str, rules: list[SubstitutionRule]) -> str:
    """Apply *rules* to *text* in order."""
    for rule in rules:
        text = rule.apply(text)
    return text


# ---------------------------------------------------------------------------
# Skeleton
# ---------------------------------------------------------------------------


class Skeleton:
    """Read-only view of a skeleton project directory."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)
        if not self.root.is_dir():
            raise MaterializationError(f"skeleton directory not found: {self.root}", [self.root])

    def files(self) -> list[str]:
        """Return every file as a sorted list of POSIX paths relative to the root."""
        found = []
        for path in self.root.rglob("*"):
            rel = path.relative_to(self.root)
            if any(part in _SKIP_NAMES for part in rel.parts) or not path.is_file():
                continue
            found.append(rel.as_posix())
        return sorted(found)

    def read(self, rel_path: str) -> str | None:
        """Return the text of *rel_path*, or ``None`` if it does not exist."""
        path = self.root / rel_path
        if not path.is_file():
            return None
        return path.read_text(encoding="utf-8")

    def path(self, rel_path: str) -> Path:
        return self.root / rel_path


# ---------------------------------------------------------------------------
# TreeMaterializer
# ---------------------------------------------------------------------------


class TreeMaterializer:
    """Instantiates a skeleton into an output directory.

    Construct one per pass; configure it with ``set_scope``,
    ``set_exclusions``, ``set_substitutions`` and ``set_output_root``; then
    call ``materialize``.
    """

    def __init__(self, skeleton: Skeleton, time_format: str = "%y%m%d%H%M") -> None:
        self.skeleton = skeleton
        self.time_format = time_format
        self.inclusion = InclusionSpec()
        self.rules: list[SubstitutionRule] = []
        self.output_root: Path | None = None

    # -- Configuration -----------------------------------------------------

    def set_scope(self, included_dirs: set[str] | list[str], included_files: set[str] | list[str]) -> None:
        self.inclusion.included_dirs = set(included_dirs)
        self.inclusion.included_files = set(included_files)

    def set_exclusions(self, excluded_dirs: set[str] | list[str], excluded_files: set[str] | list[str]) -> None:
        self.inclusion.excluded_dirs = set(excluded_dirs)
        self.inclusion.excluded_files = set(excluded_files)

    def set_inclusion(self, inclusion: InclusionSpec) -> None:
        """Shorthand for ``set_scope`` plus ``set_exclusions``."""
        self.set_scope(inclusion.included_dirs, inclusion.included_files)
        self.set_exclusions(inclusion.excluded_dirs, inclusion.excluded_files)

    def set_substitutions(self, rules: list[SubstitutionRule]) -> None:
        self.rules = list(rules)

    def set_output_root(self, base_path: str | Path | None, name: str) -> Path:
        """Resolve the output root.

        An explicit *base_path* is used as-is. Without one the root is
        ``./<name>_<timestamp>`` in the current directory.
        """
        if base_path:
            root = Path(base_path)
        else:
            stamp = datetime.now().strftime(self.time_format)
            root = Path.cwd() / f"{name}_{stamp}"
        self.output_root = root.resolve()
        return self.output_root

    # -- Planning ----------------------------------------------------------

    def selected_files(self) -> list[str]:
        """Skeleton files in scope for this pass, in sorted order."""
        return [rel for rel in self.skeleton.files() if self.inclusion.includes(rel)]

    def plan(self) -> dict[str, str]:
        """Map each selected skeleton file to its rewritten relative path.

        Raises:
            MaterializationError: If two skeleton files end up at the same path.
        """
        targets: dict[str, str] = {}
        sources: dict[str, str] = {}
        for rel in self.selected_files():
            target = apply_substitutions(rel, self.rules)
            if target in sources:
                raise MaterializationError(
                    f"skeleton files '{sources[target]}' and '{rel}' both map to '{target}'",
                    [Path(target)],
                )
            sources[target] = rel
            targets[rel] = target
        return targets

    # -- Writing -----------------------------------------------------------

    def materialize(self, mode: MaterializeMode = MaterializeMode.CREATE) -> list[Path]:
        """Write the instantiated files and return their paths.

        Raises:
            MaterializationError: If no output root was set, the root already
                exists (``CREATE``), the root is missing or a target file
                already exists (``AUGMENT``), or a write fails.
        """
        root = self.output_root
        if root is None:
            raise MaterializationError("output root is not set")

        if mode is MaterializeMode.CREATE and root.exists():
            raise MaterializationError(
                f"output directory already exists: {root}, code generation has been cancelled",
                [root],
            )
        if mode is MaterializeMode.AUGMENT and not root.is_dir():
            raise MaterializationError(f"output directory does not exist: {root}", [root])

        targets = self.plan()
        if mode is MaterializeMode.AUGMENT:
            existing = sorted(root / t for t in targets.values() if (root / t).exists())
            if existing:
                listing = "\n    ".join(str(p) for p in existing)
                raise MaterializationError(
                    f"existing files detected\n    {listing}\ncode generation has been cancelled",
                    existing,
                )

        written: list[Path] = []
        for rel, target in targets.items():
            out = root / target
            try:
                content = apply_substitutions(self.skeleton.read(rel) or "", self.rules)
                out.parent.mkdir(parents=True, exist_ok=True)
                out.write_text(content, encoding="utf-8")
                shutil.copymode(self.skeleton.path(rel), out)
            except OSError as exc:
                raise MaterializationError(f"failed to write {out}: {exc}", [out]) from exc
            logger.debug("wrote %s", out)
            written.append(out)

        logger.info("materialized %d files into %s (%s)", len(written), root, mode.value)
        return written
