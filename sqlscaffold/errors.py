"""Exception hierarchy for sqlscaffold.

Every failure that should stop a generation run derives from
``ScaffoldError`` so the CLI can report it and exit non-zero.
``BestEffortError`` is the exception to that rule: it is raised by
post-generation helpers and swallowed (logged) by the controller.
"""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base class for unrecoverable generation errors."""


class ConfigurationError(ScaffoldError):
    """Raised for missing or invalid input before any file is touched."""


class TranslationError(ScaffoldError):
    """Raised when the schema translator cannot produce fragments for a table."""

    def __init__(self, table: str, message: str) -> None:
        self.table = table
        super().__init__(f"table '{table}': {message}")


class MaterializationError(ScaffoldError):
    """Raised when the output tree cannot be written.

    ``paths`` lists the offending destinations (existing files on a
    collision, the failing file on a write error).
    """

    def __init__(self, message: str, paths: list[Path] | None = None) -> None:
        self.paths = list(paths or [])
        super().__init__(message)


class BestEffortError(Exception):
    """Raised by optional post-generation steps; never aborts a run."""
