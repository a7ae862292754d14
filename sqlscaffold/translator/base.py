"""Contract between the generator and a schema translator.

A translator turns one table into named source fragments. The generator
only depends on ``SchemaTranslator.translate`` and on the fragment kinds
listed in ``ArtifactKind``.
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field

from sqlscaffold.config import DatabaseDriver, GeneratorConfig
from sqlscaffold.errors import TranslationError


class ArtifactKind(str, Enum):
    """Kinds of source fragment a translator produces."""
    MODEL = "model"
    PERSISTENCE = "persistence"
    HANDLER = "handler"
    TABLE_NAME = "table_name"


class TranslatorSettings(BaseModel):
    """Options that shape the generated fragments."""

    driver: DatabaseDriver = Field(default=DatabaseDriver.MYSQL)
    embed: bool = Field(default=True, description="Embed the shared base model struct")
    json_name_type: int = Field(default=1, ge=0, le=1, description="0: snake_case, 1: camelCase")
    shared_namespace: str = Field(default_factory=lambda: GeneratorConfig().shared_namespace)


class SourceFragmentSet(BaseModel):
    """Fragments generated for one table.

    A ``None`` value means the translator could not produce that fragment.
    """

    table: str
    fragments: dict[ArtifactKind, str | None] = Field(default_factory=dict)

    def get(self, kind: ArtifactKind) -> str | None:
        return self.fragments.get(kind)

    def require(self, kind: ArtifactKind) -> str:
        """Return the fragment for *kind*.

        Raises:
            TranslationError: If the fragment is absent.
        """
        value = self.fragments.get(kind)
        if value is None:
            raise TranslationError(self.table, f"translator produced no {kind.value} code")
        return value

    def missing(self, *kinds: ArtifactKind) -> list[ArtifactKind]:
        """Return the kinds among *kinds* that are absent."""
        return [k for k in kinds if self.fragments.get(k) is None]


@runtime_checkable
class SchemaTranslator(Protocol):
    """Anything that can turn a table into source fragments."""

    def translate(self, table: str, settings: TranslatorSettings) -> SourceFragmentSet:
        ...
