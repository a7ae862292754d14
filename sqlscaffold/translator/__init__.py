"""Schema translation: table descriptions to source fragments.

The generator depends only on the ``SchemaTranslator`` protocol and the
``SourceFragmentSet`` it returns. ``TemplateTranslator`` is the bundled
implementation::

    from sqlscaffold.translator import TemplateTranslator, TranslatorSettings

    fragments = TemplateTranslator().translate("order", TranslatorSettings())
    fragments.require(ArtifactKind.MODEL)
"""

from sqlscaffold.translator.base import (
    ArtifactKind,
    SchemaTranslator,
    SourceFragmentSet,
    TranslatorSettings,
)
from sqlscaffold.translator.renderer import TemplateRenderer
from sqlscaffold.translator.schema import ColumnSchema, SchemaCatalog, TableSchema, load_schema_file
from sqlscaffold.translator.template_translator import TemplateTranslator

__all__ = [
    "ArtifactKind",
    "ColumnSchema",
    "SchemaCatalog",
    "SchemaTranslator",
    "SourceFragmentSet",
    "TableSchema",
    "TemplateRenderer",
    "TemplateTranslator",
    "TranslatorSettings",
    "load_schema_file",
]
