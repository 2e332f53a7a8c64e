"""Convert legacy declarative schema documents into ORM mapping metadata."""

from schemabridge.ingestion.schema_loader import load_schema_document
from schemabridge.mapping.converter import ConversionReport, SchemaConverter, convert_schema
from schemabridge.models.metadata import (
    AssociationKind,
    AssociationMapping,
    ClassMetadata,
    FieldMapping,
    GeneratorType,
    JoinColumn,
    SequenceDefinition,
    TableDescriptor,
)
from schemabridge.services.errors import ConversionError, SchemaLoadError, UnknownTypeError

__all__ = [
    "AssociationKind",
    "AssociationMapping",
    "ClassMetadata",
    "ConversionError",
    "ConversionReport",
    "FieldMapping",
    "GeneratorType",
    "JoinColumn",
    "SchemaConverter",
    "SchemaLoadError",
    "SequenceDefinition",
    "TableDescriptor",
    "UnknownTypeError",
    "convert_schema",
    "load_schema_document",
]
