"""Convert legacy class schemas into ClassMetadata, one class at a time."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from schemabridge.config.models import ConverterConfig
from schemabridge.core.types import ClassSchemaDict, ColumnSpecInput, RelationSpecDict, SchemaDocument
from schemabridge.mapping.columns import GeneratorDirective, map_column
from schemabridge.mapping.indexes import map_indexes
from schemabridge.mapping.naming import Tableizer, tableize
from schemabridge.mapping.relations import map_relation
from schemabridge.mapping.tables import map_table_name
from schemabridge.mapping.types import TypeRegistry, TypeResolver
from schemabridge.models.metadata import (
    ClassMetadata,
    ClassMetadataBuilder,
    FieldMapping,
    GeneratorType,
)
from schemabridge.services.errors import ConversionError, log_problem

log = logging.getLogger(__name__)


@dataclass
class ConversionReport:
    """Outcome of converting a whole schema document."""

    metadata: list[ClassMetadata] = field(default_factory=list)
    failures: dict[str, ConversionError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """True when every class converted."""
        return not self.failures


class SchemaConverter:
    """
    Orchestrates the table, column, index and relation mappers for each class.

    Parameters
    ----------
    resolver
        Type resolver; built from ``config`` when omitted.
    tableizer
        Naming convention for default relation columns.
    config
        Converter settings (legacy aliases, synthetic identifier).
    """

    def __init__(
        self,
        resolver: TypeResolver | None = None,
        tableizer: Tableizer = tableize,
        config: ConverterConfig | None = None,
    ) -> None:
        self.config = config if config is not None else ConverterConfig()
        self.resolver = (
            resolver
            if resolver is not None
            else TypeResolver(TypeRegistry(), aliases=self.config.legacy_type_aliases)
        )
        self.tableizer = tableizer

    def convert_class(self, class_name: str, class_schema: ClassSchemaDict) -> ClassMetadata:
        """
        Build the mapping metadata for one class.

        Returns
        -------
        ClassMetadata
            Frozen metadata for the class.

        Raises
        ------
        ConversionError
            If a column type is unknown or a name is mapped twice; no partial
            metadata is produced.
        """
        builder = ClassMetadataBuilder(class_name)
        builder.table_name, builder.table_schema = map_table_name(class_schema.get("tableName"))
        self._convert_columns(builder, class_schema.get("columns") or {})

        index_mapping = map_indexes(class_schema.get("indexes"))
        builder.indexes.update(index_mapping.indexes)
        builder.unique_constraints.update(index_mapping.unique_constraints)

        self._convert_relations(builder, class_schema.get("relations") or {})
        metadata = builder.build()
        log.debug(
            "Converted %s: %d fields, %d associations, generator=%s",
            class_name,
            len(metadata.fields),
            len(metadata.associations),
            metadata.generator_type.value,
        )
        return metadata

    def _convert_columns(
        self,
        builder: ClassMetadataBuilder,
        columns: Mapping[str, ColumnSpecInput],
    ) -> None:
        directive: GeneratorDirective | None = None
        for column_key, raw_spec in columns.items():
            mapping = map_column(column_key, raw_spec, self.resolver)
            builder.add_field(mapping.field)
            if mapping.directive is not None:
                directive = mapping.directive

        if directive is not None:
            builder.generator_type = directive.strategy
            builder.sequence = directive.sequence if directive.strategy is GeneratorType.SEQUENCE else None

        if not builder.has_identifier():
            self._inject_identifier(builder)

    def _inject_identifier(self, builder: ClassMetadataBuilder) -> None:
        name = self.config.synthetic_id_field
        handle = self.resolver.resolve(self.config.synthetic_id_type)
        builder.add_field(
            FieldMapping(
                field_name=name,
                column_name=name,
                type=handle.name,
                sql_type=handle.sql_type,
                id=True,
            )
        )
        builder.generator_type = GeneratorType.AUTO
        builder.sequence = None
        log.debug("Injected synthetic identifier %s.%s", builder.name, name)

    def _convert_relations(
        self,
        builder: ClassMetadataBuilder,
        relations: Mapping[str, RelationSpecDict],
    ) -> None:
        for key, spec in relations.items():
            builder.add_association(map_relation(key, spec or {}, builder.name, self.tableizer))

    def convert(self, document: SchemaDocument) -> list[ClassMetadata]:
        """
        Convert every class of a document, stopping at the first failure.

        Returns
        -------
        list[ClassMetadata]
            Metadata in document order.
        """
        return [self.convert_class(name, schema or {}) for name, schema in document.items()]

    def convert_document(self, document: SchemaDocument, *, fail_fast: bool = True) -> ConversionReport:
        """
        Convert a document, optionally continuing past failed classes.

        Parameters
        ----------
        document
            Class name to class schema mapping.
        fail_fast
            Re-raise the first ConversionError when True; otherwise log it,
            record it under the class name, and continue.

        Returns
        -------
        ConversionReport
            Converted metadata and per-class failures.
        """
        report = ConversionReport()
        for name, schema in document.items():
            try:
                report.metadata.append(self.convert_class(name, schema or {}))
            except ConversionError as exc:
                if fail_fast:
                    raise
                log_problem(log, exc.problem_detail)
                report.failures[name] = exc
        log.info(
            "Converted %d classes (%d failed)",
            len(report.metadata),
            len(report.failures),
        )
        return report


def convert_schema(
    document: SchemaDocument,
    *,
    config: ConverterConfig | None = None,
) -> list[ClassMetadata]:
    """
    Convert a whole document with a default converter.

    Returns
    -------
    list[ClassMetadata]
        Metadata in document order.
    """
    return SchemaConverter(config=config).convert(document)
