"""Mapping descriptors produced by the converter, one ClassMetadata per class."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from sqlalchemy.types import TypeEngine

from schemabridge.services.errors import DuplicateMappingError

__all__ = [
    "AssociationKind",
    "AssociationMapping",
    "ClassMetadata",
    "ClassMetadataBuilder",
    "FieldMapping",
    "GeneratorType",
    "JoinColumn",
    "SequenceDefinition",
    "TableDescriptor",
]


class GeneratorType(StrEnum):
    """Identifier generation strategy of a class."""

    AUTO = "auto"
    SEQUENCE = "sequence"
    NONE = "none"


class AssociationKind(StrEnum):
    """Association shape chosen by the relation mapper."""

    ONE_TO_ONE = "one_to_one"
    ONE_TO_MANY = "one_to_many"
    MANY_TO_MANY = "many_to_many"


@dataclass(frozen=True)
class SequenceDefinition:
    """Sequence generator settings declared on a column."""

    sequence_name: str
    allocation_size: int | None = None
    initial_value: int | None = None


@dataclass(frozen=True)
class TableDescriptor:
    """
    Physical table identity plus index declarations.

    ``name`` stays ``None`` when the legacy document did not declare a table
    name; the consumer then applies its own naming convention.
    """

    name: str | None = None
    schema: str | None = None
    indexes: dict[str, tuple[str, ...]] = field(default_factory=dict)
    unique_constraints: dict[str, tuple[str, ...]] = field(default_factory=dict)


@dataclass(frozen=True)
class FieldMapping:
    """
    Field mapping for one column.

    Optional attributes are ``None`` unless the legacy column declared them.
    """

    field_name: str
    column_name: str
    type: str
    sql_type: TypeEngine[Any] = field(compare=False, repr=False)
    length: int | None = None
    precision: int | None = None
    scale: int | None = None
    unique: bool | None = None
    notnull: bool | None = None
    version: bool | None = None
    options: dict[str, Any] | None = None
    id: bool = False


@dataclass(frozen=True)
class JoinColumn:
    """Join column linking the owning table to the referenced one."""

    name: str
    referenced_column_name: str
    on_delete: str | None = None


@dataclass(frozen=True)
class AssociationMapping:
    """Association between the owning class and a target entity."""

    kind: AssociationKind
    field_name: str
    target_entity: str
    mapped_by: str
    join_columns: tuple[JoinColumn, ...] = ()


@dataclass(frozen=True)
class ClassMetadata:
    """Fully converted mapping metadata for one persistent class."""

    name: str
    table: TableDescriptor
    fields: tuple[FieldMapping, ...]
    associations: tuple[AssociationMapping, ...] = ()
    generator_type: GeneratorType = GeneratorType.NONE
    sequence: SequenceDefinition | None = None

    def field(self, name: str) -> FieldMapping:
        """
        Return the field mapping exposed under ``name``.

        Raises
        ------
        KeyError
            If no field with that name is mapped.
        """
        for mapping in self.fields:
            if mapping.field_name == name:
                return mapping
        raise KeyError(name)

    def association(self, name: str) -> AssociationMapping:
        """
        Return the association mapped under ``name``.

        Raises
        ------
        KeyError
            If no association with that name is mapped.
        """
        for mapping in self.associations:
            if mapping.field_name == name:
                return mapping
        raise KeyError(name)

    @property
    def identifier(self) -> tuple[FieldMapping, ...]:
        """Identifier-bearing fields in declaration order."""
        return tuple(mapping for mapping in self.fields if mapping.id)


class ClassMetadataBuilder:
    """
    Mutable accumulator used while a single class is being converted.

    The builder is discarded after :meth:`build`; callers only ever see the
    frozen :class:`ClassMetadata`.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.table_name: str | None = None
        self.table_schema: str | None = None
        self.indexes: dict[str, tuple[str, ...]] = {}
        self.unique_constraints: dict[str, tuple[str, ...]] = {}
        self.generator_type = GeneratorType.NONE
        self.sequence: SequenceDefinition | None = None
        self._fields: dict[str, FieldMapping] = {}
        self._associations: dict[str, AssociationMapping] = {}

    def add_field(self, mapping: FieldMapping) -> None:
        """Register a field mapping; exposed names must be unique."""
        if mapping.field_name in self._fields:
            raise DuplicateMappingError(self.name, mapping.field_name, kind="field")
        self._fields[mapping.field_name] = mapping

    def add_association(self, mapping: AssociationMapping) -> None:
        """Register an association; association names must be unique."""
        if mapping.field_name in self._associations:
            raise DuplicateMappingError(self.name, mapping.field_name, kind="association")
        self._associations[mapping.field_name] = mapping

    def has_identifier(self) -> bool:
        """Return True once any registered field carries the id flag."""
        return any(mapping.id for mapping in self._fields.values())

    def build(self) -> ClassMetadata:
        """
        Freeze the accumulated state.

        Returns
        -------
        ClassMetadata
            Immutable metadata snapshot for the class.
        """
        return ClassMetadata(
            name=self.name,
            table=TableDescriptor(
                name=self.table_name,
                schema=self.table_schema,
                indexes=dict(self.indexes),
                unique_constraints=dict(self.unique_constraints),
            ),
            fields=tuple(self._fields.values()),
            associations=tuple(self._associations.values()),
            generator_type=self.generator_type,
            sequence=self.sequence,
        )
