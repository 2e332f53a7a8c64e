"""
Column mapping: one legacy column spec to one field mapping.

The legacy format accepts either a bare type string or a structured mapping
for each column. Both are normalized into :class:`ColumnSpec` before any
inference runs, so the mapping code only deals with one shape.

Two pieces of inline syntax are part of the format:

* ``"<column> as <field>"`` in the column name exposes the column under a
  different field name (``ALIAS_PATTERN``).
* ``"<type>(<n>)"`` in the type embeds the column length (``TYPE_LENGTH_PATTERN``).
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from schemabridge.core.types import ColumnSpecInput
from schemabridge.mapping.types import TypeResolver
from schemabridge.models.metadata import FieldMapping, GeneratorType, SequenceDefinition

ALIAS_PATTERN = re.compile(r"(\w+)\sas\s(\w+)", re.IGNORECASE)
TYPE_LENGTH_PATTERN = re.compile(r"([a-zA-Z]+)\(([0-9]+)\)")

PASSTHROUGH_ATTRIBUTES = ("precision", "scale", "unique", "options", "notnull", "version")


@dataclass(frozen=True)
class ColumnSpec:
    """
    Canonical structured form of a legacy column entry.

    ``extras`` holds every declared key other than ``type``, ``name`` and
    ``length``; presence of a key matters more than its value in the legacy
    format, so absent keys are simply not stored.
    """

    type: str
    name: str | None = None
    length: int | None = None
    extras: Mapping[str, Any] = field(default_factory=dict)

    def has(self, key: str) -> bool:
        """Return True when ``key`` was declared on the column with a non-null value."""
        return self.extras.get(key) is not None

    def get(self, key: str, default: Any = None) -> Any:
        """Return the declared value of ``key`` or ``default``."""
        return self.extras.get(key, default)


@dataclass(frozen=True)
class GeneratorDirective:
    """Request to set the class-wide identifier generation strategy."""

    strategy: GeneratorType
    sequence: SequenceDefinition | None = None


@dataclass(frozen=True)
class ColumnMapping:
    """Result of mapping one column."""

    field: FieldMapping
    directive: GeneratorDirective | None = None


def normalize_column_spec(spec: ColumnSpecInput) -> ColumnSpec:
    """
    Resolve the string-or-mapping column entry into a :class:`ColumnSpec`.

    Returns
    -------
    ColumnSpec
        Structured spec; a string shorthand becomes the ``type``.
    """
    if isinstance(spec, str):
        return ColumnSpec(type=spec)
    raw = dict(spec)
    type_token = raw.pop("type", None)
    name = raw.pop("name", None)
    length = raw.pop("length", None)
    return ColumnSpec(
        type=str(type_token) if type_token is not None else "",
        name=name,
        length=int(length) if length is not None else None,
        extras=raw,
    )


def split_column_alias(storage_name: str, default_field: str) -> tuple[str, str]:
    """
    Apply the ``"<column> as <field>"`` syntax.

    Returns
    -------
    tuple[str, str]
        Storage column name and exposed field name.
    """
    match = ALIAS_PATTERN.search(storage_name)
    if match is None:
        return storage_name, default_field
    return match.group(1), match.group(2)


def split_type_length(type_token: str, length: int | None) -> tuple[str, int | None]:
    """
    Apply the ``"<type>(<n>)"`` syntax; an embedded length wins.

    Returns
    -------
    tuple[str, int | None]
        Bare type token and effective length.
    """
    match = TYPE_LENGTH_PATTERN.search(type_token)
    if match is None:
        return type_token, length
    return match.group(1), int(match.group(2))


def sequence_definition(sequence: str | Mapping[str, Any]) -> SequenceDefinition:
    """Build a sequence definition from the plain or structured ``sequence`` entry."""
    if isinstance(sequence, str):
        return SequenceDefinition(sequence_name=sequence)
    size = sequence.get("size")
    value = sequence.get("value")
    return SequenceDefinition(
        sequence_name=sequence["name"],
        allocation_size=int(size) if size is not None else None,
        initial_value=int(value) if value is not None else None,
    )


def generator_directive(spec: ColumnSpec) -> GeneratorDirective | None:
    """
    Derive the identifier strategy requested by a column.

    ``sequence`` takes precedence over ``autoincrement`` when a column
    declares both.
    """
    if spec.has("sequence"):
        return GeneratorDirective(
            strategy=GeneratorType.SEQUENCE,
            sequence=sequence_definition(spec.get("sequence")),
        )
    if spec.has("autoincrement"):
        return GeneratorDirective(strategy=GeneratorType.AUTO)
    return None


def map_column(column_key: str, raw_spec: ColumnSpecInput, resolver: TypeResolver) -> ColumnMapping:
    """
    Convert one legacy column into a field mapping.

    Parameters
    ----------
    column_key
        Key of the column inside the class's ``columns`` mapping.
    raw_spec
        String shorthand or structured column entry.
    resolver
        Type resolver backed by the target type registry.

    Returns
    -------
    ColumnMapping
        Field mapping plus the optional generator directive.

    Raises
    ------
    UnknownTypeError
        If the column type cannot be resolved.
    """
    spec = normalize_column_spec(raw_spec)
    column_name, field_name = split_column_alias(spec.name or column_key, column_key)
    type_token, length = split_type_length(spec.type, spec.length)
    handle = resolver.resolve(type_token)

    passthrough = {key: spec.get(key) for key in PASSTHROUGH_ATTRIBUTES if spec.has(key)}
    mapping = FieldMapping(
        field_name=field_name,
        column_name=column_name,
        type=handle.name,
        sql_type=handle.sql_type,
        length=length,
        id=spec.has("primary"),
        **passthrough,
    )
    return ColumnMapping(field=mapping, directive=generator_directive(spec))
