"""TypedDict shapes of the legacy schema documents consumed by the converter."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypedDict

# ---------------------------------------------------------------------------
# Column specs
# ---------------------------------------------------------------------------


class SequenceSpecDict(TypedDict, total=False):
    """Structured ``sequence`` entry on a column."""

    name: str
    size: int
    value: int


class ColumnSpecDict(TypedDict, total=False):
    """Structured column entry; the string shorthand is only the ``type``."""

    type: str
    name: str
    length: int
    primary: bool
    autoincrement: bool
    sequence: str | SequenceSpecDict
    notnull: bool
    unique: bool
    version: bool
    precision: int
    scale: int
    options: dict[str, Any]


ColumnSpecInput = str | ColumnSpecDict


# ---------------------------------------------------------------------------
# Indexes and relations
# ---------------------------------------------------------------------------


class IndexSpecDict(TypedDict, total=False):
    """Named index entry; ``type: unique`` marks a unique constraint."""

    fields: list[str]
    type: str


RelationSpecDict = TypedDict(
    "RelationSpecDict",
    {
        "alias": str,
        "class": str,
        "local": str,
        "foreign": str,
        "foreignAlias": str,
        "type": str,
        "foreignType": str,
        "refClass": str,
        "onDelete": str,
    },
    total=False,
)


# ---------------------------------------------------------------------------
# Class and document level
# ---------------------------------------------------------------------------


class ClassSchemaDict(TypedDict, total=False):
    """One persistent class as described by the legacy format."""

    tableName: str
    columns: Mapping[str, ColumnSpecInput]
    indexes: Mapping[str, IndexSpecDict]
    relations: Mapping[str, RelationSpecDict]


SchemaDocument = Mapping[str, ClassSchemaDict]
