"""Classify legacy index declarations into plain indexes and unique constraints."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from schemabridge.core.types import IndexSpecDict

UNIQUE_INDEX_TYPE = "unique"


@dataclass(frozen=True)
class IndexMapping:
    """Index declarations of one class, split by kind and keyed by index name."""

    indexes: dict[str, tuple[str, ...]] = field(default_factory=dict)
    unique_constraints: dict[str, tuple[str, ...]] = field(default_factory=dict)


def map_indexes(indexes: Mapping[str, IndexSpecDict] | None) -> IndexMapping:
    """
    Map each named index to a unique constraint or a plain index.

    Returns
    -------
    IndexMapping
        Column lists grouped by kind.
    """
    result = IndexMapping()
    if not indexes:
        return result
    for name, index in indexes.items():
        bucket = result.unique_constraints if index.get("type") == UNIQUE_INDEX_TYPE else result.indexes
        bucket[name] = tuple(index["fields"])
    return result
