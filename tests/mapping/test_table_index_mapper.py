"""Tests for table name splitting and index classification."""

from __future__ import annotations

import pytest

from schemabridge.mapping.indexes import map_indexes
from schemabridge.mapping.tables import map_table_name


@pytest.mark.parametrize(
    ("table_name", "expected"),
    [
        ("schema.users", ("users", "schema")),
        ("users", ("users", None)),
        ("", (None, None)),
        (None, (None, None)),
        ("a.b.c", ("b", "a")),
    ],
)
def test_map_table_name(table_name: str | None, expected: tuple[str | None, str | None]) -> None:
    """Qualified names split into schema and table."""
    result = map_table_name(table_name)
    if result != expected:
        pytest.fail(f"{table_name!r} mapped to {result}, expected {expected}")


def test_indexes_split_by_type() -> None:
    """``type: unique`` entries become unique constraints, the rest plain indexes."""
    result = map_indexes(
        {
            "name_idx": {"fields": ["last_name", "first_name"]},
            "email_unique": {"fields": ["email"], "type": "unique"},
            "fulltext_idx": {"fields": ["bio"], "type": "fulltext"},
        }
    )
    if result.indexes != {"name_idx": ("last_name", "first_name"), "fulltext_idx": ("bio",)}:
        pytest.fail(f"Unexpected plain indexes: {result.indexes}")
    if result.unique_constraints != {"email_unique": ("email",)}:
        pytest.fail(f"Unexpected unique constraints: {result.unique_constraints}")


def test_missing_indexes_map_to_empty() -> None:
    """Absent index sections produce empty buckets."""
    result = map_indexes(None)
    if result.indexes or result.unique_constraints:
        pytest.fail(f"Expected no indexes, got {result}")
