"""Relation defaulting and association shape selection."""

from __future__ import annotations

import itertools

import pytest

from schemabridge.mapping.relations import (
    RELATION_DEFAULTS,
    apply_relation_defaults,
    classify_association,
    map_relation,
    resolve_relation,
)
from schemabridge.models.metadata import AssociationKind, JoinColumn

EXPECTED_SHAPES = {
    ("one", "one"): AssociationKind.ONE_TO_ONE,
    ("many", "many"): AssociationKind.MANY_TO_MANY,
}


@pytest.mark.parametrize(
    ("relation_type", "foreign_type"),
    list(itertools.product(("one", "many", "other"), repeat=2)),
)
def test_classification_table(relation_type: str, foreign_type: str) -> None:
    """Only one/one and many/many escape the one-to-many fallback."""
    expected = EXPECTED_SHAPES.get((relation_type, foreign_type), AssociationKind.ONE_TO_MANY)
    result = classify_association(relation_type, foreign_type)
    if result is not expected:
        pytest.fail(f"{relation_type}/{foreign_type} classified as {result}, expected {expected}")


def test_defaults_table_order() -> None:
    """``class`` must resolve before ``local`` derives from it."""
    keys = [key for key, _ in RELATION_DEFAULTS]
    if keys != ["alias", "class", "local", "foreign", "foreignAlias"]:
        pytest.fail(f"Unexpected defaulting order: {keys}")


def test_defaults_from_key_and_owner() -> None:
    """An empty entry is completed from its key and the owning class."""
    resolved = apply_relation_defaults("BlogAuthor", {}, "Article")
    expected = {
        "alias": "BlogAuthor",
        "class": "BlogAuthor",
        "local": "blog_author",
        "foreign": "id",
        "foreignAlias": "Article",
    }
    if resolved != expected:
        pytest.fail(f"Unexpected defaults: {resolved}")


def test_defaults_do_not_mutate_or_leak() -> None:
    """Each entry is resolved from its own values only."""
    first = {"class": "User", "local": "owner_id"}
    apply_relation_defaults("owner", first, "Article")
    second = resolve_relation("editor", {}, "Article")
    if first != {"class": "User", "local": "owner_id"}:
        pytest.fail(f"Input entry was mutated: {first}")
    if second.local != "editor" or second.target_class != "editor":
        pytest.fail(f"Defaults leaked between entries: {second}")


def test_author_relation_defaults_to_one_to_many() -> None:
    """``{author: {class: User}}`` on Article is one-to-many via ``user`` -> ``id``."""
    mapping = map_relation("author", {"class": "User"}, "Article")
    if mapping.kind is not AssociationKind.ONE_TO_MANY:
        pytest.fail(f"Expected one-to-many, got {mapping.kind}")
    if (mapping.field_name, mapping.target_entity, mapping.mapped_by) != ("author", "User", "Article"):
        pytest.fail(f"Unexpected association: {mapping}")
    if mapping.join_columns != (JoinColumn(name="user", referenced_column_name="id"),):
        pytest.fail(f"Unexpected join columns: {mapping.join_columns}")


def test_explicit_fields_and_on_delete() -> None:
    """Declared values win over defaults and onDelete reaches the join column."""
    mapping = map_relation(
        "Profile",
        {
            "alias": "profile",
            "local": "profile_id",
            "foreign": "uid",
            "foreignAlias": "owner",
            "type": "one",
            "foreignType": "one",
            "onDelete": "CASCADE",
        },
        "User",
    )
    if mapping.kind is not AssociationKind.ONE_TO_ONE:
        pytest.fail(f"Expected one-to-one, got {mapping.kind}")
    expected = (JoinColumn(name="profile_id", referenced_column_name="uid", on_delete="CASCADE"),)
    if mapping.join_columns != expected:
        pytest.fail(f"Unexpected join columns: {mapping.join_columns}")
    if mapping.mapped_by != "owner":
        pytest.fail(f"Unexpected inverse side: {mapping.mapped_by}")


@pytest.mark.parametrize(
    "extra",
    [{}, {"type": "one", "foreignType": "one"}, {"local": "x", "foreign": "y", "onDelete": "SET NULL"}],
)
def test_ref_class_forces_many_to_many_without_join_columns(extra: dict[str, str]) -> None:
    """A pivot entity always yields many-to-many with no join columns."""
    mapping = map_relation("Tags", {"class": "Tag", "refClass": "ArticleTag", **extra}, "Article")
    if mapping.kind is not AssociationKind.MANY_TO_MANY:
        pytest.fail(f"Expected many-to-many, got {mapping.kind}")
    if mapping.join_columns:
        pytest.fail(f"Pivot relations should have no join columns: {mapping.join_columns}")


@pytest.mark.parametrize(
    ("spec", "expected"),
    [
        ({"type": "", "foreignType": "one"}, AssociationKind.ONE_TO_MANY),
        ({"type": False, "foreignType": "one"}, AssociationKind.ONE_TO_MANY),
        ({"type": "many", "foreignType": ""}, AssociationKind.ONE_TO_MANY),
        ({"type": None, "foreignType": "one"}, AssociationKind.ONE_TO_ONE),
        ({"type": "many", "foreignType": None}, AssociationKind.MANY_TO_MANY),
    ],
)
def test_cardinality_defaults_only_replace_null(spec: dict[str, object], expected: AssociationKind) -> None:
    """Declared empty or false cardinalities are kept rather than defaulted."""
    mapping = map_relation("User", spec, "Article")
    if mapping.kind is not expected:
        pytest.fail(f"Expected {expected} for {spec}, got {mapping.kind}")


def test_custom_tableizer_is_used() -> None:
    """The naming convention is injectable."""
    relation = resolve_relation("Owner", {}, "Car", tableizer=lambda name: f"{name.lower()}_fk")
    if relation.local != "owner_fk":
        pytest.fail(f"Custom tableizer ignored: {relation.local}")
