"""
Relation mapping: infer association shape and defaults from legacy relations.

Every relation entry is completed independently through ``RELATION_DEFAULTS``,
an ordered table of ``(key, rule)`` pairs. A rule only runs when its key is
missing from the entry and sees the values resolved so far, which is how the
default ``local`` column follows the resolved ``class``.

Shape selection
---------------
``refClass`` present
    many-to-many through the pivot entity, no join columns.
otherwise
    ``type`` defaults to ``one`` and ``foreignType`` to ``many``; one join
    column ``local -> foreign``. ``one/one`` is one-to-one, ``many/many`` is
    many-to-many, anything else one-to-many.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from schemabridge.core.types import RelationSpecDict
from schemabridge.mapping.naming import Tableizer, tableize
from schemabridge.models.metadata import AssociationKind, AssociationMapping, JoinColumn

log = logging.getLogger(__name__)

ONE = "one"
MANY = "many"
DEFAULT_TYPE = ONE
DEFAULT_FOREIGN_TYPE = MANY
DEFAULT_FOREIGN_COLUMN = "id"


@dataclass(frozen=True)
class RelationContext:
    """Inputs visible to a default rule while one relation entry is resolved."""

    key: str
    owning_class: str
    tableize: Tableizer
    resolved: Mapping[str, Any]


DefaultRule = Callable[[RelationContext], str]

RELATION_DEFAULTS: tuple[tuple[str, DefaultRule], ...] = (
    ("alias", lambda ctx: ctx.key),
    ("class", lambda ctx: ctx.key),
    ("local", lambda ctx: ctx.tableize(ctx.resolved["class"])),
    ("foreign", lambda ctx: DEFAULT_FOREIGN_COLUMN),
    ("foreignAlias", lambda ctx: ctx.owning_class),
)


@dataclass(frozen=True)
class ResolvedRelation:
    """Relation entry with every convention-based default applied."""

    name: str
    alias: str
    target_class: str
    local: str
    foreign: str
    foreign_alias: str
    type: str
    foreign_type: str
    ref_class: str | None = None
    on_delete: str | None = None


def apply_relation_defaults(
    key: str,
    spec: RelationSpecDict,
    owning_class: str,
    tableizer: Tableizer = tableize,
) -> dict[str, Any]:
    """
    Fill the missing convention-based keys of one relation entry.

    Returns
    -------
    dict[str, Any]
        A new mapping; ``spec`` itself is left untouched.
    """
    resolved: dict[str, Any] = dict(spec)
    for name, rule in RELATION_DEFAULTS:
        if resolved.get(name) is None:
            resolved[name] = rule(
                RelationContext(key=key, owning_class=owning_class, tableize=tableizer, resolved=resolved)
            )
    return resolved


def resolve_relation(
    key: str,
    spec: RelationSpecDict,
    owning_class: str,
    tableizer: Tableizer = tableize,
) -> ResolvedRelation:
    """
    Complete one relation entry, including its cardinalities.

    A ``refClass`` forces ``many``/``many`` whatever the entry declares.

    Returns
    -------
    ResolvedRelation
        Fully defaulted relation.
    """
    resolved = apply_relation_defaults(key, spec, owning_class, tableizer)
    ref_class = resolved.get("refClass")
    if ref_class is not None:
        relation_type, foreign_type = MANY, MANY
    else:
        relation_type = resolved.get("type")
        if relation_type is None:
            relation_type = DEFAULT_TYPE
        foreign_type = resolved.get("foreignType")
        if foreign_type is None:
            foreign_type = DEFAULT_FOREIGN_TYPE
    return ResolvedRelation(
        name=key,
        alias=resolved["alias"],
        target_class=resolved["class"],
        local=resolved["local"],
        foreign=resolved["foreign"],
        foreign_alias=resolved["foreignAlias"],
        type=relation_type,
        foreign_type=foreign_type,
        ref_class=ref_class,
        on_delete=resolved.get("onDelete"),
    )


def classify_association(relation_type: str, foreign_type: str) -> AssociationKind:
    """
    Choose the association shape from both sides' cardinality.

    Returns
    -------
    AssociationKind
        One-to-one, many-to-many, or one-to-many for every other combination.
    """
    if relation_type == ONE and foreign_type == ONE:
        return AssociationKind.ONE_TO_ONE
    if relation_type == MANY and foreign_type == MANY:
        return AssociationKind.MANY_TO_MANY
    return AssociationKind.ONE_TO_MANY


def join_columns_for(relation: ResolvedRelation) -> tuple[JoinColumn, ...]:
    """Join columns owned by the class; pivot relations have none."""
    if relation.ref_class is not None:
        return ()
    return (
        JoinColumn(
            name=relation.local,
            referenced_column_name=relation.foreign,
            on_delete=relation.on_delete,
        ),
    )


def map_relation(
    key: str,
    spec: RelationSpecDict,
    owning_class: str,
    tableizer: Tableizer = tableize,
) -> AssociationMapping:
    """
    Convert one legacy relation entry into an association mapping.

    Parameters
    ----------
    key
        Relation name inside the class's ``relations`` mapping.
    spec
        Raw relation entry.
    owning_class
        Name of the class declaring the relation.
    tableizer
        Naming convention used for the default local column.

    Returns
    -------
    AssociationMapping
        Association with its chosen shape and join columns.
    """
    relation = resolve_relation(key, spec, owning_class, tableizer)
    kind = classify_association(relation.type, relation.foreign_type)
    log.debug(
        "Relation %s.%s -> %s resolved as %s (%s/%s)",
        owning_class,
        relation.alias,
        relation.target_class,
        kind.value,
        relation.type,
        relation.foreign_type,
    )
    return AssociationMapping(
        kind=kind,
        field_name=relation.alias,
        target_entity=relation.target_class,
        mapped_by=relation.foreign_alias,
        join_columns=join_columns_for(relation),
    )
