"""Target type registry and the legacy type resolver."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

import sqlalchemy as sa
from sqlalchemy.types import TypeEngine

from schemabridge.services.errors import UnknownTypeError

log = logging.getLogger(__name__)

LEGACY_TYPE_ALIASES: Mapping[str, str] = {
    "clob": "text",
    "timestamp": "datetime",
    "enum": "string",
}

TypeFactory = Callable[[], TypeEngine[Any]]

DEFAULT_TYPES: Mapping[str, TypeFactory] = {
    "array": sa.PickleType,
    "simple_array": sa.Text,
    "json_array": sa.JSON,
    "json": sa.JSON,
    "object": sa.PickleType,
    "boolean": sa.Boolean,
    "integer": sa.Integer,
    "smallint": sa.SmallInteger,
    "bigint": sa.BigInteger,
    "string": sa.String,
    "text": sa.Text,
    "datetime": sa.DateTime,
    "datetimetz": lambda: sa.DateTime(timezone=True),
    "date": sa.Date,
    "time": sa.Time,
    "decimal": sa.Numeric,
    "float": sa.Float,
    "binary": sa.LargeBinary,
    "blob": sa.LargeBinary,
    "guid": sa.Uuid,
    "dateinterval": sa.Interval,
}


@dataclass(frozen=True)
class TypeHandle:
    """Registered logical type paired with its SQLAlchemy column type."""

    name: str
    sql_type: TypeEngine[Any]


class TypeRegistry:
    """
    Registry of logical type names understood by the target mapping.

    Each name maps to a factory producing the SQLAlchemy type used for columns
    of that logical type. A fresh type instance is created per lookup so field
    mappings never share mutable type objects.
    """

    def __init__(self, types: Mapping[str, TypeFactory] | None = None) -> None:
        self._types: dict[str, TypeFactory] = dict(DEFAULT_TYPES if types is None else types)

    def has_type(self, name: str) -> bool:
        """Return True when ``name`` is a registered logical type."""
        return name in self._types

    def get_type(self, name: str) -> TypeHandle:
        """
        Look up a registered logical type.

        Returns
        -------
        TypeHandle
            Handle carrying the logical name and a SQLAlchemy type instance.

        Raises
        ------
        UnknownTypeError
            If ``name`` is not registered.
        """
        factory = self._types.get(name)
        if factory is None:
            raise UnknownTypeError(name)
        return TypeHandle(name=name, sql_type=factory())

    def register(self, name: str, factory: TypeFactory, *, override: bool = False) -> None:
        """
        Add a logical type to the registry.

        Raises
        ------
        ValueError
            If ``name`` is already registered and ``override`` is False.
        """
        if name in self._types and not override:
            message = f"Type '{name}' is already registered"
            raise ValueError(message)
        self._types[name] = factory

    def names(self) -> Iterator[str]:
        """Yield registered type names in sorted order."""
        yield from sorted(self._types)


class TypeResolver:
    """Normalize raw legacy type tokens into registered logical types."""

    def __init__(
        self,
        registry: TypeRegistry | None = None,
        aliases: Mapping[str, str] | None = None,
    ) -> None:
        self.registry = registry if registry is not None else TypeRegistry()
        self.aliases: dict[str, str] = dict(LEGACY_TYPE_ALIASES if aliases is None else aliases)

    def normalize(self, token: str) -> str:
        """Lower-case ``token`` and substitute its current name if it is a legacy alias."""
        lowered = token.lower()
        return self.aliases.get(lowered, lowered)

    def resolve(self, token: str) -> TypeHandle:
        """
        Resolve a raw type token to a registered type.

        Returns
        -------
        TypeHandle
            Registered type for the normalized token.

        Raises
        ------
        UnknownTypeError
            If the normalized token is not a registered type.
        """
        name = self.normalize(token)
        if name != token.lower():
            log.debug("Mapped legacy type %s to %s", token, name)
        if not self.registry.has_type(name):
            raise UnknownTypeError(name)
        return self.registry.get_type(name)
