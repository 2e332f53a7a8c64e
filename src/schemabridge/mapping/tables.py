"""Resolve the physical table identifier of a class."""

from __future__ import annotations


def map_table_name(table_name: str | None) -> tuple[str | None, str | None]:
    """
    Split a possibly schema-qualified table name.

    ``"users"`` maps to ``("users", None)`` and ``"app.users"`` to
    ``("users", "app")``. Segments past the second are ignored. A missing or
    empty name returns ``(None, None)`` so the consumer's default naming
    applies.

    Returns
    -------
    tuple[str | None, str | None]
        Table name and schema qualifier.
    """
    if not table_name:
        return None, None
    segments = table_name.split(".")
    if len(segments) > 1:
        return segments[1], segments[0]
    return segments[0], None
