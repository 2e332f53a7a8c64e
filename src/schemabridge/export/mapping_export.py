"""YAML/JSON exporters for converted mapping metadata."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml

from schemabridge.config.models import ExportFormat
from schemabridge.models.metadata import (
    AssociationMapping,
    ClassMetadata,
    FieldMapping,
    TableDescriptor,
)

log = logging.getLogger(__name__)

_OPTIONAL_FIELD_ATTRIBUTES = ("length", "precision", "scale", "unique", "notnull", "version", "options")


def field_to_dict(mapping: FieldMapping) -> dict[str, Any]:
    """
    Serialize a field mapping, keeping only attributes declared on input.

    Returns
    -------
    dict[str, Any]
        Column name, type, optional attributes, and ``id`` when set.
    """
    payload: dict[str, Any] = {"column": mapping.column_name, "type": mapping.type}
    for attr in _OPTIONAL_FIELD_ATTRIBUTES:
        value = getattr(mapping, attr)
        if value is not None:
            payload[attr] = value
    if mapping.id:
        payload["id"] = True
    return payload


def association_to_dict(mapping: AssociationMapping) -> dict[str, Any]:
    """
    Serialize an association mapping.

    Returns
    -------
    dict[str, Any]
        Shape, target, inverse side and join columns.
    """
    return {
        "kind": mapping.kind.value,
        "target_entity": mapping.target_entity,
        "mapped_by": mapping.mapped_by,
        "join_columns": [
            {
                "name": column.name,
                "referenced_column_name": column.referenced_column_name,
                "on_delete": column.on_delete,
            }
            for column in mapping.join_columns
        ],
    }


def _table_to_dict(table: TableDescriptor) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    if table.name is not None:
        payload["name"] = table.name
    if table.schema is not None:
        payload["schema"] = table.schema
    if table.indexes:
        payload["indexes"] = {name: {"columns": list(cols)} for name, cols in table.indexes.items()}
    if table.unique_constraints:
        payload["unique_constraints"] = {
            name: {"columns": list(cols)} for name, cols in table.unique_constraints.items()
        }
    return payload


def metadata_to_dict(metadata: ClassMetadata) -> dict[str, Any]:
    """
    Serialize one class's metadata into plain Python structures.

    Returns
    -------
    dict[str, Any]
        JSON/YAML friendly mapping description.
    """
    payload: dict[str, Any] = {
        "table": _table_to_dict(metadata.table),
        "id_generator": metadata.generator_type.value,
    }
    if metadata.sequence is not None:
        sequence: dict[str, Any] = {"sequence_name": metadata.sequence.sequence_name}
        if metadata.sequence.allocation_size is not None:
            sequence["allocation_size"] = metadata.sequence.allocation_size
        if metadata.sequence.initial_value is not None:
            sequence["initial_value"] = metadata.sequence.initial_value
        payload["sequence"] = sequence
    payload["fields"] = {field.field_name: field_to_dict(field) for field in metadata.fields}
    if metadata.associations:
        payload["associations"] = {
            assoc.field_name: association_to_dict(assoc) for assoc in metadata.associations
        }
    return payload


def metadata_to_document(metadata: Iterable[ClassMetadata]) -> dict[str, dict[str, Any]]:
    """Key serialized metadata by class name, preserving conversion order."""
    return {item.name: metadata_to_dict(item) for item in metadata}


def dump_mappings(metadata: Iterable[ClassMetadata], fmt: ExportFormat = "yaml") -> str:
    """
    Render converted metadata as YAML or JSON text.

    Returns
    -------
    str
        Serialized document ending with a newline.

    Raises
    ------
    ValueError
        If ``fmt`` is not a supported export format.
    """
    document = metadata_to_document(metadata)
    if fmt == "yaml":
        return yaml.safe_dump(document, sort_keys=False, default_flow_style=False)
    if fmt == "json":
        return json.dumps(document, indent=2) + "\n"
    message = f"Unsupported export format: {fmt}"
    raise ValueError(message)


def write_mappings(metadata: Iterable[ClassMetadata], path: Path, fmt: ExportFormat = "yaml") -> Path:
    """
    Write converted metadata to ``path``, creating parent directories.

    Returns
    -------
    Path
        The written file.
    """
    items = list(metadata)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_mappings(items, fmt), encoding="utf8")
    log.info("Wrote %d class mappings to %s", len(items), path)
    return path
