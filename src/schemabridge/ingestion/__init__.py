"""Ingestion of legacy schema files into in-memory schema documents."""

from schemabridge.ingestion.schema_loader import (
    iter_schema_files,
    load_from_config,
    load_schema_document,
)

__all__ = [
    "iter_schema_files",
    "load_from_config",
    "load_schema_document",
]
