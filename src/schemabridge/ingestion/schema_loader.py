"""Load legacy YAML schema files into a single schema document."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path
from typing import Any

import yaml

from schemabridge.config.models import DEFAULT_SCHEMA_PATTERNS, LoaderConfig
from schemabridge.core.types import ClassSchemaDict
from schemabridge.services.errors import SchemaLoadError, problem

log = logging.getLogger(__name__)


def iter_schema_files(
    sources: Iterable[Path],
    patterns: Sequence[str] = DEFAULT_SCHEMA_PATTERNS,
) -> Iterator[Path]:
    """
    Expand sources into schema files.

    Files are yielded as given; directories yield their direct children that
    match any of ``patterns``, sorted by name.

    Raises
    ------
    SchemaLoadError
        If a source does not exist.
    """
    for source in sources:
        if source.is_dir():
            matches = {path for pattern in patterns for path in source.glob(pattern) if path.is_file()}
            if not matches:
                log.warning("No schema files matching %s in %s", ", ".join(patterns), source)
            yield from sorted(matches)
        elif source.is_file():
            yield source
        else:
            raise SchemaLoadError(
                problem(
                    code="loader.missing_source",
                    title="Schema source not found",
                    detail=f"{source} is neither a file nor a directory",
                    extras={"path": str(source)},
                )
            )


def _parse_schema_file(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SchemaLoadError(
            problem(
                code="loader.unreadable",
                title="Schema file could not be read",
                detail=f"{path}: {exc}",
                extras={"path": str(path)},
            )
        ) from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SchemaLoadError(
            problem(
                code="loader.invalid_yaml",
                title="Schema file is not valid YAML",
                detail=f"{path}: {exc}",
                extras={"path": str(path)},
            )
        ) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SchemaLoadError(
            problem(
                code="loader.invalid_document",
                title="Schema file is not a mapping",
                detail=f"{path} must map class names to class definitions, got {type(data).__name__}",
                extras={"path": str(path)},
            )
        )
    return data


def load_schema_document(
    sources: Iterable[Path],
    *,
    patterns: Sequence[str] = DEFAULT_SCHEMA_PATTERNS,
) -> dict[str, ClassSchemaDict]:
    """
    Parse and merge legacy schema files.

    Parameters
    ----------
    sources
        Schema files and/or directories of schema files.
    patterns
        Glob patterns used inside directories.

    Returns
    -------
    dict[str, ClassSchemaDict]
        Class name to class schema, in file then declaration order. A class
        defined in several files keeps the last definition.

    Raises
    ------
    SchemaLoadError
        If a source is missing or a file is unreadable or malformed.
    """
    document: dict[str, ClassSchemaDict] = {}
    file_count = 0
    for path in iter_schema_files(sources, patterns):
        file_count += 1
        for class_name, class_schema in _parse_schema_file(path).items():
            name = str(class_name)
            if name in document:
                log.warning("Class %s redefined in %s; keeping the later definition", name, path)
            document[name] = class_schema or {}
        log.debug("Loaded schema file %s", path)
    log.info("Loaded %d classes from %d schema files", len(document), file_count)
    return document


def load_from_config(cfg: LoaderConfig) -> dict[str, ClassSchemaDict]:
    """
    Load the schema document described by a loader configuration.

    Returns
    -------
    dict[str, ClassSchemaDict]
        Merged schema document.
    """
    return load_schema_document(cfg.sources, patterns=cfg.patterns)
